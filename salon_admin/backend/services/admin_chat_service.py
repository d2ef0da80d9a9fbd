from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from salon_admin.backend import constants
from salon_admin.backend.providers.types import ChatMessage, ConversationRequest
from salon_admin.backend.services.action_executor import ActionExecutor
from salon_admin.backend.services.actions import follow_up_questions, is_iso_date, resolve_date
from salon_admin.backend.services.chat_session_service import ConversationSession, SessionStore
from salon_admin.backend.services.fallback_orchestrator import ChainFailure, FallbackOrchestrator
from salon_admin.backend.services.response_parser import parse_reply

logger = logging.getLogger(__name__)

ASSISTANT_UNAVAILABLE_MESSAGE = (
	"The assistant is unavailable right now because none of the language providers responded. "
	"Please try again in a moment."
)
_DEFAULT_CHAT_REPLY = "How can I help you manage the salon today?"

_SYSTEM_PROMPT = """
You are the admin assistant of a salon chain. Today is {today}.
Classify every admin message into one intent and extract its entities.
Intents and their entities:
- ADD_EMPLOYEE: name, role, phone, email
- GET_REVENUE: date (YYYY-MM-DD)
- REASSIGN_APPOINTMENTS: employeeName, date (YYYY-MM-DD)
- ASSIGN_BOOKING: bookingId, stylistName
- CANCEL_BOOKING: bookingId
- CHAT: anything else (no entities)
Only include entities the admin actually stated. Never invent values.
Reply with one JSON object and nothing else:
{{"intent": "...", "entities": {{...}}, "response": "short natural reply"}}
""".strip()

_PENDING_PROMPT = """
An unfinished {kind} action is in progress.
Already collected: {collected}.
Still missing: {missing}.
Treat the admin's next message as supplying the missing values and return them as entities of {kind}.
""".strip()


@dataclass
class ChatTurnResult:
	conversation_id: str
	message: str
	action: Dict[str, Any]
	action_result: Optional[Dict[str, Any]] = None
	follow_up_questions: List[str] = field(default_factory=list)
	requires_follow_up: bool = False
	provider: Optional[str] = None
	diagnostics: List[Dict[str, str]] = field(default_factory=list)

	def as_payload(self) -> Dict[str, Any]:
		payload: Dict[str, Any] = {
			"conversationId": self.conversation_id,
			"message": self.message,
			"action": self.action,
			"followUpQuestions": self.follow_up_questions,
			"requiresFollowUp": self.requires_follow_up,
			"provider": self.provider,
		}
		if self.action_result is not None:
			payload["actionResult"] = self.action_result
		if self.diagnostics:
			payload["diagnostics"] = self.diagnostics
		return payload


def _action_payload(kind: str, entities: Dict[str, str], missing: List[str]) -> Dict[str, Any]:
	return {
		"type": kind,
		"entities": dict(entities),
		"requiresFollowUp": bool(missing),
		"missing": list(missing),
	}


def _prepare_entities(entities: Dict[str, str], today: date) -> Dict[str, str]:
	prepared = dict(entities)
	if "date" not in prepared:
		return prepared
	resolved = resolve_date(prepared["date"], today)
	if is_iso_date(resolved):
		prepared["date"] = resolved
	else:
		logger.info("Dropping unparseable date value %r", prepared["date"])
		prepared.pop("date")
	return prepared


class AdminChatService:
	"""One admin chat turn: provider chain, parsing, slot collection, execution."""

	def __init__(
		self,
		*,
		orchestrator: FallbackOrchestrator,
		sessions: SessionStore,
		executor: ActionExecutor,
		history_turns: int = 12,
		today: Callable[[], date] = date.today,
	):
		self._orchestrator = orchestrator
		self._sessions = sessions
		self._executor = executor
		self._history_turns = history_turns
		self._today = today

	def _system_prompt(self, session: ConversationSession, today: date) -> str:
		prompt = _SYSTEM_PROMPT.format(today=today.isoformat())
		pending = session.pending
		if pending is None:
			return prompt
		collected = ", ".join(f"{k}={v}" for k, v in pending.entities.items()) or "nothing yet"
		pending_text = _PENDING_PROMPT.format(
			kind=pending.kind,
			collected=collected,
			missing=", ".join(session.missing()),
		)
		return f"{prompt}\n\n{pending_text}"

	async def handle_message(self, message: str, conversation_id: Optional[str] = None) -> ChatTurnResult:
		session_id = (conversation_id or "").strip() or constants.DEFAULT_SESSION_ID
		session = self._sessions.ensure(session_id)
		async with session.lock:
			return await self._handle_locked(session, message)

	async def _handle_locked(self, session: ConversationSession, message: str) -> ChatTurnResult:
		today = self._today()
		request = ConversationRequest(
			message=message,
			system_prompt=self._system_prompt(session, today),
			history=[ChatMessage(role=turn.role, text=turn.text) for turn in session.recent(self._history_turns)],
		)
		session.append_message("user", message)

		outcome = await self._orchestrator.run("conversation", request)
		if isinstance(outcome, ChainFailure):
			return self._unavailable_turn(session, outcome)

		parsed = parse_reply(outcome.payload)
		entities = _prepare_entities(parsed.entities, today)

		if session.pending is None:
			if parsed.intent == "CHAT":
				reply = parsed.reply or (_DEFAULT_CHAT_REPLY if parsed.structured else str(outcome.payload).strip())
				session.append_message("assistant", reply)
				return ChatTurnResult(
					conversation_id=session.session_id,
					message=reply,
					action=_action_payload("CHAT", {}, []),
					provider=outcome.provider,
				)
			session.start_pending(parsed.intent, entities)
		else:
			session.merge_entities(entities)

		pending = session.pending
		if pending is None:
			raise RuntimeError(f"Session {session.session_id} has no pending action to continue")
		if not session.is_complete():
			missing = session.missing()
			questions = follow_up_questions(missing)
			reply = parsed.reply or questions[0]
			session.append_message("assistant", reply)
			logger.info("Session %s collecting %s, missing %s", session.session_id, pending.kind, missing)
			return ChatTurnResult(
				conversation_id=session.session_id,
				message=reply,
				action=_action_payload(pending.kind, pending.entities, missing),
				follow_up_questions=questions,
				requires_follow_up=True,
				provider=outcome.provider,
			)

		kind = pending.kind
		collected = dict(pending.entities)
		session.clear_pending()
		executed = await self._executor.execute(kind, collected, parsed.reply)
		session.append_message("assistant", executed.message)
		logger.info("Session %s executed %s (success=%s)", session.session_id, kind, executed.success)
		return ChatTurnResult(
			conversation_id=session.session_id,
			message=executed.message,
			action=_action_payload(kind, collected, []),
			action_result=executed.result(),
			provider=outcome.provider,
		)

	def _unavailable_turn(self, session: ConversationSession, failure: ChainFailure) -> ChatTurnResult:
		session.append_message("assistant", ASSISTANT_UNAVAILABLE_MESSAGE)
		pending = session.pending
		if pending is not None:
			missing = session.missing()
			action = _action_payload(pending.kind, pending.entities, missing)
		else:
			missing = []
			action = _action_payload("CHAT", {}, [])
		return ChatTurnResult(
			conversation_id=session.session_id,
			message=ASSISTANT_UNAVAILABLE_MESSAGE,
			action=action,
			follow_up_questions=follow_up_questions(missing),
			requires_follow_up=bool(missing),
			diagnostics=failure.diagnostics(),
		)

	def history(self, conversation_id: str) -> Optional[Dict[str, object]]:
		session = self._sessions.get(conversation_id)
		return session.as_dict() if session is not None else None

	def clear(self, conversation_id: str) -> bool:
		return self._sessions.delete(conversation_id)
