from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Dict, List, Literal, Mapping, Optional, Protocol

from salon_admin.backend.services.actions import ActionKind, missing_fields


_DEFAULT_MAX_TURNS = 80

SessionState = Literal["awaiting_intent", "collecting"]


def _now() -> datetime:
	return datetime.now(timezone.utc)


def _now_iso() -> str:
	return _now().isoformat().replace("+00:00", "Z")


@dataclass
class ChatTurn:
	role: Literal["user", "assistant"]
	text: str
	created_at: str


@dataclass
class PendingAction:
	kind: ActionKind
	entities: Dict[str, str] = field(default_factory=dict)


@dataclass
class ConversationSession:
	session_id: str
	updated_at: str
	turns: List[ChatTurn] = field(default_factory=list)
	pending: Optional[PendingAction] = None
	max_turns: int = _DEFAULT_MAX_TURNS
	lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

	@property
	def state(self) -> SessionState:
		return "collecting" if self.pending is not None else "awaiting_intent"

	def append_message(self, role: str, text: str) -> None:
		cleaned = text.strip()
		if not cleaned:
			return
		role_clean = "assistant" if role == "assistant" else "user"
		self.turns.append(ChatTurn(role=role_clean, text=cleaned, created_at=_now_iso()))
		self.turns = self.turns[-self.max_turns :]
		self.updated_at = _now_iso()

	def recent(self, limit: int) -> List[ChatTurn]:
		if limit <= 0:
			return []
		return list(self.turns[-limit:])

	def start_pending(self, kind: ActionKind, entities: Mapping[str, str]) -> PendingAction:
		self.pending = PendingAction(kind=kind)
		self.merge_entities(entities)
		return self.pending

	def merge_entities(self, new_entities: Mapping[str, Optional[str]]) -> Dict[str, str]:
		"""Fold new values into the pending action.

		Only non-empty values overwrite; fields collected on earlier turns are
		never cleared by a later turn.
		"""
		if self.pending is None:
			return {}
		for name, value in new_entities.items():
			if value is None:
				continue
			cleaned = str(value).strip()
			if cleaned:
				self.pending.entities[name] = cleaned
		self.updated_at = _now_iso()
		return dict(self.pending.entities)

	def is_complete(self, kind: Optional[str] = None) -> bool:
		if self.pending is None:
			return False
		return not missing_fields(kind or self.pending.kind, self.pending.entities)

	def missing(self) -> List[str]:
		if self.pending is None:
			return []
		return missing_fields(self.pending.kind, self.pending.entities)

	def clear_pending(self) -> None:
		self.pending = None
		self.updated_at = _now_iso()

	def as_dict(self) -> Dict[str, object]:
		return {
			"conversationId": self.session_id,
			"state": self.state,
			"updatedAt": self.updated_at,
			"pendingAction": (
				{"type": self.pending.kind, "entities": dict(self.pending.entities), "missing": self.missing()}
				if self.pending
				else None
			),
			"messages": [
				{"role": turn.role, "text": turn.text, "timestamp": turn.created_at} for turn in self.turns
			],
		}


class SessionStore(Protocol):
	def ensure(self, session_id: str) -> ConversationSession: ...

	def get(self, session_id: str) -> Optional[ConversationSession]: ...

	def delete(self, session_id: str) -> bool: ...


class InMemorySessionStore:
	"""Sessions keyed by conversation id, held for the life of the process.

	``ttl_seconds`` of zero keeps sessions until restart; a positive value
	evicts sessions idle for longer than that.
	"""

	def __init__(self, *, ttl_seconds: int = 0, max_turns: int = _DEFAULT_MAX_TURNS):
		self._ttl_seconds = ttl_seconds
		self._max_turns = max_turns
		self._sessions: Dict[str, ConversationSession] = {}
		self._lock = Lock()

	def _evict_expired_locked(self) -> None:
		if self._ttl_seconds <= 0:
			return
		now = _now()
		ttl = timedelta(seconds=self._ttl_seconds)
		expired: List[str] = []
		for session_id, session in self._sessions.items():
			try:
				updated = datetime.fromisoformat(session.updated_at.replace("Z", "+00:00"))
			except ValueError:
				expired.append(session_id)
				continue
			if now - updated > ttl:
				expired.append(session_id)
		for session_id in expired:
			self._sessions.pop(session_id, None)

	def ensure(self, session_id: str) -> ConversationSession:
		with self._lock:
			self._evict_expired_locked()
			session = self._sessions.get(session_id)
			if session is None:
				session = ConversationSession(
					session_id=session_id,
					updated_at=_now_iso(),
					max_turns=self._max_turns,
				)
				self._sessions[session_id] = session
			return session

	def get(self, session_id: str) -> Optional[ConversationSession]:
		with self._lock:
			self._evict_expired_locked()
			return self._sessions.get(session_id)

	def delete(self, session_id: str) -> bool:
		with self._lock:
			return self._sessions.pop(session_id, None) is not None
