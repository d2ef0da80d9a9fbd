from __future__ import annotations

from typing import Dict, List, Optional

from salon_admin.backend.providers.types import ExtractionPayload, ExtractionRequest, TranscriptionRequest
from salon_admin.backend.services.actions import normalize_intent
from salon_admin.backend.services.fallback_orchestrator import ChainFailure, FallbackOrchestrator


class AssistantServiceError(Exception):
	def __init__(self, *, status_code: int, code: str, message: str, evidence: Optional[List[str]] = None):
		super().__init__(message)
		self.status_code = status_code
		self.code = code
		self.message = message
		self.evidence = evidence or []


def _chain_error(failure: ChainFailure, code: str) -> AssistantServiceError:
	return AssistantServiceError(
		status_code=503,
		code=code,
		message=failure.describe(),
		evidence=[f"{item['provider']}: {item['kind']} ({item['message']})" for item in failure.diagnostics()],
	)


async def analyze_text(orchestrator: FallbackOrchestrator, text: str) -> Dict[str, object]:
	"""Classify a message with the entity-extraction chain."""
	outcome = await orchestrator.run("entity_extraction", ExtractionRequest(text=text))
	if isinstance(outcome, ChainFailure):
		raise _chain_error(outcome, "extraction_unavailable")
	payload: ExtractionPayload = outcome.payload
	return {
		"intent": normalize_intent(payload.intent),
		"rawIntent": payload.intent,
		"confidence": payload.confidence,
		"entities": payload.entities,
		"provider": outcome.provider,
	}


async def transcribe_audio(
	orchestrator: FallbackOrchestrator,
	audio: bytes,
	*,
	content_type: str = "audio/webm",
	filename: str = "recording.webm",
) -> Dict[str, object]:
	if not audio:
		raise AssistantServiceError(status_code=400, code="empty_audio", message="No audio data received.")
	outcome = await orchestrator.run(
		"transcription",
		TranscriptionRequest(audio=audio, content_type=content_type, filename=filename),
	)
	if isinstance(outcome, ChainFailure):
		raise _chain_error(outcome, "transcription_unavailable")
	return {"text": outcome.payload, "provider": outcome.provider}
