from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Protocol, Union, runtime_checkable


Capability = Literal["conversation", "transcription", "entity_extraction"]
FailureKind = Literal["quota_exceeded", "auth_error", "transient_network", "malformed_response"]

# Failure kinds that take a provider out of rotation for the rest of the process.
DISABLING_FAILURES = frozenset({"quota_exceeded", "auth_error"})


@dataclass
class ChatMessage:
	role: Literal["user", "assistant"]
	text: str


@dataclass
class ConversationRequest:
	message: str
	system_prompt: str
	history: List[ChatMessage] = field(default_factory=list)


@dataclass
class TranscriptionRequest:
	audio: bytes
	content_type: str = "audio/webm"
	filename: str = "recording.webm"


@dataclass
class ExtractionRequest:
	text: str


ProviderRequest = Union[ConversationRequest, TranscriptionRequest, ExtractionRequest]


@dataclass
class ExtractionPayload:
	intent: str
	confidence: float
	entities: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class ProviderSuccess:
	provider: str
	payload: Any
	ok: Literal[True] = True


@dataclass
class ProviderFailure:
	provider: str
	kind: FailureKind
	message: str
	ok: Literal[False] = False

	def describe(self) -> str:
		return f"{self.provider}: {self.kind} ({self.message})"


ProviderResult = Union[ProviderSuccess, ProviderFailure]


@runtime_checkable
class ProviderAdapter(Protocol):
	name: str
	label: str
	capability: Capability

	def is_configured(self) -> bool: ...

	async def invoke(self, request: Any) -> ProviderResult: ...
