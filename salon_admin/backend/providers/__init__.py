from salon_admin.backend.providers.registry import AdapterChains, build_default_adapters
from salon_admin.backend.providers.types import (
	ChatMessage,
	ConversationRequest,
	ExtractionPayload,
	ExtractionRequest,
	ProviderAdapter,
	ProviderFailure,
	ProviderSuccess,
	TranscriptionRequest,
)

__all__ = [
	"AdapterChains",
	"ChatMessage",
	"ConversationRequest",
	"ExtractionPayload",
	"ExtractionRequest",
	"ProviderAdapter",
	"ProviderFailure",
	"ProviderSuccess",
	"TranscriptionRequest",
	"build_default_adapters",
]
