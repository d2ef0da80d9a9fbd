from __future__ import annotations

from typing import Dict, List

from salon_admin.backend.config import Settings
from salon_admin.backend.providers.chat import GeminiChatAdapter, GroqChatAdapter, OpenAIChatAdapter
from salon_admin.backend.providers.extraction import HuggingFaceExtractionAdapter, WitExtractionAdapter
from salon_admin.backend.providers.transcription import (
	AssemblyAITranscriptionAdapter,
	ElevenLabsTranscriptionAdapter,
	SarvamTranscriptionAdapter,
	WhisperTranscriptionAdapter,
)
from salon_admin.backend.providers.types import Capability, ProviderAdapter


AdapterChains = Dict[Capability, List[ProviderAdapter]]


def build_default_adapters(settings: Settings) -> AdapterChains:
	"""Adapters per capability, in the fixed priority order used for fallback."""
	keys = settings.keys
	models = settings.models
	timeout = settings.provider_timeout_s
	cap = settings.transcription_timeout_s
	return {
		"conversation": [
			GroqChatAdapter(api_key=keys.groq, model=models.groq_model, timeout_s=timeout),
			GeminiChatAdapter(api_key=keys.gemini, model=models.gemini_model, timeout_s=timeout),
			OpenAIChatAdapter(api_key=keys.openai, model=models.openai_chat_model, timeout_s=timeout),
		],
		"transcription": [
			WhisperTranscriptionAdapter(
				api_key=keys.openai,
				model=models.openai_transcription_model,
				timeout_s=timeout,
				wall_clock_s=cap,
			),
			AssemblyAITranscriptionAdapter(api_key=keys.assemblyai, timeout_s=timeout, wall_clock_s=cap),
			SarvamTranscriptionAdapter(api_key=keys.sarvam, timeout_s=timeout, wall_clock_s=cap),
			ElevenLabsTranscriptionAdapter(api_key=keys.elevenlabs, timeout_s=timeout, wall_clock_s=cap),
		],
		"entity_extraction": [
			WitExtractionAdapter(api_key=keys.wit, timeout_s=timeout),
			HuggingFaceExtractionAdapter(
				api_key=keys.huggingface,
				classification_model=models.hf_classification_model,
				ner_model=models.hf_ner_model,
				timeout_s=timeout,
			),
		],
	}
