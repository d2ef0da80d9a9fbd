"""Environment-driven settings for the admin assistant.

Values are read when :func:`load_settings` is called so tests can patch the
environment per case. A ``.env`` file in the working directory is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from salon_admin.backend import constants


def _str_env(name: str, default: str = "") -> str:
	return os.getenv(name, default).strip() or default


def _int_env(name: str, default: int, minimum: int = 0) -> int:
	raw = os.getenv(name, "").strip()
	if not raw:
		return default
	try:
		value = int(raw)
	except ValueError:
		raise ValueError(f"Invalid integer for {name}: {raw!r}") from None
	if value < minimum:
		raise ValueError(f"{name} must be >= {minimum}, got {value}")
	return value


def _float_env(name: str, default: float) -> float:
	raw = os.getenv(name, "").strip()
	if not raw:
		return default
	try:
		value = float(raw)
	except ValueError:
		raise ValueError(f"Invalid float for {name}: {raw!r}") from None
	if value <= 0:
		raise ValueError(f"{name} must be greater than zero, got {value}")
	return value


@dataclass(frozen=True)
class ProviderKeys:
	groq: str = ""
	gemini: str = ""
	openai: str = ""
	assemblyai: str = ""
	sarvam: str = ""
	elevenlabs: str = ""
	wit: str = ""
	huggingface: str = ""


@dataclass(frozen=True)
class ModelSettings:
	groq_model: str = "llama-3.3-70b-versatile"
	gemini_model: str = "gemini-1.5-flash"
	openai_chat_model: str = "gpt-4o-mini"
	openai_transcription_model: str = "whisper-1"
	hf_classification_model: str = "facebook/bart-large-mnli"
	hf_ner_model: str = "dbmdz/bert-large-cased-finetuned-conll03-english"


@dataclass(frozen=True)
class Settings:
	keys: ProviderKeys
	models: ModelSettings
	provider_timeout_s: float = 30.0
	transcription_timeout_s: float = 30.0
	history_turns: int = 12
	session_max_turns: int = 80
	session_ttl_s: int = 0
	db_path: str = constants.DEFAULT_DB_PATH
	log_level: str = "INFO"


def load_settings() -> Settings:
	load_dotenv()
	keys = ProviderKeys(
		groq=_str_env("GROQ_API_KEY"),
		gemini=_str_env("GEMINI_API_KEY"),
		openai=_str_env("OPENAI_API_KEY"),
		assemblyai=_str_env("ASSEMBLYAI_API_KEY"),
		sarvam=_str_env("SARVAM_API_KEY"),
		elevenlabs=_str_env("ELEVENLABS_API_KEY"),
		wit=_str_env("WIT_AI_TOKEN"),
		huggingface=_str_env("HF_API_TOKEN"),
	)
	defaults = ModelSettings()
	models = ModelSettings(
		groq_model=_str_env("GROQ_MODEL", defaults.groq_model),
		gemini_model=_str_env("GEMINI_MODEL", defaults.gemini_model),
		openai_chat_model=_str_env("OPENAI_CHAT_MODEL", defaults.openai_chat_model),
		openai_transcription_model=_str_env("OPENAI_TRANSCRIPTION_MODEL", defaults.openai_transcription_model),
		hf_classification_model=_str_env("HF_CLASSIFICATION_MODEL", defaults.hf_classification_model),
		hf_ner_model=_str_env("HF_NER_MODEL", defaults.hf_ner_model),
	)
	return Settings(
		keys=keys,
		models=models,
		provider_timeout_s=_float_env("PROVIDER_TIMEOUT_S", 30.0),
		transcription_timeout_s=_float_env("TRANSCRIPTION_TIMEOUT_S", 30.0),
		history_turns=_int_env("ASSISTANT_HISTORY_TURNS", 12, minimum=1),
		session_max_turns=_int_env("ASSISTANT_SESSION_MAX_TURNS", 80, minimum=10),
		session_ttl_s=_int_env("ASSISTANT_SESSION_TTL_S", 0, minimum=0),
		db_path=_str_env("SALON_DB_PATH", constants.DEFAULT_DB_PATH),
		log_level=_str_env("LOG_LEVEL", "INFO"),
	)
