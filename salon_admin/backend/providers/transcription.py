from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx
from openai import AsyncOpenAI

from salon_admin.backend.providers.base import BaseAdapter, MalformedResponseError, require_text
from salon_admin.backend.providers.chat import OpenAIClientFactory
from salon_admin.backend.providers.types import FailureKind, TranscriptionRequest

ASSEMBLYAI_BASE_URL = "https://api.assemblyai.com/v2"
SARVAM_STT_URL = "https://api.sarvam.ai/speech-to-text"
ELEVENLABS_STT_URL = "https://api.elevenlabs.io/v1/speech-to-text"


class _TranscriptionAdapter(BaseAdapter):
	"""Speech-to-text adapter with a wall-clock cap on the whole call.

	The cap is enforced on our side only; the provider is not told to stop.
	"""

	capability = "transcription"

	def __init__(
		self,
		*,
		api_key: str,
		timeout_s: float = 30.0,
		wall_clock_s: float = 30.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		super().__init__(api_key=api_key, timeout_s=timeout_s)
		self._wall_clock_s = wall_clock_s
		self._transport = transport

	def _http(self) -> httpx.AsyncClient:
		return httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport)

	async def _call(self, request: TranscriptionRequest) -> str:
		text = await asyncio.wait_for(self._transcribe(request), timeout=self._wall_clock_s)
		return require_text(text, self.name)

	async def _transcribe(self, request: TranscriptionRequest) -> str:
		raise NotImplementedError


class WhisperTranscriptionAdapter(_TranscriptionAdapter):
	name = "whisper"
	label = "OpenAI Whisper"

	def __init__(
		self,
		*,
		api_key: str,
		model: str,
		timeout_s: float = 30.0,
		wall_clock_s: float = 30.0,
		client_factory: OpenAIClientFactory = AsyncOpenAI,
	):
		super().__init__(api_key=api_key, timeout_s=timeout_s, wall_clock_s=wall_clock_s)
		self._model = model
		self._client_factory = client_factory
		self._client: Any = None

	async def _transcribe(self, request: TranscriptionRequest) -> str:
		if self._client is None:
			self._client = self._client_factory(api_key=self._api_key, timeout=self._timeout_s, max_retries=0)
		result = await self._client.audio.transcriptions.create(
			model=self._model,
			file=(request.filename, request.audio, request.content_type),
		)
		return getattr(result, "text", "")


class AssemblyAITranscriptionAdapter(_TranscriptionAdapter):
	name = "assemblyai"
	label = "AssemblyAI"
	poll_interval_s = 1.0

	async def _transcribe(self, request: TranscriptionRequest) -> str:
		headers = {"authorization": self._api_key}
		async with self._http() as client:
			upload = await client.post(f"{ASSEMBLYAI_BASE_URL}/upload", headers=headers, content=request.audio)
			upload.raise_for_status()
			audio_url = upload.json()["upload_url"]

			created = await client.post(
				f"{ASSEMBLYAI_BASE_URL}/transcript",
				headers=headers,
				json={"audio_url": audio_url},
			)
			created.raise_for_status()
			transcript: Dict[str, Any] = created.json()
			transcript_id = transcript["id"]

			while transcript.get("status") not in {"completed", "error"}:
				await asyncio.sleep(self.poll_interval_s)
				polled = await client.get(f"{ASSEMBLYAI_BASE_URL}/transcript/{transcript_id}", headers=headers)
				polled.raise_for_status()
				transcript = polled.json()

		if transcript["status"] == "error":
			raise MalformedResponseError(transcript.get("error") or "Transcription failed")
		return transcript.get("text") or ""


class SarvamTranscriptionAdapter(_TranscriptionAdapter):
	name = "sarvam-stt"
	label = "Sarvam AI STT"
	language_code = "en-IN"
	model = "saarika:v2"

	async def _transcribe(self, request: TranscriptionRequest) -> str:
		async with self._http() as client:
			response = await client.post(
				SARVAM_STT_URL,
				headers={"api-subscription-key": self._api_key},
				files={"file": (request.filename, request.audio, request.content_type)},
				data={"language_code": self.language_code, "model": self.model},
			)
			response.raise_for_status()
			return response.json().get("transcript") or ""


class ElevenLabsTranscriptionAdapter(_TranscriptionAdapter):
	name = "elevenlabs-stt"
	label = "ElevenLabs STT"
	# ElevenLabs answers 403 when the character quota is exhausted.
	status_overrides: Dict[int, FailureKind] = {403: "quota_exceeded"}

	async def _transcribe(self, request: TranscriptionRequest) -> str:
		async with self._http() as client:
			response = await client.post(
				ELEVENLABS_STT_URL,
				headers={"xi-api-key": self._api_key},
				files={"file": (request.filename, request.audio, request.content_type)},
				data={"model_id": "scribe_v1"},
			)
			response.raise_for_status()
			return response.json().get("text") or ""
