from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
from openai import AsyncOpenAI

from salon_admin.backend.providers.base import (
	BaseAdapter,
	CredentialsRejectedError,
	MalformedResponseError,
	require_text,
)
from salon_admin.backend.providers.types import ConversationRequest

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

OpenAIClientFactory = Callable[..., Any]


def _openai_messages(request: ConversationRequest) -> List[Dict[str, str]]:
	messages = [{"role": "system", "content": request.system_prompt}]
	for turn in request.history:
		messages.append({"role": turn.role, "content": turn.text})
	messages.append({"role": "user", "content": request.message})
	return messages


def _completion_text(completion: Any, provider: str) -> str:
	try:
		content = completion.choices[0].message.content
	except (AttributeError, IndexError) as exc:
		raise MalformedResponseError(f"{provider} returned no choices") from exc
	return require_text(content, provider)


class _OpenAICompatibleChatAdapter(BaseAdapter):
	capability = "conversation"
	base_url: Optional[str] = None

	def __init__(
		self,
		*,
		api_key: str,
		model: str,
		timeout_s: float = 30.0,
		client_factory: OpenAIClientFactory = AsyncOpenAI,
	):
		super().__init__(api_key=api_key, timeout_s=timeout_s)
		self._model = model
		self._client_factory = client_factory
		self._client: Any = None

	def _get_client(self) -> Any:
		if self._client is None:
			kwargs: Dict[str, Any] = {"api_key": self._api_key, "timeout": self._timeout_s, "max_retries": 0}
			if self.base_url:
				kwargs["base_url"] = self.base_url
			self._client = self._client_factory(**kwargs)
		return self._client

	async def _call(self, request: ConversationRequest) -> str:
		completion = await self._get_client().chat.completions.create(
			model=self._model,
			messages=_openai_messages(request),
			temperature=0.2,
		)
		return _completion_text(completion, self.name)


class GroqChatAdapter(_OpenAICompatibleChatAdapter):
	name = "groq"
	label = "Groq AI"
	base_url = GROQ_BASE_URL


class OpenAIChatAdapter(_OpenAICompatibleChatAdapter):
	name = "openai-gpt"
	label = "OpenAI GPT"


class GeminiChatAdapter(BaseAdapter):
	name = "gemini"
	label = "Gemini AI"
	capability = "conversation"

	def __init__(
		self,
		*,
		api_key: str,
		model: str,
		timeout_s: float = 30.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		super().__init__(api_key=api_key, timeout_s=timeout_s)
		self._model = model
		self._transport = transport

	def _body(self, request: ConversationRequest) -> Dict[str, Any]:
		contents = []
		for turn in request.history:
			role = "model" if turn.role == "assistant" else "user"
			contents.append({"role": role, "parts": [{"text": turn.text}]})
		contents.append({"role": "user", "parts": [{"text": request.message}]})
		return {
			"systemInstruction": {"parts": [{"text": request.system_prompt}]},
			"contents": contents,
			"generationConfig": {"temperature": 0.2},
		}

	async def _call(self, request: ConversationRequest) -> str:
		url = f"{GEMINI_BASE_URL}/models/{self._model}:generateContent"
		async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
			response = await client.post(url, headers={"x-goog-api-key": self._api_key}, json=self._body(request))
			if response.status_code == 400 and "API_KEY_INVALID" in response.text:
				raise CredentialsRejectedError("gemini rejected the API key (API_KEY_INVALID)")
			response.raise_for_status()
			data = response.json()
		candidates = data.get("candidates") or []
		if not candidates:
			raise MalformedResponseError("gemini returned no candidates")
		parts = (candidates[0].get("content") or {}).get("parts") or []
		text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
		return require_text(text, self.name)
