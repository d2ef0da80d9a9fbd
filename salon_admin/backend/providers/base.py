from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar, Dict

import httpx
import openai

from salon_admin.backend.providers.types import (
	Capability,
	FailureKind,
	ProviderFailure,
	ProviderResult,
	ProviderSuccess,
)

logger = logging.getLogger(__name__)


class MalformedResponseError(Exception):
	"""Raised by adapters when a provider answered but the body is unusable."""


class CredentialsRejectedError(Exception):
	"""Raised by adapters when a provider rejects the key outside the usual 401/403."""


def _status_kind(status_code: int, overrides: Dict[int, FailureKind]) -> FailureKind:
	if status_code in overrides:
		return overrides[status_code]
	if status_code == 429:
		return "quota_exceeded"
	if status_code in {401, 403, 404}:
		return "auth_error"
	if status_code == 408 or status_code >= 500:
		return "transient_network"
	if 400 <= status_code < 500:
		return "malformed_response"
	return "transient_network"


def classify_exception(exc: BaseException, overrides: Dict[int, FailureKind] | None = None) -> FailureKind:
	overrides = overrides or {}
	if isinstance(exc, MalformedResponseError):
		return "malformed_response"
	if isinstance(exc, CredentialsRejectedError):
		return "auth_error"
	if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
		return "transient_network"
	if isinstance(exc, openai.APIStatusError):
		return _status_kind(exc.status_code, overrides)
	if isinstance(exc, openai.APIConnectionError):
		return "transient_network"
	if isinstance(exc, httpx.HTTPStatusError):
		return _status_kind(exc.response.status_code, overrides)
	if isinstance(exc, httpx.TransportError):
		return "transient_network"
	if isinstance(exc, (ValueError, KeyError, TypeError, IndexError)):
		return "malformed_response"
	return "transient_network"


def describe_exception(exc: BaseException) -> str:
	"""Failure text safe to show and log: status and reason, never a request URL."""
	if isinstance(exc, httpx.HTTPStatusError):
		response = exc.response
		return f"HTTP {response.status_code} {response.reason_phrase}".strip()
	if isinstance(exc, openai.APIStatusError):
		return f"HTTP {exc.status_code} {exc.__class__.__name__}"
	if isinstance(exc, (httpx.TransportError, openai.APIConnectionError)):
		return exc.__class__.__name__
	if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
		return "Timed out"
	return str(exc) or exc.__class__.__name__


class BaseAdapter:
	"""Shared ``invoke`` contract: never raises, always returns a result value.

	Subclasses implement ``_call`` and may raise anything; the exception is
	classified into a :class:`ProviderFailure`.
	"""

	name: ClassVar[str] = ""
	label: ClassVar[str] = ""
	capability: ClassVar[Capability]
	status_overrides: ClassVar[Dict[int, FailureKind]] = {}

	def __init__(self, *, api_key: str, timeout_s: float = 30.0):
		self._api_key = api_key.strip()
		self._timeout_s = timeout_s

	def is_configured(self) -> bool:
		return bool(self._api_key)

	async def invoke(self, request: Any) -> ProviderResult:
		if not self.is_configured():
			return ProviderFailure(provider=self.name, kind="auth_error", message="API key not configured")
		try:
			payload = await self._call(request)
		except Exception as exc:
			kind = classify_exception(exc, self.status_overrides)
			message = describe_exception(exc)
			logger.warning("%s failed with %s: %s", self.name, kind, message)
			return ProviderFailure(provider=self.name, kind=kind, message=message)
		return ProviderSuccess(provider=self.name, payload=payload)

	async def _call(self, request: Any) -> Any:
		raise NotImplementedError


def require_text(value: Any, provider: str) -> str:
	if not isinstance(value, str) or not value.strip():
		raise MalformedResponseError(f"{provider} returned an empty response")
	return value.strip()
