from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Sequence, Union

from salon_admin.backend import constants
from salon_admin.backend.providers.types import (
	DISABLING_FAILURES,
	Capability,
	ProviderAdapter,
	ProviderFailure,
	ProviderRequest,
	ProviderSuccess,
)
from salon_admin.backend.services.provider_status_service import ProviderStatusStore

logger = logging.getLogger(__name__)

_MISSING_KEY_MESSAGE = "API key not configured"


@dataclass
class ChainFailure:
	capability: Capability
	failures: List[ProviderFailure] = field(default_factory=list)
	ok: Literal[False] = False

	def describe(self) -> str:
		if not self.failures:
			return f"No {self.capability} providers are registered."
		details = "; ".join(failure.describe() for failure in self.failures)
		return f"All {self.capability} providers failed: {details}"

	def diagnostics(self) -> List[Dict[str, str]]:
		return [
			{"provider": failure.provider, "kind": failure.kind, "message": failure.message}
			for failure in self.failures
		]


ChainResult = Union[ProviderSuccess, ChainFailure]


class FallbackOrchestrator:
	"""Tries the adapters of one capability in fixed order until one succeeds.

	Quota and auth failures take a provider out of rotation until
	:meth:`reset`; other failures only move on to the next adapter.
	"""

	def __init__(self, chains: Dict[Capability, Sequence[ProviderAdapter]], status_store: ProviderStatusStore):
		self._chains: Dict[Capability, List[ProviderAdapter]] = {
			capability: list(adapters) for capability, adapters in chains.items()
		}
		self._status = status_store
		for adapters in self._chains.values():
			for adapter in adapters:
				self._status.register(adapter.name, adapter.label, adapter.capability)
		self._disable_unconfigured()

	def _disable_unconfigured(self) -> None:
		for adapters in self._chains.values():
			for adapter in adapters:
				if not adapter.is_configured():
					self._status.record_failure(adapter.name, "auth_error", _MISSING_KEY_MESSAGE, disable=True)

	async def run(self, capability: Capability, request: ProviderRequest) -> ChainResult:
		failures: List[ProviderFailure] = []
		for adapter in self._chains.get(capability, []):
			if not self._status.is_available(adapter.name):
				status = self._status.get(adapter.name)
				failures.append(
					ProviderFailure(
						provider=adapter.name,
						kind=(status.last_failure_kind if status and status.last_failure_kind else "auth_error"),
						message=f"skipped, unavailable: {(status.last_error if status else None) or 'disabled'}",
					)
				)
				continue

			result = await adapter.invoke(request)
			if result.ok:
				self._status.record_success(adapter.name)
				logger.info("%s handled by %s", capability, adapter.name)
				return result

			disable = result.kind in DISABLING_FAILURES
			self._status.record_failure(adapter.name, result.kind, result.message, disable=disable)
			if disable:
				logger.warning("%s disabled after %s", adapter.name, result.kind)
			failures.append(result)

		chain_failure = ChainFailure(capability=capability, failures=failures)
		logger.error(chain_failure.describe())
		return chain_failure

	def reset(self) -> None:
		self._status.reset()
		self._disable_unconfigured()

	def status_by_capability(self) -> Dict[str, List[Dict[str, object]]]:
		statuses = {status.name: status for status in self._status.snapshot()}
		grouped: Dict[str, List[Dict[str, object]]] = {}
		for capability in constants.CAPABILITY_ORDER:
			adapters = self._chains.get(capability, [])  # type: ignore[call-overload]
			grouped[capability] = [statuses[a.name].as_dict() for a in adapters if a.name in statuses]
		return grouped
