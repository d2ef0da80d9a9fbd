from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Protocol

from salon_admin.backend.providers.types import Capability, FailureKind


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class ProviderStatus:
	name: str
	label: str
	capability: Capability
	available: bool = True
	last_error: Optional[str] = None
	last_failure_kind: Optional[FailureKind] = None
	updated_at: Optional[str] = None

	def as_dict(self) -> Dict[str, object]:
		return {
			"name": self.name,
			"label": self.label,
			"capability": self.capability,
			"available": self.available,
			"last_error": self.last_error,
			"last_failure_kind": self.last_failure_kind,
			"updated_at": self.updated_at,
		}


class ProviderStatusStore(Protocol):
	def register(self, name: str, label: str, capability: Capability) -> ProviderStatus: ...

	def get(self, name: str) -> Optional[ProviderStatus]: ...

	def is_available(self, name: str) -> bool: ...

	def record_failure(self, name: str, kind: FailureKind, message: str, *, disable: bool) -> None: ...

	def record_success(self, name: str) -> None: ...

	def reset(self) -> None: ...

	def snapshot(self) -> List[ProviderStatus]: ...


class InMemoryProviderStatusStore:
	"""Process-local availability flags keyed by provider name."""

	def __init__(self) -> None:
		self._statuses: Dict[str, ProviderStatus] = {}
		self._lock = Lock()

	def register(self, name: str, label: str, capability: Capability) -> ProviderStatus:
		with self._lock:
			status = self._statuses.get(name)
			if status is None:
				status = ProviderStatus(name=name, label=label, capability=capability, updated_at=_now_iso())
				self._statuses[name] = status
			return status

	def get(self, name: str) -> Optional[ProviderStatus]:
		with self._lock:
			return self._statuses.get(name)

	def is_available(self, name: str) -> bool:
		with self._lock:
			status = self._statuses.get(name)
			return status is None or status.available

	def record_failure(self, name: str, kind: FailureKind, message: str, *, disable: bool) -> None:
		with self._lock:
			status = self._statuses.get(name)
			if status is None:
				return
			status.last_error = message
			status.last_failure_kind = kind
			status.updated_at = _now_iso()
			if disable:
				status.available = False

	def record_success(self, name: str) -> None:
		with self._lock:
			status = self._statuses.get(name)
			if status is None:
				return
			status.available = True
			status.last_error = None
			status.last_failure_kind = None
			status.updated_at = _now_iso()

	def reset(self) -> None:
		with self._lock:
			for status in self._statuses.values():
				status.available = True
				status.last_error = None
				status.last_failure_kind = None
				status.updated_at = _now_iso()

	def snapshot(self) -> List[ProviderStatus]:
		with self._lock:
			return [ProviderStatus(**vars(status)) for status in self._statuses.values()]
