from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from salon_admin.backend.config import ModelSettings, ProviderKeys, Settings
from salon_admin.backend.providers.types import ProviderFailure, ProviderSuccess

FIXED_TODAY = date(2025, 3, 15)


def make_settings(**overrides: Any) -> Settings:
	values: Dict[str, Any] = {
		"keys": ProviderKeys(),
		"models": ModelSettings(),
		"db_path": ":memory:",
		"log_level": "WARNING",
	}
	values.update(overrides)
	return Settings(**values)


def reply_json(intent: str, entities: Optional[Dict[str, Any]] = None, response: str = "") -> str:
	return json.dumps({"intent": intent, "entities": entities or {}, "response": response})


class ScriptedAdapter:
	"""Adapter double that replays a fixed list of outcomes, repeating the last one."""

	def __init__(
		self,
		name: str,
		capability: str,
		outcomes: Sequence[Any],
		*,
		configured: bool = True,
	):
		self.name = name
		self.label = name.title()
		self.capability = capability
		self._outcomes = list(outcomes)
		self._configured = configured
		self.requests: List[Any] = []

	def is_configured(self) -> bool:
		return self._configured

	def fail_with(self, kind: str, message: str = "") -> None:
		self._outcomes = [ProviderFailure(provider=self.name, kind=kind, message=message or kind)]

	async def invoke(self, request: Any):
		self.requests.append(request)
		outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
		if isinstance(outcome, ProviderFailure):
			return outcome
		return ProviderSuccess(provider=self.name, payload=outcome)


def failure(provider: str, kind: str, message: str = "") -> ProviderFailure:
	return ProviderFailure(provider=provider, kind=kind, message=message or kind)


class FakeGateway:
	def __init__(self, *, revenue: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
		self.calls: List[tuple] = []
		self.logged: List[tuple] = []
		self._revenue = revenue or {"total": 0, "count": 0}
		self._error = error

	def _record(self, *call: Any) -> None:
		self.calls.append(call)
		if self._error is not None:
			raise self._error

	async def create_employee_record(self, fields):
		self._record("create_employee_record", dict(fields))
		return "emp-1"

	async def query_revenue(self, start_date, end_date):
		self._record("query_revenue", start_date, end_date)
		return dict(self._revenue)

	async def reassign_bookings(self, employee_name, date):
		self._record("reassign_bookings", employee_name, date)
		return 3

	async def assign_booking(self, booking_id, stylist_name):
		self._record("assign_booking", booking_id, stylist_name)
		return stylist_name

	async def cancel_booking(self, booking_id):
		self._record("cancel_booking", booking_id)
		return booking_id

	async def log_action(self, action_type, data):
		self.logged.append((action_type, dict(data)))
