from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol

from starlette.concurrency import run_in_threadpool

from salon_admin.backend.adapters import sqlite_adapter


class BookingGateway(Protocol):
	"""The only database operations the assistant may trigger."""

	async def create_employee_record(self, fields: Mapping[str, str]) -> str: ...

	async def query_revenue(self, start_date: str, end_date: str) -> Dict[str, Any]: ...

	async def reassign_bookings(self, employee_name: str, date: str) -> int: ...

	async def assign_booking(self, booking_id: str, stylist_name: str) -> str: ...

	async def cancel_booking(self, booking_id: str) -> str: ...

	async def log_action(self, action_type: str, data: Mapping[str, Any]) -> None: ...


class SqliteBookingGateway:
	def __init__(self, db_path: str):
		self._db_path = db_path

	@property
	def db_path(self) -> str:
		return self._db_path

	async def create_employee_record(self, fields: Mapping[str, str]) -> str:
		result = await run_in_threadpool(sqlite_adapter.create_employee, dict(fields), self._db_path)
		return result["employee_id"]

	async def query_revenue(self, start_date: str, end_date: str) -> Dict[str, Any]:
		return await run_in_threadpool(sqlite_adapter.completed_revenue, start_date, end_date, self._db_path)

	async def reassign_bookings(self, employee_name: str, date: str) -> int:
		return await run_in_threadpool(sqlite_adapter.reassign_bookings, employee_name, date, self._db_path)

	async def assign_booking(self, booking_id: str, stylist_name: str) -> str:
		result = await run_in_threadpool(sqlite_adapter.assign_booking, booking_id, stylist_name, self._db_path)
		return result["employee_name"]

	async def cancel_booking(self, booking_id: str) -> str:
		return await run_in_threadpool(sqlite_adapter.cancel_booking, booking_id, self._db_path)

	async def log_action(self, action_type: str, data: Mapping[str, Any]) -> None:
		await run_in_threadpool(sqlite_adapter.log_action, action_type, dict(data), self._db_path)
