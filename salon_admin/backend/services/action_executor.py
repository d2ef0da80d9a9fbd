from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping

from salon_admin.backend.services.actions import REQUIRED_FIELDS, is_iso_date, missing_fields
from salon_admin.backend.services.booking_gateway import BookingGateway

logger = logging.getLogger(__name__)


@dataclass
class ActionOutcome:
	message: str
	success: bool
	type: str
	data: Dict[str, Any] = field(default_factory=dict)

	def result(self) -> Dict[str, Any]:
		return {"success": self.success, "type": self.type, "data": self.data}


def _with_note(text: str, note: str) -> str:
	text = text.strip()
	return f"{text} ({note})" if text else f"({note})"


def _format_amount(value: Any) -> str:
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value)


Handler = Callable[[Dict[str, str], str], Awaitable[ActionOutcome]]


class ActionExecutor:
	"""Runs one database operation for a completed admin action.

	Database errors never escape: they become a note on the confirmation text
	and ``success: False`` in the result.
	"""

	def __init__(self, gateway: BookingGateway):
		self._gateway = gateway
		self._handlers: Dict[str, Handler] = {
			"ADD_EMPLOYEE": self._add_employee,
			"GET_REVENUE": self._get_revenue,
			"REASSIGN_APPOINTMENTS": self._reassign_appointments,
			"ASSIGN_BOOKING": self._assign_booking,
			"CANCEL_BOOKING": self._cancel_booking,
		}

	async def execute(self, kind: str, entities: Mapping[str, str], reply: str = "") -> ActionOutcome:
		handler = self._handlers.get(kind)
		if handler is None:
			return ActionOutcome(message=_with_note(reply, f"Unknown action type {kind}"), success=False, type=kind)

		missing = missing_fields(kind, entities)
		if missing:
			return ActionOutcome(
				message=_with_note(reply, f"Missing required fields: {', '.join(missing)}"),
				success=False,
				type=kind,
				data={"missing": missing},
			)

		fields = {name: entities[name].strip() for name in REQUIRED_FIELDS[kind]}
		try:
			outcome = await handler(fields, reply)
		except Exception as exc:
			logger.exception("Database action %s failed", kind)
			return ActionOutcome(
				message=_with_note(reply, f"Note: Failed to execute database action: {exc}"),
				success=False,
				type=kind,
				data={"error": str(exc)},
			)

		try:
			await self._gateway.log_action(kind, {**fields, **outcome.data})
		except Exception:
			logger.exception("Failed to write audit entry for %s", kind)
		return outcome

	async def _add_employee(self, fields: Dict[str, str], reply: str) -> ActionOutcome:
		employee_id = await self._gateway.create_employee_record(fields)
		base = reply or f"Added {fields['name']} as {fields['role']}."
		return ActionOutcome(
			message=_with_note(base, "Employee added to database successfully."),
			success=True,
			type="ADD_EMPLOYEE",
			data={"employeeId": employee_id, **fields},
		)

	async def _get_revenue(self, fields: Dict[str, str], reply: str) -> ActionOutcome:
		day = fields["date"]
		if not is_iso_date(day):
			raise ValueError(f"Invalid date '{day}', expected YYYY-MM-DD")
		revenue = await self._gateway.query_revenue(day, day)
		total = revenue.get("total", 0)
		count = revenue.get("count", 0)
		return ActionOutcome(
			message=f"The revenue for {day} was ₹{_format_amount(total)} from {count} completed bookings.",
			success=True,
			type="GET_REVENUE",
			data={"date": day, "totalRevenue": total, "bookingCount": count},
		)

	async def _reassign_appointments(self, fields: Dict[str, str], reply: str) -> ActionOutcome:
		employee, day = fields["employeeName"], fields["date"]
		count = await self._gateway.reassign_bookings(employee, day)
		return ActionOutcome(
			message=f"I have reassigned {count} appointments for {employee} on {day}.",
			success=True,
			type="REASSIGN_APPOINTMENTS",
			data={"count": count},
		)

	async def _assign_booking(self, fields: Dict[str, str], reply: str) -> ActionOutcome:
		assigned = await self._gateway.assign_booking(fields["bookingId"], fields["stylistName"])
		return ActionOutcome(
			message=f"Booking {fields['bookingId']} is now assigned to {assigned}.",
			success=True,
			type="ASSIGN_BOOKING",
			data={"bookingId": fields["bookingId"], "assignedTo": assigned},
		)

	async def _cancel_booking(self, fields: Dict[str, str], reply: str) -> ActionOutcome:
		cancelled_id = await self._gateway.cancel_booking(fields["bookingId"])
		return ActionOutcome(
			message=f"Booking {cancelled_id} has been cancelled.",
			success=True,
			type="CANCEL_BOOKING",
			data={"bookingId": cancelled_id},
		)
