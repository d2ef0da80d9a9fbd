"""Admin action kinds, their required fields and entity normalisation."""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Dict, List, Literal, Mapping, Optional, Tuple

ActionKind = Literal[
	"ADD_EMPLOYEE",
	"GET_REVENUE",
	"REASSIGN_APPOINTMENTS",
	"ASSIGN_BOOKING",
	"CANCEL_BOOKING",
	"CHAT",
]

REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
	"ADD_EMPLOYEE": ("name", "role", "phone", "email"),
	"GET_REVENUE": ("date",),
	"REASSIGN_APPOINTMENTS": ("employeeName", "date"),
	"ASSIGN_BOOKING": ("bookingId", "stylistName"),
	"CANCEL_BOOKING": ("bookingId",),
	"CHAT": (),
}

FIELD_QUESTIONS: Dict[str, str] = {
	"name": "What's their full name?",
	"role": "What role will they have? (e.g., Stylist, Colorist, Makeup Artist)",
	"phone": "What's their phone number?",
	"email": "What's their email address?",
	"date": "Which date should I use? (YYYY-MM-DD, today or yesterday)",
	"employeeName": "Which employee's appointments should be reassigned?",
	"bookingId": "Which booking ID is this about?",
	"stylistName": "Which stylist should take this booking?",
}

_INTENT_ALIASES: Dict[str, str] = {
	"ADD_EMPLOYEE": "ADD_EMPLOYEE",
	"CREATE_EMPLOYEE": "ADD_EMPLOYEE",
	"NEW_EMPLOYEE": "ADD_EMPLOYEE",
	"HIRE_EMPLOYEE": "ADD_EMPLOYEE",
	"ADD_STAFF": "ADD_EMPLOYEE",
	"ADD_STYLIST": "ADD_EMPLOYEE",
	"ONBOARD": "ADD_EMPLOYEE",
	"GET_REVENUE": "GET_REVENUE",
	"REVENUE": "GET_REVENUE",
	"EARNINGS": "GET_REVENUE",
	"INCOME": "GET_REVENUE",
	"SALES": "GET_REVENUE",
	"REASSIGN_APPOINTMENTS": "REASSIGN_APPOINTMENTS",
	"TRANSFER_APPOINTMENTS": "REASSIGN_APPOINTMENTS",
	"MOVE_APPOINTMENTS": "REASSIGN_APPOINTMENTS",
	"REASSIGN": "REASSIGN_APPOINTMENTS",
	"ASSIGN_BOOKING": "ASSIGN_BOOKING",
	"ASSIGN_STYLIST": "ASSIGN_BOOKING",
	"ASSIGN": "ASSIGN_BOOKING",
	"CANCEL_BOOKING": "CANCEL_BOOKING",
	"CANCEL_APPOINTMENT": "CANCEL_BOOKING",
	"CANCEL": "CANCEL_BOOKING",
	"CHAT": "CHAT",
	"NONE": "CHAT",
	"GENERAL_INQUIRY": "CHAT",
}

_FIELD_ALIASES: Dict[str, str] = {
	"name": "name",
	"employee": "name",
	"fullname": "name",
	"role": "role",
	"position": "role",
	"phone": "phone",
	"phonenumber": "phone",
	"mobile": "phone",
	"email": "email",
	"emailaddress": "email",
	"date": "date",
	"day": "date",
	"employeename": "employeeName",
	"fromemployee": "employeeName",
	"stylist": "stylistName",
	"stylistname": "stylistName",
	"toemployee": "stylistName",
	"assignee": "stylistName",
	"bookingid": "bookingId",
	"booking": "bookingId",
	"appointmentid": "bookingId",
	"id": "bookingId",
}

_RELATIVE_DAYS = {"today": 0, "yesterday": -1, "tomorrow": 1}
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_intent(raw: object) -> ActionKind:
	if not isinstance(raw, str):
		return "CHAT"
	key = re.sub(r"[\s\-]+", "_", raw.strip()).upper()
	return _INTENT_ALIASES.get(key, "CHAT")  # type: ignore[return-value]


def normalize_field_name(raw: str) -> str:
	key = re.sub(r"[\s_\-]+", "", raw).lower()
	return _FIELD_ALIASES.get(key, raw)


def coerce_value(value: object) -> Optional[str]:
	if value is None or isinstance(value, (dict, list, bool)):
		return None
	text = " ".join(str(value).split()).strip()
	return text or None


def normalize_entities(raw: object) -> Dict[str, str]:
	if not isinstance(raw, Mapping):
		return {}
	entities: Dict[str, str] = {}
	for key, value in raw.items():
		if not isinstance(key, str):
			continue
		coerced = coerce_value(value)
		if coerced is None:
			continue
		entities[normalize_field_name(key)] = coerced
	return entities


def resolve_date(value: str, today: Optional[date] = None) -> str:
	"""Turn ``today``/``yesterday``/``tomorrow`` into ISO dates; pass ISO through."""
	lowered = value.strip().lower()
	if lowered in _RELATIVE_DAYS:
		base = today or date.today()
		return (base + timedelta(days=_RELATIVE_DAYS[lowered])).isoformat()
	return value.strip()


def is_iso_date(value: str) -> bool:
	if not _ISO_DATE_RE.match(value):
		return False
	try:
		date.fromisoformat(value)
	except ValueError:
		return False
	return True


def missing_fields(kind: str, entities: Mapping[str, str]) -> List[str]:
	return [name for name in REQUIRED_FIELDS.get(kind, ()) if not (entities.get(name) or "").strip()]


def follow_up_questions(fields: List[str]) -> List[str]:
	return [FIELD_QUESTIONS.get(name, f"What is the {name}?") for name in fields]
