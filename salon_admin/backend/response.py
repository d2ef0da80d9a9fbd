from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request

from salon_admin.backend.logging_context import get_request_id


def now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _request_id(request: Optional[Request]) -> Optional[str]:
	if request is None:
		return None
	request_id = getattr(request.state, "request_id", None)
	if request_id:
		return request_id
	context_id = get_request_id()
	return context_id if context_id != "-" else None


def success_response(*, request: Optional[Request] = None, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
	payload: Dict[str, Any] = {"ok": True, "generated_at": now_iso()}
	request_id = _request_id(request)
	if request_id:
		payload["request_id"] = request_id
	if data is not None:
		payload["data"] = data
	return payload


def error_response(
	*,
	code: str,
	message: str,
	request: Optional[Request] = None,
	evidence: Optional[List[str]] = None,
) -> Dict[str, Any]:
	payload: Dict[str, Any] = {
		"ok": False,
		"generated_at": now_iso(),
		"error": {"code": code, "message": message, "evidence": evidence or []},
	}
	request_id = _request_id(request)
	if request_id:
		payload["request_id"] = request_id
	return payload
