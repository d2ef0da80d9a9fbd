from __future__ import annotations

import logging
import sqlite3
from typing import Dict

from salon_admin.backend import constants
from salon_admin.backend.adapters import sqlite_adapter
from salon_admin.backend.services.booking_gateway import SqliteBookingGateway
from salon_admin.backend.services.runtime import AssistantRuntime

logger = logging.getLogger(__name__)


def _storage_summary(runtime: AssistantRuntime) -> Dict[str, object]:
	gateway = runtime.gateway
	if not isinstance(gateway, SqliteBookingGateway):
		return {"status": "external"}
	try:
		meta = sqlite_adapter.get_storage_meta(db_path=gateway.db_path)
	except sqlite3.Error as exc:
		logger.error("Storage check failed: %s", exc)
		return {"status": "error", "error": str(exc)}
	meta["status"] = "ok" if meta.get("quick_check") == "ok" else "degraded"
	return meta


def get_summary(runtime: AssistantRuntime) -> Dict[str, object]:
	providers = runtime.orchestrator.status_by_capability()
	readiness: Dict[str, Dict[str, object]] = {}
	for capability in constants.CAPABILITY_ORDER:
		statuses = providers.get(capability, [])
		available = [status["name"] for status in statuses if status["available"]]
		readiness[capability] = {
			"ready": bool(available),
			"available": available,
			"total": len(statuses),
		}
	return {
		"app": {"name": constants.APP_NAME, "version": constants.APP_VERSION},
		"providers": readiness,
		"storage": _storage_summary(runtime),
	}
