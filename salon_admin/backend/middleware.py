from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from salon_admin.backend.logging_context import set_request_id

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
	"""Tags each request with an id, exposes it to logging and echoes it back."""

	async def dispatch(self, request: Request, call_next) -> Response:
		request_id = request.headers.get("X-Request-ID", "").strip() or uuid.uuid4().hex
		request.state.request_id = request_id
		set_request_id(request_id)
		started = time.perf_counter()
		response = await call_next(request)
		elapsed = time.perf_counter() - started
		logger.info("%s %s -> %s (%.3fs)", request.method, request.url.path, response.status_code, elapsed)
		response.headers["X-Request-ID"] = request_id
		response.headers["X-Process-Time"] = f"{elapsed:.6f}"
		return response
