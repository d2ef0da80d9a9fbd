"""Request-id aware logging.

The request middleware stores the id of the in-flight request in a context
variable; :class:`RequestIdFilter` copies it onto every record so the format
string can include ``%(request_id)s``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_LOG_FORMAT = "%(asctime)s [%(request_id)s] %(name)s %(levelname)s: %(message)s"


def set_request_id(request_id: str) -> None:
	_request_id.set(request_id)


def get_request_id() -> str:
	return _request_id.get()


class RequestIdFilter(logging.Filter):
	def filter(self, record: logging.LogRecord) -> bool:
		record.request_id = _request_id.get()  # type: ignore[attr-defined]
		return True


def configure_logging(level: str = "INFO") -> None:
	root = logging.getLogger()
	root.setLevel(getattr(logging, level.upper(), logging.INFO))
	for handler in root.handlers:
		if any(isinstance(f, RequestIdFilter) for f in handler.filters):
			return
	handler = logging.StreamHandler()
	handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
	handler.addFilter(RequestIdFilter())
	root.addHandler(handler)
