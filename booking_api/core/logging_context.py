"""Logging setup with a per-request correlation id.

The request id lives in a ContextVar so every log line emitted while a
request is handled carries it, including lines from adapters deep in the
pipeline.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="-")

CONTEXT_KEYS = (
    "booking_id",
    "event_id",
    "event",
    "stage",
    "status",
    "method",
    "path",
    "duration_ms",
    "slot_count",
    "reason",
    "error",
)


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:[%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
