from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuditEvent(str, Enum):
    validation_failed = "validation_failed"
    booking_created = "booking_created"


@dataclass(frozen=True)
class AuditLogEntry:
    correlation_id: str | None
    event: AuditEvent
    details: str  # JSON text
    created_at: datetime | None = None
