from abc import ABC, abstractmethod
from typing import Any

from booking_api.domain.entities.audit import AuditEvent


class AuditLoggerPort(ABC):
    @abstractmethod
    def record(self, correlation_id: str | None, event: AuditEvent, details: Any) -> None:
        """Queue an audit entry. Must not raise or block the caller."""
        raise NotImplementedError
