from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from booking_api.domain.entities.availability import BusyInterval


class CalendarPort(ABC):
    @abstractmethod
    def list_events(self, start: datetime, end: datetime) -> list[BusyInterval]:
        """List busy intervals overlapping [start, end]."""
        raise NotImplementedError

    @abstractmethod
    def create_event(
        self,
        start: datetime,
        end: datetime,
        title: str,
        description: str | None = None,
        location: str | None = None,
        attendees: list[tuple[str, str | None]] | None = None,
    ) -> str:
        """Create calendar event. Returns event_id."""
        raise NotImplementedError
