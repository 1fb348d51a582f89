from __future__ import annotations

import logging
import threading
from datetime import datetime

from booking_api.application.ports.calendar import CalendarPort
from booking_api.domain.entities.availability import BusyInterval


class MockCalendar(CalendarPort):
    def __init__(self, events: list[BusyInterval] | None = None) -> None:
        self._events: dict[str, BusyInterval] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        for event in events or []:
            self._add(event.start, event.end, event.event_id)

    def list_events(self, start: datetime, end: datetime) -> list[BusyInterval]:
        with self._lock:
            events = [event for event in self._events.values() if event.overlaps(start, end)]
        return sorted(events, key=lambda e: e.start)

    def create_event(
        self,
        start: datetime,
        end: datetime,
        title: str,
        description: str | None = None,
        location: str | None = None,
        attendees: list[tuple[str, str | None]] | None = None,
    ) -> str:
        event_id = self._add(start, end)
        self._logger.info("Mock calendar event created", extra={"event_id": event_id})
        return event_id

    def _add(self, start: datetime, end: datetime, event_id: str | None = None) -> str:
        with self._lock:
            event_id = event_id or f"mock_event_{len(self._events) + 1}"
            self._events[event_id] = BusyInterval(start=start, end=end, event_id=event_id)
        return event_id
