from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from booking_api.application.exceptions import PersistenceError, SlotTakenError
from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.domain.entities.audit import AuditLogEntry
from booking_api.domain.entities.booking import Booking


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._slots: set[tuple[str, str]] = set()
        self._audit: list[AuditLogEntry] = []
        self._lock = threading.Lock()

    def insert_booking(self, booking: Booking) -> Booking:
        slot = (booking.event_date.isoformat(), booking.event_time)
        now = datetime.now(timezone.utc)
        stored = replace(booking, created_at=now, updated_at=now)
        with self._lock:
            if booking.booking_id in self._bookings:
                raise PersistenceError(f"Duplicate booking id {booking.booking_id}")
            if slot in self._slots:
                raise SlotTakenError(f"Slot {slot[0]} {slot[1]} is already booked")
            self._bookings[booking.booking_id] = stored
            self._slots.add(slot)
        return stored

    def list_bookings(self) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        return sorted(bookings, key=lambda b: (b.event_date, b.event_time), reverse=True)

    def count_bookings(self) -> int:
        with self._lock:
            return len(self._bookings)

    def append_audit(self, entry: AuditLogEntry) -> None:
        stored = entry if entry.created_at else replace(entry, created_at=datetime.now(timezone.utc))
        with self._lock:
            self._audit.append(stored)

    def list_audit_entries(self, limit: int = 100) -> list[AuditLogEntry]:
        with self._lock:
            return list(reversed(self._audit))[:limit]
