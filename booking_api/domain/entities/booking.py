from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum

from booking_api.domain.entities.event_type import EventType


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


@dataclass(frozen=True)
class Booking:
    booking_id: str
    client_name: str
    client_email: str
    client_phone: str
    event_date: date
    event_time: str  # HH:MM, business timezone
    event_type: EventType
    location: str
    message: str | None = None
    duration_minutes: int = 120
    status: BookingStatus = BookingStatus.confirmed
    calendar_event_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def starts_at(self, tz: tzinfo) -> datetime:
        hour, minute = (int(part) for part in self.event_time.split(":"))
        return datetime(self.event_date.year, self.event_date.month, self.event_date.day, hour, minute, tzinfo=tz)

    def ends_at(self, tz: tzinfo) -> datetime:
        return self.starts_at(tz) + timedelta(minutes=self.duration_minutes)
