"""Shared fixtures and port fakes."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from booking_api.application.exceptions import CalendarUnavailableError, EmailDeliveryError
from booking_api.application.ports.calendar import CalendarPort
from booking_api.application.ports.email_sender import EmailSenderPort
from booking_api.application.use_cases.create_booking import CreateBookingUseCase
from booking_api.domain.entities.availability import BusyInterval, WorkingHours
from booking_api.infrastructure.audit.queue_audit_logger import QueueAuditLogger
from booking_api.infrastructure.store.memory_store import MemoryBookingStore

TZ = ZoneInfo("America/Los_Angeles")


class FakeCalendar(CalendarPort):
    def __init__(self, events: list[BusyInterval] | None = None, fail: bool = False) -> None:
        self.events = list(events or [])
        self.fail = fail
        self.created: list[dict] = []
        self.list_calls: list[tuple[datetime, datetime]] = []

    def list_events(self, start: datetime, end: datetime) -> list[BusyInterval]:
        self.list_calls.append((start, end))
        if self.fail:
            raise CalendarUnavailableError("calendar unreachable")
        return list(self.events)

    def create_event(self, start, end, title, description=None, location=None, attendees=None) -> str:
        if self.fail:
            raise CalendarUnavailableError("calendar unreachable")
        self.created.append(
            {
                "start": start,
                "end": end,
                "title": title,
                "description": description,
                "location": location,
                "attendees": attendees,
            }
        )
        return f"evt_{len(self.created)}"


class FakeEmailSender(EmailSenderPort):
    def __init__(self, fail_for: set[str] | None = None, fail_all: bool = False) -> None:
        self.fail_for = fail_for or set()
        self.fail_all = fail_all
        self.attempts: list[str] = []
        self.sent: list[dict] = []

    def send_message(self, to, subject, html_body, from_name=None):
        self.attempts.append(to)
        if self.fail_all or to in self.fail_for:
            raise EmailDeliveryError(f"cannot deliver to {to}")
        self.sent.append({"to": to, "subject": subject, "html_body": html_body, "from_name": from_name})
        return f"msg_{len(self.sent)}"


def at(hour: int, minute: int = 0, day: tuple[int, int, int] = (2025, 8, 20)) -> datetime:
    return datetime(*day, hour, minute, tzinfo=TZ)


def valid_payload(**overrides) -> dict:
    payload = {
        "clientName": "Jane Doe",
        "clientEmail": "Jane.Doe@Example.com",
        "clientPhone": "+1 234 567 8900",
        "eventDate": "2025-08-20",
        "eventTime": "10:00",
        "eventType": "consultation",
        "location": "Golden Gate Park",
        "message": "Looking forward to it",
        "duration": 60,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def tz() -> ZoneInfo:
    return TZ


@pytest.fixture
def working_hours() -> WorkingHours:
    return WorkingHours(start_hour=9, end_hour=18)


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def audit_logger(store):
    logger = QueueAuditLogger(store=store, max_size=100)
    yield logger
    logger.close()


def make_use_case(
    store,
    audit_logger,
    calendar: CalendarPort | None = None,
    email_sender: EmailSenderPort | None = None,
    business_email: str | None = "studio@example.com",
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        calendar=calendar or FakeCalendar(),
        email_sender=email_sender or FakeEmailSender(),
        store=store,
        audit_logger=audit_logger,
        timezone=TZ,
        business_name="4everevents",
        business_email=business_email,
    )
