from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from booking_api.application.dto.booking_request import BookingRequestDTO
from booking_api.application.exceptions import PersistenceError, SlotTakenError, ValidationFailed
from booking_api.application.ports.audit_logger import AuditLoggerPort
from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.application.ports.calendar import CalendarPort
from booking_api.application.ports.email_sender import EmailSenderPort
from booking_api.application.utils import notifications
from booking_api.application.utils.booking_ids import generate_booking_id
from booking_api.domain.entities.audit import AuditEvent
from booking_api.domain.entities.booking import Booking
from booking_api.domain.entities.step_result import StepResult

CONFIRMATION_MESSAGE = "Booking confirmed successfully!"


class BookingState(str, Enum):
    received = "received"
    validated = "validated"
    identified = "identified"
    calendar_attempted = "calendar_attempted"
    persisted = "persisted"
    notified_client = "notified_client"
    notified_business = "notified_business"
    completed = "completed"
    rejected = "rejected"
    failed = "failed"
    slot_taken = "slot_taken"


@dataclass
class BookingOutcome:
    state: BookingState = BookingState.received
    booking: Booking | None = None
    errors: list[dict[str, str]] = field(default_factory=list)
    steps: dict[str, StepResult] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.state is BookingState.completed

    @property
    def calendar_event_id(self) -> str | None:
        return self.booking.calendar_event_id if self.booking else None


class CreateBookingUseCase:
    """Validate, identify, calendar (best effort), persist, notify (best effort), audit.

    Only persistence can fail the request. Calendar, email and audit
    failures are recorded as degraded steps on the outcome and logged.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        email_sender: EmailSenderPort,
        store: BookingStorePort,
        audit_logger: AuditLoggerPort,
        timezone: ZoneInfo,
        business_name: str,
        business_email: str | None = None,
        default_duration_minutes: int = 120,
        id_factory: Callable[[], str] = generate_booking_id,
    ) -> None:
        self._calendar = calendar
        self._email_sender = email_sender
        self._store = store
        self._audit = audit_logger
        self._timezone = timezone
        self._business_name = business_name
        self._business_email = business_email
        self._default_duration = default_duration_minutes
        self._id_factory = id_factory
        self._logger = logging.getLogger(__name__)

    def execute(self, payload: Any, correlation_id: str | None = None) -> BookingOutcome:
        outcome = BookingOutcome()

        try:
            request = BookingRequestDTO.parse_payload(payload)
        except ValidationFailed as e:
            outcome.state = BookingState.rejected
            outcome.errors = e.errors
            outcome.steps["validate"] = StepResult.fatal("validation_failed")
            self._logger.warning("Validation failed", extra={"reason": e.errors})
            outcome.steps["audit"] = self._attempt(
                "audit", lambda: self._audit.record(correlation_id, AuditEvent.validation_failed, e.errors)
            )
            return outcome
        outcome.steps["validate"] = StepResult.ok()
        outcome.state = BookingState.validated

        booking = self._build_booking(request, self._id_factory())
        outcome.steps["identify"] = StepResult.ok(booking.booking_id)
        outcome.state = BookingState.identified

        calendar_step = self._attempt("calendar", lambda: self._create_calendar_event(booking))
        outcome.steps["calendar"] = calendar_step
        outcome.state = BookingState.calendar_attempted
        if calendar_step.is_ok:
            booking = replace(booking, calendar_event_id=calendar_step.value)

        try:
            booking = self._store.insert_booking(booking)
        except SlotTakenError as e:
            self._logger.warning(
                "Slot already booked",
                extra={"booking_id": booking.booking_id, "event_id": booking.calendar_event_id, "error": str(e)},
            )
            outcome.steps["persist"] = StepResult.fatal(str(e))
            outcome.state = BookingState.slot_taken
            return outcome
        except PersistenceError as e:
            self._logger.error(
                "Failed to persist booking",
                extra={"booking_id": booking.booking_id, "event_id": booking.calendar_event_id, "error": str(e)},
            )
            outcome.steps["persist"] = StepResult.fatal(str(e))
            outcome.state = BookingState.failed
            return outcome
        outcome.booking = booking
        outcome.steps["persist"] = StepResult.ok(booking.booking_id)
        outcome.state = BookingState.persisted

        outcome.steps["notify_client"] = self._attempt("notify_client", lambda: self._notify_client(booking))
        outcome.state = BookingState.notified_client
        outcome.steps["notify_business"] = self._attempt(
            "notify_business", lambda: self._notify_business(booking)
        )
        outcome.state = BookingState.notified_business

        outcome.steps["audit"] = self._attempt(
            "audit",
            lambda: self._audit.record(
                correlation_id,
                AuditEvent.booking_created,
                {"bookingId": booking.booking_id, "clientEmail": booking.client_email},
            ),
        )
        outcome.state = BookingState.completed

        degraded = [name for name, step in outcome.steps.items() if not step.is_ok]
        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.booking_id,
                "event_id": booking.calendar_event_id,
                "reason": ",".join(degraded) or None,
            },
        )
        return outcome

    def _attempt(self, stage: str, action: Callable[[], Any]) -> StepResult:
        try:
            return StepResult.ok(action())
        except Exception as e:
            self._logger.warning("Best-effort step failed", extra={"stage": stage, "error": str(e)})
            return StepResult.degraded(str(e))

    def _build_booking(self, request: BookingRequestDTO, booking_id: str) -> Booking:
        return Booking(
            booking_id=booking_id,
            client_name=request.client_name,
            client_email=request.client_email,
            client_phone=request.client_phone,
            event_date=request.event_date,
            event_time=request.event_time,
            event_type=request.event_type,
            location=request.location,
            message=request.message,
            duration_minutes=request.duration or self._default_duration,
        )

    def _create_calendar_event(self, booking: Booking) -> str:
        attendees: list[tuple[str, str | None]] = [(booking.client_email, booking.client_name)]
        if self._business_email:
            attendees.append((self._business_email, None))
        event_id = self._calendar.create_event(
            start=booking.starts_at(self._timezone),
            end=booking.ends_at(self._timezone),
            title=notifications.calendar_event_title(booking, self._business_name),
            description=notifications.calendar_event_description(booking),
            location=booking.location,
            attendees=attendees,
        )
        if not event_id:
            raise ValueError("Calendar returned no event id")
        return event_id

    def _notify_client(self, booking: Booking) -> str | None:
        content = notifications.client_confirmation(booking, self._business_name)
        return self._email_sender.send_message(
            to=booking.client_email,
            subject=content.subject,
            html_body=content.html_body,
            from_name=f"{self._business_name} Photography",
        )

    def _notify_business(self, booking: Booking) -> str | None:
        if not self._business_email:
            raise ValueError("BUSINESS_EMAIL is not configured")
        content = notifications.business_notification(booking)
        return self._email_sender.send_message(
            to=self._business_email,
            subject=content.subject,
            html_body=content.html_body,
            from_name=f"{self._business_name} Booking System",
        )
