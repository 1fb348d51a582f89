from __future__ import annotations

import logging
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

from fastapi import Request

from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.application.ports.calendar import CalendarPort
from booking_api.application.ports.email_sender import EmailSenderPort
from booking_api.application.use_cases.check_availability import CheckAvailabilityUseCase
from booking_api.application.use_cases.create_booking import CreateBookingUseCase
from booking_api.core.config import Settings
from booking_api.domain.entities.availability import WorkingHours
from booking_api.infrastructure.audit.queue_audit_logger import QueueAuditLogger
from booking_api.infrastructure.calendar.google_calendar import GoogleCalendar
from booking_api.infrastructure.calendar.mock_calendar import MockCalendar
from booking_api.infrastructure.email.gmail_sender import GmailSender
from booking_api.infrastructure.email.mock_sender import MockEmailSender
from booking_api.infrastructure.google.oauth import GoogleAccessTokenProvider
from booking_api.infrastructure.store.sql_store import SqlBookingStore

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Long-lived collaborators, built once at startup and shared by all requests."""

    settings: Settings
    calendar: CalendarPort
    email_sender: EmailSenderPort
    store: BookingStorePort
    audit_logger: QueueAuditLogger
    timezone: ZoneInfo
    working_hours: WorkingHours
    closeables: list[object] = field(default_factory=list)

    def check_availability(self) -> CheckAvailabilityUseCase:
        return CheckAvailabilityUseCase(
            calendar=self.calendar,
            working_hours=self.working_hours,
            timezone=self.timezone,
            default_duration_minutes=self.settings.DEFAULT_DURATION_MINUTES,
        )

    def create_booking(self) -> CreateBookingUseCase:
        return CreateBookingUseCase(
            calendar=self.calendar,
            email_sender=self.email_sender,
            store=self.store,
            audit_logger=self.audit_logger,
            timezone=self.timezone,
            business_name=self.settings.BUSINESS_NAME,
            business_email=self.settings.BUSINESS_EMAIL,
            default_duration_minutes=self.settings.DEFAULT_DURATION_MINUTES,
        )

    def start(self) -> None:
        self.audit_logger.start()

    def close(self) -> None:
        self.audit_logger.close()
        for resource in self.closeables:
            close = getattr(resource, "close", None)
            if close is None:
                continue
            try:
                close()
            except Exception as e:
                logger.warning("Failed to close resource", extra={"error": str(e)})


def build_working_hours(settings: Settings) -> WorkingHours:
    return WorkingHours(
        start_hour=settings.WORKING_HOURS_START,
        end_hour=settings.WORKING_HOURS_END,
        end_inclusive=settings.WORKING_HOURS_END_INCLUSIVE,
    )


def build_container(
    settings: Settings,
    calendar: CalendarPort | None = None,
    email_sender: EmailSenderPort | None = None,
    store: BookingStorePort | None = None,
) -> Container:
    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)
    closeables: list[object] = []

    use_google = settings.google_configured and settings.ENV.lower() not in {"dev", "local", "test"}
    token_provider: GoogleAccessTokenProvider | None = None
    if use_google and (calendar is None or email_sender is None):
        token_provider = GoogleAccessTokenProvider(
            client_id=settings.GOOGLE_CLIENT_ID or "",
            client_secret=settings.GOOGLE_CLIENT_SECRET or "",
            refresh_token=settings.GOOGLE_REFRESH_TOKEN or "",
            token_url=settings.GOOGLE_TOKEN_URL,
            timeout=settings.CALENDAR_TIMEOUT_SECONDS,
        )
        closeables.append(token_provider)

    if calendar is None:
        if token_provider is not None:
            logger.info("Using Google Calendar")
            calendar = GoogleCalendar(
                token_provider=token_provider,
                timezone=tz,
                timezone_name=settings.BUSINESS_TIMEZONE,
                calendar_id=settings.GOOGLE_CALENDAR_ID,
                base_url=settings.GOOGLE_CALENDAR_BASE_URL,
                timeout=settings.CALENDAR_TIMEOUT_SECONDS,
            )
            closeables.append(calendar)
        else:
            logger.info("Using MockCalendar (Google credentials missing or ENV=dev/local)")
            calendar = MockCalendar()

    if email_sender is None:
        if token_provider is not None and settings.GMAIL_USER:
            logger.info("Using Gmail sender")
            email_sender = GmailSender(
                token_provider=token_provider,
                sender_address=settings.GMAIL_USER,
                default_from_name=settings.BUSINESS_NAME,
                base_url=settings.GMAIL_BASE_URL,
                timeout=settings.EMAIL_TIMEOUT_SECONDS,
            )
            closeables.append(email_sender)
        else:
            logger.info("Using MockEmailSender")
            email_sender = MockEmailSender()

    if store is None:
        store = SqlBookingStore.from_url(settings.DATABASE_URL)

    return Container(
        settings=settings,
        calendar=calendar,
        email_sender=email_sender,
        store=store,
        audit_logger=QueueAuditLogger(store=store, max_size=settings.AUDIT_QUEUE_SIZE),
        timezone=tz,
        working_hours=build_working_hours(settings),
        closeables=closeables,
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_check_availability_use_case(request: Request) -> CheckAvailabilityUseCase:
    return get_container(request).check_availability()


def get_create_booking_use_case(request: Request) -> CreateBookingUseCase:
    return get_container(request).create_booking()


def get_store(request: Request) -> BookingStorePort:
    return get_container(request).store
