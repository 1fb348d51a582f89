from __future__ import annotations

import logging

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from booking_api.application.exceptions import PersistenceError, SlotTakenError
from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.domain.entities.audit import AuditEvent, AuditLogEntry
from booking_api.domain.entities.booking import Booking, BookingStatus
from booking_api.domain.entities.event_type import EventType
from booking_api.infrastructure.store.models import AuditLogRecord, Base, BookingRecord


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in {"sqlite://", "sqlite:///"}:
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True, pool_recycle=300)


class SqlBookingStore(BookingStorePort):
    def __init__(self, engine: Engine, create_tables: bool = True) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
        self._logger = logging.getLogger(__name__)
        if create_tables:
            Base.metadata.create_all(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlBookingStore":
        return cls(build_engine(database_url))

    def insert_booking(self, booking: Booking) -> Booking:
        record = _to_record(booking)
        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
                session.refresh(record)
            except IntegrityError as e:
                session.rollback()
                if self._slot_taken(session, booking):
                    raise SlotTakenError(
                        f"Slot {booking.event_date.isoformat()} {booking.event_time} is already booked"
                    ) from e
                raise PersistenceError("Failed to insert booking") from e
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError("Failed to insert booking") from e
        self._logger.info("Booking persisted", extra={"booking_id": booking.booking_id})
        return _to_booking(record)

    def list_bookings(self) -> list[Booking]:
        stmt = select(BookingRecord).order_by(BookingRecord.event_date.desc(), BookingRecord.event_time.desc())
        try:
            with self._session_factory() as session:
                return [_to_booking(record) for record in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to read bookings") from e

    def count_bookings(self) -> int:
        try:
            with self._session_factory() as session:
                return int(session.scalar(select(func.count()).select_from(BookingRecord)) or 0)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to count bookings") from e

    def append_audit(self, entry: AuditLogEntry) -> None:
        record = AuditLogRecord(request_id=entry.correlation_id, event=entry.event.value, details=entry.details)
        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError("Failed to write audit log") from e

    def list_audit_entries(self, limit: int = 100) -> list[AuditLogEntry]:
        stmt = select(AuditLogRecord).order_by(AuditLogRecord.id.desc()).limit(limit)
        try:
            with self._session_factory() as session:
                return [
                    AuditLogEntry(
                        correlation_id=record.request_id,
                        event=AuditEvent(record.event),
                        details=record.details or "",
                        created_at=record.created_at,
                    )
                    for record in session.scalars(stmt)
                ]
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to read audit logs") from e

    def _slot_taken(self, session: Session, booking: Booking) -> bool:
        stmt = select(BookingRecord.id).where(
            BookingRecord.event_date == booking.event_date,
            BookingRecord.event_time == booking.event_time,
        )
        return session.scalar(stmt) is not None


def _to_record(booking: Booking) -> BookingRecord:
    return BookingRecord(
        booking_id=booking.booking_id,
        client_name=booking.client_name,
        client_email=booking.client_email,
        client_phone=booking.client_phone,
        event_date=booking.event_date,
        event_time=booking.event_time,
        event_type=booking.event_type.value,
        location=booking.location,
        message=booking.message,
        duration=booking.duration_minutes,
        status=booking.status.value,
        calendar_event_id=booking.calendar_event_id,
    )


def _to_booking(record: BookingRecord) -> Booking:
    return Booking(
        booking_id=record.booking_id,
        client_name=record.client_name,
        client_email=record.client_email,
        client_phone=record.client_phone,
        event_date=record.event_date,
        event_time=record.event_time,
        event_type=EventType(record.event_type),
        location=record.location,
        message=record.message,
        duration_minutes=record.duration,
        status=BookingStatus(record.status),
        calendar_event_id=record.calendar_event_id,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
