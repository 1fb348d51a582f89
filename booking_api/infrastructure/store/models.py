from sqlalchemy import Column, Date, DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

SLOT_CONSTRAINT_NAME = "uq_bookings_event_slot"


class BookingRecord(Base):
    __tablename__ = "bookings"
    __table_args__ = (UniqueConstraint("event_date", "event_time", name=SLOT_CONSTRAINT_NAME),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(64), unique=True, nullable=False, index=True)

    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=False)
    client_phone = Column(String(64), nullable=False)

    event_date = Column(Date, nullable=False)
    event_time = Column(String(5), nullable=False)
    event_type = Column(String(32), nullable=False)
    location = Column(Text, nullable=False)
    message = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, default=120, server_default="120")
    status = Column(String(32), nullable=False, default="confirmed", server_default="confirmed")
    calendar_event_id = Column(String(255), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class AuditLogRecord(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(String(128), nullable=True)
    event = Column(String(64), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
