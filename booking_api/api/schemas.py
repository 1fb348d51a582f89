from __future__ import annotations

from pydantic import BaseModel, Field

from booking_api.domain.entities.booking import Booking


class ErrorResponseSchema(BaseModel):
    success: bool = False
    error: str


class FieldErrorSchema(BaseModel):
    param: str
    msg: str


class ValidationErrorResponseSchema(BaseModel):
    success: bool = False
    errors: list[FieldErrorSchema]


class SlotSchema(BaseModel):
    time: str
    available: bool = True
    datetime: str


class AvailabilityResponseSchema(BaseModel):
    success: bool = True
    date: str
    available_slots: list[SlotSchema] = Field(default_factory=list)
    duration_minutes: int


class BookingCreatedResponseSchema(BaseModel):
    success: bool = True
    booking_id: str
    calendar_event_id: str | None = None
    message: str


class BookingSchema(BaseModel):
    booking_id: str
    client_name: str
    client_email: str
    client_phone: str
    event_date: str
    event_time: str
    event_type: str
    location: str
    message: str | None = None
    duration: int
    status: str
    calendar_event_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSchema":
        return cls(
            booking_id=booking.booking_id,
            client_name=booking.client_name,
            client_email=booking.client_email,
            client_phone=booking.client_phone,
            event_date=booking.event_date.isoformat(),
            event_time=booking.event_time,
            event_type=booking.event_type.value,
            location=booking.location,
            message=booking.message,
            duration=booking.duration_minutes,
            status=booking.status.value,
            calendar_event_id=booking.calendar_event_id,
            created_at=booking.created_at.isoformat() if booking.created_at else None,
            updated_at=booking.updated_at.isoformat() if booking.updated_at else None,
        )


class BookingListResponseSchema(BaseModel):
    success: bool = True
    bookings: list[BookingSchema]
