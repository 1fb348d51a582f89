from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from html import escape

from booking_api.domain.entities.booking import Booking
from booking_api.domain.entities.event_type import EVENT_TYPE_DETAILS


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html_body: str


def format_long_date(value: date) -> str:
    # "Wednesday, August 20, 2025"
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}, {value.year}"


def calendar_event_title(booking: Booking, business_name: str) -> str:
    details = EVENT_TYPE_DETAILS[booking.event_type]
    return f"{business_name} - {details.title} - {booking.client_name}"


def calendar_event_description(booking: Booking) -> str:
    details = EVENT_TYPE_DETAILS[booking.event_type]
    return (
        f"{details.description}\n\n"
        f"Client: {booking.client_name}\n"
        f"Email: {booking.client_email}\n"
        f"Phone: {booking.client_phone}\n"
        f"Location: {booking.location}\n\n"
        f"Message: {booking.message or ''}\n\n"
        f"Booking ID: {booking.booking_id}"
    )


def client_confirmation(booking: Booking, business_name: str) -> EmailContent:
    label = booking.event_type.label
    rows = _detail_rows(
        [
            ("Booking ID", booking.booking_id),
            ("Date", format_long_date(booking.event_date)),
            ("Time", booking.event_time),
            ("Session Type", label),
            ("Location", booking.location),
        ]
    )
    body = (
        f"<div>"
        f"<h2>Booking Confirmed!</h2>"
        f"<p>Dear {escape(booking.client_name)},</p>"
        f"<p>Thank you for choosing {escape(business_name)}. "
        f"Your {escape(booking.event_type.value)} session has been confirmed.</p>"
        f"<h3>Booking Details</h3>{rows}"
        f"<p>You'll receive a calendar invitation shortly. "
        f"Reply to this email if you need to reschedule.</p>"
        f"</div>"
    )
    return EmailContent(
        subject=f"Booking Confirmed - {label} Session | {business_name}",
        html_body=body,
    )


def business_notification(booking: Booking) -> EmailContent:
    rows = _detail_rows(
        [
            ("Name", booking.client_name),
            ("Email", booking.client_email),
            ("Phone", booking.client_phone),
            ("Booking ID", booking.booking_id),
            ("Type", booking.event_type.value),
            ("Date", format_long_date(booking.event_date)),
            ("Time", booking.event_time),
            ("Duration", f"{booking.duration_minutes} minutes"),
            ("Location", booking.location),
        ]
    )
    body = (
        f"<div>"
        f"<h2>New Booking Received!</h2>{rows}"
        f"<h3>Client Message</h3>"
        f"<p>{escape(booking.message or 'No message provided')}</p>"
        f"</div>"
    )
    return EmailContent(
        subject=(
            f"New Booking: {booking.client_name} - {booking.event_type.value} "
            f"on {format_long_date(booking.event_date)}"
        ),
        html_body=body,
    )


def _detail_rows(items: list[tuple[str, str]]) -> str:
    return "".join(f"<p><strong>{escape(label)}:</strong> {escape(value)}</p>" for label, value in items)
