from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from booking_api.application.exceptions import ValidationFailed
from booking_api.domain.entities.event_type import EventType

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 720


class BookingRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    client_name: str = Field(alias="clientName", min_length=2)
    client_email: EmailStr = Field(alias="clientEmail")
    client_phone: str = Field(alias="clientPhone", min_length=10)
    event_date: date = Field(alias="eventDate")
    event_time: str = Field(alias="eventTime")
    event_type: EventType = Field(alias="eventType")
    location: str = Field(alias="location", min_length=3)
    message: str | None = Field(default=None, alias="message")
    duration: int | None = Field(
        default=None, alias="duration", ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES
    )

    @field_validator("client_email", mode="after")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("event_date", mode="before")
    @classmethod
    def _parse_iso_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                raise ValueError("Date must be an ISO 8601 date (YYYY-MM-DD)")
        return value

    @field_validator("event_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        match = TIME_PATTERN.match(value)
        if not match:
            raise ValueError("Time must be in 24-hour HH:MM format")
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    @field_validator("message")
    @classmethod
    def _blank_message_is_none(cls, value: str | None) -> str | None:
        return value or None

    @classmethod
    def parse_payload(cls, payload: Any) -> "BookingRequestDTO":
        """Validate a raw JSON body, raising ValidationFailed with per-field errors."""
        if not isinstance(payload, dict):
            raise ValidationFailed([{"param": "body", "msg": "Request body must be a JSON object"}])
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise ValidationFailed(_to_field_errors(e)) from e


def _to_field_errors(error: ValidationError) -> list[dict[str, str]]:
    issues: list[dict[str, str]] = []
    for item in error.errors():
        loc = item.get("loc") or ()
        param = str(loc[0]) if loc else "unknown"
        msg = str(item.get("msg") or "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        issues.append({"param": param, "msg": msg})
    return issues
