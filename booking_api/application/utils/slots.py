from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta, tzinfo

from booking_api.domain.entities.availability import WorkingHours


def generate_slot_starts(
    day: date,
    duration_minutes: int,
    working_hours: WorkingHours,
    tz: tzinfo,
) -> Iterator[datetime]:
    """Yield candidate start times for `day` at the working-hours granularity.

    Starts run from opening (inclusive) to closing (exclusive). A start is
    kept only if the appointment still ends within working hours, so a
    duration longer than the remaining window yields nothing.
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    step = timedelta(minutes=working_hours.granularity_minutes)
    duration = timedelta(minutes=duration_minutes)
    current = working_hours.opening(day, tz)
    closing = working_hours.closing(day, tz)

    while current < closing:
        if working_hours.accepts_end(day, tz, current + duration):
            yield current
        current += step
