from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from booking_api.application.ports.calendar import CalendarPort
from booking_api.application.utils.slots import generate_slot_starts
from booking_api.domain.entities.availability import AvailabilitySlot, BusyInterval, WorkingHours


@dataclass(frozen=True)
class AvailabilityResult:
    day: date
    duration_minutes: int
    slots: list[AvailabilitySlot]
    calendar_checked: bool


class ConflictChecker:
    """Drops candidate slots that overlap busy intervals reported by the calendar."""

    def __init__(self, calendar: CalendarPort, timezone: ZoneInfo) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def busy_intervals(self, day: date) -> list[BusyInterval] | None:
        """Busy intervals for the whole day, or None when the calendar could not be read."""
        start_of_day = datetime.combine(day, time.min, tzinfo=self._timezone)
        end_of_day = datetime.combine(day, time.max, tzinfo=self._timezone)
        try:
            events = self._calendar.list_events(start_of_day, end_of_day)
        except Exception as e:
            self._logger.warning(
                "Calendar availability check failed; treating day as free",
                extra={"error": str(e)},
            )
            return None
        self._logger.info("Existing events found", extra={"slot_count": len(events)})
        return events

    def filter_slots(
        self,
        starts: Iterable[datetime],
        duration_minutes: int,
        busy: list[BusyInterval],
    ) -> list[AvailabilitySlot]:
        duration = timedelta(minutes=duration_minutes)
        slots: list[AvailabilitySlot] = []
        for start in starts:
            end = start + duration
            if any(interval.overlaps(start, end) for interval in busy):
                continue
            slots.append(AvailabilitySlot(start=start))
        return slots


class CheckAvailabilityUseCase:
    def __init__(
        self,
        calendar: CalendarPort,
        working_hours: WorkingHours,
        timezone: ZoneInfo,
        default_duration_minutes: int = 120,
    ) -> None:
        self._checker = ConflictChecker(calendar=calendar, timezone=timezone)
        self.default_duration_minutes = default_duration_minutes
        self._working_hours = working_hours
        self._timezone = timezone

    def execute(self, day: date, duration_minutes: int) -> AvailabilityResult:
        starts = generate_slot_starts(day, duration_minutes, self._working_hours, self._timezone)
        busy = self._checker.busy_intervals(day)
        slots = self._checker.filter_slots(starts, duration_minutes, busy or [])
        return AvailabilityResult(
            day=day,
            duration_minutes=duration_minutes,
            slots=slots,
            calendar_checked=busy is not None,
        )
