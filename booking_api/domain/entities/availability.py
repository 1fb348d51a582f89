from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo


@dataclass(frozen=True)
class WorkingHours:
    start_hour: int = 9
    end_hour: int = 18
    # When inclusive, a slot may end anywhere inside the closing hour (18:30 with end_hour=18).
    end_inclusive: bool = True
    granularity_minutes: int = 30

    def __post_init__(self) -> None:
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(f"Invalid working hours {self.start_hour}-{self.end_hour}")
        if self.granularity_minutes <= 0:
            raise ValueError("granularity_minutes must be positive")

    def opening(self, day: date, tz: tzinfo) -> datetime:
        return datetime(day.year, day.month, day.day, tzinfo=tz) + timedelta(hours=self.start_hour)

    def closing(self, day: date, tz: tzinfo) -> datetime:
        return datetime(day.year, day.month, day.day, tzinfo=tz) + timedelta(hours=self.end_hour)

    def latest_end(self, day: date, tz: tzinfo) -> datetime:
        """Upper bound for a slot's end; exclusive when end_inclusive, inclusive otherwise."""
        closing = self.closing(day, tz)
        return closing + timedelta(hours=1) if self.end_inclusive else closing

    def accepts_end(self, day: date, tz: tzinfo, slot_end: datetime) -> bool:
        if self.end_inclusive:
            return slot_end < self.latest_end(day, tz)
        return slot_end <= self.latest_end(day, tz)


@dataclass(frozen=True)
class AvailabilitySlot:
    start: datetime
    available: bool = True

    @property
    def time(self) -> str:
        return self.start.strftime("%H:%M")

    def to_dict(self) -> dict[str, object]:
        return {"time": self.time, "available": self.available, "datetime": self.start.isoformat()}


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime
    event_id: str | None = None

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start
