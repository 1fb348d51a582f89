from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(str, Enum):
    consultation = "consultation"
    engagement = "engagement"
    wedding = "wedding"
    followup = "followup"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class EventTypeDetails:
    title: str
    description: str


EVENT_TYPE_DETAILS: dict[EventType, EventTypeDetails] = {
    EventType.consultation: EventTypeDetails(
        title="Initial Consultation",
        description="Wedding photography consultation and planning session",
    ),
    EventType.engagement: EventTypeDetails(
        title="Engagement Session",
        description="Engagement photography session",
    ),
    EventType.wedding: EventTypeDetails(
        title="Wedding Photography",
        description="Wedding day photography coverage",
    ),
    EventType.followup: EventTypeDetails(
        title="Follow-up Call",
        description="Post-session follow-up and planning",
    ),
}
