from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StepStatus(str, Enum):
    ok = "ok"
    degraded = "degraded"
    fatal = "fatal"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one pipeline stage: Ok, Degraded(reason) or Fatal(reason)."""

    status: StepStatus
    value: Any = None
    reason: str | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "StepResult":
        return cls(status=StepStatus.ok, value=value)

    @classmethod
    def degraded(cls, reason: str) -> "StepResult":
        return cls(status=StepStatus.degraded, reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> "StepResult":
        return cls(status=StepStatus.fatal, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is StepStatus.ok
