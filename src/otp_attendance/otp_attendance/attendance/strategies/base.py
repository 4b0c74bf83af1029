from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from ...core.enums import EventKind, MarkOutcome
from ..model import AttendanceEvent, DailyStatus


@dataclass(frozen=True)
class TransitionDecision:
    kind: Optional[EventKind]
    outcome: MarkOutcome

    @property
    def writes(self) -> bool:
        return self.kind is not None


class AttendanceStrategy(ABC):
    """Strategy Pattern: one per day state, decides what the next code does."""

    @abstractmethod
    def decide(self, status: DailyStatus) -> TransitionDecision:
        raise NotImplementedError

    @abstractmethod
    def describe(self, *, event: Optional[AttendanceEvent], status: DailyStatus, tz: tzinfo) -> str:
        raise NotImplementedError
