from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import DayState
from .model import DailyStatus
from .strategies.arrival_strategy import ArrivalStrategy
from .strategies.base import AttendanceStrategy
from .strategies.completed_strategy import CompletedStrategy
from .strategies.departure_strategy import DepartureStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the transition for the user's current day state."""

    def for_status(self, status: DailyStatus) -> AttendanceStrategy:
        state = status.state
        if state == DayState.ABSENT:
            return ArrivalStrategy()
        if state == DayState.ARRIVED:
            return DepartureStrategy()
        return CompletedStrategy()
