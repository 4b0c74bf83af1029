from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ...common.datetime_utils import format_duration, format_time
from ...core.enums import EventKind, MarkOutcome
from ..model import AttendanceEvent, DailyStatus
from .base import AttendanceStrategy, TransitionDecision


class DepartureStrategy(AttendanceStrategy):
    """Second valid code of the day; closes the working period."""

    def decide(self, status: DailyStatus) -> TransitionDecision:
        return TransitionDecision(kind=EventKind.DEPARTURE, outcome=MarkOutcome.DEPARTURE_RECORDED)

    def describe(self, *, event: Optional[AttendanceEvent], status: DailyStatus, tz: tzinfo) -> str:
        worked = event.timestamp - status.arrival.timestamp
        return (
            f"🏠 Absen Pulang tercatat!\n⏰ Waktu: {format_time(event.timestamp, tz)}"
            f"\n⌛ Durasi kerja: {format_duration(worked)}"
        )
