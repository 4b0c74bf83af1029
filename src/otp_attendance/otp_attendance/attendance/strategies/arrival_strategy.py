from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ...common.datetime_utils import format_time
from ...core.enums import EventKind, MarkOutcome
from ..model import AttendanceEvent, DailyStatus
from .base import AttendanceStrategy, TransitionDecision


class ArrivalStrategy(AttendanceStrategy):
    """First valid code of the day."""

    def decide(self, status: DailyStatus) -> TransitionDecision:
        return TransitionDecision(kind=EventKind.ARRIVAL, outcome=MarkOutcome.ARRIVAL_RECORDED)

    def describe(self, *, event: Optional[AttendanceEvent], status: DailyStatus, tz: tzinfo) -> str:
        return f"✅ Absen Masuk tercatat!\n⏰ Waktu: {format_time(event.timestamp, tz)}"
