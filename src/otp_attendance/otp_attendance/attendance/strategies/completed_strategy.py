from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ...core.enums import MarkOutcome
from ..model import AttendanceEvent, DailyStatus
from .base import AttendanceStrategy, TransitionDecision


class CompletedStrategy(AttendanceStrategy):
    """Both slots taken; nothing more is written today."""

    def decide(self, status: DailyStatus) -> TransitionDecision:
        return TransitionDecision(kind=None, outcome=MarkOutcome.ALREADY_COMPLETE)

    def describe(self, *, event: Optional[AttendanceEvent], status: DailyStatus, tz: tzinfo) -> str:
        return "❌ Anda sudah absen lengkap hari ini (masuk dan pulang)!"
