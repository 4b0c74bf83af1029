from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import DayState, EventKind, MarkOutcome


def _join_name(first_name: str, last_name: Optional[str]) -> str:
    if last_name:
        return f"{first_name} {last_name}"
    return first_name


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): Một lần chấm công (vào hoặc ra).

    `timestamp` luôn có múi giờ; `work_date` là ngày theo múi giờ tham chiếu.
    """

    user_id: int
    username: str
    first_name: str
    last_name: Optional[str]
    timestamp: datetime
    kind: EventKind
    work_date: date
    event_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return _join_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class UserAlias:
    """Tên hiển thị do người dùng tự đặt."""

    user_id: int
    first_name: str
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return _join_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class DailyStatus:
    """Read-model: trạng thái chấm công của một người trong một ngày."""

    arrival: Optional[AttendanceEvent] = None
    departure: Optional[AttendanceEvent] = None

    @classmethod
    def from_events(cls, events: Sequence[AttendanceEvent]) -> "DailyStatus":
        arrival = next((e for e in events if e.kind == EventKind.ARRIVAL), None)
        departure = next((e for e in events if e.kind == EventKind.DEPARTURE), None)
        return cls(arrival=arrival, departure=departure)

    @property
    def has_arrived(self) -> bool:
        return self.arrival is not None

    @property
    def has_departed(self) -> bool:
        return self.departure is not None

    @property
    def state(self) -> DayState:
        if self.has_arrived and self.has_departed:
            return DayState.DEPARTED
        if self.has_arrived:
            return DayState.ARRIVED
        return DayState.ABSENT

    @property
    def duration(self) -> Optional[timedelta]:
        if self.arrival and self.departure:
            return self.departure.timestamp - self.arrival.timestamp
        return None


@dataclass(frozen=True)
class AttendanceResult:
    success: bool
    outcome: MarkOutcome
    message: str
    record: Optional[AttendanceEvent] = None
    duration: Optional[timedelta] = None
