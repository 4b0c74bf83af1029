from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Loại sự kiện chấm công lưu trong CSDL."""

    ARRIVAL = "check_in"
    DEPARTURE = "check_out"


class DayState(str, Enum):
    """Trạng thái trong ngày của một nhân viên (suy ra, không lưu)."""

    ABSENT = "absent"
    ARRIVED = "arrived"
    DEPARTED = "departed"


class MarkOutcome(str, Enum):
    """Kết quả của một lần gửi mã OTP."""

    ARRIVAL_RECORDED = "arrival_recorded"
    DEPARTURE_RECORDED = "departure_recorded"
    INVALID_FORMAT = "invalid_format"
    INVALID_OR_EXPIRED = "invalid_or_expired"
    ALREADY_COMPLETE = "already_complete"
