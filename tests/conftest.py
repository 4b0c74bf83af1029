from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.otp_attendance.otp_attendance.attendance.model import AttendanceEvent, UserAlias
from src.otp_attendance.otp_attendance.attendance.service import AttendanceService
from src.otp_attendance.otp_attendance.core.exceptions import DuplicateEventError
from src.otp_attendance.otp_attendance.credentials.totp import TOTPService
from src.otp_attendance.otp_attendance.reports.service import ReportService

# RFC 6238 reference key "12345678901234567890"
SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
JAKARTA = ZoneInfo("Asia/Jakarta")


class InMemoryAttendance:
    """Store fake with the same (user_id, work_date, kind) uniqueness as MySQL."""

    def __init__(self):
        self.events: list[AttendanceEvent] = []
        self.aliases: dict[int, UserAlias] = {}
        self._id = 0
        self._lock = threading.Lock()

    def insert_event(self, event: AttendanceEvent) -> AttendanceEvent:
        with self._lock:
            for e in self.events:
                if (e.user_id, e.work_date, e.kind) == (event.user_id, event.work_date, event.kind):
                    raise DuplicateEventError("insert attendance event")
            self._id += 1
            saved = AttendanceEvent(
                event_id=self._id,
                user_id=event.user_id,
                username=event.username,
                first_name=event.first_name,
                last_name=event.last_name,
                timestamp=event.timestamp,
                kind=event.kind,
                work_date=event.work_date,
            )
            self.events.append(saved)
            return saved

    def events_for_user_and_date(self, user_id: int, work_date: date):
        items = [e for e in self.events if e.user_id == user_id and e.work_date == work_date]
        return sorted(items, key=lambda e: e.timestamp)

    def events_for_date(self, work_date: date):
        return sorted((e for e in self.events if e.work_date == work_date), key=lambda e: e.timestamp)

    def events_for_date_range(self, start_date: date, end_date: date):
        items = [e for e in self.events if start_date <= e.work_date <= end_date]
        return sorted(items, key=lambda e: (e.work_date, e.timestamp))

    def events_for_user_since(self, user_id: int, since_date: date):
        items = [e for e in self.events if e.user_id == user_id and e.work_date >= since_date]
        items.sort(key=lambda e: e.timestamp)
        items.sort(key=lambda e: e.work_date, reverse=True)
        return items

    def upsert_alias(self, user_id: int, first_name: str, last_name: Optional[str] = None) -> UserAlias:
        alias = UserAlias(user_id=user_id, first_name=first_name, last_name=last_name)
        self.aliases[user_id] = alias
        return alias

    def get_alias(self, user_id: int) -> Optional[UserAlias]:
        return self.aliases.get(user_id)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 8, 55, 0, tzinfo=JAKARTA)


@pytest.fixture
def repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def totp() -> TOTPService:
    return TOTPService(SECRET)


@pytest.fixture
def attendance_service(repo, totp) -> AttendanceService:
    return AttendanceService(repo, repo, totp, tz=JAKARTA)


@pytest.fixture
def report_service(repo) -> ReportService:
    return ReportService(repo, repo, tz=JAKARTA, late_hour=9)


@pytest.fixture
def secret() -> str:
    return SECRET


@pytest.fixture
def tz() -> ZoneInfo:
    return JAKARTA
