from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from itertools import groupby
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceEvent, DailyStatus, UserAlias
from ..attendance.repository import AliasRepository, AttendanceRepository
from ..common.datetime_utils import (
    format_duration,
    format_long_date,
    format_time,
    is_late,
    now_local,
)
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_LATE_HOUR
from ..core.enums import DayState
from ..core.exceptions import ValidationError

EXPORT_HEADER = ["ID", "User ID", "Username", "First Name", "Last Name", "Date", "Type", "Time", "Timestamp"]


@dataclass(frozen=True)
class DailySummaryRow:
    user_id: int
    display_name: str
    arrival_time: Optional[str]
    departure_time: Optional[str]
    is_late: bool
    duration: Optional[str]


@dataclass(frozen=True)
class DailySummary:
    work_date: date
    rows: List[DailySummaryRow] = field(default_factory=list)

    @property
    def total_users(self) -> int:
        return len(self.rows)

    @property
    def arrival_count(self) -> int:
        return sum(1 for r in self.rows if r.arrival_time is not None)

    @property
    def departure_count(self) -> int:
        return sum(1 for r in self.rows if r.departure_time is not None)


@dataclass(frozen=True)
class ExportRow:
    """One raw event, flattened for CSV."""

    event_id: Optional[int]
    user_id: int
    username: str
    first_name: str
    last_name: str
    date: str
    kind: str
    time: str
    timestamp: str

    def as_list(self) -> list:
        return [
            "" if self.event_id is None else self.event_id,
            self.user_id,
            self.username,
            self.first_name,
            self.last_name,
            self.date,
            self.kind,
            self.time,
            self.timestamp,
        ]


def display_name(event: AttendanceEvent, alias: Optional[UserAlias]) -> str:
    """Alias wins over the names the event was recorded with."""
    if alias is not None and alias.first_name:
        return alias.full_name
    return event.full_name


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        aliases: AliasRepository,
        *,
        tz: tzinfo,
        late_hour: int = DEFAULT_LATE_HOUR,
    ):
        self._attendance = attendance
        self._aliases = aliases
        self._tz = tz
        self._late_hour = int(late_hour)

    def _today(self) -> date:
        return now_local(self._tz).date()

    def _is_late(self, event: AttendanceEvent) -> bool:
        return is_late(event.timestamp, self._tz, self._late_hour)

    def _time(self, event: Optional[AttendanceEvent], fmt: str = "%H:%M") -> Optional[str]:
        return format_time(event.timestamp, self._tz, fmt) if event else None

    # ----- daily summary -----

    def daily_summary(self, work_date: date | None = None) -> DailySummary:
        work_date = work_date or self._today()
        events = self._attendance.events_for_date(work_date)

        by_user: Dict[int, List[AttendanceEvent]] = {}
        for e in events:
            by_user.setdefault(e.user_id, []).append(e)

        alias_cache: Dict[int, Optional[UserAlias]] = {}
        rows: List[DailySummaryRow] = []
        for user_id in sorted(by_user):
            status = DailyStatus.from_events(by_user[user_id])
            first = status.arrival or status.departure
            if user_id not in alias_cache:
                alias_cache[user_id] = self._aliases.get_alias(user_id)
            duration = status.duration
            rows.append(
                DailySummaryRow(
                    user_id=user_id,
                    display_name=display_name(first, alias_cache[user_id]),
                    arrival_time=self._time(status.arrival),
                    departure_time=self._time(status.departure),
                    is_late=bool(status.arrival and self._is_late(status.arrival)),
                    duration=format_duration(duration) if duration is not None else None,
                )
            )
        return DailySummary(work_date=work_date, rows=rows)

    def render_daily_summary(self, summary: DailySummary) -> str:
        if not summary.rows:
            return "📭 Belum ada yang absen hari ini."

        lines = [f"📊 Laporan Absensi Hari Ini\n📅 {format_long_date(summary.work_date)}", ""]
        for i, row in enumerate(summary.rows, start=1):
            lines.append(f"{i}. {row.display_name}")
            if row.arrival_time:
                marker = "⚠️" if row.is_late else "✅"
                lines.append(f"   ⏰ Masuk: {row.arrival_time} {marker}")
            else:
                lines.append("   ⏰ Masuk: -")
            lines.append(f"   🏠 Pulang: {row.departure_time or '-'}")
            if row.duration:
                lines.append(f"   ⌛ Durasi: {row.duration}")
            lines.append("")

        lines.append("Ringkasan:")
        lines.append(f"👥 Total Karyawan: {summary.total_users}")
        lines.append(f"📝 Check-in: {summary.arrival_count}")
        lines.append(f"🏠 Check-out: {summary.departure_count}")
        return "\n".join(lines)

    # ----- range export -----

    def range_export(self, start: date, end: date) -> List[ExportRow]:
        if start > end:
            raise ValidationError("Tanggal mulai tidak boleh lebih besar dari tanggal akhir")

        events = sorted(
            self._attendance.events_for_date_range(start, end),
            key=lambda e: (e.work_date, e.timestamp),
        )
        return [
            ExportRow(
                event_id=e.event_id,
                user_id=e.user_id,
                username=e.username,
                first_name=e.first_name,
                last_name=e.last_name or "",
                date=e.work_date.strftime("%Y-%m-%d"),
                kind=e.kind.value,
                time=self._time(e, "%H:%M:%S"),
                timestamp=e.timestamp.astimezone(self._tz).isoformat(timespec="seconds"),
            )
            for e in events
            if start <= e.work_date <= end
        ]

    # ----- history -----

    def history(
        self,
        user_id: int,
        window_days: int = DEFAULT_HISTORY_DAYS,
        *,
        today: date | None = None,
    ) -> List[AttendanceEvent]:
        if window_days < 0:
            raise ValidationError("Jumlah hari tidak valid")
        try:
            since = (today or self._today()) - timedelta(days=window_days)
        except OverflowError:
            # window reaches past the first representable date
            since = date.min
        events = [e for e in self._attendance.events_for_user_since(int(user_id), since) if e.work_date >= since]
        # Newest day first, chronological within a day.
        events.sort(key=lambda e: e.timestamp)
        events.sort(key=lambda e: e.work_date, reverse=True)
        return events

    def render_history(self, events: Sequence[AttendanceEvent], window_days: int = DEFAULT_HISTORY_DAYS) -> str:
        if not events:
            return f"📭 Tidak ada riwayat absensi dalam {window_days} hari terakhir."

        lines = [f"📈 Riwayat Absensi Anda ({window_days} hari terakhir)", ""]
        days = 0
        for work_date, day_events in groupby(events, key=lambda e: e.work_date):
            days += 1
            status = DailyStatus.from_events(list(day_events))
            lines.append(f"{days}. {format_long_date(work_date)}")
            if status.arrival:
                marker = "⚠️" if self._is_late(status.arrival) else "🟢"
                lines.append(f"   ⏰ Masuk: {self._time(status.arrival)} {marker}")
            else:
                lines.append("   ⏰ Masuk: -")
            lines.append(f"   🏠 Pulang: {self._time(status.departure) or '-'}")
            lines.append("")

        lines.append("Ringkasan:")
        lines.append(f"📊 Total Hari: {days}")
        lines.append(f"📝 Total Absensi: {len(events)}")
        return "\n".join(lines)

    # ----- status -----

    def render_status(self, status: DailyStatus) -> str:
        state = status.state
        if state == DayState.ABSENT:
            return "❌ Status Absensi\n\nAnda belum absen hari ini.\nKirim OTP Anda untuk check-in."
        if state == DayState.ARRIVED:
            return (
                f"🟡 Status Absensi\n\n✅ Check-in: {self._time(status.arrival)}\n❌ Check-out: Belum"
                "\n\nKirim OTP Anda untuk check-out."
            )
        return (
            f"✅ Status Absensi\n\n✅ Check-in: {self._time(status.arrival)}"
            f"\n✅ Check-out: {self._time(status.departure)}"
            f"\n⌛ Durasi kerja: {format_duration(status.duration)}"
            "\n\nAbsensi hari ini sudah lengkap."
        )


def event_to_dict(event: AttendanceEvent, tz: tzinfo) -> dict:
    return {
        "event_id": event.event_id,
        "user_id": event.user_id,
        "username": event.username,
        "first_name": event.first_name,
        "last_name": event.last_name,
        "kind": event.kind.value,
        "date": event.work_date.strftime("%Y-%m-%d"),
        "time": format_time(event.timestamp, tz, "%H:%M:%S"),
        "timestamp": event.timestamp.astimezone(tz).isoformat(timespec="seconds"),
    }
