from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EventKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent, UserAlias
from .repository import AliasRepository, AttendanceRepository

_EVENT_COLUMNS = "event_id, user_id, username, first_name, last_name, occurred_at, kind, work_date"


def _to_db_timestamp(value: datetime) -> datetime:
    # DATETIME columns are naive; store UTC.
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class MySQLAttendanceRepository(AttendanceRepository, AliasRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _row_to_event(self, r: Dict[str, Any]) -> AttendanceEvent:
        occurred_at = r["occurred_at"].replace(tzinfo=timezone.utc).astimezone(self._tz)
        return AttendanceEvent(
            event_id=int(r["event_id"]),
            user_id=int(r["user_id"]),
            username=r["username"],
            first_name=r["first_name"],
            last_name=r.get("last_name") or None,
            timestamp=occurred_at,
            kind=EventKind(r["kind"]),
            work_date=r["work_date"],
        )

    def _select(self, operation: str, where: str, params: tuple, order_by: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory, operation=operation) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events
                WHERE {where}
                ORDER BY {order_by}
                """,
                params,
            )
            return [self._row_to_event(r) for r in fetchall(cur)]

    def insert_event(self, event: AttendanceEvent) -> AttendanceEvent:
        # Raises DuplicateEventError when (user_id, work_date, kind) is taken.
        with db_cursor(self._conn_factory, operation="insert attendance event") as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(user_id, username, first_name, last_name, occurred_at, kind, work_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.user_id,
                    event.username,
                    event.first_name,
                    event.last_name,
                    _to_db_timestamp(event.timestamp),
                    event.kind.value,
                    event.work_date,
                ),
            )
            event_id = int(cur.lastrowid)
        return replace(event, event_id=event_id)

    def events_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        return self._select(
            "load attendance for user and date",
            "user_id=%s AND work_date=%s",
            (int(user_id), work_date),
            "occurred_at ASC",
        )

    def events_for_date(self, work_date: date) -> Sequence[AttendanceEvent]:
        return self._select("load daily attendance", "work_date=%s", (work_date,), "occurred_at ASC")

    def events_for_date_range(self, start_date: date, end_date: date) -> Sequence[AttendanceEvent]:
        return self._select(
            "load attendance range",
            "work_date BETWEEN %s AND %s",
            (start_date, end_date),
            "work_date ASC, occurred_at ASC",
        )

    def events_for_user_since(self, user_id: int, since_date: date) -> Sequence[AttendanceEvent]:
        return self._select(
            "load attendance history",
            "user_id=%s AND work_date >= %s",
            (int(user_id), since_date),
            "work_date DESC, occurred_at ASC",
        )

    def upsert_alias(self, user_id: int, first_name: str, last_name: Optional[str] = None) -> UserAlias:
        with db_cursor(self._conn_factory, operation="set user alias") as (_, cur):
            cur.execute(
                """
                INSERT INTO user_aliases(user_id, first_name, last_name)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE first_name=VALUES(first_name), last_name=VALUES(last_name)
                """,
                (int(user_id), first_name, last_name),
            )
        return UserAlias(user_id=int(user_id), first_name=first_name, last_name=last_name)

    def get_alias(self, user_id: int) -> Optional[UserAlias]:
        with db_cursor(self._conn_factory, operation="get user alias") as (_, cur):
            cur.execute(
                "SELECT user_id, first_name, last_name FROM user_aliases WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
        if not r:
            return None
        return UserAlias(user_id=int(r["user_id"]), first_name=r["first_name"], last_name=r.get("last_name") or None)
