from __future__ import annotations

from datetime import date, datetime, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.otp_attendance.otp_attendance.attendance.model import AttendanceEvent
from src.otp_attendance.otp_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.otp_attendance.otp_attendance.core.enums import EventKind
from src.otp_attendance.otp_attendance.core.exceptions import DuplicateEventError, PersistenceError
from src.otp_attendance.otp_attendance.database.bootstrap import (
    SCHEMA_PATH,
    _strip_create_db_and_use,
    iter_sql_statements,
)


class FakeCursor:
    def __init__(self, *, error=None, rows=None):
        self.error = error
        self.rows = rows or []
        self.executed = []
        self.lastrowid = 7

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchall(self):
        return self.rows

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeFactory:
    def __init__(self, cursor):
        self.connection = FakeConnection(cursor)

    def connect(self):
        return self.connection


def _event(tz) -> AttendanceEvent:
    return AttendanceEvent(
        user_id=42,
        username="budi",
        first_name="Budi",
        last_name=None,
        timestamp=datetime(2025, 3, 10, 8, 55, tzinfo=tz),
        kind=EventKind.ARRIVAL,
        work_date=date(2025, 3, 10),
    )


def test_insert_stores_utc_and_returns_id(tz):
    cur = FakeCursor()
    factory = FakeFactory(cur)
    repo = MySQLAttendanceRepository(factory, tz=tz)

    saved = repo.insert_event(_event(tz))

    assert saved.event_id == 7
    params = cur.executed[0][1]
    assert params[4] == datetime(2025, 3, 10, 1, 55)
    assert params[5] == "check_in"
    assert factory.connection.committed


def test_duplicate_key_maps_to_duplicate_event(tz):
    err = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeFactory(FakeCursor(error=err))
    repo = MySQLAttendanceRepository(factory, tz=tz)

    with pytest.raises(DuplicateEventError) as exc:
        repo.insert_event(_event(tz))

    assert exc.value.cause is err
    assert factory.connection.rolled_back


def test_other_driver_errors_map_to_persistence_error(tz):
    err = mysql.connector.OperationalError(msg="Lost connection", errno=errorcode.CR_SERVER_LOST)
    repo = MySQLAttendanceRepository(FakeFactory(FakeCursor(error=err)), tz=tz)

    with pytest.raises(PersistenceError) as exc:
        repo.events_for_date(date(2025, 3, 10))

    assert not isinstance(exc.value, DuplicateEventError)
    assert exc.value.operation == "load daily attendance"


def test_rows_are_read_back_in_reference_timezone(tz):
    row = {
        "event_id": 3,
        "user_id": 42,
        "username": "budi",
        "first_name": "Budi",
        "last_name": "",
        "occurred_at": datetime(2025, 3, 10, 10, 30),
        "kind": "check_out",
        "work_date": date(2025, 3, 10),
    }
    repo = MySQLAttendanceRepository(FakeFactory(FakeCursor(rows=[row])), tz=tz)

    (event,) = repo.events_for_user_and_date(42, date(2025, 3, 10))

    assert event.kind == EventKind.DEPARTURE
    assert event.last_name is None
    assert event.timestamp == datetime(2025, 3, 10, 10, 30, tzinfo=timezone.utc)
    assert event.timestamp.hour == 17


def test_get_alias_missing_returns_none(tz):
    repo = MySQLAttendanceRepository(FakeFactory(FakeCursor()), tz=tz)
    assert repo.get_alias(1) is None


def test_iter_sql_statements_respects_quotes_and_comments():
    sql = "-- header; ignored\nCREATE TABLE a (x VARCHAR(5) DEFAULT ';');\n\nINSERT INTO a VALUES ('b;c');"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x VARCHAR(5) DEFAULT ';')",
        "INSERT INTO a VALUES ('b;c')",
    ]


def test_schema_declares_per_day_uniqueness():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    events_table = next(s for s in statements if "attendance_events" in s and s.upper().startswith("CREATE TABLE"))
    assert "UNIQUE KEY uq_attendance_user_date_kind (user_id, work_date, kind)" in events_table


def test_unreachable_server_is_a_persistence_error(tz):
    class DownFactory:
        def connect(self):
            raise mysql.connector.InterfaceError(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR)

    repo = MySQLAttendanceRepository(DownFactory(), tz=tz)

    with pytest.raises(PersistenceError) as exc:
        repo.upsert_alias(1, "Budi")
    assert exc.value.operation == "set user alias"
