from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from werkzeug.security import generate_password_hash

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AliasRepository, AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import load_timezone
from .core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_ISSUER, DEFAULT_LATE_HOUR
from .core.exceptions import ConfigurationError
from .credentials.totp import TOTPService, validate_secret
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    alias_repo: AliasRepository

    totp: TOTPService
    attendance_service: AttendanceService
    report_service: ReportService

    tz: tzinfo
    admin_password_hash: Optional[str]
    totp_issuer: str
    history_days: int


def build_container(
    *,
    db_config: dict | None,
    totp_secret: str,
    admin_password: str = "",
    timezone_name: str | None = None,
    late_hour: int = DEFAULT_LATE_HOUR,
    history_days: int = DEFAULT_HISTORY_DAYS,
    totp_issuer: str = DEFAULT_ISSUER,
    repository=None,
) -> Container:
    """Wire repositories and services.

    ``repository`` replaces the MySQL store (it must implement both the
    attendance and alias contracts); ``db_config`` is ignored then.
    """
    if not validate_secret(totp_secret):
        raise ConfigurationError("TOTP_SECRET must be base32 and decode to at least 16 bytes")

    tz = load_timezone(timezone_name)

    conn = None
    if repository is None:
        if not db_config:
            raise ConfigurationError("DB_CONFIG is required")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        repository = MySQLAttendanceRepository(conn, tz=tz)

    totp = TOTPService(totp_secret)
    attendance_service = AttendanceService(
        repository,
        repository,
        totp,
        tz=tz,
        strategy_factory=AttendanceStrategyFactory(),
    )
    report_service = ReportService(repository, repository, tz=tz, late_hour=late_hour)

    return Container(
        conn=conn,
        attendance_repo=repository,
        alias_repo=repository,
        totp=totp,
        attendance_service=attendance_service,
        report_service=report_service,
        tz=tz,
        admin_password_hash=generate_password_hash(admin_password) if admin_password else None,
        totp_issuer=totp_issuer,
        history_days=int(history_days),
    )
