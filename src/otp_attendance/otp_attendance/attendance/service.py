from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import now_local, to_local
from ..common.validators import is_valid_code, require_non_empty
from ..core.enums import MarkOutcome
from ..core.exceptions import DuplicateEventError, PersistenceError
from ..credentials.totp import TOTPService
from .factory import AttendanceStrategyFactory
from .model import AttendanceEvent, AttendanceResult, DailyStatus, UserAlias
from .repository import AliasRepository, AttendanceRepository

logger = logging.getLogger(__name__)

MSG_INVALID_FORMAT = "❌ Format OTP tidak valid. Harap masukkan 6 digit angka."
MSG_INVALID_OR_EXPIRED = "❌ Kode OTP tidak valid atau sudah kedaluwarsa. Silakan coba dengan kode yang baru."
MSG_ALREADY_RECORDED = "❌ Absensi ini sudah tercatat. Silakan cek /status."


class AttendanceService:
    """Use case: turn a verified OTP into the next attendance event of the day.

    Per user and date the events go ABSENT -> ARRIVED -> DEPARTED. The store's
    unique (user_id, work_date, kind) key settles concurrent submissions; the
    losing request is reported as already complete.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        aliases: AliasRepository,
        totp: TOTPService,
        *,
        tz: tzinfo,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._aliases = aliases
        self._totp = totp
        self._tz = tz
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def _now(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now is not None else now_local(self._tz)

    def today(self) -> date:
        return now_local(self._tz).date()

    def mark_attendance(
        self,
        user_id: int,
        username: str,
        first_name: str,
        last_name: Optional[str],
        code: str,
        *,
        now: datetime | None = None,
    ) -> AttendanceResult:
        if not is_valid_code(code):
            return AttendanceResult(success=False, outcome=MarkOutcome.INVALID_FORMAT, message=MSG_INVALID_FORMAT)

        now = self._now(now)
        if not self._totp.verify(code, now):
            logger.info("Rejected OTP for user_id=%s", user_id)
            return AttendanceResult(
                success=False, outcome=MarkOutcome.INVALID_OR_EXPIRED, message=MSG_INVALID_OR_EXPIRED
            )

        today = now.date()
        status = self.get_status(user_id, today=today)
        strategy = self._factory.for_status(status)
        decision = strategy.decide(status)

        if not decision.writes:
            return AttendanceResult(
                success=False,
                outcome=decision.outcome,
                message=strategy.describe(event=None, status=status, tz=self._tz),
            )

        event = AttendanceEvent(
            user_id=int(user_id),
            username=username,
            first_name=first_name,
            last_name=last_name or None,
            timestamp=now,
            kind=decision.kind,
            work_date=today,
        )
        try:
            saved = self._attendance.insert_event(event)
        except DuplicateEventError:
            logger.warning(
                "Concurrent %s for user_id=%s on %s already stored", decision.kind.value, user_id, today
            )
            return AttendanceResult(
                success=False, outcome=MarkOutcome.ALREADY_COMPLETE, message=MSG_ALREADY_RECORDED
            )
        except PersistenceError:
            logger.warning("Could not save %s for user_id=%s on %s", decision.kind.value, user_id, today)
            raise

        duration = saved.timestamp - status.arrival.timestamp if status.arrival is not None else None
        logger.info("Recorded %s for user_id=%s on %s", saved.kind.value, user_id, today)
        return AttendanceResult(
            success=True,
            outcome=decision.outcome,
            message=strategy.describe(event=saved, status=status, tz=self._tz),
            record=saved,
            duration=duration,
        )

    def get_status(self, user_id: int, *, today: date | None = None) -> DailyStatus:
        today = today or self.today()
        events = self._attendance.events_for_user_and_date(int(user_id), today)
        return DailyStatus.from_events(events)

    def set_alias(self, user_id: int, first_name: str, last_name: Optional[str] = None) -> UserAlias:
        first_name = require_non_empty(first_name, "Nama depan")
        last_name = (last_name or "").strip() or None
        return self._aliases.upsert_alias(int(user_id), first_name, last_name)

    def get_alias(self, user_id: int) -> Optional[UserAlias]:
        return self._aliases.get_alias(int(user_id))
