from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, UserAlias


class AttendanceRepository(Protocol):
    def insert_event(self, event: AttendanceEvent) -> AttendanceEvent:
        """Persist a new event and return it with its id.

        Raises DuplicateEventError when (user_id, work_date, kind) exists.
        """

        raise NotImplementedError

    def events_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def events_for_date(self, work_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def events_for_date_range(self, start_date: date, end_date: date) -> Sequence[AttendanceEvent]:
        """Inclusive on both ends; ordered by date then timestamp."""

        raise NotImplementedError

    def events_for_user_since(self, user_id: int, since_date: date) -> Sequence[AttendanceEvent]:
        """Ordered by date descending, timestamp ascending within a date."""

        raise NotImplementedError


class AliasRepository(Protocol):
    def upsert_alias(self, user_id: int, first_name: str, last_name: Optional[str] = None) -> UserAlias:
        raise NotImplementedError

    def get_alias(self, user_id: int) -> Optional[UserAlias]:
        raise NotImplementedError
