from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, RecordSource
from .model import AttendanceRecord, IncomingAttendance


class AttendanceRepository(Protocol):
    def get_by_key(self, *, local_member_id: int, external_muster_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, incoming: IncomingAttendance, *, now: datetime) -> int:
        """Insert a new record and return its id.

        Raises DuplicateRecordError when the natural key already exists.
        """

        raise NotImplementedError

    def update_mutable(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        position: Optional[str],
        truck: Optional[str],
        notes: Optional[str],
        source: RecordSource,
        now: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_for_member_between(self, *, local_member_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent_for_member(self, *, local_member_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
