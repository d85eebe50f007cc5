from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, EventType, ReconcileOutcome, RecordSource
from ..core.exceptions import DuplicateRecordError
from .model import AttendanceRecord, IncomingAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceReconciler:
    """Idempotent compare-and-write of one attendance line.

    Shared by the pull and webhook paths. Safe to run concurrently for the
    same key: storage enforces uniqueness of (member, muster) and a duplicate
    on insert is re-applied as an update.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def apply(
        self,
        *,
        local_member_id: int,
        external_muster_id: int,
        event_date: date,
        event_type: EventType,
        status: AttendanceStatus,
        position: Optional[str],
        truck: Optional[str],
        notes: Optional[str],
        source: RecordSource,
        icad_number: Optional[str] = None,
        call_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ReconcileOutcome:
        incoming = IncomingAttendance(
            local_member_id=int(local_member_id),
            external_muster_id=int(external_muster_id),
            event_date=event_date,
            event_type=event_type,
            status=status,
            source=source,
            position=position,
            truck=truck,
            notes=notes,
            icad_number=icad_number,
            call_type=call_type,
        )
        return self.apply_incoming(incoming, now=now)

    def apply_incoming(self, incoming: IncomingAttendance, *, now: Optional[datetime] = None) -> ReconcileOutcome:
        now = now or now_local()

        existing = self._get(incoming)
        if existing is None:
            try:
                self._attendance.insert(incoming, now=now)
                return ReconcileOutcome.CREATED
            except DuplicateRecordError:
                logger.info(
                    f"Attendance for member {incoming.local_member_id} muster {incoming.external_muster_id} "
                    "was created concurrently; applying as update"
                )
                existing = self._get(incoming)
                if existing is None:
                    raise

        if existing.mutable_fields() == incoming.mutable_fields():
            return ReconcileOutcome.UNCHANGED

        self._attendance.update_mutable(
            record_id=existing.record_id,
            status=incoming.status,
            position=incoming.position,
            truck=incoming.truck,
            notes=incoming.notes,
            source=incoming.source,
            now=now,
        )
        return ReconcileOutcome.UPDATED

    def _get(self, incoming: IncomingAttendance) -> Optional[AttendanceRecord]:
        return self._attendance.get_by_key(
            local_member_id=incoming.local_member_id,
            external_muster_id=incoming.external_muster_id,
        )
