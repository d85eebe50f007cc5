from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

from ..attendance.reconciler import AttendanceReconciler
from ..common.datetime_utils import add_months, now_local
from ..core.constants import FULL_SYNC_MONTHS, INCREMENTAL_SYNC_FALLBACK_MONTHS
from ..core.enums import RecordSource, SyncLogStatus
from ..core.exceptions import ExternalApiError, ValidationError
from ..members.identity_map import MemberDirectory
from .audit import write_sync_log
from .batch import AttendanceBatch, MusterHeader
from .dlb_client import DlbClient
from .model import OPERATION_PULL, BatchCounts, SyncResult
from .repository import SyncLogRepository, SyncStateRepository

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "DLB integration not configured"


class PullSyncEngine:
    """Scheduled/manual pull of DLB attendance history into local records."""

    def __init__(
        self,
        client: Optional[DlbClient],
        directory: MemberDirectory,
        reconciler: AttendanceReconciler,
        states: SyncStateRepository,
        logs: SyncLogRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._client = client
        self._directory = directory
        self._reconciler = reconciler
        self._states = states
        self._logs = logs
        self._clock = clock

    def sync_recent(self, brigade_id: int, *, full_sync: bool = False) -> SyncResult:
        """Full sync covers the last 12 months; otherwise resume from the stored window end."""

        today = self._clock().date()
        if full_sync:
            from_date = add_months(today, -FULL_SYNC_MONTHS)
        else:
            state = self._states.get_state(brigade_id)
            if state is not None and state.sync_to_date is not None:
                from_date = state.sync_to_date
            else:
                from_date = add_months(today, -INCREMENTAL_SYNC_FALLBACK_MONTHS)
        return self.sync(brigade_id, min(from_date, today), today)

    def sync(self, brigade_id: int, from_date: date, to_date: date) -> SyncResult:
        if from_date > to_date:
            raise ValidationError("from_date must not be after to_date")

        if self._client is None:
            logger.warning(f"Pull sync for brigade {brigade_id} requested but DLB is not configured")
            return SyncResult(success=False, from_date=from_date, to_date=to_date, error=NOT_CONFIGURED_ERROR)

        now = self._clock()
        logger.info(f"Pull sync for brigade {brigade_id}: {from_date} to {to_date}")

        try:
            history = self._client.get_attendance_history(from_date, to_date)
        except ExternalApiError as e:
            logger.error(f"Pull sync for brigade {brigade_id} failed talking to DLB: {e}")
            return self._fail(brigade_id, str(e), from_date, to_date, now=now)

        batch: Optional[AttendanceBatch] = None
        try:
            identity = self._directory.map_of(brigade_id)
            batch = AttendanceBatch(self._reconciler, identity, source=RecordSource.PULL, now=now)
            for item in history:
                self._apply_history_item(batch, item)
            self._states.mark_completed(brigade_id, now=now, from_date=from_date, to_date=to_date)
        except Exception as e:
            logger.exception(f"Pull sync for brigade {brigade_id} aborted after fetching history")
            counts = batch.counts if batch is not None else BatchCounts()
            return self._fail(brigade_id, str(e), from_date, to_date, now=now, counts=counts)

        counts = batch.counts
        write_sync_log(
            self._logs,
            operation=OPERATION_PULL,
            reference_id=brigade_id,
            status=counts.log_status(),
            details={**counts.to_dict(), "from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
            now=now,
        )
        logger.info(f"Pull sync for brigade {brigade_id} done: {counts.to_dict()}")
        return SyncResult(success=True, from_date=from_date, to_date=to_date, counts=counts)

    def _fail(
        self,
        brigade_id: int,
        error: str,
        from_date: date,
        to_date: date,
        *,
        now: datetime,
        counts: Optional[BatchCounts] = None,
    ) -> SyncResult:
        """Record a failed run in SyncState and the sync log."""

        if counts is None:
            counts = BatchCounts()
        try:
            self._states.mark_failed(brigade_id, error_message=error)
        except Exception:
            logger.exception(f"Could not mark sync state failed for brigade {brigade_id}")
        write_sync_log(
            self._logs,
            operation=OPERATION_PULL,
            reference_id=brigade_id,
            status=SyncLogStatus.FAILED,
            details={**counts.to_dict(), "error": error, "from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
            now=now,
        )
        return SyncResult(success=False, from_date=from_date, to_date=to_date, counts=counts, error=error)

    @staticmethod
    def _apply_history_item(batch: AttendanceBatch, item: Any) -> None:
        if not isinstance(item, Mapping):
            logger.warning(f"Skipping malformed history entry: {item!r}")
            batch.fail_muster(None, None, "history entry is not an object")
            return

        lines = item.get("attendance")
        if lines is None:
            lines = []
        try:
            header = MusterHeader.parse(item.get("muster"))
        except ValidationError as e:
            logger.warning(f"Malformed muster in DLB history: {e}")
            batch.fail_muster(None, lines, str(e))
            return

        if not isinstance(lines, list):
            logger.warning(f"Muster {header.muster_id}: attendance is not a list")
            batch.fail_muster(header.muster_id, lines, "attendance is not a list")
            return

        batch.apply_muster(header, lines)
