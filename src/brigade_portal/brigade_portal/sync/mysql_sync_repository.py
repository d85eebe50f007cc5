from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..core.enums import SyncLogStatus, SyncStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SyncLogEntry, SyncState
from .repository import SyncLogRepository, SyncStateRepository


class MySQLSyncStateRepository(SyncStateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_state(self, brigade_id: int) -> Optional[SyncState]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT brigade_id, status, last_sync_at, sync_from_date, sync_to_date, error_message
                FROM attendance_sync
                WHERE brigade_id=%s
                """,
                (int(brigade_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SyncState(
                brigade_id=int(r["brigade_id"]),
                status=SyncStatus(r["status"]),
                last_sync_at=r.get("last_sync_at"),
                sync_from_date=r.get("sync_from_date"),
                sync_to_date=r.get("sync_to_date"),
                error_message=r.get("error_message"),
            )

    def mark_completed(
        self,
        brigade_id: int,
        *,
        now: datetime,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sync(brigade_id, status, last_sync_at, sync_from_date, sync_to_date, error_message)
                VALUES(%s,'completed',%s,%s,%s,NULL)
                ON DUPLICATE KEY UPDATE
                    status='completed',
                    last_sync_at=VALUES(last_sync_at),
                    sync_from_date=COALESCE(VALUES(sync_from_date), sync_from_date),
                    sync_to_date=COALESCE(VALUES(sync_to_date), sync_to_date),
                    error_message=NULL
                """,
                (int(brigade_id), now, from_date, to_date),
            )

    def mark_failed(self, brigade_id: int, *, error_message: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sync(brigade_id, status, error_message)
                VALUES(%s,'failed',%s)
                ON DUPLICATE KEY UPDATE status='failed', error_message=VALUES(error_message)
                """,
                (int(brigade_id), error_message),
            )


def _row_to_log(r: Dict[str, Any]) -> SyncLogEntry:
    details = json.loads(r["details"]) if r.get("details") else {}
    return SyncLogEntry(
        log_id=int(r["id"]),
        operation=str(r["operation"]),
        reference_id=int(r["reference_id"]),
        status=SyncLogStatus(r["status"]),
        details=details,
        created_at=r["created_at"],
    )


class MySQLSyncLogRepository(SyncLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: SyncLogEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sync_logs(operation, reference_id, status, details, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    entry.operation,
                    int(entry.reference_id),
                    entry.status.value,
                    json.dumps(entry.details, default=str),
                    entry.created_at,
                ),
            )
            return int(cur.lastrowid)

    def latest_by_operation(self) -> dict[str, SyncLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT l.id, l.operation, l.reference_id, l.status, l.details, l.created_at
                FROM sync_logs l
                JOIN (
                    SELECT operation, MAX(id) AS max_id
                    FROM sync_logs
                    GROUP BY operation
                ) latest ON latest.max_id = l.id
                ORDER BY l.operation
                """
            )
            return {str(r["operation"]): _row_to_log(r) for r in fetchall(cur)}
