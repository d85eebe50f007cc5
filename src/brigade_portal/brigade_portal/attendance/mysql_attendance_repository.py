from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus, EventType, RecordSource
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, IncomingAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    id, member_id, dlb_muster_id, event_date, event_type, status, position, truck, notes,
    icad_number, call_type, source, updated_at
"""


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["id"]),
        local_member_id=int(r["member_id"]),
        external_muster_id=int(r["dlb_muster_id"]),
        event_date=r["event_date"],
        event_type=EventType(r["event_type"]),
        status=AttendanceStatus(r["status"]),
        source=RecordSource(r["source"]),
        updated_at=r["updated_at"],
        position=r.get("position"),
        truck=r.get("truck"),
        notes=r.get("notes"),
        icad_number=r.get("icad_number"),
        call_type=r.get("call_type"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_key(self, *, local_member_id: int, external_muster_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE member_id=%s AND dlb_muster_id=%s
                """,
                (int(local_member_id), int(external_muster_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def insert(self, incoming: IncomingAttendance, *, now: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        member_id, dlb_muster_id, event_date, event_type, status, position, truck, notes,
                        icad_number, call_type, source, created_at, updated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        incoming.local_member_id,
                        incoming.external_muster_id,
                        incoming.event_date,
                        incoming.event_type.value,
                        incoming.status.value,
                        incoming.position,
                        incoming.truck,
                        incoming.notes,
                        incoming.icad_number,
                        incoming.call_type,
                        incoming.source.value,
                        now,
                        now,
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecordError(
                    f"Attendance for member {incoming.local_member_id} "
                    f"muster {incoming.external_muster_id} already exists"
                ) from exc
            raise

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, position=%s, truck=%s, notes=%s, source=%s, updated_at=%s
                WHERE id=%s
                """,
                (status.value, position, truck, notes, source.value, now, int(record_id)),
            )
            return cur.rowcount > 0

    def list_for_member_between(self, *, local_member_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE member_id=%s AND event_date BETWEEN %s AND %s
                ORDER BY event_date, id
                """,
                (int(local_member_id), start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_recent_for_member(self, *, local_member_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE member_id=%s
                ORDER BY event_date DESC, id DESC
                LIMIT %s
                """,
                (int(local_member_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
