from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.brigade_portal.brigade_portal.attendance.model import AttendanceRecord, IncomingAttendance
from src.brigade_portal.brigade_portal.core.enums import AttendanceStatus, SyncStatus
from src.brigade_portal.brigade_portal.core.exceptions import DuplicateRecordError, ExternalApiError
from src.brigade_portal.brigade_portal.members.model import MemberExternalMapping
from src.brigade_portal.brigade_portal.sync.model import SyncLogEntry, SyncState


class FakeMemberRepo:
    def __init__(self, mappings: dict[int, list[MemberExternalMapping]] | None = None, *, broken: bool = False):
        self._mappings = mappings or {}
        self._broken = broken
        self.calls = 0

    def list_active_linked(self, brigade_id):
        self.calls += 1
        if self._broken:
            raise RuntimeError("members table unavailable")
        return [m for m in self._mappings.get(int(brigade_id), []) if m.active]


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[tuple[int, int], AttendanceRecord] = {}
        self.inserts = 0
        self.updates = 0
        # (member, muster) keys whose insert fails as if another writer got there first
        self.race_on_insert: dict[tuple[int, int], AttendanceStatus] = {}
        self.fail_for_member: set[int] = set()

    def add(self, record: AttendanceRecord) -> None:
        self.rows[(record.local_member_id, record.external_muster_id)] = record
        self._next_id = max(self._next_id, record.record_id + 1)

    def get_by_key(self, *, local_member_id, external_muster_id):
        return self.rows.get((int(local_member_id), int(external_muster_id)))

    def insert(self, incoming: IncomingAttendance, *, now: datetime) -> int:
        if incoming.local_member_id in self.fail_for_member:
            raise RuntimeError("database is down")
        key = (incoming.local_member_id, incoming.external_muster_id)
        if key in self.race_on_insert:
            self._store(incoming, now=now, status_override=self.race_on_insert.pop(key))
            raise DuplicateRecordError("duplicate")
        if key in self.rows:
            raise DuplicateRecordError("duplicate")
        self.inserts += 1
        return self._store(incoming, now=now, status_override=None)

    def _store(self, incoming: IncomingAttendance, *, now: datetime, status_override) -> int:
        rid = self._next_id
        self._next_id += 1
        self.rows[(incoming.local_member_id, incoming.external_muster_id)] = AttendanceRecord(
            record_id=rid,
            local_member_id=incoming.local_member_id,
            external_muster_id=incoming.external_muster_id,
            event_date=incoming.event_date,
            event_type=incoming.event_type,
            status=status_override or incoming.status,
            source=incoming.source,
            updated_at=now,
            position=incoming.position,
            truck=incoming.truck,
            notes=incoming.notes,
            icad_number=incoming.icad_number,
            call_type=incoming.call_type,
        )
        return rid

    def update_mutable(self, *, record_id, status, position, truck, notes, source, now):
        for key, row in self.rows.items():
            if row.record_id == int(record_id):
                self.rows[key] = replace(
                    row, status=status, position=position, truck=truck, notes=notes, source=source, updated_at=now
                )
                self.updates += 1
                return True
        return False

    def list_for_member_between(self, *, local_member_id, start: date, end: date):
        out = [
            r for r in self.rows.values()
            if r.local_member_id == int(local_member_id) and start <= r.event_date <= end
        ]
        return sorted(out, key=lambda r: (r.event_date, r.record_id))

    def list_recent_for_member(self, *, local_member_id, limit):
        out = [r for r in self.rows.values() if r.local_member_id == int(local_member_id)]
        return sorted(out, key=lambda r: (r.event_date, r.record_id), reverse=True)[: int(limit)]


class FakeSyncStateRepo:
    def __init__(self, state: Optional[SyncState] = None):
        self.states: dict[int, SyncState] = {}
        if state is not None:
            self.states[state.brigade_id] = state

    def get_state(self, brigade_id):
        return self.states.get(int(brigade_id))

    def mark_completed(self, brigade_id, *, now, from_date=None, to_date=None):
        current = self.states.get(int(brigade_id)) or SyncState(int(brigade_id))
        self.states[int(brigade_id)] = replace(
            current,
            status=SyncStatus.COMPLETED,
            last_sync_at=now,
            sync_from_date=from_date or current.sync_from_date,
            sync_to_date=to_date or current.sync_to_date,
            error_message=None,
        )

    def mark_failed(self, brigade_id, *, error_message):
        current = self.states.get(int(brigade_id)) or SyncState(int(brigade_id))
        self.states[int(brigade_id)] = replace(current, status=SyncStatus.FAILED, error_message=error_message)


class FakeSyncLogRepo:
    def __init__(self, *, broken: bool = False):
        self.entries: list[SyncLogEntry] = []
        self._broken = broken

    def append(self, entry: SyncLogEntry) -> int:
        if self._broken:
            raise RuntimeError("sync_logs table is locked")
        self.entries.append(replace(entry, log_id=len(self.entries) + 1))
        return len(self.entries)

    def latest_by_operation(self):
        out: dict[str, SyncLogEntry] = {}
        for entry in self.entries:
            out[entry.operation] = entry
        return out


class FakeDlbClient:
    def __init__(self, history: list | None = None, *, error: ExternalApiError | None = None):
        self.history = history or []
        self.error = error
        self.calls: list[tuple[date, date]] = []

    def get_attendance_history(self, from_date, to_date):
        self.calls.append((from_date, to_date))
        if self.error is not None:
            raise self.error
        return self.history


def mapping(local_id: int, external_id: int, active: bool = True) -> MemberExternalMapping:
    return MemberExternalMapping(local_member_id=local_id, external_member_id=external_id, active=active)
