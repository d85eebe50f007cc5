from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, EventType, RecordSource


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's attendance at one DLB muster.

    (local_member_id, external_muster_id) is the natural key.
    """

    record_id: int
    local_member_id: int
    external_muster_id: int
    event_date: date
    event_type: EventType
    status: AttendanceStatus
    source: RecordSource
    updated_at: datetime
    position: Optional[str] = None
    truck: Optional[str] = None
    notes: Optional[str] = None
    icad_number: Optional[str] = None
    call_type: Optional[str] = None

    def mutable_fields(self) -> tuple:
        return (self.status, self.position, self.truck, self.notes)


@dataclass(frozen=True)
class IncomingAttendance:
    """An attendance line from DLB after the member id has been resolved."""

    local_member_id: int
    external_muster_id: int
    event_date: date
    event_type: EventType
    status: AttendanceStatus
    source: RecordSource
    position: Optional[str] = None
    truck: Optional[str] = None
    notes: Optional[str] = None
    icad_number: Optional[str] = None
    call_type: Optional[str] = None

    def mutable_fields(self) -> tuple:
        return (self.status, self.position, self.truck, self.notes)
