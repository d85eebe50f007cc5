from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Kind of muster: a training night or an emergency callout."""

    TRAINING = "training"
    CALLOUT = "callout"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "present"
    LEAVE = "leave"
    ABSENT = "absent"

    @classmethod
    def from_dlb_code(cls, code: str) -> "AttendanceStatus":
        """Map DLB's single-letter codes (I/L/A) to a status."""

        try:
            return _DLB_CODES[code.strip().upper()]
        except (AttributeError, KeyError):
            raise ValueError(f"Unknown DLB attendance status: {code!r}") from None

    @property
    def dlb_code(self) -> str:
        for code, status in _DLB_CODES.items():
            if status is self:
                return code
        raise KeyError(self)


_DLB_CODES = {
    "I": AttendanceStatus.PRESENT,
    "L": AttendanceStatus.LEAVE,
    "A": AttendanceStatus.ABSENT,
}


class RecordSource(str, Enum):
    PULL = "pull"
    WEBHOOK = "webhook"


class ReconcileOutcome(str, Enum):
    """Three-way result of applying one incoming attendance line."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class SyncStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncLogStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    SKIPPED = "skipped"
