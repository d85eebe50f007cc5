from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import SyncLogStatus, SyncStatus

OPERATION_PULL = "pull"
OPERATION_WEBHOOK = "webhook"

LINE_RESULTS = ("created", "updated", "unchanged", "skipped", "failed")


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class SyncState:
    """Per-brigade sync bookkeeping (one row per brigade)."""

    brigade_id: int
    status: SyncStatus = SyncStatus.PENDING
    last_sync_at: Optional[datetime] = None
    sync_from_date: Optional[date] = None
    sync_to_date: Optional[date] = None
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "brigade_id": self.brigade_id,
            "status": self.status.value,
            "last_sync_at": _iso(self.last_sync_at),
            "sync_from_date": _iso(self.sync_from_date),
            "sync_to_date": _iso(self.sync_to_date),
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class SyncLogEntry:
    operation: str
    reference_id: int
    status: SyncLogStatus
    details: dict[str, Any]
    created_at: datetime
    log_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "operation": self.operation,
            "reference_id": self.reference_id,
            "status": self.status.value,
            "details": dict(self.details),
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class BatchCounts:
    """Tally of one batch; every processed line lands in exactly one bucket."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0

    def add(self, kind: str) -> None:
        if kind not in LINE_RESULTS:
            raise ValueError(f"Unknown line result: {kind!r}")
        setattr(self, kind, getattr(self, kind) + 1)

    @property
    def succeeded(self) -> int:
        return self.created + self.updated + self.unchanged

    @property
    def total(self) -> int:
        return self.succeeded + self.skipped + self.failed

    def log_status(self) -> SyncLogStatus:
        if self.failed == 0:
            return SyncLogStatus.SUCCESS
        return SyncLogStatus.PARTIAL if self.succeeded > 0 else SyncLogStatus.FAILED

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "skipped": self.skipped,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class SyncResult:
    success: bool
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    counts: BatchCounts = field(default_factory=BatchCounts)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"success": self.success}
        if self.error is not None:
            out["error"] = self.error
        out.update(self.counts.to_dict())
        out["from_date"] = _iso(self.from_date)
        out["to_date"] = _iso(self.to_date)
        return out


@dataclass(frozen=True)
class WebhookResult:
    event: str
    callout_id: int
    counts: BatchCounts

    def to_dict(self) -> dict:
        return {"success": True, "event": self.event, "callout_id": self.callout_id, **self.counts.to_dict()}
