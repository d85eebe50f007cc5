from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from .model import SyncLogEntry, SyncState


class SyncStateRepository(Protocol):
    def get_state(self, brigade_id: int) -> Optional[SyncState]:
        raise NotImplementedError

    def mark_completed(
        self,
        brigade_id: int,
        *,
        now: datetime,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> None:
        """Set status completed and last_sync_at; a None date keeps the stored one."""

        raise NotImplementedError

    def mark_failed(self, brigade_id: int, *, error_message: str) -> None:
        raise NotImplementedError


class SyncLogRepository(Protocol):
    def append(self, entry: SyncLogEntry) -> int:
        raise NotImplementedError

    def latest_by_operation(self) -> dict[str, SyncLogEntry]:
        raise NotImplementedError
