from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.enums import SyncLogStatus
from .model import SyncLogEntry
from .repository import SyncLogRepository

logger = logging.getLogger(__name__)


def write_sync_log(
    logs: SyncLogRepository,
    *,
    operation: str,
    reference_id: int,
    status: SyncLogStatus,
    details: dict[str, Any],
    now: datetime,
) -> None:
    """Append one audit entry.

    The batch has already been committed line by line when this runs, so a
    failure here is logged and the caller still returns its result.
    """

    entry = SyncLogEntry(
        operation=operation,
        reference_id=int(reference_id),
        status=status,
        details=details,
        created_at=now,
    )
    try:
        logs.append(entry)
    except Exception:
        logger.exception(f"Failed to write {operation} sync log for reference {reference_id}")
