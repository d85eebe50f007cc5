from __future__ import annotations

import hmac
import logging
import re
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..attendance.reconciler import AttendanceReconciler
from ..common.datetime_utils import now_local
from ..core.enums import RecordSource
from ..core.exceptions import AuthError, ValidationError
from ..members.identity_map import MemberDirectory
from .audit import write_sync_log
from .batch import AttendanceBatch, MusterHeader
from .model import OPERATION_WEBHOOK, WebhookResult
from .repository import SyncLogRepository, SyncStateRepository

logger = logging.getLogger(__name__)

_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def verify_webhook_secret(configured: str, auth_header: Optional[str], secret_header: Optional[str] = None) -> bool:
    """Constant-time check of the shared secret.

    A Bearer token in Authorization wins over X-Webhook-Secret. An empty
    configured secret rejects every request.
    """

    if not configured:
        return False

    match = _BEARER_RE.match((auth_header or "").strip())
    if match:
        presented = match.group(1).strip()
    elif secret_header:
        presented = secret_header.strip()
    else:
        return False

    return hmac.compare_digest(configured.encode("utf-8"), presented.encode("utf-8"))


class WebhookIngestor:
    """Authenticates and applies DLB attendance push notifications."""

    def __init__(
        self,
        secret: str,
        brigade_id: int,
        directory: MemberDirectory,
        reconciler: AttendanceReconciler,
        states: SyncStateRepository,
        logs: SyncLogRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._secret = secret
        self._brigade_id = int(brigade_id)
        self._directory = directory
        self._reconciler = reconciler
        self._states = states
        self._logs = logs
        self._clock = clock

    def ingest(self, auth_header: Optional[str], payload: Any, secret_header: Optional[str] = None) -> WebhookResult:
        if not verify_webhook_secret(self._secret, auth_header, secret_header):
            raise AuthError("Unauthorized")

        if not isinstance(payload, Mapping) or not payload:
            raise ValidationError("Invalid JSON payload")

        event = str(payload.get("event") or "")
        header = MusterHeader.parse(payload.get("callout"), label="callout")
        lines = payload.get("attendance")
        if lines is None:
            lines = []
        if not isinstance(lines, list):
            raise ValidationError("attendance must be a list")

        now = self._clock()
        identity = self._directory.map_of(self._brigade_id)
        batch = AttendanceBatch(self._reconciler, identity, source=RecordSource.WEBHOOK, now=now)
        batch.apply_muster(header, lines)
        counts = batch.counts

        self._states.mark_completed(self._brigade_id, now=now)
        write_sync_log(
            self._logs,
            operation=OPERATION_WEBHOOK,
            reference_id=header.muster_id,
            status=counts.log_status(),
            details={"event": event, **counts.to_dict()},
            now=now,
        )
        logger.info(f"Webhook {event or '(no event)'} for muster {header.muster_id}: {counts.to_dict()}")
        return WebhookResult(event=event, callout_id=header.muster_id, counts=counts)
