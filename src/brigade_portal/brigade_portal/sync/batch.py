from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..attendance.classification import classify_event_type
from ..attendance.reconciler import AttendanceReconciler
from ..common.validators import optional_str, require_iso_date, require_positive_int
from ..core.enums import AttendanceStatus, EventType, RecordSource
from ..core.exceptions import NotMapped
from ..members.identity_map import MemberIdentityMap
from .model import BatchCounts

logger = logging.getLogger(__name__)

# DLB omits the status for members nobody marked; they did not attend.
DEFAULT_DLB_STATUS = "A"


@dataclass(frozen=True)
class MusterHeader:
    muster_id: int
    event_date: date
    event_type: EventType
    icad_number: Optional[str] = None
    call_type: Optional[str] = None

    @classmethod
    def parse(cls, muster: Any, *, label: str = "muster") -> "MusterHeader":
        """Validate the muster part of a DLB payload; raises ValidationError."""

        if not isinstance(muster, Mapping):
            muster = {}
        icad_number = optional_str(muster.get("icad_number"))
        call_type = optional_str(muster.get("call_type"))
        return cls(
            muster_id=require_positive_int(muster.get("id"), f"{label}.id"),
            event_date=require_iso_date(muster.get("call_date"), f"{label}.call_date"),
            event_type=classify_event_type(call_type, icad_number),
            icad_number=icad_number,
            call_type=call_type,
        )


@dataclass(frozen=True)
class LineOutcome:
    """What happened to one attendance line; ``result`` is one of LINE_RESULTS."""

    muster_id: Optional[int]
    external_member_id: Any
    result: str
    error: Optional[str] = None


class AttendanceBatch:
    """Feeds DLB attendance lines through the reconciler.

    Every line yields a LineOutcome, so a summary is always available even
    when some lines fail.
    """

    def __init__(
        self,
        reconciler: AttendanceReconciler,
        identity: MemberIdentityMap,
        *,
        source: RecordSource,
        now: datetime,
    ):
        self._reconciler = reconciler
        self._identity = identity
        self._source = source
        self._now = now
        self.outcomes: list[LineOutcome] = []
        self.counts = BatchCounts()

    def apply_muster(self, header: MusterHeader, lines: Iterable[Any]) -> None:
        for line in lines:
            self._collect(self._apply_line(header, line))

    def fail_muster(self, muster_id: Optional[int], lines: Any, reason: str) -> None:
        """Record every line of a muster that could not be parsed as failed."""

        if isinstance(lines, list) and lines:
            for line in lines:
                member = line.get("member_id") if isinstance(line, Mapping) else None
                self._collect(LineOutcome(muster_id, member, "failed", reason))
        else:
            self._collect(LineOutcome(muster_id, None, "failed", reason))

    def _collect(self, outcome: LineOutcome) -> None:
        self.outcomes.append(outcome)
        self.counts.add(outcome.result)

    def _apply_line(self, header: MusterHeader, line: Any) -> LineOutcome:
        if not isinstance(line, Mapping):
            logger.warning(f"Muster {header.muster_id}: attendance line is not an object: {line!r}")
            return LineOutcome(header.muster_id, None, "failed", "attendance line is not an object")

        external_id = line.get("member_id")
        try:
            local_id = self._identity.resolve(external_id)
        except NotMapped:
            logger.debug(f"Muster {header.muster_id}: DLB member {external_id!r} not mapped, skipping")
            return LineOutcome(header.muster_id, external_id, "skipped")

        try:
            status = AttendanceStatus.from_dlb_code(line.get("status") or DEFAULT_DLB_STATUS)
        except ValueError as e:
            logger.warning(f"Muster {header.muster_id}, member {local_id}: {e}")
            return LineOutcome(header.muster_id, external_id, "failed", str(e))

        try:
            outcome = self._reconciler.apply(
                local_member_id=local_id,
                external_muster_id=header.muster_id,
                event_date=header.event_date,
                event_type=header.event_type,
                status=status,
                position=optional_str(line.get("position")),
                truck=optional_str(line.get("truck")),
                notes=optional_str(line.get("notes")),
                source=self._source,
                icad_number=header.icad_number,
                call_type=header.call_type,
                now=self._now,
            )
        except Exception as e:
            logger.exception(f"Failed to store attendance for member {local_id} muster {header.muster_id}")
            return LineOutcome(header.muster_id, external_id, "failed", str(e))

        return LineOutcome(header.muster_id, external_id, outcome.value)
