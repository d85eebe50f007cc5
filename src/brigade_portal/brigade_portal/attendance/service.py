from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import add_months, now_local
from ..core.constants import (
    CALLOUT_THRESHOLD_PERCENT,
    DEFAULT_RECENT_EVENTS_LIMIT,
    STATS_WINDOW_MONTHS,
    TRAINING_THRESHOLD_PERCENT,
)
from ..core.enums import AttendanceStatus, EventType
from ..core.exceptions import ValidationError
from .repository import AttendanceRepository

POSITION_OIC = "OIC"
POSITION_DRIVER = "driver"
POSITION_CREW = "crew"

_STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Attended",
    AttendanceStatus.LEAVE: "On Leave",
    AttendanceStatus.ABSENT: "Absent",
}


def position_bucket(position: Optional[str]) -> Optional[str]:
    """OIC / driver / crew bucket for a free-text DLB position."""

    if not position:
        return None
    text = position.lower()
    if "oic" in text or "officer" in text:
        return POSITION_OIC
    if "driver" in text:
        return POSITION_DRIVER
    return POSITION_CREW


def format_status(status: AttendanceStatus | str) -> str:
    try:
        return _STATUS_LABELS[AttendanceStatus(status)]
    except ValueError:
        return "Unknown"


def format_event_type(event_type: EventType | str) -> str:
    value = event_type.value if isinstance(event_type, EventType) else str(event_type)
    return value[:1].upper() + value[1:]


def format_position(position: Optional[str]) -> str:
    bucket = position_bucket(position)
    if bucket is None:
        return "N/A"
    return bucket if bucket == POSITION_OIC else bucket.capitalize()


def _percent(part: int, whole: int) -> int:
    # Half-up rounding, matching how the portal has always displayed these.
    if whole <= 0:
        return 0
    return int(part * 100 / whole + 0.5)


@dataclass
class _EventTally:
    total: int = 0
    attended: int = 0
    leave: int = 0
    absent: int = 0

    def add(self, status: AttendanceStatus) -> None:
        self.total += 1
        if status == AttendanceStatus.PRESENT:
            self.attended += 1
        elif status == AttendanceStatus.LEAVE:
            self.leave += 1
        else:
            self.absent += 1

    @property
    def percent(self) -> int:
        # Leave does not count against the member.
        return _percent(self.attended, self.total - self.leave)

    def to_dict(self, threshold: int) -> dict:
        percent = self.percent
        return {
            "percent": percent,
            "threshold": threshold,
            "above_threshold": percent >= threshold,
            "total": self.total,
            "attended": self.attended,
            "leave": self.leave,
            "absent": self.absent,
        }


@dataclass
class _PositionTally:
    counts: dict = field(default_factory=lambda: {POSITION_OIC: 0, POSITION_DRIVER: 0, POSITION_CREW: 0})

    def to_dict(self, total_attended: int) -> dict:
        return {
            "counts": dict(self.counts),
            "percents": {k: _percent(v, total_attended) for k, v in self.counts.items()},
        }


class AttendanceStatsService:
    """Read-side accessors for member profile attendance widgets."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        window_months: int = STATS_WINDOW_MONTHS,
        training_threshold: int = TRAINING_THRESHOLD_PERCENT,
        callout_threshold: int = CALLOUT_THRESHOLD_PERCENT,
    ):
        self._attendance = attendance
        self._window_months = int(window_months)
        self._training_threshold = int(training_threshold)
        self._callout_threshold = int(callout_threshold)

    def member_stats(self, member_id: int, *, today: Optional[date] = None) -> dict:
        """Rolling-window attendance percentages, positions and trucks."""

        to_date = today or now_local().date()
        from_date = add_months(to_date, -self._window_months)

        records = self._attendance.list_for_member_between(
            local_member_id=int(member_id), start=from_date, end=to_date
        )

        training = _EventTally()
        callout = _EventTally()
        positions = _PositionTally()
        trucks: Counter[str] = Counter()

        for record in records:
            tally = training if record.event_type == EventType.TRAINING else callout
            tally.add(record.status)

            if record.status != AttendanceStatus.PRESENT:
                continue
            bucket = position_bucket(record.position)
            if bucket is not None:
                positions.counts[bucket] += 1
            if record.truck:
                trucks[record.truck] += 1

        total_attended = training.attended + callout.attended

        return {
            "training": training.to_dict(self._training_threshold),
            "callout": callout.to_dict(self._callout_threshold),
            "positions": positions.to_dict(total_attended),
            "trucks": dict(trucks.most_common()),
            "period": {
                "from": from_date.isoformat(),
                "to": to_date.isoformat(),
                "label": f"Last {self._window_months} months",
            },
        }

    def recent_events(self, member_id: int, limit: int = DEFAULT_RECENT_EVENTS_LIMIT) -> list[dict]:
        if int(limit) <= 0:
            raise ValidationError("limit must be positive")

        records = self._attendance.list_recent_for_member(local_member_id=int(member_id), limit=int(limit))
        return [
            {
                "event_date": r.event_date.isoformat(),
                "event_type": r.event_type.value,
                "event_type_label": format_event_type(r.event_type),
                "status": r.status.value,
                "status_label": format_status(r.status),
                "position": r.position,
                "position_label": format_position(r.position),
                "truck": r.truck,
                "notes": r.notes,
            }
            for r in records
        ]
