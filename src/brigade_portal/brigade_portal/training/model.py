from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.constants import TRAINING_EVENT_TITLE


@dataclass(frozen=True)
class TrainingOccurrence:
    """One generated training night.

    ``moved`` is true iff the naive weekly date was a public holiday, in which
    case ``original_date`` is that naive date and ``move_reason`` names the
    holiday.
    """

    date: date
    time: time
    duration: timedelta
    moved: bool = False
    move_reason: Optional[str] = None
    original_date: Optional[date] = None

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + self.duration

    def to_event(self, *, title: str = TRAINING_EVENT_TITLE) -> dict:
        """Calendar-event view consumed by the events CRUD layer."""

        return {
            "title": title,
            "start_time": self.starts_at.strftime("%Y-%m-%d %H:%M:%S"),
            "end_time": self.ends_at.strftime("%Y-%m-%d %H:%M:%S"),
            "is_training": True,
            "moved": self.moved,
            "move_reason": self.move_reason,
            "original_date": (self.original_date or self.date).strftime("%Y-%m-%d"),
        }
