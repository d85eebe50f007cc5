from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Mapping, Optional

from ..common.datetime_utils import add_months, now_local, parse_hhmm
from ..core.constants import (
    DEFAULT_GENERATE_MONTHS_AHEAD,
    DEFAULT_HOLIDAY_REGION,
    DEFAULT_TRAINING_DURATION_HOURS,
    DEFAULT_TRAINING_TIME,
    DEFAULT_TRAINING_WEEKDAY,
    TRAINING_EVENT_TITLE,
)
from ..core.exceptions import ValidationError
from ..holidays.service import HolidayCalendar
from .model import TrainingOccurrence

logger = logging.getLogger(__name__)


class TrainingScheduleGenerator:
    """Weekly training nights that never land on a public holiday.

    Pure over its inputs: every call recomputes from scratch and nothing is
    persisted, so callers deduplicate against stored events themselves.
    """

    def __init__(self, calendar: HolidayCalendar):
        self._calendar = calendar

    def generate(
        self,
        start_date: date,
        horizon_months: int,
        weekday: int,
        start_time: time,
        region: str,
        *,
        duration: timedelta = timedelta(hours=DEFAULT_TRAINING_DURATION_HOURS),
    ) -> list[TrainingOccurrence]:
        region = self._calendar.ensure_supported(region)
        if not 0 <= int(weekday) <= 6:
            raise ValidationError("weekday must be 0 (Monday) to 6 (Sunday)")
        if int(horizon_months) < 0:
            raise ValidationError("horizon_months must not be negative")

        end = add_months(start_date, int(horizon_months))
        current = start_date + timedelta(days=(int(weekday) - start_date.weekday()) % 7)

        occurrences: list[TrainingOccurrence] = []
        while current <= end:
            occurrence = self._occurrence_for(current, start_time, duration, region)
            if occurrence is not None:
                occurrences.append(occurrence)
            current += timedelta(days=7)
        return occurrences

    def _occurrence_for(
        self, naive: date, start_time: time, duration: timedelta, region: str
    ) -> Optional[TrainingOccurrence]:
        holiday = self._calendar.holiday_on(naive, region)
        if holiday is None:
            return TrainingOccurrence(date=naive, time=start_time, duration=duration)

        moved_to = naive + timedelta(days=1)
        next_holiday = self._calendar.holiday_on(moved_to, region)
        if next_holiday is not None:
            logger.info(
                f"Skipping training for week of {naive}: {holiday.name} and {next_holiday.name} fall on consecutive days"
            )
            return None
        if moved_to.isocalendar()[:2] != naive.isocalendar()[:2]:
            logger.info(f"Skipping training for week of {naive}: {holiday.name}, and {moved_to} is in the next week")
            return None

        return TrainingOccurrence(
            date=moved_to,
            time=start_time,
            duration=duration,
            moved=True,
            move_reason=f"Moved from {naive:%A %d %B %Y} ({holiday.name})",
            original_date=naive,
        )


class TrainingSchedule:
    """Training schedule bound to a brigade's configured night."""

    def __init__(
        self,
        generator: TrainingScheduleGenerator,
        *,
        region: str = DEFAULT_HOLIDAY_REGION,
        weekday: int = DEFAULT_TRAINING_WEEKDAY,
        start_time: time = parse_hhmm(DEFAULT_TRAINING_TIME),
        duration: timedelta = timedelta(hours=DEFAULT_TRAINING_DURATION_HOURS),
        months_ahead: int = DEFAULT_GENERATE_MONTHS_AHEAD,
        title: str = TRAINING_EVENT_TITLE,
    ):
        self._generator = generator
        self.region = region
        self.weekday = int(weekday)
        self.start_time = start_time
        self.duration = duration
        self.months_ahead = int(months_ahead)
        self.title = title

    @classmethod
    def from_config(cls, generator: TrainingScheduleGenerator, training_config: Mapping) -> "TrainingSchedule":
        return cls(
            generator,
            region=str(training_config.get("region", DEFAULT_HOLIDAY_REGION)),
            weekday=int(training_config.get("weekday", DEFAULT_TRAINING_WEEKDAY)),
            start_time=parse_hhmm(str(training_config.get("time", DEFAULT_TRAINING_TIME))),
            duration=timedelta(hours=float(training_config.get("duration_hours", DEFAULT_TRAINING_DURATION_HOURS))),
            months_ahead=int(training_config.get("generate_months_ahead", DEFAULT_GENERATE_MONTHS_AHEAD)),
        )

    def generate_months(self, months: Optional[int] = None, *, start: Optional[date] = None) -> list[TrainingOccurrence]:
        start = start or now_local().date()
        months = self.months_ahead if months is None else int(months)
        return self._generator.generate(
            start, months, self.weekday, self.start_time, self.region, duration=self.duration
        )

    def upcoming_events(self, months: Optional[int] = None, *, start: Optional[date] = None) -> list[dict]:
        return [o.to_event(title=self.title) for o in self.generate_months(months, start=start)]

    def next_training(self, now: Optional[datetime] = None) -> Optional[TrainingOccurrence]:
        """First occurrence that has not finished yet at ``now``."""

        now = now or now_local()
        for occurrence in self.generate_months(2, start=now.date()):
            if occurrence.ends_at > now:
                return occurrence
        return None
