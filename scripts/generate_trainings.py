"""Preview the generated training nights (dry run, nothing is written)."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.brigade_portal.brigade_portal.common.datetime_utils import now_local, parse_hhmm, parse_iso_date
from src.brigade_portal.brigade_portal.core.constants import (
    DEFAULT_GENERATE_MONTHS_AHEAD,
    DEFAULT_HOLIDAY_REGION,
    DEFAULT_TRAINING_DURATION_HOURS,
    DEFAULT_TRAINING_TIME,
    DEFAULT_TRAINING_WEEKDAY,
)
from src.brigade_portal.brigade_portal.holidays.service import HolidayCalendar
from src.brigade_portal.brigade_portal.training.service import TrainingScheduleGenerator


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Preview training nights, shifted around public holidays")
    parser.add_argument("--months", type=int, default=DEFAULT_GENERATE_MONTHS_AHEAD)
    parser.add_argument("--start", help="first date to consider (YYYY-MM-DD), default today")
    parser.add_argument("--region", default=DEFAULT_HOLIDAY_REGION)
    parser.add_argument("--weekday", type=int, default=DEFAULT_TRAINING_WEEKDAY, help="0=Monday ... 6=Sunday")
    parser.add_argument("--time", default=DEFAULT_TRAINING_TIME)
    args = parser.parse_args(argv)

    calendar = HolidayCalendar()
    if args.region.lower() not in calendar.supported_regions():
        print(f"Unknown region {args.region!r}. Supported: {', '.join(calendar.supported_regions())}")
        return 2

    start = parse_iso_date(args.start) if args.start else now_local().date()
    occurrences = TrainingScheduleGenerator(calendar).generate(
        start,
        args.months,
        args.weekday,
        parse_hhmm(args.time),
        args.region,
        duration=timedelta(hours=DEFAULT_TRAINING_DURATION_HOURS),
    )

    for occurrence in occurrences:
        line = f"{occurrence.date:%a %d %b %Y} {occurrence.time:%H:%M}"
        if occurrence.moved:
            line += f"  <- {occurrence.move_reason}"
        print(line)

    moved = sum(1 for o in occurrences if o.moved)
    print(f"\n{len(occurrences)} trainings, {moved} moved for public holidays (dry run)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
