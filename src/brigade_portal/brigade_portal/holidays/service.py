from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from dateutil.easter import EASTER_WESTERN, easter
from dateutil.relativedelta import MO, relativedelta

from ..core.exceptions import UnsupportedRegion
from .model import NATIONAL_REGION, PublicHoliday, RegionAnniversary
from .tables import DEFAULT_ANNIVERSARY_DAYS, MATARIKI_DATES

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def mondayise_pair(first: date, second: date) -> tuple[date, date]:
    """Observed dates for two consecutive holidays (1/2 Jan, 25/26 Dec).

    A holiday on a weekend moves to the next weekday that is not already
    taken by its partner.
    """

    if first.weekday() == SATURDAY:
        return first + timedelta(days=2), second + timedelta(days=2)
    if first.weekday() == SUNDAY:
        # second is Monday and keeps it, first jumps over it to Tuesday
        return first + timedelta(days=2), second
    if second.weekday() == SATURDAY:
        return first, second + timedelta(days=2)
    return first, second


class HolidayCalendar:
    """New Zealand public holidays for a region and year.

    Nationwide holidays are derived from the year alone (fixed dates,
    Monday-of-month rules, Easter). Matariki and regional Anniversary Days
    come from injected tables. Results are cached per (year, region).
    """

    def __init__(
        self,
        *,
        anniversaries: Optional[Mapping[str, RegionAnniversary]] = None,
        matariki: Optional[Mapping[int, date]] = None,
    ):
        self._anniversaries = DEFAULT_ANNIVERSARY_DAYS if anniversaries is None else anniversaries
        self._matariki = MATARIKI_DATES if matariki is None else matariki
        self._cache: dict[tuple[int, str], frozenset[PublicHoliday]] = {}

    def supported_regions(self) -> dict[str, str]:
        return {code: a.display_name for code, a in sorted(self._anniversaries.items())}

    def ensure_supported(self, region: str) -> str:
        code = (region or "").strip().lower()
        if code not in self._anniversaries:
            raise UnsupportedRegion(region)
        return code

    def holidays_for(self, year: int, region: str) -> frozenset[PublicHoliday]:
        code = self.ensure_supported(region)
        key = (int(year), code)
        cached = self._cache.get(key)
        if cached is None:
            cached = frozenset(self._merge_same_day(self._compute(int(year), code)))
            self._cache[key] = cached
        return cached

    def holiday_on(self, day: date, region: str) -> Optional[PublicHoliday]:
        for holiday in self.holidays_for(day.year, region):
            if holiday.date == day:
                return holiday
        return None

    def is_holiday(self, day: date, region: str) -> bool:
        return self.holiday_on(day, region) is not None

    def holiday_name(self, day: date, region: str) -> Optional[str]:
        holiday = self.holiday_on(day, region)
        return holiday.name if holiday else None

    def holidays_between(self, start: date, end: date, region: str) -> dict[date, PublicHoliday]:
        """Holidays in [start, end] indexed by date, in date order."""

        out: dict[date, PublicHoliday] = {}
        for year in range(start.year, end.year + 1):
            for holiday in sorted(self.holidays_for(year, region), key=lambda h: h.date):
                if start <= holiday.date <= end:
                    out[holiday.date] = holiday
        return dict(sorted(out.items()))

    def clear_cache(self) -> None:
        self._cache.clear()

    def _compute(self, year: int, region: str) -> list[PublicHoliday]:
        holidays = self._national(year)

        anniversary = self._anniversaries[region]
        anniversary_date = anniversary.dates.get(year)
        if anniversary_date is None:
            logger.warning(f"No {anniversary.holiday_name} on record for {year}; region {region} gets national holidays only")
        else:
            holidays.append(PublicHoliday(anniversary_date, anniversary.holiday_name, region, year))

        return holidays

    def _national(self, year: int) -> list[PublicHoliday]:
        def national(day: date, name: str, *, mondayised: bool = False) -> PublicHoliday:
            return PublicHoliday(day, name, NATIONAL_REGION, year, mondayised)

        new_year, day_after = mondayise_pair(date(year, 1, 1), date(year, 1, 2))
        christmas, boxing = mondayise_pair(date(year, 12, 25), date(year, 12, 26))
        easter_sunday = easter(year, EASTER_WESTERN)

        holidays = [
            national(new_year, "New Year's Day", mondayised=new_year != date(year, 1, 1)),
            national(day_after, "Day after New Year's Day", mondayised=day_after != date(year, 1, 2)),
            national(date(year, 2, 6), "Waitangi Day"),
            national(easter_sunday - timedelta(days=2), "Good Friday"),
            national(easter_sunday + timedelta(days=1), "Easter Monday"),
            national(date(year, 4, 25), "ANZAC Day"),
            national(
                date(year, 6, 1) + relativedelta(weekday=MO(+1)),
                "King's Birthday" if year >= 2023 else "Queen's Birthday",
            ),
            national(date(year, 10, 1) + relativedelta(weekday=MO(+4)), "Labour Day"),
            national(christmas, "Christmas Day", mondayised=christmas != date(year, 12, 25)),
            national(boxing, "Boxing Day", mondayised=boxing != date(year, 12, 26)),
        ]

        matariki = self._matariki.get(year)
        if matariki is not None:
            holidays.append(national(matariki, "Matariki"))

        return holidays

    @staticmethod
    def _merge_same_day(holidays: Iterable[PublicHoliday]) -> list[PublicHoliday]:
        # One entry per date: e.g. ANZAC Day landing on Easter Monday.
        by_date: dict[date, PublicHoliday] = {}
        for holiday in holidays:
            existing = by_date.get(holiday.date)
            if existing is None:
                by_date[holiday.date] = holiday
                continue
            by_date[holiday.date] = PublicHoliday(
                date=holiday.date,
                name=f"{existing.name} / {holiday.name}",
                region=existing.region if existing.region == holiday.region else holiday.region,
                year=holiday.year,
                mondayised=existing.mondayised or holiday.mondayised,
            )
        return list(by_date.values())
