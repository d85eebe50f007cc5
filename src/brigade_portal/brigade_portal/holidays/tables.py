"""Proclamation-driven holiday dates.

Anniversary Days and Matariki are set by proclamation rather than by a
formula, so they are carried as data. Extend the tables as new dates are
gazetted; ``HolidayCalendar`` accepts replacements for both.
"""

from __future__ import annotations

from datetime import date
from typing import Mapping

from .model import RegionAnniversary


def _dates(*values: str) -> dict[int, date]:
    out: dict[int, date] = {}
    for value in values:
        d = date.fromisoformat(value)
        out[d.year] = d
    return out


DEFAULT_ANNIVERSARY_DAYS: Mapping[str, RegionAnniversary] = {
    "auckland": RegionAnniversary(
        region="auckland",
        display_name="Auckland",
        holiday_name="Auckland Anniversary Day",
        dates=_dates(
            "2022-01-31", "2023-01-30", "2024-01-29", "2025-01-27",
            "2026-01-26", "2027-02-01", "2028-01-31",
        ),
    ),
    "wellington": RegionAnniversary(
        region="wellington",
        display_name="Wellington",
        holiday_name="Wellington Anniversary Day",
        dates=_dates(
            "2022-01-24", "2023-01-23", "2024-01-22", "2025-01-20",
            "2026-01-19", "2027-01-25", "2028-01-24",
        ),
    ),
    "canterbury": RegionAnniversary(
        region="canterbury",
        display_name="Canterbury",
        holiday_name="Canterbury Anniversary Day",
        dates=_dates(
            "2022-11-11", "2023-11-17", "2024-11-15", "2025-11-14",
            "2026-11-13", "2027-11-12", "2028-11-17",
        ),
    ),
    "otago": RegionAnniversary(
        region="otago",
        display_name="Otago",
        holiday_name="Otago Anniversary Day",
        dates=_dates(
            "2022-03-21", "2023-03-20", "2024-03-25", "2025-03-24",
            "2026-03-23", "2027-03-22", "2028-03-20",
        ),
    ),
    "southland": RegionAnniversary(
        region="southland",
        display_name="Southland",
        holiday_name="Southland Anniversary Day",
        dates=_dates(
            "2022-04-19", "2023-04-11", "2024-04-02", "2025-04-22",
            "2026-04-07", "2027-03-30", "2028-04-18",
        ),
    ),
    "taranaki": RegionAnniversary(
        region="taranaki",
        display_name="Taranaki",
        holiday_name="Taranaki Anniversary Day",
        dates=_dates(
            "2022-03-14", "2023-03-13", "2024-03-11", "2025-03-10",
            "2026-03-09", "2027-03-08", "2028-03-13",
        ),
    ),
    "hawkes-bay": RegionAnniversary(
        region="hawkes-bay",
        display_name="Hawke's Bay",
        holiday_name="Hawke's Bay Anniversary Day",
        dates=_dates(
            "2022-10-21", "2023-10-20", "2024-10-25", "2025-10-24",
            "2026-10-23", "2027-10-22", "2028-10-20",
        ),
    ),
    "marlborough": RegionAnniversary(
        region="marlborough",
        display_name="Marlborough",
        holiday_name="Marlborough Anniversary Day",
        dates=_dates(
            "2022-10-31", "2023-10-30", "2024-11-04", "2025-11-03",
            "2026-11-02", "2027-11-01", "2028-10-30",
        ),
    ),
    "nelson": RegionAnniversary(
        region="nelson",
        display_name="Nelson",
        holiday_name="Nelson Anniversary Day",
        dates=_dates(
            "2022-01-31", "2023-01-30", "2024-01-29", "2025-02-03",
            "2026-02-02", "2027-02-01", "2028-01-31",
        ),
    ),
    "westland": RegionAnniversary(
        region="westland",
        display_name="Westland",
        holiday_name="Westland Anniversary Day",
        dates=_dates(
            "2022-11-28", "2023-12-04", "2024-12-02", "2025-12-01",
            "2026-11-30", "2027-11-29", "2028-12-04",
        ),
    ),
    "chatham-islands": RegionAnniversary(
        region="chatham-islands",
        display_name="Chatham Islands",
        holiday_name="Chatham Islands Anniversary Day",
        dates=_dates(
            "2022-11-28", "2023-11-27", "2024-12-02", "2025-12-01",
            "2026-11-30", "2027-11-29", "2028-11-27",
        ),
    ),
}


# Published by the NZ government (Te Kāhui o Matariki Public Holiday Act 2022).
MATARIKI_DATES: Mapping[int, date] = _dates(
    "2022-06-24", "2023-07-14", "2024-06-28", "2025-06-20", "2026-07-10",
    "2027-06-25", "2028-07-14", "2029-07-06", "2030-06-21", "2031-07-11",
    "2032-07-02", "2033-06-24", "2034-07-07", "2035-06-29", "2036-07-18",
    "2037-07-10", "2038-06-25", "2039-07-15", "2040-07-06", "2041-07-19",
    "2042-07-11", "2043-07-03", "2044-06-24", "2045-07-07", "2046-06-29",
    "2047-07-19", "2048-07-03", "2049-06-25", "2050-07-15", "2051-06-30",
    "2052-06-21",
)
