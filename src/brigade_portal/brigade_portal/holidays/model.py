from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping

NATIONAL_REGION = "national"


@dataclass(frozen=True)
class PublicHoliday:
    """A public holiday as observed in a region.

    ``region`` is ``national`` for nationwide holidays and the region code for
    a regional Anniversary Day. ``mondayised`` marks a weekend holiday whose
    observance moved to a weekday.
    """

    date: date
    name: str
    region: str
    year: int
    mondayised: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "name": self.name,
            "region": self.region,
            "year": self.year,
            "mondayised": self.mondayised,
        }


@dataclass(frozen=True)
class RegionAnniversary:
    """Proclaimed Anniversary Day dates for one region, keyed by year."""

    region: str
    display_name: str
    holiday_name: str
    dates: Mapping[int, date]
