"""Decision table for availability resolution, independent of message formatting."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Sequence

from availability_engine.rates.models import DateRange
from availability_engine.utils.dates import add_days, add_years


class Outcome(str, Enum):
    COVERED = "covered"
    DEFICIT_WITH_DONOR = "deficit_with_donor"
    DEFICIT_NO_DONOR = "deficit_no_donor"
    CLOSED_PERIOD = "closed_period"
    EXTENSION_EXCEEDED = "extension_exceeded"


@dataclass(slots=True, frozen=True)
class Coverage:
    """How much of a requested window the published calendar covers."""

    start_date: date
    units: int
    covered_days: int
    last_end: Optional[date] = None

    @property
    def deficit_days(self) -> int:
        return self.units - self.covered_days

    @property
    def deficit_start(self) -> date:
        return add_days(self.start_date, self.covered_days)

    @property
    def deficit_end(self) -> date:
        return add_days(self.start_date, self.units - 1)

    @property
    def is_covered(self) -> bool:
        return self.deficit_days == 0


def classify_coverage(calendar: Sequence[DateRange], start_date: date, units: int) -> Coverage:
    units = max(1, units)
    if not calendar:
        return Coverage(start_date=start_date, units=units, covered_days=0)
    last_end = calendar[-1].end_date
    required_end = add_days(start_date, units - 1)
    if last_end >= required_end:
        return Coverage(start_date=start_date, units=units, covered_days=units, last_end=last_end)
    covered = max(0, (last_end - start_date).days + 1)
    return Coverage(start_date=start_date, units=units, covered_days=covered, last_end=last_end)


def extension_limit(donor_end: date, years: int) -> date:
    return add_years(donor_end, years)


def exceeds_extension(donor: DateRange, years: int, deficit_start: date, deficit_end: date) -> bool:
    permitted = extension_limit(donor.end_date, years)
    return deficit_start > permitted or deficit_end > permitted


def classify_deficit(
    donor: Optional[DateRange],
    *,
    extension_exceeded: bool = False,
    donor_closed: bool = False,
) -> Outcome:
    if donor is None:
        return Outcome.DEFICIT_NO_DONOR
    if extension_exceeded:
        return Outcome.EXTENSION_EXCEEDED
    if donor_closed:
        return Outcome.CLOSED_PERIOD
    return Outcome.DEFICIT_WITH_DONOR
