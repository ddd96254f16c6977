"""Checks applied to a calendar before any quote is requested."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence

from availability_engine.availability import messages
from availability_engine.pax.models import RoomConfig
from availability_engine.rates.models import DateRange
from availability_engine.utils.dates import add_days


class IssueKind(str, Enum):
    CLOSED = "closed"
    MIN_STAY = "min_stay"


@dataclass(slots=True)
class CalendarIssue:
    kind: IssueKind
    message: str
    min_stay_units: int = 0


def validate_max_pax(room_configs: Sequence[RoomConfig], max_pax_per_charge: Optional[int]) -> Optional[str]:
    """Return an error when a room holds more travellers than one charge unit allows."""
    if not max_pax_per_charge or max_pax_per_charge <= 1:
        return None
    for room in room_configs:
        if room.total_pax > max_pax_per_charge:
            return messages.MAX_PAX_EXCEEDED.format(max_pax=max_pax_per_charge)
    return None


def validate_start_day(date_ranges: Sequence[DateRange], start_date: date) -> Optional[str]:
    """Return the allowed-days text when no rate set covering ``start_date`` permits its weekday."""
    rejected: List[str] = []
    for date_range in date_ranges:
        if not date_range.contains(start_date):
            continue
        for rate_set in date_range.rate_sets:
            if rate_set.allows_weekday(start_date):
                return None
            rejected.append(messages.allowed_days_text(rate_set))
    return ", ".join(rejected) if rejected else None


def next_allowed_date(date_range: DateRange, start_date: date) -> Optional[date]:
    candidate = start_date
    for _ in range(7):
        if not date_range.contains(candidate):
            return None
        if any(rate_set.allows_weekday(candidate) for rate_set in date_range.rate_sets):
            return candidate
        candidate = add_days(candidate, 1)
    return None


def validate_date_ranges(
    date_ranges: Sequence[DateRange],
    start_date: date,
    units: int,
) -> Optional[CalendarIssue]:
    """Flag closed segments or unmet minimum stays within ``[start_date, start_date + units - 1]``.

    A segment's minimum stay is compared with the nights of the request from that
    segment's first day onward, so a late-starting segment only binds the tail of the
    stay.
    """
    window_end = add_days(start_date, units - 1)
    overlapping = [item for item in date_ranges if item.overlaps(start_date, window_end)]

    closed = [item for item in overlapping if item.is_closed]
    if closed:
        return CalendarIssue(IssueKind.CLOSED, messages.rates_closed(closed))

    violations: List[tuple[DateRange, int]] = []
    for item in overlapping:
        if not item.rate_sets:
            continue
        days_before = (item.start_date - start_date).days
        bound_units = units - days_before if days_before > 0 else units
        if any(rate_set.min_stay_units <= bound_units for rate_set in item.rate_sets):
            continue
        violations.append((item, item.rate_sets[0].min_stay_units))

    if violations:
        return CalendarIssue(
            IssueKind.MIN_STAY,
            messages.min_stay_not_met(violations),
            min_stay_units=violations[0][1],
        )
    return None
