"""User-facing message templates for availability outcomes."""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from availability_engine.rates.models import DateRange, RateSet
from availability_engine.utils.dates import friendly_date

GENERIC_NOT_BOOKABLE = (
    "Not bookable for the requested date/stay. "
    "(e.g. no rates, block out period, on request, minimum stay etc.)"
)
RATES_AVAILABLE_UNTIL = "Rates are only available until {until}. Please change the date and try again."
MAX_PAX_EXCEEDED = "Maximum {max_pax} pax allowed per Pax Config. Please update the Pax Config accordingly."
RATES_CLOSED = "The rates are closed for the {closed}. Please try again with a different date."
MIN_STAY_NOT_MET = "{ranges}. Please adjust the stay length and try again."
MIN_STAY_RANGE = "The date range {start} to {end} has a minimum stay length of {min_stay}"
INVALID_START_DAY = "The start date day can only be on {days}. Please try again with the allowed day."
EXTENSION_EXCEEDED = (
    "Last available rate until: {last_rate_end}. Custom rates can only be extended by "
    "{years} year(s), please change the date and try again."
)
NO_LAST_YEAR_RATE = (
    "Custom rates cannot be calculated as the previous year's rate could not be found. "
    "Please change the date and try again."
)
NO_LAST_AVAILABLE_RATE = (
    "Custom rates cannot be calculated no last rates available. Please change the date and try again."
)
SERVICE_WITHOUT_A_RATE = (
    "No rates available for the requested date/stay. Rates will be sent as 0.00 per your company settings."
)
DONOR_CLOSED = "Not bookable for the requested date/stay using {period} {closed}"
MIN_STAY_WARNING = "Please note that a minimum stay requirement of {min_stay} was required for {period}"
START_DAY_WARNING = "Please note that start day of {days} was required in the {period}"
CUSTOM_RATE_WITH_MARKUP = "Custom rate applied, calculated using a markup on {period} {warnings}"
CUSTOM_RATE_NO_MARKUP = "Custom rate applied with no markup on {period} {warnings}"
DURATION_ADJUSTED = "This option allows exactly {duration} {unit}. The end date is adjusted accordingly."

LAST_YEAR_PERIOD = "last year's rate."
LAST_AVAILABLE_PERIOD = "last available rate."

_DAY_NAMES_SUNDAY_FIRST = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def allowed_days_text(rate_set: RateSet) -> str:
    # applies_days is Monday-first; messages list days Sunday-first
    flags = (rate_set.applies_days[6],) + tuple(rate_set.applies_days[:6])
    days = [name for name, allowed in zip(_DAY_NAMES_SUNDAY_FIRST, flags) if allowed]
    if not days:
        return "any day"
    if len(days) == 1:
        return days[0]
    if len(days) == 2:
        return f"{days[0]} and {days[1]}"
    return f"{', '.join(days[:-1])}, and {days[-1]}"


def closed_ranges_text(ranges: Iterable[DateRange]) -> str:
    parts = []
    for item in ranges:
        start = friendly_date(item.start_date)
        end = friendly_date(item.end_date)
        parts.append(f"date {start}" if start == end else f"date(s): {start} to {end}")
    return ", ".join(parts)


def rates_closed(ranges: Sequence[DateRange]) -> str:
    return RATES_CLOSED.format(closed=closed_ranges_text(ranges))


def min_stay_not_met(violations: Sequence[tuple[DateRange, int]]) -> str:
    ranges = ", ".join(
        MIN_STAY_RANGE.format(
            start=friendly_date(item.start_date),
            end=friendly_date(item.end_date),
            min_stay=min_stay,
        )
        for item, min_stay in violations
    )
    return MIN_STAY_NOT_MET.format(ranges=ranges)


def duration_adjusted(duration: Optional[int], units: Optional[int], charge_unit: Optional[str]) -> Optional[str]:
    if not duration or not units or duration == units:
        return None
    return DURATION_ADJUSTED.format(duration=duration, unit=charge_unit or "Nights/Days")


def custom_rate_applied(markup_percentage: float, period: str, warnings: Sequence[str]) -> str:
    template = CUSTOM_RATE_WITH_MARKUP if markup_percentage else CUSTOM_RATE_NO_MARKUP
    return template.format(period=period, warnings=" ".join(warnings)).strip()


def success_message(option_message: Optional[str], custom_message: str) -> str:
    if not option_message:
        return custom_message
    return f"{option_message.rstrip('.')}. {custom_message}"
