"""Calendar arithmetic shared by the calendar, quote and message layers."""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional

WEEKDAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")


def parse_date(value: str | date | None) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_years(value: date, years: int) -> date:
    """Shift ``value`` by whole years, landing 29 Feb on 28 Feb in common years."""
    target_year = value.year + years
    day = min(value.day, calendar.monthrange(target_year, value.month)[1])
    return value.replace(year=target_year, day=day)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def days_in_year(value: date) -> int:
    return 366 if calendar.isleap(value.year) else 365


def friendly_date(value: date) -> str:
    """Render ``value`` as ``05-Apr-2025``."""
    return f"{value.day:02d}-{MONTH_NAMES[value.month - 1]}-{value.year}"


def to_hh_mm(value: object) -> Optional[str]:
    """Reduce an upstream timestamp to a 24-hour ``HH:MM`` string."""
    if value in (None, ""):
        return None
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
    except ValueError:
        match = _TIME_RE.search(text)
        if not match:
            return None
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%H:%M")
