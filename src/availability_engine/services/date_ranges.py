"""Read the published rate calendar for an option."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from availability_engine.pax.models import RoomConfig
from availability_engine.rates.models import DateRange, RateSet
from availability_engine.services.hostconnect import Transport
from availability_engine.services.replies import as_int, as_list, as_text, dig, is_yes
from availability_engine.utils.dates import parse_date

logger = logging.getLogger(__name__)

OPTION_INFO_REQUEST = "OptionInfoRequest"
DAYS_PER_YEAR = 365
MAX_WINDOW_YEARS = 100

_DAY_KEYS: Tuple[Tuple[str, ...], ...] = (
    ("@Mon",),
    ("@Tue",),
    ("@Wed", "@Weds"),
    ("@Thu", "@Thur"),
    ("@Fri",),
    ("@Sat",),
    ("@Sun",),
)


def room_configs_payload(room_configs: Sequence[RoomConfig]) -> Dict[str, Any]:
    return {"RoomConfig": [room.to_payload() for room in room_configs]}


def first_option(reply: Mapping[str, Any]) -> Mapping[str, Any]:
    options = as_list(reply.get("Option"))
    return options[0] if options else {}


def parse_applies_days(raw: Any) -> Tuple[bool, ...]:
    if not isinstance(raw, Mapping):
        return (True,) * 7
    return tuple(any(is_yes(raw.get(key)) for key in keys) for keys in _DAY_KEYS)


def parse_rate_set(raw: Mapping[str, Any]) -> RateSet:
    opt_rate = raw.get("OptRate") or {}
    room_rates = dig(opt_rate, "RoomRates", default={})
    return RateSet(
        rate_name=as_text(raw.get("RateName")),
        rate_text=as_text(raw.get("RateText")),
        min_stay_units=as_int(raw.get("MinSCU"), 0) or 0,
        max_stay_units=as_int(raw.get("MaxSCU")),
        cancel_hours=as_text(raw.get("CancelHours")),
        is_closed=is_yes(raw.get("IsClosed")),
        applies_days=parse_applies_days(raw.get("AppliesDaysOfWeek")),
        room_rates=dict(room_rates) if isinstance(room_rates, Mapping) else {},
        extras_rates=as_list(dig(opt_rate, "ExtrasRates", "ExtrasRate")),
    )


def parse_date_ranges(option: Mapping[str, Any]) -> List[DateRange]:
    """Turn an ``Option`` element's ``OptDateRanges`` into sorted ``DateRange`` objects."""
    ranges: List[DateRange] = []
    for raw in as_list(dig(option, "OptDateRanges", "OptDateRange")):
        start = parse_date(raw.get("DateFrom"))
        end = parse_date(raw.get("DateTo"))
        if start is None or end is None:
            logger.debug("Skipping date range without bounds: %s", raw)
            continue
        rate_sets = [
            parse_rate_set(item)
            for item in as_list(dig(raw, "RateSets", "RateSet"))
            if isinstance(item, Mapping)
        ]
        rate_sets.sort(key=lambda rate_set: rate_set.min_stay_units)
        ranges.append(
            DateRange(
                start_date=start,
                end_date=end,
                currency=as_text(raw.get("Currency")),
                price_code=as_text(raw.get("PriceCode")),
                rate_sets=rate_sets,
            )
        )
    ranges.sort(key=lambda item: item.start_date)
    return ranges


class DateRangeRepository:
    """Lists the calendar segments that intersect a window."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def list_date_ranges(
        self,
        option_id: str,
        from_date: date,
        window_days: int,
        room_configs: Sequence[RoomConfig] = (),
        *,
        max_years: int = MAX_WINDOW_YEARS,
    ) -> List[DateRange]:
        window = max(1, min(int(window_days), max_years * DAYS_PER_YEAR))
        body: Dict[str, Any] = {
            "Opt": option_id,
            "Info": "D",
            "DateFrom": from_date.isoformat(),
            "SCUqty": window,
        }
        if room_configs:
            body["RoomConfigs"] = room_configs_payload(room_configs)
        reply = await self.transport.call(OPTION_INFO_REQUEST, body)
        ranges = parse_date_ranges(first_option(reply))
        logger.debug(
            "Calendar for %s from %s (%s days): %s range(s)", option_id, from_date, window, len(ranges)
        )
        return ranges
