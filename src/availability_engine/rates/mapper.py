"""Convert stay quotes into the rate lines returned to the booking workflow."""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from availability_engine.rates.models import (
    CUSTOM_NO_RATE_ID,
    CUSTOM_RATE_ID,
    MAX_MARKUP_PERCENTAGE,
    MIN_MARKUP_PERCENTAGE,
    CancelPolicy,
    ExternalRateMetadata,
    Number,
    RateLine,
    StayQuote,
)
from availability_engine.utils.dates import to_hh_mm

logger = logging.getLogger(__name__)

NO_RATE_CANCEL_HOURS = "72"


def markup_factor(markup_percentage: float) -> float:
    if not markup_percentage or not MIN_MARKUP_PERCENTAGE <= markup_percentage <= MAX_MARKUP_PERCENTAGE:
        return 1.0
    return 1 + markup_percentage / 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def prorate(price: Number, fetched_units: int, deficit_units: int) -> float:
    """Scale a price fetched for ``fetched_units`` down (or up) to ``deficit_units``."""
    if fetched_units <= 0 or deficit_units <= 0 or fetched_units == deficit_units:
        return float(price)
    return price / fetched_units * deficit_units


def round_to_whole_units(value: Number, precision: int, *, nearest: bool) -> int:
    """Round a minor-unit amount to a whole currency unit (up unless ``nearest``)."""
    factor = 10 ** max(precision, 0)
    whole = value / factor
    rounded = round_half_up(whole) if nearest else math.ceil(whole)
    return int(rounded * factor)


def external_rate_text(external: ExternalRateMetadata) -> Optional[str]:
    description = external.option_description
    plan = external.rate_plan_description
    if not description:
        return plan
    if plan and plan not in description:
        return f"{description} ({plan})"
    return description


def select_cancel_policies(quote: StayQuote) -> List[CancelPolicy]:
    in_effect = [policy for policy in quote.cancel_policies if policy.in_effect]
    if in_effect:
        return in_effect
    return list(quote.external.cancel_policies)


def _start_times(values: Iterable[str]) -> List[str]:
    times: List[str] = []
    for value in values:
        formatted = to_hh_mm(value)
        if formatted:
            times.append(formatted)
    return times


def map_quotes_to_rate_lines(
    quotes: Sequence[StayQuote],
    *,
    markup_percentage: float = 0,
    donor_quotes: Sequence[StayQuote] = (),
    fetched_units: int = 0,
    deficit_units: int = 0,
    covered_units: int = 0,
    agent_currency: Optional[str] = None,
    round_rates: bool = False,
    round_to_nearest_unit: bool = False,
) -> List[RateLine]:
    """Build rate lines from ``quotes``.

    Three shapes are supported:

    * plain quotes (no deficit): prices and rate ids pass through unchanged;
    * donor-only quotes (``covered_units == 0`` with a deficit): each price is
      prorated from ``fetched_units`` to ``deficit_units`` and marked up;
    * covered quotes blended with ``donor_quotes``: the donor matching each
      rate id is prorated, marked up and added to the covered price. Covered
      quotes without a donor counterpart are dropped.
    """
    factor = markup_factor(markup_percentage)
    rate_id_override = CUSTOM_RATE_ID if factor != 1.0 else None
    donors: Dict[str, StayQuote] = {quote.rate_id: quote for quote in donor_quotes}
    blending = covered_units > 0 and deficit_units > 0
    donor_only = covered_units <= 0 and deficit_units > 0

    lines: List[RateLine] = []
    for quote in quotes:
        total: Number = quote.total_price
        agent: Number = quote.agent_price
        if blending:
            donor = donors.get(quote.rate_id)
            if donor is None:
                logger.warning("No donor quote matches rate %s; dropping partial rate", quote.rate_id)
                continue
            total = round_half_up(
                total + prorate(donor.total_price, fetched_units, deficit_units) * factor
            )
            agent = round_half_up(
                agent + prorate(donor.agent_price, fetched_units, deficit_units) * factor
            )
        elif donor_only:
            total = round_half_up(prorate(total, fetched_units, deficit_units) * factor)
            agent = round_half_up(prorate(agent, fetched_units, deficit_units) * factor)

        if round_rates:
            total = round_to_whole_units(total, quote.currency_precision, nearest=round_to_nearest_unit)
            agent = round_to_whole_units(agent, quote.currency_precision, nearest=round_to_nearest_unit)

        external = quote.external
        lines.append(
            RateLine(
                rate_id=rate_id_override or quote.rate_id,
                currency=quote.currency,
                agent_currency=agent_currency,
                total_price=total,
                agent_price=agent,
                currency_precision=quote.currency_precision,
                cancel_hours=quote.cancel_hours,
                external_rate_text=external_rate_text(external),
                cancel_policies=select_cancel_policies(quote),
                start_times=_start_times(external.start_times),
                pickup_points=list(external.pickup_points),
                dropoff_points=list(external.dropoff_points),
                additional_details=list(external.additional_details),
            )
        )
    return lines


def empty_rate_lines(agent_currency: Optional[str]) -> List[RateLine]:
    """Zero-priced placeholder used when services are sent without a rate."""
    return [
        RateLine(
            rate_id=CUSTOM_NO_RATE_ID,
            currency=agent_currency,
            agent_currency=agent_currency,
            total_price=0,
            agent_price=0,
            currency_precision=2,
            cancel_hours=NO_RATE_CANCEL_HOURS,
        )
    ]
