"""Manufacture custom rates for stay days the published calendar does not cover."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, List, Optional, Sequence

from availability_engine.availability import messages
from availability_engine.availability.outcomes import Coverage, Outcome, classify_deficit, exceeds_extension
from availability_engine.availability.validation import (
    IssueKind,
    next_allowed_date,
    validate_date_ranges,
    validate_start_day,
)
from availability_engine.pax.models import RoomConfig
from availability_engine.rates.mapper import map_quotes_to_rate_lines
from availability_engine.rates.models import CustomRateConfig, DateRange, RateLine, StayQuote
from availability_engine.services.date_ranges import DateRangeRepository
from availability_engine.services.stay_quotes import StayQuoteFetcher
from availability_engine.utils.dates import add_days, add_years, days_between, days_in_year

logger = logging.getLogger(__name__)


class DonorSource(str, Enum):
    LAST_YEAR = "last_year"
    LAST_AVAILABLE = "last_available"

    @property
    def period_label(self) -> str:
        return messages.LAST_YEAR_PERIOD if self is DonorSource.LAST_YEAR else messages.LAST_AVAILABLE_PERIOD


@dataclass(slots=True)
class Donor:
    """Calendar segment whose rates are borrowed, and the day pricing starts from."""

    date_range: DateRange
    anchor: date
    source: DonorSource

    @property
    def days_from_anchor(self) -> int:
        return days_between(self.anchor, self.date_range.end_date) + 1


@dataclass(slots=True)
class DonorSelection:
    donor: Optional[Donor] = None
    message: Optional[str] = None


@dataclass(slots=True)
class Synthesis:
    """Outcome of a custom-rate attempt.

    ``lines`` is populated only for ``DEFICIT_WITH_DONOR``. ``needs_probe`` asks the
    caller to replace ``message`` with the nearest "rates available until" notice.
    """

    outcome: Outcome
    lines: List[RateLine] = field(default_factory=list)
    message: Optional[str] = None
    needs_probe: bool = False
    donor: Optional[Donor] = None


class CustomRateSynthesizer:
    def __init__(
        self,
        date_ranges: DateRangeRepository,
        stay_quotes: StayQuoteFetcher,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.date_ranges = date_ranges
        self.stay_quotes = stay_quotes
        self.today = today

    async def nearest_date_range(
        self,
        option_id: str,
        until: date,
        room_configs: Sequence[RoomConfig],
        *,
        years: int,
    ) -> Optional[DateRange]:
        """Latest segment published between today and ``until``, else within the past year."""
        today = self.today()
        ranges = await self.date_ranges.list_date_ranges(
            option_id, today, days_between(today, until), room_configs, max_years=years
        )
        if ranges:
            return ranges[-1]
        year_ago = add_years(today, -1)
        ranges = await self.date_ranges.list_date_ranges(
            option_id, year_ago, days_in_year(year_ago), room_configs, max_years=years
        )
        return ranges[-1] if ranges else None

    async def select_donor(
        self,
        option_id: str,
        coverage: Coverage,
        room_configs: Sequence[RoomConfig],
        config: CustomRateConfig,
        *,
        end_date: Optional[date],
    ) -> DonorSelection:
        if config.use_last_year_rate:
            anchor = add_years(coverage.deficit_start, -1)
            ranges = await self.date_ranges.list_date_ranges(
                option_id, anchor, coverage.deficit_days, room_configs
            )
            donor_range = next((item for item in ranges if item.contains(anchor)), None)
            if donor_range is None or add_years(coverage.deficit_end, -1) > donor_range.end_date:
                logger.info("No last-year donor for %s around %s", option_id, anchor)
                return DonorSelection(message=messages.NO_LAST_YEAR_RATE)
            return DonorSelection(donor=Donor(donor_range, anchor, DonorSource.LAST_YEAR))

        donor_range = await self.nearest_date_range(
            option_id,
            end_date or coverage.start_date,
            room_configs,
            years=config.extended_booking_years,
        )
        if donor_range is None:
            logger.info("No last-available donor for %s", option_id)
            return DonorSelection(message=messages.NO_LAST_AVAILABLE_RATE)
        return DonorSelection(
            donor=Donor(donor_range, donor_range.start_date, DonorSource.LAST_AVAILABLE)
        )

    async def synthesize(
        self,
        option_id: str,
        coverage: Coverage,
        room_configs: Sequence[RoomConfig],
        config: CustomRateConfig,
        *,
        end_date: Optional[date] = None,
        display_in_supplier_currency: bool = False,
        agent_currency: Optional[str] = None,
    ) -> Synthesis:
        covered_quotes: List[StayQuote] = []
        if coverage.covered_days > 0:
            covered_quotes = await self.stay_quotes.fetch_stay_quotes(
                option_id,
                coverage.start_date,
                coverage.covered_days,
                room_configs,
                display_in_supplier_currency,
            )
            if not covered_quotes:
                return Synthesis(Outcome.DEFICIT_NO_DONOR, message=messages.GENERIC_NOT_BOOKABLE)

        selection = await self.select_donor(option_id, coverage, room_configs, config, end_date=end_date)
        donor = selection.donor
        if donor is None:
            return Synthesis(classify_deficit(None), message=selection.message)

        years = config.extended_booking_years
        if exceeds_extension(donor.date_range, years, coverage.deficit_start, coverage.deficit_end):
            return Synthesis(
                classify_deficit(donor.date_range, extension_exceeded=True),
                message=messages.EXTENSION_EXCEEDED.format(
                    last_rate_end=donor.date_range.end_date.isoformat(), years=years
                ),
                donor=donor,
            )

        period = donor.source.period_label
        warnings: List[str] = []
        min_stay_required = 0
        issue = validate_date_ranges([donor.date_range], donor.anchor, coverage.deficit_days)
        if issue is not None and issue.kind is IssueKind.CLOSED:
            return Synthesis(
                classify_deficit(donor.date_range, donor_closed=True),
                message=messages.DONOR_CLOSED.format(period=period, closed=issue.message),
                donor=donor,
            )
        if issue is not None:
            min_stay_required = issue.min_stay_units
            warnings.append(messages.MIN_STAY_WARNING.format(min_stay=min_stay_required, period=period))

        allowed_days = validate_start_day([donor.date_range], donor.anchor)
        if allowed_days:
            warnings.append(messages.START_DAY_WARNING.format(days=allowed_days, period=period))
            shifted = next_allowed_date(donor.date_range, donor.anchor)
            if shifted is not None:
                donor.anchor = shifted

        fetch_units = max(min(coverage.deficit_days, donor.days_from_anchor), min_stay_required)
        if fetch_units > donor.days_from_anchor:
            # keep an inflated fetch inside the donor segment
            donor.anchor = max(
                donor.date_range.start_date, add_days(donor.date_range.end_date, 1 - fetch_units)
            )
        donor_quotes = await self.stay_quotes.fetch_stay_quotes(
            option_id, donor.anchor, fetch_units, room_configs, display_in_supplier_currency
        )
        if not donor_quotes:
            logger.info("Donor period %s returned no quotes for %s", donor.date_range.start_date, option_id)
            return Synthesis(Outcome.DEFICIT_NO_DONOR, needs_probe=True, donor=donor)

        primary = covered_quotes or donor_quotes
        lines = map_quotes_to_rate_lines(
            primary,
            markup_percentage=config.markup_percentage,
            donor_quotes=donor_quotes if covered_quotes else (),
            fetched_units=fetch_units,
            deficit_units=coverage.deficit_days,
            covered_units=coverage.covered_days,
            agent_currency=agent_currency,
            round_rates=config.round_rates,
            round_to_nearest_unit=config.round_to_nearest_unit,
        )
        if not lines:
            return Synthesis(Outcome.DEFICIT_NO_DONOR, message=messages.GENERIC_NOT_BOOKABLE, donor=donor)

        logger.info(
            "Custom rate for %s: %s covered day(s) + %s day(s) from %s (%s unit fetch)",
            option_id,
            coverage.covered_days,
            coverage.deficit_days,
            donor.anchor,
            fetch_units,
        )
        return Synthesis(
            Outcome.DEFICIT_WITH_DONOR,
            lines=lines,
            message=messages.custom_rate_applied(config.markup_percentage, period, warnings),
            donor=donor,
        )
