"""Resolve whether an option can be booked for a stay, and at what rates."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from availability_engine.availability import messages
from availability_engine.availability.models import AvailabilityRequest, BookabilityResult
from availability_engine.availability.outcomes import Outcome, classify_coverage
from availability_engine.availability.synthesizer import CustomRateSynthesizer
from availability_engine.availability.validation import (
    validate_date_ranges,
    validate_max_pax,
    validate_start_day,
)
from availability_engine.pax.models import RoomConfig
from availability_engine.pax.normalizer import build_room_configs, normalize_pax_configs
from availability_engine.rates.mapper import empty_rate_lines, map_quotes_to_rate_lines
from availability_engine.rates.models import CustomRateConfig, DateRange
from availability_engine.services.agent_info import AGENT_CURRENCY_TTL_S, AgentInfoClient
from availability_engine.services.date_ranges import DateRangeRepository
from availability_engine.services.hostconnect import Transport
from availability_engine.services.option_info import OptionInfoClient
from availability_engine.services.stay_quotes import StayQuoteFetcher
from availability_engine.utils.cache import TtlCache
from availability_engine.utils.dates import add_days, friendly_date

logger = logging.getLogger(__name__)


def calculate_end_date(start_date: date, duration: Optional[int], units: Optional[int]) -> Optional[date]:
    if duration:
        return add_days(start_date, duration)
    if units and units > 1:
        return add_days(start_date, units)
    return None


class AvailabilityOrchestrator:
    """Runs one availability resolution as a chain of upstream calls.

    Resolutions share no state besides the optional agent-currency cache, so a
    caller may run several concurrently (see ``utils.throttling.gather_bounded``).
    """

    def __init__(
        self,
        *,
        option_info: OptionInfoClient,
        date_ranges: DateRangeRepository,
        stay_quotes: StayQuoteFetcher,
        agent_info: Optional[AgentInfoClient] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.option_info = option_info
        self.stay_quotes = stay_quotes
        self.agent_info = agent_info
        self.synthesizer = CustomRateSynthesizer(date_ranges, stay_quotes, today=today)

    @classmethod
    def from_transport(
        cls,
        transport: Transport,
        *,
        cache: Optional[TtlCache] = None,
        agent_currency_ttl_s: float = AGENT_CURRENCY_TTL_S,
        today: Callable[[], date] = date.today,
    ) -> "AvailabilityOrchestrator":
        return cls(
            option_info=OptionInfoClient(transport),
            date_ranges=DateRangeRepository(transport),
            stay_quotes=StayQuoteFetcher(transport),
            agent_info=AgentInfoClient(transport, cache=cache, ttl_s=agent_currency_ttl_s),
            today=today,
        )

    async def resolve_availability(
        self,
        request: AvailabilityRequest,
        config: CustomRateConfig,
    ) -> BookabilityResult:
        option_id = request.option_id
        start = request.start_date
        units = request.duration_units
        logger.info("Resolving availability for %s from %s x%s", option_id, start, units)

        agent_currency = await self.agent_info.get_agent_currency() if self.agent_info else None
        info = await self.option_info.fetch_option_info(option_id, start, units)
        profile = info.profile
        pax_configs = normalize_pax_configs(profile, request.pax_configs)
        room_configs = build_room_configs(pax_configs)
        end_date = calculate_end_date(start, profile.duration, units)
        option_message = messages.duration_adjusted(profile.duration, units, profile.charge_unit)

        max_pax_error = validate_max_pax(room_configs, profile.max_pax_per_charge)
        if max_pax_error:
            return BookabilityResult.rejected(max_pax_error)

        calendar = info.date_ranges
        if calendar:
            allowed_days = validate_start_day(calendar, start)
            if allowed_days:
                return BookabilityResult.rejected(messages.INVALID_START_DAY.format(days=allowed_days))

        coverage = classify_coverage(calendar, start, units)
        if coverage.is_covered:
            logger.info("Outcome for %s: %s", option_id, Outcome.COVERED.value)
            return await self._resolve_covered(
                request, calendar, room_configs, config,
                end_date=end_date, option_message=option_message, agent_currency=agent_currency,
            )

        if not config.enabled:
            logger.info("Calendar for %s ends %s; custom rates disabled", option_id, coverage.last_end)
            message = await self._rates_available_until(option_id, end_date or start, room_configs, config)
            return self._empty_or_error(config, agent_currency, message)

        synthesis = await self.synthesizer.synthesize(
            option_id,
            coverage,
            room_configs,
            config,
            end_date=end_date,
            display_in_supplier_currency=request.display_in_supplier_currency,
            agent_currency=agent_currency,
        )
        logger.info("Outcome for %s: %s", option_id, synthesis.outcome.value)
        if synthesis.lines:
            return BookabilityResult(
                bookable=True,
                rates=synthesis.lines,
                end_date=end_date,
                message=messages.success_message(option_message, synthesis.message or ""),
            )
        message = synthesis.message
        if synthesis.needs_probe or not message:
            message = await self._rates_available_until(option_id, end_date or start, room_configs, config)
        if synthesis.outcome in (Outcome.EXTENSION_EXCEEDED, Outcome.CLOSED_PERIOD):
            return BookabilityResult.rejected(message)
        return self._empty_or_error(config, agent_currency, message)

    async def _resolve_covered(
        self,
        request: AvailabilityRequest,
        calendar: Sequence[DateRange],
        room_configs: List[RoomConfig],
        config: CustomRateConfig,
        *,
        end_date: Optional[date],
        option_message: Optional[str],
        agent_currency: Optional[str],
    ) -> BookabilityResult:
        issue = validate_date_ranges(calendar, request.start_date, request.duration_units)
        if issue is not None:
            return BookabilityResult.rejected(issue.message)

        quotes = await self.stay_quotes.fetch_stay_quotes(
            request.option_id,
            request.start_date,
            request.duration_units,
            room_configs,
            request.display_in_supplier_currency,
        )
        if not quotes:
            return self._empty_or_error(config, agent_currency, messages.GENERIC_NOT_BOOKABLE)
        return BookabilityResult(
            bookable=True,
            rates=map_quotes_to_rate_lines(quotes, agent_currency=agent_currency),
            end_date=end_date,
            message=option_message,
        )

    async def _rates_available_until(
        self,
        option_id: str,
        until: date,
        room_configs: Sequence[RoomConfig],
        config: CustomRateConfig,
    ) -> str:
        nearest = await self.synthesizer.nearest_date_range(
            option_id, until, room_configs, years=config.extended_booking_years
        )
        if nearest is None:
            return messages.GENERIC_NOT_BOOKABLE
        return messages.RATES_AVAILABLE_UNTIL.format(until=friendly_date(nearest.end_date))

    @staticmethod
    def _empty_or_error(
        config: CustomRateConfig,
        agent_currency: Optional[str],
        message: str,
    ) -> BookabilityResult:
        if config.send_services_without_a_rate and agent_currency:
            return BookabilityResult(
                bookable=True,
                rates=empty_rate_lines(agent_currency.upper()),
                message=messages.SERVICE_WITHOUT_A_RATE,
            )
        return BookabilityResult.rejected(message)

