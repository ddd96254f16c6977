"""Fetch priced stay quotes for an exact window."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence

from availability_engine.pax.models import RoomConfig
from availability_engine.rates.models import (
    AdditionalDetail,
    CancelPolicy,
    ExternalRateMetadata,
    PointDetail,
    StayQuote,
)
from availability_engine.services.date_ranges import OPTION_INFO_REQUEST, first_option, room_configs_payload
from availability_engine.services.hostconnect import Transport
from availability_engine.services.replies import as_int, as_list, as_number, as_text, dig, is_yes

logger = logging.getLogger(__name__)


def _parse_cancel_policy(raw: Mapping[str, Any], *, option_level: bool) -> CancelPolicy:
    policy = CancelPolicy(
        penalty_description=as_text(raw.get("PenaltyDescription")),
        cancel_num=as_int(dig(raw, "Deadline", "OffsetUnitMultiplier")),
        cancel_time_unit=as_text(dig(raw, "Deadline", "OffsetTimeUnit")),
    )
    if option_level:
        policy.deadline = as_text(dig(raw, "Deadline", "DeadlineDateTime"))
        policy.in_effect = is_yes(raw.get("InEffect"))
        fee = raw.get("LinePrice")
        agent_price = raw.get("AgentPrice")
        policy.cancel_fee = as_number(fee) if fee not in (None, "") else None
        policy.agent_price = as_number(agent_price) if agent_price not in (None, "") else None
    return policy


def _parse_point(raw: Mapping[str, Any]) -> PointDetail:
    return PointDetail(
        point_name=as_text(raw.get("ExtPointName")),
        minutes_prior=as_text(raw.get("MinutesPrior")),
        address=as_text(raw.get("Address")),
        point_info=as_text(raw.get("ExtPointInfo")),
    )


def parse_external_details(raw: Mapping[str, Any]) -> ExternalRateMetadata:
    return ExternalRateMetadata(
        option_description=as_text(raw.get("ExtOptionDescr")),
        rate_plan_description=as_text(raw.get("ExtRatePlanDescr")),
        start_times=[str(item) for item in as_list(dig(raw, "ExtStartTimes", "ExtStartTime"))],
        pickup_points=[
            _parse_point(item)
            for item in as_list(dig(raw, "ExtPickupDetails", "ExtPickupDetail"))
            if isinstance(item, Mapping)
        ],
        dropoff_points=[
            _parse_point(item)
            for item in as_list(dig(raw, "ExtDropoffDetails", "ExtDropoffDetail"))
            if isinstance(item, Mapping)
        ],
        additional_details=[
            AdditionalDetail(
                detail_name=as_text(item.get("DetailName")),
                detail_description=as_text(item.get("DetailDescription")),
            )
            for item in as_list(dig(raw, "AdditionalDetails", "AdditionalDetail"))
            if isinstance(item, Mapping)
        ],
        cancel_policies=[
            _parse_cancel_policy(item, option_level=False)
            for item in as_list(dig(raw, "CancelPolicies", "CancelPenalty"))
            if isinstance(item, Mapping)
        ],
    )


def parse_stay_quote(raw: Mapping[str, Any]) -> StayQuote:
    precision = raw.get("CurrencyPrecision")
    if precision is None:
        precision = raw.get("currencyPrecision")
    return StayQuote(
        rate_id=str(raw.get("RateId") or ""),
        currency=as_text(raw.get("Currency")),
        total_price=as_number(raw.get("TotalPrice")),
        agent_price=as_number(raw.get("AgentPrice")),
        currency_precision=as_int(precision, 2) or 0,
        cancel_hours=as_text(raw.get("CancelHours")),
        cancel_policies=[
            _parse_cancel_policy(item, option_level=True)
            for item in as_list(dig(raw, "CancelPolicies", "CancelPenalty"))
            if isinstance(item, Mapping)
        ],
        external=parse_external_details(raw.get("ExternalRateDetails") or {}),
    )


def parse_stay_quotes(option: Mapping[str, Any]) -> List[StayQuote]:
    return [parse_stay_quote(item) for item in as_list(option.get("OptStayResults")) if isinstance(item, Mapping)]


class StayQuoteFetcher:
    """Requests ``GS`` stay results for one window."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def fetch_stay_quotes(
        self,
        option_id: str,
        start_date: date,
        duration_units: int,
        room_configs: Sequence[RoomConfig],
        display_in_supplier_currency: bool = False,
    ) -> List[StayQuote]:
        units = max(1, int(duration_units))
        body: Dict[str, Any] = {
            "Opt": option_id,
            "Info": "GS",
            "DateFrom": start_date.isoformat(),
            "SCUqty": units,
            "RateConvert": "N" if display_in_supplier_currency else "Y",
            "RoomConfigs": room_configs_payload(room_configs),
        }
        reply = await self.transport.call(OPTION_INFO_REQUEST, body)
        quotes = parse_stay_quotes(first_option(reply))
        logger.debug("Stay quotes for %s from %s x%s: %s", option_id, start_date, units, len(quotes))
        return quotes
