"""Fetch option metadata together with the calendar for the requested window."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence

from availability_engine.pax.models import RoomConfig
from availability_engine.rates.models import DateRange, OptionProfile
from availability_engine.services.date_ranges import (
    OPTION_INFO_REQUEST,
    first_option,
    parse_date_ranges,
    room_configs_payload,
)
from availability_engine.services.hostconnect import Transport
from availability_engine.services.replies import as_int, as_text, is_yes

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OptionInfo:
    profile: OptionProfile
    date_ranges: List[DateRange] = field(default_factory=list)


def parse_option_profile(option: Mapping[str, Any]) -> OptionProfile:
    general = option.get("OptGeneral") or {}
    duration = as_int(general.get("Periods"))
    return OptionProfile(
        count_children_in_pax_break=is_yes(general.get("CountChildrenInPaxBreak")),
        children_allowed=is_yes(general.get("ChildrenAllowed")),
        count_infants_in_pax_break=is_yes(general.get("CountInfantsInPaxBreak")),
        infants_allowed=is_yes(general.get("InfantsAllowed")),
        duration=duration if duration and duration > 0 else None,
        max_pax_per_charge=as_int(general.get("MPFCU")),
        charge_unit=as_text(general.get("SCU")),
    )


class OptionInfoClient:
    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def fetch_option_info(
        self,
        option_id: str,
        start_date: date,
        units: int,
        room_configs: Sequence[RoomConfig] = (),
    ) -> OptionInfo:
        body: Dict[str, Any] = {
            "Opt": option_id,
            "Info": "GD",
            "DateFrom": start_date.isoformat(),
            "SCUqty": max(1, int(units)),
        }
        if room_configs:
            body["RoomConfigs"] = room_configs_payload(room_configs)
        reply = await self.transport.call(OPTION_INFO_REQUEST, body)
        option = first_option(reply)
        info = OptionInfo(profile=parse_option_profile(option), date_ranges=parse_date_ranges(option))
        logger.debug("Option %s profile: %s", option_id, info.profile)
        return info
