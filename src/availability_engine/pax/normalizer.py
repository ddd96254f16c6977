"""Apply option-level pax-break rules to requested room occupancy."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Sequence

from availability_engine.pax.models import Passenger, PassengerType, PaxConfig, RoomConfig, room_type_code
from availability_engine.rates.models import OptionProfile

logger = logging.getLogger(__name__)

_COUNT_FIELDS = {
    PassengerType.CHILD: "children",
    PassengerType.INFANT: "infants",
}


def convert_to_adult(configs: Sequence[PaxConfig], passenger_type: PassengerType) -> List[PaxConfig]:
    """Return copies of ``configs`` with every ``passenger_type`` traveller counted as an adult."""
    if passenger_type not in _COUNT_FIELDS:
        raise ValueError(f"Cannot convert {passenger_type.value} passengers to adults")
    count_field = _COUNT_FIELDS[passenger_type]
    converted: List[PaxConfig] = []
    for config in configs:
        moved = getattr(config, count_field)
        passengers = [
            replace(passenger, passenger_type=PassengerType.ADULT)
            if passenger.passenger_type is passenger_type
            else replace(passenger)
            for passenger in config.passengers
        ]
        converted.append(
            replace(
                config,
                adults=config.adults + moved,
                passengers=passengers,
                **{count_field: 0},
            )
        )
    return converted


def normalize_pax_configs(profile: OptionProfile, configs: Sequence[PaxConfig]) -> List[PaxConfig]:
    normalized = [replace(config, passengers=list(config.passengers)) for config in configs]
    if profile.count_children_in_pax_break and not profile.children_allowed:
        logger.debug("Counting children as adults for this option")
        normalized = convert_to_adult(normalized, PassengerType.CHILD)
    if profile.count_infants_in_pax_break and not profile.infants_allowed:
        logger.debug("Counting infants as adults for this option")
        normalized = convert_to_adult(normalized, PassengerType.INFANT)
    return normalized


def build_room_configs(configs: Iterable[PaxConfig]) -> List[RoomConfig]:
    rooms: List[RoomConfig] = []
    for config in configs:
        if config.passengers:
            adults, children, infants = _count_by_type(config.passengers)
        else:
            adults, children, infants = config.adults, config.children, config.infants
        rooms.append(
            RoomConfig(
                adults=adults,
                children=children,
                infants=infants,
                room_type_code=room_type_code(config.room_type),
            )
        )
    return rooms


def _count_by_type(passengers: Iterable[Passenger]) -> tuple[int, int, int]:
    adults = children = infants = 0
    for passenger in passengers:
        if passenger.passenger_type is PassengerType.CHILD:
            children += 1
        elif passenger.passenger_type is PassengerType.INFANT:
            infants += 1
        else:
            adults += 1
    return adults, children, infants
