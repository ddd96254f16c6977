from __future__ import annotations

import pytest

from availability_engine.pax.models import Passenger, PassengerType, PaxConfig
from availability_engine.pax.normalizer import build_room_configs, convert_to_adult, normalize_pax_configs
from availability_engine.rates.models import OptionProfile


def _family() -> PaxConfig:
    return PaxConfig.from_dict(
        {
            "room_type": "Twin",
            "passengers": [
                {"passenger_type": "Adult", "first_name": "Ana"},
                {"passenger_type": "Child", "first_name": "Ben", "age": 8},
                {"passenger_type": "Infant", "first_name": "Cai", "age": 1},
            ],
        }
    )


def test_counts_are_derived_from_passengers() -> None:
    config = _family()
    assert (config.adults, config.children, config.infants) == (1, 1, 1)


def test_mismatched_counts_are_rejected() -> None:
    with pytest.raises(ValueError):
        PaxConfig.from_dict({"adults": 2, "passengers": [{"passenger_type": "Adult"}]})


def test_convert_children_preserves_totals_and_input() -> None:
    original = [_family(), PaxConfig(room_type="Double", adults=2, children=2)]

    converted = convert_to_adult(original, PassengerType.CHILD)

    assert [(item.adults, item.children, item.infants) for item in converted] == [(2, 0, 1), (4, 0, 0)]
    assert [item.total_pax for item in converted] == [item.total_pax for item in original]
    assert [p.passenger_type for p in converted[0].passengers] == [
        PassengerType.ADULT,
        PassengerType.ADULT,
        PassengerType.INFANT,
    ]
    assert original[0].children == 1
    assert original[0].passengers[1].passenger_type is PassengerType.CHILD


def test_normalize_follows_option_rules() -> None:
    configs = [PaxConfig(adults=2, children=1, infants=1)]

    untouched = normalize_pax_configs(OptionProfile(count_children_in_pax_break=True, children_allowed=True), configs)
    assert (untouched[0].adults, untouched[0].children) == (2, 1)

    both = normalize_pax_configs(
        OptionProfile(
            count_children_in_pax_break=True,
            children_allowed=False,
            count_infants_in_pax_break=True,
            infants_allowed=False,
        ),
        configs,
    )
    assert (both[0].adults, both[0].children, both[0].infants) == (4, 0, 0)


def test_room_configs_use_room_type_codes() -> None:
    rooms = build_room_configs([_family(), PaxConfig(room_type="Double", adults=2), PaxConfig(adults=1)])

    assert [room.to_payload() for room in rooms] == [
        {"Adults": 1, "Children": 1, "Infants": 1, "RoomType": "TW"},
        {"Adults": 2, "Children": 0, "Infants": 0, "RoomType": "DB"},
        {"Adults": 1, "Children": 0, "Infants": 0},
    ]


def test_adults_cannot_be_converted() -> None:
    with pytest.raises(ValueError):
        convert_to_adult([PaxConfig(adults=1)], PassengerType.ADULT)


def test_passenger_from_camel_case_payload() -> None:
    passenger = Passenger.from_dict({"passengerType": "Child", "firstName": "Dee", "age": "7"})
    assert passenger.passenger_type is PassengerType.CHILD
    assert passenger.age == 7
