"""Passenger and room configuration models."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class PassengerType(str, Enum):
    ADULT = "Adult"
    CHILD = "Child"
    INFANT = "Infant"


ROOM_TYPE_CODES: dict[str, str] = {
    "Single": "SG",
    "Double": "DB",
    "Twin": "TW",
    "Triple": "TR",
    "Quad": "QD",
    "Other": "OT",
}


def room_type_code(room_type: Optional[str]) -> Optional[str]:
    if not room_type:
        return None
    return ROOM_TYPE_CODES.get(room_type, room_type)


@dataclass(slots=True)
class Passenger:
    passenger_type: PassengerType = PassengerType.ADULT
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    person_id: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Passenger":
        raw_type = payload.get("passenger_type") or payload.get("passengerType") or PassengerType.ADULT.value
        age = payload.get("age")
        return cls(
            passenger_type=PassengerType(raw_type),
            first_name=payload.get("first_name") or payload.get("firstName"),
            last_name=payload.get("last_name") or payload.get("lastName"),
            age=int(age) if age not in (None, "") else None,
            person_id=payload.get("person_id") or payload.get("personId"),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "passenger_type": self.passenger_type.value,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "age": self.age,
            "person_id": self.person_id,
        }


@dataclass(slots=True)
class PaxConfig:
    """Occupancy requested for one room."""

    room_type: Optional[str] = None
    adults: int = 0
    children: int = 0
    infants: int = 0
    passengers: List[Passenger] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PaxConfig":
        passengers = [Passenger.from_dict(item) for item in payload.get("passengers") or []]
        counted = _count_passengers(passengers)
        counts: Dict[str, int] = {}
        for key, passenger_type in (
            ("adults", PassengerType.ADULT),
            ("children", PassengerType.CHILD),
            ("infants", PassengerType.INFANT),
        ):
            raw = payload.get(key)
            if raw in (None, ""):
                counts[key] = counted[passenger_type] if passengers else 0
                continue
            value = int(raw)
            if value < 0:
                raise ValueError(f"{key} must not be negative")
            if passengers and value != counted[passenger_type]:
                raise ValueError(
                    f"{key}={value} does not match the {counted[passenger_type]} listed passengers"
                )
            counts[key] = value
        return cls(
            room_type=payload.get("room_type") or payload.get("roomType"),
            passengers=passengers,
            **counts,
        )

    @property
    def total_pax(self) -> int:
        return self.adults + self.children + self.infants

    def to_dict(self) -> dict[str, object]:
        return {
            "room_type": self.room_type,
            "adults": self.adults,
            "children": self.children,
            "infants": self.infants,
            "passengers": [passenger.to_dict() for passenger in self.passengers],
        }


@dataclass(slots=True)
class RoomConfig:
    """Room occupancy in the shape the inventory system expects."""

    adults: int
    children: int = 0
    infants: int = 0
    room_type_code: Optional[str] = None

    @property
    def total_pax(self) -> int:
        return self.adults + self.children + self.infants

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "Adults": self.adults,
            "Children": self.children,
            "Infants": self.infants,
        }
        if self.room_type_code:
            payload["RoomType"] = self.room_type_code
        return payload


def _count_passengers(passengers: List[Passenger]) -> Dict[PassengerType, int]:
    counts = {passenger_type: 0 for passenger_type in PassengerType}
    for passenger in passengers:
        counts[passenger.passenger_type] += 1
    return counts
