"""Passenger configuration models and pax-break normalization."""

from .models import Passenger, PassengerType, PaxConfig, RoomConfig
from .normalizer import build_room_configs, convert_to_adult, normalize_pax_configs

__all__ = [
    "Passenger",
    "PassengerType",
    "PaxConfig",
    "RoomConfig",
    "build_room_configs",
    "convert_to_adult",
    "normalize_pax_configs",
]
