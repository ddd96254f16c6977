"""Dataclasses describing calendar segments, quotes and emitted rate lines."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from availability_engine.utils.dates import WEEKDAY_NAMES

MIN_MARKUP_PERCENTAGE = 1
MAX_MARKUP_PERCENTAGE = 100
DEFAULT_MARKUP_PERCENTAGE = 0
MIN_EXTENDED_BOOKING_YEARS = 1
MAX_EXTENDED_BOOKING_YEARS = 100
DEFAULT_EXTENDED_BOOKING_YEARS = 2

CUSTOM_RATE_ID = "Custom"
CUSTOM_NO_RATE_ID = "CustomNoRates"

Number = int | float


@dataclass(slots=True)
class RateSet:
    """One priced rule inside a date range (a date range may hold several)."""

    rate_name: Optional[str] = None
    rate_text: Optional[str] = None
    min_stay_units: int = 0
    max_stay_units: Optional[int] = None
    cancel_hours: Optional[str] = None
    is_closed: bool = False
    applies_days: Tuple[bool, ...] = (True,) * 7
    room_rates: Dict[str, Any] = field(default_factory=dict)
    extras_rates: List[Dict[str, Any]] = field(default_factory=list)

    def allows_weekday(self, value: date) -> bool:
        return self.applies_days[value.weekday()]

    @property
    def allowed_day_names(self) -> List[str]:
        return [name for name, allowed in zip(WEEKDAY_NAMES, self.applies_days) if allowed]

    def to_dict(self) -> dict[str, object]:
        return {
            "rate_name": self.rate_name,
            "rate_text": self.rate_text,
            "min_stay_units": self.min_stay_units,
            "max_stay_units": self.max_stay_units,
            "cancel_hours": self.cancel_hours,
            "is_closed": self.is_closed,
            "allowed_days": self.allowed_day_names,
            "room_rates": self.room_rates,
            "extras_rates": self.extras_rates,
        }


@dataclass(slots=True)
class DateRange:
    """Contiguous calendar segment with its rate sets sorted by minimum stay."""

    start_date: date
    end_date: date
    currency: Optional[str] = None
    price_code: Optional[str] = None
    rate_sets: List[RateSet] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError(f"Date range ends before it starts: {self.start_date} > {self.end_date}")

    def _first(self) -> Optional[RateSet]:
        return self.rate_sets[0] if self.rate_sets else None

    @property
    def rate_name(self) -> Optional[str]:
        first = self._first()
        return first.rate_name if first else None

    @property
    def rate_text(self) -> Optional[str]:
        first = self._first()
        return first.rate_text if first else None

    @property
    def min_stay_units(self) -> int:
        first = self._first()
        return first.min_stay_units if first else 0

    @property
    def max_stay_units(self) -> Optional[int]:
        first = self._first()
        return first.max_stay_units if first else None

    @property
    def cancel_hours(self) -> Optional[str]:
        first = self._first()
        return first.cancel_hours if first else None

    @property
    def is_closed(self) -> bool:
        return any(rate_set.is_closed for rate_set in self.rate_sets)

    @property
    def room_rates(self) -> Dict[str, Any]:
        first = self._first()
        return first.room_rates if first else {}

    @property
    def extras_rates(self) -> List[Dict[str, Any]]:
        first = self._first()
        return first.extras_rates if first else []

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date

    def to_dict(self) -> dict[str, object]:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "currency": self.currency,
            "price_code": self.price_code,
            "rate_sets": [rate_set.to_dict() for rate_set in self.rate_sets],
        }


@dataclass(slots=True)
class CancelPolicy:
    penalty_description: Optional[str] = None
    cancel_num: Optional[int] = None
    cancel_time_unit: Optional[str] = None
    deadline: Optional[str] = None
    in_effect: bool = False
    cancel_fee: Optional[Number] = None
    agent_price: Optional[Number] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "penalty_description": self.penalty_description,
            "cancel_num": self.cancel_num,
            "cancel_time_unit": self.cancel_time_unit,
            "deadline": self.deadline,
            "in_effect": self.in_effect,
            "cancel_fee": self.cancel_fee,
            "agent_price": self.agent_price,
        }


@dataclass(slots=True)
class PointDetail:
    """Pickup or dropoff point offered with an externally sourced rate."""

    point_name: Optional[str] = None
    minutes_prior: Optional[str] = None
    address: Optional[str] = None
    point_info: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "point_name": self.point_name,
            "minutes_prior": self.minutes_prior,
            "address": self.address,
            "point_info": self.point_info,
        }


@dataclass(slots=True)
class AdditionalDetail:
    detail_name: Optional[str] = None
    detail_description: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {"detail_name": self.detail_name, "detail_description": self.detail_description}


@dataclass(slots=True)
class ExternalRateMetadata:
    option_description: Optional[str] = None
    rate_plan_description: Optional[str] = None
    start_times: List[str] = field(default_factory=list)
    pickup_points: List[PointDetail] = field(default_factory=list)
    dropoff_points: List[PointDetail] = field(default_factory=list)
    additional_details: List[AdditionalDetail] = field(default_factory=list)
    cancel_policies: List[CancelPolicy] = field(default_factory=list)


@dataclass(slots=True)
class StayQuote:
    """Priced quote for one rate id over an exact stay window."""

    rate_id: str
    currency: Optional[str]
    total_price: Number
    agent_price: Number
    currency_precision: int = 2
    cancel_hours: Optional[str] = None
    cancel_policies: List[CancelPolicy] = field(default_factory=list)
    external: ExternalRateMetadata = field(default_factory=ExternalRateMetadata)


@dataclass(slots=True)
class OptionProfile:
    """Option-level rules that drive pax conversion and duration handling."""

    count_children_in_pax_break: bool = False
    children_allowed: bool = True
    count_infants_in_pax_break: bool = False
    infants_allowed: bool = True
    duration: Optional[int] = None
    max_pax_per_charge: Optional[int] = None
    charge_unit: Optional[str] = None


@dataclass(slots=True)
class CustomRateConfig:
    enabled: bool = False
    markup_percentage: float = DEFAULT_MARKUP_PERCENTAGE
    extended_booking_years: int = DEFAULT_EXTENDED_BOOKING_YEARS
    use_last_year_rate: bool = False
    send_services_without_a_rate: bool = False
    round_rates: bool = False
    round_to_nearest_unit: bool = False

    @classmethod
    def normalized(
        cls,
        *,
        enabled: bool = False,
        markup_percentage: object = None,
        extended_booking_years: object = None,
        use_last_year_rate: bool = False,
        send_services_without_a_rate: bool = False,
        round_rates: bool = False,
        round_to_nearest_unit: bool = False,
    ) -> "CustomRateConfig":
        """Build a config, replacing out-of-range numeric settings with their defaults."""
        markup = _coerce_number(markup_percentage)
        if markup is None or not MIN_MARKUP_PERCENTAGE <= markup <= MAX_MARKUP_PERCENTAGE:
            markup = DEFAULT_MARKUP_PERCENTAGE
        years = _coerce_number(extended_booking_years)
        if years is None or not MIN_EXTENDED_BOOKING_YEARS <= years <= MAX_EXTENDED_BOOKING_YEARS:
            years = DEFAULT_EXTENDED_BOOKING_YEARS
        return cls(
            enabled=bool(enabled),
            markup_percentage=markup,
            extended_booking_years=int(years),
            use_last_year_rate=bool(use_last_year_rate),
            send_services_without_a_rate=bool(send_services_without_a_rate),
            round_rates=bool(round_rates),
            round_to_nearest_unit=bool(round_to_nearest_unit),
        )


@dataclass(slots=True)
class RateLine:
    """Rate entry returned to the booking workflow."""

    rate_id: str
    currency: Optional[str]
    agent_currency: Optional[str]
    total_price: Number
    agent_price: Number
    currency_precision: int = 2
    cancel_hours: Optional[str] = None
    external_rate_text: Optional[str] = None
    cancel_policies: List[CancelPolicy] = field(default_factory=list)
    start_times: List[str] = field(default_factory=list)
    pickup_points: List[PointDetail] = field(default_factory=list)
    dropoff_points: List[PointDetail] = field(default_factory=list)
    additional_details: List[AdditionalDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "rate_id": self.rate_id,
            "currency": self.currency,
            "agent_currency": self.agent_currency,
            "total_price": self.total_price,
            "agent_price": self.agent_price,
            "currency_precision": self.currency_precision,
            "cancel_hours": self.cancel_hours,
            "external_rate_text": self.external_rate_text,
            "cancel_policies": [policy.to_dict() for policy in self.cancel_policies],
            "start_times": list(self.start_times),
            "pickup_points": [point.to_dict() for point in self.pickup_points],
            "dropoff_points": [point.to_dict() for point in self.dropoff_points],
            "additional_details": [detail.to_dict() for detail in self.additional_details],
        }


def _coerce_number(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if number != number:
        return None
    return int(number) if number.is_integer() else number
