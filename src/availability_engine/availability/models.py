"""Request and result types for availability resolution."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Mapping, Optional

from availability_engine.pax.models import PaxConfig
from availability_engine.rates.models import RateLine
from availability_engine.utils.dates import parse_date

INVENTORY_RESULT_TYPE = "inventory"


@dataclass(slots=True)
class AvailabilityRequest:
    option_id: str
    start_date: date
    duration_units: int = 1
    pax_configs: List[PaxConfig] = field(default_factory=list)
    display_in_supplier_currency: bool = False

    def __post_init__(self) -> None:
        try:
            units = int(self.duration_units or 1)
        except (TypeError, ValueError):
            units = 1
        self.duration_units = max(1, units)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AvailabilityRequest":
        start = parse_date(payload.get("start_date") or payload.get("startDate"))
        if start is None:
            raise ValueError("start_date is required")
        option_id = payload.get("option_id") or payload.get("optionId")
        if not option_id:
            raise ValueError("option_id is required")
        units = payload.get("duration_units", payload.get("chargeUnitQuantity"))
        raw_pax = payload.get("pax_configs") or payload.get("paxConfigs") or []
        return cls(
            option_id=str(option_id),
            start_date=start,
            duration_units=units,
            pax_configs=[PaxConfig.from_dict(item) for item in raw_pax],
            display_in_supplier_currency=bool(payload.get("display_in_supplier_currency", False)),
        )


@dataclass(slots=True)
class BookabilityResult:
    bookable: bool
    rates: List[RateLine] = field(default_factory=list)
    end_date: Optional[date] = None
    message: Optional[str] = None
    type: str = INVENTORY_RESULT_TYPE

    @classmethod
    def rejected(cls, message: str) -> "BookabilityResult":
        return cls(bookable=False, message=message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "bookable": self.bookable,
            "type": self.type,
            "rates": [line.to_dict() for line in self.rates],
        }
        if self.end_date is not None:
            payload["end_date"] = self.end_date.isoformat()
        if self.message:
            payload["message"] = self.message
        return payload
