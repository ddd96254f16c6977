from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional

import pytest


@dataclass
class FakeSegment:
    start: str
    end: str
    price: int = 100
    min_stay: int = 0
    closed: bool = False
    days: Optional[dict[str, str]] = None

    @property
    def start_date(self) -> date:
        return date.fromisoformat(self.start)

    @property
    def end_date(self) -> date:
        return date.fromisoformat(self.end)

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    def to_payload(self) -> dict[str, Any]:
        rate_set: dict[str, Any] = {
            "RateName": f"Season {self.start[:4]}",
            "RateText": "Standard",
            "MinSCU": str(self.min_stay),
            "MaxSCU": "999",
            "CancelHours": "48",
        }
        if self.closed:
            rate_set["IsClosed"] = "Y"
        if self.days is not None:
            rate_set["AppliesDaysOfWeek"] = self.days
        return {
            "DateFrom": self.start,
            "DateTo": self.end,
            "Currency": "AUD",
            "PriceCode": "PC1",
            "RateSets": {"RateSet": rate_set},
        }


def _single_or_list(items: list[Any]) -> Any:
    return items[0] if len(items) == 1 else items


class FakeInventory:
    """In-memory inventory endpoint pricing each stay day from the segment that holds it."""

    endpoint = "https://inventory.test/hostConnect/api"
    agent_id = "AGENT01"
    agent_password = "secret"

    def __init__(
        self,
        segments: list[FakeSegment],
        *,
        general: Optional[dict[str, Any]] = None,
        rate_ids: tuple[str, ...] = ("RATE-A",),
        agent_currency: str = "nzd",
    ) -> None:
        self.segments = segments
        self.general = general or {}
        self.rate_ids = rate_ids
        self.agent_currency = agent_currency
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def calls_for(self, info: str) -> list[dict[str, Any]]:
        return [body for _, body in self.calls if body.get("Info") == info]

    async def call(self, request_type: str, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((request_type, body))
        if request_type == "AgentInfoRequest":
            return {"Currency": self.agent_currency}
        start = date.fromisoformat(body["DateFrom"])
        units = int(body["SCUqty"])
        end = start + timedelta(days=units - 1)
        if body["Info"] in ("GD", "D"):
            matching = [
                segment.to_payload()
                for segment in self.segments
                if segment.start_date <= end and start <= segment.end_date
            ]
            option: dict[str, Any] = {"OptDateRanges": {"OptDateRange": _single_or_list(matching)}}
            if not matching:
                option = {}
            if body["Info"] == "GD":
                option["OptGeneral"] = self.general
            return {"Option": option}
        return {"Option": self._stay_results(start, units)}

    def _stay_results(self, start: date, units: int) -> dict[str, Any]:
        total = 0
        for offset in range(units):
            day = start + timedelta(days=offset)
            segment = next((item for item in self.segments if item.contains(day) and not item.closed), None)
            if segment is None:
                return {}
            total += segment.price
        results = [
            {
                "RateId": rate_id,
                "Currency": "AUD",
                "TotalPrice": str(total),
                "AgentPrice": str(total - 10 * units),
                "CancelHours": "48",
            }
            for rate_id in self.rate_ids
        ]
        return {"OptStayResults": _single_or_list(results)}


@pytest.fixture
def fixed_today() -> Callable[[str], Callable[[], date]]:
    def _factory(value: str) -> Callable[[], date]:
        return lambda: date.fromisoformat(value)

    return _factory


@pytest.fixture
def segment() -> type[FakeSegment]:
    return FakeSegment


@pytest.fixture
def inventory_factory() -> type[FakeInventory]:
    return FakeInventory
