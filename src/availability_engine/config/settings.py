"""Runtime configuration for the availability engine.

Relies on pydantic-settings so that environment variables (prefixed with ``AVAILABILITY_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from availability_engine.rates.models import CustomRateConfig
from availability_engine.services.agent_info import AGENT_CURRENCY_TTL_S

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"yes", "y", "true", "1", "on"}
_FALSE_WORDS = {"no", "n", "false", "0", "off", ""}


def _parse_flag(value: object) -> object:
    if value is None:
        return False
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    return value


class Settings(BaseSettings):
    """Captures runtime configuration for availability resolution."""

    hostconnect_endpoint: str = Field(
        default="http://localhost:8080/hostConnect/api",
        description="Inventory system endpoint accepting request envelopes",
    )
    agent_id: Optional[str] = Field(default=None, description="Agent identifier sent with every request")
    agent_password: Optional[str] = Field(default=None, description="Agent password sent with every request")
    request_timeout_s: float = Field(default=30.0, description="HTTP timeout for upstream calls")

    display_rate_in_supplier_currency: bool = Field(
        default=False, description="Ask upstream for supplier-currency prices instead of converted ones"
    )
    custom_rates_enabled: bool = Field(default=False, description="Allow synthesizing rates past the calendar")
    custom_rates_markup_percentage: Optional[float] = Field(
        default=None, description="Markup applied to donor-derived prices (1-100, otherwise ignored)"
    )
    custom_rates_use_last_year_rate: bool = Field(
        default=False, description="Borrow last year's rate instead of the nearest published period"
    )
    custom_rates_extended_booking_years: Optional[int] = Field(
        default=None, description="How many years past a donor period a custom rate may reach (1-100)"
    )
    send_services_without_a_rate: bool = Field(
        default=False, description="Return zero-priced bookable lines when no rate can be found"
    )
    custom_rates_round_rates: bool = Field(default=False, description="Round custom rates to whole units")
    custom_rates_round_to_nearest_unit: bool = Field(
        default=False, description="Round to the nearest whole unit instead of always up"
    )

    agent_currency_cache_ttl_s: float = Field(default=AGENT_CURRENCY_TTL_S)
    max_concurrent_requests: int = Field(default=10, description="Upper bound for batch resolutions")
    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="AVAILABILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    @field_validator(
        "display_rate_in_supplier_currency",
        "custom_rates_enabled",
        "custom_rates_use_last_year_rate",
        "send_services_without_a_rate",
        "custom_rates_round_rates",
        "custom_rates_round_to_nearest_unit",
        mode="before",
    )
    def _parse_yes_no(cls, value: object) -> object:
        return _parse_flag(value)

    @field_validator("custom_rates_markup_percentage", "custom_rates_extended_booking_years", mode="before")
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_dir", mode="before")
    def _expand_log_dir(cls, value: str | Path | None) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("max_concurrent_requests")
    def _validate_concurrency(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_concurrent_requests must be positive")
        return value

    def custom_rate_config(self) -> CustomRateConfig:
        config = CustomRateConfig.normalized(
            enabled=self.custom_rates_enabled,
            markup_percentage=self.custom_rates_markup_percentage,
            extended_booking_years=self.custom_rates_extended_booking_years,
            use_last_year_rate=self.custom_rates_use_last_year_rate,
            send_services_without_a_rate=self.send_services_without_a_rate,
            round_rates=self.custom_rates_round_rates,
            round_to_nearest_unit=self.custom_rates_round_to_nearest_unit,
        )
        logger.debug("Custom rate config resolved: %s", config)
        return config
