from __future__ import annotations

import pytest

from availability_engine.config.settings import Settings
from availability_engine.rates.models import CustomRateConfig


def test_yes_no_flags_and_custom_rate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AVAILABILITY_CUSTOM_RATES_ENABLED", "Yes")
    monkeypatch.setenv("AVAILABILITY_CUSTOM_RATES_USE_LAST_YEAR_RATE", "YES")
    monkeypatch.setenv("AVAILABILITY_SEND_SERVICES_WITHOUT_A_RATE", "No")
    monkeypatch.setenv("AVAILABILITY_CUSTOM_RATES_MARKUP_PERCENTAGE", "12.5")
    monkeypatch.setenv("AVAILABILITY_CUSTOM_RATES_EXTENDED_BOOKING_YEARS", "3")

    settings = Settings(_env_file=None)
    config = settings.custom_rate_config()

    assert settings.custom_rates_enabled is True
    assert config.enabled is True
    assert config.use_last_year_rate is True
    assert config.send_services_without_a_rate is False
    assert config.markup_percentage == 12.5
    assert config.extended_booking_years == 3


def test_defaults_produce_disabled_config() -> None:
    config = Settings(_env_file=None).custom_rate_config()
    assert config == CustomRateConfig()
    assert config.markup_percentage == 0
    assert config.extended_booking_years == 2


@pytest.mark.parametrize(
    ("markup", "years", "expected_markup", "expected_years"),
    [
        (0, 0, 0, 2),
        (101, 101, 0, 2),
        ("abc", "x", 0, 2),
        (None, None, 0, 2),
        (1, 1, 1, 1),
        (100, 100, 100, 100),
        ("15", "5", 15, 5),
    ],
)
def test_out_of_range_numbers_fall_back_to_defaults(markup, years, expected_markup, expected_years) -> None:
    config = CustomRateConfig.normalized(markup_percentage=markup, extended_booking_years=years)
    assert config.markup_percentage == expected_markup
    assert config.extended_booking_years == expected_years


def test_blank_numeric_env_values_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AVAILABILITY_CUSTOM_RATES_MARKUP_PERCENTAGE", "")
    settings = Settings(_env_file=None)
    assert settings.custom_rates_markup_percentage is None


def test_concurrency_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, max_concurrent_requests=0)
