"""Rate calendar models, rate line mapping and custom-rate synthesis."""

from .mapper import empty_rate_lines, map_quotes_to_rate_lines
from .models import CustomRateConfig, DateRange, RateLine, RateSet, StayQuote

__all__ = [
    "CustomRateConfig",
    "DateRange",
    "RateLine",
    "RateSet",
    "StayQuote",
    "empty_rate_lines",
    "map_quotes_to_rate_lines",
]
