"""Availability resolution: calendar coverage, custom-rate synthesis and outcomes."""

from .models import AvailabilityRequest, BookabilityResult
from .orchestrator import AvailabilityOrchestrator, calculate_end_date
from .outcomes import Coverage, Outcome, classify_coverage
from .synthesizer import CustomRateSynthesizer

__all__ = [
    "AvailabilityOrchestrator",
    "AvailabilityRequest",
    "BookabilityResult",
    "Coverage",
    "CustomRateSynthesizer",
    "Outcome",
    "calculate_end_date",
    "classify_coverage",
]
