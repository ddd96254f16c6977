from __future__ import annotations

from datetime import date

from availability_engine.availability import messages
from availability_engine.availability.outcomes import (
    Outcome,
    classify_coverage,
    classify_deficit,
    exceeds_extension,
)
from availability_engine.availability.validation import (
    IssueKind,
    next_allowed_date,
    validate_date_ranges,
    validate_max_pax,
    validate_start_day,
)
from availability_engine.pax.models import RoomConfig
from availability_engine.rates.models import DateRange, RateSet

_WEEKENDS = (False, False, False, False, False, True, True)


def _range(start: str, end: str, *rate_sets: RateSet) -> DateRange:
    return DateRange(
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end),
        rate_sets=list(rate_sets) or [RateSet()],
    )


def test_coverage_boundary_and_deficit() -> None:
    calendar = [_range("2025-03-01", "2025-04-05")]

    covered = classify_coverage(calendar, date(2025, 4, 5), 1)
    assert covered.is_covered

    partial = classify_coverage(calendar, date(2025, 4, 1), 10)
    assert not partial.is_covered
    assert partial.covered_days == 5
    assert partial.deficit_days == 5
    assert partial.deficit_start == date(2025, 4, 6)
    assert partial.deficit_end == date(2025, 4, 10)

    stale = classify_coverage(calendar, date(2025, 5, 1), 3)
    assert stale.covered_days == 0
    assert stale.deficit_start == date(2025, 5, 1)

    empty = classify_coverage([], date(2025, 5, 1), 0)
    assert empty.units == 1
    assert empty.deficit_days == 1


def test_extension_ceiling() -> None:
    donor = _range("2021-04-11", "2022-04-10")
    assert exceeds_extension(donor, 1, date(2025, 4, 1), date(2025, 4, 5))
    assert not exceeds_extension(donor, 3, date(2025, 4, 1), date(2025, 4, 5))
    assert exceeds_extension(donor, 3, date(2025, 4, 8), date(2025, 4, 12))


def test_deficit_outcomes() -> None:
    donor = _range("2024-01-01", "2024-12-31")
    assert classify_deficit(None) is Outcome.DEFICIT_NO_DONOR
    assert classify_deficit(donor, extension_exceeded=True) is Outcome.EXTENSION_EXCEEDED
    assert classify_deficit(donor, donor_closed=True) is Outcome.CLOSED_PERIOD
    assert classify_deficit(donor) is Outcome.DEFICIT_WITH_DONOR


def test_min_stay_binds_only_from_segment_start() -> None:
    calendar = [
        _range("2025-04-01", "2025-04-04", RateSet(min_stay_units=1)),
        _range("2025-04-05", "2025-04-30", RateSet(min_stay_units=4)),
    ]

    # 6 units from the 1st leave only 2 units in the second segment
    issue = validate_date_ranges(calendar, date(2025, 4, 1), 6)
    assert issue is not None
    assert issue.kind is IssueKind.MIN_STAY
    assert issue.min_stay_units == 4
    assert issue.message == (
        "The date range 05-Apr-2025 to 30-Apr-2025 has a minimum stay length of 4. "
        "Please adjust the stay length and try again."
    )

    assert validate_date_ranges(calendar, date(2025, 4, 1), 8) is None


def test_any_satisfied_rate_set_clears_min_stay() -> None:
    calendar = [_range("2025-01-01", "2025-12-31", RateSet(min_stay_units=1), RateSet(min_stay_units=5))]
    assert validate_date_ranges(calendar, date(2025, 4, 1), 2) is None


def test_segments_outside_window_are_ignored() -> None:
    calendar = [
        _range("2025-03-01", "2025-03-31", RateSet(is_closed=True)),
        _range("2025-04-01", "2025-04-30"),
    ]
    assert validate_date_ranges(calendar, date(2025, 4, 2), 3) is None
    issue = validate_date_ranges(calendar, date(2025, 3, 31), 3)
    assert issue is not None and issue.kind is IssueKind.CLOSED


def test_start_day_rules() -> None:
    weekends = _range("2025-01-01", "2025-12-31", RateSet(applies_days=_WEEKENDS))

    assert validate_start_day([weekends], date(2025, 4, 5)) is None
    assert validate_start_day([weekends], date(2025, 4, 1)) == "Sunday and Saturday"
    assert next_allowed_date(weekends, date(2025, 4, 1)) == date(2025, 4, 5)
    assert validate_start_day([weekends], date(2026, 1, 1)) is None


def test_allowed_days_text_variants() -> None:
    assert messages.allowed_days_text(RateSet(applies_days=(False,) * 7)) == "any day"
    three = (True, False, True, False, True, False, False)
    assert messages.allowed_days_text(RateSet(applies_days=three)) == "Monday, Wednesday, and Friday"


def test_max_pax_only_enforced_above_one() -> None:
    rooms = [RoomConfig(adults=2, children=1)]
    assert validate_max_pax(rooms, 1) is None
    assert validate_max_pax(rooms, None) is None
    assert validate_max_pax(rooms, 3) is None
    assert validate_max_pax(rooms, 2) == messages.MAX_PAX_EXCEEDED.format(max_pax=2)


def test_duration_notice_and_custom_rate_text_join_with_one_period() -> None:
    notice = messages.duration_adjusted(3, 2, "Nights")
    custom = messages.custom_rate_applied(0, messages.LAST_YEAR_PERIOD, [])

    assert messages.success_message(notice, custom) == (
        "This option allows exactly 3 Nights. The end date is adjusted accordingly. "
        "Custom rate applied with no markup on last year's rate."
    )
    assert messages.success_message(None, custom) == custom
