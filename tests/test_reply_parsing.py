from __future__ import annotations

from datetime import date

from availability_engine.services.date_ranges import parse_date_ranges
from availability_engine.services.option_info import parse_option_profile
from availability_engine.services.replies import as_list
from availability_engine.services.stay_quotes import parse_stay_quotes


def test_as_list_normalizes_single_items_and_absence() -> None:
    assert as_list(None) == []
    assert as_list("") == []
    assert as_list({"a": 1}) == [{"a": 1}]
    assert as_list([{"a": 1}, None, {"b": 2}]) == [{"a": 1}, {"b": 2}]


def test_date_ranges_are_sorted_with_rate_sets_by_min_stay() -> None:
    option = {
        "OptDateRanges": {
            "OptDateRange": [
                {
                    "DateFrom": "2025-06-01",
                    "DateTo": "2025-06-30",
                    "Currency": "AUD",
                    "RateSets": {"RateSet": {"RateName": "Winter", "MinSCU": "1"}},
                },
                {
                    "DateFrom": "2025-01-01",
                    "DateTo": "2025-05-31",
                    "Currency": "AUD",
                    "PriceCode": "STD",
                    "RateSets": {
                        "RateSet": [
                            {"RateName": "Long stay", "MinSCU": "7", "IsClosed": "N"},
                            {
                                "RateName": "Short stay",
                                "MinSCU": "2",
                                "CancelHours": "48",
                                "AppliesDaysOfWeek": {"@Mon": "Y", "@Weds": "Y", "@Thur": "Y", "@Sun": "N"},
                            },
                        ]
                    },
                },
            ]
        }
    }

    ranges = parse_date_ranges(option)

    assert [item.start_date for item in ranges] == [date(2025, 1, 1), date(2025, 6, 1)]
    first = ranges[0]
    assert [rate_set.rate_name for rate_set in first.rate_sets] == ["Short stay", "Long stay"]
    assert first.min_stay_units == 2
    assert first.cancel_hours == "48"
    assert first.price_code == "STD"
    assert first.is_closed is False
    assert first.rate_sets[0].allowed_day_names == ["Mon", "Wed", "Thu"]
    assert first.rate_sets[1].allowed_day_names == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def test_parsing_is_deterministic() -> None:
    option = {
        "OptDateRanges": {
            "OptDateRange": [
                {"DateFrom": "2025-02-01", "DateTo": "2025-02-28", "RateSets": {"RateSet": {"IsClosed": "Y"}}},
                {"DateFrom": "2025-01-01", "DateTo": "2025-01-31"},
            ]
        }
    }

    assert [item.to_dict() for item in parse_date_ranges(option)] == [
        item.to_dict() for item in parse_date_ranges(option)
    ]
    assert parse_date_ranges(option)[1].is_closed is True


def test_option_profile_reads_general_info() -> None:
    profile = parse_option_profile(
        {
            "OptGeneral": {
                "CountChildrenInPaxBreak": "Y",
                "ChildrenAllowed": "N",
                "InfantsAllowed": "Y",
                "Periods": "3",
                "MPFCU": "4",
                "SCU": "Nights",
            }
        }
    )

    assert profile.count_children_in_pax_break is True
    assert profile.children_allowed is False
    assert profile.infants_allowed is True
    assert profile.duration == 3
    assert profile.max_pax_per_charge == 4
    assert profile.charge_unit == "Nights"


def test_stay_quotes_accept_single_result() -> None:
    option = {
        "OptStayResults": {
            "RateId": "R1",
            "Currency": "AUD",
            "TotalPrice": "1021200",
            "AgentPrice": "918000",
            "CancelPolicies": {
                "CancelPenalty": {
                    "PenaltyDescription": "Full charge",
                    "Deadline": {"OffsetUnitMultiplier": "2", "OffsetTimeUnit": "Day"},
                    "InEffect": "Y",
                    "LinePrice": "1021200",
                }
            },
        }
    }

    [quote] = parse_stay_quotes(option)

    assert quote.rate_id == "R1"
    assert quote.total_price == 1021200
    assert quote.agent_price == 918000
    [policy] = quote.cancel_policies
    assert policy.in_effect is True
    assert policy.cancel_num == 2
    assert policy.cancel_time_unit == "Day"
    assert policy.cancel_fee == 1021200
