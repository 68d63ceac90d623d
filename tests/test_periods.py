from __future__ import annotations

from datetime import date

import pytest

from component_report.periods import PeriodParseError, parse_period

TODAY = date(2024, 5, 15)


@pytest.mark.parametrize(
    "selector, label, start",
    [
        ("30d", "30d", date(2024, 4, 15)),
        ("60d", "60d", date(2024, 3, 16)),
        ("90d", "90d", date(2024, 2, 15)),
        ("30days", "30d", date(2024, 4, 15)),
        ("1y", "1y", date(2023, 5, 15)),
        ("1year", "1y", date(2023, 5, 15)),
        (" 90D ", "90d", date(2024, 2, 15)),
    ],
)
def test_relative_periods_end_today(selector: str, label: str, start: date) -> None:
    period = parse_period(selector, today=TODAY)
    assert period.label == label
    assert period.start_date == start
    assert period.end_date == TODAY


def test_one_year_from_leap_day() -> None:
    period = parse_period("1y", today=date(2024, 2, 29))
    assert period.start_date == date(2023, 2, 28)


def test_custom_range() -> None:
    period = parse_period("2024-01-01,2024-03-31", today=TODAY)
    assert period.label == "custom"
    assert (period.start_iso, period.end_iso) == ("2024-01-01", "2024-03-31")
    assert period.describe() == "2024-01-01 to 2024-03-31"


def test_legacy_custom_syntax() -> None:
    period = parse_period("custom[2024-01-01 2024-02-01]", today=TODAY)
    assert period.start_date == date(2024, 1, 1)
    assert period.end_date == date(2024, 2, 1)


@pytest.mark.parametrize(
    "selector",
    ["", "7d", "2024-01-01", "2024-13-01,2024-12-31", "2024-03-01,2024-01-01", "a,b,c"],
)
def test_invalid_periods(selector: str) -> None:
    with pytest.raises(PeriodParseError):
        parse_period(selector, today=TODAY)
