"""
component_report/periods.py

Parsing of the ``--period`` selector into an analytics date range.

Accepted forms::

    30d | 60d | 90d | 1y          relative to today (aliases: 30days, 1year, ...)
    2024-01-01,2024-03-31         explicit inclusive range
    custom[2024-01-01 2024-03-31] legacy explicit range
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from component_report.domain.report import ReportPeriod

_RELATIVE_DAYS = {
    "30d": 30,
    "30days": 30,
    "60d": 60,
    "60days": 60,
    "90d": 90,
    "90days": 90,
}
_ONE_YEAR = {"1y", "1year"}
_LEGACY_CUSTOM = re.compile(r"^custom\[\s*(\S+)\s+(\S+)\s*\]$")


class PeriodParseError(ValueError):
    """
    Raised when a period selector cannot be interpreted.
    """


def _parse_iso_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise PeriodParseError(f"Invalid date '{raw.strip()}'; expected YYYY-MM-DD.") from exc


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # 29 February
        return day.replace(year=day.year - 1, day=28)


def parse_period(value: str, *, today: date | None = None) -> ReportPeriod:
    """
    Turn a period selector into a :class:`ReportPeriod`.
    """

    raw = (value or "").strip().strip("'\"")
    if not raw:
        raise PeriodParseError("Period must not be empty.")

    end = today or date.today()
    normalized = raw.lower()

    if normalized in _RELATIVE_DAYS:
        days = _RELATIVE_DAYS[normalized]
        return ReportPeriod(label=f"{days}d", start_date=end - timedelta(days=days), end_date=end)

    if normalized in _ONE_YEAR:
        return ReportPeriod(label="1y", start_date=_one_year_before(end), end_date=end)

    legacy = _LEGACY_CUSTOM.match(raw)
    if legacy:
        start_raw, end_raw = legacy.group(1), legacy.group(2)
    elif "," in raw:
        parts = raw.split(",")
        if len(parts) != 2:
            raise PeriodParseError(f"Custom period '{raw}' must be '<start>,<end>'.")
        start_raw, end_raw = parts
    else:
        allowed = "30d, 60d, 90d, 1y or <start>,<end>"
        raise PeriodParseError(f"Unsupported period '{raw}'. Use {allowed}.")

    start_date = _parse_iso_date(start_raw)
    end_date = _parse_iso_date(end_raw)
    if start_date > end_date:
        raise PeriodParseError(f"Period start {start_date} is after end {end_date}.")
    return ReportPeriod(label="custom", start_date=start_date, end_date=end_date)
