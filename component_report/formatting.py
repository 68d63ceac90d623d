"""
component_report/formatting.py

Small formatting helpers shared by writers and the Notion mirror.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, timezone

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)
_UNDERSCORES = re.compile(r"_+")


def normalize_name(value: str) -> str:
    """
    File-system safe slug: accents stripped, non-alphanumerics collapsed to
    single underscores, lower-cased.
    """

    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    slug = _UNDERSCORES.sub("_", _NON_ALNUM.sub("_", stripped)).strip("_").lower()
    return slug or "library"


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO timestamp (``Z`` suffix allowed) into an aware datetime.
    """

    if not value:
        return None
    raw = value.strip()
    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: str | date | datetime | None) -> str:
    """
    Render a timestamp as ``YYYY-MM-DD``; unparseable strings pass through.
    """

    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    parsed = parse_timestamp(value)
    return parsed.date().isoformat() if parsed else value


def file_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d_%H-%M-%S")
