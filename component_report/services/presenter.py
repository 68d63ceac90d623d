"""
component_report/services/presenter.py

Deterministic ordering of aggregated groups for output.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable, Mapping

from component_report.domain.components import AggregatedComponent

DEFAULT_DEPRECATED_MARKER = "⛔"


def collation_key(name: str) -> tuple[str, str, str]:
    """
    Case-insensitive, accent-insensitive sort key with exact tie-breakers.
    """

    folded = name.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base, folded, name


def is_deprecated(name: str, marker: str = DEFAULT_DEPRECATED_MARKER) -> bool:
    return bool(marker) and name.lstrip().startswith(marker)


def order_components(
    groups: Mapping[str, AggregatedComponent] | Iterable[AggregatedComponent],
    *,
    deprecated_marker: str = DEFAULT_DEPRECATED_MARKER,
) -> list[AggregatedComponent]:
    """
    Sort groups alphabetically, with deprecated names always last.

    The deprecated flag is compared first; names decide only between two
    rows with the same flag.
    """

    items = list(groups.values()) if isinstance(groups, Mapping) else list(groups)
    return sorted(
        items,
        key=lambda item: (
            is_deprecated(item.group_name, deprecated_marker),
            collation_key(item.group_name),
        ),
    )
