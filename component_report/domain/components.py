"""
component_report/domain/components.py

Domain models for raw Figma rows and aggregated report rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

NOT_APPLICABLE = "N/A"


class ComponentType(str, Enum):
    """
    Classification of one report row.
    """

    SINGLE = "Single"
    SET = "Set"


class TimestampPolicy(str, Enum):
    """
    Which variant's timestamps a multi-variant group reports.
    """

    LAST = "last"
    FIRST = "first"


@dataclass(frozen=True)
class RawComponent:
    """
    One published component (or set variant) from the file metadata endpoint.
    """

    key: str
    name: str
    containing_set_name: str | None = None
    containing_set_key: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class ComponentKeyRef:
    """
    Analytics row addressed by an individual component key.
    """

    key: str


@dataclass(frozen=True)
class SetKeyRef:
    """
    Analytics row addressed by a component set.

    ``component_key`` is the variant key the row also carried, if any; it is
    used only when the set itself cannot be resolved.
    """

    key: str
    name: str | None = None
    component_key: str | None = None


ActionTarget = Union[ComponentKeyRef, SetKeyRef]


@dataclass(frozen=True)
class RawActionRow:
    """
    One insertion/detachment bucket from the analytics actions endpoint.
    """

    target: ActionTarget
    insertions: int = 0
    detachments: int = 0
    week: str | None = None


@dataclass(frozen=True)
class RawUsageRow:
    """
    One cumulative usage bucket from the analytics usages endpoint.
    """

    component_key: str
    usages: int = 0


@dataclass
class AggregatedComponent:
    """
    One report row, mutated additively while sources are folded in.
    """

    group_name: str
    type: ComponentType = ComponentType.SINGLE
    variant_count: int = 0
    total_usages: int = 0
    total_insertions: int = 0
    total_detachments: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    component_keys: list[str] = field(default_factory=list)
    set_keys: list[str] = field(default_factory=list)

    @property
    def total_variants(self) -> int | None:
        """Variant count for sets; ``None`` ("N/A") for single components."""
        if self.type is ComponentType.SET:
            return self.variant_count
        return None

    def to_row(self) -> dict[str, object]:
        """
        Flat report row with the "N/A" sentinel applied.
        """

        total_variants = self.total_variants
        return {
            "component_name": self.group_name,
            "total_variants": NOT_APPLICABLE if total_variants is None else total_variants,
            "usages": self.total_usages,
            "insertions": self.total_insertions,
            "detachments": self.total_detachments,
            "created_at": self.created_at or "",
            "updated_at": self.updated_at or "",
            "type": self.type.value,
        }
