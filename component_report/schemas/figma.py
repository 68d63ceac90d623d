"""
component_report/schemas/figma.py

Validation schemas for Figma REST API payloads.

Figma responses are loosely shaped: optional nesting, counts that may be
missing or non-numeric, and analytics rows that carry a component key, a
set key, or both. These models absorb that looseness and convert each
payload into the explicit domain types in
:mod:`component_report.domain.components`.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from component_report.domain.components import (
    ComponentKeyRef,
    RawActionRow,
    RawComponent,
    RawUsageRow,
    SetKeyRef,
)


def coerce_count(value: Any) -> int:
    """
    Convert a raw count to a non-negative integer.

    Missing, boolean, non-numeric and non-finite values become ``0``.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
    else:
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, int(number))


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _FigmaModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class StateGroupPayload(_FigmaModel):
    node_id: str | None = Field(default=None, alias="nodeId")
    name: str | None = None

    normalize_blank = field_validator("node_id", "name", mode="before")(_blank_to_none)


class ContainingFramePayload(_FigmaModel):
    node_id: str | None = Field(default=None, alias="nodeId")
    name: str | None = None
    page_name: str | None = Field(default=None, alias="pageName")
    containing_state_group: StateGroupPayload | None = Field(
        default=None,
        alias="containingStateGroup",
    )


class FigmaComponentPayload(_FigmaModel):
    """
    One entry of ``meta.components`` from ``GET /files/:key/components``.
    """

    key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    node_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    containing_frame: ContainingFramePayload | None = None

    def to_domain(self, set_keys_by_node: dict[str, str] | None = None) -> RawComponent:
        group = self.containing_frame.containing_state_group if self.containing_frame else None
        set_name = group.name if group else None
        set_key = None
        if group and group.node_id and set_keys_by_node:
            set_key = set_keys_by_node.get(group.node_id)
        return RawComponent(
            key=self.key,
            name=self.name,
            containing_set_name=set_name,
            containing_set_key=set_key,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class FigmaComponentSetPayload(_FigmaModel):
    """
    One entry of ``meta.component_sets`` from ``GET /files/:key/component_sets``.
    """

    key: str = Field(min_length=1)
    node_id: str = Field(min_length=1)
    name: str | None = None


class FigmaActionRowPayload(_FigmaModel):
    """
    One row of ``GET /analytics/libraries/:key/component/actions``.
    """

    component_key: str | None = None
    component_name: str | None = None
    component_set_key: str | None = None
    component_set_name: str | None = None
    insertions: int = 0
    detachments: int = 0
    week: str | None = None

    normalize_blank = field_validator(
        "component_key",
        "component_name",
        "component_set_key",
        "component_set_name",
        "week",
        mode="before",
    )(_blank_to_none)

    @field_validator("insertions", "detachments", mode="before")
    @classmethod
    def coerce_counts(cls, value: Any) -> int:
        return coerce_count(value)

    def to_domain(self) -> RawActionRow | None:
        """
        Build the domain row; set identifiers take precedence over the
        component key, which stays on the set reference as a fallback. Rows
        with no identifier at all yield ``None``.
        """

        if self.component_set_key or self.component_set_name:
            target: SetKeyRef | ComponentKeyRef = SetKeyRef(
                key=self.component_set_key or self.component_set_name or "",
                name=self.component_set_name,
                component_key=self.component_key,
            )
        elif self.component_key:
            target = ComponentKeyRef(key=self.component_key)
        else:
            return None
        return RawActionRow(
            target=target,
            insertions=self.insertions,
            detachments=self.detachments,
            week=self.week,
        )


class FigmaUsageRowPayload(_FigmaModel):
    """
    One row of ``GET /analytics/libraries/:key/component/usages``.
    """

    component_key: str = Field(min_length=1)
    usages: int = 0

    @field_validator("usages", mode="before")
    @classmethod
    def coerce_usages(cls, value: Any) -> int:
        return coerce_count(value)

    def to_domain(self) -> RawUsageRow:
        return RawUsageRow(component_key=self.component_key, usages=self.usages)


class AnalyticsPagePayload(_FigmaModel):
    """
    Cursor-paginated analytics envelope. Rows stay raw so one bad row
    does not invalidate the whole page.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)
    next_page: bool = False
    cursor: str | None = None

    @field_validator("rows", mode="before")
    @classmethod
    def keep_dict_rows(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list):
            return []
        return [row for row in value if isinstance(row, dict)]

    @field_validator("next_page", mode="before")
    @classmethod
    def truthy_next_page(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("cursor", mode="before")
    @classmethod
    def cursor_to_str(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)
