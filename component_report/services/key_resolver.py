"""
component_report/services/key_resolver.py

Grouping-key resolution for components and analytics rows.

The three Figma sources are keyed differently: components carry their own
key and, for variants, the containing set's name (and published key when
known); action rows carry either a set reference or a component key; usage
rows carry a component key. :class:`GroupIndex` maps every one of those
identifiers back to the report group it belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass

from component_report.domain.components import (
    ComponentKeyRef,
    RawActionRow,
    RawComponent,
    RawUsageRow,
    SetKeyRef,
)


@dataclass(frozen=True)
class GroupKey:
    group_name: str
    is_set: bool


def resolve_group(component: RawComponent) -> GroupKey:
    """
    Pure mapping from a component to its report group.
    """

    if component.containing_set_name is not None:
        return GroupKey(group_name=component.containing_set_name, is_set=True)
    return GroupKey(group_name=component.name, is_set=False)


class GroupIndex:
    """
    Lookup tables from source identifiers to group names.
    """

    def __init__(self) -> None:
        self._by_component_key: dict[str, str] = {}
        self._by_set_key: dict[str, str] = {}
        self._by_set_name: dict[str, str] = {}

    def register(self, component: RawComponent) -> GroupKey:
        group = resolve_group(component)
        self._by_component_key.setdefault(component.key, group.group_name)
        if group.is_set:
            self._by_set_name.setdefault(group.group_name, group.group_name)
            if component.containing_set_key:
                self._by_set_key.setdefault(component.containing_set_key, group.group_name)
        return group

    def match_action(self, row: RawActionRow) -> str | None:
        target = row.target
        if isinstance(target, SetKeyRef):
            return (
                self._by_set_key.get(target.key)
                or self._by_set_name.get(target.key)
                or (self._by_set_name.get(target.name) if target.name else None)
                or (self._by_component_key.get(target.component_key) if target.component_key else None)
            )
        if isinstance(target, ComponentKeyRef):
            return self._by_component_key.get(target.key)
        return None

    def match_usage(self, row: RawUsageRow) -> str | None:
        return self._by_component_key.get(row.component_key)
