"""
component_report/services/aggregation_service.py

Folds the three Figma sources into one row per report group.

Fold order
----------
1. Components, in source order. The first row of a group creates its
   entry; every row updates the variant count and the timestamps
   according to the configured :class:`TimestampPolicy`.
2. Usage rows. Each row adds its ``usages`` to the group owning the
   component key. Several matching variants accumulate.
3. Action rows. Each row resolves by set reference, else component key,
   and adds its insertions/detachments to the group's running sums.

Rows that match no group are dropped and counted. Any source may be
empty; totals for it simply stay at zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from component_report.domain.components import (
    AggregatedComponent,
    ComponentType,
    RawActionRow,
    RawComponent,
    RawUsageRow,
    TimestampPolicy,
)
from component_report.services.key_resolver import GroupIndex

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """
    Aggregated groups plus bookkeeping about the fold.

    ``last_week`` is the latest ``week`` marker seen on a matched or
    unmatched action row, or ``None`` when the rows carry none.
    """

    groups: dict[str, AggregatedComponent] = field(default_factory=dict)
    unmatched_actions: int = 0
    unmatched_usages: int = 0
    last_week: str | None = None


class AggregationService:
    """
    Stateless aggregator; one instance can serve a whole batch.
    """

    def __init__(self, *, timestamp_policy: TimestampPolicy = TimestampPolicy.LAST) -> None:
        self._timestamp_policy = timestamp_policy

    def aggregate(
        self,
        components: Iterable[RawComponent],
        actions: Iterable[RawActionRow] = (),
        usages: Iterable[RawUsageRow] = (),
    ) -> dict[str, AggregatedComponent]:
        """
        Return group name -> aggregated row, in first-seen order.
        """

        return self.aggregate_with_stats(components, actions, usages).groups

    def aggregate_with_stats(
        self,
        components: Iterable[RawComponent],
        actions: Iterable[RawActionRow] = (),
        usages: Iterable[RawUsageRow] = (),
    ) -> AggregationResult:
        result = AggregationResult()
        index = GroupIndex()

        for component in components:
            group_key = index.register(component)
            entry = result.groups.get(group_key.group_name)
            is_new = entry is None
            if entry is None:
                entry = AggregatedComponent(group_name=group_key.group_name)
                result.groups[group_key.group_name] = entry
            self._apply_component(entry, component, is_set=group_key.is_set, is_new=is_new)

        for usage in usages:
            group_name = index.match_usage(usage)
            if group_name is None:
                result.unmatched_usages += 1
                continue
            result.groups[group_name].total_usages += usage.usages

        for action in actions:
            if action.week and (result.last_week is None or action.week > result.last_week):
                result.last_week = action.week
            group_name = index.match_action(action)
            if group_name is None:
                result.unmatched_actions += 1
                continue
            entry = result.groups[group_name]
            entry.total_insertions += action.insertions
            entry.total_detachments += action.detachments

        logger.debug(
            "Aggregated groups=%s unmatched_actions=%s unmatched_usages=%s",
            len(result.groups),
            result.unmatched_actions,
            result.unmatched_usages,
        )
        return result

    def _apply_component(
        self,
        entry: AggregatedComponent,
        component: RawComponent,
        *,
        is_set: bool,
        is_new: bool,
    ) -> None:
        if is_set:
            entry.type = ComponentType.SET
            entry.variant_count += 1
            if component.containing_set_key and component.containing_set_key not in entry.set_keys:
                entry.set_keys.append(component.containing_set_key)
        entry.component_keys.append(component.key)

        if is_new or self._timestamp_policy is TimestampPolicy.LAST:
            entry.created_at = component.created_at
            entry.updated_at = component.updated_at
