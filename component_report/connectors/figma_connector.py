"""
component_report/connectors/figma_connector.py

Figma REST API connector: file metadata, published components and the
library analytics endpoints.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

import requests
from pydantic import ValidationError

from component_report.config import FigmaSettings
from component_report.connectors.base import BaseConnector, ConnectorRequestError
from component_report.connectors.pagination import Page, iter_pages
from component_report.domain.components import RawActionRow, RawComponent, RawUsageRow
from component_report.domain.report import ReportPeriod
from component_report.schemas.figma import (
    AnalyticsPagePayload,
    FigmaActionRowPayload,
    FigmaComponentPayload,
    FigmaComponentSetPayload,
    FigmaUsageRowPayload,
)

logger = logging.getLogger(__name__)


class FigmaConnector(BaseConnector):
    """
    Reader for the three report sources of one Figma library file.

    Component, action and usage readers never raise on transport or payload
    problems: they log the failure and yield whatever they could read.
    """

    def __init__(
        self,
        *,
        settings: FigmaSettings,
        session: requests.Session | None = None,
    ) -> None:
        if not settings.token:
            raise ValueError("FIGMA_TOKEN is not configured.")
        super().__init__(
            source="figma",
            timeout_seconds=settings.timeout_seconds,
            rate_limit_per_second=settings.rate_limit_per_second,
            session=session,
        )
        self._settings = settings
        self._base_url = settings.api_base_url.rstrip("/")
        self._headers = {"X-Figma-Token": settings.token}

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def fetch_file_name(self, file_id: str) -> str:
        """
        Return the display name of the file. Raises ConnectorRequestError.
        """

        payload = self._get(f"/files/{file_id}", params={"depth": 1})
        name = payload.get("name") if isinstance(payload, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise ConnectorRequestError(f"{self.source}: file {file_id} has no name.")
        return name.strip()

    def read_components(self, file_id: str) -> list[RawComponent]:
        try:
            payload = self._get(f"/files/{file_id}/components")
        except ConnectorRequestError as exc:
            logger.warning(
                "Component metadata unavailable file_id=%s status=%s error=%s",
                file_id,
                exc.status_code,
                exc,
            )
            return []

        raw_components = _meta_list(payload, "components")
        if raw_components is None:
            logger.warning("Unexpected components payload shape file_id=%s", file_id)
            return []

        set_keys_by_node = self._read_component_set_keys(file_id)
        components: list[RawComponent] = []
        failed = 0
        for index, item in enumerate(raw_components):
            try:
                components.append(FigmaComponentPayload.model_validate(item).to_domain(set_keys_by_node))
            except ValidationError as exc:
                failed += 1
                logger.debug("Skipping invalid component index=%s error=%s", index, exc)

        if failed:
            logger.warning("Skipped invalid components file_id=%s count=%s", file_id, failed)
        logger.debug("Read components file_id=%s count=%s", file_id, len(components))
        return components

    def _read_component_set_keys(self, file_id: str) -> dict[str, str]:
        """
        Map component set node ids to their published keys. Best effort.
        """

        try:
            payload = self._get(f"/files/{file_id}/component_sets")
        except ConnectorRequestError as exc:
            logger.warning(
                "Component sets unavailable file_id=%s status=%s error=%s",
                file_id,
                exc.status_code,
                exc,
            )
            return {}

        keys: dict[str, str] = {}
        for item in _meta_list(payload, "component_sets") or []:
            try:
                component_set = FigmaComponentSetPayload.model_validate(item)
            except ValidationError:
                continue
            keys[component_set.node_id] = component_set.key
        return keys

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def iter_action_rows(self, file_id: str, period: ReportPeriod) -> Iterator[RawActionRow]:
        """
        Yield insertion/detachment rows for the period, across all pages.
        """

        def fetch_page(cursor: str | None) -> Page[dict[str, Any]]:
            params: dict[str, Any] = {
                "group_by": "component",
                "start_date": period.start_iso,
                "end_date": period.end_iso,
            }
            return self._analytics_page(f"/analytics/libraries/{file_id}/component/actions", params, cursor)

        for row in iter_pages(fetch_page, source="figma.actions"):
            try:
                action = FigmaActionRowPayload.model_validate(row).to_domain()
            except ValidationError as exc:
                logger.debug("Skipping invalid action row file_id=%s error=%s", file_id, exc)
                continue
            if action is not None:
                yield action

    def iter_usage_rows(self, file_id: str) -> Iterator[RawUsageRow]:
        """
        Yield cumulative usage rows, across all pages.
        """

        def fetch_page(cursor: str | None) -> Page[dict[str, Any]]:
            return self._analytics_page(
                f"/analytics/libraries/{file_id}/component/usages",
                {"group_by": "component"},
                cursor,
            )

        for row in iter_pages(fetch_page, source="figma.usages"):
            try:
                yield FigmaUsageRowPayload.model_validate(row).to_domain()
            except ValidationError as exc:
                logger.debug("Skipping invalid usage row file_id=%s error=%s", file_id, exc)

    def _analytics_page(
        self,
        path: str,
        params: dict[str, Any],
        cursor: str | None,
    ) -> Page[dict[str, Any]]:
        if cursor:
            params = {**params, "cursor": cursor}
        payload = self._get(path, params=params)
        if not isinstance(payload, dict):
            raise ConnectorRequestError(f"{self.source}: unexpected analytics payload for {path}.")
        envelope = AnalyticsPagePayload.model_validate(payload)
        return Page(rows=envelope.rows, has_next_page=envelope.next_page, next_cursor=envelope.cursor)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request_json(
            method="GET",
            url=f"{self._base_url}{path}",
            params=params,
            headers=self._headers,
        )


def _meta_list(payload: Any, key: str) -> list[Any] | None:
    if not isinstance(payload, dict):
        return None
    meta = payload.get("meta")
    if not isinstance(meta, dict):
        return None
    items = meta.get(key)
    return items if isinstance(items, list) else None
