"""
component_report/integrations/notion_mirror.py

Mirrors report rows into Notion databases.

Per file: one database titled after the library, run time and period,
holding one page per component. Per run: one row in a summary database,
either configured up front or created on first use and reused for the
rest of the batch.

Page writes are strictly sequential with a fixed pause after every
``batch_size`` writes to stay under the Notion request-rate ceiling.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from component_report.config import NotionSettings
from component_report.domain.components import AggregatedComponent, ComponentType
from component_report.domain.report import RunSummary
from component_report.formatting import format_date

logger = logging.getLogger(__name__)

NOTION_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.HTTPError)


class MirrorError(RuntimeError):
    """
    Raised when a Notion database needed by the mirror cannot be created.
    """


@dataclass(frozen=True)
class MirrorOutcome:
    database_id: str
    records_created: int
    records_failed: int
    summary_written: bool


def _title(content: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


def _date(value: Any) -> dict[str, Any]:
    formatted = format_date(value)
    return {"date": {"start": formatted} if formatted else None}


def _number() -> dict[str, Any]:
    return {"number": {"format": "number"}}


COMPONENT_DATABASE_PROPERTIES: dict[str, Any] = {
    "1. Component Name": {"title": {}},
    "2. Total Variants": _number(),
    "3. Usages": _number(),
    "4. Insertions": _number(),
    "5. Detachments": _number(),
    "6. Created At": {"date": {}},
    "7. Updated At": {"date": {}},
    "8. Type": {
        "select": {
            "options": [
                {"name": ComponentType.SINGLE.value, "color": "blue"},
                {"name": ComponentType.SET.value, "color": "green"},
            ]
        }
    },
}

SUMMARY_DATABASE_PROPERTIES: dict[str, Any] = {
    "01. Library Name": {"title": {}},
    "02. Lib Tag Name": {"select": {"options": []}},
    "03. Total Components": _number(),
    "04. Total Variants": _number(),
    "05. Total Usages": _number(),
    "06. Total Insertions": _number(),
    "07. Total Detachments": _number(),
    "08. Generation Date": {"date": {}},
    "09. Period Start": {"date": {}},
    "10. Period End": {"date": {}},
    "11. Last Valid Week": {"date": {}},
    "12. Execution Time": {"rich_text": {}},
}


def component_page_properties(component: AggregatedComponent) -> dict[str, Any]:
    return {
        "1. Component Name": {"title": [{"text": {"content": component.group_name or "Unnamed Component"}}]},
        "2. Total Variants": {"number": component.total_variants},
        "3. Usages": {"number": component.total_usages},
        "4. Insertions": {"number": component.total_insertions},
        "5. Detachments": {"number": component.total_detachments},
        "6. Created At": _date(component.created_at),
        "7. Updated At": _date(component.updated_at),
        "8. Type": {"select": {"name": component.type.value}},
    }


def summary_page_properties(summary: RunSummary) -> dict[str, Any]:
    library_name = summary.library_name or "Unnamed Library"
    return {
        "01. Library Name": {"title": [{"text": {"content": library_name}}]},
        "02. Lib Tag Name": {"select": {"name": library_name}},
        "03. Total Components": {"number": summary.total_components},
        "04. Total Variants": {"number": summary.total_variants},
        "05. Total Usages": {"number": summary.total_usages},
        "06. Total Insertions": {"number": summary.total_insertions},
        "07. Total Detachments": {"number": summary.total_detachments},
        "08. Generation Date": _date(summary.generated_at),
        "09. Period Start": _date(summary.period.start_date),
        "10. Period End": _date(summary.period.end_date),
        "11. Last Valid Week": _date(summary.last_valid_week or summary.period.end_date),
        "12. Execution Time": {"rich_text": [{"text": {"content": summary.execution_time}}]},
    }


class NotionMirror:
    """
    Sequential writer of report rows into a Notion workspace.
    """

    def __init__(
        self,
        *,
        client: Client,
        parent_page_id: str,
        summary_database_id: str | None = None,
        batch_size: int = 3,
        batch_pause_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._parent_page_id = parent_page_id
        self._summary_database_id = summary_database_id
        self._batch_size = max(1, batch_size)
        self._batch_pause_seconds = max(0.0, batch_pause_seconds)
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: NotionSettings, *, parent_page_id: str | None = None) -> "NotionMirror":
        page_id = parent_page_id or settings.parent_page_id
        if not settings.token:
            raise MirrorError("NOTION_TOKEN is not configured.")
        if not page_id:
            raise MirrorError("No Notion parent page configured.")
        return cls(
            client=Client(auth=settings.token),
            parent_page_id=page_id,
            summary_database_id=settings.summary_database_id,
            batch_size=settings.batch_size,
            batch_pause_seconds=settings.batch_pause_seconds,
        )

    @property
    def summary_database_id(self) -> str | None:
        return self._summary_database_id

    def mirror(self, summary: RunSummary, components: Sequence[AggregatedComponent]) -> MirrorOutcome:
        """
        Create the component database, add every row, then the run summary.

        Raises MirrorError only when the component database cannot be created.
        """

        database_id = self.create_component_database(summary)
        created, failed = self.add_components(database_id, components)
        summary_written = self.add_summary(summary)
        return MirrorOutcome(
            database_id=database_id,
            records_created=created,
            records_failed=failed,
            summary_written=summary_written,
        )

    def create_component_database(self, summary: RunSummary) -> str:
        title = (
            f"Figma Component Report - {summary.library_name} - "
            f"{summary.generated_at.strftime('%Y-%m-%d - %H-%M')} - {summary.period.label}"
        )
        return self._create_database(title, COMPONENT_DATABASE_PROPERTIES)

    def add_components(self, database_id: str, components: Sequence[AggregatedComponent]) -> tuple[int, int]:
        created = 0
        failed = 0
        for index, component in enumerate(components, start=1):
            try:
                self._client.pages.create(
                    parent={"database_id": database_id},
                    properties=component_page_properties(component),
                )
                created += 1
                logger.debug("Notion page created component=%s", component.group_name)
            except NOTION_ERRORS as exc:
                failed += 1
                logger.error(
                    "Notion page create failed component=%s index=%s error=%s",
                    component.group_name,
                    index,
                    exc,
                )
            if index % self._batch_size == 0 and index < len(components):
                self._sleep(self._batch_pause_seconds)

        logger.info(
            "Notion components mirrored database_id=%s created=%s failed=%s",
            database_id,
            created,
            failed,
        )
        return created, failed

    def add_summary(self, summary: RunSummary) -> bool:
        try:
            if self._summary_database_id is None:
                title = (
                    f"Figma Component Report - {summary.library_name} - "
                    f"{summary.generated_at.strftime('%Y-%m-%d - %H-%M')} - {summary.period.label} - Summary"
                )
                self._summary_database_id = self._create_database(title, SUMMARY_DATABASE_PROPERTIES)
            self._client.pages.create(
                parent={"database_id": self._summary_database_id},
                properties=summary_page_properties(summary),
            )
        except (MirrorError, *NOTION_ERRORS) as exc:
            logger.error("Notion summary entry failed library=%s error=%s", summary.library_name, exc)
            return False
        logger.info("Notion summary entry added database_id=%s", self._summary_database_id)
        return True

    def _create_database(self, title: str, properties: dict[str, Any]) -> str:
        try:
            response = self._client.databases.create(
                parent={"type": "page_id", "page_id": self._parent_page_id},
                title=_title(title),
                properties=properties,
            )
        except NOTION_ERRORS as exc:
            raise MirrorError(f"Could not create Notion database '{title}'.") from exc
        database_id = response.get("id") if isinstance(response, dict) else None
        if not database_id:
            raise MirrorError(f"Notion did not return an id for database '{title}'.")
        logger.info("Notion database created title=%s id=%s", title, database_id)
        return database_id
