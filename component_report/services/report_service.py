"""
component_report/services/report_service.py

Per-file report pipeline: read the three Figma sources, aggregate, order,
write CSV and Markdown, then optionally mirror into Notion.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Iterable, Protocol, Sequence

from component_report.connectors.base import ConnectorRequestError
from component_report.domain.components import (
    AggregatedComponent,
    RawActionRow,
    RawComponent,
    RawUsageRow,
)
from component_report.domain.report import FileReportResult, ReportPeriod, RunSummary
from component_report.formatting import file_timestamp, normalize_name
from component_report.integrations.notion_mirror import MirrorError, NotionMirror
from component_report.services.aggregation_service import AggregationService
from component_report.services.presenter import DEFAULT_DEPRECATED_MARKER, order_components
from component_report.writers.csv_writer import CSVReportWriter
from component_report.writers.markdown_writer import MarkdownReportWriter

logger = logging.getLogger(__name__)


class ComponentSourceReader(Protocol):
    """
    The reads a report needs from one library file.
    """

    def fetch_file_name(self, file_id: str) -> str: ...

    def read_components(self, file_id: str) -> list[RawComponent]: ...

    def iter_action_rows(self, file_id: str, period: ReportPeriod) -> Iterable[RawActionRow]: ...

    def iter_usage_rows(self, file_id: str) -> Iterable[RawUsageRow]: ...


def build_summary(
    *,
    library_name: str,
    file_id: str,
    period: ReportPeriod,
    components: Sequence[AggregatedComponent],
    generated_at: datetime,
    last_valid_week: str | None,
    execution_seconds: float,
) -> RunSummary:
    return RunSummary(
        library_name=library_name,
        file_id=file_id,
        period=period,
        total_components=len(components),
        total_variants=sum(component.total_variants or 0 for component in components),
        total_usages=sum(component.total_usages for component in components),
        total_insertions=sum(component.total_insertions for component in components),
        total_detachments=sum(component.total_detachments for component in components),
        generated_at=generated_at,
        last_valid_week=last_valid_week,
        execution_seconds=execution_seconds,
    )


class ReportService:
    """
    Produces the report artifacts for one file at a time.
    """

    def __init__(
        self,
        *,
        reader: ComponentSourceReader,
        aggregator: AggregationService,
        csv_writer: CSVReportWriter,
        markdown_writer: MarkdownReportWriter,
        mirror: NotionMirror | None = None,
        deprecated_marker: str = DEFAULT_DEPRECATED_MARKER,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._reader = reader
        self._aggregator = aggregator
        self._csv_writer = csv_writer
        self._markdown_writer = markdown_writer
        self._mirror = mirror
        self._deprecated_marker = deprecated_marker
        self._clock = clock

    def generate(self, file_id: str, period: ReportPeriod) -> FileReportResult:
        started = time.monotonic()
        generated_at = self._clock()

        library_name = self._library_name(file_id)
        components = self._reader.read_components(file_id)
        if not components:
            logger.warning("No components found file_id=%s library=%s; skipping", file_id, library_name)
            return FileReportResult(file_id=file_id, status="skipped", error="no components found")

        aggregation = self._aggregator.aggregate_with_stats(
            components,
            actions=self._reader.iter_action_rows(file_id, period),
            usages=self._reader.iter_usage_rows(file_id),
        )
        if aggregation.unmatched_actions or aggregation.unmatched_usages:
            logger.debug(
                "Dropped unmatched analytics rows file_id=%s actions=%s usages=%s",
                file_id,
                aggregation.unmatched_actions,
                aggregation.unmatched_usages,
            )
        ordered = order_components(aggregation.groups, deprecated_marker=self._deprecated_marker)

        summary = build_summary(
            library_name=library_name,
            file_id=file_id,
            period=period,
            components=ordered,
            generated_at=generated_at,
            last_valid_week=aggregation.last_week,
            execution_seconds=time.monotonic() - started,
        )

        file_name = f"report_{normalize_name(library_name)}_{period.label}_{file_timestamp(generated_at)}"
        output_paths = [
            self._csv_writer.write(ordered, file_name),
            self._markdown_writer.write(summary, ordered, file_name),
        ]

        mirrored = 0
        mirror_failures = 0
        mirror_database_id = None
        mirror_summary_written = False
        if self._mirror is not None:
            try:
                outcome = self._mirror.mirror(summary, ordered)
                mirrored = outcome.records_created
                mirror_failures = outcome.records_failed
                mirror_database_id = outcome.database_id
                mirror_summary_written = outcome.summary_written
                if not outcome.summary_written:
                    logger.warning("Notion summary entry missing file_id=%s", file_id)
            except MirrorError as exc:
                mirror_failures = len(ordered)
                logger.error("Notion mirror failed file_id=%s error=%s", file_id, exc)

        logger.info(
            "Report generated file_id=%s library=%s components=%s",
            file_id,
            library_name,
            summary.total_components,
        )
        return FileReportResult(
            file_id=file_id,
            status="ok",
            components=ordered,
            summary=summary,
            output_paths=output_paths,
            mirrored_records=mirrored,
            mirror_failures=mirror_failures,
            mirror_database_id=mirror_database_id,
            mirror_summary_written=mirror_summary_written,
        )

    def _library_name(self, file_id: str) -> str:
        try:
            return self._reader.fetch_file_name(file_id)
        except ConnectorRequestError as exc:
            logger.warning(
                "File metadata unavailable file_id=%s status=%s error=%s; using file id as name",
                file_id,
                exc.status_code,
                exc,
            )
            return file_id
