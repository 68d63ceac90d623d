"""
component_report/services/batch_service.py

Batch driver: runs the per-file pipeline for every file id, strictly in
input order, and optionally writes a consolidated report at the end.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from component_report.config import (
    get_figma_settings,
    get_notion_settings,
    get_report_settings,
)
from component_report.connectors.figma_connector import FigmaConnector
from component_report.domain.components import TimestampPolicy
from component_report.domain.report import BatchResult, FileReportResult, ReportPeriod
from component_report.formatting import file_timestamp
from component_report.integrations.notion_mirror import NotionMirror
from component_report.logging_utils import log_event
from component_report.services.aggregation_service import AggregationService
from component_report.services.report_service import ReportService
from component_report.writers.csv_writer import CSVReportWriter
from component_report.writers.markdown_writer import MarkdownReportWriter

logger = logging.getLogger(__name__)


class BatchReportService:
    """
    Coordinates one report run over several Figma files.
    """

    def __init__(
        self,
        *,
        report_service: ReportService,
        csv_writer: CSVReportWriter,
        markdown_writer: MarkdownReportWriter,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._report_service = report_service
        self._csv_writer = csv_writer
        self._markdown_writer = markdown_writer
        self._clock = clock

    def run(
        self,
        file_ids: Sequence[str],
        period: ReportPeriod,
        *,
        consolidated: bool = False,
    ) -> BatchResult:
        batch = BatchResult(period=period)
        log_event(
            logger,
            logging.INFO,
            "batch_started",
            files=len(file_ids),
            period=period.label,
            start_date=period.start_iso,
            end_date=period.end_iso,
        )

        for position, file_id in enumerate(file_ids, start=1):
            log_event(
                logger,
                logging.INFO,
                "file_started",
                file_id=file_id,
                position=position,
                total=len(file_ids),
            )
            try:
                result = self._report_service.generate(file_id, period)
            except Exception as exc:
                logger.exception("Report failed file_id=%s error=%s", file_id, exc)
                result = FileReportResult(file_id=file_id, status="failed", error=str(exc))
            batch.add(result)
            log_event(
                logger,
                logging.INFO,
                "file_finished",
                file_id=file_id,
                status=result.status,
                position=position,
                total=len(file_ids),
            )

        if consolidated:
            self._write_consolidated(batch)

        log_event(
            logger,
            logging.INFO,
            "batch_completed",
            files=len(batch.files),
            succeeded=len(batch.succeeded),
            skipped=len(batch.skipped),
            failed=len(batch.failed),
        )
        return batch

    def _write_consolidated(self, batch: BatchResult) -> None:
        if not batch.succeeded:
            logger.warning("No successful reports; consolidated report not written")
            return
        file_name = f"report_consolidated_{batch.period.label}_{file_timestamp(self._clock())}"
        try:
            csv_path = self._csv_writer.write_consolidated(batch.succeeded, file_name)
            markdown_path = self._markdown_writer.write_consolidated(batch.files, file_name)
        except OSError as exc:
            logger.error("Consolidated report not written file_name=%s error=%s", file_name, exc)
            return
        batch.consolidated_paths.extend([csv_path, markdown_path])


def build_batch_service(
    *,
    reports_dir: str | Path | None = None,
    timestamp_policy: str | None = None,
    notion_page_id: str | None = None,
) -> BatchReportService:
    """
    Wire the batch service from environment settings and CLI overrides.
    """

    report_settings = get_report_settings()
    output_dir = Path(reports_dir or report_settings.reports_dir)
    policy = TimestampPolicy(timestamp_policy or report_settings.timestamp_policy)

    notion_settings = get_notion_settings()
    mirror = None
    if notion_page_id or notion_settings.parent_page_id:
        mirror = NotionMirror.from_settings(notion_settings, parent_page_id=notion_page_id)

    csv_writer = CSVReportWriter(output_dir)
    markdown_writer = MarkdownReportWriter(output_dir)
    report_service = ReportService(
        reader=FigmaConnector(settings=get_figma_settings()),
        aggregator=AggregationService(timestamp_policy=policy),
        csv_writer=csv_writer,
        markdown_writer=markdown_writer,
        mirror=mirror,
        deprecated_marker=report_settings.deprecated_marker,
    )
    return BatchReportService(
        report_service=report_service,
        csv_writer=csv_writer,
        markdown_writer=markdown_writer,
    )
