"""
component_report/writers/markdown_writer.py

Markdown run summaries for per-file and consolidated reports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from component_report.domain.components import AggregatedComponent
from component_report.domain.report import FileReportResult, RunSummary
from component_report.writers.csv_writer import component_csv_row

logger = logging.getLogger(__name__)


def _cell(value: object) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def _table(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> list[str]:
    lines = [
        "| " + " | ".join(_cell(header) for header in headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    lines.extend("| " + " | ".join(_cell(value) for value in row) + " |" for row in rows)
    return lines


def render_summary(summary: RunSummary, components: Sequence[AggregatedComponent]) -> str:
    lines = [
        "# Component Report",
        "",
        f"- **Library Name**: {summary.library_name}",
        f"- **File ID**: {summary.file_id}",
        f"- **Total Components**: {summary.total_components}",
        f"- **Total Variants**: {summary.total_variants}",
        f"- **Total Usages**: {summary.total_usages}",
        f"- **Total Insertions**: {summary.total_insertions}",
        f"- **Total Detachments**: {summary.total_detachments}",
        f"- **Generation Date**: {summary.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"- **Selected Period**: {summary.period.describe()} ({summary.period.label})",
        f"- **Last Closed Valid Week**: {summary.last_valid_week or 'n/a'}",
        f"- **Total Execution Time**: {summary.execution_time}",
        "",
        "## Components",
        "",
    ]
    if components:
        rows = [list(component_csv_row(component).values()) for component in components]
        headers = list(component_csv_row(components[0]).keys())
        lines.extend(_table(headers, rows))
    else:
        lines.append("_No components._")
    return "\n".join(lines) + "\n"


def render_consolidated(results: Sequence[FileReportResult]) -> str:
    rows = []
    for result in results:
        summary = result.summary
        if summary is None:
            rows.append([result.file_id, result.file_id, result.status, "", "", "", "", ""])
            continue
        rows.append(
            [
                summary.library_name,
                result.file_id,
                result.status,
                summary.total_components,
                summary.total_variants,
                summary.total_usages,
                summary.total_insertions,
                summary.total_detachments,
            ]
        )
    headers = [
        "Library",
        "File ID",
        "Status",
        "Components",
        "Variants",
        "Usages",
        "Insertions",
        "Detachments",
    ]
    return "\n".join(["# Consolidated Component Report", "", *_table(headers, rows)]) + "\n"


class MarkdownReportWriter:
    """
    Writes Markdown reports to ``<reports_dir>/<file_name>.md``.
    """

    def __init__(self, reports_dir: str | Path) -> None:
        self.reports_dir = Path(reports_dir)

    def write(
        self,
        summary: RunSummary,
        components: Sequence[AggregatedComponent],
        file_name: str,
    ) -> Path:
        return self._write(file_name, render_summary(summary, components))

    def write_consolidated(self, results: Sequence[FileReportResult], file_name: str) -> Path:
        return self._write(file_name, render_consolidated(results))

    def _write(self, file_name: str, content: str) -> Path:
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.reports_dir / f"{file_name}.md"
        path.write_text(content, encoding="utf-8")
        logger.info("Markdown report written path=%s", path)
        return path
