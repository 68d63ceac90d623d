"""
component_report/writers/csv_writer.py

CSV output for per-file and consolidated reports.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Sequence

from component_report.domain.components import AggregatedComponent
from component_report.domain.report import FileReportResult
from component_report.formatting import format_date

logger = logging.getLogger(__name__)

CSV_COLUMNS: tuple[tuple[str, str], ...] = (
    ("component_name", "Component Name"),
    ("total_variants", "Total Variants"),
    ("usages", "Usages"),
    ("insertions", "Insertions"),
    ("detachments", "Detachments"),
    ("created_at", "Created At"),
    ("updated_at", "Updated At"),
    ("type", "Type"),
)


def component_csv_row(component: AggregatedComponent) -> dict[str, object]:
    row = component.to_row()
    row["created_at"] = format_date(component.created_at)
    row["updated_at"] = format_date(component.updated_at)
    return {title: row[field_id] for field_id, title in CSV_COLUMNS}


class CSVReportWriter:
    """
    Writes ordered report rows to ``<reports_dir>/<file_name>.csv``.
    """

    def __init__(self, reports_dir: str | Path) -> None:
        self.reports_dir = Path(reports_dir)

    def write(self, components: Sequence[AggregatedComponent], file_name: str) -> Path:
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.reports_dir / f"{file_name}.csv"
        fieldnames = [title for _, title in CSV_COLUMNS]
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames, lineterminator="\n")
            writer.writeheader()
            for component in components:
                writer.writerow(component_csv_row(component))
        logger.info("CSV report written path=%s rows=%s", path, len(components))
        return path

    def write_consolidated(self, results: Sequence[FileReportResult], file_name: str) -> Path:
        """
        One CSV across all successful files, with a leading Library column.
        """

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.reports_dir / f"{file_name}.csv"
        fieldnames = ["Library", *(title for _, title in CSV_COLUMNS)]
        rows = 0
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames, lineterminator="\n")
            writer.writeheader()
            for result in results:
                library = result.summary.library_name if result.summary else result.file_id
                for component in result.components:
                    writer.writerow({"Library": library, **component_csv_row(component)})
                    rows += 1
        logger.info("Consolidated CSV written path=%s rows=%s", path, rows)
        return path
