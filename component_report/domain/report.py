"""
component_report/domain/report.py

Domain models for report periods, run summaries and batch outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from component_report.domain.components import AggregatedComponent


@dataclass(frozen=True)
class ReportPeriod:
    """
    Inclusive analytics date range selected on the command line.
    """

    label: str
    start_date: date
    end_date: date

    @property
    def start_iso(self) -> str:
        return self.start_date.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end_date.isoformat()

    def describe(self) -> str:
        return f"{self.start_iso} to {self.end_iso}"


@dataclass(frozen=True)
class RunSummary:
    """
    Totals for one file report, shared by the writers and the mirror.
    """

    library_name: str
    file_id: str
    period: ReportPeriod
    total_components: int
    total_variants: int
    total_usages: int
    total_insertions: int
    total_detachments: int
    generated_at: datetime
    last_valid_week: str | None
    execution_seconds: float

    @property
    def execution_time(self) -> str:
        """Execution time formatted as HH:MM:SS."""
        total = int(round(self.execution_seconds))
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class FileReportResult:
    """
    Outcome of processing one Figma file.

    ``status`` is ``"ok"``, ``"skipped"`` (no components) or ``"failed"``.
    """

    file_id: str
    status: str
    components: list[AggregatedComponent] = field(default_factory=list)
    summary: RunSummary | None = None
    output_paths: list[Path] = field(default_factory=list)
    mirrored_records: int = 0
    mirror_failures: int = 0
    mirror_database_id: str | None = None
    mirror_summary_written: bool = False
    error: str | None = None


@dataclass
class BatchResult:
    """
    Accumulator threaded through the batch loop.
    """

    period: ReportPeriod
    files: list[FileReportResult] = field(default_factory=list)
    consolidated_paths: list[Path] = field(default_factory=list)

    def add(self, result: FileReportResult) -> None:
        self.files.append(result)

    @property
    def succeeded(self) -> list[FileReportResult]:
        return [result for result in self.files if result.status == "ok"]

    @property
    def failed(self) -> list[FileReportResult]:
        return [result for result in self.files if result.status == "failed"]

    @property
    def skipped(self) -> list[FileReportResult]:
        return [result for result in self.files if result.status == "skipped"]
