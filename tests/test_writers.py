from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path

import pytest

from component_report.domain.components import AggregatedComponent, ComponentType
from component_report.domain.report import FileReportResult, ReportPeriod, RunSummary
from component_report.formatting import format_date, normalize_name
from component_report.writers.csv_writer import CSVReportWriter
from component_report.writers.markdown_writer import MarkdownReportWriter


@pytest.fixture()
def components() -> list[AggregatedComponent]:
    return [
        AggregatedComponent(
            group_name="Button",
            type=ComponentType.SET,
            variant_count=2,
            total_usages=6,
            total_insertions=5,
            total_detachments=2,
            created_at="2024-01-02T10:00:00Z",
            updated_at="2024-03-04T10:00:00.123Z",
        ),
        AggregatedComponent(group_name="Icon/Close"),
    ]


@pytest.fixture()
def summary() -> RunSummary:
    return RunSummary(
        library_name="Core | Library",
        file_id="F1",
        period=ReportPeriod(label="30d", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)),
        total_components=2,
        total_variants=2,
        total_usages=6,
        total_insertions=5,
        total_detachments=2,
        generated_at=datetime(2024, 2, 1, 9, 30, 0),
        last_valid_week="2024-01-22",
        execution_seconds=3725.2,
    )


def _read_csv(path: Path) -> list[dict[str, str]]:
    with path.open(encoding="utf-8", newline="") as handle:
        return list(csv.DictReader(handle))


def test_csv_rows_and_na_sentinel(tmp_path: Path, components: list[AggregatedComponent]) -> None:
    path = CSVReportWriter(tmp_path / "reports").write(components, "report_core")

    assert path == tmp_path / "reports" / "report_core.csv"
    rows = _read_csv(path)
    assert list(rows[0].keys()) == [
        "Component Name",
        "Total Variants",
        "Usages",
        "Insertions",
        "Detachments",
        "Created At",
        "Updated At",
        "Type",
    ]
    assert rows[0]["Total Variants"] == "2"
    assert rows[0]["Created At"] == "2024-01-02"
    assert rows[0]["Updated At"] == "2024-03-04"
    assert rows[1]["Component Name"] == "Icon/Close"
    assert rows[1]["Total Variants"] == "N/A"
    assert rows[1]["Type"] == "Single"


def test_markdown_summary(tmp_path: Path, components: list[AggregatedComponent], summary: RunSummary) -> None:
    path = MarkdownReportWriter(tmp_path).write(summary, components, "report_core")
    content = path.read_text(encoding="utf-8")

    assert path.suffix == ".md"
    assert "- **Library Name**: Core | Library" in content
    assert "- **Selected Period**: 2024-01-01 to 2024-01-31 (30d)" in content
    assert "- **Last Closed Valid Week**: 2024-01-22" in content
    assert "- **Total Execution Time**: 01:02:05" in content
    assert "| Button | 2 | 6 | 5 | 2 | 2024-01-02 | 2024-03-04 | Set |" in content
    assert "| Icon/Close | N/A | 0 | 0 | 0 |  |  | Single |" in content


def test_consolidated_outputs(tmp_path: Path, components: list[AggregatedComponent], summary: RunSummary) -> None:
    results = [
        FileReportResult(file_id="F1", status="ok", components=components, summary=summary),
        FileReportResult(file_id="F2", status="failed", error="boom"),
    ]
    csv_path = CSVReportWriter(tmp_path).write_consolidated(results[:1], "report_consolidated")
    md_path = MarkdownReportWriter(tmp_path).write_consolidated(results, "report_consolidated")

    rows = _read_csv(csv_path)
    assert [row["Library"] for row in rows] == ["Core | Library", "Core | Library"]
    assert [row["Component Name"] for row in rows] == ["Button", "Icon/Close"]

    content = md_path.read_text(encoding="utf-8")
    assert "| Core \\| Library | F1 | ok | 2 | 2 | 6 | 5 | 2 |" in content
    assert "| F2 | F2 | failed |" in content


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Design System — Core", "design_system_core"),
        ("Ícones & Ilustrações", "icones_ilustracoes"),
        ("___", "library"),
    ],
)
def test_normalize_name(raw: str, expected: str) -> None:
    assert normalize_name(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-02T10:00:00Z", "2024-01-02"),
        ("2024-01-02", "2024-01-02"),
        ("yesterday", "yesterday"),
        (None, ""),
        (date(2024, 5, 1), "2024-05-01"),
    ],
)
def test_format_date(raw: object, expected: str) -> None:
    assert format_date(raw) == expected
