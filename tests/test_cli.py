from __future__ import annotations

import json
from datetime import date

import pytest

from component_report import cli
from component_report.config import FigmaSettings
from component_report.domain.report import BatchResult, FileReportResult, ReportPeriod
from component_report.integrations.notion_mirror import MirrorError


class FakeBatchService:
    def __init__(self, statuses: dict[str, str]) -> None:
        self.statuses = statuses
        self.calls: list[tuple[list[str], ReportPeriod, bool]] = []

    def run(self, file_ids, period, *, consolidated=False) -> BatchResult:
        self.calls.append((list(file_ids), period, consolidated))
        batch = BatchResult(period=period)
        for file_id in file_ids:
            batch.add(FileReportResult(file_id=file_id, status=self.statuses.get(file_id, "ok")))
        return batch


@pytest.fixture()
def with_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "get_figma_settings", lambda: FigmaSettings(token="secret"))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("abc,def", ["abc", "def"]),
        ('"abc", \'def\' ,, ', ["abc", "def"]),
        ("", []),
        (None, []),
    ],
)
def test_parse_file_ids(raw: str | None, expected: list[str]) -> None:
    assert cli.parse_file_ids(raw) == expected


def test_files_flag_is_required() -> None:
    with pytest.raises(SystemExit) as ctx:
        cli.main([])
    assert ctx.value.code == 2


def test_blank_file_list_is_rejected() -> None:
    with pytest.raises(SystemExit) as ctx:
        cli.main(["--files", " , "])
    assert ctx.value.code == 2


def test_invalid_period_is_rejected() -> None:
    with pytest.raises(SystemExit) as ctx:
        cli.main(["--files", "F1", "--period", "7d"])
    assert ctx.value.code == 2


def test_missing_token_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "get_figma_settings", lambda: FigmaSettings(token=None))
    assert cli.main(["--files", "F1"]) == 1


def test_mirror_misconfiguration_exits_with_error(monkeypatch: pytest.MonkeyPatch, with_token: None) -> None:
    def _raise(**kwargs):
        raise MirrorError("NOTION_TOKEN is not configured.")

    monkeypatch.setattr(cli, "build_batch_service", _raise)
    assert cli.main(["--files", "F1", "--notion-page", "page"]) == 1


def test_run_prints_summary(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    with_token: None,
) -> None:
    service = FakeBatchService({})
    received: dict[str, object] = {}

    def _build(**kwargs):
        received.update(kwargs)
        return service

    monkeypatch.setattr(cli, "build_batch_service", _build)
    exit_code = cli.main(
        [
            "-f",
            "F1,F2",
            "-p",
            "2024-01-01,2024-01-31",
            "--consolidated",
            "--reports-dir",
            "out",
            "--timestamp-policy",
            "first",
        ]
    )

    assert exit_code == 0
    assert received == {"reports_dir": "out", "timestamp_policy": "first", "notion_page_id": None}
    file_ids, period, consolidated = service.calls[0]
    assert file_ids == ["F1", "F2"]
    assert (period.start_date, period.end_date) == (date(2024, 1, 1), date(2024, 1, 31))
    assert consolidated is True

    payload = json.loads(capsys.readouterr().out)
    assert payload["period"] == {"label": "custom", "start": "2024-01-01", "end": "2024-01-31"}
    assert [entry["status"] for entry in payload["files"]] == ["ok", "ok"]
    assert payload["files"][0]["mirror_database_id"] is None
    assert payload["files"][0]["mirror_summary_written"] is False


def test_failed_file_sets_exit_code(monkeypatch: pytest.MonkeyPatch, with_token: None) -> None:
    monkeypatch.setattr(cli, "build_batch_service", lambda **kwargs: FakeBatchService({"F2": "failed"}))
    assert cli.main(["--files", "F1,F2"]) == 1


def test_skipped_file_keeps_success_exit_code(monkeypatch: pytest.MonkeyPatch, with_token: None) -> None:
    monkeypatch.setattr(cli, "build_batch_service", lambda **kwargs: FakeBatchService({"F2": "skipped"}))
    assert cli.main(["--files", "F1,F2"]) == 0
