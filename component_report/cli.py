"""
Run the Figma component report from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from component_report.config import get_figma_settings
from component_report.integrations.notion_mirror import MirrorError
from component_report.logging_utils import configure_logging
from component_report.periods import PeriodParseError, parse_period
from component_report.services.batch_service import build_batch_service

logger = logging.getLogger(__name__)


def parse_file_ids(raw: str | None) -> list[str]:
    """
    Split a comma-separated list of file keys, dropping quotes and blanks.
    """

    if not raw:
        return []
    cleaned = raw.replace('"', "").replace("'", "")
    return [file_id.strip() for file_id in cleaned.split(",") if file_id.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-component-report",
        description="Generate component usage reports for Figma library files.",
    )
    parser.add_argument(
        "-f",
        "--files",
        dest="files",
        required=True,
        help="Comma-separated Figma file keys.",
    )
    parser.add_argument(
        "-p",
        "--period",
        dest="period",
        default="30d",
        help="Analysis period: 30d, 60d, 90d, 1y or <start>,<end> (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--reports-dir",
        dest="reports_dir",
        default=None,
        help="Output directory for CSV and Markdown reports.",
    )
    parser.add_argument(
        "--notion-page",
        dest="notion_page",
        default=None,
        help="Notion parent page id; enables mirroring results into Notion.",
    )
    parser.add_argument(
        "--consolidated",
        action="store_true",
        help="Also write one consolidated report across all files.",
    )
    parser.add_argument(
        "--timestamp-policy",
        dest="timestamp_policy",
        choices=["last", "first"],
        default=None,
        help="Which variant's created/updated dates a set reports.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    file_ids = parse_file_ids(args.files)
    if not file_ids:
        parser.error("No file IDs provided. Please provide at least one file ID.")
    try:
        period = parse_period(args.period)
    except PeriodParseError as exc:
        parser.error(str(exc))

    configure_logging(debug=args.debug)

    if not get_figma_settings().token:
        logger.error("FIGMA_TOKEN not found. Set it in the environment or a .env file.")
        return 1

    try:
        service = build_batch_service(
            reports_dir=args.reports_dir,
            timestamp_policy=args.timestamp_policy,
            notion_page_id=args.notion_page,
        )
    except MirrorError as exc:
        logger.error("Notion mirror misconfigured: %s", exc)
        return 1

    batch = service.run(file_ids, period, consolidated=args.consolidated)

    payload = {
        "period": {"label": period.label, "start": period.start_iso, "end": period.end_iso},
        "files": [
            {
                "file_id": result.file_id,
                "status": result.status,
                "library": result.summary.library_name if result.summary else None,
                "components": len(result.components),
                "outputs": [str(path) for path in result.output_paths],
                "mirrored_records": result.mirrored_records,
                "mirror_failures": result.mirror_failures,
                "mirror_database_id": result.mirror_database_id,
                "mirror_summary_written": result.mirror_summary_written,
                "error": result.error,
            }
            for result in batch.files
        ],
        "consolidated": [str(path) for path in batch.consolidated_paths],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 1 if batch.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
