"""
component_report/config.py

Environment-driven configuration for the report pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_TIMESTAMP_POLICIES = {"last", "first"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.

    The project root is searched first, then the current working directory.
    """

    search_roots = [Path(__file__).resolve().parents[1], Path.cwd()]
    seen: set[Path] = set()
    for root in search_roots:
        for filename in (".env", ".env.local"):
            env_path = (root / filename).resolve()
            if env_path in seen or not env_path.exists():
                continue
            seen.add(env_path)

            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class FigmaSettings:
    """
    Figma REST API connector settings.
    """

    token: str | None = None
    api_base_url: str = "https://api.figma.com/v1"
    timeout_seconds: float = 30.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class ReportSettings:
    """
    Local report output settings.
    """

    reports_dir: str = "reports"
    deprecated_marker: str = "⛔"
    timestamp_policy: str = "last"


@dataclass(frozen=True)
class NotionSettings:
    """
    Notion workspace mirror settings.
    """

    token: str | None = None
    parent_page_id: str | None = None
    summary_database_id: str | None = None
    batch_size: int = 3
    batch_pause_seconds: float = 1.0


@lru_cache(maxsize=1)
def get_figma_settings() -> FigmaSettings:
    """
    Return cached Figma settings from environment variables.
    """

    return FigmaSettings(
        token=_get_optional_str_env("FIGMA_TOKEN"),
        api_base_url=_get_str_env("FIGMA_API_BASE_URL", "https://api.figma.com/v1"),
        timeout_seconds=max(1.0, _get_float_env("FIGMA_TIMEOUT_SECONDS", 30.0)),
        rate_limit_per_second=max(0.0, _get_float_env("FIGMA_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report output settings from environment variables.
    """

    policy = _get_str_env("REPORT_TIMESTAMP_POLICY", "last").lower()
    if policy not in _TIMESTAMP_POLICIES:
        policy = "last"
    return ReportSettings(
        reports_dir=_get_str_env("REPORTS_DIR", "reports"),
        deprecated_marker=_get_str_env("REPORT_DEPRECATED_MARKER", "⛔"),
        timestamp_policy=policy,
    )


@lru_cache(maxsize=1)
def get_notion_settings() -> NotionSettings:
    """
    Return cached Notion mirror settings from environment variables.
    """

    return NotionSettings(
        token=_get_optional_str_env("NOTION_TOKEN"),
        parent_page_id=_get_optional_str_env("NOTION_PARENT_PAGE_ID"),
        summary_database_id=_get_optional_str_env("NOTION_SUMMARY_DATABASE_ID"),
        batch_size=max(1, _get_int_env("NOTION_BATCH_SIZE", 3)),
        batch_pause_seconds=max(0.0, _get_float_env("NOTION_BATCH_PAUSE_SECONDS", 1.0)),
    )
