"""
component_report/connectors/pagination.py

Cursor pagination shared by the analytics readers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, TypeVar

from component_report.connectors.base import ConnectorRequestError

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class Page(Generic[RowT]):
    """
    One fetched page of rows plus the continuation marker.
    """

    rows: list[RowT] = field(default_factory=list)
    has_next_page: bool = False
    next_cursor: str | None = None


def iter_pages(
    fetch_page: Callable[[str | None], Page[RowT]],
    *,
    source: str,
) -> Iterator[RowT]:
    """
    Yield every row of every page, in page order.

    A failed page request ends iteration; rows already yielded stay with
    the caller. Rows are not de-duplicated across pages.
    """

    cursor: str | None = None
    page_number = 0
    while True:
        page_number += 1
        try:
            page = fetch_page(cursor)
        except ConnectorRequestError as exc:
            logger.warning(
                "Pagination stopped on failed page source=%s page=%s error=%s",
                source,
                page_number,
                exc,
            )
            return

        logger.debug(
            "Fetched page source=%s page=%s rows=%s has_next=%s",
            source,
            page_number,
            len(page.rows),
            page.has_next_page,
        )
        yield from page.rows

        if not page.has_next_page:
            return
        if not page.next_cursor:
            logger.warning(
                "Pagination stopped: next page announced without cursor source=%s page=%s",
                source,
                page_number,
            )
            return
        cursor = page.next_cursor
