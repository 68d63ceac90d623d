from __future__ import annotations

import pytest

from component_report.connectors.base import ConnectorRequestError
from component_report.connectors.pagination import Page, iter_pages


class FakePager:
    """Serves scripted pages keyed by the cursor it is asked for."""

    def __init__(self, pages: dict[str | None, Page | Exception]) -> None:
        self._pages = pages
        self.requested: list[str | None] = []

    def __call__(self, cursor: str | None) -> Page:
        self.requested.append(cursor)
        page = self._pages[cursor]
        if isinstance(page, Exception):
            raise page
        return page


def test_concatenates_three_pages_in_order() -> None:
    pager = FakePager(
        {
            None: Page(rows=[1, 2], has_next_page=True, next_cursor="A"),
            "A": Page(rows=[3], has_next_page=True, next_cursor="B"),
            "B": Page(rows=[4, 5], has_next_page=False, next_cursor=None),
        }
    )
    assert list(iter_pages(pager, source="test")) == [1, 2, 3, 4, 5]
    assert pager.requested == [None, "A", "B"]


def test_failed_page_keeps_rows_already_fetched() -> None:
    pager = FakePager(
        {
            None: Page(rows=[1, 2], has_next_page=True, next_cursor="A"),
            "A": ConnectorRequestError("boom", status_code=500),
        }
    )
    assert list(iter_pages(pager, source="test")) == [1, 2]


def test_failure_on_first_page_yields_nothing() -> None:
    pager = FakePager({None: ConnectorRequestError("down")})
    assert list(iter_pages(pager, source="test")) == []


def test_next_page_without_cursor_stops() -> None:
    pager = FakePager({None: Page(rows=[1], has_next_page=True, next_cursor=None)})
    assert list(iter_pages(pager, source="test")) == [1]
    assert pager.requested == [None]


def test_overlapping_pages_are_not_deduplicated() -> None:
    pager = FakePager(
        {
            None: Page(rows=["x", "y"], has_next_page=True, next_cursor="A"),
            "A": Page(rows=["y", "z"], has_next_page=False),
        }
    )
    assert list(iter_pages(pager, source="test")) == ["x", "y", "y", "z"]


def test_iteration_is_lazy() -> None:
    pager = FakePager(
        {
            None: Page(rows=[1], has_next_page=True, next_cursor="A"),
            "A": Page(rows=[2], has_next_page=False),
        }
    )
    rows = iter_pages(pager, source="test")
    assert pager.requested == []
    assert next(rows) == 1
    assert pager.requested == [None]


def test_unexpected_errors_propagate() -> None:
    pager = FakePager({None: KeyError("bug")})
    with pytest.raises(KeyError):
        list(iter_pages(pager, source="test"))
