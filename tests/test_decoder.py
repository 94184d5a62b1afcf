from __future__ import annotations

from fakes import make_page

from athena_mcp.backend.base import ColumnDescriptor, RawResultPage
from athena_mcp.execute.decoder import column_names, decode_page


def test_header_row_dropped_and_null_preserved() -> None:
    page = make_page(["col_a", "col_b"], [["1", "x"], ["2", None]])

    columns, rows = decode_page(page)

    assert columns == ["col_a", "col_b"]
    assert rows == [{"col_a": "1", "col_b": "x"}, {"col_a": "2", "col_b": None}]


def test_unnamed_column_kept_as_empty_string() -> None:
    cols = [ColumnDescriptor(name="id"), ColumnDescriptor(name=None), ColumnDescriptor(name="v")]
    assert column_names(cols) == ["id", "", "v"]


def test_short_row_fills_missing_cells_with_none() -> None:
    page = make_page(["a", "b", "c"], [["1"]])

    _, rows = decode_page(page)

    assert rows == [{"a": "1", "b": None, "c": None}]


def test_header_only_and_empty_pages() -> None:
    assert decode_page(make_page(["a"], [])) == (["a"], [])
    assert decode_page(RawResultPage()) == ([], [])


def test_only_first_row_is_dropped_even_if_later_rows_repeat_header() -> None:
    page = make_page(["name"], [["name"], ["alice"]])

    _, rows = decode_page(page)

    assert rows == [{"name": "name"}, {"name": "alice"}]
