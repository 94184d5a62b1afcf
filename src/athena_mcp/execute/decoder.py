"""Decode raw backend result pages into column-keyed records."""

from __future__ import annotations

from athena_mcp.backend.base import ColumnDescriptor, RawResultPage


def column_names(columns: list[ColumnDescriptor]) -> list[str]:
    """Column names in backend order; unnamed columns become "" to keep positions."""
    return [col.name or "" for col in columns]


def _record(names: list[str], cells: list[str | None]) -> dict[str, str | None]:
    item: dict[str, str | None] = {}
    for i, name in enumerate(names):
        item[name] = cells[i] if i < len(cells) else None
    return item


def decode_page(page: RawResultPage) -> tuple[list[str], list[dict[str, str | None]]]:
    """Return column names and one record per data row.

    The backend always sends its header row first; exactly that row is dropped.
    Missing or null cells are kept as None.
    """
    names = column_names(page.columns)
    return names, [_record(names, cells) for cells in page.rows[1:]]
