"""Backend protocol for submit/status/fetch against a remote query service.

The runner only talks to a `QueryBackend`; the production implementation wraps
Athena, and tests substitute a scripted fake that replays exact state sequences.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class BackendRejectedError(Exception):
    """Raised when the backend rejects a request as invalid.

    The meaning depends on the call: a rejected submission is a malformed query,
    a rejected status or result call is an unknown execution handle.
    """


@dataclass(frozen=True, slots=True)
class BackendStatus:
    """Raw execution status as reported by the backend."""

    state: str | None
    state_change_reason: str | None = None
    bytes_scanned: int | None = None
    engine_execution_time_millis: int | None = None


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Column metadata for a result set."""

    name: str | None
    type: str | None = None


@dataclass(frozen=True, slots=True)
class RawResultPage:
    """Result rows exactly as the backend returns them, header row included."""

    columns: list[ColumnDescriptor] = field(default_factory=list)
    rows: list[list[str | None]] = field(default_factory=list)


@runtime_checkable
class QueryBackend(Protocol):
    """Protocol for job-style query execution."""

    async def submit(self, query: str, database: str, output_location: str) -> str | None:
        """Submit a query and return the backend-assigned execution handle."""
        ...

    async def status(self, execution_handle: str) -> BackendStatus | None:
        """Return the current status, or None when the backend has no such execution."""
        ...

    async def fetch_page(self, execution_handle: str, max_rows: int) -> RawResultPage | None:
        """Fetch up to `max_rows` data rows plus the header row, or None when absent."""
        ...
