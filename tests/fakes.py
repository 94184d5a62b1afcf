"""Fakes for query runner tests.

`ScriptedBackend` replays a fixed sequence of states (the last one repeats) and
records every call so tests can assert what reached the backend. `FakeClock`
advances only when the runner sleeps, which makes the poll loop deterministic.
"""

from __future__ import annotations

from athena_mcp.backend.base import (
    BackendRejectedError,
    BackendStatus,
    ColumnDescriptor,
    RawResultPage,
)

OUTPUT_LOCATION = "s3://results-bucket/athena/"


class ScriptedBackend:
    """In-memory `QueryBackend` driven by a scripted list of states."""

    def __init__(
        self,
        states: list[str | None],
        *,
        handle: str | None = "exec-1",
        page: RawResultPage | None = None,
        reason: str | None = None,
        bytes_scanned: int | None = 2048,
        engine_ms: int | None = 350,
        reject_submit: str | None = None,
        unknown_handles: frozenset[str] = frozenset(),
        missing_records: int = 0,
    ) -> None:
        self.states = list(states)
        self.handle = handle
        self.page = page
        self.reason = reason
        self.bytes_scanned = bytes_scanned
        self.engine_ms = engine_ms
        self.reject_submit = reject_submit
        self.unknown_handles = unknown_handles
        self.missing_records = missing_records
        self.submissions: list[tuple[str, str, str]] = []
        self.status_calls: list[str] = []
        self.fetch_calls: list[tuple[str, int]] = []

    async def submit(self, query: str, database: str, output_location: str) -> str | None:
        self.submissions.append((query, database, output_location))
        if self.reject_submit is not None:
            raise BackendRejectedError(self.reject_submit)
        return self.handle

    async def status(self, execution_handle: str) -> BackendStatus | None:
        self.status_calls.append(execution_handle)
        if execution_handle in self.unknown_handles:
            raise BackendRejectedError("QueryExecution not found")
        if len(self.status_calls) <= self.missing_records:
            return None
        idx = min(len(self.status_calls) - 1, len(self.states) - 1)
        return BackendStatus(
            state=self.states[idx],
            state_change_reason=self.reason,
            bytes_scanned=self.bytes_scanned,
            engine_execution_time_millis=self.engine_ms,
        )

    async def fetch_page(self, execution_handle: str, max_rows: int) -> RawResultPage | None:
        self.fetch_calls.append((execution_handle, max_rows))
        if self.page is None:
            return None
        return RawResultPage(columns=self.page.columns, rows=self.page.rows[: max_rows + 1])


class FakeClock:
    """Monotonic clock that moves forward only through `sleep`."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_page(names: list[str | None], rows: list[list[str | None]]) -> RawResultPage:
    """Build a raw page the way Athena returns it: header row first."""
    header = list(names)
    return RawResultPage(
        columns=[ColumnDescriptor(name=n, type="varchar") for n in names],
        rows=[header, *rows],
    )


