"""Submit, poll and fetch flow for the query tools.

This module provides a small, dependency-injected runner that:
- Submits a query exactly once with the process-wide output location
- Polls execution status at a fixed interval, bounded by time and attempts
- Returns full results on success or a bare handle when the wait budget runs out
- Maps backend outcomes onto the fixed error taxonomy
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import time

from fastmcp.utilities.logging import get_logger

from athena_mcp.backend.base import BackendRejectedError, BackendStatus, QueryBackend
from athena_mcp.execute.decoder import decode_page
from athena_mcp.execute.errors import (
    InvalidRequestError,
    QueryFailedError,
    QueryNotFoundError,
    QueryStillRunningError,
    QueryTimeoutError,
    UnexpectedStateError,
)
from athena_mcp.execute.models import (
    MAX_ROWS_LIMIT,
    ExecutionState,
    ExecutionStatistics,
    ExecutionStatus,
    PendingQuery,
    QueryInput,
    QueryResult,
)

_logger = get_logger(__name__)


@dataclass(slots=True)
class PollSettings:
    """Poll cadence and defaults applied when a caller leaves them unset."""

    interval_ms: int = 1000
    max_attempts: int = 100
    default_timeout_ms: int = 60000
    default_max_rows: int = 1000


def _to_status(execution_handle: str, raw: BackendStatus) -> ExecutionStatus:
    return ExecutionStatus(
        execution_handle=execution_handle,
        state=ExecutionState.parse(raw.state),
        state_change_reason=raw.state_change_reason,
        statistics=ExecutionStatistics(
            bytes_scanned=raw.bytes_scanned or 0,
            engine_execution_time_millis=raw.engine_execution_time_millis or 0,
        ),
    )


class QueryRunner:
    """Run queries against a `QueryBackend` with a bounded wait."""

    def __init__(
        self,
        backend: QueryBackend,
        *,
        output_location: str,
        settings: PollSettings | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend = backend
        self._output_location = output_location
        self._settings = settings or PollSettings()
        self._sleep = sleep
        self._clock = clock

    @property
    def settings(self) -> PollSettings:
        return self._settings

    async def submit(self, query_input: QueryInput) -> str:
        """Submit the query once and return the backend-assigned handle.

        Raises:
            InvalidRequestError: If the backend rejects the query
            RuntimeError: If the backend accepts the call but returns no handle
        """
        try:
            handle = await self._backend.submit(
                query_input.query, query_input.database, self._output_location
            )
        except BackendRejectedError as exc:
            _logger.warning("Query rejected at submission: %s", exc)
            raise InvalidRequestError(str(exc)) from exc

        if not handle:
            msg = "Failed to start query execution"
            raise RuntimeError(msg)
        _logger.info("Submitted query to database %s as %s", query_input.database, handle)
        return handle

    async def get_status(self, execution_handle: str) -> ExecutionStatus:
        """Fetch the current status of an execution.

        Raises:
            QueryNotFoundError: If the backend does not know the handle
        """
        raw = await self._raw_status(execution_handle)
        if raw is None:
            raise QueryNotFoundError("Query execution not found", execution_handle=execution_handle)
        return _to_status(execution_handle, raw)

    async def _raw_status(self, execution_handle: str) -> BackendStatus | None:
        try:
            return await self._backend.status(execution_handle)
        except BackendRejectedError as exc:
            raise QueryNotFoundError(
                "Query execution not found", execution_handle=execution_handle
            ) from exc

    async def _poll_status(self, execution_handle: str) -> ExecutionStatus:
        # No execution record yet: no state to act on, so report UNKNOWN.
        raw = await self._raw_status(execution_handle)
        return _to_status(execution_handle, raw or BackendStatus(state=None))

    async def wait_for_completion(
        self, execution_handle: str, timeout_ms: int | None = None
    ) -> ExecutionStatus:
        """Poll until the execution reaches a terminal state.

        Queued, running and unrecognised states keep the loop going, as does a
        status response without an execution record. The loop ends after
        `max_attempts` checks even when no time budget is given.

        Raises:
            QueryFailedError: If the execution fails or is cancelled
            QueryTimeoutError: If the time or attempt budget runs out first
        """
        interval = self._settings.interval_ms / 1000.0
        deadline = None if timeout_ms is None else self._clock() + timeout_ms / 1000.0
        attempts = 0

        while attempts < self._settings.max_attempts:
            if deadline is not None and self._clock() >= deadline:
                break

            status = await self._poll_status(execution_handle)
            _logger.debug(
                "Poll %d for %s: %s", attempts + 1, execution_handle, status.state.value
            )
            if status.state is ExecutionState.SUCCEEDED:
                return status
            if status.state.is_terminal_failure:
                raise QueryFailedError(
                    status.state_change_reason or "Query failed",
                    execution_handle=execution_handle,
                )

            await self._sleep(interval)
            attempts += 1

        _logger.warning("Stopped waiting for %s after %d polls", execution_handle, attempts)
        raise QueryTimeoutError("Query timed out", execution_handle=execution_handle)

    async def get_result(self, execution_handle: str, max_rows: int | None = None) -> QueryResult:
        """Fetch one page of results for a succeeded execution.

        Status is always re-checked immediately before the data fetch.

        Raises:
            ValueError: If `max_rows` is outside [1, 10000]
            QueryStillRunningError: If the execution is queued or running
            QueryFailedError: If the execution failed
            UnexpectedStateError: For any other non-succeeded state
            QueryNotFoundError: If the backend does not know the handle
        """
        limit = self._settings.default_max_rows if max_rows is None else max_rows
        if not 1 <= limit <= MAX_ROWS_LIMIT:
            msg = f"max_rows must be between 1 and {MAX_ROWS_LIMIT}, got {limit}"
            raise ValueError(msg)

        status = await self.get_status(execution_handle)
        state = status.state
        if state in {ExecutionState.RUNNING, ExecutionState.QUEUED}:
            raise QueryStillRunningError(
                "Query is still running", execution_handle=execution_handle
            )
        if state is ExecutionState.FAILED:
            raise QueryFailedError(
                status.state_change_reason or "Query failed", execution_handle=execution_handle
            )
        if state is not ExecutionState.SUCCEEDED:
            raise UnexpectedStateError(
                f"Unexpected query state: {state.value}", execution_handle=execution_handle
            )

        try:
            page = await self._backend.fetch_page(execution_handle, limit)
        except BackendRejectedError as exc:
            raise QueryNotFoundError(
                "Query execution not found", execution_handle=execution_handle
            ) from exc
        if page is None:
            msg = "No results returned from query"
            raise RuntimeError(msg)

        columns, rows = decode_page(page)
        _logger.info("Fetched %d rows for %s", len(rows), execution_handle)
        return QueryResult(
            columns=columns,
            rows=rows,
            execution_handle=execution_handle,
            bytes_scanned=status.statistics.bytes_scanned,
            execution_time_millis=status.statistics.engine_execution_time_millis,
        )

    async def run(self, query_input: QueryInput) -> QueryResult | PendingQuery:
        """Submit, wait up to the time budget, and return results or a pending handle."""
        handle = await self.submit(query_input)
        timeout_ms = query_input.timeout_ms or self._settings.default_timeout_ms
        try:
            await self.wait_for_completion(handle, timeout_ms)
        except QueryTimeoutError:
            _logger.info("Query %s still running after %d ms; returning handle", handle, timeout_ms)
            return PendingQuery(execution_handle=handle)
        return await self.get_result(handle, query_input.max_rows)
