"""Models for the query execution tools.

Typed request and response payloads shared by the runner and the MCP tools.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

MAX_ROWS_LIMIT: Final[int] = 10000


class ExecutionState(str, Enum):
    """Lifecycle states of a backend execution."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: str | None) -> ExecutionState:
        """Map a raw backend state to a member, falling back to UNKNOWN."""
        if not raw:
            return cls.UNKNOWN
        try:
            return cls(raw.upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def is_terminal_failure(self) -> bool:
        return self in {ExecutionState.FAILED, ExecutionState.CANCELLED}


TERMINAL_STATES: Final[frozenset[ExecutionState]] = frozenset(
    {ExecutionState.SUCCEEDED, ExecutionState.FAILED, ExecutionState.CANCELLED}
)


class QueryInput(BaseModel):
    """A query submission request."""

    model_config = ConfigDict(frozen=True)

    database: str = Field(min_length=1, description="Athena database to run the query against")
    query: str = Field(min_length=1, description="SQL text to submit")
    max_rows: int | None = Field(
        default=None,
        ge=1,
        le=MAX_ROWS_LIMIT,
        description="Maximum number of rows to return (default 1000)",
    )
    timeout_ms: int | None = Field(
        default=None, gt=0, description="How long to wait for completion (default 60000)"
    )


class ExecutionStatistics(BaseModel):
    """Execution statistics; absent values are reported as 0."""

    bytes_scanned: int = Field(default=0, ge=0, description="Data scanned in bytes")
    engine_execution_time_millis: int = Field(
        default=0, ge=0, description="Engine execution time in milliseconds"
    )


class ExecutionStatus(BaseModel):
    """Current status of an execution, recomputed on every call."""

    execution_handle: str = Field(description="Backend-assigned execution identifier")
    state: ExecutionState = Field(description="Current execution state")
    state_change_reason: str | None = Field(
        default=None, description="Backend explanation of the latest state change"
    )
    statistics: ExecutionStatistics = Field(default_factory=ExecutionStatistics)


class QueryResult(BaseModel):
    """One fetched page of results for a succeeded execution."""

    model_config = ConfigDict(frozen=True)

    columns: list[str] = Field(description="Column names in result order")
    rows: list[dict[str, str | None]] = Field(description="One record per data row")
    execution_handle: str = Field(description="Backend-assigned execution identifier")
    bytes_scanned: int = Field(default=0, ge=0, description="Data scanned in bytes")
    execution_time_millis: int = Field(
        default=0, ge=0, description="Engine execution time in milliseconds"
    )


class PendingQuery(BaseModel):
    """Returned by run_query when the query has not finished within the wait budget.

    Use the handle with get_status and get_result to follow up.
    """

    model_config = ConfigDict(frozen=True)

    execution_handle: str = Field(description="Backend-assigned execution identifier")
