"""Query execution package: models, errors, result decoding and the runner.

Tool registration lives in `athena_mcp.execute.mcp_tools`.
"""

from __future__ import annotations

from .errors import ErrorCode, QueryToolError
from .models import (
    ExecutionState,
    ExecutionStatistics,
    ExecutionStatus,
    PendingQuery,
    QueryInput,
    QueryResult,
)
from .runner import PollSettings, QueryRunner

__all__ = [
    "ErrorCode",
    "ExecutionState",
    "ExecutionStatistics",
    "ExecutionStatus",
    "PendingQuery",
    "PollSettings",
    "QueryInput",
    "QueryResult",
    "QueryRunner",
    "QueryToolError",
]
