"""athena-mcp package for running SQL on AWS Athena over MCP.

Provides a Model Context Protocol (FastMCP) server that submits queries, waits
for completion within a caller-chosen budget, and fetches results.
"""

from athena_mcp.execute import (
    ErrorCode,
    ExecutionState,
    ExecutionStatus,
    PendingQuery,
    QueryInput,
    QueryResult,
    QueryRunner,
    QueryToolError,
)
from athena_mcp.services import ConfigService, QueryServiceManager

__all__ = [  # noqa: RUF022
    # Core models
    "ExecutionState",
    "ExecutionStatus",
    "PendingQuery",
    "QueryInput",
    "QueryResult",
    # Errors
    "ErrorCode",
    "QueryToolError",
    # Services
    "ConfigService",
    "QueryRunner",
    "QueryServiceManager",
]
