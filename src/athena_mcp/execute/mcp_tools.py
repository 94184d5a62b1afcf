"""MCP tool registration for Athena query execution.

Provides three tools:
- `run_query`: submit SQL and wait up to a time budget; returns results, or only
  the execution handle when the query is still running
- `get_status`: current state and statistics for an execution handle
- `get_result`: results for a succeeded execution

Operation errors are raised as `ToolError` whose text is a JSON object with
`code`, `message` and `execution_handle`.
"""

from __future__ import annotations

import json
from typing import Annotated, Final

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from athena_mcp.execute.errors import QueryToolError
from athena_mcp.execute.models import (
    MAX_ROWS_LIMIT,
    ExecutionStatus,
    PendingQuery,
    QueryInput,
    QueryResult,
)
from athena_mcp.execute.runner import QueryRunner
from athena_mcp.services.query_service_manager import QueryServiceManager

_logger = get_logger(__name__)

MAX_QUERY_DISPLAY: Final[int] = 200

MaxRowsArg = Annotated[
    int | None,
    Field(
        ge=1,
        le=MAX_ROWS_LIMIT,
        description=f"Maximum number of rows to return (default: 1000, max: {MAX_ROWS_LIMIT})",
    ),
]
ExecutionHandleArg = Annotated[
    str, Field(min_length=1, description="Execution handle returned by run_query")
]


async def _runner_or_error(ctx: Context, mgr: QueryServiceManager) -> QueryRunner:
    try:
        return mgr.get_runner()
    except RuntimeError as exc:
        await ctx.error(f"Query service not ready: {exc}")
        raise


async def _tool_error(ctx: Context, exc: QueryToolError) -> ToolError:
    payload = exc.to_payload()
    await ctx.error(f"{payload['code']}: {exc.message}")
    return ToolError(json.dumps(payload))


def register_query_tools(mcp: FastMCP, *, manager: QueryServiceManager | None = None) -> None:
    """Register the run_query, get_status and get_result tools.

    Args:
        mcp: The FastMCP server instance.
        manager: Service manager providing the runner; the process singleton when None.
    """

    def _manager() -> QueryServiceManager:
        return manager or QueryServiceManager.get_instance()

    @mcp.tool
    async def run_query(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        database: Annotated[str, Field(min_length=1, description="The Athena database to query")],
        query: Annotated[str, Field(min_length=1, description="SQL query to execute")],
        max_rows: MaxRowsArg = None,
        timeout_ms: Annotated[
            int | None,
            Field(ge=1000, description="How long to wait for completion in ms (default: 60000)"),
        ] = None,
    ) -> QueryResult | PendingQuery:
        """Execute a SQL query using AWS Athena.

        Returns full results if the query completes before the timeout; otherwise returns
        only execution_handle. Use get_status and get_result with that handle to follow up.
        """

        preview = query[:MAX_QUERY_DISPLAY] + ("..." if len(query) > MAX_QUERY_DISPLAY else "")
        _logger.info("run_query (%s): %s", database, preview)

        query_input = QueryInput(
            database=database, query=query, max_rows=max_rows, timeout_ms=timeout_ms
        )
        runner = await _runner_or_error(ctx, _manager())
        try:
            return await runner.run(query_input)
        except QueryToolError as exc:
            raise await _tool_error(ctx, exc) from exc

    @mcp.tool
    async def get_status(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        execution_handle: ExecutionHandleArg,
    ) -> ExecutionStatus:
        """Get the current state and statistics of a query execution."""

        _logger.info("get_status: %s", execution_handle)
        runner = await _runner_or_error(ctx, _manager())
        try:
            return await runner.get_status(execution_handle)
        except QueryToolError as exc:
            raise await _tool_error(ctx, exc) from exc

    @mcp.tool
    async def get_result(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        execution_handle: ExecutionHandleArg,
        max_rows: MaxRowsArg = None,
    ) -> QueryResult:
        """Get results for a completed query. Returns an error if the query is still running."""

        _logger.info("get_result: %s", execution_handle)
        runner = await _runner_or_error(ctx, _manager())
        try:
            return await runner.get_result(execution_handle, max_rows)
        except QueryToolError as exc:
            raise await _tool_error(ctx, exc) from exc
