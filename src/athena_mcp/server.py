"""FastMCP server implementation for athena-mcp."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import dotenv
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from starlette.requests import Request
from starlette.responses import JSONResponse

from athena_mcp.execute.mcp_tools import register_query_tools
from athena_mcp.services.query_service_manager import QueryServiceManager

# Load environment variables
dotenv.load_dotenv()

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)


# -- Context Manager for query service initialization ------------------------
@asynccontextmanager
async def lifespan(_mcp_instance: FastMCP) -> AsyncGenerator[None]:
    """FastMCP lifespan context manager; a failed query service aborts startup."""
    manager = QueryServiceManager.get_instance()
    try:
        manager.initialize()
    except Exception as exc:
        _logger.error("Aborting server startup: %s", exc)
        raise
    try:
        yield
    finally:
        _logger.info("Shutting down query service during lifespan shutdown")
        manager.shutdown()


# Create the main MCP server instance with lifespan
mcp = FastMCP(
    name="athena-mcp",
    instructions=(
        "Runs SQL against AWS Athena. run_query waits up to timeout_ms and returns "
        "results, or only an execution_handle when the query is still running; "
        "follow up with get_status and get_result."
    ),
    lifespan=lifespan,
)

# -- Tool Registration -------------------------------------------------------
register_query_tools(mcp)


# -- Health Check ----------------------------------------------------------
@mcp.custom_route("/health", methods=["GET"])
async def health_check(_request: Request) -> JSONResponse:
    manager = QueryServiceManager.get_instance()
    ready = manager.is_ready()
    return JSONResponse(
        {
            "status": "healthy" if ready else "unavailable",
            "service": "athena-mcp",
            "phase": manager.state.phase.name,
        },
        status_code=200 if ready else 503,
    )


# -- Main Entrypoint -------------------------------------------------------

# Use the athena-mcp console script or `fastmcp run` to start the server
