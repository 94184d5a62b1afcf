"""Configuration service for athena-mcp.

This module centralizes environment variable handling for the athena-mcp
application: the required query result location, optional AWS selectors, and
poll cadence settings.
"""

from __future__ import annotations

import os

from athena_mcp.execute.runner import PollSettings


def _int_env(name: str, default: int, minimum: int) -> int:
    val = os.getenv(name, str(default))
    try:
        n = int(val)
    except ValueError:
        n = default
    return max(minimum, n)


class ConfigService:
    """Service for reading process-wide configuration."""

    @staticmethod
    def get_output_location() -> str:
        """Get the S3 location Athena writes query results to.

        Returns:
            S3 URI string

        Raises:
            ValueError: If neither ATHENA_MCP_OUTPUT_S3_PATH nor OUTPUT_S3_PATH is set
        """
        location = os.getenv("ATHENA_MCP_OUTPUT_S3_PATH") or os.getenv("OUTPUT_S3_PATH")
        if not location:
            error_msg = "ATHENA_MCP_OUTPUT_S3_PATH environment variable not set"
            raise ValueError(error_msg)
        return location

    # ---- AWS selectors ---------------------------------------------------
    @staticmethod
    def aws_region() -> str | None:
        return os.getenv("AWS_REGION") or None

    @staticmethod
    def aws_profile() -> str | None:
        return os.getenv("AWS_PROFILE") or None

    @staticmethod
    def workgroup() -> str | None:
        """Athena workgroup to submit into; Athena uses `primary` when unset."""
        return os.getenv("ATHENA_MCP_WORKGROUP") or None

    # ---- Poll cadence ----------------------------------------------------
    @staticmethod
    def poll_interval_ms() -> int:
        """Delay between status checks while waiting for a query."""
        return _int_env("ATHENA_MCP_POLL_INTERVAL_MS", 1000, 1)

    @staticmethod
    def max_poll_attempts() -> int:
        """Upper bound on status checks per wait, independent of the time budget."""
        return _int_env("ATHENA_MCP_MAX_POLL_ATTEMPTS", 100, 1)

    @staticmethod
    def default_timeout_ms() -> int:
        """Wait budget applied when run_query is called without timeout_ms."""
        return _int_env("ATHENA_MCP_DEFAULT_TIMEOUT_MS", 60000, 1000)

    @staticmethod
    def get_poll_settings() -> PollSettings:
        return PollSettings(
            interval_ms=ConfigService.poll_interval_ms(),
            max_attempts=ConfigService.max_poll_attempts(),
            default_timeout_ms=ConfigService.default_timeout_ms(),
        )
