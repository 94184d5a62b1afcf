"""Query service manager for athena-mcp.

Provides a process-wide `QueryRunner` built once during FastMCP lifespan
startup. Missing configuration fails startup instead of individual tool calls.
"""

from __future__ import annotations

from dataclasses import replace
import threading
import time
from typing import ClassVar

from fastmcp.utilities.logging import get_logger

from athena_mcp.backend.athena import AthenaBackend
from athena_mcp.execute.runner import QueryRunner
from athena_mcp.services.config_service import ConfigService
from athena_mcp.services.state import ServicePhase, ServiceState


class QueryServiceManager:
    """Singleton holder for the process-wide `QueryRunner`.

    The runner itself is stateless between calls, so concurrent tool
    invocations share it freely once the manager is READY.
    """

    _instance: ClassVar[QueryServiceManager | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        """Initialize the query service manager."""
        self._runner: QueryRunner | None = None
        self._logger = get_logger(__name__)
        self._state = ServiceState(phase=ServicePhase.IDLE)

    @classmethod
    def get_instance(cls) -> QueryServiceManager:
        """Get the singleton instance of QueryServiceManager.

        Returns:
            QueryServiceManager: The singleton instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        with cls._lock:
            cls._instance = None

    @property
    def state(self) -> ServiceState:
        return self._state

    def initialize(self, runner: QueryRunner | None = None) -> QueryRunner:
        """Build the runner from configuration unless one is supplied.

        Raises:
            ValueError: If required configuration is missing

        Any error while building the runner moves the service to FAILED before
        propagating.
        """
        self._state = ServiceState(phase=ServicePhase.IDLE, started_at=time.time())
        try:
            if runner is None:
                runner = self._build_runner()
        except Exception as exc:
            self._state = replace(
                self._state,
                phase=ServicePhase.FAILED,
                completed_at=time.time(),
                error_message=str(exc),
            )
            self._logger.exception("Query service initialization failed")
            raise

        self._runner = runner
        self._state = replace(self._state, phase=ServicePhase.READY, completed_at=time.time())
        self._logger.info("Query service ready")
        return runner

    def _build_runner(self) -> QueryRunner:
        output_location = ConfigService.get_output_location()
        settings = ConfigService.get_poll_settings()
        region = ConfigService.aws_region()
        backend = AthenaBackend(
            region=region,
            profile=ConfigService.aws_profile(),
            workgroup=ConfigService.workgroup(),
        )
        self._logger.info(
            "Athena backend configured (region=%s, output=%s, poll_interval_ms=%d)",
            region or "default",
            output_location,
            settings.interval_ms,
        )
        return QueryRunner(backend, output_location=output_location, settings=settings)

    def get_runner(self) -> QueryRunner:
        """Return the ready runner.

        Raises:
            RuntimeError: If the service is not READY
        """
        if self._runner is None or self._state.phase is not ServicePhase.READY:
            detail = f": {self._state.error_message}" if self._state.error_message else ""
            msg = f"Query service not ready (phase={self._state.phase.name}){detail}"
            raise RuntimeError(msg)
        return self._runner

    def is_ready(self) -> bool:
        return self._state.phase is ServicePhase.READY

    def shutdown(self) -> None:
        """Release the runner and mark the service stopped."""
        self._runner = None
        self._state = replace(self._state, phase=ServicePhase.STOPPED, completed_at=time.time())
        self._logger.info("Query service stopped")
