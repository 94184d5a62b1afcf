"""Typed lifecycle state for the query service.

Internal module providing strongly-typed lifecycle state for
`QueryServiceManager`. Not exposed outside the process.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ServicePhase(Enum):
    """Lifecycle phase of the query service."""

    IDLE = auto()
    READY = auto()
    FAILED = auto()
    STOPPED = auto()


@dataclass(frozen=True)
class ServiceState:
    """Snapshot of lifecycle state with timestamps and error details."""

    phase: ServicePhase
    started_at: float | None = None
    completed_at: float | None = None
    error_message: str | None = None
