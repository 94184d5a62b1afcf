"""Exception hierarchy for query execution operations.

Every operation error carries a code from a fixed taxonomy, a message, and the
execution handle when one is known. Tool handlers serialise these through
`to_payload` so callers receive a structured error.

Error codes:
- INVALID_REQUEST: the backend rejected the query at submission
- QUERY_NOT_FOUND: the backend does not recognise the execution handle
- QUERY_STILL_RUNNING: results requested while the execution is not terminal
- QUERY_FAILED: the execution reached a terminal failure state
- UNEXPECTED_STATE: terminal but neither succeeded nor failed (e.g. cancelled)
- TIMEOUT: the local wait budget ran out before a terminal state was seen
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorCode(str, Enum):
    """Fixed error code taxonomy."""

    INVALID_REQUEST = "INVALID_REQUEST"
    QUERY_NOT_FOUND = "QUERY_NOT_FOUND"
    QUERY_STILL_RUNNING = "QUERY_STILL_RUNNING"
    QUERY_FAILED = "QUERY_FAILED"
    UNEXPECTED_STATE = "UNEXPECTED_STATE"
    TIMEOUT = "TIMEOUT"


class QueryToolError(Exception):
    """Base exception for query execution operations."""

    code: ClassVar[ErrorCode]

    def __init__(self, message: str, *, execution_handle: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.execution_handle = execution_handle

    def to_payload(self) -> dict[str, str | None]:
        return {
            "code": self.code.value,
            "message": self.message,
            "execution_handle": self.execution_handle,
        }


class InvalidRequestError(QueryToolError):
    """Raised when the backend rejects a submitted query as malformed."""

    code = ErrorCode.INVALID_REQUEST


class QueryNotFoundError(QueryToolError):
    """Raised when the backend does not recognise an execution handle."""

    code = ErrorCode.QUERY_NOT_FOUND


class QueryStillRunningError(QueryToolError):
    """Raised when results are requested for a queued or running execution."""

    code = ErrorCode.QUERY_STILL_RUNNING


class QueryFailedError(QueryToolError):
    """Raised when an execution ends in a failure state."""

    code = ErrorCode.QUERY_FAILED


class UnexpectedStateError(QueryToolError):
    """Raised when an execution is in a state no operation anticipates."""

    code = ErrorCode.UNEXPECTED_STATE


class QueryTimeoutError(QueryToolError):
    """Raised by the poll loop when its time or attempt budget runs out."""

    code = ErrorCode.TIMEOUT
