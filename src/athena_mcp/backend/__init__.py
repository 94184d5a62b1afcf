"""Remote query backend package.

Exports the backend protocol, its raw payload types, and the Athena implementation.
"""

from __future__ import annotations

from .athena import AthenaBackend
from .base import (
    BackendRejectedError,
    BackendStatus,
    ColumnDescriptor,
    QueryBackend,
    RawResultPage,
)

__all__ = [
    "AthenaBackend",
    "BackendRejectedError",
    "BackendStatus",
    "ColumnDescriptor",
    "QueryBackend",
    "RawResultPage",
]
