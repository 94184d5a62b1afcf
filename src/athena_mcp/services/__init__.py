"""Services package for athena-mcp.

Main Components:
- ConfigService: Environment configuration
- QueryServiceManager: Process-wide query runner lifecycle
"""

from .config_service import ConfigService
from .query_service_manager import QueryServiceManager

__all__ = [
    "ConfigService",
    "QueryServiceManager",
]
