"""
Service classes for Amazon Connect export operations.
"""

from .connect_client import ConnectClient
from .error_handler import ErrorHandler, RecoveryAction
from .filters import NameFilter, filter_summaries, drop_excluded_types, sort_by_name
from .logging import LoggingService
from .paths import PathMapper
from .resource_export import ResourceExportService

__all__ = [
    "ConnectClient",
    "ErrorHandler",
    "RecoveryAction",
    "NameFilter",
    "filter_summaries",
    "drop_excluded_types",
    "sort_by_name",
    "LoggingService",
    "PathMapper",
    "ResourceExportService"
]
