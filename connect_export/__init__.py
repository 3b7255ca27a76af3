"""
Amazon Connect Export Tool

Saves the configuration of an Amazon Connect instance to plain JSON files.
"""

__version__ = "1.0.0"
__author__ = "Amazon Connect Export Tool"

from .config import ConfigurationManager
from .orchestrator import ConnectExportOrchestrator
from .models import (
    ExportConfig,
    ExportResult,
    ExportReport,
    ExportStatus,
    InstanceRef,
    ResourceKind,
    EXPORT_ORDER,
    ConnectExportError,
    UsageError,
    SetupError,
    ConfigurationError,
    AWSCredentialsError,
    TransportError,
    ContentStateError,
    ExportAbortedError
)

__all__ = [
    "ConfigurationManager",
    "ConnectExportOrchestrator",
    "ExportConfig",
    "ExportResult",
    "ExportReport",
    "ExportStatus",
    "InstanceRef",
    "ResourceKind",
    "EXPORT_ORDER",
    "ConnectExportError",
    "UsageError",
    "SetupError",
    "ConfigurationError",
    "AWSCredentialsError",
    "TransportError",
    "ContentStateError",
    "ExportAbortedError"
]
