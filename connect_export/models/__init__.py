"""
Data models for Amazon Connect export operations.
"""

from .config import ExportConfig
from .export_result import ExportResult, ExportReport, ExportStatus, ItemOutcome, ItemStatus
from .resources import (
    InstanceRef,
    DetailCall,
    ResourceKind,
    PROMPTS,
    HOURS_OF_OPERATION,
    QUEUES,
    ROUTING_PROFILES,
    CONTACT_FLOW_MODULES,
    CONTACT_FLOWS,
    EXPORT_ORDER
)
from .exceptions import (
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
    "ExportConfig",
    "ExportResult",
    "ExportReport",
    "ExportStatus",
    "ItemOutcome",
    "ItemStatus",
    "InstanceRef",
    "DetailCall",
    "ResourceKind",
    "PROMPTS",
    "HOURS_OF_OPERATION",
    "QUEUES",
    "ROUTING_PROFILES",
    "CONTACT_FLOW_MODULES",
    "CONTACT_FLOWS",
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
