"""
Custom exception classes for Amazon Connect export operations.
"""

from typing import Optional, Dict, Any, List


class ConnectExportError(Exception):
    """Base exception for Amazon Connect export operations."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class UsageError(ConnectExportError):
    """Exception raised for invalid command line usage."""
    pass


class SetupError(ConnectExportError):
    """Exception raised when the run cannot be set up (output directory, instance lookup)."""
    pass


class ConfigurationError(ConnectExportError):
    """Exception raised for configuration-related errors."""
    pass


class AWSCredentialsError(ConnectExportError):
    """Exception raised for AWS credentials-related errors."""
    pass


class TransportError(ConnectExportError):
    """Exception raised when a call to the Amazon Connect API fails."""
    pass


class ContentStateError(TransportError):
    """Exception raised when a resource exists but is not in an exportable state."""
    pass


class ExportAbortedError(ConnectExportError):
    """Exception raised when a per-item failure aborts the whole export."""

    def __init__(self, message: str, cause: Optional[Exception] = None,
                 remediation: Optional[List[str]] = None,
                 context: Optional[Dict[str, Any]] = None):
        error_code = getattr(cause, 'error_code', None)
        super().__init__(message, error_code=error_code, context=context)
        self.cause = cause
        self.remediation = remediation or []
