"""
Error classification and per-item recovery policy for export operations.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Dict, List, Union
from botocore.exceptions import ClientError, BotoCoreError, NoCredentialsError
from botocore.exceptions import EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError

from ..models.resources import ResourceKind
from ..models.exceptions import (
    ConnectExportError, ConfigurationError, AWSCredentialsError, SetupError,
    TransportError, ContentStateError, ExportAbortedError
)


PUBLISHED_STATUS = "published"


class RecoveryAction(Enum):
    """What to do with an item whose export failed."""
    SKIP = "skip"
    FATAL = "fatal"


class ErrorHandler:
    """Converts API errors and decides how per-item failures are recovered."""

    # AWS error codes caused by missing permissions
    ACCESS_DENIED_ERROR_CODES = {
        'AccessDenied',
        'AccessDeniedException',
        'UnauthorizedOperation',
        'UnrecognizedClientException',
        'ExpiredTokenException',
        'InvalidClientTokenId'
    }

    def __init__(self, skip_on_error: bool = False, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            skip_on_error: Demote failures of tolerant kinds to per-item skips
            logger: Optional logger instance for error reporting
        """
        self.skip_on_error = skip_on_error
        self.logger = logger or logging.getLogger(__name__)

    def handle_api_error(self, error: Exception, operation: str,
                         service: str = 'connect') -> ConnectExportError:
        """
        Convert a botocore error into the exception the export raises.

        Args:
            error: The exception that occurred
            operation: Name of the operation that failed
            service: AWS service name

        Returns:
            ConnectExportError: Exception to raise in place of the original
        """
        if isinstance(error, ClientError):
            error_code = error.response.get('Error', {}).get('Code', 'Unknown')
            error_message = error.response.get('Error', {}).get('Message', str(error))
            context = {
                'service': service,
                'operation': operation,
                'error_code': error_code,
                'request_id': error.response.get('ResponseMetadata', {}).get('RequestId')
            }

            self.logger.error(
                f"AWS API error in {service}.{operation}: {error_code} - {error_message}",
                extra={'context': context}
            )

            if error_code in self.ACCESS_DENIED_ERROR_CODES:
                return AWSCredentialsError(
                    f"Access denied for {service}.{operation}: {error_message}",
                    error_code=error_code,
                    context=context
                )
            return TransportError(
                f"{service}.{operation} failed: {error_code} - {error_message}",
                error_code=error_code,
                context=context
            )

        if isinstance(error, NoCredentialsError):
            error_message = "AWS credentials not found or invalid"
            self.logger.error(error_message)
            return AWSCredentialsError(error_message, context={'operation': operation})

        if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            error_message = f"Network error in {service}.{operation}: {str(error)}"
            self.logger.error(error_message)
            return TransportError(error_message, error_code='NetworkError',
                                  context={'service': service, 'operation': operation})

        if isinstance(error, BotoCoreError):
            error_message = f"Boto3 error in {service}.{operation}: {str(error)}"
            self.logger.error(error_message)
            return TransportError(error_message, context={'service': service, 'operation': operation})

        error_message = f"Unknown error in {service}.{operation}: {str(error)}"
        self.logger.error(error_message, exc_info=True)
        return TransportError(error_message, context={'service': service, 'operation': operation})

    def check_publication_status(self, kind: ResourceKind, payload: Dict[str, Any], name: str) -> None:
        """
        Reject content that is not the published version.

        Args:
            kind: Resource kind of the payload
            payload: Description payload
            name: Resource name

        Raises:
            ContentStateError: If the kind is gated and its status is not published
        """
        if not kind.publication_gated:
            return

        status = payload.get('Status')
        if status is None or str(status).lower() == PUBLISHED_STATUS:
            return

        raise ContentStateError(
            f"The {kind.label} '{name}' is not published (status: {status})",
            error_code='NotPublished',
            context={'kind': kind.name, 'name': name, 'status': status}
        )

    def resolve(self, kind: ResourceKind, error: Exception, name: Optional[str],
                manifest_path: Optional[Union[str, Path]]) -> RecoveryAction:
        """
        Decide whether a failed item is skipped or aborts the run.

        Skipping requires skip-on-error mode, a tolerant kind (contact flows
        and contact flow modules) and both the resource name and its
        manifest path. Everything else is fatal.

        Args:
            kind: Resource kind of the failing item
            error: The failure (transport or content state)
            name: Resource name, if known
            manifest_path: Manifest file owning the item, if known

        Returns:
            RecoveryAction: SKIP or FATAL
        """
        if self.skip_on_error and kind.tolerant and name and manifest_path:
            action = RecoveryAction.SKIP
        else:
            action = RecoveryAction.FATAL

        self.logger.debug(
            f"Recovery for {kind.label} '{name}': {action.value}",
            extra={'context': {
                'kind': kind.name,
                'name': name,
                'error_type': type(error).__name__,
                'skip_on_error': self.skip_on_error
            }}
        )
        return action

    def abort(self, kind: ResourceKind, error: Exception, name: Optional[str]) -> ExportAbortedError:
        """
        Build the exception that aborts the run for a failed item.

        Args:
            kind: Resource kind of the failing item
            error: The failure
            name: Resource name, if known

        Returns:
            ExportAbortedError: Exception carrying remediation steps
        """
        subject = f"{kind.label} '{name}'" if name else kind.label
        return ExportAbortedError(
            f"Export of {subject} failed: {error}",
            cause=error,
            remediation=self.get_error_remediation_steps(error, kind),
            context={'kind': kind.name, 'name': name}
        )

    def get_error_remediation_steps(self, error: Exception,
                                    kind: Optional[ResourceKind] = None) -> List[str]:
        """
        Get suggested remediation steps for common errors.

        Args:
            error: The exception that occurred
            kind: Resource kind being exported when the error occurred

        Returns:
            List[str]: List of suggested remediation steps
        """
        if isinstance(error, ExportAbortedError) and error.cause is not None:
            return error.remediation or self.get_error_remediation_steps(error.cause, kind)

        if isinstance(error, AWSCredentialsError):
            return [
                "Check that AWS credentials are properly configured",
                "Verify the credential profile name passed on the command line",
                "Ensure the credentials allow connect:List* and connect:Describe* actions",
                "Verify the AWS region is correctly specified"
            ]

        if isinstance(error, SetupError):
            return [
                "Check the instance alias against the instances listed in the account and region",
                "Remove the existing output directory or rerun with --force to replace it"
            ]

        if isinstance(error, ConfigurationError):
            return [
                "Review the configuration file for syntax errors",
                "Check that page_size is between 1 and 1000",
                "Verify that name prefixes are valid regular expressions"
            ]

        if isinstance(error, TransportError) and kind is not None and kind.tolerant:
            return [
                f"Publish the {kind.label} and every prompt, queue, module and flow it references",
                "Rerun with --skip-on-error (-e) to omit failing contact flows and modules",
                "Rerun with --force (-f) to replace the partial output directory"
            ]

        if isinstance(error, TransportError):
            return [
                "Check the error logs for the failing API call and its error text",
                "Verify the instance is active and reachable in the configured region",
                "Rerun with --force (-f) to replace the partial output directory"
            ]

        return [
            "Check the error logs for more detailed information",
            "Verify AWS credentials and permissions",
            "Check network connectivity to AWS services"
        ]
