"""
Run logging service for Amazon Connect export operations.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, List, Optional
from pathlib import Path

from ..models.config import ExportConfig


LOGGER_NAME = 'connect_export'


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging with JSON output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add context data if available
        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        # Add exception info if available
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ProgressTracker:
    """Tracks progress of the detail stage of one resource kind."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.current_operation: Optional[str] = None
        self.total_items: int = 0
        self.processed_items: int = 0
        self.skipped_items: int = 0
        self.start_time: Optional[datetime] = None

    def start_operation(self, operation_name: str, total_items: int = 0) -> None:
        """Start tracking a new operation."""
        self.current_operation = operation_name
        self.total_items = total_items
        self.processed_items = 0
        self.skipped_items = 0
        self.start_time = datetime.now()

        self.logger.info(
            f"Exporting {total_items} {operation_name}",
            extra={'context': {
                'operation': operation_name,
                'total_items': total_items,
                'start_time': self.start_time.isoformat()
            }}
        )

    def update_progress(self, name: str, skipped: bool = False) -> None:
        """Record one processed item."""
        self.processed_items += 1
        if skipped:
            self.skipped_items += 1

        self.logger.debug(
            f"{self.current_operation}: {self.processed_items}/{self.total_items} {name}",
            extra={'context': {
                'operation': self.current_operation,
                'item': name,
                'processed': self.processed_items,
                'skipped': self.skipped_items,
                'total': self.total_items
            }}
        )

    def complete_operation(self) -> Dict[str, Any]:
        """Complete the current operation and return summary."""
        end_time = datetime.now()
        duration = (end_time - self.start_time).total_seconds() if self.start_time else 0

        summary = {
            'operation': self.current_operation,
            'total_items': self.total_items,
            'processed_items': self.processed_items,
            'skipped_items': self.skipped_items,
            'duration_seconds': duration,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': end_time.isoformat()
        }

        self.logger.info(
            f"Completed {self.current_operation}: {self.processed_items - self.skipped_items} exported, "
            f"{self.skipped_items} skipped",
            extra={'context': summary}
        )

        return summary


class LoggingService:
    """Appends structured run logs to the log file beside the output directory."""

    def __init__(self, config: ExportConfig):
        """
        Initialize the logging service.

        Args:
            config: Export configuration containing logging settings
        """
        self.config = config
        self.log_file_path = config.log_file_path
        self._file_handler: Optional[logging.Handler] = None
        self.logger = self._setup_logger()
        self.progress_tracker = ProgressTracker(self.logger)
        self.operation_history: List[Dict[str, Any]] = []

    def _setup_logger(self) -> logging.Logger:
        """Attach the append-only structured file handler to the package logger."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(getattr(logging, self.config.logging_level.upper()))

        log_path = Path(self.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        self._file_handler = logging.FileHandler(str(log_path), mode='a', encoding='utf-8')
        self._file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(self._file_handler)

        return logger

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log an info message with optional context."""
        self.logger.info(message, extra={'context': context or {}})

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log a warning message with optional context."""
        self.logger.warning(message, extra={'context': context or {}})

    def log_error(self, message: str, error: Optional[Exception] = None,
                  context: Optional[Dict[str, Any]] = None) -> None:
        """Log an error message with optional exception and context."""
        extra_context = context or {}
        if error:
            extra_context.update({
                'error_type': type(error).__name__,
                'error_message': str(error)
            })

        self.logger.error(message, extra={'context': extra_context})

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log a debug message with optional context."""
        self.logger.debug(message, extra={'context': context or {}})

    def start_export_operation(self, operation_name: str, total_items: int = 0) -> None:
        """Start tracking an export operation."""
        self.progress_tracker.start_operation(operation_name, total_items)

    def update_export_progress(self, name: str, skipped: bool = False) -> None:
        """Update export operation progress."""
        self.progress_tracker.update_progress(name, skipped)

    def complete_export_operation(self) -> Dict[str, Any]:
        """Complete the current export operation."""
        summary = self.progress_tracker.complete_operation()
        self.operation_history.append(summary)
        return summary

    def log_aws_api_call(self, service: str, operation: str, success: bool,
                         duration: float, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log AWS API call details; every remote call of a run goes through here.

        Args:
            service: AWS service name
            operation: API operation name
            success: Whether the call was successful
            duration: Call duration in seconds
            context: Additional context information (parameters, error text)
        """
        log_context = {
            'aws_service': service,
            'aws_operation': operation,
            'success': success,
            'duration_seconds': duration,
            'api_call': True
        }

        if context:
            log_context.update(context)

        message = f"AWS API call: {service}.{operation} ({'success' if success else 'failed'})"

        if success:
            self.log_info(message, log_context)
        else:
            self.log_error(message, context=log_context)

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance for direct use."""
        return self.logger

    def close(self) -> None:
        """Detach and close the file handler."""
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
