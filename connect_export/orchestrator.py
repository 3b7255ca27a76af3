"""
Main export orchestrator for Amazon Connect export operations.
"""

import logging
import shutil
from datetime import datetime
from typing import List, Dict, Any, Optional
from pathlib import Path

from connect_export.config.manager import ConfigurationManager
from connect_export.models.config import ExportConfig
from connect_export.models.export_result import ExportResult, ExportReport, ExportStatus
from connect_export.models.resources import InstanceRef, ResourceKind, EXPORT_ORDER
from connect_export.services.connect_client import ConnectClient
from connect_export.services.error_handler import ErrorHandler
from connect_export.services.logging import LoggingService
from connect_export.services.paths import PathMapper
from connect_export.services.resource_export import ResourceExportService
from connect_export.models.exceptions import (
    ConnectExportError,
    SetupError
)


class ConnectExportOrchestrator:
    """Main orchestrator class that runs the export stages in dependency order."""

    def __init__(self, config: ExportConfig, connect_client: Any = None,
                 config_manager: Optional[ConfigurationManager] = None):
        """
        Initialize the export orchestrator.

        Args:
            config: Validated export configuration
            connect_client: Optional boto3 ``connect`` client; created from the
                configured profile and region when omitted
            config_manager: Optional manager used to create the client
        """
        self.config = config
        self.config_manager = config_manager or ConfigurationManager()
        self.logging_service: Optional[LoggingService] = None
        self.logger = logging.getLogger(__name__)

        self._boto_client = connect_client
        self.output_dir = Path(config.output_dir)

        # Services
        self.error_handler: Optional[ErrorHandler] = None
        self.export_service: Optional[ResourceExportService] = None

        # Results
        self.instance: Optional[InstanceRef] = None
        self.export_results: List[ExportResult] = []
        self.export_report: Optional[ExportReport] = None

    def initialize(self) -> bool:
        """
        Prepare logging, the output directory and the export services.

        Returns:
            bool: True if initialization successful

        Raises:
            SetupError: If the output directory exists and force is not set
            AWSCredentialsError: If the Connect client cannot be created
        """
        self.logging_service = LoggingService(self.config)
        self.logging_service.log_info("Initializing Amazon Connect export", {
            'instance_alias': self.config.instance_alias,
            'output_dir': str(self.output_dir),
            'aws_profile': self.config.aws_profile,
            'skip_on_error': self.config.skip_on_error
        })

        self._prepare_output_directory()

        if self._boto_client is None:
            self._boto_client = self.config_manager.get_connect_client(self.config)

        self.error_handler = ErrorHandler(skip_on_error=self.config.skip_on_error)
        client = ConnectClient(self._boto_client, self.error_handler, self.logging_service)
        self.export_service = ResourceExportService(
            self.config,
            client,
            PathMapper(self.output_dir),
            self.error_handler,
            self.logging_service
        )

        self.logger.info("Orchestrator initialization completed successfully")
        return True

    def _prepare_output_directory(self) -> None:
        """Refuse an existing output directory unless forced removal was requested."""
        if self.output_dir.exists():
            if not self.config.force:
                raise SetupError(
                    f"Output directory already exists: {self.output_dir}. Use --force to replace it.",
                    context={'output_dir': str(self.output_dir)}
                )
            self.logger.info(f"Removing existing output directory {self.output_dir}")
            try:
                if self.output_dir.is_dir():
                    shutil.rmtree(self.output_dir)
                else:
                    self.output_dir.unlink()
            except OSError as e:
                raise SetupError(f"Failed to remove {self.output_dir}: {str(e)}")

        try:
            self.output_dir.mkdir(parents=True)
        except OSError as e:
            raise SetupError(f"Failed to create {self.output_dir}: {str(e)}")

    def execute_export(self) -> ExportReport:
        """
        Run the instance stage and then every resource kind in order.

        Returns:
            ExportReport: Report of the run

        Raises:
            ConnectExportError: On any fatal condition; later stages are not run
        """
        if self.export_service is None:
            raise ConnectExportError("Orchestrator not initialized. Call initialize() first.")

        self.export_results = []
        self.export_report = ExportReport(
            instance_alias=self.config.instance_alias,
            start_time=datetime.now()
        )

        try:
            self.logger.info(f"Exporting instance '{self.config.instance_alias}' to {self.output_dir}")
            self.instance = self.export_service.export_instance()

            for kind in EXPORT_ORDER:
                result = self._execute_kind_export(kind)
                self.export_results.append(result)
                self.export_report.add_result(result)

        except ConnectExportError as e:
            self.logging_service.log_error("Export aborted", e, {
                'instance_alias': self.config.instance_alias
            })
            raise

        finally:
            self.export_report.end_time = datetime.now()

        self.logging_service.log_info("Export completed", {
            'total_execution_time': self.export_report.total_execution_time,
            'items_exported': self.export_report.total_exported,
            'items_skipped': self.export_report.total_skipped
        })

        return self.export_report

    def _execute_kind_export(self, kind: ResourceKind) -> ExportResult:
        """
        Export one resource kind, recording a failed result before re-raising.

        Args:
            kind: Resource kind to export

        Returns:
            ExportResult: Result of the kind
        """
        try:
            result = self.export_service.export_kind(kind)
        except ConnectExportError as e:
            failed = ExportResult(resource_type=kind.name)
            failed.add_error(str(e))
            self.export_results.append(failed)
            self.export_report.add_result(failed)
            raise

        if result.items_skipped:
            self.logger.warning(
                f"{result.items_skipped} {kind.name} skipped: {', '.join(result.skipped_names)}"
            )
        return result

    def generate_export_report_summary(self) -> str:
        """
        Generate a human-readable export report summary.

        Returns:
            str: Formatted export report summary
        """
        if not self.export_report:
            raise ConnectExportError("No export report available. Execute export first.")

        report_lines = [
            "=" * 60,
            "Amazon Connect Export Summary",
            "=" * 60,
            f"Instance: {self.config.instance_alias}"
            + (f" ({self.instance.id})" if self.instance else ""),
            f"Output Directory: {self.output_dir}",
            f"Log File: {self.config.log_file_path}",
            f"Total Execution Time: {self.export_report.total_execution_time:.2f} seconds",
            "",
        ]

        for result in self.export_report.results:
            status_symbol = "✓" if result.status == ExportStatus.SUCCESS else "✗" if result.status == ExportStatus.FAILED else "⚠"
            line = f"{status_symbol} {result.resource_type}: {result.items_exported} exported"
            if result.items_skipped:
                line += f", {result.items_skipped} skipped"
            report_lines.append(line)

            if result.filters_applied:
                report_lines.append(f"    Filters: {', '.join(result.filters_applied)}")
            for name in result.skipped_names:
                report_lines.append(f"    Skipped: {name}")

        report_lines.extend(["", "=" * 60])
        return "\n".join(report_lines)

    def get_export_statistics(self) -> Dict[str, Any]:
        """
        Get export statistics per resource kind.

        Returns:
            Dict[str, Any]: Export statistics
        """
        if not self.export_report:
            raise ConnectExportError("No export report available. Execute export first.")

        return {
            'instance_alias': self.config.instance_alias,
            'total_execution_time': self.export_report.total_execution_time,
            'items_exported': self.export_report.total_exported,
            'items_skipped': self.export_report.total_skipped,
            'resource_breakdown': {
                result.resource_type: {
                    'status': result.status.value,
                    'items_listed': result.items_listed,
                    'items_exported': result.items_exported,
                    'items_skipped': result.items_skipped
                }
                for result in self.export_report.results
            }
        }

    def close(self) -> None:
        """Release the run log file."""
        if self.logging_service is not None:
            self.logging_service.close()
