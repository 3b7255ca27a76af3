"""
Service exporting Amazon Connect resources to plain JSON files.
"""

import json
import logging
import time
from pathlib import Path
from typing import List, Dict, Any, Optional

from ..models.config import ExportConfig
from ..models.export_result import ExportResult, ItemOutcome, ItemStatus
from ..models.resources import InstanceRef, ResourceKind
from ..models.exceptions import (
    ConnectExportError,
    SetupError,
    TransportError,
    AWSCredentialsError
)
from .connect_client import ConnectClient
from .error_handler import ErrorHandler, RecoveryAction
from .filters import NameFilter, drop_excluded_types, filter_summaries
from .logging import LoggingService
from .paths import PathMapper


logger = logging.getLogger(__name__)


def write_json(path: Path, data: Any) -> None:
    """Write data as indented JSON, replacing any previous content."""
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str, ensure_ascii=False)
            f.write('\n')
    except OSError as e:
        raise ConnectExportError(f"Failed to write {path}: {str(e)}")


def read_json(path: Path) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConnectExportError(f"Failed to read {path}: {str(e)}")


class ResourceExportService:
    """List, filter, persist and describe each resource kind of one instance."""

    def __init__(self, config: ExportConfig, client: ConnectClient, paths: PathMapper,
                 error_handler: Optional[ErrorHandler] = None,
                 logging_service: Optional[LoggingService] = None):
        self.config = config
        self.client = client
        self.paths = paths
        self.error_handler = error_handler or ErrorHandler(skip_on_error=config.skip_on_error)
        self.logging_service = logging_service
        self.name_filter = NameFilter(
            include_prefix=config.flow_prefix,
            exclude_prefix=config.ignore_prefix
        )
        self.instance: Optional[InstanceRef] = None

    def export_instance(self) -> InstanceRef:
        """
        Resolve the instance alias and write instance.json and instance.var.

        Returns:
            InstanceRef: The resolved instance

        Raises:
            SetupError: If the alias does not match exactly one instance
            TransportError: If a call fails
        """
        alias = self.config.instance_alias
        instances = self.client.list_instances()
        matches = [i for i in instances if i.get('InstanceAlias') == alias]

        if not matches:
            raise SetupError(
                f"Instance alias '{alias}' not found",
                context={'alias': alias, 'instances_listed': len(instances)}
            )
        if len(matches) > 1:
            raise SetupError(
                f"Instance alias '{alias}' matches {len(matches)} instances",
                context={'alias': alias}
            )

        instance = InstanceRef.from_summary(matches[0], profile=self.config.aws_profile)
        detail = self.client.describe_instance(instance.id)
        if detail.get('Arn'):
            instance.arn = detail['Arn']

        write_json(self.paths.instance_path(), detail)
        self._write_variables(self.paths.instance_variables_path(), instance.to_variables())

        logger.info(f"Instance {instance.alias} resolved to {instance.id}",
                    extra={'context': {'instance_id': instance.id, 'arn': instance.arn}})
        self.instance = instance
        return instance

    def export_kind(self, kind: ResourceKind) -> ExportResult:
        """
        Run the summary stage and, where the kind has one, the detail stage.

        Args:
            kind: Resource kind to export

        Returns:
            ExportResult: Counts for the kind
        """
        start_time = time.time()
        result = ExportResult(resource_type=kind.name)

        manifest = self.export_summaries(kind, result)
        if kind.has_details:
            self.export_details(kind, manifest, result)
        else:
            result.items_exported = len(manifest)

        result.execution_time = time.time() - start_time
        return result

    def export_summaries(self, kind: ResourceKind, result: Optional[ExportResult] = None) -> List[Dict[str, Any]]:
        """
        List, filter, sort and persist the manifest of one kind.

        Args:
            kind: Resource kind to list
            result: Optional result receiving the count and filters

        Returns:
            List[Dict[str, Any]]: The persisted manifest

        Raises:
            TransportError: If the listing call fails; always fatal
        """
        instance = self._require_instance()
        summaries = self.client.list_summaries(kind, instance.id, self.config.page_size)
        summaries = drop_excluded_types(summaries, kind)

        kind_filter = self.name_filter.for_kind(kind)
        manifest = filter_summaries(summaries, kind_filter)

        write_json(self.paths.manifest_path(kind), manifest)

        filters_applied = kind_filter.describe()
        message = f"{len(manifest)} {kind.name} listed"
        if filters_applied:
            message += f" (filters: {', '.join(filters_applied)})"
        logger.info(message, extra={'context': {
            'kind': kind.name,
            'count': len(manifest),
            'filters': filters_applied
        }})

        if result is not None:
            result.items_listed = len(manifest)
            result.filters_applied = filters_applied
        return manifest

    def export_details(self, kind: ResourceKind, manifest: List[Dict[str, Any]],
                       result: Optional[ExportResult] = None) -> ExportResult:
        """
        Describe and persist every manifest entry, in manifest order.

        Failures of contact flows and modules are skipped under skip-on-error
        mode, removing the entry from the manifest; any other failure aborts
        the run.

        Args:
            kind: Resource kind of the manifest
            manifest: Summaries written by the summary stage
            result: Optional result to update

        Returns:
            ExportResult: The updated result

        Raises:
            ExportAbortedError: If a failure is not tolerated
        """
        if result is None:
            result = ExportResult(resource_type=kind.name, items_listed=len(manifest))

        manifest_path = self.paths.manifest_path(kind)
        self._start_progress(kind, len(manifest))

        for summary in manifest:
            name = summary.get('Name')
            resource_id = summary.get('Id', '')

            try:
                outcome = self.export_item(kind, summary)
            except (TransportError, AWSCredentialsError) as e:
                action = self.error_handler.resolve(kind, e, name, manifest_path)
                if action == RecoveryAction.FATAL:
                    raise self.error_handler.abort(kind, e, name) from e

                self.remove_from_manifest(manifest_path, name)
                logger.warning(
                    f"Skipped {kind.label} '{name}': {e}",
                    extra={'context': {'kind': kind.name, 'name': name, 'id': resource_id}}
                )
                outcome = ItemOutcome(name=name, resource_id=resource_id,
                                      status=ItemStatus.SKIPPED, error=e)

            result.add_outcome(outcome)
            self._update_progress(outcome)

        self._complete_progress()
        return result

    def export_item(self, kind: ResourceKind, summary: Dict[str, Any]) -> ItemOutcome:
        """
        Fetch every detail payload of one resource, then write them.

        Nothing is written unless all detail calls succeed.

        Args:
            kind: Resource kind
            summary: Manifest entry of the resource

        Returns:
            ItemOutcome: Exported outcome with the written paths

        Raises:
            TransportError: If a call fails
            ContentStateError: If the content is not published
        """
        instance = self._require_instance()
        name = summary.get('Name', '')
        resource_id = summary.get('Id', '')

        payloads = []
        for call in kind.detail_calls:
            payload = self.client.describe(call, instance.id, resource_id)
            if isinstance(payload, dict):
                self.error_handler.check_publication_status(kind, payload, name)
            payloads.append((call, payload))

        written = []
        for call, payload in payloads:
            path = self.paths.detail_path(call.file_prefix, name)
            write_json(path, payload)
            written.append(str(path))

        return ItemOutcome(name=name, resource_id=resource_id,
                           status=ItemStatus.EXPORTED, paths=written)

    def remove_from_manifest(self, manifest_path: Path, name: str) -> int:
        """
        Rewrite a manifest without the entries named ``name``.

        Args:
            manifest_path: Manifest file to rewrite
            name: Resource name to drop

        Returns:
            int: Number of entries removed
        """
        entries = read_json(manifest_path)
        kept = [entry for entry in entries if entry.get('Name') != name]
        write_json(manifest_path, kept)

        removed = len(entries) - len(kept)
        logger.debug(f"Removed {removed} '{name}' entries from {manifest_path.name}")
        return removed

    def _require_instance(self) -> InstanceRef:
        if self.instance is None:
            raise SetupError("Instance not resolved. Call export_instance() first.")
        return self.instance

    def _write_variables(self, path: Path, variables: Dict[str, str]) -> None:
        try:
            with open(path, 'w', encoding='utf-8') as f:
                for key, value in variables.items():
                    f.write(f"{key}={value}\n")
        except OSError as e:
            raise ConnectExportError(f"Failed to write {path}: {str(e)}")

    def _start_progress(self, kind: ResourceKind, total: int) -> None:
        if self.logging_service is not None:
            self.logging_service.start_export_operation(kind.name, total)

    def _update_progress(self, outcome: ItemOutcome) -> None:
        if self.logging_service is not None:
            self.logging_service.update_export_progress(
                outcome.name, skipped=outcome.status == ItemStatus.SKIPPED
            )

    def _complete_progress(self) -> None:
        if self.logging_service is not None:
            self.logging_service.complete_export_operation()
