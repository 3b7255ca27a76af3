"""
Data models for export operation results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any
from enum import Enum


class ExportStatus(Enum):
    """Status enumeration for export operations."""
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    IN_PROGRESS = "in_progress"


class ItemStatus(Enum):
    """Outcome of exporting a single resource."""
    EXPORTED = "exported"
    SKIPPED = "skipped"


@dataclass
class ItemOutcome:
    """Result of the detail stage for one manifest entry."""

    name: str
    resource_id: str
    status: ItemStatus
    paths: List[str] = field(default_factory=list)
    error: Optional[Exception] = None


@dataclass
class ExportResult:
    """Result of an export operation for a specific resource kind."""

    resource_type: str
    success: bool = True
    items_listed: int = 0
    items_exported: int = 0
    items_skipped: int = 0
    filters_applied: List[str] = field(default_factory=list)
    skipped_names: List[str] = field(default_factory=list)
    error_messages: List[str] = field(default_factory=list)
    execution_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
    status: ExportStatus = ExportStatus.SUCCESS
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_outcome(self, outcome: ItemOutcome) -> None:
        """Record the outcome of one item."""
        if outcome.status == ItemStatus.EXPORTED:
            self.items_exported += 1
            return

        self.items_skipped += 1
        self.skipped_names.append(outcome.name)
        if outcome.error is not None:
            self.error_messages.append(f"{outcome.name}: {outcome.error}")
        self.status = ExportStatus.PARTIAL

    def add_error(self, error_message: str) -> None:
        """Add a fatal error message to the result."""
        self.error_messages.append(error_message)
        self.status = ExportStatus.FAILED
        self.success = False


@dataclass
class ExportReport:
    """Report of all export operations of one run."""

    instance_alias: str
    start_time: datetime
    end_time: Optional[datetime] = None
    results: List[ExportResult] = field(default_factory=list)

    @property
    def total_exported(self) -> int:
        return sum(r.items_exported for r in self.results)

    @property
    def total_skipped(self) -> int:
        return sum(r.items_skipped for r in self.results)

    @property
    def total_execution_time(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def has_skips(self) -> bool:
        return any(r.status == ExportStatus.PARTIAL for r in self.results)

    def add_result(self, result: ExportResult) -> None:
        """Add an export result to the report."""
        self.results.append(result)

    def get_result(self, resource_type: str) -> Optional[ExportResult]:
        """Look up the result of one resource kind."""
        for result in self.results:
            if result.resource_type == resource_type:
                return result
        return None
