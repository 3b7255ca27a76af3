"""
Configuration data models for Amazon Connect export operations.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List
import re

from .resources import DEFAULT_PAGE_SIZE


VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ExportConfig:
    """Configuration settings for one Amazon Connect export run."""

    # No default values
    instance_alias: str
    output_dir: str

    # AWS Configuration
    aws_profile: Optional[str] = None
    aws_region: Optional[str] = None

    # Export Options
    flow_prefix: Optional[str] = None
    ignore_prefix: Optional[str] = None
    skip_on_error: bool = False
    force: bool = False
    page_size: int = DEFAULT_PAGE_SIZE

    # Logging Configuration
    logging_level: str = "INFO"
    logging_file_path: Optional[str] = None

    @property
    def log_file_path(self) -> str:
        """Log file path, defaulting to a sibling of the output directory."""
        if self.logging_file_path:
            return self.logging_file_path
        return str(Path(self.output_dir).with_name(Path(self.output_dir).name + '.log'))

    def validate(self) -> List[str]:
        """
        Validate configuration settings and return list of validation errors.

        Returns:
            List[str]: List of validation error messages. Empty if valid.
        """
        errors = []

        errors.extend(self._validate_instance_settings())
        errors.extend(self._validate_aws_settings())
        errors.extend(self._validate_export_options())
        errors.extend(self._validate_logging_settings())

        return errors

    def _validate_instance_settings(self) -> List[str]:
        """Validate instance alias and output directory."""
        errors = []

        if not self.instance_alias:
            errors.append("Instance alias is required")
        elif not re.match(r'^[a-zA-Z0-9][a-zA-Z0-9_.-]*$', self.instance_alias):
            errors.append(f"Instance alias '{self.instance_alias}' contains invalid characters")

        if not self.output_dir:
            errors.append("Output directory is required")

        return errors

    def _validate_aws_settings(self) -> List[str]:
        """Validate AWS configuration settings."""
        errors = []

        if self.aws_region and not re.match(r'^[a-z0-9-]+$', self.aws_region):
            errors.append("AWS region format is invalid")

        if self.aws_profile is not None and not self.aws_profile.strip():
            errors.append("AWS profile must not be empty")

        return errors

    def _validate_export_options(self) -> List[str]:
        """Validate export option settings."""
        errors = []

        if not isinstance(self.page_size, int) or isinstance(self.page_size, bool):
            errors.append("page_size must be an integer")
        elif not (1 <= self.page_size <= DEFAULT_PAGE_SIZE):
            errors.append(f"page_size must be between 1 and {DEFAULT_PAGE_SIZE} inclusive")

        for option, value in (('flow_prefix', self.flow_prefix), ('ignore_prefix', self.ignore_prefix)):
            if value is None:
                continue
            if not value:
                errors.append(f"{option} must not be empty")
                continue
            try:
                re.compile(value)
            except re.error as e:
                errors.append(f"{option} is not a valid regular expression: {e}")

        return errors

    def _validate_logging_settings(self) -> List[str]:
        """Validate logging configuration settings."""
        errors = []

        if self.logging_level not in VALID_LOGGING_LEVELS:
            errors.append(f"Logging level must be one of: {', '.join(VALID_LOGGING_LEVELS)}")

        return errors
