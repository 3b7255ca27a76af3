"""
Configuration management for Amazon Connect export operations.
"""

import argparse
import json
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound, NoCredentialsError

from ..models.config import ExportConfig
from ..models.exceptions import ConfigurationError, AWSCredentialsError, UsageError


class ConfigurationManager:
    """Manages configuration loading, validation, and AWS client initialization."""

    def __init__(self):
        self._config: Optional[ExportConfig] = None
        self._aws_session: Optional[boto3.Session] = None

    def load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load optional settings from a YAML or JSON file.

        Args:
            config_path: Path to configuration file

        Returns:
            Dict[str, Any]: Flattened settings matching ExportConfig fields

        Raises:
            ConfigurationError: If the file cannot be loaded
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() in ['.yaml', '.yml']:
                    config_data = yaml.safe_load(f)
                elif config_file.suffix.lower() == '.json':
                    config_data = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported configuration file format: {config_file.suffix}. "
                        "Supported formats: .yaml, .yml, .json"
                    )
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parsing error: {str(e)}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"JSON parsing error: {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {str(e)}")

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        return self._flatten_config(config_data)

    def _flatten_config(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten nested configuration dictionary to match ExportConfig fields.

        Args:
            config_data: Nested configuration dictionary

        Returns:
            Dict[str, Any]: Flattened configuration dictionary
        """
        flat_config = {}

        # AWS settings
        aws_config = config_data.get('aws') or {}
        flat_config['aws_profile'] = aws_config.get('profile')
        flat_config['aws_region'] = aws_config.get('region')

        # Export options
        export_config = config_data.get('export') or {}
        flat_config['flow_prefix'] = export_config.get('flow_prefix')
        flat_config['ignore_prefix'] = export_config.get('ignore_prefix')
        flat_config['skip_on_error'] = export_config.get('skip_on_error')
        flat_config['page_size'] = export_config.get('page_size')

        # Logging settings
        logging_config = config_data.get('logging') or {}
        flat_config['logging_level'] = logging_config.get('level')
        flat_config['logging_file_path'] = logging_config.get('file_path')

        # Remove None values
        return {k: v for k, v in flat_config.items() if v is not None}

    def build_config(self, args: argparse.Namespace) -> ExportConfig:
        """
        Build the run configuration from the config file and CLI arguments.

        Command line values take precedence over the configuration file.

        Args:
            args: Parsed command line arguments

        Returns:
            ExportConfig: Validated configuration

        Raises:
            UsageError: If no instance alias can be derived from the arguments
            ConfigurationError: If the configuration is invalid
        """
        settings: Dict[str, Any] = {}
        if getattr(args, 'config', None):
            settings.update(self.load_config_file(args.config))

        output_dir = os.path.normpath(args.instance or '')
        instance_alias = os.path.basename(output_dir)
        if not instance_alias or instance_alias in (os.curdir, os.pardir):
            raise UsageError(f"Cannot derive an instance alias from '{args.instance}'")
        settings['output_dir'] = output_dir
        settings['instance_alias'] = instance_alias

        overrides = {
            'aws_profile': getattr(args, 'profile', None),
            'aws_region': getattr(args, 'region', None),
            'flow_prefix': getattr(args, 'flow_prefix', None),
            'ignore_prefix': getattr(args, 'ignore_prefix', None)
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})

        if getattr(args, 'skip_on_error', False):
            settings['skip_on_error'] = True
        if getattr(args, 'force', False):
            settings['force'] = True
        if getattr(args, 'verbose', False):
            settings['logging_level'] = 'DEBUG'

        try:
            self._config = ExportConfig(**settings)
        except TypeError as e:
            raise ConfigurationError(f"Configuration structure error: {str(e)}")

        self.validate_config(self._config)
        return self._config

    def validate_config(self, config: ExportConfig) -> bool:
        """
        Validate configuration settings.

        Args:
            config: Configuration to validate

        Returns:
            bool: True if valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        validation_errors = config.validate()
        if validation_errors:
            raise ConfigurationError(
                f"Configuration validation failed:\n" +
                "\n".join(f"- {error}" for error in validation_errors)
            )
        return True

    def create_aws_session(self, config: Optional[ExportConfig] = None) -> boto3.Session:
        """
        Create AWS session for the configured profile and region.

        Args:
            config: Configuration to use (uses loaded config if None)

        Returns:
            boto3.Session: Configured AWS session

        Raises:
            ConfigurationError: If configuration is not loaded
            AWSCredentialsError: If session creation fails
        """
        if config is None:
            if self._config is None:
                raise ConfigurationError("No configuration loaded")
            config = self._config

        session_kwargs = {}
        if config.aws_profile:
            session_kwargs['profile_name'] = config.aws_profile
        if config.aws_region:
            session_kwargs['region_name'] = config.aws_region

        try:
            self._aws_session = boto3.Session(**session_kwargs)
            return self._aws_session

        except ProfileNotFound as e:
            raise AWSCredentialsError(f"AWS profile not found: {str(e)}")
        except NoCredentialsError as e:
            raise AWSCredentialsError(f"AWS credentials not found: {str(e)}")
        except BotoCoreError as e:
            raise AWSCredentialsError(f"Failed to create AWS session: {str(e)}")

    def get_connect_client(self, config: Optional[ExportConfig] = None):
        """
        Get configured Amazon Connect client.

        Args:
            config: Configuration to use (uses loaded config if None)

        Returns:
            boto3.client: Connect client
        """
        session = self.create_aws_session(config)
        try:
            return session.client('connect')
        except BotoCoreError as e:
            raise AWSCredentialsError(f"Failed to create Connect client: {str(e)}")

    @property
    def config(self) -> Optional[ExportConfig]:
        """Get the currently loaded configuration."""
        return self._config

