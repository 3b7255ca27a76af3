"""
Command-line interface for the Amazon Connect Export Tool.
"""

import argparse
import logging
import re
import sys
from typing import List, Optional

from . import __version__
from .config.manager import ConfigurationManager
from .orchestrator import ConnectExportOrchestrator
from .services.error_handler import ErrorHandler
from .models.exceptions import (
    ConfigurationError,
    AWSCredentialsError,
    SetupError,
    UsageError,
    TransportError,
    ExportAbortedError,
    ConnectExportError
)


def setup_logging(verbose: bool = False) -> None:
    """
    Setup console logging based on verbosity level.

    The run log file is attached later by the logging service.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = '%(asctime)s - %(levelname)s - %(message)s'

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S'))

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True
    )


def name_prefix(value: str) -> str:
    """
    Validate a name prefix given on the command line.

    Args:
        value: Prefix, a regular expression fragment anchored at the start of names

    Returns:
        str: The prefix unchanged

    Raises:
        argparse.ArgumentTypeError: If the prefix is empty or not a valid regular expression
    """
    if not value:
        raise argparse.ArgumentTypeError("Name prefix must not be empty")
    try:
        re.compile(value)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"Invalid name prefix '{value}': {e}")
    return value


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog='connect-export',
        description='Amazon Connect Export Tool - Save the configuration of an Amazon Connect instance to JSON files',
        epilog='''
Examples:
  %(prog)s my-instance
  %(prog)s my-instance prod-profile
  %(prog)s backups/my-instance prod-profile Sales -e
  %(prog)s my-instance -f -g "Test|Temp"
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Positional arguments
    parser.add_argument(
        'instance',
        help='Instance alias, or output path whose last component is the instance alias'
    )

    parser.add_argument(
        'profile',
        nargs='?',
        help='AWS credential profile (default credential chain if omitted)'
    )

    parser.add_argument(
        'flow_prefix',
        nargs='?',
        type=name_prefix,
        help='Only export contact flows and modules whose names start with this prefix '
             '(names starting with "Default " are always exported)'
    )

    # Export options
    parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Remove an existing output directory before exporting'
    )

    parser.add_argument(
        '--skip-on-error', '-e',
        action='store_true',
        help='Skip unpublished or failing contact flows and modules instead of aborting'
    )

    parser.add_argument(
        '--ignore-prefix', '-g',
        type=name_prefix,
        help='Do not export hours, queues, routing profiles, modules or flows whose names start with this prefix'
    )

    # Configuration options
    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Optional configuration file (YAML or JSON format)'
    )

    parser.add_argument(
        '--region', '-r',
        type=str,
        help='AWS region of the instance (profile or environment default if omitted)'
    )

    # Logging options
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (DEBUG) logging'
    )

    # Version
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def print_remediation(error: Exception) -> None:
    """Print suggested remediation steps for an error to stderr."""
    for step in ErrorHandler().get_error_remediation_steps(error):
        print(f"  - {step}", file=sys.stderr)


def execute_export(args: argparse.Namespace,
                   config_manager: Optional[ConfigurationManager] = None) -> int:
    """
    Execute the export based on CLI arguments.

    Args:
        args: Parsed command line arguments
        config_manager: Optional configuration manager

    Returns:
        int: Exit code (0 for success, 1 for a fatal condition, 2 for usage errors)
    """
    logger = logging.getLogger(__name__)
    config_manager = config_manager or ConfigurationManager()
    orchestrator: Optional[ConnectExportOrchestrator] = None

    try:
        config = config_manager.build_config(args)
        logger.debug(f"Export configuration: {config}")

        orchestrator = ConnectExportOrchestrator(config, config_manager=config_manager)
        orchestrator.initialize()
        orchestrator.execute_export()

        print(orchestrator.generate_export_report_summary())
        if orchestrator.export_report.has_skips:
            print("⚠ Some contact flows or modules were skipped and removed from their manifests")
        return 0

    except UsageError as e:
        logger.error(f"Usage error: {e}")
        print(f"Usage Error: {e}", file=sys.stderr)
        return 2

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration Error: {e}", file=sys.stderr)
        print("Please check your configuration file and arguments and try again.", file=sys.stderr)
        return 1

    except SetupError as e:
        logger.error(f"Setup error: {e}")
        print(f"Setup Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except AWSCredentialsError as e:
        logger.error(f"AWS credentials error: {e}")
        print(f"AWS Credentials Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except ExportAbortedError as e:
        logger.error(f"Export aborted: {e}")
        print(f"Export Aborted: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except TransportError as e:
        logger.error(f"Amazon Connect API error: {e}")
        print(f"Amazon Connect API Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except ConnectExportError as e:
        logger.error(f"Export error: {e}")
        print(f"Export Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        logger.warning("Export interrupted by user")
        print("\nExport interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"Unexpected Error: {e}", file=sys.stderr)
        print("Please check the logs for more details.", file=sys.stderr)
        return 1

    finally:
        if orchestrator is not None:
            orchestrator.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        int: Exit code
    """
    parser = create_argument_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code

    setup_logging(verbose=args.verbose)

    return execute_export(args)


if __name__ == '__main__':
    sys.exit(main())
