"""
Command-line interface for the Amazon Connect Export Tool.

This script provides a direct entry point for the Amazon Connect Export Tool.
It delegates to the main CLI module in the package.
"""

import sys
from connect_export.cli import main

if __name__ == '__main__':
    sys.exit(main())
