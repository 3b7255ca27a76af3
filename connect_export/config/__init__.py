"""
Configuration management for Amazon Connect export operations.
"""

from .manager import ConfigurationManager

__all__ = ["ConfigurationManager"]
