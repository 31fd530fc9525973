"""
Utility functions and helpers.

Provides common utilities used across the codebase.
"""

from repolens.utils.logging_config import setup_logging, get_logger
from repolens.utils.validation import validate_path, validate_url

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_path",
    "validate_url",
]
