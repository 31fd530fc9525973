"""
Output formatting for acquisition results.
"""

from repolens.reporting.formatter import (
    ReportFormatter,
    JSONFormatter,
    TextFormatter,
    format_result,
)

__all__ = [
    "ReportFormatter",
    "JSONFormatter",
    "TextFormatter",
    "format_result",
]
