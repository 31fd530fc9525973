"""
README location, parsing and structural statistics.
"""

from repolens.document.tree import DocumentNode, DocumentTree
from repolens.document.parser import MarkdownParser, parse_markdown
from repolens.document.locator import ReadmeDocument, ReadmeLocator, locate_readme
from repolens.document.stats import ReadmeStats, compute_readme_stats
from repolens.document.extractor import DocumentExtractor

__all__ = [
    "DocumentNode",
    "DocumentTree",
    "MarkdownParser",
    "parse_markdown",
    "ReadmeDocument",
    "ReadmeLocator",
    "locate_readme",
    "ReadmeStats",
    "compute_readme_stats",
    "DocumentExtractor",
]
