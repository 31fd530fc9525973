"""
Repository ingestion module for remote repositories.

Handles URL validation, shallow cloning, and workspace lifecycle.
"""

from repolens.ingestion.git_handler import GitHandler
from repolens.ingestion.workspace import RepositoryWorkspace
from repolens.ingestion.fetcher import RepositoryFetcher, fetch_repository

__all__ = [
    "GitHandler",
    "RepositoryWorkspace",
    "RepositoryFetcher",
    "fetch_repository",
]
