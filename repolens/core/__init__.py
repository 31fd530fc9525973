"""
Core module containing pipeline orchestration, configuration, and base classes.
"""

from repolens.core.config import Config, PipelineConfig, FetchConfig, DocumentConfig
from repolens.core.pipeline import Pipeline, PipelineStage, PipelineState
from repolens.core.exceptions import (
    PipelineError,
    FetchError,
    WorkspaceError,
    DocumentError,
    ConfigurationError,
    InvalidRepositoryURLError,
)

__all__ = [
    "Config",
    "PipelineConfig",
    "FetchConfig",
    "DocumentConfig",
    "Pipeline",
    "PipelineStage",
    "PipelineState",
    "PipelineError",
    "FetchError",
    "WorkspaceError",
    "DocumentError",
    "ConfigurationError",
    "InvalidRepositoryURLError",
]
