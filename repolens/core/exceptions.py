"""
Custom exceptions for repolens.

Provides a hierarchy of exceptions for the acquisition pipeline stages,
enabling precise error handling and clear failure reporting.
"""


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class FetchError(PipelineError):
    """Raised when a repository cannot be fetched."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Fetch", details=details)


class WorkspaceError(PipelineError):
    """Raised when a local workspace cannot be prepared."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Workspace", details=details)


class DocumentError(PipelineError):
    """Raised when the document stage cannot run."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Document", details=details)


class ConfigurationError(PipelineError):
    """Raised when configuration values are missing or invalid."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Config", details=details)


class InvalidRepositoryURLError(FetchError):
    """Raised when a repository URL is malformed."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Invalid repository URL: {reason}",
            details={"url": url, "reason": reason}
        )
