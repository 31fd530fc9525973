"""
Main engine for repository acquisition.

Provides a high-level interface that fetches a repository into a scoped
workspace, extracts its README and hands the results to metric
analyzers before the workspace is removed.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from repolens.core.config import Config, PipelineConfig
from repolens.core.pipeline import Pipeline, PipelineState
from repolens.document.extractor import DocumentExtractor
from repolens.document.locator import ReadmeDocument
from repolens.document.stats import ReadmeStats
from repolens.document.tree import DocumentTree
from repolens.ingestion.fetcher import RepositoryFetcher
from repolens.ingestion.git_handler import GitHandler
from repolens.ingestion.workspace import RepositoryWorkspace
from repolens.metrics import MetricResults, MetricSuite

logger = logging.getLogger(__name__)


@dataclass
class AcquisitionResult:
    """Everything extracted from one repository."""

    pipeline_id: str
    repository_url: str
    workspace_path: Path
    readme: Optional[ReadmeDocument] = None
    tree: Optional[DocumentTree] = None
    stats: Optional[ReadmeStats] = None
    repository_info: Dict[str, Any] = field(default_factory=dict)
    stage_metrics: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    metrics: Optional[MetricResults] = None
    workspace_removed: bool = False

    @property
    def readme_text(self) -> Optional[str]:
        return self.readme.text if self.readme is not None else None

    def to_dict(self, include_tree: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "pipeline_id": self.pipeline_id,
            "repository_url": self.repository_url,
            "workspace_path": str(self.workspace_path),
            "workspace_removed": self.workspace_removed,
            "repository_info": self.repository_info,
            "readme": self.readme.to_dict() if self.readme else None,
            "stats": self.stats.to_dict() if self.stats else None,
            "stages": self.stage_metrics,
            "metrics": self.metrics.to_dict() if self.metrics else None,
        }
        if include_tree:
            data["tree"] = self.tree.to_dict() if self.tree else None
        return data


class RepositoryDocumentEngine:
    """
    Orchestrates fetch and document extraction for single repositories.

    Each call owns its workspace: it is created before the fetch and
    deleted on every exit path, including fetch failures.
    """

    def __init__(self, config: PipelineConfig = None, git_handler: GitHandler = None):
        self.config = config or Config.get()
        self.git_handler = git_handler
        self.pipeline = self._create_pipeline()

    def _create_pipeline(self) -> Pipeline:
        """Create and configure the acquisition pipeline."""
        pipeline = Pipeline(self.config)

        pipeline.register_stage(RepositoryFetcher(self.config, self.git_handler))
        pipeline.register_stage(DocumentExtractor(self.config))

        pipeline.set_execution_order([
            "fetch",
            "document",
        ])

        return pipeline

    @contextmanager
    def open_repository(
        self,
        repository_url: str,
        workspace_path: Optional[Union[str, Path]] = None,
    ) -> Iterator[AcquisitionResult]:
        """
        Acquire a repository for the duration of a with-block.

        The working tree at ``result.workspace_path`` exists only inside
        the block.

        Args:
            repository_url: Remote repository URL.
            workspace_path: Exclusive workspace path; a temporary one is
                created when omitted.

        Yields:
            AcquisitionResult for the fetched repository.

        Raises:
            FetchError: If the repository cannot be fetched.
            WorkspaceError: If the workspace cannot be created.
        """
        workspace = RepositoryWorkspace(workspace_path, self.config)
        result = None

        try:
            workspace.acquire()
            state = self.pipeline.create_state(repository_url, workspace.path)
            self.pipeline.run(repository_url, workspace.path, state=state)
            result = self._build_result(state)
            yield result
        finally:
            removed = workspace.release()
            if result is not None:
                result.workspace_removed = removed

    def inspect(
        self,
        repository_url: str,
        workspace_path: Optional[Union[str, Path]] = None,
        metric_suite: Optional[MetricSuite] = None,
    ) -> AcquisitionResult:
        """
        Fetch a repository, extract its README and run metric analyzers.

        Args:
            repository_url: Remote repository URL.
            workspace_path: Optional exclusive workspace path.
            metric_suite: Optional analyzers to run while the working
                tree still exists.

        Returns:
            AcquisitionResult; the workspace has been removed by the
            time it is returned.
        """
        logger.info(f"Inspecting repository: {repository_url}")

        with self.open_repository(repository_url, workspace_path) as result:
            if metric_suite is not None:
                result.metrics = metric_suite.run(
                    repository_url,
                    result.workspace_path,
                    result.readme_text,
                    result.stats,
                )

        return result

    @staticmethod
    def _build_result(state: PipelineState) -> AcquisitionResult:
        fetched = state.data.get("fetch", {})
        document = state.data.get("document", {})

        return AcquisitionResult(
            pipeline_id=state.pipeline_id,
            repository_url=state.repository_url,
            workspace_path=state.workspace_path,
            readme=document.get("readme"),
            tree=document.get("tree"),
            stats=document.get("stats"),
            repository_info=fetched.get("info", {}),
            stage_metrics={
                name: stage_result.metrics
                for name, stage_result in state.stage_results.items()
            },
        )


def inspect_repository(
    repository_url: str,
    workspace_path: Optional[Union[str, Path]] = None,
    config: PipelineConfig = None,
    metric_suite: Optional[MetricSuite] = None,
) -> AcquisitionResult:
    """
    Convenience function to inspect a single repository.

    Args:
        repository_url: Remote repository URL.
        workspace_path: Optional exclusive workspace path.
        config: Optional configuration.
        metric_suite: Optional metric analyzers.

    Returns:
        AcquisitionResult for the repository.
    """
    engine = RepositoryDocumentEngine(config)
    return engine.inspect(repository_url, workspace_path, metric_suite)
