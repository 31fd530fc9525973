"""
Repository fetch pipeline stage.

Clones the remote repository into the invocation's workspace and
records basic facts about the fetched working tree.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from repolens.core.config import PipelineConfig, Config
from repolens.core.pipeline import PipelineStage, PipelineState
from repolens.ingestion.git_handler import GitHandler

logger = logging.getLogger(__name__)


class RepositoryFetcher(PipelineStage):
    """
    Pipeline stage for repository fetching.

    Performs a single shallow clone attempt; failures propagate as
    FetchError.
    """

    def __init__(self, config: PipelineConfig, git_handler: GitHandler = None):
        super().__init__(config)
        self.git_handler = git_handler or GitHandler(config.fetch)

    @property
    def name(self) -> str:
        return "fetch"

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Clone ``state.repository_url`` into ``state.workspace_path``.

        Returns:
            Tuple of (output_data, metrics).
        """
        repo_path = self.git_handler.clone_repository(
            state.repository_url, state.workspace_path
        )

        info = self.git_handler.get_repository_info(repo_path)
        file_count, total_size = self.git_handler.count_files(repo_path)

        self.logger.info(
            f"Fetched {file_count} files "
            f"({total_size / 1024:.1f} KB) at {info.get('commit_hash') or 'unknown commit'}"
        )

        output = {"path": repo_path, "info": info}
        metrics = {
            "files_fetched": file_count,
            "total_size_bytes": total_size,
            "commit_hash": info.get("commit_hash"),
        }
        return output, metrics


def fetch_repository(
    url: str,
    destination: Union[str, Path],
    config: PipelineConfig = None,
) -> Path:
    """
    Convenience function to fetch a single repository.

    The caller owns ``destination`` and must remove it, including after
    a failure.

    Args:
        url: Remote repository URL.
        destination: Directory to clone into.
        config: Optional pipeline configuration.

    Returns:
        Path to the cloned working tree.

    Raises:
        FetchError: If the clone fails.
    """
    if config is None:
        config = Config.get()

    handler = GitHandler(config.fetch)
    return handler.clone_repository(url, Path(destination))
