"""
Scoped local workspaces for fetched repositories.

A workspace is acquired (cleared and created) before a fetch and
released (recursively deleted) on every exit path of the calling scope.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from repolens.core.config import PipelineConfig, Config
from repolens.core.exceptions import WorkspaceError

logger = logging.getLogger(__name__)


class RepositoryWorkspace:
    """
    Context manager owning one workspace directory.

    With an explicit path, any existing directory at that path is removed
    on acquisition. Without one, a fresh temporary directory is created
    under ``config.work_dir`` (or the system temp dir).

    Usage:
        with RepositoryWorkspace() as workspace:
            fetch_repository(url, workspace.path)
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: PipelineConfig = None,
    ):
        self.config = config or Config.get()
        self._requested_path = Path(path) if path is not None else None
        self.path: Optional[Path] = None
        self.released = False

    def acquire(self) -> Path:
        """
        Create the workspace directory.

        Returns:
            Path to the empty workspace.

        Raises:
            WorkspaceError: If the directory cannot be cleared or created.
        """
        try:
            if self._requested_path is None:
                parent = None
                if self.config.work_dir:
                    parent = Path(self.config.work_dir)
                    parent.mkdir(parents=True, exist_ok=True)
                self.path = Path(
                    tempfile.mkdtemp(prefix=self.config.workspace_prefix, dir=parent)
                )
            else:
                self.path = self._requested_path
                if self.path.exists():
                    logger.info(f"Clearing existing workspace: {self.path}")
                    if self.path.is_dir():
                        shutil.rmtree(self.path)
                    else:
                        self.path.unlink()
                self.path.mkdir(parents=True)
        except OSError as e:
            raise WorkspaceError(
                f"Could not prepare workspace: {e}",
                details={"path": str(self._requested_path or self.config.work_dir)},
            ) from e

        self.released = False
        logger.debug(f"Workspace acquired: {self.path}")
        return self.path

    def release(self) -> bool:
        """
        Delete the workspace directory.

        Failures are logged and never raised.

        Returns:
            True if nothing is left on disk.
        """
        if self.path is None:
            return True

        if not self.path.exists():
            self.released = True
            return True

        try:
            shutil.rmtree(self.path)
        except OSError as e:
            logger.warning(f"Failed to clean up workspace {self.path}: {e}")
            return False

        self.released = True
        logger.debug(f"Cleaned up workspace: {self.path}")
        return True

    def __enter__(self) -> "RepositoryWorkspace":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        return f"RepositoryWorkspace(path={self.path!r}, released={self.released})"
