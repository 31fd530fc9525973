"""
Git operations handler for repository fetching.

Provides shallow, single-branch cloning plus a few read-only queries
against the resulting working tree.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from repolens.core.config import FetchConfig
from repolens.core.exceptions import FetchError, InvalidRepositoryURLError
from repolens.utils.validation import validate_url

logger = logging.getLogger(__name__)


class GitHandler:
    """
    Handles Git operations for repository fetching.

    Every clone is shallow and limited to the remote's default branch.
    """

    def __init__(self, config: FetchConfig):
        self.config = config
        self._git_available = self._check_git_available()

    def _check_git_available(self) -> bool:
        """Check if git is available on the system."""
        try:
            result = subprocess.run(
                [self.config.git_executable, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    @property
    def git_available(self) -> bool:
        return self._git_available

    def _git_env(self) -> Dict[str, str]:
        # Fail on missing credentials instead of waiting for a prompt
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        return env

    def build_clone_command(self, url: str, destination: Path) -> List[str]:
        """Build the git command line for a shallow clone."""
        cmd = [self.config.git_executable, "clone", "--depth", str(self.config.clone_depth)]

        if self.config.single_branch:
            cmd.append("--single-branch")

        if not self.config.fetch_tags:
            cmd.append("--no-tags")

        cmd.extend(["--", url, str(destination)])
        return cmd

    def clone_repository(self, url: str, destination: Path) -> Path:
        """
        Clone a Git repository into a local directory.

        Args:
            url: Remote repository URL.
            destination: Directory to clone into. Existing content is removed.

        Returns:
            Path to the cloned working tree.

        Raises:
            InvalidRepositoryURLError: If the URL is malformed.
            FetchError: If git is missing, the destination cannot be
                prepared, or the clone fails or times out.
        """
        is_valid, error = validate_url(url)
        if not is_valid:
            raise InvalidRepositoryURLError(url, error)

        if not self._git_available:
            raise FetchError(
                "Git is not available on this system",
                details={"git_executable": self.config.git_executable},
            )

        destination = Path(destination)
        self._prepare_destination(destination)

        cmd = self.build_clone_command(url, destination)

        logger.info(f"Cloning repository: {url}")
        logger.debug(f"Clone command: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.config.git_timeout,
                env=self._git_env(),
            )
        except subprocess.TimeoutExpired:
            raise FetchError(
                f"Git clone timed out after {self.config.git_timeout} seconds",
                details={"url": url, "destination": str(destination)},
            )
        except OSError as e:
            raise FetchError(
                f"Could not run git: {e}",
                details={"url": url, "destination": str(destination)},
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise FetchError(
                f"Git clone failed: {stderr}",
                details={
                    "url": url,
                    "destination": str(destination),
                    "returncode": result.returncode,
                    "stderr": stderr,
                },
            )

        logger.info(f"Repository cloned to: {destination}")
        return destination

    def _prepare_destination(self, destination: Path) -> None:
        """Make sure the clone target exists and is empty."""
        try:
            if destination.exists() and not destination.is_dir():
                raise FetchError(
                    f"Destination exists and is not a directory: {destination}",
                    details={"destination": str(destination)},
                )

            if destination.is_dir() and any(destination.iterdir()):
                logger.warning(f"Removing existing directory: {destination}")
                shutil.rmtree(destination)

            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FetchError(
                f"Destination path is not writable: {destination}: {e}",
                details={"destination": str(destination)},
            ) from e

    def _git_output(self, repo_path: Path, *args: str) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.config.git_executable, *args],
                capture_output=True,
                text=True,
                cwd=repo_path,
                timeout=10,
            )
        except (subprocess.TimeoutExpired, OSError):
            return None

        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_repository_info(self, repo_path: Path) -> dict:
        """
        Extract Git metadata from a cloned repository.

        Args:
            repo_path: Path to the Git working tree.

        Returns:
            Dictionary with commit_hash, branch, remote_url and is_git_repo.
        """
        repo_path = Path(repo_path)
        info = {
            "commit_hash": None,
            "branch": None,
            "remote_url": None,
            "is_git_repo": False,
        }

        if not (repo_path / ".git").exists():
            return info

        info["is_git_repo"] = True
        info["commit_hash"] = self._git_output(repo_path, "rev-parse", "HEAD")
        info["branch"] = self._git_output(repo_path, "rev-parse", "--abbrev-ref", "HEAD")
        info["remote_url"] = self._git_output(repo_path, "remote", "get-url", "origin")
        return info

    @staticmethod
    def count_files(repo_path: Path) -> Tuple[int, int]:
        """
        Count working-tree files, ignoring the .git directory.

        Returns:
            Tuple of (file_count, total_size_bytes).
        """
        count = 0
        total_size = 0

        for root, dirs, filenames in os.walk(repo_path):
            dirs[:] = [d for d in dirs if d != ".git"]
            for filename in filenames:
                try:
                    total_size += (Path(root) / filename).stat().st_size
                except OSError as e:
                    logger.debug(f"Error accessing file {filename}: {e}")
                    continue
                count += 1

        return count, total_size
