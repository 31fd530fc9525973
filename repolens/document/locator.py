"""
README discovery within a fetched repository.

Searches the repository root for a fixed, ordered list of README
filename variants and reads the first one that exists and is readable.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from repolens.core.config import DocumentConfig, Config, DEFAULT_README_FILENAMES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadmeDocument:
    """Raw README text and where it was found."""

    filename: str
    path: Path
    text: str

    @property
    def is_empty(self) -> bool:
        """True for a README that exists but has no visible content."""
        return not self.text.strip()

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "path": str(self.path),
            "characters": len(self.text),
            "is_empty": self.is_empty,
        }


class ReadmeLocator:
    """
    Finds the README of a repository.

    Names are matched exactly against the directory listing, so the
    result does not depend on filesystem case sensitivity. Only the
    repository root is searched.
    """

    def __init__(
        self,
        filenames: Sequence[str] = DEFAULT_README_FILENAMES,
        encoding: str = "utf-8",
        errors: str = "replace",
    ):
        self.filenames = tuple(filenames)
        self.encoding = encoding
        self.errors = errors

    @classmethod
    def from_config(cls, config: DocumentConfig) -> "ReadmeLocator":
        return cls(
            filenames=config.readme_filenames,
            encoding=config.encoding,
            errors=config.encoding_errors,
        )

    def candidates(self, repo_dir: Path) -> List[Path]:
        """
        List existing README candidates in priority order.

        Args:
            repo_dir: Repository root.

        Returns:
            Paths of candidate files present in the directory.
        """
        try:
            with os.scandir(repo_dir) as entries:
                present = {entry.name for entry in entries}
        except OSError as e:
            logger.warning(f"Cannot list repository directory {repo_dir}: {e}")
            return []

        return [repo_dir / name for name in self.filenames if name in present]

    def locate(self, repo_dir: Union[str, Path]) -> Optional[ReadmeDocument]:
        """
        Locate and read the README.

        Args:
            repo_dir: Repository root.

        Returns:
            The first readable candidate, or None if there is none.
        """
        repo_dir = Path(repo_dir)
        if not repo_dir.is_dir():
            logger.warning(f"Repository path is not a directory: {repo_dir}")
            return None

        for path in self.candidates(repo_dir):
            if not path.is_file():
                logger.debug(f"Skipping non-file README candidate: {path}")
                continue

            try:
                raw = path.read_bytes()
            except OSError as e:
                logger.warning(f"Error reading {path.name}: {e}")
                continue

            logger.info(f"Found README: {path.name}")
            return ReadmeDocument(
                filename=path.name,
                path=path,
                text=raw.decode(self.encoding, errors=self.errors),
            )

        logger.info(f"No README found in {repo_dir}")
        return None


def locate_readme(
    repo_dir: Union[str, Path],
    config: DocumentConfig = None,
) -> Optional[str]:
    """
    Convenience function returning only the README text.

    Returns:
        README text, or None when the repository has no readable README.
        An empty README yields an empty string, not None.
    """
    if config is None:
        config = Config.get().document

    document = ReadmeLocator.from_config(config).locate(repo_dir)
    return document.text if document is not None else None
