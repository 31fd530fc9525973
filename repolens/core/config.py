"""
Configuration management for repolens.

Provides centralized configuration for the fetch and document stages
with sensible defaults and validation.
"""

import os
import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from repolens.core.exceptions import ConfigurationError


DEFAULT_README_FILENAMES = (
    "README.md",
    "README.MD",
    "Readme.md",
    "ReadMe.md",
    "README",
    "readme.md",
    "readme",
)


@dataclass
class FetchConfig:
    """Configuration for repository fetching."""

    # History depth for clones; full clones are not supported
    clone_depth: int = 1

    # Only fetch the default branch
    single_branch: bool = True

    # Fetch tags along with the branch tip
    fetch_tags: bool = False

    # Timeout for git operations (seconds)
    git_timeout: int = 300

    git_executable: str = "git"

    def __post_init__(self):
        if self.clone_depth < 1:
            raise ValueError(
                f"clone_depth must be at least 1, got {self.clone_depth}"
            )
        if self.git_timeout <= 0:
            raise ValueError(
                f"git_timeout must be positive, got {self.git_timeout}"
            )


@dataclass
class DocumentConfig:
    """Configuration for README discovery and parsing."""

    # Candidate README names, searched in order at the repository root
    readme_filenames: List[str] = field(
        default_factory=lambda: list(DEFAULT_README_FILENAMES)
    )

    encoding: str = "utf-8"

    # Passed to str.decode; "replace" keeps undecodable READMEs readable
    encoding_errors: str = "replace"

    # Markdown extensions
    enable_tables: bool = True
    enable_strikethrough: bool = True
    enable_tasklists: bool = True
    enable_footnotes: bool = True
    enable_linkify: bool = True


@dataclass
class PipelineConfig:
    """Master configuration combining all stage configurations."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)

    # Enable verbose logging
    verbose: bool = False

    # Parent directory for temporary workspaces (None = system temp dir)
    work_dir: Optional[str] = None

    workspace_prefix: str = "repolens_"


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables and configuration files.
    """

    _instance: Optional["Config"] = None
    _config: PipelineConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = PipelineConfig()
        return cls._instance

    @classmethod
    def get(cls) -> PipelineConfig:
        """Get the current pipeline configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> None:
        """Discard the current configuration (mainly for testing)."""
        cls._instance = None

    @classmethod
    def load_from_file(cls, config_path: str) -> PipelineConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded PipelineConfig instance.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
            parsed = cls._dict_to_config(data)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid configuration file {config_path}: {e}",
                details={"path": str(config_path)},
            ) from e

        instance = cls()
        instance._config = parsed
        return instance._config

    @classmethod
    def load_from_env(cls) -> PipelineConfig:
        """
        Load configuration from environment variables.

        Variables are prefixed with REPOLENS_ and may also come from a
        .env file in the working directory.

        Returns:
            PipelineConfig with environment overrides applied.
        """
        load_dotenv()

        instance = cls()
        config = instance._config

        if os.getenv("REPOLENS_WORK_DIR"):
            config.work_dir = os.getenv("REPOLENS_WORK_DIR")

        overrides = {}
        if os.getenv("REPOLENS_GIT_TIMEOUT"):
            overrides["git_timeout"] = cls._env_int("REPOLENS_GIT_TIMEOUT")

        if os.getenv("REPOLENS_CLONE_DEPTH"):
            overrides["clone_depth"] = cls._env_int("REPOLENS_CLONE_DEPTH")

        if overrides:
            try:
                config.fetch = replace(config.fetch, **overrides)
            except ValueError as e:
                raise ConfigurationError(str(e), details=overrides) from e

        if os.getenv("REPOLENS_VERBOSE"):
            config.verbose = os.getenv("REPOLENS_VERBOSE").lower() in ("true", "1", "yes")

        return config

    @staticmethod
    def _env_int(name: str) -> int:
        value = os.getenv(name)
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"{name} must be an integer, got {value!r}",
                details={"variable": name, "value": value},
            ) from e

    @staticmethod
    def _dict_to_config(data: dict) -> PipelineConfig:
        """Convert a dictionary to PipelineConfig."""
        config = PipelineConfig()

        if "fetch" in data:
            config.fetch = FetchConfig(**data["fetch"])

        if "document" in data:
            config.document = DocumentConfig(**data["document"])

        if "verbose" in data:
            config.verbose = data["verbose"]

        if "work_dir" in data:
            config.work_dir = data["work_dir"]

        if "workspace_prefix" in data:
            config.workspace_prefix = data["workspace_prefix"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config = cls.get()
        data = cls._config_to_dict(config)

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _config_to_dict(config: PipelineConfig) -> dict:
        """Convert PipelineConfig to a dictionary."""
        return {
            "fetch": {
                "clone_depth": config.fetch.clone_depth,
                "single_branch": config.fetch.single_branch,
                "fetch_tags": config.fetch.fetch_tags,
                "git_timeout": config.fetch.git_timeout,
                "git_executable": config.fetch.git_executable,
            },
            "document": {
                "readme_filenames": list(config.document.readme_filenames),
                "encoding": config.document.encoding,
                "encoding_errors": config.document.encoding_errors,
                "enable_tables": config.document.enable_tables,
                "enable_strikethrough": config.document.enable_strikethrough,
                "enable_tasklists": config.document.enable_tasklists,
                "enable_footnotes": config.document.enable_footnotes,
                "enable_linkify": config.document.enable_linkify,
            },
            "verbose": config.verbose,
            "work_dir": config.work_dir,
            "workspace_prefix": config.workspace_prefix,
        }
