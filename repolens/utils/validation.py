"""
Input validation utilities.

Provides validation functions for workspace paths and repository URLs.
"""

import os
import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

NETWORK_SCHEMES = ("http", "https", "git", "ssh")

# user@host:owner/repo(.git)
SCP_LIKE_PATTERN = re.compile(r"^\w[\w.-]*@[\w.-]+:(?!//)[^\s]+$")


def validate_path(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a local repository directory.

    Args:
        path: Path to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not path:
        return False, "Path cannot be empty"

    try:
        path_obj = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        return False, f"Invalid path format: {e}"

    if not path_obj.exists():
        return False, f"Path does not exist: {path}"

    if not path_obj.is_dir():
        return False, f"Path is not a directory: {path}"

    if not os.access(path_obj, os.R_OK):
        return False, f"Path is not readable: {path}"

    return True, None


def validate_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a remote repository URL.

    Accepts http(s), git and ssh URLs with a host and path, file URLs
    with a path, and scp-like ``user@host:path`` locators.

    Args:
        url: URL to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not url or not url.strip():
        return False, "URL cannot be empty"

    if any(ch.isspace() for ch in url):
        return False, f"URL must not contain whitespace: {url!r}"

    # git would read a leading dash as a command-line option
    if url.startswith("-"):
        return False, f"URL must not start with '-': {url!r}"

    if SCP_LIKE_PATTERN.match(url):
        return True, None

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Unparseable URL {url}: {e}"

    if parsed.scheme in NETWORK_SCHEMES:
        if parsed.netloc and parsed.path.strip("/"):
            return True, None
        return False, f"URL is missing a host or repository path: {url}"

    if parsed.scheme == "file":
        if parsed.path:
            return True, None
        return False, f"File URL is missing a path: {url}"

    return False, f"Unsupported repository URL: {url}"
