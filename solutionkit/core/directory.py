"""
Directory structure management for SolutionKit.

Global Cache (~/.solutionkit/ or %USERPROFILE%\\.solutionkit\\, overridable
with SOLUTIONKIT_HOME):
    - packages/       : Extracted package installations (<name>/<version>/)
    - downloads/      : Downloaded archives (removed after extraction)
    - lock/           : Concurrent access control files
    - installed.json  : Installed package database
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "SOLUTIONKIT_HOME"


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the global cache directory path.

    Returns:
        $SOLUTIONKIT_HOME if set, otherwise ~/.solutionkit
        (%USERPROFILE%\\.solutionkit on Windows)
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".solutionkit"
    return Path.home() / ".solutionkit"


def ensure_cache_structure(cache_dir: Optional[Path] = None) -> Dict[str, Path]:
    """
    Create the cache directory layout if it doesn't exist.

    Args:
        cache_dir: Cache root (default: global cache dir)

    Returns:
        Mapping of layout names ('root', 'packages', 'downloads', 'lock')
        to paths

    Raises:
        DirectoryError: If a directory cannot be created
    """
    root = Path(cache_dir) if cache_dir is not None else get_global_cache_dir()
    layout = {
        "root": root,
        "packages": root / "packages",
        "downloads": root / "downloads",
        "lock": root / "lock",
    }

    for name, path in layout.items():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"Could not create {name} directory at {path}: {e}") from e

    logger.debug(f"Ensured cache structure at {root}")
    return layout


__all__ = [
    "DirectoryError",
    "HOME_ENV_VAR",
    "get_global_cache_dir",
    "ensure_cache_structure",
]
