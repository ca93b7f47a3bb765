"""
Concurrent access control for SolutionKit.

File-based locks (via the `filelock` library) that serialise package
installation and the installed-package database across processes.

Usage:
    lock_manager = LockManager(cache_dir / "lock")
    with lock_manager.package_lock("gcc-arm", "13.2.1"):
        # download and extract the package
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from solutionkit.core.exceptions import RegistryLockTimeout

logger = logging.getLogger(__name__)


def _safe_name(value: str) -> str:
    return value.replace("/", "-").replace("\\", "-").replace(":", "-")


class LockManager:
    """
    Manages lock files for SolutionKit resources.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Path):
        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def package_lock(self, name: str, version: str, timeout: int = 300):
        """
        Acquire lock for one package version (download/installation).

        Args:
            name: Package name
            version: Package version
            timeout: Maximum wait time in seconds (default: 300 for long downloads)

        Raises:
            RegistryLockTimeout: If lock can't be acquired within timeout
        """
        lock_path = self.lock_dir / f"package-{_safe_name(name)}-{_safe_name(version)}.lock"
        with self._acquire(lock_path, timeout, f"package {name} {version}"):
            yield

    @contextmanager
    def database_lock(self, timeout: int = 30):
        """Acquire lock protecting installed.json."""
        with self._acquire(self.lock_dir / "installed.lock", timeout, "package database"):
            yield

    @contextmanager
    def _acquire(self, lock_path: Path, timeout: int, what: str):
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired lock: {lock_path}")
                yield
            logger.debug(f"Released lock: {lock_path}")
        except Timeout as e:
            logger.error(f"Could not acquire lock for {what} after {timeout}s")
            raise RegistryLockTimeout(
                f"Could not acquire lock for {what} after {timeout}s. "
                "Another SolutionKit process may be installing it."
            ) from e


__all__ = ["LockManager"]
