"""
Database of locally installed packages.

Tracks which (name, version) pairs are installed under the package cache so
that ensure_package() can answer "already present" without any network
access. Stored as installed.json, written atomically under a file lock.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from solutionkit.core.exceptions import RegistryError
from solutionkit.core.filesystem import atomic_write
from solutionkit.core.locking import LockManager
from solutionkit.packages.models import version_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledPackage:
    """One installed package version."""

    name: str
    version: str
    path: Path
    size: int
    installed: str
    source_url: str = ""
    sha256: str = ""


class InstalledPackageRegistry:
    """
    Manages installed.json with process-safe access.

    Example:
        >>> db = InstalledPackageRegistry(cache_dir / "installed.json", lock_manager)
        >>> db.register("gcc-arm", "13.2.1", path, 123456789, "https://...", "abc...")
        >>> db.is_installed("gcc-arm", "13.2.1")
        True
    """

    def __init__(self, database_path: Path, lock_manager: LockManager):
        self.database_path = Path(database_path)
        self.lock_manager = lock_manager

        logger.debug(f"Initialized package database at {self.database_path}")

    def _empty(self) -> dict:
        return {"version": 1, "packages": {}}

    def _load(self) -> dict:
        if not self.database_path.exists():
            return self._empty()

        try:
            with open(self.database_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load package database: {e}")
            raise RegistryError(f"Failed to load package database: {e}") from e

        if "version" not in data or "packages" not in data:
            logger.warning("Invalid package database format, resetting")
            return self._empty()

        return data

    def _save(self, data: dict) -> None:
        try:
            atomic_write(self.database_path, json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to save package database: {e}")
            raise RegistryError(f"Failed to save package database: {e}") from e

    def register(
        self,
        name: str,
        version: str,
        path: Path,
        size: int,
        source_url: str = "",
        sha256: str = "",
    ) -> None:
        """Record a freshly installed package version."""
        with self.lock_manager.database_lock():
            data = self._load()
            data["packages"].setdefault(name, {})[version] = {
                "path": str(Path(path).resolve()),
                "size": size,
                "installed": datetime.now().isoformat(),
                "source_url": source_url,
                "sha256": sha256,
            }
            self._save(data)

        logger.info(f"Registered package: {name} {version}")

    def unregister(self, name: str, version: str) -> bool:
        """
        Forget an installed package version.

        Returns:
            True if an entry was removed
        """
        with self.lock_manager.database_lock():
            data = self._load()
            versions = data["packages"].get(name, {})
            if version not in versions:
                logger.debug(f"Package not registered: {name} {version}")
                return False

            del versions[version]
            if not versions:
                del data["packages"][name]
            self._save(data)

        logger.info(f"Unregistered package: {name} {version}")
        return True

    def get(self, name: str, version: str) -> Optional[InstalledPackage]:
        info = self._load()["packages"].get(name, {}).get(version)
        if info is None:
            return None
        return self._to_installed(name, version, info)

    def is_installed(self, name: str, version: str) -> bool:
        """True if (name, version) is registered and its directory exists."""
        package = self.get(name, version)
        return package is not None and package.path.is_dir()

    def installed_versions(self, name: str) -> List[str]:
        """Installed versions of a package, newest first."""
        versions = list(self._load()["packages"].get(name, {}).keys())
        return sorted(versions, key=version_key, reverse=True)

    def list_installed(self) -> List[InstalledPackage]:
        data = self._load()["packages"]
        return [
            self._to_installed(name, version, info)
            for name in sorted(data)
            for version, info in sorted(
                data[name].items(), key=lambda item: version_key(item[0]), reverse=True
            )
        ]

    def _to_installed(self, name: str, version: str, info: Dict) -> InstalledPackage:
        return InstalledPackage(
            name=name,
            version=version,
            path=Path(info["path"]),
            size=int(info.get("size", 0)),
            installed=info.get("installed", ""),
            source_url=info.get("source_url", ""),
            sha256=info.get("sha256", ""),
        )


__all__ = ["InstalledPackage", "InstalledPackageRegistry"]
