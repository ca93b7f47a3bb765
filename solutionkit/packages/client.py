"""
Client for the remote package registry.

This is the only component that talks to the package source. It lists
packages and toolchains, resolves "latest" versions, and installs or
uninstalls package versions under the local package cache.

Registry HTTP API (relative to config.registry_url):
    GET /packages                   -> [{"name", "kind", "description"}]
    GET /packages/<name>/versions   -> [{"name", "version", "size",
                                         "published", "url", "sha256"}]
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

import requests
from requests.exceptions import RequestException

from solutionkit.config.parser import SolutionKitConfig
from solutionkit.core.cancellation import CancellationToken
from solutionkit.core.console import Console
from solutionkit.core.directory import ensure_cache_structure
from solutionkit.core.exceptions import (
    RegistryError,
    RegistryNotInitializedError,
    RegistryTransportError,
    PackageInstallError,
)
from solutionkit.core.filesystem import (
    FilesystemError,
    directory_size,
    extract_archive,
    is_relative_to,
    safe_rmtree,
)
from solutionkit.core.locking import LockManager
from solutionkit.packages.download import DownloadProgress, download_file
from solutionkit.packages.installed import InstalledPackage, InstalledPackageRegistry
from solutionkit.packages.models import (
    Package,
    PackageEnsureStatus,
    PackageVersion,
    version_key,
)

logger = logging.getLogger(__name__)


class PackageRegistryClient:
    """
    Lists, installs and uninstalls versioned packages.

    load_assets() must complete once before any other call.

    Example:
        >>> client = PackageRegistryClient(load_config())
        >>> client.load_assets()
        >>> client.ensure_package("gcc-arm", "", Console())
        <PackageEnsureStatus.INSTALLED: 'installed'>
    """

    def __init__(
        self,
        config: SolutionKitConfig,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.registry_url = config.registry_url.rstrip("/")
        self.cache_dir = Path(config.cache_dir)
        self.session = session or requests.Session()
        self.packages_dir = self.cache_dir / "packages"
        self.downloads_dir = self.cache_dir / "downloads"
        self.lock_manager: Optional[LockManager] = None
        self.installed: Optional[InstalledPackageRegistry] = None

    # ========================================================================
    # Initialisation
    # ========================================================================

    def load_assets(self) -> None:
        """
        Prepare the local package cache and installed-package database.

        Safe to call more than once; only the first call does work.
        """
        if self.installed is not None:
            return

        layout = ensure_cache_structure(self.cache_dir)
        self.packages_dir = layout["packages"]
        self.downloads_dir = layout["downloads"]
        self.lock_manager = LockManager(layout["lock"])
        self.installed = InstalledPackageRegistry(
            self.cache_dir / "installed.json", self.lock_manager
        )
        logger.debug(f"Package assets loaded from {self.cache_dir}")

    @property
    def assets_loaded(self) -> bool:
        return self.installed is not None

    def _require_assets(self) -> InstalledPackageRegistry:
        if self.installed is None:
            raise RegistryNotInitializedError(
                "Package registry used before load_assets() completed"
            )
        return self.installed

    # ========================================================================
    # Listing
    # ========================================================================

    def _get_json(self, path: str) -> Optional[Any]:
        """GET a registry endpoint; None on 404."""
        url = f"{self.registry_url}/{path.lstrip('/')}"
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, timeout=self.config.request_timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except RequestException as e:
            raise RegistryTransportError(f"Registry request failed: {url}: {e}") from e
        except ValueError as e:
            raise RegistryTransportError(f"Invalid JSON from registry: {url}") from e

    def _fetch_packages(self) -> List[Package]:
        data = self._get_json("packages") or []
        if not isinstance(data, list):
            raise RegistryTransportError("Registry package listing must be a list")
        return [Package.from_dict(entry) for entry in data]

    def list_packages(self) -> List[str]:
        """Names of every package in the registry."""
        self._require_assets()
        return [package.name for package in self._fetch_packages()]

    def list_toolchains(self) -> List[str]:
        """Names of packages that are toolchains."""
        self._require_assets()
        return [package.name for package in self._fetch_packages() if package.is_toolchain]

    def list_toolchain_packages(self, name: str) -> List[PackageVersion]:
        """
        Published versions of a package, most recent first.

        Returns:
            Versions sorted by publish date then version, newest first;
            empty if the package is unknown
        """
        self._require_assets()
        data = self._get_json(f"packages/{name}/versions") or []
        if not isinstance(data, list):
            raise RegistryTransportError(f"Version listing for {name} must be a list")

        versions = [PackageVersion.from_dict(entry) for entry in data]
        versions.sort(key=lambda v: (v.published, version_key(v.version)), reverse=True)
        return versions

    def resolve_version(self, name: str, version: str = "") -> Optional[PackageVersion]:
        """
        Resolve a version request against the registry.

        An empty version means the latest published version at call time.
        """
        versions = self.list_toolchain_packages(name)
        if not versions:
            return None
        if not version:
            return versions[0]
        return next((v for v in versions if v.version == version), None)

    def list_installed(self) -> List[InstalledPackage]:
        return self._require_assets().list_installed()

    def package_path(self, name: str, version: str) -> Optional[Path]:
        """Install directory of a package version, or None if not installed."""
        installed = self._require_assets().get(name, version)
        return installed.path if installed is not None else None

    # ========================================================================
    # Install / Uninstall
    # ========================================================================

    def ensure_package(
        self,
        name: str,
        version: str,
        console: Console,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PackageEnsureStatus:
        """
        Install a package version unless it is already present.

        Args:
            name: Package name
            version: Exact version, or empty for the latest published
            console: Sink for human-readable status
            cancel_token: Token for aborting a download

        Returns:
            FOUND if already installed (no network access for pinned
            versions), INSTALLED on success, NOT_FOUND if the registry does
            not know the package/version, FAILED otherwise
        """
        installed = self._require_assets()

        if version and installed.is_installed(name, version):
            console.write_line(f"Package {name} {version} is already installed.")
            return PackageEnsureStatus.FOUND

        try:
            target = self.resolve_version(name, version)
        except RegistryError as e:
            console.write_line(f"Unable to query registry: {e}")
            return PackageEnsureStatus.FAILED

        if target is None:
            requested = f"{name} {version}" if version else name
            console.write_line(f"Package {requested} was not found in the registry.")
            return PackageEnsureStatus.NOT_FOUND

        if installed.is_installed(name, target.version):
            console.write_line(f"Package {name} {target.version} is already installed.")
            return PackageEnsureStatus.FOUND

        try:
            install_dir = self._install_directory(name, target.version)
        except PackageInstallError as e:
            console.write_line(f"Failed to install {name} {target.version}: {e}")
            return PackageEnsureStatus.FAILED

        with self.lock_manager.package_lock(name, target.version):
            if installed.is_installed(name, target.version):
                console.write_line(f"Package {name} {target.version} is already installed.")
                return PackageEnsureStatus.FOUND

            console.write_line(f"Installing {name} {target.version}...")
            try:
                self._install(name, target, install_dir, console, cancel_token)
            except (RegistryError, FilesystemError) as e:
                logger.error(f"Install failed: {e}")
                console.write_line(f"Failed to install {name} {target.version}: {e}")
                return PackageEnsureStatus.FAILED

        console.write_line(f"Package {name} {target.version} installed to {install_dir}.")
        return PackageEnsureStatus.INSTALLED

    def _install_directory(self, name: str, version: str) -> Path:
        """
        Cache directory for one package version.

        Raises:
            PackageInstallError: If name or version is not a plain path component
        """
        for part in (name, version):
            if part in ("", ".", "..") or "/" in part or "\\" in part:
                raise PackageInstallError(f"Invalid package name or version: {part!r}")

        install_dir = self.packages_dir / name / version
        if not is_relative_to(install_dir.resolve(), self.packages_dir.resolve()):
            raise PackageInstallError(f"Install path escapes the package cache: {install_dir}")
        return install_dir

    def _install(
        self,
        name: str,
        target: PackageVersion,
        install_dir: Path,
        console: Console,
        cancel_token: Optional[CancellationToken],
    ) -> None:
        """Download, extract and register `target` under the requested name."""
        if not target.url:
            raise PackageInstallError(f"Registry has no download URL for {name} {target.version}")

        archive_name = target.url.split("?")[0].rstrip("/").split("/")[-1]
        archive_path = self.downloads_dir / f"{name}-{target.version}-{archive_name}"
        extract_dir = self.downloads_dir / f"{name}-{target.version}_extract"

        def report(progress: DownloadProgress):
            console.write_line(f"  {progress}")

        try:
            download_file(
                url=target.url,
                destination=archive_path,
                expected_sha256=target.sha256 or None,
                session=self.session,
                progress_callback=report,
                cancel_token=cancel_token,
                timeout=self.config.request_timeout,
                max_retries=self.config.max_retries,
            )

            extract_archive(archive_path, extract_dir)
            root = self._normalize_root_directory(extract_dir)

            if install_dir.exists():
                safe_rmtree(install_dir, require_prefix=self.packages_dir)
            install_dir.parent.mkdir(parents=True, exist_ok=True)
            root.rename(install_dir)

            self.installed.register(
                name,
                target.version,
                install_dir,
                directory_size(install_dir),
                source_url=target.url,
                sha256=target.sha256,
            )

        except Exception:
            if install_dir.exists():
                safe_rmtree(install_dir, require_prefix=self.packages_dir)
            raise

        finally:
            if extract_dir.exists():
                safe_rmtree(extract_dir, require_prefix=self.downloads_dir)
            if archive_path.exists():
                archive_path.unlink()

    def _normalize_root_directory(self, extract_dir: Path) -> Path:
        """Archives with a single top-level folder install that folder."""
        items = list(extract_dir.iterdir())
        if len(items) == 1 and items[0].is_dir():
            return items[0]
        return extract_dir

    def uninstall_package(self, name: str, version: str, console: Console) -> List[str]:
        """
        Remove an installed package version (best effort).

        Args:
            name: Package name
            version: Version to remove; empty removes every installed version
            console: Sink for human-readable status

        Returns:
            Versions that were removed
        """
        installed = self._require_assets()
        versions = [version] if version else installed.installed_versions(name)

        removed = []
        for candidate in versions:
            package = installed.get(name, candidate)
            if package is None:
                console.write_line(f"Package {name} {candidate} is not installed.")
                continue

            try:
                with self.lock_manager.package_lock(name, candidate):
                    safe_rmtree(package.path, require_prefix=self.packages_dir)
                    installed.unregister(name, candidate)
            except (FilesystemError, ValueError, RegistryError) as e:
                logger.warning(f"Uninstall of {name} {candidate} failed: {e}")
                console.write_line(f"Failed to uninstall {name} {candidate}: {e}")
                continue

            console.write_line(f"Package {name} {candidate} uninstalled.")
            removed.append(candidate)

        if not versions:
            console.write_line(f"Package {name} is not installed.")

        return removed


__all__ = ["PackageRegistryClient"]
