"""
Package registry integration for SolutionKit.

Available Components:
--------------------
- PackageRegistryClient: list, install and uninstall versioned packages
- InstalledPackageRegistry: local database of installed packages
- Package, PackageVersion, PackageEnsureStatus: registry data types

Example Usage:
-------------
    from solutionkit.config import load_config
    from solutionkit.core import Console
    from solutionkit.packages import PackageRegistryClient

    client = PackageRegistryClient(load_config())
    client.load_assets()
    for name in client.list_toolchains():
        print(client.list_toolchain_packages(name)[0].summary())
"""

from solutionkit.packages.client import PackageRegistryClient
from solutionkit.packages.installed import InstalledPackage, InstalledPackageRegistry
from solutionkit.packages.models import (
    Package,
    PackageEnsureStatus,
    PackageVersion,
    format_size,
)

__all__ = [
    "PackageRegistryClient",
    "InstalledPackage",
    "InstalledPackageRegistry",
    "Package",
    "PackageEnsureStatus",
    "PackageVersion",
    "format_size",
]
