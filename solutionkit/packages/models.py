"""
Data types exchanged with the package registry.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from packaging.version import InvalidVersion, Version

from solutionkit.core.exceptions import RegistryTransportError


class PackageEnsureStatus(Enum):
    """Outcome of PackageRegistryClient.ensure_package()."""

    FOUND = "found"
    INSTALLED = "installed"
    NOT_FOUND = "not_found"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self in (PackageEnsureStatus.FOUND, PackageEnsureStatus.INSTALLED)


@dataclass(frozen=True)
class Package:
    """A named distribution published in the registry."""

    name: str
    kind: str = "package"  # 'toolchain' or 'package'
    description: str = ""

    @property
    def is_toolchain(self) -> bool:
        return self.kind == "toolchain"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Package":
        try:
            return cls(
                name=str(data["name"]),
                kind=str(data.get("kind", "package")),
                description=str(data.get("description", "")),
            )
        except (KeyError, TypeError) as e:
            raise RegistryTransportError(f"Malformed package entry: {data!r}") from e


@dataclass(frozen=True)
class PackageVersion:
    """One published release of a package."""

    name: str
    version: str
    size: int
    published: datetime
    url: str = ""
    sha256: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageVersion":
        try:
            published = datetime.fromisoformat(str(data["published"]).replace("Z", "+00:00"))
            if published.tzinfo is None:
                published = published.replace(tzinfo=timezone.utc)
            return cls(
                name=str(data["name"]),
                version=str(data["version"]),
                size=int(data.get("size", 0)),
                published=published,
                url=str(data.get("url", "")),
                sha256=str(data.get("sha256", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryTransportError(f"Malformed version entry: {data!r}") from e

    def summary(self) -> str:
        """One-line description used by the list command."""
        published = self.published.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        return f"{self.name}, {self.version}, {format_size(self.size)}, {published} UTC"


def format_size(size: int) -> str:
    """
    Format a byte count for display.

    Example:
        >>> format_size(1536)
        '1.5 KB'
    """
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def version_key(version: str) -> tuple:
    """
    Sort key for version strings.

    PEP 440 parseable versions sort by their parsed value and above anything
    unparseable; the rest sort by their numeric components.

    Example:
        >>> sorted(["1.10.0", "1.9.2"], key=version_key)
        ['1.9.2', '1.10.0']
    """
    try:
        return (1, Version(version), ())
    except InvalidVersion:
        parts = tuple(int(p) if p.isdigit() else 0 for p in re.split(r"[.\-_+]", version))
        return (0, None, parts)


__all__ = [
    "PackageEnsureStatus",
    "Package",
    "PackageVersion",
    "format_size",
    "version_key",
]
