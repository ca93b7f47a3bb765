"""
Core functionality for SolutionKit.

This package contains the foundational modules that other components depend on.
"""

from .cancellation import CancellationToken, ensure_token
from .console import BufferConsole, Console
from .directory import DirectoryError, ensure_cache_structure, get_global_cache_dir
from .exceptions import (
    CircularReferenceError,
    ConfigError,
    OperationCancelled,
    PackageInstallError,
    ProjectCreationError,
    ProjectError,
    ProjectItemError,
    ProjectLoadError,
    ProjectNotFoundError,
    ProjectReferenceError,
    ReferenceNotFoundError,
    RegistryError,
    RegistryLockTimeout,
    RegistryNotInitializedError,
    RegistryTransportError,
    SolutionError,
    SolutionKitError,
    SolutionLoadError,
    SolutionNotFoundError,
    TestFrameworkError,
    ToolchainError,
    ToolchainNotAvailableError,
)
from .initialization import initialize_core
from .locking import LockManager
from .registry import PluginRegistry

__all__ = [
    "CancellationToken",
    "ensure_token",
    "Console",
    "BufferConsole",
    "DirectoryError",
    "ensure_cache_structure",
    "get_global_cache_dir",
    "LockManager",
    "PluginRegistry",
    "initialize_core",
    "SolutionKitError",
    "OperationCancelled",
    "ConfigError",
    "SolutionError",
    "SolutionNotFoundError",
    "SolutionLoadError",
    "ProjectError",
    "ProjectNotFoundError",
    "ProjectLoadError",
    "ProjectItemError",
    "ProjectCreationError",
    "ProjectReferenceError",
    "ReferenceNotFoundError",
    "CircularReferenceError",
    "ToolchainError",
    "ToolchainNotAvailableError",
    "TestFrameworkError",
    "RegistryError",
    "RegistryNotInitializedError",
    "RegistryTransportError",
    "RegistryLockTimeout",
    "PackageInstallError",
]
