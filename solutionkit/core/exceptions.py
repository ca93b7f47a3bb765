"""
Centralized exception hierarchy for SolutionKit.

This module defines all custom exceptions used across the codebase
so that the command dispatcher can map failures to exit codes by category.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SolutionKitError(Exception):
    """Base exception for all SolutionKit errors."""

    pass


class OperationCancelled(SolutionKitError):
    """Raised when a long-running operation is cancelled or times out."""

    pass


class ConfigError(SolutionKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Solution Exceptions
# ============================================================================


class SolutionError(SolutionKitError):
    """Base exception for solution-related errors."""

    pass


class SolutionNotFoundError(SolutionError):
    """Raised when a solution file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Solution file: {path} could not be found.")


class SolutionLoadError(SolutionError):
    """Raised when the solution metadata cannot be parsed."""

    pass


# ============================================================================
# Project Exceptions
# ============================================================================


class ProjectError(SolutionKitError):
    """Base exception for project-related errors."""

    pass


class ProjectNotFoundError(ProjectError):
    """Raised when a project is not part of the solution."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project not found: {name}")


class ProjectLoadError(ProjectError):
    """Raised when a project file cannot be loaded."""

    pass


class ProjectItemError(ProjectError):
    """Raised when a file cannot be added to or removed from a project."""

    pass


class ProjectCreationError(ProjectError):
    """Raised when a new project cannot be created."""

    pass


# ============================================================================
# Reference Exceptions
# ============================================================================


class ProjectReferenceError(ProjectError):
    """Base exception for project reference errors."""

    pass


class ReferenceNotFoundError(ProjectReferenceError):
    """Raised when a local reference does not match any solution project."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Local reference '{name}' does not exist, try creating the project first."
        )


class CircularReferenceError(ProjectReferenceError):
    """Raised when project references form a cycle."""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__(f"Circular reference detected: {' -> '.join(self.cycle)}")


# ============================================================================
# Toolchain / Test Framework Exceptions
# ============================================================================


class ToolchainError(SolutionKitError):
    """Base exception for toolchain-related errors."""

    pass


class ToolchainNotAvailableError(ToolchainError):
    """Raised when a project names a toolchain that is not registered."""

    pass


class TestFrameworkError(SolutionKitError):
    """Base exception for test framework errors."""

    __test__ = False


# ============================================================================
# Package Registry Exceptions
# ============================================================================


class RegistryError(SolutionKitError):
    """Base exception for package registry errors."""

    pass


class RegistryNotInitializedError(RegistryError):
    """Raised when the registry is used before load_assets() completed."""

    pass


class RegistryTransportError(RegistryError):
    """Raised when the remote registry cannot be reached or answers garbage."""

    pass


class RegistryLockTimeout(RegistryError):
    """Raised when a registry lock cannot be acquired within timeout."""

    pass


class PackageInstallError(RegistryError):
    """Raised when a package cannot be downloaded or extracted."""

    pass
