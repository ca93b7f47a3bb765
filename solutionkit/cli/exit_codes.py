"""Process exit codes returned by SolutionKit commands."""

from enum import IntEnum

from solutionkit.core.exceptions import (
    OperationCancelled,
    ProjectItemError,
    ProjectNotFoundError,
    ProjectReferenceError,
    RegistryError,
    SolutionNotFoundError,
    ToolchainNotAvailableError,
)


class ExitCode(IntEnum):
    """
    Exit codes, ordered by severity.

    A build failure combined with a test failure has its own code so both
    remain visible to callers.
    """

    SUCCESS = 0
    NOTHING_TO_DO = 1
    USAGE_ERROR = 2
    NOT_FOUND = 3
    BUILD_FAILED = 4
    TESTS_FAILED = 5
    BUILD_AND_TESTS_FAILED = 6
    REGISTRY_FAILED = 7
    UNSUPPORTED = 8
    REFERENCE_ERROR = 9
    ERROR = 10
    CANCELLED = 130


def exit_code_for(error: BaseException) -> ExitCode:
    """
    Map an exception escaping a command to its exit code.

    Example:
        >>> exit_code_for(ProjectNotFoundError("app"))
        <ExitCode.NOT_FOUND: 3>
    """
    if isinstance(error, (OperationCancelled, KeyboardInterrupt)):
        return ExitCode.CANCELLED
    if isinstance(error, (SolutionNotFoundError, ProjectNotFoundError, ProjectItemError)):
        return ExitCode.NOT_FOUND
    if isinstance(error, ProjectReferenceError):
        return ExitCode.REFERENCE_ERROR
    if isinstance(error, ToolchainNotAvailableError):
        return ExitCode.UNSUPPORTED
    if isinstance(error, RegistryError):
        return ExitCode.REGISTRY_FAILED
    return ExitCode.ERROR


__all__ = ["ExitCode", "exit_code_for"]
