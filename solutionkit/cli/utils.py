"""
Shared utilities for CLI commands.

Solution loading and project resolution are the same for every
file-targeting command, so they live here.
"""

import logging
from pathlib import Path
from typing import Optional

from solutionkit.cli.context import CommandContext
from solutionkit.core.exceptions import ProjectNotFoundError
from solutionkit.projects import Project, Solution, load_solution

logger = logging.getLogger(__name__)


# ============================================================================
# Solution and Project Resolution
# ============================================================================


def open_solution(args, context: CommandContext, load_projects: bool = True) -> Solution:
    """
    Locate and load the solution named by --solution.

    Args:
        args: Parsed arguments with a `solution` attribute
        context: Command context (cwd and plugin registry are used)
        load_projects: Load projects too, not just solution metadata

    Raises:
        SolutionNotFoundError: If the solution file does not exist
        SolutionLoadError, ProjectLoadError: If loading fails
    """
    solution = load_solution(args.solution, context.cwd)
    solution.load_metadata()
    if load_projects:
        solution.load_projects(context.plugins)
    return solution


def resolve_project(solution: Solution, name: Optional[str]) -> Project:
    """
    Project named `name`, or the startup project when no name is given.

    Raises:
        ProjectNotFoundError: If the project does not exist, or no name was
            given and the solution has no startup project
    """
    if name:
        return solution.find_project(name)
    if solution.startup_project is None:
        raise ProjectNotFoundError("(startup project)")
    return solution.startup_project


def resolve_path(path: str, context: CommandContext) -> Path:
    """Resolve a command-line path against the invocation directory."""
    return (context.cwd / path).resolve()


# ============================================================================
# Output
# ============================================================================


def format_elapsed(seconds: float) -> str:
    """Format a duration as H:MM:SS.mmm."""
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}:{minutes:02d}:{secs:06.3f}"


__all__ = [
    "format_elapsed",
    "open_solution",
    "resolve_path",
    "resolve_project",
]
