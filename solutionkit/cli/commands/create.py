"""
Create command implementation.

Creates a project directory with a project file and a starter source file.
Without --project the current directory is used and named after itself.
With --solution the new project is added to that solution.
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_path
from solutionkit.core.exceptions import ProjectCreationError
from solutionkit.projects import create_project

logger = logging.getLogger(__name__)


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the create command.

    Returns:
        SUCCESS or ERROR (nothing is left on disk on failure)
    """
    console = context.console

    if args.project:
        directory = resolve_path(args.project, context)
    else:
        directory = context.cwd.resolve()
    name = directory.name

    solution = open_solution(args, context) if args.solution else None

    try:
        project = create_project(
            directory,
            name,
            kind=args.kind,
            toolchain=args.toolchain,
            solution=solution,
            registry=context.plugins,
        )
    except ProjectCreationError as e:
        console.error(str(e))
        return ExitCode.ERROR

    console.success(f"Project {project.name} created successfully at {project.file}.")
    return ExitCode.SUCCESS
