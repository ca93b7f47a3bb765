"""
Add command implementation.

Adds an existing file to a project and saves the project file.
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_path, resolve_project
from solutionkit.core.exceptions import ProjectItemError

logger = logging.getLogger(__name__)


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the add command.

    Returns:
        SUCCESS, NOT_FOUND (file missing), NOTHING_TO_DO (already added) or
        USAGE_ERROR (file outside the project directory)
    """
    console = context.console
    path = resolve_path(args.file, context)
    if not path.is_file():
        console.error(f"File not found: {args.file}")
        return ExitCode.NOT_FOUND

    solution = open_solution(args, context)
    project = resolve_project(solution, args.project)

    try:
        if project.find_item(path) is not None:
            console.write_line(f"File {args.file} is already part of {project.name}.")
            return ExitCode.NOTHING_TO_DO
        item = project.add_file(path)
    except ProjectItemError as e:
        console.error(str(e))
        return ExitCode.USAGE_ERROR

    project.save()
    console.write_line(f"File added: {item.path}")
    return ExitCode.SUCCESS
