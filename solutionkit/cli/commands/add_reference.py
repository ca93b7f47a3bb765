"""
Add-reference command implementation.

Adds a reference to a project, or updates an existing reference with the
same name in place. Local references (no --git-url) must name a project of
the solution and must not create a cycle.
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_project
from solutionkit.core.exceptions import ProjectReferenceError
from solutionkit.projects import Reference

logger = logging.getLogger(__name__)


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the add-reference command.

    The project file is only written when the reference was accepted.

    Returns:
        SUCCESS or REFERENCE_ERROR
    """
    console = context.console
    solution = open_solution(args, context)
    project = resolve_project(solution, args.project)

    reference = Reference(name=args.name, git_url=args.git_url, revision=args.revision)
    try:
        result = project.add_reference(reference, solution)
    except ProjectReferenceError as e:
        console.error(str(e))
        return ExitCode.REFERENCE_ERROR

    project.save()
    if result == "updated":
        console.write_line("Reference successfully updated.")
    else:
        console.write_line("Reference added successfully.")
    return ExitCode.SUCCESS
