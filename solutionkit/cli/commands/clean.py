"""
Clean command implementation.

Removes the build outputs of one project.
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_project

logger = logging.getLogger(__name__)


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the clean command.

    Args:
        args: Parsed command-line arguments
        context: Command context

    Returns:
        SUCCESS, NOTHING_TO_DO or UNSUPPORTED
    """
    solution = open_solution(args, context)
    if not args.project and solution.startup_project is None:
        context.console.write_line("Nothing to clean.")
        return ExitCode.NOTHING_TO_DO
    project = resolve_project(solution, args.project)

    if project.toolchain is None:
        context.console.error(f"Project {project.name} has no toolchain, nothing to clean.")
        return ExitCode.UNSUPPORTED

    project.toolchain.clean(context.console, project, context.cancel_token)
    return ExitCode.SUCCESS
