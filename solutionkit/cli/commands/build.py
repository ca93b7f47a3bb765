"""
Build command implementation.

Builds one project (the startup project by default) and its local
references.
"""

import logging
import time

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import format_elapsed, open_solution, resolve_project

logger = logging.getLogger(__name__)


def apply_jobs(solution, jobs) -> None:
    """Pass the job count to every toolchain in the solution that supports it."""
    if not jobs:
        return
    for project in solution.projects:
        if project.toolchain is None:
            continue
        if not project.toolchain.set_jobs(jobs):
            logger.debug(f"Toolchain of {project.name} ignores the job count")


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments
        context: Command context

    Returns:
        SUCCESS, NOTHING_TO_DO, BUILD_FAILED or UNSUPPORTED
    """
    console = context.console
    solution = open_solution(args, context)
    if not args.project and solution.startup_project is None:
        console.write_line("Nothing to build.")
        return ExitCode.NOTHING_TO_DO
    project = resolve_project(solution, args.project)

    if project.toolchain is None:
        console.error(f"Project {project.name} has no toolchain, nothing to build.")
        return ExitCode.UNSUPPORTED

    apply_jobs(solution, args.jobs or context.config.default_jobs)

    started = time.monotonic()
    ok = project.toolchain.build(
        console, project, args.label, args.defines, context.cancel_token
    )
    console.write_line(format_elapsed(time.monotonic() - started))

    return ExitCode.SUCCESS if ok else ExitCode.BUILD_FAILED
