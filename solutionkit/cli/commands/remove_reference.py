"""
Remove-reference command implementation.
"""

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_project
from solutionkit.core.exceptions import ProjectReferenceError


def run(args, context: CommandContext) -> ExitCode:
    console = context.console
    solution = open_solution(args, context)
    project = resolve_project(solution, args.project)

    try:
        project.remove_reference(args.name, solution)
    except ProjectReferenceError as e:
        console.error(str(e))
        return ExitCode.NOT_FOUND

    project.save()
    console.write_line(f"Reference {args.name} removed.")
    return ExitCode.SUCCESS
