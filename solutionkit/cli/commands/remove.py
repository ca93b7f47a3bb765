"""
Remove command implementation.

Removes a file from a project and saves the project file. The file itself
is left on disk.
"""

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution, resolve_path, resolve_project
from solutionkit.core.exceptions import ProjectItemError


def run(args, context: CommandContext) -> ExitCode:
    console = context.console
    path = resolve_path(args.file, context)

    solution = open_solution(args, context)
    project = resolve_project(solution, args.project)

    try:
        item = project.remove_file(path)
    except ProjectItemError:
        console.error("File not found in project.")
        return ExitCode.NOT_FOUND

    project.save()
    console.write_line(f"File removed: {item.path}")
    return ExitCode.SUCCESS
