"""
Uninstall command implementation.

Best effort: versions that are not installed are reported, not treated as
errors.
"""

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode


def run(args, context: CommandContext) -> ExitCode:
    context.packages.uninstall_package(args.package_name, args.package_version, context.console)
    return ExitCode.SUCCESS
