"""
List command implementation.

Queries the remote package registry (packages, package-info, toolchains)
or the local package cache (installed).
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.packages import format_size

logger = logging.getLogger(__name__)


def _list_packages(args, context: CommandContext) -> ExitCode:
    names = context.packages.list_packages()
    for name in names:
        context.console.write_line(name)
    if not names:
        context.console.write_line("No packages found.")
        return ExitCode.NOTHING_TO_DO
    return ExitCode.SUCCESS


def _list_package_info(args, context: CommandContext) -> ExitCode:
    if not args.parameter:
        context.console.error("package name needs to be provided.")
        return ExitCode.USAGE_ERROR

    versions = context.packages.list_toolchain_packages(args.parameter)
    for version in versions:
        context.console.write_line(version.summary())
    if not versions:
        context.console.write_line(f"No versions found for {args.parameter}.")
        return ExitCode.NOTHING_TO_DO
    return ExitCode.SUCCESS


def _list_toolchains(args, context: CommandContext) -> ExitCode:
    listed = 0
    for name in context.packages.list_toolchains():
        versions = context.packages.list_toolchain_packages(name)
        if versions:
            context.console.write_line(versions[0].summary())
            listed += 1
    if not listed:
        context.console.write_line("No toolchains found.")
        return ExitCode.NOTHING_TO_DO
    return ExitCode.SUCCESS


def _list_installed(args, context: CommandContext) -> ExitCode:
    packages = context.packages.list_installed()
    if args.parameter:
        packages = [p for p in packages if p.name == args.parameter]
    for package in packages:
        context.console.write_line(
            f"{package.name}, {package.version}, {format_size(package.size)}, {package.path}"
        )
    if not packages:
        context.console.write_line("No packages installed.")
        return ExitCode.NOTHING_TO_DO
    return ExitCode.SUCCESS


LISTERS = {
    "packages": _list_packages,
    "package-info": _list_package_info,
    "toolchains": _list_toolchains,
    "installed": _list_installed,
}


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the list command.

    Returns:
        SUCCESS if anything was listed, NOTHING_TO_DO for an empty listing
    """
    logger.debug(f"Listing {args.list_command} from {context.config.registry_url}")
    return LISTERS[args.list_command](args, context)
