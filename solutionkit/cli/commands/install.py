"""
Install command implementation.

Ensures a package version is present in the local package cache.
"""

import logging

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.packages import PackageEnsureStatus

logger = logging.getLogger(__name__)

STATUS_EXIT_CODES = {
    PackageEnsureStatus.FOUND: ExitCode.SUCCESS,
    PackageEnsureStatus.INSTALLED: ExitCode.SUCCESS,
    PackageEnsureStatus.NOT_FOUND: ExitCode.NOT_FOUND,
    PackageEnsureStatus.FAILED: ExitCode.REGISTRY_FAILED,
}


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the install command.

    Returns:
        SUCCESS for FOUND or INSTALLED, NOT_FOUND or REGISTRY_FAILED otherwise
    """
    status = context.packages.ensure_package(
        args.package_name,
        args.package_version,
        context.console,
        context.cancel_token,
    )
    logger.debug(f"ensure_package({args.package_name}, {args.package_version!r}) -> {status}")
    return STATUS_EXIT_CODES[status]
