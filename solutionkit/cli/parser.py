"""
SolutionKit CLI argument parser.

This module implements the command-line interface for SolutionKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode, exit_code_for
from solutionkit.config import load_config
from solutionkit.core.cancellation import CancellationToken
from solutionkit.core.console import Console
from solutionkit.core.exceptions import SolutionKitError
from solutionkit.core.registry import PluginRegistry
from solutionkit.packages import PackageRegistryClient
from solutionkit.projects import PROJECT_KINDS

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("solutionkit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

COMMAND_MODULES = {
    "build": "solutionkit.cli.commands.build",
    "clean": "solutionkit.cli.commands.clean",
    "test": "solutionkit.cli.commands.test",
    "list": "solutionkit.cli.commands.list",
    "install": "solutionkit.cli.commands.install",
    "uninstall": "solutionkit.cli.commands.uninstall",
    "add": "solutionkit.cli.commands.add",
    "remove": "solutionkit.cli.commands.remove",
    "add-reference": "solutionkit.cli.commands.add_reference",
    "remove-reference": "solutionkit.cli.commands.remove_reference",
    "create": "solutionkit.cli.commands.create",
}


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


class CLI:
    """SolutionKit command-line interface."""

    def __init__(
        self,
        plugins: Optional[PluginRegistry] = None,
        console: Optional[Console] = None,
        cwd: Optional[Path] = None,
        packages: Optional[PackageRegistryClient] = None,
    ):
        """
        Initialize CLI with argument parser.

        Args:
            plugins: Populated plugin registry (see initialize_core)
            console: Output sink (default: stdout)
            cwd: Directory relative paths resolve against (default: cwd)
            packages: Pre-built package registry client
        """
        self.plugins = plugins if plugins is not None else PluginRegistry()
        self.console = console if console is not None else Console()
        self.cwd = cwd
        self.packages = packages
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="solutionkit",
            description="SolutionKit - build, test and package multi-project C/C++ solutions",
            epilog='Use "solutionkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"SolutionKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./solutionkit.yaml)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            metavar="SECONDS",
            help="Cancel the command if it runs longer than this",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_build_command(subparsers)
        self._add_clean_command(subparsers)
        self._add_test_command(subparsers)
        self._add_list_command(subparsers)
        self._add_install_command(subparsers)
        self._add_uninstall_command(subparsers)
        self._add_file_commands(subparsers)
        self._add_reference_commands(subparsers)
        self._add_create_command(subparsers)

        return parser

    # ========================================================================
    # Shared option groups
    # ========================================================================

    @staticmethod
    def _add_solution_options(parser, solution_required: bool = True):
        parser.add_argument(
            "--solution",
            "-s",
            required=solution_required,
            metavar="PATH",
            help="Solution file, relative to the current directory",
        )
        parser.add_argument(
            "--project",
            "-p",
            metavar="NAME",
            help="Project to act on (default: the solution's startup project)",
        )

    @staticmethod
    def _add_build_options(parser):
        parser.add_argument(
            "--jobs",
            "-j",
            type=positive_int,
            metavar="N",
            help="Number of parallel compile jobs",
        )
        parser.add_argument(
            "--label",
            "-l",
            default="",
            metavar="LABEL",
            help="Build variant label (selects the output directory)",
        )
        parser.add_argument(
            "--defines",
            "-D",
            nargs="+",
            default=[],
            metavar="DEFINE",
            help="Preprocessor definitions (NAME or NAME=VALUE)",
        )

    # ========================================================================
    # Subcommands
    # ========================================================================

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Build a project",
            description="Build a project and its local references",
        )
        self._add_solution_options(parser)
        self._add_build_options(parser)

    def _add_clean_command(self, subparsers):
        """Add 'clean' subcommand."""
        parser = subparsers.add_parser(
            "clean",
            help="Clean a project",
            description="Remove the build outputs of a project",
        )
        self._add_solution_options(parser)

    def _add_test_command(self, subparsers):
        """Add 'test' subcommand."""
        parser = subparsers.add_parser(
            "test",
            help="Build and run all tests of a solution",
            description="Build every project with a test framework and run its tests",
        )
        self._add_solution_options(parser)
        self._add_build_options(parser)

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        parser = subparsers.add_parser(
            "list",
            help="List registry packages",
            description="Query the package registry or the local package cache",
        )
        parser.add_argument(
            "--command",
            "-c",
            dest="list_command",
            required=True,
            choices=["packages", "package-info", "toolchains", "installed"],
            help="What to list",
        )
        parser.add_argument(
            "--parameter",
            "-p",
            metavar="NAME",
            help="Package name (required for package-info)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a package",
            description="Install a package version unless it is already installed",
        )
        self._add_package_options(parser)

    def _add_uninstall_command(self, subparsers):
        """Add 'uninstall' subcommand."""
        parser = subparsers.add_parser(
            "uninstall",
            help="Uninstall a package",
            description="Uninstall one version of a package, or all versions",
        )
        self._add_package_options(parser)

    @staticmethod
    def _add_package_options(parser):
        parser.add_argument(
            "--package-name",
            "-n",
            required=True,
            metavar="NAME",
            help="Package name",
        )
        parser.add_argument(
            "--version",
            dest="package_version",
            default="",
            metavar="VERSION",
            help="Package version (default: latest / all installed)",
        )

    def _add_file_commands(self, subparsers):
        """Add 'add' and 'remove' subcommands."""
        for name, help_text in (
            ("add", "Add a file to a project"),
            ("remove", "Remove a file from a project"),
        ):
            parser = subparsers.add_parser(name, help=help_text, description=help_text)
            self._add_solution_options(parser)
            parser.add_argument(
                "--file",
                "-f",
                required=True,
                metavar="PATH",
                help="File path, relative to the current directory",
            )

    def _add_reference_commands(self, subparsers):
        """Add 'add-reference' and 'remove-reference' subcommands."""
        parser = subparsers.add_parser(
            "add-reference",
            help="Add or update a project reference",
            description="Add a reference to a local project or a remote git repository",
        )
        self._add_solution_options(parser)
        parser.add_argument(
            "--name", "-n", required=True, metavar="NAME", help="Referenced project name"
        )
        parser.add_argument(
            "--git-url",
            "-u",
            default="",
            metavar="URL",
            help="Remote repository (omit for a local project)",
        )
        parser.add_argument(
            "--revision", "-r", default="", metavar="REV", help="Pinned revision"
        )

        parser = subparsers.add_parser(
            "remove-reference",
            help="Remove a project reference",
            description="Remove a reference from a project",
        )
        self._add_solution_options(parser)
        parser.add_argument(
            "--name", "-n", required=True, metavar="NAME", help="Reference name"
        )

    def _add_create_command(self, subparsers):
        """Add 'create' subcommand."""
        parser = subparsers.add_parser(
            "create",
            help="Create a new project",
            description="Create a project directory with a starter source file",
        )
        self._add_solution_options(parser, solution_required=False)
        parser.add_argument(
            "--kind",
            "-k",
            choices=PROJECT_KINDS,
            default="executable",
            help="Project kind (default: executable)",
        )
        parser.add_argument(
            "--toolchain",
            "-t",
            default="gcc",
            metavar="NAME",
            help="Toolchain for the new project (default: gcc)",
        )

    # ========================================================================
    # Execution
    # ========================================================================

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, see ExitCode)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return ExitCode.USAGE_ERROR

        token = CancellationToken(timeout=parsed_args.timeout)

        try:
            context = self._create_context(parsed_args, token)
            return self._dispatch_command(parsed_args, context)
        except KeyboardInterrupt:
            token.cancel()
            logger.info("Operation cancelled by user")
            return ExitCode.CANCELLED
        except SolutionKitError as e:
            self.console.error(str(e))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return exit_code_for(e)
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return ExitCode.ERROR

    def _create_context(self, args, token: CancellationToken) -> CommandContext:
        cwd = self.cwd if self.cwd is not None else Path.cwd()
        config = load_config(config_path=args.config, search_dir=cwd)
        return CommandContext(
            console=self.console,
            plugins=self.plugins,
            config=config,
            cancel_token=token,
            cwd=cwd,
            packages=self.packages,
        )

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args, context: CommandContext) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field
            context: Dependencies passed to the handler

        Returns:
            Exit code from command handler
        """
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return ExitCode.USAGE_ERROR

        module = importlib.import_module(module_name)
        return int(module.run(args, context))


def main():
    """Main entry point for CLI."""
    # Register built-in toolchains and test frameworks once per process
    from solutionkit.core.initialization import initialize_core

    plugins = initialize_core()

    cli = CLI(plugins=plugins)
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
