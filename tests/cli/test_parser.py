"""
Tests for CLI argument parsing.
"""

import pytest

from solutionkit.cli import CLI, ExitCode, exit_code_for
from solutionkit.core.console import BufferConsole
from solutionkit.core.exceptions import (
    CircularReferenceError,
    OperationCancelled,
    ProjectNotFoundError,
    RegistryTransportError,
    SolutionKitError,
    SolutionNotFoundError,
    ToolchainNotAvailableError,
)


@pytest.fixture
def cli():
    return CLI(console=BufferConsole())


class TestParseArgs:
    """Test argument parsing for each command."""

    def test_build_arguments(self, cli):
        args = cli.parse_args(
            ["build", "-s", "demo.solution.yaml", "-p", "app", "-j", "4", "-l", "release", "-D", "A=1", "B"]
        )

        assert args.command == "build"
        assert args.solution == "demo.solution.yaml"
        assert args.project == "app"
        assert args.jobs == 4
        assert args.label == "release"
        assert args.defines == ["A=1", "B"]

    def test_build_defaults(self, cli):
        args = cli.parse_args(["build", "--solution", "demo.solution.yaml"])

        assert args.project is None
        assert args.jobs is None
        assert args.label == ""
        assert args.defines == []

    @pytest.mark.parametrize("jobs", ["0", "-3", "many"])
    def test_invalid_jobs_is_usage_error(self, cli, jobs, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.run(["build", "-s", "demo.solution.yaml", "-j", jobs])

        assert exc_info.value.code == ExitCode.USAGE_ERROR
        assert "--jobs" in capsys.readouterr().err

    def test_solution_is_required(self, cli):
        with pytest.raises(SystemExit):
            cli.parse_args(["build"])

    def test_list_arguments(self, cli):
        args = cli.parse_args(["list", "-c", "package-info", "-p", "gcc-arm"])

        assert args.list_command == "package-info"
        assert args.parameter == "gcc-arm"

    def test_list_rejects_unknown_listing(self, cli):
        with pytest.raises(SystemExit):
            cli.parse_args(["list", "-c", "everything"])

    def test_install_arguments(self, cli):
        args = cli.parse_args(["install", "-n", "gcc-arm", "--version", "13.2.1"])

        assert args.package_name == "gcc-arm"
        assert args.package_version == "13.2.1"

    def test_uninstall_defaults_to_all_versions(self, cli):
        args = cli.parse_args(["uninstall", "--package-name", "gcc-arm"])

        assert args.package_version == ""

    def test_add_reference_arguments(self, cli):
        args = cli.parse_args(
            ["add-reference", "-s", "d.solution.yaml", "-p", "app", "-n", "fmt", "-u", "https://x/fmt.git", "-r", "10.2.1"]
        )

        assert (args.name, args.git_url, args.revision) == ("fmt", "https://x/fmt.git", "10.2.1")

    def test_create_arguments(self, cli):
        args = cli.parse_args(["create", "-p", "mathlib", "-k", "static-library", "-t", "clang"])

        assert args.solution is None
        assert args.kind == "static-library"
        assert args.toolchain == "clang"

    def test_global_options(self, cli):
        args = cli.parse_args(["-v", "--timeout", "2.5", "clean", "-s", "d.solution.yaml"])

        assert args.verbose
        assert args.timeout == 2.5


class TestRun:
    def test_no_command_prints_help(self, cli, capsys):
        assert cli.run([]) == ExitCode.USAGE_ERROR
        assert "usage: solutionkit" in capsys.readouterr().out

    def test_version(self, cli, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        assert "SolutionKit" in capsys.readouterr().out


class TestExitCodeFor:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (OperationCancelled("stop"), ExitCode.CANCELLED),
            (KeyboardInterrupt(), ExitCode.CANCELLED),
            (SolutionNotFoundError("x.solution.yaml"), ExitCode.NOT_FOUND),
            (ProjectNotFoundError("app"), ExitCode.NOT_FOUND),
            (CircularReferenceError(["a", "b", "a"]), ExitCode.REFERENCE_ERROR),
            (ToolchainNotAvailableError("msvc"), ExitCode.UNSUPPORTED),
            (RegistryTransportError("down"), ExitCode.REGISTRY_FAILED),
            (SolutionKitError("other"), ExitCode.ERROR),
        ],
    )
    def test_mapping(self, error, expected):
        assert exit_code_for(error) is expected
