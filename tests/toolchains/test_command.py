"""
Tests for the external command toolchain.
"""

import sys
from unittest.mock import patch

import pytest

from solutionkit.core.console import BufferConsole
from solutionkit.core.process import ProcessResult
from solutionkit.projects import Project
from solutionkit.toolchains import CommandToolchain

OK = ProcessResult(returncode=0, output="")


@pytest.fixture
def project(temp_dir):
    directory = temp_dir / "app"
    directory.mkdir()
    return Project("app", directory / "app.project.yaml")


class TestCommandToolchain:
    @patch("solutionkit.toolchains.command.run_process", return_value=OK)
    def test_build_runs_shell_command_with_environment(self, mock_run, project):
        toolchain = CommandToolchain({"build_command": "make all"})
        console = BufferConsole()

        assert toolchain.build(console, project, label="release", defines=["A=1", "B"])

        command = mock_run.call_args.args[0]
        kwargs = mock_run.call_args.kwargs
        assert command == "make all"
        assert kwargs["shell"] is True
        assert kwargs["cwd"] == project.directory
        env = kwargs["env"]
        assert env["SOLUTIONKIT_PROJECT"] == "app"
        assert env["SOLUTIONKIT_LABEL"] == "release"
        assert env["SOLUTIONKIT_DEFINES"] == "A=1 B"
        assert env["SOLUTIONKIT_BUILD_DIR"] == str(project.directory / "build" / "release")
        assert "Build succeeded: app" in console.text

    @patch("solutionkit.toolchains.command.run_process", return_value=OK)
    def test_list_command_runs_without_shell(self, mock_run, project):
        toolchain = CommandToolchain({"build_command": ["ninja", "-C", "out"]})

        toolchain.build(BufferConsole(), project)

        assert mock_run.call_args.kwargs["shell"] is False
        assert mock_run.call_args.kwargs["env"]["SOLUTIONKIT_LABEL"] == "default"

    @patch("solutionkit.toolchains.command.run_process")
    def test_missing_build_command(self, mock_run, project):
        console = BufferConsole()

        assert not CommandToolchain().build(console, project)
        assert "no build_command configured" in console.text
        mock_run.assert_not_called()

    @patch(
        "solutionkit.toolchains.command.run_process",
        return_value=ProcessResult(returncode=2, output=""),
    )
    def test_nonzero_exit(self, mock_run, project):
        console = BufferConsole()

        assert not CommandToolchain({"build_command": "false"}).build(console, project)
        assert "Command exited with code 2" in console.text
        assert "Build failed: app" in console.text

    def test_command_not_found(self, project):
        console = BufferConsole()
        toolchain = CommandToolchain({"build_command": ["definitely-not-a-real-tool-xyz"]})

        assert not toolchain.build(console, project)
        assert "Command not found: definitely-not-a-real-tool-xyz" in console.text

    def test_real_process_output_is_streamed(self, project):
        toolchain = CommandToolchain(
            {
                "build_command": [
                    sys.executable,
                    "-c",
                    "import os; print(os.environ['SOLUTIONKIT_PROJECT'])",
                ]
            }
        )
        console = BufferConsole()

        assert toolchain.build(console, project)
        assert "app" in console.lines

    @patch("solutionkit.toolchains.command.run_process", return_value=OK)
    def test_clean(self, mock_run, project):
        console = BufferConsole()

        CommandToolchain({"clean_command": "make clean"}).clean(console, project)

        assert mock_run.call_args.args[0] == "make clean"
        assert "Cleaned: app" in console.text

    @patch("solutionkit.toolchains.command.run_process")
    def test_clean_not_configured(self, mock_run, project):
        console = BufferConsole()

        CommandToolchain().clean(console, project)

        assert "no clean_command configured" in console.text
        mock_run.assert_not_called()

    def test_output_path_template(self, project):
        toolchain = CommandToolchain({"output": "out/{label}/{project}.bin"})

        assert toolchain.output_path(project, "debug") == project.directory / "out" / "debug" / "app.bin"
        assert CommandToolchain().output_path(project) == project.directory / "build" / "default" / "app"
