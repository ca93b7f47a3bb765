"""
Toolchain that delegates to arbitrary external commands.

Useful for projects built by make, ninja or a vendor script. Commands are
run in the project directory with these environment variables set:

    SOLUTIONKIT_PROJECT     project name
    SOLUTIONKIT_LABEL       build label ("default" if empty)
    SOLUTIONKIT_DEFINES     space separated defines
    SOLUTIONKIT_BUILD_DIR   <project>/build/<label>

Example project settings:

    toolchain:
      name: command
      settings:
        build_command: make -j4 BUILD_DIR=$SOLUTIONKIT_BUILD_DIR
        clean_command: make clean
        output: build/{label}/app
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from solutionkit.core.cancellation import CancellationToken, ensure_token
from solutionkit.core.console import Console
from solutionkit.core.process import run_process
from solutionkit.toolchains.base import DEFAULT_LABEL, Toolchain

logger = logging.getLogger(__name__)


class CommandToolchain(Toolchain):
    """Runs configured shell commands to build and clean a project."""

    name = "command"

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__(settings)
        self.build_command: Union[str, List[str], None] = self.settings.get("build_command")
        self.clean_command: Union[str, List[str], None] = self.settings.get("clean_command")
        self.output: Optional[str] = self.settings.get("output")

    def output_path(self, project, label: str = "") -> Path:
        if self.output:
            return project.directory / self.output.format(
                label=label or DEFAULT_LABEL, project=project.name
            )
        return super().output_path(project, label)

    def _environment(self, project, label: str, defines: List[str]) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(
            {
                "SOLUTIONKIT_PROJECT": project.name,
                "SOLUTIONKIT_LABEL": label or DEFAULT_LABEL,
                "SOLUTIONKIT_DEFINES": " ".join(defines),
                "SOLUTIONKIT_BUILD_DIR": str(self.build_directory(project, label)),
            }
        )
        return env

    def _execute(
        self,
        console: Console,
        project,
        command: Union[str, List[str]],
        env: Dict[str, str],
        token: CancellationToken,
    ) -> bool:
        shell = isinstance(command, str)
        try:
            result = run_process(
                command,
                cwd=project.directory,
                console=console,
                cancel_token=token,
                env=env,
                shell=shell,
            )
        except FileNotFoundError:
            console.error(f"Command not found: {command if shell else command[0]}")
            return False

        if not result.ok:
            console.error(f"Command exited with code {result.returncode}")
        return result.ok

    def build_project(
        self,
        console: Console,
        project,
        label: str,
        defines: List[str],
        token: CancellationToken,
    ) -> bool:
        if not self.build_command:
            console.error(f"Project {project.name} has no build_command configured.")
            return False

        console.write_line(f"Building: {project.name}")
        ok = self._execute(
            console, project, self.build_command, self._environment(project, label, defines), token
        )
        if ok:
            console.success(f"Build succeeded: {project.name}")
        else:
            console.error(f"Build failed: {project.name}")
        return ok

    def clean(
        self,
        console: Console,
        project,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        if not self.clean_command:
            console.error(f"Project {project.name} has no clean_command configured.")
            return

        console.write_line(f"Cleaning: {project.name}")
        env = self._environment(project, "", [])
        if self._execute(console, project, self.clean_command, env, ensure_token(cancel_token)):
            console.success(f"Cleaned: {project.name}")


__all__ = ["CommandToolchain"]
