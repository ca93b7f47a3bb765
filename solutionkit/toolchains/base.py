"""
Toolchain interface for SolutionKit.

A toolchain turns a project into an artifact. Builds are blocking and report
success as a bool; detailed diagnostics go to the console.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from solutionkit.core.cancellation import CancellationToken, ensure_token
from solutionkit.core.console import Console

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "default"


class Toolchain(ABC):
    """
    Abstract base class for toolchains.

    Subclasses are created by the plugin registry from the `settings`
    mapping in the project file.
    """

    name = "toolchain"

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.settings: Dict[str, Any] = dict(settings or {})

    def build(
        self,
        console: Console,
        project,
        label: str = "",
        defines: Optional[List[str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> bool:
        """
        Build a project after its local references.

        Args:
            console: Sink for compiler output
            project: Project to build
            label: Build variant, selects the output directory
            defines: Preprocessor definitions (NAME or NAME=VALUE)
            cancel_token: Cancellation handle

        Returns:
            True if the project and all of its references built
        """
        return self.build_tree(console, project, label, defines or [], ensure_token(cancel_token), {})

    def build_tree(
        self,
        console: Console,
        project,
        label: str,
        defines: List[str],
        token: CancellationToken,
        built: Dict[str, bool],
    ) -> bool:
        """
        Build `project` and its references, each at most once per `built`.

        `built` maps project names to their build result within one build
        invocation, so a project shared by several references is built once.
        """
        if project.name in built:
            return built[project.name]

        token.raise_if_cancelled(f"Build of {project.name}")

        for reference in project.references:
            toolchain = reference.toolchain
            if toolchain is None:
                console.error(f"Referenced project {reference.name} has no toolchain.")
                built[project.name] = False
                return False
            if not toolchain.build_tree(console, reference, label, defines, token, built):
                console.error(f"Referenced project {reference.name} failed to build.")
                built[project.name] = False
                return False

        logger.debug(f"Building {project.name} with {self!r}")
        result = self.build_project(console, project, label, defines, token)
        built[project.name] = result
        return result

    @abstractmethod
    def build_project(
        self,
        console: Console,
        project,
        label: str,
        defines: List[str],
        token: CancellationToken,
    ) -> bool:
        """Build a single project whose references are already built."""
        pass

    @abstractmethod
    def clean(
        self,
        console: Console,
        project,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        """
        Remove build outputs of a project.

        Failures are written to the console, not raised.
        """
        pass

    def set_jobs(self, jobs: int) -> bool:
        """
        Set build parallelism.

        Returns:
            True if the toolchain honours the value
        """
        return False

    def output_path(self, project, label: str = "") -> Path:
        """Location of the artifact produced by build()."""
        return self.build_directory(project, label) / project.name

    def build_directory(self, project, label: str = "") -> Path:
        return project.directory / "build" / (label or DEFAULT_LABEL)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


__all__ = ["DEFAULT_LABEL", "Toolchain"]
