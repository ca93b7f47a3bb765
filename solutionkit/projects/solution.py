"""
Solution model: a named collection of projects with a startup project.

Loading is two-phase. load_metadata() parses the solution file only;
load_projects() loads every project, binds toolchains and resolves local
references. Commands that only need names (list, install) can stop after
the first phase.

Example solution file:

    name: demo
    startup_project: app
    projects:
      - app/app.project.yaml
      - corelib/corelib.project.yaml
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

import yaml

from solutionkit.core.exceptions import (
    CircularReferenceError,
    ProjectNotFoundError,
    SolutionLoadError,
    SolutionNotFoundError,
)
from solutionkit.core.filesystem import atomic_write
from solutionkit.core.registry import PluginRegistry
from solutionkit.projects.project import Project

logger = logging.getLogger(__name__)

SOLUTION_FILE_SUFFIX = ".solution.yaml"


class Solution:
    """
    Root of the model: owns projects in load order.

    Attributes:
        file: Absolute path of the solution file
        name: Solution name (defaults to the file stem)
        projects: Loaded projects, in the order listed in the file
        startup_project: Startup project, if any
    """

    def __init__(self, file: Path, name: Optional[str] = None):
        self.file = Path(file)
        self.name = name or self.file.name.split(".")[0]
        self.projects: List[Project] = []
        self.startup_project: Optional[Project] = None
        self.startup_project_name: str = ""
        self.project_paths: List[str] = []
        self.metadata_loaded = False
        self.projects_loaded = False

    def __repr__(self) -> str:
        return f"Solution({self.name!r}, {str(self.file)!r})"

    @property
    def directory(self) -> Path:
        return self.file.parent

    # ========================================================================
    # Loading
    # ========================================================================

    def load_metadata(self) -> None:
        """
        Parse the solution file.

        Raises:
            SolutionLoadError: If the file is not a valid solution
        """
        try:
            with open(self.file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SolutionLoadError(f"Invalid YAML in {self.file}: {e}") from e
        except OSError as e:
            raise SolutionLoadError(f"Could not read {self.file}: {e}") from e

        if not isinstance(data, dict):
            raise SolutionLoadError(f"Solution file {self.file} must be a mapping")

        projects = data.get("projects") or []
        if not isinstance(projects, list):
            raise SolutionLoadError("'projects' must be a list of project file paths")

        paths = []
        for entry in projects:
            if isinstance(entry, dict):
                entry = entry.get("path")
            if not isinstance(entry, str) or not entry:
                raise SolutionLoadError(f"Invalid project entry in {self.file}: {entry!r}")
            paths.append(entry)

        self.name = str(data.get("name") or self.name)
        self.startup_project_name = str(data.get("startup_project") or "")
        self.project_paths = paths
        self.metadata_loaded = True
        logger.debug(f"Loaded solution metadata {self.name} ({len(paths)} projects)")

    def load_projects(self, registry: Optional[PluginRegistry] = None) -> None:
        """
        Load every project and resolve local references.

        Raises:
            SolutionLoadError: Metadata not loaded, duplicate project names or
                unknown startup project
            ProjectLoadError: If a project file cannot be loaded
            CircularReferenceError: If local references form a cycle
        """
        if not self.metadata_loaded:
            raise SolutionLoadError("Solution metadata must be loaded before projects")

        projects = []
        seen: Set[str] = set()
        for relative in self.project_paths:
            project = Project.load(self.directory / relative, registry)
            if project.name in seen:
                raise SolutionLoadError(f"Duplicate project name in solution: {project.name}")
            seen.add(project.name)
            projects.append(project)

        self.projects = projects

        self.startup_project = None
        if self.startup_project_name:
            try:
                self.startup_project = self.find_project(self.startup_project_name)
            except ProjectNotFoundError:
                raise SolutionLoadError(
                    f"Startup project {self.startup_project_name} is not part of the solution"
                )

        self.resolve_references()
        self.projects_loaded = True
        logger.info(f"Loaded solution {self.name} with {len(self.projects)} projects")

    def load(self, registry: Optional[PluginRegistry] = None) -> "Solution":
        """Load metadata and projects. Returns self for chaining."""
        self.load_metadata()
        self.load_projects(registry)
        return self

    # ========================================================================
    # Lookup
    # ========================================================================

    def find_project(self, name: str) -> Project:
        """
        Find a project by name.

        Raises:
            ProjectNotFoundError: If no project has that name
        """
        for project in self.projects:
            if project.name == name:
                return project
        raise ProjectNotFoundError(name)

    def has_project(self, name: str) -> bool:
        return any(project.name == name for project in self.projects)

    # ========================================================================
    # References
    # ========================================================================

    def local_references_of(self, project: Project) -> List[Project]:
        """Resolve a project's local references, skipping missing targets."""
        resolved = []
        for reference in project.unloaded_references:
            if not reference.is_local:
                continue
            if not self.has_project(reference.name):
                logger.warning(
                    f"Project {project.name} references unknown local project "
                    f"{reference.name}, ignoring"
                )
                continue
            resolved.append(self.find_project(reference.name))
        return resolved

    def reference_path(self, source: str, target: str) -> Optional[List[str]]:
        """
        Find a chain of local references leading from `source` to `target`.

        Returns:
            Project names from source to target inclusive, or None
        """
        visited: Set[str] = set()

        def walk(name: str, trail: List[str]) -> Optional[List[str]]:
            if name == target:
                return trail + [name]
            if name in visited or not self.has_project(name):
                return None
            visited.add(name)
            for reference in self.find_project(name).unloaded_references:
                if reference.is_local:
                    found = walk(reference.name, trail + [name])
                    if found:
                        return found
            return None

        return walk(source, [])

    def resolve_references(self) -> None:
        """
        Resolve local references of every project into Project objects.

        Raises:
            CircularReferenceError: If the local reference graph has a cycle
        """
        done: Set[str] = set()

        def visit(project: Project, trail: List[str]) -> None:
            if project.name in done:
                return
            if project.name in trail:
                start = trail.index(project.name)
                raise CircularReferenceError(trail[start:] + [project.name])

            trail.append(project.name)
            references = self.local_references_of(project)
            for reference in references:
                visit(reference, trail)
            trail.pop()

            project.references = references
            done.add(project.name)

        for project in self.projects:
            visit(project, [])

    # ========================================================================
    # Mutation
    # ========================================================================

    def add_project(self, project: Project) -> None:
        """Add a project to the in-memory solution."""
        if self.has_project(project.name):
            raise SolutionLoadError(f"Project {project.name} already exists in the solution")
        self.projects.append(project)
        self.project_paths.append(self._relative_project_path(project.file))
        project.references = self.local_references_of(project)

    def remove_project(self, project: Project) -> None:
        self.projects.remove(project)
        relative = self._relative_project_path(project.file)
        if relative in self.project_paths:
            self.project_paths.remove(relative)

    def _relative_project_path(self, file: Path) -> str:
        return Path(os.path.relpath(Path(file).resolve(), self.directory.resolve())).as_posix()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.startup_project_name:
            data["startup_project"] = self.startup_project_name
        data["projects"] = list(self.project_paths)
        return data

    def save(self) -> None:
        content = yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)
        atomic_write(self.file, content)
        logger.info(f"Saved solution {self.name} to {self.file}")


def load_solution(path: Union[str, Path], cwd: Optional[Path] = None) -> Solution:
    """
    Locate a solution file without loading it.

    Args:
        path: Solution file path, relative to `cwd` unless absolute
        cwd: Base directory (defaults to the current working directory)

    Raises:
        SolutionNotFoundError: If the file does not exist
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    file = base / path
    if not file.is_file():
        raise SolutionNotFoundError(file)
    return Solution(file.resolve())


def open_solution(
    path: Union[str, Path],
    registry: Optional[PluginRegistry] = None,
    cwd: Optional[Path] = None,
) -> Solution:
    """Locate and fully load a solution."""
    return load_solution(path, cwd).load(registry)


__all__ = [
    "SOLUTION_FILE_SUFFIX",
    "Solution",
    "load_solution",
    "open_solution",
]
