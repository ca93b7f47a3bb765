"""
Project model: items, references, toolchain and test framework bindings.

A project is backed by a YAML file. Structural changes (files, references)
only live in memory until Project.save() is called.

Example project file:

    name: app
    kind: executable
    toolchain:
      name: gcc
      settings: {cxx: g++-13}
    test_framework: catch
    items: [src/main.cpp, include/app.h]
    include_dirs: [include]
    references:
      - name: corelib
      - name: fmt
        git_url: https://github.com/fmtlib/fmt.git
        revision: 10.2.1
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import yaml

from solutionkit.core.exceptions import (
    CircularReferenceError,
    ProjectItemError,
    ProjectLoadError,
    ProjectNotFoundError,
    ProjectReferenceError,
    ReferenceNotFoundError,
    SolutionKitError,
)
from solutionkit.core.filesystem import atomic_write, relative_item_path
from solutionkit.core.registry import PluginRegistry

if TYPE_CHECKING:
    from solutionkit.projects.solution import Solution

logger = logging.getLogger(__name__)

PROJECT_FILE_SUFFIX = ".project.yaml"
PROJECT_KINDS = ("executable", "static-library")
SOURCE_SUFFIXES = {".c", ".cc", ".cpp", ".cxx", ".c++", ".s", ".S", ".asm"}
HEADER_SUFFIXES = {".h", ".hh", ".hpp", ".hxx", ".inl"}


@dataclass(frozen=True)
class Reference:
    """
    Dependency edge from one project to another.

    An empty git_url means a local sibling project in the same solution.
    """

    name: str
    git_url: str = ""
    revision: str = ""

    @property
    def is_local(self) -> bool:
        return not self.git_url

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name}
        if self.git_url:
            data["git_url"] = self.git_url
        if self.revision:
            data["revision"] = self.revision
        return data

    @classmethod
    def from_dict(cls, data: Union[str, Dict[str, Any]]) -> "Reference":
        if isinstance(data, str):
            return cls(name=data)
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError(f"Invalid reference entry: {data!r}")
        return cls(
            name=str(data["name"]),
            git_url=str(data.get("git_url") or ""),
            revision=str(data.get("revision") or ""),
        )


@dataclass(frozen=True)
class ProjectItem:
    """A file belonging to a project, relative to the project directory."""

    path: str

    @property
    def suffix(self) -> str:
        return PurePosixPath(self.path).suffix

    @property
    def is_source(self) -> bool:
        return self.suffix in SOURCE_SUFFIXES

    @property
    def is_header(self) -> bool:
        return self.suffix.lower() in HEADER_SUFFIXES


@dataclass(frozen=True)
class SourceFile(ProjectItem):
    """A compilable project item."""

    @property
    def language(self) -> str:
        if self.suffix == ".c":
            return "c"
        if self.suffix in (".s", ".S", ".asm"):
            return "asm"
        return "c++"


def make_item(path: str) -> ProjectItem:
    """Create a SourceFile for compilable paths, a plain ProjectItem otherwise."""
    item = ProjectItem(path)
    return SourceFile(path) if item.is_source else item


class Project:
    """
    A buildable unit of a solution.

    Attributes:
        name: Unique name within the solution
        file: Backing project file
        kind: 'executable' or 'static-library'
        items: Ordered project files
        toolchain: Toolchain instance or None
        test_framework: TestFramework instance or None
        unloaded_references: Serialized references, in file order
        references: Resolved local references (Project objects)
    """

    def __init__(
        self,
        name: str,
        file: Path,
        kind: str = "executable",
        items: Optional[List[ProjectItem]] = None,
        toolchain=None,
        toolchain_name: str = "",
        toolchain_settings: Optional[Dict[str, Any]] = None,
        test_framework=None,
        test_framework_name: str = "",
        test_framework_settings: Optional[Dict[str, Any]] = None,
        unloaded_references: Optional[List[Reference]] = None,
        include_dirs: Optional[List[str]] = None,
        public_include_dirs: Optional[List[str]] = None,
        compiler_flags: Optional[List[str]] = None,
        linker_flags: Optional[List[str]] = None,
        libraries: Optional[List[str]] = None,
    ):
        if kind not in PROJECT_KINDS:
            raise ValueError(f"Unknown project kind '{kind}', expected one of {PROJECT_KINDS}")

        self.name = name
        self.file = Path(file)
        self.kind = kind
        self.items: List[ProjectItem] = list(items or [])
        self.toolchain = toolchain
        self.toolchain_name = toolchain_name
        self.toolchain_settings: Dict[str, Any] = dict(toolchain_settings or {})
        self.test_framework = test_framework
        self.test_framework_name = test_framework_name
        self.test_framework_settings: Dict[str, Any] = dict(test_framework_settings or {})
        self.unloaded_references: List[Reference] = list(unloaded_references or [])
        self.references: List["Project"] = []
        self.include_dirs: List[str] = list(include_dirs or [])
        self.public_include_dirs: List[str] = list(public_include_dirs or [])
        self.compiler_flags: List[str] = list(compiler_flags or [])
        self.linker_flags: List[str] = list(linker_flags or [])
        self.libraries: List[str] = list(libraries or [])

    def __repr__(self) -> str:
        return f"Project({self.name!r}, {str(self.file)!r})"

    @property
    def directory(self) -> Path:
        return self.file.parent

    @property
    def source_files(self) -> List[SourceFile]:
        return [item for item in self.items if isinstance(item, SourceFile)]

    @property
    def headers(self) -> List[ProjectItem]:
        return [item for item in self.items if item.is_header]

    # ========================================================================
    # Serialization
    # ========================================================================

    @classmethod
    def load(cls, file: Path, registry: Optional[PluginRegistry] = None) -> "Project":
        """
        Load a project file.

        Args:
            file: Project file path
            registry: Registry used to instantiate the toolchain and test
                framework; bindings are left empty if None

        Raises:
            ProjectLoadError: If the file is missing, malformed or names an
                unknown toolchain/test framework
        """
        file = Path(file)
        if not file.is_file():
            raise ProjectLoadError(f"Project file not found: {file}")

        try:
            with open(file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProjectLoadError(f"Invalid YAML in {file}: {e}") from e
        except OSError as e:
            raise ProjectLoadError(f"Could not read {file}: {e}") from e

        if not isinstance(data, dict) or not data.get("name"):
            raise ProjectLoadError(f"Project file {file} must define a 'name'")

        toolchain_section = data.get("toolchain") or {}
        if isinstance(toolchain_section, str):
            toolchain_section = {"name": toolchain_section}
        framework_section = data.get("test_framework") or {}
        if isinstance(framework_section, str):
            framework_section = {"name": framework_section}

        try:
            project = cls(
                name=str(data["name"]),
                file=file.resolve(),
                kind=str(data.get("kind", "executable")),
                items=[make_item(str(path)) for path in data.get("items") or []],
                toolchain_name=str(toolchain_section.get("name") or ""),
                toolchain_settings=toolchain_section.get("settings") or {},
                test_framework_name=str(framework_section.get("name") or ""),
                test_framework_settings=framework_section.get("settings") or {},
                unloaded_references=[
                    Reference.from_dict(entry) for entry in data.get("references") or []
                ],
                include_dirs=data.get("include_dirs"),
                public_include_dirs=data.get("public_include_dirs"),
                compiler_flags=data.get("compiler_flags"),
                linker_flags=data.get("linker_flags"),
                libraries=data.get("libraries"),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ProjectLoadError(f"Invalid project file {file}: {e}") from e

        names = [reference.name for reference in project.unloaded_references]
        if len(names) != len(set(names)):
            raise ProjectLoadError(f"Duplicate reference names in {file}")

        if registry is not None:
            project.bind(registry)

        logger.debug(f"Loaded project {project.name} from {file}")
        return project

    def bind(self, registry: PluginRegistry) -> None:
        """
        Instantiate toolchain and test framework from their registry names.

        Raises:
            ProjectLoadError: If a name is not registered
        """
        try:
            if self.toolchain_name:
                self.toolchain = registry.create_toolchain(
                    self.toolchain_name, self.toolchain_settings
                )
            if self.test_framework_name:
                self.test_framework = registry.create_test_framework(
                    self.test_framework_name, self.test_framework_settings
                )
        except (SolutionKitError, TypeError, ValueError) as e:
            raise ProjectLoadError(f"Project {self.name}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "kind": self.kind}
        if self.toolchain_name:
            toolchain: Dict[str, Any] = {"name": self.toolchain_name}
            if self.toolchain_settings:
                toolchain["settings"] = self.toolchain_settings
            data["toolchain"] = toolchain
        if self.test_framework_settings:
            data["test_framework"] = {
                "name": self.test_framework_name,
                "settings": self.test_framework_settings,
            }
        elif self.test_framework_name:
            data["test_framework"] = self.test_framework_name
        data["items"] = [item.path for item in self.items]
        for key in (
            "include_dirs",
            "public_include_dirs",
            "compiler_flags",
            "linker_flags",
            "libraries",
        ):
            value = getattr(self, key)
            if value:
                data[key] = list(value)
        data["references"] = [reference.to_dict() for reference in self.unloaded_references]
        return data

    def save(self) -> None:
        """Write the in-memory project back to its file."""
        content = yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)
        atomic_write(self.file, content)
        logger.info(f"Saved project {self.name} to {self.file}")

    # ========================================================================
    # Items
    # ========================================================================

    def _item_path(self, path: Union[str, Path]) -> str:
        try:
            return relative_item_path(path, self.directory)
        except ValueError:
            raise ProjectItemError(
                f"File {path} is not inside project directory {self.directory}"
            )

    def find_item(self, path: Union[str, Path]) -> Optional[ProjectItem]:
        relative = self._item_path(path)
        return next((item for item in self.items if item.path == relative), None)

    def add_file(self, path: Union[str, Path]) -> ProjectItem:
        """
        Add a file to the project (in memory).

        Args:
            path: Absolute path or path relative to the current directory

        Raises:
            ProjectItemError: If the file is outside the project or already present
        """
        relative = self._item_path(path)
        if any(item.path == relative for item in self.items):
            raise ProjectItemError(f"File {relative} is already part of project {self.name}")

        item = make_item(relative)
        self.items.append(item)
        return item

    def remove_file(self, path: Union[str, Path]) -> ProjectItem:
        """
        Remove a file from the project (in memory).

        Raises:
            ProjectItemError: If the file is not part of the project
        """
        item = self.find_item(path)
        if item is None:
            raise ProjectItemError(f"File not found in project {self.name}: {path}")
        self.items.remove(item)
        return item

    # ========================================================================
    # References
    # ========================================================================

    def find_reference(self, name: str) -> Optional[int]:
        """Index of the reference called `name`, or None."""
        return next(
            (i for i, ref in enumerate(self.unloaded_references) if ref.name == name),
            None,
        )

    def add_reference(self, reference: Reference, solution: "Solution") -> str:
        """
        Add or update a reference (in memory).

        An existing reference with the same name is replaced at the same
        position. A local reference must name a project of the solution and
        must not introduce a cycle; otherwise nothing is changed.

        Returns:
            "updated" or "added"

        Raises:
            ReferenceNotFoundError: Local target is not in the solution
            CircularReferenceError: Reference would create a cycle
        """
        if reference.is_local:
            try:
                target = solution.find_project(reference.name)
            except ProjectNotFoundError:
                raise ReferenceNotFoundError(reference.name)

            if target.name == self.name:
                raise CircularReferenceError([self.name, self.name])
            path = solution.reference_path(target.name, self.name)
            if path:
                raise CircularReferenceError([self.name] + path)

        index = self.find_reference(reference.name)
        if index is not None:
            self.unloaded_references[index] = reference
            result = "updated"
        else:
            self.unloaded_references.append(reference)
            result = "added"

        self.references = solution.local_references_of(self)
        return result

    def remove_reference(self, name: str, solution: Optional["Solution"] = None) -> Reference:
        """
        Remove a reference by name (in memory).

        Raises:
            ProjectReferenceError: If no reference has that name
        """
        index = self.find_reference(name)
        if index is None:
            raise ProjectReferenceError(f"Project {self.name} has no reference named '{name}'")

        removed = self.unloaded_references.pop(index)
        if solution is not None:
            self.references = solution.local_references_of(self)
        else:
            self.references = [p for p in self.references if p.name != name]
        return removed


__all__ = [
    "PROJECT_FILE_SUFFIX",
    "PROJECT_KINDS",
    "Reference",
    "ProjectItem",
    "SourceFile",
    "make_item",
    "Project",
]
