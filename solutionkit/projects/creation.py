"""
Project scaffolding.

Creating a project is all-or-nothing: every precondition is checked before
anything is written, and a failure part-way through removes what was
created.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from solutionkit.core.exceptions import ProjectCreationError, SolutionKitError
from solutionkit.core.filesystem import FilesystemError, atomic_write, safe_rmtree
from solutionkit.core.registry import PluginRegistry
from solutionkit.projects.project import PROJECT_FILE_SUFFIX, PROJECT_KINDS, Project, make_item
from solutionkit.projects.solution import Solution

logger = logging.getLogger(__name__)

_VALID_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")

EXECUTABLE_TEMPLATE = """#include <cstdio>

int main(int argc, char** argv)
{{
    std::printf("Hello from {name}\\n");
    return 0;
}}
"""

LIBRARY_HEADER_TEMPLATE = """#pragma once

namespace {identifier}
{{
int version();
}}
"""

LIBRARY_SOURCE_TEMPLATE = """#include "{name}.h"

namespace {identifier}
{{
int version()
{{
    return 1;
}}
}}
"""


def project_file_path(directory: Union[str, Path], name: str) -> Path:
    return Path(directory) / f"{name}{PROJECT_FILE_SUFFIX}"


def _starter_files(name: str, kind: str) -> List[tuple]:
    identifier = re.sub(r"\W", "_", name)
    if kind == "executable":
        return [("src/main.cpp", EXECUTABLE_TEMPLATE.format(name=name))]
    return [
        (f"include/{name}.h", LIBRARY_HEADER_TEMPLATE.format(identifier=identifier)),
        (f"src/{name}.cpp", LIBRARY_SOURCE_TEMPLATE.format(name=name, identifier=identifier)),
    ]


def create_project(
    directory: Union[str, Path],
    name: str,
    kind: str = "executable",
    toolchain: str = "gcc",
    solution: Optional[Solution] = None,
    registry: Optional[PluginRegistry] = None,
) -> Project:
    """
    Create a new project on disk and optionally add it to a solution.

    Args:
        directory: Project directory (created if missing)
        name: Project name, unique within the solution
        kind: 'executable' or 'static-library'
        toolchain: Toolchain registry key written to the project file
        solution: Solution to register the project with and save
        registry: Used to validate the toolchain and bind the new project

    Returns:
        The created Project

    Raises:
        ProjectCreationError: If a precondition fails or writing fails

    Example:
        >>> project = create_project(root / "app", "app", solution=solution)
        >>> project.file.name
        'app.project.yaml'
    """
    directory = Path(directory).resolve()
    project_file = project_file_path(directory, name)

    # Preconditions
    if not name or not _VALID_NAME.match(name):
        raise ProjectCreationError(f"Invalid project name: {name!r}")
    if kind not in PROJECT_KINDS:
        raise ProjectCreationError(f"Unknown project kind '{kind}', expected one of {PROJECT_KINDS}")
    if registry is not None and toolchain and not registry.has_toolchain(toolchain):
        raise ProjectCreationError(f"Toolchain '{toolchain}' is not available")
    if project_file.exists():
        raise ProjectCreationError(
            f"Unable to create project {name}, {project_file} already exists."
        )
    if solution is not None and solution.has_project(name):
        raise ProjectCreationError(f"Unable to create project, {name} already exists in solution.")
    if directory.exists() and not directory.is_dir():
        raise ProjectCreationError(f"{directory} exists and is not a directory")

    created_directory = not directory.exists()
    written: List[Path] = []
    registered = False

    try:
        directory.mkdir(parents=True, exist_ok=True)

        starter = _starter_files(name, kind)
        for relative, content in starter:
            target = directory / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(target, content)
            written.append(target)

        project = Project(
            name=name,
            file=project_file,
            kind=kind,
            items=[make_item(relative) for relative, _ in starter],
            toolchain_name=toolchain,
            include_dirs=["include"] if kind == "static-library" else [],
            public_include_dirs=["include"] if kind == "static-library" else [],
        )
        project.save()
        written.append(project_file)

        if registry is not None:
            project.bind(registry)

        if solution is not None:
            solution.add_project(project)
            registered = True
            solution.save()

    except (OSError, FilesystemError, SolutionKitError) as e:
        logger.debug(f"Rolling back creation of {name}: {e}")
        if registered:
            solution.remove_project(project)
        if created_directory:
            safe_rmtree(directory)
        else:
            for path in written:
                if path.exists():
                    path.unlink()
        raise ProjectCreationError(f"Unable to create project {name}: {e}") from e

    logger.info(f"Created {kind} project {name} at {directory}")
    return project


__all__ = ["create_project", "project_file_path"]
