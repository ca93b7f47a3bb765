"""Reusable solution fixtures for testing.

This module writes realistic solution layouts (solution file, project
files and source files) into a temporary directory.
"""

import pytest
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional


def write_project(root: Path, data: Dict[str, Any]) -> Path:
    """
    Write a project file and its items below `root/<name>/`.

    Args:
        root: Solution directory
        data: Project file content; must contain 'name'

    Returns:
        Path to the project file
    """
    directory = root / data["name"]
    directory.mkdir(parents=True, exist_ok=True)

    for item in data.get("items", []):
        path = directory / item
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text(f"// {item}\n")

    project_file = directory / f"{data['name']}.project.yaml"
    project_file.write_text(yaml.safe_dump(data, sort_keys=False))
    return project_file


def write_solution(
    root: Path,
    projects: List[Dict[str, Any]],
    startup: Optional[str] = None,
    name: str = "demo",
) -> Path:
    """
    Write a solution with the given projects, in order.

    Returns:
        Path to the solution file
    """
    root.mkdir(parents=True, exist_ok=True)
    paths = []
    for data in projects:
        project_file = write_project(root, data)
        paths.append(project_file.relative_to(root).as_posix())

    data: Dict[str, Any] = {"name": name}
    if startup:
        data["startup_project"] = startup
    data["projects"] = paths

    solution_file = root / f"{name}.solution.yaml"
    solution_file.write_text(yaml.safe_dump(data, sort_keys=False))
    return solution_file


def fake_project(
    name: str,
    tests: Optional[List[str]] = None,
    failing: Optional[List[str]] = None,
    build_result: bool = True,
    **extra: Any,
) -> Dict[str, Any]:
    """Project file content using the fake toolchain (and fake test framework if tests given)."""
    data: Dict[str, Any] = {
        "name": name,
        "kind": extra.pop("kind", "executable"),
        "toolchain": {"name": "fake", "settings": {"result": build_result}},
        "items": extra.pop("items", ["src/main.cpp"]),
    }
    if tests is not None:
        data["test_framework"] = {
            "name": "fake",
            "settings": {"tests": tests, "failing": failing or []},
        }
    data.update(extra)
    return data


@pytest.fixture
def single_project_solution(tmp_path) -> Path:
    """
    Solution with one buildable project 'app' and no test framework.

    Returns:
        Path to the solution file
    """
    return write_solution(tmp_path / "single", [fake_project("app")], startup="app")


@pytest.fixture
def sample_solution(tmp_path) -> Path:
    """
    Solution with an executable 'app' referencing a static library 'corelib'.

    'app' has two tests, 'adds' passes and 'subtracts' fails.

    Returns:
        Path to the solution file
    """
    return write_solution(
        tmp_path / "sample",
        [
            fake_project(
                "app",
                tests=["adds", "subtracts"],
                failing=["subtracts"],
                references=[
                    {"name": "corelib"},
                    {
                        "name": "fmt",
                        "git_url": "https://github.com/fmtlib/fmt.git",
                        "revision": "10.2.1",
                    },
                ],
            ),
            fake_project(
                "corelib",
                kind="static-library",
                items=["src/corelib.cpp", "include/corelib.h"],
                public_include_dirs=["include"],
            ),
        ],
        startup="app",
    )


@pytest.fixture
def three_project_solution(tmp_path) -> Path:
    """
    Solution with projects A, B and C (in that order), all passing tests.

    Returns:
        Path to the solution file
    """
    return write_solution(
        tmp_path / "three",
        [
            fake_project("A", tests=["A1", "A2"]),
            fake_project("B", tests=["B1"]),
            fake_project("C", tests=["C1", "C2"]),
        ],
        startup="A",
    )
