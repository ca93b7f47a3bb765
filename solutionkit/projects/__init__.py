"""
Solution and project model.

Loads solution and project files, resolves local references between
projects and persists structural edits (files, references, new projects).
"""

from solutionkit.projects.creation import create_project, project_file_path
from solutionkit.projects.project import (
    PROJECT_FILE_SUFFIX,
    PROJECT_KINDS,
    Project,
    ProjectItem,
    Reference,
    SourceFile,
    make_item,
)
from solutionkit.projects.solution import (
    SOLUTION_FILE_SUFFIX,
    Solution,
    load_solution,
    open_solution,
)

__all__ = [
    "PROJECT_FILE_SUFFIX",
    "PROJECT_KINDS",
    "SOLUTION_FILE_SUFFIX",
    "Project",
    "ProjectItem",
    "Reference",
    "SourceFile",
    "Solution",
    "create_project",
    "load_solution",
    "make_item",
    "open_solution",
    "project_file_path",
]
