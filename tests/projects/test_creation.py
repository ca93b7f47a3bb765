"""
Tests for project scaffolding.
"""

import pytest
import yaml

from solutionkit.core.exceptions import ProjectCreationError
from solutionkit.projects import Project, create_project, open_solution


def failing_save(message):
    def save():
        raise OSError(message)

    return save


class TestCreateProject:
    """Test create_project()."""

    def test_create_executable(self, temp_dir, plugins):
        project = create_project(temp_dir / "hello", "hello", registry=plugins)

        assert project.file == temp_dir / "hello" / "hello.project.yaml"
        assert project.file.is_file()
        assert (temp_dir / "hello" / "src" / "main.cpp").is_file()
        assert [item.path for item in project.items] == ["src/main.cpp"]
        assert project.toolchain.name == "gcc"

    def test_create_static_library(self, temp_dir):
        project = create_project(temp_dir / "mathlib", "mathlib", kind="static-library")

        reloaded = Project.load(project.file)
        assert reloaded.kind == "static-library"
        assert [item.path for item in reloaded.items] == ["include/mathlib.h", "src/mathlib.cpp"]
        assert reloaded.public_include_dirs == ["include"]
        assert "namespace mathlib" in (temp_dir / "mathlib" / "include" / "mathlib.h").read_text()

    def test_registers_with_solution(self, sample_solution, fake_plugins):
        solution = open_solution(sample_solution, fake_plugins)
        directory = sample_solution.parent / "tools"

        create_project(directory, "tools", toolchain="fake", solution=solution, registry=fake_plugins)

        reloaded = open_solution(sample_solution, fake_plugins)
        assert [p.name for p in reloaded.projects] == ["app", "corelib", "tools"]

    def test_existing_project_file(self, temp_dir):
        create_project(temp_dir / "hello", "hello")

        with pytest.raises(ProjectCreationError, match="already exists"):
            create_project(temp_dir / "hello", "hello")

    def test_name_already_in_solution(self, sample_solution, fake_plugins):
        """Test a name clash leaves disk and solution untouched."""
        solution = open_solution(sample_solution, fake_plugins)
        before = sample_solution.read_text()
        directory = sample_solution.parent / "elsewhere"

        with pytest.raises(ProjectCreationError, match="already exists in solution"):
            create_project(directory, "corelib", solution=solution)

        assert not directory.exists()
        assert sample_solution.read_text() == before

    def test_unknown_toolchain(self, temp_dir, plugins):
        with pytest.raises(ProjectCreationError, match="not available"):
            create_project(temp_dir / "hello", "hello", toolchain="msvc", registry=plugins)

        assert not (temp_dir / "hello").exists()

    @pytest.mark.parametrize("name", ["", "bad name", "../escape", "-flag"])
    def test_invalid_name(self, temp_dir, name):
        with pytest.raises(ProjectCreationError, match="Invalid project name"):
            create_project(temp_dir / "x", name)

    def test_unknown_kind(self, temp_dir):
        with pytest.raises(ProjectCreationError, match="Unknown project kind"):
            create_project(temp_dir / "x", "x", kind="shared-library")

    def test_directory_is_a_file(self, temp_dir):
        target = temp_dir / "hello"
        target.write_text("not a directory")

        with pytest.raises(ProjectCreationError, match="not a directory"):
            create_project(target, "hello")

    def test_rollback_removes_new_directory(self, sample_solution, fake_plugins, monkeypatch):
        """Test a failed solution save undoes everything."""
        solution = open_solution(sample_solution, fake_plugins)
        directory = sample_solution.parent / "tools"
        before = sample_solution.read_text()

        monkeypatch.setattr(solution, "save", failing_save("disk full"))

        with pytest.raises(ProjectCreationError, match="disk full"):
            create_project(directory, "tools", solution=solution)

        assert not directory.exists()
        assert not solution.has_project("tools")
        assert yaml.safe_load(sample_solution.read_text()) == yaml.safe_load(before)

    def test_rollback_keeps_existing_directory(self, temp_dir, sample_solution, monkeypatch):
        """Test rollback only removes files it wrote into an existing directory."""
        solution = open_solution(sample_solution)
        directory = temp_dir / "existing"
        directory.mkdir()
        keep = directory / "notes.txt"
        keep.write_text("keep me")

        monkeypatch.setattr(solution, "save", failing_save("nope"))

        with pytest.raises(ProjectCreationError):
            create_project(directory, "existing", solution=solution)

        assert directory.is_dir()
        assert keep.read_text() == "keep me"
        assert not (directory / "existing.project.yaml").exists()
        assert not (directory / "src" / "main.cpp").exists()
