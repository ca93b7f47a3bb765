"""
Tests for reference-aware builds in the Toolchain base class.
"""

import pytest

from solutionkit.core.cancellation import CancellationToken
from solutionkit.core.console import BufferConsole
from solutionkit.core.exceptions import OperationCancelled
from solutionkit.projects import open_solution
from tests.fixtures.solutions import fake_project, write_solution


@pytest.fixture
def diamond(tmp_path, fake_plugins):
    """app -> (left, right) -> shared."""
    file = write_solution(
        tmp_path / "diamond",
        [
            fake_project("app", references=["left", "right"]),
            fake_project("left", references=["shared"]),
            fake_project("right", references=["shared"]),
            fake_project("shared"),
        ],
    )
    return open_solution(file, fake_plugins)


def built_names(solution):
    return [
        name
        for project in solution.projects
        for name, _, _ in project.toolchain.builds
    ]


class TestBuildTree:
    def test_shared_reference_built_once(self, diamond):
        app = diamond.find_project("app")

        assert app.toolchain.build(BufferConsole(), app, label="debug", defines=["X"])

        assert sorted(built_names(diamond)) == ["app", "left", "right", "shared"]
        assert diamond.find_project("shared").toolchain.builds == [("shared", "debug", ["X"])]

    def test_reference_failure_stops_dependents(self, tmp_path, fake_plugins):
        file = write_solution(
            tmp_path / "broken",
            [fake_project("app", references=["lib"]), fake_project("lib", build_result=False)],
        )
        solution = open_solution(file, fake_plugins)
        app = solution.find_project("app")
        console = BufferConsole()

        assert not app.toolchain.build(console, app)

        assert app.toolchain.builds == []
        assert "Referenced project lib failed to build." in console.text

    def test_reference_without_toolchain(self, tmp_path, fake_plugins):
        file = write_solution(
            tmp_path / "bare",
            [fake_project("app", references=["headers"]), {"name": "headers"}],
        )
        solution = open_solution(file, fake_plugins)
        app = solution.find_project("app")
        console = BufferConsole()

        assert not app.toolchain.build(console, app)
        assert "Referenced project headers has no toolchain." in console.text

    def test_cancelled_token(self, diamond):
        app = diamond.find_project("app")
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelled):
            app.toolchain.build(BufferConsole(), app, cancel_token=token)

    def test_default_set_jobs_is_unsupported(self):
        from solutionkit.toolchains import CommandToolchain

        assert CommandToolchain().set_jobs(4) is False
