"""
Solution-wide test runner.

Builds every project that has a test framework, collects the tests of the
projects that built, then runs them one after another. Build failures and
test failures are tracked separately.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from solutionkit.core.cancellation import CancellationToken, ensure_token
from solutionkit.core.console import Console
from solutionkit.core.exceptions import TestFrameworkError
from solutionkit.testing.base import Test, TestResult

logger = logging.getLogger(__name__)


class ProjectState(Enum):
    """Progress of one project through a test run."""

    NOT_BUILT = "not-built"
    BUILD_FAILED = "build-failed"
    BUILT = "built"
    TESTS_ENUMERATED = "tests-enumerated"


@dataclass
class TestRunReport:
    """Aggregate outcome of a test run."""

    __test__ = False

    tests: List[Test] = field(default_factory=list)
    results: List[TestResult] = field(default_factory=list)
    failed_builds: List[str] = field(default_factory=list)
    states: Dict[str, ProjectState] = field(default_factory=dict)

    @property
    def build_failed(self) -> bool:
        return bool(self.failed_builds)

    @property
    def tests_failed(self) -> bool:
        return any(not result.passed for result in self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed_count(self) -> int:
        return len(self.results) - self.passed_count

    @property
    def succeeded(self) -> bool:
        return not (self.build_failed or self.tests_failed)


class TestRunner:
    """
    Runs the tests of a loaded solution.

    Example:
        >>> report = TestRunner().run(solution, console)
        >>> report.succeeded
        True
    """

    __test__ = False

    def run(
        self,
        solution,
        console: Console,
        label: str = "",
        cancel_token: Optional[CancellationToken] = None,
        defines: Optional[List[str]] = None,
    ) -> TestRunReport:
        token = ensure_token(cancel_token)
        report = TestRunReport()

        for project in solution.projects:
            if project.test_framework is None:
                continue

            report.states[project.name] = ProjectState.NOT_BUILT
            if not self._build(console, project, label, defines, token):
                report.states[project.name] = ProjectState.BUILD_FAILED
                report.failed_builds.append(project.name)
                continue
            report.states[project.name] = ProjectState.BUILT

            try:
                tests = project.test_framework.enumerate_tests(project, label, token)
            except TestFrameworkError as e:
                console.error(f"Unable to list tests of {project.name}: {e}")
                report.states[project.name] = ProjectState.BUILD_FAILED
                report.failed_builds.append(project.name)
                continue

            report.tests.extend(tests)
            report.states[project.name] = ProjectState.TESTS_ENUMERATED
            logger.debug(f"{project.name}: {len(tests)} tests")

        for test in report.tests:
            token.raise_if_cancelled("Test run")
            result = test.run(token)
            report.results.append(result)
            self._print_result(console, result)

        logger.info(
            f"Tests: {report.passed_count} passed, {report.failed_count} failed, "
            f"{len(report.failed_builds)} builds failed"
        )
        return report

    @staticmethod
    def _build(console: Console, project, label, defines, token) -> bool:
        if project.toolchain is None:
            console.error(f"Project {project.name} has no toolchain.")
            return False
        return project.toolchain.build(console, project, label, defines, token)

    @staticmethod
    def _print_result(console: Console, result: TestResult) -> None:
        status = "Passed" if result.passed else "Failed"
        line = f"Running Test: [{result.name}], [{status}]"
        if result.passed:
            console.success(line)
            return

        console.error(line)
        console.write_line()
        console.write_line(
            f"Assertion = [{result.assertion}], File=[{result.file}], Line=[{result.line}]"
        )
        console.write_line()


__all__ = ["ProjectState", "TestRunReport", "TestRunner"]
