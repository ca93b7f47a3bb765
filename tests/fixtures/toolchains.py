"""Fake toolchains and test frameworks for testing.

The fakes are registered under the key 'fake' and are configured through the
`settings` mapping of a project file, so solution fixtures on disk fully
describe how builds and tests behave.
"""

import pytest
from typing import Any, Dict, List, Optional

from solutionkit.core.initialization import initialize_core
from solutionkit.core.registry import PluginRegistry
from solutionkit.testing.base import Test, TestFramework, TestResult
from solutionkit.toolchains.base import Toolchain


class FakeToolchain(Toolchain):
    """
    Toolchain recording calls instead of compiling.

    Settings:
        result: Value returned by build (default True)
    """

    name = "fake"

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__(settings)
        self.result = bool(self.settings.get("result", True))
        self.builds: List[tuple] = []
        self.cleans: List[str] = []
        self.jobs: Optional[int] = None

    def build_project(self, console, project, label, defines, token) -> bool:
        self.builds.append((project.name, label, list(defines)))
        console.write_line(f"fake build {project.name}")
        return self.result

    def clean(self, console, project, cancel_token=None) -> None:
        self.cleans.append(project.name)
        console.write_line(f"fake clean {project.name}")

    def set_jobs(self, jobs: int) -> bool:
        self.jobs = jobs
        return True


class FakeTestFramework(TestFramework):
    """
    Test framework returning canned tests.

    Settings:
        tests: Test names, in the order they are reported
        failing: Names of tests that fail
    """

    name = "fake"

    def enumerate_tests(self, project, label="", cancel_token=None) -> List[Test]:
        return [
            Test(name=name, project=project, framework=self, label=label)
            for name in self.settings.get("tests") or []
        ]

    def run_test(self, test, cancel_token=None) -> TestResult:
        if test.name in (self.settings.get("failing") or []):
            return TestResult(
                name=test.name,
                passed=False,
                assertion="REQUIRE( value == 2 )",
                file="tests/test_main.cpp",
                line=12,
            )
        return TestResult(name=test.name, passed=True)


@pytest.fixture
def plugins() -> PluginRegistry:
    """Registry with the built-in toolchains and test frameworks."""
    return initialize_core()


@pytest.fixture
def fake_plugins() -> PluginRegistry:
    """Registry with the built-ins plus the 'fake' toolchain and test framework."""
    registry = initialize_core()
    registry.register_toolchain("fake", FakeToolchain)
    registry.register_test_framework("fake", FakeTestFramework)
    return registry
