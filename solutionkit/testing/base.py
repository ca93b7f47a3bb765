"""
Test framework interface.

A test framework discovers tests in a built project artifact and runs them
one by one. Running a test returns a TestResult; Test objects are never
mutated by execution.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from solutionkit.core.cancellation import CancellationToken


@dataclass(frozen=True)
class TestResult:
    """
    Outcome of running a single test.

    Attributes:
        name: Test name
        passed: True if the test passed
        assertion: First failing assertion (empty when passed)
        file: Source file of the failing assertion
        line: Line of the failing assertion (0 if unknown)
        duration: Wall clock seconds
    """

    __test__ = False

    name: str
    passed: bool
    assertion: str = ""
    file: str = ""
    line: int = 0
    duration: float = 0.0


@dataclass
class Test:
    """A test discovered in a built project."""

    __test__ = False

    name: str
    file: str = ""
    line: int = 0
    project: Any = field(default=None, repr=False, compare=False)
    framework: Any = field(default=None, repr=False, compare=False)
    label: str = ""

    def run(self, cancel_token: Optional[CancellationToken] = None) -> TestResult:
        return self.framework.run_test(self, cancel_token)


class TestFramework(ABC):
    """Abstract base class for test frameworks."""

    __test__ = False

    name = "framework"

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.settings: Dict[str, Any] = dict(settings or {})

    @abstractmethod
    def enumerate_tests(
        self,
        project,
        label: str = "",
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Test]:
        """
        List the tests of a built project, in the order the artifact reports.

        Raises:
            TestFrameworkError: If the artifact is missing or cannot be queried
        """
        pass

    @abstractmethod
    def run_test(
        self, test: Test, cancel_token: Optional[CancellationToken] = None
    ) -> TestResult:
        """Run one test and return its result."""
        pass


__all__ = ["Test", "TestFramework", "TestResult"]
