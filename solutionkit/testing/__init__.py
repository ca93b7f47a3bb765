"""
Test discovery and execution.

Built-in frameworks are registered by `solutionkit.core.initialize_core()`;
'catch' is available by default.
"""

from solutionkit.testing.base import Test, TestFramework, TestResult
from solutionkit.testing.catch import CatchTestFramework
from solutionkit.testing.runner import ProjectState, TestRunner, TestRunReport

__all__ = [
    "CatchTestFramework",
    "ProjectState",
    "Test",
    "TestFramework",
    "TestResult",
    "TestRunReport",
    "TestRunner",
]
