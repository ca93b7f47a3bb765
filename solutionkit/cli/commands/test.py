"""
Test command implementation.

Builds every project with a test framework, then runs all discovered tests
in solution order.
"""

import logging

from solutionkit.cli.commands.build import apply_jobs
from solutionkit.cli.context import CommandContext
from solutionkit.cli.exit_codes import ExitCode
from solutionkit.cli.utils import open_solution
from solutionkit.testing import TestRunner, TestRunReport

logger = logging.getLogger(__name__)


def report_exit_code(report: TestRunReport) -> ExitCode:
    """Exit code for a finished test run; build and test failures combine."""
    if report.build_failed and report.tests_failed:
        return ExitCode.BUILD_AND_TESTS_FAILED
    if report.build_failed:
        return ExitCode.BUILD_FAILED
    if report.tests_failed:
        return ExitCode.TESTS_FAILED
    return ExitCode.SUCCESS


def run(args, context: CommandContext) -> ExitCode:
    """
    Run the test command.

    Returns:
        The exit code of the report, or NOTHING_TO_DO if no project has tests
    """
    console = context.console
    solution = open_solution(args, context)

    if not any(project.test_framework for project in solution.projects):
        console.write_line("No projects with a test framework, nothing to test.")
        return ExitCode.NOTHING_TO_DO

    apply_jobs(solution, args.jobs or context.config.default_jobs)

    report = TestRunner().run(
        solution,
        console,
        label=args.label,
        cancel_token=context.cancel_token,
        defines=args.defines,
    )

    console.write_line(
        f"{len(report.results)} tests run, {report.passed_count} passed, "
        f"{report.failed_count} failed."
    )
    if report.build_failed:
        console.error(f"Builds failed: {', '.join(report.failed_builds)}")

    return report_exit_code(report)
