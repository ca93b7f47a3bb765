"""
Pytest configuration and shared fixtures for SolutionKit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.solutions import (
    sample_solution,
    single_project_solution,
    three_project_solution,
)
from tests.fixtures.toolchains import fake_plugins, plugins


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need a real compiler",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def console():
    """Console that records output in memory."""
    from solutionkit.core.console import BufferConsole

    return BufferConsole()


@pytest.fixture
def cache_home(tmp_path, monkeypatch) -> Path:
    """Point the global cache directory at a temporary location."""
    home = tmp_path / "solutionkit-home"
    monkeypatch.setenv("SOLUTIONKIT_HOME", str(home))
    return home


@pytest.fixture
def config(cache_home):
    """Configuration with an isolated cache and a fake registry URL."""
    from solutionkit.config import SolutionKitConfig

    return SolutionKitConfig(
        registry_url="https://registry.test/api/v1",
        cache_dir=cache_home,
        request_timeout=5,
        max_retries=1,
    )
