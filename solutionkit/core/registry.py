"""
Plugin registry for toolchains and test frameworks.

Projects name their toolchain and test framework by key; the registry maps
those keys to factories. A registry instance is created once per process by
`initialize_core()` and passed explicitly to the solution loader.
"""

from typing import Any, Callable, Dict, List, Optional

from solutionkit.core.exceptions import TestFrameworkError, ToolchainNotAvailableError

Factory = Callable[[Dict[str, Any]], Any]


class PluginRegistry:
    """
    Registry of toolchain and test framework factories.

    A factory receives the `settings` mapping from the project file and
    returns a new instance.

    Example:
        registry = PluginRegistry()
        registry.register_toolchain('gcc', StandardToolchain.factory('gcc'))
        toolchain = registry.create_toolchain('gcc', {'cxx': 'g++-13'})
    """

    def __init__(self):
        """Initialize empty registry."""
        self._toolchains: Dict[str, Factory] = {}
        self._test_frameworks: Dict[str, Factory] = {}

    # ========================================================================
    # Registration Methods
    # ========================================================================

    def register_toolchain(self, name: str, factory: Factory) -> None:
        """
        Register a toolchain factory.

        Raises:
            ValueError: If a toolchain with the same name is already registered
        """
        if name in self._toolchains:
            raise ValueError(f"Toolchain '{name}' is already registered")
        self._toolchains[name] = factory

    def register_test_framework(self, name: str, factory: Factory) -> None:
        """
        Register a test framework factory.

        Raises:
            ValueError: If a test framework with the same name is already registered
        """
        if name in self._test_frameworks:
            raise ValueError(f"Test framework '{name}' is already registered")
        self._test_frameworks[name] = factory

    # ========================================================================
    # Lookup Methods
    # ========================================================================

    def create_toolchain(self, name: str, settings: Optional[Dict[str, Any]] = None):
        """
        Instantiate a registered toolchain.

        Raises:
            ToolchainNotAvailableError: If no toolchain is registered under name
        """
        if name not in self._toolchains:
            raise ToolchainNotAvailableError(
                f"Toolchain '{name}' not found. Available: {', '.join(self.list_toolchains())}"
            )
        return self._toolchains[name](dict(settings or {}))

    def create_test_framework(self, name: str, settings: Optional[Dict[str, Any]] = None):
        """
        Instantiate a registered test framework.

        Raises:
            TestFrameworkError: If no test framework is registered under name
        """
        if name not in self._test_frameworks:
            raise TestFrameworkError(
                f"Test framework '{name}' not found. "
                f"Available: {', '.join(self.list_test_frameworks())}"
            )
        return self._test_frameworks[name](dict(settings or {}))

    def has_toolchain(self, name: str) -> bool:
        return name in self._toolchains

    def has_test_framework(self, name: str) -> bool:
        return name in self._test_frameworks

    def list_toolchains(self) -> List[str]:
        return list(self._toolchains.keys())

    def list_test_frameworks(self) -> List[str]:
        return list(self._test_frameworks.keys())

    def clear(self) -> None:
        """Remove every registration (for tests)."""
        self._toolchains.clear()
        self._test_frameworks.clear()


__all__ = ["PluginRegistry"]
