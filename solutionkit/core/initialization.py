"""
Core initialization module.

Registers the built-in toolchains and test frameworks. This is the one-time
process-wide bootstrap step that runs before any command.
"""

import logging
from typing import Optional

from solutionkit.core.registry import PluginRegistry

logger = logging.getLogger(__name__)


def initialize_core_toolchains(registry: PluginRegistry) -> None:
    """
    Register standard toolchains with the registry.

    Args:
        registry: PluginRegistry instance to register toolchains with
    """
    from solutionkit.toolchains.command import CommandToolchain
    from solutionkit.toolchains.standard import StandardToolchain

    for flavour in ("gcc", "clang"):
        if not registry.has_toolchain(flavour):
            registry.register_toolchain(flavour, StandardToolchain.factory(flavour))
            logger.debug(f"Registered standard {flavour} toolchain")

    if not registry.has_toolchain("command"):
        registry.register_toolchain("command", CommandToolchain)
        logger.debug("Registered command toolchain")


def initialize_core_test_frameworks(registry: PluginRegistry) -> None:
    """
    Register standard test frameworks with the registry.

    Args:
        registry: PluginRegistry instance to register test frameworks with
    """
    from solutionkit.testing.catch import CatchTestFramework

    if not registry.has_test_framework("catch"):
        registry.register_test_framework("catch", CatchTestFramework)
        logger.debug("Registered Catch test framework")


def initialize_core(registry: Optional[PluginRegistry] = None) -> PluginRegistry:
    """
    Initialize the core framework.

    Args:
        registry: Optional registry to populate; a new one is created if None

    Returns:
        The populated registry
    """
    if registry is None:
        registry = PluginRegistry()

    initialize_core_toolchains(registry)
    initialize_core_test_frameworks(registry)
    logger.debug("Core framework initialized")
    return registry


__all__ = [
    "initialize_core",
    "initialize_core_toolchains",
    "initialize_core_test_frameworks",
]
