"""
Toolchains turn projects into build artifacts.

Built-in toolchains are registered by `solutionkit.core.initialize_core()`
under the keys 'gcc', 'clang' and 'command'.
"""

from solutionkit.toolchains.base import DEFAULT_LABEL, Toolchain
from solutionkit.toolchains.command import CommandToolchain
from solutionkit.toolchains.standard import FLAVOURS, StandardToolchain

__all__ = [
    "DEFAULT_LABEL",
    "FLAVOURS",
    "Toolchain",
    "CommandToolchain",
    "StandardToolchain",
]
