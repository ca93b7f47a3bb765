"""
SolutionKit CLI module.

This module provides the command-line interface for SolutionKit.
"""

from .exit_codes import ExitCode, exit_code_for
from .parser import CLI, main

__all__ = ["CLI", "ExitCode", "exit_code_for", "main"]
