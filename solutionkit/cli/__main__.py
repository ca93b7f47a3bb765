"""
Entry point for running the SolutionKit CLI as a module.

Usage: python -m solutionkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
