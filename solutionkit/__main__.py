"""
Entry point for running the SolutionKit CLI as a module.

Usage: python -m solutionkit [command] [options]
"""

from solutionkit.cli.parser import main

if __name__ == "__main__":
    main()
