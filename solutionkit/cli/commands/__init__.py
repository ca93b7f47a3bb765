"""
CLI command handlers.

Each module exposes `run(args, context) -> ExitCode`.
"""
