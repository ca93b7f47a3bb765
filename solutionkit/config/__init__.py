"""
Configuration management for SolutionKit.

Provides loading of solutionkit.yaml with environment variable overrides.
"""

from solutionkit.config.parser import (
    CONFIG_FILE_NAME,
    DEFAULT_REGISTRY_URL,
    REGISTRY_URL_ENV_VAR,
    SolutionKitConfig,
    load_config,
    parse_config,
)
from solutionkit.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_REGISTRY_URL",
    "REGISTRY_URL_ENV_VAR",
    "SolutionKitConfig",
    "ConfigError",
    "load_config",
    "parse_config",
]
