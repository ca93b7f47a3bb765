"""YAML configuration parser for SolutionKit.

This module provides parsing and validation for solutionkit.yaml configuration files.

Example solutionkit.yaml:

    registry_url: https://packages.example.org/api
    cache_dir: ~/.solutionkit
    request_timeout: 30
    max_retries: 3
    default_jobs: 8
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from solutionkit.core.directory import HOME_ENV_VAR, get_global_cache_dir
from solutionkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://packages.solutionkit.dev/api/v1"
REGISTRY_URL_ENV_VAR = "SOLUTIONKIT_REGISTRY_URL"
CONFIG_FILE_NAME = "solutionkit.yaml"


@dataclass
class SolutionKitConfig:
    """Complete SolutionKit configuration."""

    registry_url: str = DEFAULT_REGISTRY_URL
    cache_dir: Path = field(default_factory=get_global_cache_dir)
    request_timeout: int = 30
    max_retries: int = 3
    default_jobs: Optional[int] = None  # None = toolchain default


def parse_config(data: Dict[str, Any]) -> SolutionKitConfig:
    """
    Build a configuration from an already-loaded mapping.

    Raises:
        ConfigError: If a value has the wrong type or range
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    unknown = set(data) - {
        "registry_url",
        "cache_dir",
        "request_timeout",
        "max_retries",
        "default_jobs",
    }
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(sorted(unknown))}")

    config = SolutionKitConfig()

    if "registry_url" in data:
        url = data["registry_url"]
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            raise ConfigError(f"registry_url must be an http(s) URL, got: {url!r}")
        config.registry_url = url.rstrip("/")

    if "cache_dir" in data:
        if not isinstance(data["cache_dir"], str):
            raise ConfigError("cache_dir must be a string path")
        config.cache_dir = Path(data["cache_dir"]).expanduser()

    for key in ("request_timeout", "max_retries"):
        if key in data:
            value = data[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{key} must be a non-negative integer, got: {value!r}")
            setattr(config, key, value)

    if data.get("default_jobs") is not None:
        jobs = data["default_jobs"]
        if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1:
            raise ConfigError(f"default_jobs must be a positive integer, got: {jobs!r}")
        config.default_jobs = jobs

    return config


def load_config(
    config_path: Optional[Path] = None, search_dir: Optional[Path] = None
) -> SolutionKitConfig:
    """
    Load configuration from file and environment.

    Lookup order: explicit `config_path` (must exist), then
    `<search_dir>/solutionkit.yaml`, then `<global cache>/config.yaml`.
    Environment variables override file values.

    Args:
        config_path: Explicit configuration file
        search_dir: Directory searched for solutionkit.yaml (default: cwd)

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file is missing (explicit path), unreadable or invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        candidates = [config_path]
    else:
        search_dir = search_dir or Path.cwd()
        candidates = [search_dir / CONFIG_FILE_NAME, get_global_cache_dir() / "config.yaml"]

    data: Dict[str, Any] = {}
    for candidate in candidates:
        if candidate.exists():
            data = _read_yaml(candidate)
            logger.debug(f"Loaded configuration from {candidate}")
            break

    config = parse_config(data)
    _apply_environment(config)
    return config


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    return data or {}


def _apply_environment(config: SolutionKitConfig) -> None:
    url = os.environ.get(REGISTRY_URL_ENV_VAR)
    if url:
        config.registry_url = url.rstrip("/")
    home = os.environ.get(HOME_ENV_VAR)
    if home:
        config.cache_dir = Path(home)
