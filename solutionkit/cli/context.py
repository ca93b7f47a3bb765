"""
Per-invocation command context.

Everything a command needs beyond its parsed arguments is carried here and
passed explicitly; commands never reach for process-wide state.
"""

import logging
from pathlib import Path
from typing import Optional

from solutionkit.config import SolutionKitConfig
from solutionkit.core.cancellation import CancellationToken
from solutionkit.core.console import Console
from solutionkit.core.registry import PluginRegistry
from solutionkit.packages import PackageRegistryClient

logger = logging.getLogger(__name__)


class CommandContext:
    """
    Dependencies of a running command.

    Attributes:
        console: Sink for user-facing output
        plugins: Registry of toolchains and test frameworks
        config: Loaded configuration
        cancel_token: Cancellation handle for the whole invocation
        cwd: Directory relative paths are resolved against
    """

    def __init__(
        self,
        console: Console,
        plugins: PluginRegistry,
        config: SolutionKitConfig,
        cancel_token: Optional[CancellationToken] = None,
        cwd: Optional[Path] = None,
        packages: Optional[PackageRegistryClient] = None,
    ):
        self.console = console
        self.plugins = plugins
        self.config = config
        self.cancel_token = cancel_token if cancel_token is not None else CancellationToken()
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self._packages = packages

    @property
    def packages(self) -> PackageRegistryClient:
        """Package registry client, created and warmed up on first use."""
        if self._packages is None:
            self._packages = PackageRegistryClient(self.config)
        if not self._packages.assets_loaded:
            self._packages.load_assets()
        return self._packages


__all__ = ["CommandContext"]
