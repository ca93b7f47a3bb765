"""
Cooperative cancellation for long-running operations.

A CancellationToken is created once per command invocation and handed to
every build, test and registry call. It is cancelled explicitly (Ctrl-C)
or implicitly when an optional deadline passes.
"""

import threading
import time
from typing import Optional

from solutionkit.core.exceptions import OperationCancelled


class CancellationToken:
    """
    Thread-safe cancellation flag with optional deadline.

    Example:
        >>> token = CancellationToken(timeout=600)
        >>> token.raise_if_cancelled()
        >>> token.cancel()
        >>> token.cancelled
        True
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize token.

        Args:
            timeout: Seconds from now after which the token counts as
                cancelled (None = no deadline)
        """
        self._event = threading.Event()
        self.deadline = time.monotonic() + timeout if timeout else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self._event.set()
            return True
        return False

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, or None if there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """
        Block for up to `seconds`, returning early when cancelled.

        Returns:
            True if the token is cancelled
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        return self.cancelled

    def raise_if_cancelled(self, what: str = "Operation") -> None:
        if self.cancelled:
            raise OperationCancelled(f"{what} cancelled")


def ensure_token(token: Optional[CancellationToken]) -> CancellationToken:
    """Return `token`, or a fresh never-cancelled token if None."""
    return token if token is not None else CancellationToken()


__all__ = ["CancellationToken", "ensure_token"]
