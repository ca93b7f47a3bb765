"""
Console sink for user-facing build and test output.

Toolchains, test frameworks and the package registry client write
human-readable progress to a Console instead of returning it as data.
The console is always passed explicitly; nothing in the core writes to
a global stream.
"""

import sys
from typing import List, Optional, TextIO

GREEN = "\x1b[32;1m"
RED = "\x1b[31;1m"
RESET = "\x1b[39;49m"


class Console:
    """
    Text sink writing to a stream (stdout by default).

    Colour escapes are only emitted when the stream is a terminal.

    Example:
        >>> console = Console()
        >>> console.write_line("Build succeeded")
    """

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        if color is None:
            isatty = getattr(self.stream, "isatty", None)
            color = bool(isatty and isatty())
        self.color = color

    def write(self, text: str) -> None:
        try:
            self.stream.write(text)
        except UnicodeEncodeError:
            encoding = getattr(self.stream, "encoding", None) or "ascii"
            self.stream.write(text.encode(encoding, "replace").decode(encoding))
        self.stream.flush()

    def write_line(self, text: str = "") -> None:
        self.write(f"{text}\n")

    def success(self, text: str) -> None:
        """Write a line highlighted as success."""
        self._colored(GREEN, text)

    def error(self, text: str) -> None:
        """Write a line highlighted as failure."""
        self._colored(RED, text)

    def _colored(self, code: str, text: str) -> None:
        if self.color:
            self.write_line(f"{code}{text}{RESET}")
        else:
            self.write_line(text)


class BufferConsole(Console):
    """
    Console that records every line in memory.

    Used by tests and by callers that want to inspect output afterwards.
    """

    def __init__(self):
        super().__init__(stream=_NullStream(), color=False)
        self._chunks: List[str] = []

    def write(self, text: str) -> None:
        self._chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def lines(self) -> List[str]:
        return self.text.splitlines()


class _NullStream:
    def write(self, text: str) -> int:
        return len(text)

    def flush(self) -> None:
        pass

    def isatty(self) -> bool:
        return False


__all__ = ["Console", "BufferConsole"]
