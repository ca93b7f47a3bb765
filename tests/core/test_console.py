"""
Tests for console sinks.
"""

import io

from solutionkit.core.console import BufferConsole, Console, GREEN, RESET


class TestConsole:
    """Test Console."""

    def test_plain_stream_has_no_colour(self):
        """Test non-terminal streams get no escape codes."""
        stream = io.StringIO()
        console = Console(stream)
        console.success("Build succeeded")

        assert stream.getvalue() == "Build succeeded\n"

    def test_forced_colour(self):
        """Test colour can be forced."""
        stream = io.StringIO()
        Console(stream, color=True).success("ok")

        assert stream.getvalue() == f"{GREEN}ok{RESET}\n"


class TestBufferConsole:
    """Test BufferConsole."""

    def test_records_lines(self):
        """Test output is recorded in order."""
        console = BufferConsole()
        console.write_line("one")
        console.error("two")
        console.write("three")

        assert console.lines == ["one", "two", "three"]
        assert console.text.endswith("three")
