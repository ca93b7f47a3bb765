"""
External process execution for toolchains and test frameworks.

Runs a command, streams its combined output line by line to a Console and
kills the child when the supplied CancellationToken fires.
"""

import logging
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from solutionkit.core.cancellation import CancellationToken, ensure_token
from solutionkit.core.console import Console
from solutionkit.core.exceptions import OperationCancelled

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result of an external process run."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_process(
    command: Union[List[str], str],
    cwd: Optional[Path] = None,
    console: Optional[Console] = None,
    cancel_token: Optional[CancellationToken] = None,
    env: Optional[Dict[str, str]] = None,
    shell: bool = False,
) -> ProcessResult:
    """
    Run an external command to completion.

    Args:
        command: Argument list (or string when shell=True)
        cwd: Working directory
        console: Optional sink receiving each output line as it arrives
        cancel_token: Token checked while the process runs
        env: Optional environment for the child
        shell: Run through the system shell

    Returns:
        ProcessResult with exit code and captured output

    Raises:
        OperationCancelled: If the token fired before the process finished
        FileNotFoundError: If the executable does not exist
    """
    token = ensure_token(cancel_token)
    token.raise_if_cancelled("Process start")

    logger.debug(f"Running: {command if shell else ' '.join(command)}")

    proc = subprocess.Popen(
        command,
        cwd=str(cwd) if cwd else None,
        env=env,
        shell=shell,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )

    finished = threading.Event()

    def watch():
        while not finished.is_set():
            if token.wait(0.1):
                logger.debug(f"Cancelling process {proc.pid}")
                proc.kill()
                return

    watcher = threading.Thread(target=watch, daemon=True)
    watcher.start()

    lines = []
    try:
        for line in proc.stdout:
            lines.append(line)
            if console is not None:
                console.write(line)
        returncode = proc.wait()
    finally:
        finished.set()
        proc.stdout.close()
        watcher.join(timeout=1)

    if token.cancelled:
        raise OperationCancelled(f"Process cancelled: {command}")

    return ProcessResult(returncode=returncode, output="".join(lines))


__all__ = ["ProcessResult", "run_process"]
