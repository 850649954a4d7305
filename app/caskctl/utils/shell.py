"""Subprocess helpers.

Commands are always run with an argument list (never through a shell)
and their output is captured as text.
"""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of a finished command.

    Attributes:
        stdout: Captured standard output.
        stderr: Captured standard error.
        returncode: Process exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """True when the process exited 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout followed by stderr, for scanning the full command output."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds to wait before the process is killed; None waits forever.

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the timeout elapsed.
    """
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def command_exists(name: str) -> bool:
    """Return True if ``name`` resolves to an executable on PATH."""
    return shutil.which(name) is not None
