"""Subprocess execution helpers.

Two kinds of commands are run:
- capture(): git state queries, whose cleaned output is parsed
- stream(): the configured lint/test and build commands, whose output
  belongs in the job log

Commands are split with shlex and never run through a shell. A non-zero
exit raises ShellError.
"""

import re
import shlex
import subprocess
import sys
from pathlib import Path


class ShellError(Exception):
    """Exception raised when a command exits with non-zero status.

    Attributes:
        cmd: The command that failed
        returncode: Exit code of the failed command
        stdout: Standard output (ANSI stripped, empty when not captured)
        stderr: Standard error (ANSI stripped, empty when not captured)
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {cmd}")

    def __str__(self) -> str:
        parts = [f"Command failed: {self.cmd}"]
        parts.append(f"Exit code: {self.returncode}")
        if self.stderr:
            parts.append(f"Stderr: {self.stderr}")
        if self.stdout:
            parts.append(f"Stdout: {self.stdout}")
        return "\n".join(parts)


# ESC[...m, OSC sequences and the other two-byte introducers
ANSI_PATTERN = re.compile(
    r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\][^\x07]*\x07|\x1b[PX^_][^\x1b]*\x1b\\"
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and control characters from text.

    Branch names and porcelain status lines are compared verbatim, so
    colored git output must never leak into them.

    Args:
        text: Input text potentially containing ANSI codes

    Returns:
        Clean text with all ANSI sequences removed
    """
    if not text:
        return ""
    result = ANSI_PATTERN.sub("", text)
    result = CONTROL_CHARS_PATTERN.sub("", result)
    return result


def split_command(cmd: str | list[str]) -> list[str]:
    """Split a command string into argv form.

    Args:
        cmd: Command string or already-split argument list

    Returns:
        Argument list suitable for subprocess with shell=False
    """
    return shlex.split(cmd) if isinstance(cmd, str) else list(cmd)


def capture(cmd: str | list[str], cwd: Path | None = None, timeout: float = 30) -> str:
    """Run a query command and return its cleaned standard output.

    Git state queries go through here; their output is parsed, so it is
    always captured and stripped of ANSI sequences.

    Raises:
        ShellError: On non-zero exit
        FileNotFoundError: If the executable does not exist
        subprocess.TimeoutExpired: If the command runs longer than timeout
    """
    argv = split_command(cmd)
    result = subprocess.run(argv, cwd=cwd, capture_output=True, text=True, timeout=timeout)
    stdout = strip_ansi(result.stdout)
    if result.returncode != 0:
        raise ShellError(shlex.join(argv), result.returncode, stdout, strip_ansi(result.stderr))
    return stdout


def stream(cmd: str | list[str], cwd: Path | None = None) -> None:
    """Run a user command with its output going straight to the job log.

    Lint, test and build commands can run for a long time; no timeout is
    applied because the runner enforces the job limit.

    Raises:
        ShellError: On non-zero exit (stdout and stderr are empty)
        FileNotFoundError: If the executable does not exist
        ValueError: If the command string has unbalanced quotes
    """
    argv = split_command(cmd)
    # Keep our own buffered output ahead of the child's
    sys.stdout.flush()
    sys.stderr.flush()
    returncode = subprocess.run(argv, cwd=cwd).returncode
    if returncode != 0:
        raise ShellError(shlex.join(argv), returncode, "", "")
