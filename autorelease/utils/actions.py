"""GitHub Actions runner integration.

Workflow commands (`::error::`, `::warning::`) are written to stdout and
step outputs are appended to the file named by GITHUB_OUTPUT. Outside of
Actions these helpers only print to the console.
"""

import os
import sys
import uuid

from rich.console import Console
from rich.markup import escape

console = Console()


def is_github_actions() -> bool:
    """Check whether we are running inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _issue_command(command: str, message: str) -> None:
    sys.stdout.write(f"::{command}::{escape_data(message)}\n")
    sys.stdout.flush()


def report_failure(message: str) -> None:
    """Report a fatal error through the Actions failure channel."""
    if is_github_actions():
        _issue_command("error", message)
    else:
        console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)


def report_warning(message: str) -> None:
    """Report a non-fatal problem."""
    if is_github_actions():
        _issue_command("warning", message)
    console.print(f"[yellow]  Warning: {escape(message)}[/yellow]", highlight=False)


def set_output(key: str, value: str) -> None:
    """Append a step output when GITHUB_OUTPUT is set."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as fh:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            fh.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            fh.write(f"{key}={value}\n")
