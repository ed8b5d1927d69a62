"""Shared utility functions for stackstarter.

Provides async command execution, the directory and file writers every stage
builds on, and Rich-based console reporting.  Filesystem helpers never catch
``OSError``: a scaffolding run that cannot write its files is not resumable,
so the error is left to terminate the process.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Executable and arguments; no shell is involved.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for the process indefinitely.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.

    Raises:
        OSError: If the executable cannot be spawned.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def create_directory(path: str | Path, label: str = "Directory") -> bool:
    """Create a directory (and parents) if it does not exist.

    Prints a ``<label> <path> created!`` line only when the directory is
    actually made.

    Returns:
        ``True`` if the directory was created, ``False`` if it already existed.
    """
    dir_path = Path(path)
    if dir_path.exists():
        return False
    dir_path.mkdir(parents=True)
    console.print(f"{label} {escape(str(dir_path))} created!")
    return True


def write_file(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, overwriting any existing file.

    The parent directory must already exist.
    """
    file_path = Path(path)
    file_path.write_text(content, encoding="utf-8")
    console.print(f"File {escape(str(file_path))} created!")
    return file_path


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_NAMES: dict[int, str] = {
    1: "Input Capture",
    2: "Project Root",
    3: "Backend Init",
    4: "Backend Dependencies",
    5: "Backend Scaffold",
    6: "Frontend Init",
    7: "Frontend Dependencies",
    8: "Styling Setup",
    9: "Styling Config",
    10: "Vite Proxy",
    11: "README",
}


def print_stage_header(stage: int, name: str) -> None:
    """Print a rule announcing the stage about to run."""
    console.print(Rule(f"[bold cyan] {stage}/{len(STAGE_NAMES)} {escape(name)} [/bold cyan]", style="cyan"))


def print_output(text: str) -> None:
    """Print captured subprocess output verbatim."""
    if text:
        console.print(text, markup=False, highlight=False)


def print_summary_table(rows: list[tuple[str, str, str]], title: str = "Summary") -> None:
    """Print a three-column stage/status/detail table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Stage", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Detail")

    for stage, status, detail in rows:
        table.add_row(stage, status, escape(detail))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
