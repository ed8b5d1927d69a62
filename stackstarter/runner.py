"""External command execution for pipeline stages.

Stages never spawn processes themselves; they ask a ``CommandRunner`` to run
an argv list in an explicit working directory and inspect the returned
``CommandResult``.  ``SubprocessRunner`` is the production implementation;
tests substitute a recording fake.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, computed_field

from .utils import run_command

SPAWN_FAILURE_CODE = 127


class CommandResult(BaseModel):
    """Outcome of one external command."""

    argv: list[str] = Field(..., description="Command and arguments as executed")
    cwd: Path = Field(..., description="Working directory of the child process")
    returncode: int = Field(default=0)
    stdout: str = Field(default="")
    stderr: str = Field(default="")

    @computed_field  # type: ignore[misc]
    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0

    @property
    def display(self) -> str:
        return " ".join(self.argv)


class CommandRunner(Protocol):
    """Anything that can run an argv list in a directory."""

    async def run(self, argv: list[str], cwd: Path) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands as real child processes via ``run_command``.

    ``argv[0]`` is looked up on ``PATH`` with ``shutil.which`` before spawning,
    so wrappers such as ``npm.cmd`` on Windows are found from the bare name.
    A command whose executable cannot be found or spawned is reported as a
    failed result with return code 127, the status a shell gives for
    "command not found".  The recorded ``argv`` keeps the name as given.
    """

    def __init__(self, timeout: int | None = None) -> None:
        self.timeout = timeout

    async def run(self, argv: list[str], cwd: Path) -> CommandResult:
        executable = shutil.which(argv[0])
        if executable is None:
            return self._spawn_failure(argv, cwd, "command not found")
        try:
            returncode, stdout, stderr = await run_command(
                [executable, *argv[1:]], cwd=cwd, timeout=self.timeout
            )
        except OSError as exc:
            return self._spawn_failure(argv, cwd, exc.strerror or str(exc))
        return CommandResult(
            argv=list(argv),
            cwd=cwd,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    @staticmethod
    def _spawn_failure(argv: list[str], cwd: Path, reason: str) -> CommandResult:
        return CommandResult(
            argv=list(argv),
            cwd=cwd,
            returncode=SPAWN_FAILURE_CODE,
            stderr=f"{argv[0]}: {reason}",
        )
