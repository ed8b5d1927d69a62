"""stackstarter Pipeline Orchestrator.

Scaffolds an Express + React (Vite) + Tailwind CSS project in eleven stages:

 1. Input Capture          -- ask for the project name.
 2. Project Root           -- create the project directory.
 3. Backend Init           -- ``npm init -y``.
 4. Backend Dependencies   -- ``npm install express dotenv``.
 5. Backend Scaffold       -- server directories, entry point, config, ``.env``.
 6. Frontend Init          -- ``npm create vite@latest client -- --template react``.
 7. Frontend Dependencies  -- ``npm install`` inside ``client/``.
 8. Styling Setup          -- install Tailwind CSS, ``npx tailwindcss init -p``.
 9. Styling Config         -- ``tailwind.config.js`` and ``src/index.css``.
10. Vite Proxy             -- proxy ``/api`` to the backend (soft-fail).
11. README                 -- project documentation.

Usage::

    python -m stackstarter
    python -m stackstarter my-app --output ~/code --strict
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from pydantic import BaseModel, Field, computed_field
from rich.markup import escape
from rich.panel import Panel

from .config import Config, FailMode
from .runner import CommandRunner, SubprocessRunner
from .scaffolder.stages import (
    PIPELINE_STAGES,
    StageContext,
    StageError,
    StageFn,
    StageResult,
)
from .scaffolder.templates import TemplateRenderer
from .utils import (
    STAGE_NAMES,
    console,
    format_duration,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)

PROMPT = "Enter the project name: "


class PipelineResult(BaseModel):
    """Final state of a scaffolding run."""

    project_name: str
    project_root: Path | None = None
    fail_mode: FailMode = "best-effort"
    stages: list[StageResult] = Field(default_factory=list)
    halted_at: int | None = Field(default=None, description="Stage that stopped the run")
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[misc]
    @property
    def success(self) -> bool:
        return self.halted_at is None

    @computed_field  # type: ignore[misc]
    @property
    def exit_code(self) -> int:
        """Process exit status: a halted run only fails the process in strict mode."""
        if self.success or self.fail_mode != "strict":
            return 0
        return 1

    @property
    def completed(self) -> list[int]:
        return [s.stage for s in self.stages if s.ok]


def capture_project_name(ask: Callable[[str], str] | None = None) -> str:
    """Read the project name from an interactive prompt.

    The answer is returned as typed; no validation is applied.
    """
    ask = ask or console.input
    return ask(PROMPT)


class Pipeline:
    """Runs the scaffolding stages in order, stopping at the first failure.

    Attributes:
        config: Pipeline configuration; ``project_name`` must be set.
        runner: Executes external commands for the process stages.
        renderer: Loads the static file templates.
        stages: Ordered ``(number, stage)`` pairs run after input capture.
    """

    def __init__(
        self,
        config: Config,
        runner: CommandRunner | None = None,
        renderer: TemplateRenderer | None = None,
        stages: Sequence[tuple[int, StageFn]] = PIPELINE_STAGES,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner(timeout=config.command_timeout)
        self.renderer = renderer or TemplateRenderer()
        self.stages = list(stages)

    async def run(self) -> PipelineResult:
        """Execute every stage once.

        Filesystem errors raised by a stage are not caught; they end the run.

        Returns:
            A ``PipelineResult``; ``halted_at`` names the stage that failed.
        """
        pipeline_start = time.monotonic()
        config = self.config

        console.print(
            Panel(
                f"[bold bright_cyan]stackstarter[/bold bright_cyan]\n"
                f"Project   : {escape(config.project_name)}\n"
                f"Location  : {escape(str(config.project_root.resolve()))}\n"
                f"Fail mode : {config.fail_mode}",
                title="[bold]Scaffolding[/bold]",
                border_style="bright_cyan",
            )
        )

        result = PipelineResult(project_name=config.project_name, fail_mode=config.fail_mode)
        result.stages.append(
            StageResult(stage=1, name=STAGE_NAMES[1], message=config.project_name)
        )
        ctx = StageContext(config=config, runner=self.runner, renderer=self.renderer)

        for number, stage in self.stages:
            print_stage_header(number, STAGE_NAMES.get(number, stage.__name__))
            stage_start = time.monotonic()

            outcome = await stage(ctx)
            if not isinstance(outcome, StageResult):
                raise StageError(f"stage {number} ({stage.__name__}) returned {outcome!r}")

            outcome.duration_seconds = time.monotonic() - stage_start
            result.stages.append(outcome)

            if not outcome.ok:
                result.halted_at = number
                break
            if outcome.soft_failed:
                print_warning(f"Stage {number} reported a problem; continuing.")

        result.project_root = ctx.project_root
        result.duration_seconds = time.monotonic() - pipeline_start
        self._print_final_summary(result)
        return result

    def _print_final_summary(self, result: PipelineResult) -> None:
        """Print the stage table and closing line.

        A best-effort run that halted stays silent here; the failing stage
        has already printed its own error.
        """
        if not result.success and self.config.fail_mode != "strict":
            return

        rows: list[tuple[str, str, str]] = []
        for stage in result.stages:
            if not stage.ok:
                status = "[red]halted[/red]"
            elif stage.soft_failed:
                status = "[yellow]warning[/yellow]"
            else:
                status = "[green]done[/green]"
            rows.append((f"{stage.stage}. {stage.name}", status, stage.message))
        print_summary_table(rows, title="Scaffolding Summary")

        elapsed = format_duration(result.duration_seconds)
        if result.success:
            print_success(f"Project {result.project_name} scaffolded in {elapsed}.")
        else:
            print_error(
                f"Scaffolding stopped at stage {result.halted_at} "
                f"({STAGE_NAMES.get(result.halted_at or 0, '?')}) after {elapsed}."
            )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackstarter",
        description="Scaffold an Express + React (Vite) + Tailwind CSS project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stackstarter\n"
            "  stackstarter my-app -o ~/code\n"
            "  stackstarter my-app --strict --package-manager pnpm\n"
        ),
    )
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Project name (prompted for when omitted)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when a stage halts the pipeline",
    )
    parser.add_argument("--package-manager", default=None, help="Package manager executable (default: npm)")
    parser.add_argument("--npx", default=None, help="Package runner executable (default: npx)")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``stackstarter`` and ``python -m stackstarter``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.output:
        config.output_dir = Path(args.output)
    if args.strict:
        config.fail_mode = "strict"
    if args.package_manager:
        config.package_manager = args.package_manager
    if args.npx:
        config.npx = args.npx

    config.project_name = args.name if args.name is not None else capture_project_name()

    result = asyncio.run(Pipeline(config).run())
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
