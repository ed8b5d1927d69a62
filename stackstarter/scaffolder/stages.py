"""Scaffolding stages.

Each stage is an ``async`` function taking a ``StageContext`` and returning a
``StageResult``.  Stages receive every path they touch explicitly; nothing here
changes the process working directory.  A stage that returns ``ok=False``
halts the pipeline; ``soft_failed=True`` records a problem that does not.
"""

from __future__ import annotations

import errno
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field
from rich.markup import escape

from ..config import Config
from ..runner import CommandResult, CommandRunner
from ..utils import (
    STAGE_NAMES,
    console,
    create_directory,
    print_error,
    print_output,
    write_file,
)
from .templates import TemplateRenderer

BACKEND_DIRECTORIES: tuple[str, ...] = (
    "http/controllers",
    "http/middleware",
    "resources/views",
    "resources/routes",
    "config",
)

# (template, output path relative to the server directory)
BACKEND_FILES: tuple[tuple[str, str], ...] = (
    ("server/index.js.j2", "index.js"),
    ("server/config/index.js.j2", "config/index.js"),
    ("server/.env.j2", ".env"),
)

# (template, output path relative to the client directory)
STYLING_FILES: tuple[tuple[str, str], ...] = (
    ("client/tailwind.config.js.j2", "tailwind.config.js"),
    ("client/src/index.css.j2", "src/index.css"),
)

VITE_CONFIG_TEMPLATE = "client/vite.config.js.j2"
README_TEMPLATE = "README.md.j2"


class StageError(Exception):
    """Raised when stages are wired together incorrectly."""


class StageResult(BaseModel):
    """Outcome of a single pipeline stage."""

    stage: int = Field(..., ge=1)
    name: str = Field(...)
    ok: bool = Field(default=True, description="False halts the pipeline")
    soft_failed: bool = Field(default=False, description="Logged problem that did not halt")
    message: str = Field(default="")
    commands: list[CommandResult] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0, ge=0.0)


@dataclass
class StageContext:
    """Everything a stage may read or hand on to the next one."""

    config: Config
    runner: CommandRunner
    renderer: TemplateRenderer = field(default_factory=TemplateRenderer)
    project_root: Path | None = None
    client_root: Path | None = None

    def require_project_root(self) -> Path:
        if self.project_root is None:
            raise StageError("project root has not been created yet")
        return self.project_root

    def require_client_root(self) -> Path:
        if self.client_root is None:
            raise StageError("frontend has not been initialised yet")
        return self.client_root


StageFn = Callable[[StageContext], Awaitable[StageResult]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _result(stage: int, **kwargs) -> StageResult:
    return StageResult(stage=stage, name=STAGE_NAMES[stage], **kwargs)


async def _run_commands(
    ctx: StageContext,
    stage: int,
    commands: list[list[str]],
    cwd: Path,
    error_prefix: str,
) -> StageResult:
    """Run *commands* in order, stopping at the first that fails.

    Captured stdout is echoed on success; on failure the captured stderr is
    printed to the error console behind *error_prefix*.
    """
    results: list[CommandResult] = []
    for argv in commands:
        console.print(f"[dim]$ {escape(' '.join(argv))}[/dim]", highlight=False)
        result = await ctx.runner.run(argv, cwd)
        results.append(result)
        if not result.ok:
            print_error(f"{error_prefix}: {result.stderr}")
            return _result(
                stage,
                ok=False,
                message=f"{result.display} exited with status {result.returncode}",
                commands=results,
            )
        print_output(result.stdout)
    return _result(stage, commands=results)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


async def create_project_root(ctx: StageContext) -> StageResult:
    """Create ``<output_dir>/<project_name>``.

    An empty name would resolve to ``output_dir`` itself and scaffold over
    whatever is already there, so it is refused before anything is touched.
    """
    root = ctx.config.project_root
    if not ctx.config.project_name:
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), "")
    create_directory(root, label="Project directory")
    ctx.project_root = root
    return _result(2, message=str(root))


async def init_backend(ctx: StageContext) -> StageResult:
    pm = ctx.config.package_manager
    return await _run_commands(
        ctx, 3, [[pm, "init", "-y"]], ctx.require_project_root(),
        "Error initializing project",
    )


async def install_backend_dependencies(ctx: StageContext) -> StageResult:
    pm = ctx.config.package_manager
    return await _run_commands(
        ctx, 4, [[pm, "install", *ctx.config.backend_packages]], ctx.require_project_root(),
        "Error installing dependencies",
    )


async def scaffold_backend(ctx: StageContext) -> StageResult:
    """Create the server directory layout and its three starter files."""
    ctx.require_project_root()
    server_root = ctx.config.server_root
    for directory in BACKEND_DIRECTORIES:
        create_directory(server_root / directory)
    for template, relative in BACKEND_FILES:
        write_file(server_root / relative, ctx.renderer.render(template))
    return _result(5, message=str(server_root))


async def init_frontend(ctx: StageContext) -> StageResult:
    """Generate the Vite React app with ``create-vite``.

    On success the new client directory is handed on through
    ``ctx.client_root`` for the stages that run inside it.
    """
    pm = ctx.config.package_manager
    root = ctx.require_project_root()
    result = await _run_commands(
        ctx,
        6,
        [[pm, "create", "vite@latest", ctx.config.client_dir, "--",
          "--template", ctx.config.vite_template]],
        root,
        "Error initializing Vite React app",
    )
    if result.ok:
        ctx.client_root = ctx.config.client_root
    return result


async def install_frontend_dependencies(ctx: StageContext) -> StageResult:
    pm = ctx.config.package_manager
    return await _run_commands(
        ctx, 7, [[pm, "install"]], ctx.require_client_root(),
        "Error installing client dependencies",
    )


async def setup_styling(ctx: StageContext) -> StageResult:
    """Install Tailwind CSS and its PostCSS peers, then run ``tailwindcss init -p``."""
    config = ctx.config
    return await _run_commands(
        ctx,
        8,
        [
            [config.package_manager, "install", "-D", *config.styling_packages],
            [config.npx, "tailwindcss", "init", "-p"],
        ],
        ctx.require_client_root(),
        "Error installing Tailwind CSS",
    )


async def write_styling_config(ctx: StageContext) -> StageResult:
    client_root = ctx.require_client_root()
    for template, relative in STYLING_FILES:
        write_file(client_root / relative, ctx.renderer.render(template))
    console.print("Tailwind CSS setup completed.")
    return _result(9)


async def patch_vite_proxy(ctx: StageContext) -> StageResult:
    """Replace ``vite.config.js`` with one that proxies ``/api`` to the backend.

    A missing config file is reported but does not stop the pipeline.
    """
    root = ctx.require_project_root()
    vite_config = ctx.config.vite_config_path
    display = vite_config.relative_to(root).as_posix()

    if not vite_config.exists():
        message = f"vite.config.js not found at {display}"
        print_error(message)
        return _result(10, soft_failed=True, message=message)

    write_file(vite_config, ctx.renderer.render(VITE_CONFIG_TEMPLATE))
    console.print(f"Added proxy configuration to {display}", highlight=False)
    return _result(10, message=display)


async def write_readme(ctx: StageContext) -> StageResult:
    readme = ctx.require_project_root() / "README.md"
    write_file(readme, ctx.renderer.render(README_TEMPLATE))
    console.print("README.md created with project documentation.")
    return _result(11, message=str(readme))


PIPELINE_STAGES: tuple[tuple[int, StageFn], ...] = (
    (2, create_project_root),
    (3, init_backend),
    (4, install_backend_dependencies),
    (5, scaffold_backend),
    (6, init_frontend),
    (7, install_frontend_dependencies),
    (8, setup_styling),
    (9, write_styling_config),
    (10, patch_vite_proxy),
    (11, write_readme),
)
