"""Shared pytest fixtures for the stackstarter test suite.

Provides reusable fixtures for:
- Configs rooted in a temporary directory
- A recording fake ``CommandRunner`` that imitates npm / create-vite
- Stage contexts wired to the fake runner
"""

from __future__ import annotations

from pathlib import Path

import pytest

from stackstarter.config import Config
from stackstarter.runner import CommandResult
from stackstarter.scaffolder.stages import StageContext
from stackstarter.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

class FakeRunner:
    """Records every command and fakes the side effects stages rely on.

    Args:
        fail_on: Substring of the joined argv that makes a command fail.
        fail_argv: Exact argv that makes a command fail.
        stderr: Error text returned by the failing command.
        make_vite_config: Whether the fake ``create vite`` writes
            ``vite.config.js`` into the new client directory.
    """

    def __init__(
        self,
        fail_on: str | None = None,
        fail_argv: list[str] | None = None,
        stderr: str = "npm ERR! something went wrong",
        make_vite_config: bool = True,
    ) -> None:
        self.fail_on = fail_on
        self.fail_argv = fail_argv
        self.stderr = stderr
        self.make_vite_config = make_vite_config
        self.calls: list[tuple[list[str], Path]] = []

    @property
    def commands(self) -> list[str]:
        return [" ".join(argv) for argv, _ in self.calls]

    async def run(self, argv: list[str], cwd: Path) -> CommandResult:
        self.calls.append((list(argv), Path(cwd)))
        joined = " ".join(argv)

        if (self.fail_on and self.fail_on in joined) or argv == self.fail_argv:
            return CommandResult(argv=list(argv), cwd=cwd, returncode=1, stderr=self.stderr)

        if argv[1:3] == ["create", "vite@latest"]:
            client = Path(cwd) / argv[3]
            (client / "src").mkdir(parents=True, exist_ok=True)
            (client / "src" / "index.css").write_text(":root { color: black; }\n")
            if self.make_vite_config:
                (client / "vite.config.js").write_text("export default {}\n")

        return CommandResult(argv=list(argv), cwd=cwd, stdout=f"ok: {joined}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep STACKSTARTER_* variables from the host out of the tests."""
    for key in (
        "STACKSTARTER_OUTPUT_DIR",
        "STACKSTARTER_FAIL_MODE",
        "STACKSTARTER_PACKAGE_MANAGER",
        "STACKSTARTER_NPX",
        "STACKSTARTER_COMMAND_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """A Config that scaffolds ``my-app`` inside tmp_path."""
    return Config(project_name="my-app", output_dir=tmp_path)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def ctx(config: Config, fake_runner: FakeRunner, renderer: TemplateRenderer) -> StageContext:
    """A StageContext whose project root already exists."""
    config.project_root.mkdir(parents=True)
    return StageContext(
        config=config,
        runner=fake_runner,
        renderer=renderer,
        project_root=config.project_root,
    )


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances with scripted failures."""
    return FakeRunner
