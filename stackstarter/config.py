"""stackstarter configuration.

Typed configuration for the scaffolding pipeline. Settings use Pydantic v2
models so they are validated at construction time and can be serialised to
and from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

FailMode = Literal["best-effort", "strict"]


class Config(BaseModel):
    """Global stackstarter configuration.

    Holds every tuneable parameter and derived path used by the pipeline.
    Instances are created once by the CLI entry point and then passed to
    ``Pipeline`` and through it to every stage.
    """

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("."))
    server_dir: str = Field(default="server")
    client_dir: str = Field(default="client")

    package_manager: str = Field(default="npm", min_length=1)
    npx: str = Field(default="npx", min_length=1)
    backend_packages: list[str] = Field(default_factory=lambda: ["express", "dotenv"])
    styling_packages: list[str] = Field(
        default_factory=lambda: ["tailwindcss", "postcss", "autoprefixer"]
    )
    vite_template: str = Field(default="react")

    fail_mode: FailMode = Field(
        default="best-effort",
        description="'strict' exits non-zero when a stage halts the pipeline",
    )
    command_timeout: int | None = Field(
        default=None, ge=1, description="Per-command timeout in seconds (None waits forever)"
    )

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_root(self) -> Path:
        """Top-level directory created for the new project."""
        return self.output_dir / self.project_name

    @property
    def server_root(self) -> Path:
        """Express backend directory inside the project root."""
        return self.project_root / self.server_dir

    @property
    def client_root(self) -> Path:
        """Vite frontend directory inside the project root."""
        return self.project_root / self.client_dir

    @property
    def vite_config_path(self) -> Path:
        """The Vite config file generated by ``create-vite``."""
        return self.client_root / "vite.config.js"

    @property
    def strict(self) -> bool:
        return self.fail_mode == "strict"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKSTARTER_OUTPUT_DIR, STACKSTARTER_FAIL_MODE,
            STACKSTARTER_PACKAGE_MANAGER, STACKSTARTER_NPX,
            STACKSTARTER_COMMAND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSTARTER_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STACKSTARTER_OUTPUT_DIR"])
        if os.environ.get("STACKSTARTER_FAIL_MODE"):
            kwargs["fail_mode"] = os.environ["STACKSTARTER_FAIL_MODE"]
        if os.environ.get("STACKSTARTER_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["STACKSTARTER_PACKAGE_MANAGER"]
        if os.environ.get("STACKSTARTER_NPX"):
            kwargs["npx"] = os.environ["STACKSTARTER_NPX"]
        if os.environ.get("STACKSTARTER_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["STACKSTARTER_COMMAND_TIMEOUT"])
        return cls(**kwargs)
