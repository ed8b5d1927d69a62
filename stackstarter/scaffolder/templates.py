"""Jinja2 template loading for project scaffolding.

Provides the TemplateRenderer class which loads the ``.j2`` files under
``stackstarter/scaffolder/templates/``.  Generated files are static: templates
are rendered with an empty context and ``StrictUndefined``, so a stray
``{{ variable }}`` fails loudly instead of being silently blanked.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the static scaffolding templates.

    Output is the template file's content unchanged: trailing newlines are
    kept and no block trimming is applied.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_path: str) -> str:
        """Render a single template.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"server/index.js.j2"``).

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render()

    def source(self, template_path: str) -> str:
        """Return the raw, unrendered text of a template."""
        assert self.env.loader is not None
        text, _, _ = self.env.loader.get_source(self.env, template_path)
        return text

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )
