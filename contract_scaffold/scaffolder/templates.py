"""Template store for project scaffolding.

Provides the TemplateRenderer class which locates template resources under
the ``contract_scaffold/scaffolder/templates/`` directory (or an override).
Two kinds of access are offered:

* raw access (:meth:`TemplateRenderer.read_raw`, :meth:`resource_path`) for
  the project templates, whose ``<placeholder>`` tokens are substituted
  textually by ``TemplateProvider``;
* Jinja2 rendering (:meth:`render`, :meth:`render_to_file`) for templates
  owned by the scaffolder itself, such as generated unit tests.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from contract_scaffold.utils import capitalize_first_letter


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Loads and renders scaffolding templates.

    Raw reads and Jinja2 lookups share one loader, so a missing resource
    raises ``jinja2.TemplateNotFound`` (an ``OSError`` subclass) in both
    cases.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["camel_case"] = _camel_case_filter

    # -- Raw access --------------------------------------------------------

    def read_raw(self, name: str) -> str:
        """Return the untouched text of template *name*."""
        source, _filename, _uptodate = self.env.loader.get_source(self.env, name)
        return source

    def resource_path(self, name: str) -> Path:
        """Return the filesystem path of a binary resource.

        Raises:
            FileNotFoundError: If the resource is not in the store.
        """
        path = self.template_dir / name
        if not path.is_file():
            raise FileNotFoundError(f"Template resource not found: {path}")
        return path

    # -- Jinja2 rendering --------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"unit_test/ContractTest.java.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output
        path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of every resource path under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*")
            if p.is_file()
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``SomeThing`` to ``someThing``."""
    parts = [p for p in re.split(r"[-_\s]+", value) if p]
    if not parts:
        return ""
    head, *rest = parts
    return head[0].lower() + head[1:] + "".join(capitalize_first_letter(p) for p in rest)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
