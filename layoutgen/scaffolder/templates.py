"""Jinja2 template rendering for skeleton and manifest content.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``layoutgen/scaffolder/templates/`` directory.  Templates are grouped by
language (``rust/Cargo.toml.j2``, ``go/main.go.j2`` ...) and rendered with a
small context, usually just the project name.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from layoutgen.utils import write_text


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the Jinja2 templates shipped with the scaffolder.

    Rendering never touches an existing file: :meth:`render_if_absent` is the
    only writing entry point and it leaves present files alone.
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
        )
        self.env.filters["go_package"] = go_package_name
        self.env.filters["crate_name"] = _crate_name_filter
        self.env.filters["npm_name"] = _npm_name_filter

    # -- Rendering -----------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"rust/Cargo.toml.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_if_absent(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Optional[Path]:
        """Render *template_path* into *output_path* unless it already exists.

        Returns:
            The written path, or ``None`` when the file was already present.

        Raises:
            OSError: If the file cannot be written.
        """
        out = Path(output_path)
        if out.exists():
            return None
        write_text(out, self.render(template_path, context))
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def go_package_name(value: str) -> str:
    """Go package clause for a directory name (``my-pkg`` -> ``my_pkg``)."""
    return value.replace("-", "_").lower()


def _crate_name_filter(value: str) -> str:
    """Cargo accepts ``[A-Za-z0-9_-]``; anything else becomes ``-``."""
    name = re.sub(r"[^A-Za-z0-9_-]+", "-", value.strip()).strip("-")
    return name or "app"


def _npm_name_filter(value: str) -> str:
    """npm package names are lower-case and URL safe."""
    name = re.sub(r"[^a-z0-9._-]+", "-", value.strip().lower()).strip("-")
    return name or "app"
