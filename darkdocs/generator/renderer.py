"""Render templates with contained errors, and render prose as Markdown.

:class:`TemplateRenderer` evaluates Jinja templates against an enumerated set
of bindings. A template that reads a binding or attribute that does not exist
fails with a :class:`TemplateRenderError` naming the template, the original
message, and the tail of the output rendered so far, rather than emitting a
half-rendered page.

:class:`ProseRenderer` converts filtered documentation prose to HTML with
Python-Markdown and Pygments-backed ``codehilite`` blocks.
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    UndefinedError,
    select_autoescape,
)
from markdown import Markdown

from darkdocs._constants import DEFAULT_PYGMENTS_STYLE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
ERROR_CONTEXT_CHARS = 50
TEMPLATE_BINDINGS = frozenset(
    {
        "catalog",
        "classes",
        "content",
        "entity",
        "files",
        "markup",
        "modsort",
        "options",
        "page",
        "rel_prefix",
        "resolver",
        "vcs",
    }
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)


class TemplateRenderError(RuntimeError):
    """Raised when a template cannot be found or fails during evaluation."""

    def __init__(self, template: str, message: str, fragment: str | None = None) -> None:
        self.template = template
        self.original_message = message
        self.fragment = fragment
        if fragment is None:
            text = f"Error while evaluating {template}: {message}"
        else:
            text = f"Error while evaluating {template}: {message} (at {fragment!r})"
        super().__init__(text)


class TemplateRenderer:
    """Evaluate Jinja templates from one or more directories."""

    def __init__(self, *templates_dirs: Path | None) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        *templates_dirs : Path | None
            Directories searched in order; ``None`` entries are skipped. The
            package templates are always searched last.
        """
        search = [path for path in templates_dirs if path is not None]
        search.append(DEFAULT_TEMPLATES_DIR)
        self.search_path = tuple(search)
        self.env = Environment(
            loader=FileSystemLoader([str(path) for path in self.search_path]),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, bindings: cabc.Mapping[str, typ.Any]) -> str:
        """Render ``template_name`` with ``bindings`` and return the output.

        Raises
        ------
        ValueError
            If ``bindings`` contains a name templates are not allowed to see.
        TemplateRenderError
            If the template is missing or reads an undefined value.
        """
        unknown = sorted(set(bindings) - TEMPLATE_BINDINGS)
        if unknown:
            msg = f"Unsupported template bindings: {', '.join(unknown)}"
            raise ValueError(msg)

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as exc:
            searched = ", ".join(str(path) for path in self.search_path)
            raise TemplateRenderError(
                template_name, f"template not found (searched {searched})"
            ) from exc

        filename = template.filename or template_name
        chunks: list[str] = []
        try:
            for chunk in template.generate(**bindings):
                chunks.append(chunk)
        except UndefinedError as exc:
            fragment = "".join(chunks)[-ERROR_CONTEXT_CHARS:]
            raise TemplateRenderError(filename, exc.message or str(exc), fragment) from exc
        return "".join(chunks)


class ProseRenderer:
    """Render Markdown prose with consistent code highlighting."""

    def __init__(self, pygments_style: str = DEFAULT_PYGMENTS_STYLE) -> None:
        self.pygments_style = pygments_style

    def markdown(self, text: str) -> str:
        """Render markdown into HTML; blank input renders as an empty string."""
        normalized = FENCED_INDENT_PATTERN.sub(r"\1", text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "highlight",
                    "pygments_style": self.pygments_style,
                }
            },
            output_format="html",
        )
        return md.convert(normalized)


__all__ = [
    "DEFAULT_TEMPLATES_DIR",
    "ERROR_CONTEXT_CHARS",
    "TEMPLATE_BINDINGS",
    "ProseRenderer",
    "TemplateRenderError",
    "TemplateRenderer",
]
