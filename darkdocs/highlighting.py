"""Syntax highlighting behind a small capability interface.

Filters and templates never talk to Pygments directly. They ask a
:class:`HighlighterRegistry` for markup, and the registry picks the first
:class:`Highlighter` that supports the requested language. Unknown languages
are not fatal: the registry logs the names closest to the request by edit
distance and returns an escaped plain ``<pre>`` block.

Example
-------
>>> registry = HighlighterRegistry([PygmentsHighlighter()])
>>> registry.supports("python")
True
>>> "print" in registry.highlight("print(1)", "python")
True
"""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_all_lexers, get_lexer_by_name
from pygments.util import ClassNotFound

from ._constants import DEFAULT_PYGMENTS_STYLE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .diagnostics import Diagnostics

log = logging.getLogger(__name__)

SUGGESTION_LIMIT = 5


@typ.runtime_checkable
class Highlighter(typ.Protocol):
    """Anything able to turn source text into highlighted HTML."""

    def supports(self, language: str) -> bool: ...

    def highlight(self, text: str, language: str) -> str: ...

    def names(self) -> cabc.Iterable[str]: ...


class PygmentsHighlighter:
    """Highlight code with Pygments lexers looked up by alias."""

    def __init__(self, style: str = DEFAULT_PYGMENTS_STYLE, cssclass: str = "highlight") -> None:
        self.style = style
        self.cssclass = cssclass
        self._formatter = HtmlFormatter(style=style, cssclass=cssclass)
        self._names: tuple[str, ...] | None = None

    @property
    def stylesheet(self) -> str:
        """Return the CSS rules for this highlighter's token classes."""
        return self._formatter.get_style_defs(f".{self.cssclass}")

    def supports(self, language: str) -> bool:
        try:
            get_lexer_by_name(language)
        except ClassNotFound:
            return False
        return True

    def highlight(self, text: str, language: str) -> str:
        lexer = get_lexer_by_name(language)
        return highlight(text, lexer, self._formatter)

    def highlight_lines(self, text: str, language: str, first_line: int) -> str:
        """Highlight ``text`` with inline line numbers starting at ``first_line``."""
        formatter = HtmlFormatter(
            style=self.style,
            cssclass=self.cssclass,
            linenos="inline",
            linenostart=first_line,
        )
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        return highlight(text, lexer, formatter)

    def names(self) -> tuple[str, ...]:
        if self._names is None:
            aliases = {alias for _name, found, _f, _m in get_all_lexers() for alias in found}
            self._names = tuple(sorted(aliases))
        return self._names


def edit_distance(left: str, right: str) -> int:
    """Return the Levenshtein distance between ``left`` and ``right``.

    >>> edit_distance("pyhton", "python")
    2
    """
    if len(left) < len(right):
        left, right = right, left
    previous = list(range(len(right) + 1))
    for i, lchar in enumerate(left, start=1):
        current = [i]
        for j, rchar in enumerate(right, start=1):
            cost = 0 if lchar == rchar else 1
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


def suggest_names(
    language: str, known: cabc.Iterable[str], limit: int = SUGGESTION_LIMIT
) -> list[str]:
    """Return up to ``limit`` known names ranked by closeness to ``language``."""
    target = language.lower()
    ranked = sorted(set(known), key=lambda name: (edit_distance(target, name.lower()), name))
    return ranked[:limit]


class HighlighterRegistry:
    """Ordered collection of highlighters consulted by language name."""

    def __init__(
        self,
        highlighters: cabc.Iterable[Highlighter] | None = None,
        *,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._highlighters: list[Highlighter] = list(highlighters or [])
        self.diagnostics = diagnostics

    def register(self, highlighter: Highlighter) -> None:
        self._highlighters.append(highlighter)

    def find(self, language: str) -> Highlighter | None:
        for candidate in self._highlighters:
            if candidate.supports(language):
                return candidate
        return None

    def supports(self, language: str) -> bool:
        return self.find(language) is not None

    def known_names(self) -> list[str]:
        names: set[str] = set()
        for candidate in self._highlighters:
            names.update(candidate.names())
        return sorted(names)

    def highlight(self, text: str, language: str) -> str:
        """Return highlighted HTML, or an escaped ``<pre>`` for unknown languages."""
        highlighter = self.find(language)
        if highlighter is not None:
            return highlighter.highlight(text, language)

        suggestions = suggest_names(language, self.known_names())
        message = f"No syntax called '{language}'."
        if suggestions:
            message = f"{message} Perhaps you meant one of: {', '.join(suggestions)}"
        log.warning(message)
        if self.diagnostics is not None:
            self.diagnostics.record("unknown-language", message)
        return f'<pre class="plain">{escape(text)}</pre>\n'


def default_registry(
    style: str = DEFAULT_PYGMENTS_STYLE, *, diagnostics: Diagnostics | None = None
) -> HighlighterRegistry:
    """Return a registry backed by a single :class:`PygmentsHighlighter`."""
    return HighlighterRegistry([PygmentsHighlighter(style)], diagnostics=diagnostics)


__all__ = [
    "Highlighter",
    "HighlighterRegistry",
    "PygmentsHighlighter",
    "default_registry",
    "edit_distance",
    "suggest_names",
]
