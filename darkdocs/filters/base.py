"""Shared plumbing for markup filters.

A filter rewrites one kind of ``<?name ... ?>`` processing instruction inside
free-form prose and leaves everything else untouched. Filters run in a fixed
order through :class:`FilterPipeline`; each receives a :class:`FilterContext`
describing the page being built.
"""

from __future__ import annotations

import abc
import dataclasses as dc
import logging
import re
import typing as typ
from html import escape

from darkdocs._constants import BROKEN_LINK_CLASS
from darkdocs.xref import BrokenLink

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from darkdocs.diagnostics import Diagnostics
    from darkdocs.xref import CrossReferenceResolver, Resolution

log = logging.getLogger("darkdocs.filters")

# Any instruction still present once the chain has run.
LEFTOVER_PI = re.compile(r"<\?[A-Za-z][\w-]*(?:\s(?:[^?]|\?(?!>))*)?\?>")


@dc.dataclass(frozen=True, slots=True)
class FilterContext:
    """Per-page state handed to every filter.

    Attributes
    ----------
    page_path : str
        Output path of the page being built, relative to its output root.
    resolver : CrossReferenceResolver
        Lookup handle for classes and pages.
    diagnostics : Diagnostics | None
        Sink for broken references; ``None`` only logs them.
    source : str | None
        Human-readable origin of the prose (a ``.page`` path or entity name)
        used in log messages.
    """

    page_path: str
    resolver: CrossReferenceResolver
    diagnostics: Diagnostics | None = None
    source: str | None = None

    @property
    def location(self) -> str:
        return self.source or self.page_path


class PageFilter(abc.ABC):
    """Base class for processing-instruction filters."""

    name: typ.ClassVar[str]

    @abc.abstractmethod
    def process(self, source: str, context: FilterContext) -> str:
        """Return ``source`` with this filter's instructions rewritten."""


def render_link(resolution: Resolution, context: FilterContext) -> str:
    """Render an anchor for ``resolution``, reporting broken ones."""
    if not isinstance(resolution, BrokenLink):
        return f'<a href="{escape(resolution.href, quote=True)}">{escape(resolution.text)}</a>'

    reason = resolution.reason
    log.warning("%s: %s", context.location, reason)
    if context.diagnostics is not None:
        context.diagnostics.record("broken-link", reason, context.location)
    return (
        f'<a href="#" title="{escape(reason, quote=True)}" '
        f'class="{BROKEN_LINK_CLASS}">{escape(resolution.text)}</a>'
    )


class FilterPipeline:
    """Apply an ordered chain of filters to prose.

    Instructions that no filter in the chain handles are escaped after the
    last filter, so they read as literal text instead of vanishing into the
    page as processing instructions.
    """

    def __init__(self, filters: cabc.Iterable[PageFilter]) -> None:
        self.filters = tuple(filters)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(item.name for item in self.filters)

    def process(self, source: str, context: FilterContext) -> str:
        text = source
        for item in self.filters:
            text = item.process(text, context)
        return LEFTOVER_PI.sub(lambda match: escape(match.group(0), quote=False), text)


__all__ = ["LEFTOVER_PI", "FilterContext", "FilterPipeline", "PageFilter", "render_link"]
