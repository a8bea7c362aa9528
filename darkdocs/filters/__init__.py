"""Markup filters for ``<?api ?>``, ``<?link ?>``, and ``<?example ?>`` blocks."""

from __future__ import annotations

import typing as typ

from darkdocs.config.models import DEFAULT_FILTERS, SiteConfigError

from .base import FilterContext, FilterPipeline, PageFilter, render_link
from .examples import (
    ExampleOptions,
    ExampleOptionsError,
    ExamplesFilter,
    UnterminatedExampleError,
    parse_example_options,
)
from .links import ApiLinkFilter, PageLinkFilter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from darkdocs.highlighting import HighlighterRegistry
    from darkdocs.validators import ValidatorRegistry

FILTER_NAMES = ("examples", "links", "api")


def build_pipeline(
    names: cabc.Iterable[str] = DEFAULT_FILTERS,
    *,
    highlighters: HighlighterRegistry,
    validators: ValidatorRegistry,
    default_language: str | None = None,
) -> FilterPipeline:
    """Return a pipeline running the named filters in the order given.

    Raises
    ------
    SiteConfigError
        If a name does not match a known filter.
    """
    filters: list[PageFilter] = []
    for name in names:
        match name:
            case "examples":
                kwargs = {"default_language": default_language} if default_language else {}
                filters.append(ExamplesFilter(highlighters, validators, **kwargs))
            case "links":
                filters.append(PageLinkFilter())
            case "api":
                filters.append(ApiLinkFilter())
            case _:
                known = ", ".join(FILTER_NAMES)
                msg = f"Unknown filter '{name}'. Known filters: {known}"
                raise SiteConfigError(msg)
    return FilterPipeline(filters)


__all__ = [
    "FILTER_NAMES",
    "ApiLinkFilter",
    "ExampleOptions",
    "ExampleOptionsError",
    "ExamplesFilter",
    "FilterContext",
    "FilterPipeline",
    "PageFilter",
    "PageLinkFilter",
    "UnterminatedExampleError",
    "build_pipeline",
    "parse_example_options",
    "render_link",
]
