"""Filters that turn ``<?api ?>`` and ``<?link ?>`` instructions into anchors.

API links name a class::

    <?api ThingFish::Handler ?>
    <?api "the handler":ThingFish::Handler ?>

Page links name another manual page by title or by its ``.page`` path::

    <?link Getting Started ?>
    <?link "installing":setup/install.page ?>

Link text defaults to the class name or the target page title unless a quoted
string is prepended. Unresolved references become ``broken-link`` anchors.
"""

from __future__ import annotations

import re
import typing as typ

from .base import FilterContext, PageFilter, render_link

API_PI = re.compile(
    r"""
    <\?
        api                 # instruction target
        \s+
        (?:"(.*?)":)?       # optional link text
        (.*?)               # class name
        \s+
    \?>
    """,
    re.VERBOSE,
)

LINK_PI = re.compile(
    r"""
    <\?
        link                # instruction target
        \s+
        (?:"(.*?)":)?       # optional link text
        (.*?)               # title or path
        \s+
    \?>
    """,
    re.VERBOSE,
)


class ApiLinkFilter(PageFilter):
    """Rewrite ``<?api ?>`` instructions into links to class pages."""

    name: typ.ClassVar[str] = "api"

    def process(self, source: str, context: FilterContext) -> str:
        def _replace(match: re.Match[str]) -> str:
            link_text, classname = match.groups()
            resolution = context.resolver.resolve_class(
                classname, from_path=context.page_path, text=link_text or None
            )
            return render_link(resolution, context)

        return API_PI.sub(_replace, source)


class PageLinkFilter(PageFilter):
    """Rewrite ``<?link ?>`` instructions into links to other manual pages."""

    name: typ.ClassVar[str] = "links"

    def process(self, source: str, context: FilterContext) -> str:
        def _replace(match: re.Match[str]) -> str:
            link_text, reference = match.groups()
            resolution = context.resolver.resolve_page(
                reference, from_path=context.page_path, text=link_text or None
            )
            return render_link(resolution, context)

        return LINK_PI.sub(_replace, source)


__all__ = ["API_PI", "LINK_PI", "ApiLinkFilter", "PageLinkFilter"]
