"""Resolve cross-references to output locations relative to the linking page.

The resolver answers two questions without side effects:

* where does the API page for a qualified class name live, and
* where does the manual page for a ``.page`` path or a title live?

Hits come back as :class:`ResolvedLink`; misses come back as
:class:`BrokenLink` carrying the reason, so callers can render a visibly
broken anchor and carry on. Every ``href`` is relative to the directory of
the page doing the linking, which keeps the generated tree relocatable.

Example
-------
>>> from darkdocs.index import EntityIndex
>>> from darkdocs.entities import DocClass
>>> index = EntityIndex.build([], [DocClass(name="A::X")])
>>> resolver = CrossReferenceResolver(index=index, api_prefix="api")
>>> resolver.resolve_class("A::X", from_path="guide/intro.html").href
'../api/A/X.html'
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ

from ._constants import PAGE_SUFFIX
from .config.models import SiteConfigError

if typ.TYPE_CHECKING:
    from .catalog import Catalog, ManualPage
    from .index import EntityIndex


@dc.dataclass(frozen=True, slots=True)
class ResolvedLink:
    """A reference that resolved to a concrete location."""

    href: str
    text: str

    broken: typ.ClassVar[bool] = False


@dc.dataclass(frozen=True, slots=True)
class BrokenLink:
    """A reference that could not be resolved."""

    reference: str
    text: str
    reason: str

    broken: typ.ClassVar[bool] = True
    href: typ.ClassVar[str] = "#"


Resolution = ResolvedLink | BrokenLink


def relative_href(target: str, from_path: str) -> str:
    """Return ``target`` relative to the directory containing ``from_path``.

    Both arguments are POSIX paths relative to the same output root.

    >>> relative_href("A/X.html", "B/Y.html")
    '../A/X.html'
    >>> relative_href("index.html", "index.html")
    'index.html'
    """
    start = posixpath.dirname(from_path) or "."
    return posixpath.relpath(target, start)


@dc.dataclass(frozen=True, slots=True)
class CrossReferenceResolver:
    """Pure lookups against an entity index and a page catalog.

    Attributes
    ----------
    index : EntityIndex | None
        API entities; required for class references.
    catalog : Catalog | None
        Manual pages; page references are always broken without one.
    api_prefix : str
        Location of the API output root relative to the output root of the
        pages doing the linking. Empty inside the API docs themselves.
    """

    index: EntityIndex | None = None
    catalog: Catalog | None = None
    api_prefix: str = ""

    def resolve_class(
        self, name: str, *, from_path: str, text: str | None = None
    ) -> Resolution:
        """Resolve a fully qualified class name.

        Raises
        ------
        SiteConfigError
            If the resolver was built without an entity index.
        """
        if self.index is None:
            msg = "The API entity feed is not configured; cannot resolve class links."
            raise SiteConfigError(msg)
        name = name.strip()
        doc_class = self.index.by_class_name.get(name)
        if doc_class is None:
            reason = f"Could not find a link for class '{name}'"
            return BrokenLink(reference=name, text=text or name, reason=reason)
        target = doc_class.output_path
        if self.api_prefix:
            target = posixpath.join(self.api_prefix, target)
        return ResolvedLink(href=relative_href(target, from_path), text=text or name)

    def resolve_page(
        self, reference: str, *, from_path: str, text: str | None = None
    ) -> Resolution:
        """Resolve a ``.page`` source path or an exact, case-sensitive title."""
        reference = reference.strip()
        page = self.find_page(reference)
        if page is None:
            reason = f"Could not find a link for reference '{reference}'"
            return BrokenLink(reference=reference, text=text or reference, reason=reason)
        return ResolvedLink(
            href=relative_href(page.output_path, from_path), text=text or page.title
        )

    def find_page(self, reference: str) -> ManualPage | None:
        """Look a page up by source path when ``reference`` ends in ``.page``."""
        if self.catalog is None:
            return None
        if reference.endswith(PAGE_SUFFIX):
            return self.catalog.uri_index.get(reference)
        return self.catalog.title_index.get(reference)

    def class_href(self, name: str | None, from_path: str) -> str | None:
        """Return the href for ``name`` or ``None``; convenient inside templates."""
        if not name or self.index is None:
            return None
        resolution = self.resolve_class(name, from_path=from_path)
        return None if resolution.broken else resolution.href

    def file_href(self, path: str | None, from_path: str) -> str | None:
        if not path or self.index is None:
            return None
        doc_file = self.index.by_full_path.get(path)
        if doc_file is None:
            return None
        target = doc_file.output_path
        if self.api_prefix:
            target = posixpath.join(self.api_prefix, target)
        return relative_href(target, from_path)


__all__ = [
    "BrokenLink",
    "CrossReferenceResolver",
    "Resolution",
    "ResolvedLink",
    "relative_href",
]
