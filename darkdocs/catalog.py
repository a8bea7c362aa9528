r"""Discover manual pages and index them by source path and by title.

Manual pages are ``.page`` files below a source directory. Each file may
start with a YAML front-matter block delimited by ``---`` lines::

    ---
    title: Getting Started
    layout: page
    index: 1
    filters: [examples, links, api]
    ---
    The body, written in Markdown with ``<?link ?>`` and friends.

:func:`load_catalog` reads every page once, in sorted path order, and returns
an immutable :class:`Catalog`. Title lookups resolve to the first page in that
order; duplicated titles are reported when the catalog is built.

Example
-------
>>> from darkdocs.catalog import parse_page_source
>>> meta, body = parse_page_source("---\ntitle: Intro\n---\nHello\n")
>>> meta["title"], body
('Intro', 'Hello\n')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import posixpath
import re
import types
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import HTML_SUFFIX, PAGE_SUFFIX

if typ.TYPE_CHECKING:
    import collections.abc as cabc

log = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\n(.*?\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)


class PageSourceError(ValueError):
    """Raised when a page's front matter cannot be parsed."""


@dc.dataclass(frozen=True, slots=True)
class ManualPage:
    """A single manual page read from the source directory.

    Attributes
    ----------
    source : str
        POSIX path of the ``.page`` file relative to the source root.
    title : str
        Page title from front matter, or the file stem.
    body : str
        Page body with the front matter removed.
    layout : str
        Name of the layout template, without the ``.html`` suffix.
    filters : tuple[str, ...] | None
        Filter names to apply, or ``None`` for the configured default chain.
    index : int | None
        Optional navigation ordering hint.
    """

    source: str
    title: str
    body: str
    layout: str = "page"
    filters: tuple[str, ...] | None = None
    index: int | None = None

    @property
    def output_path(self) -> str:
        return self.source[: -len(PAGE_SUFFIX)] + HTML_SUFFIX

    @property
    def basepath(self) -> str:
        """Return the relative prefix from this page's directory to the root."""
        directory = posixpath.dirname(self.output_path) or "."
        return posixpath.relpath(".", directory)


@dc.dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable index of every manual page.

    Attributes
    ----------
    pages : tuple[ManualPage, ...]
        Pages in catalog order (sorted source path).
    uri_index : Mapping[str, ManualPage]
        Pages keyed by source path.
    title_index : Mapping[str, ManualPage]
        Pages keyed by title; the first page in catalog order wins.
    duplicate_titles : Mapping[str, tuple[str, ...]]
        Titles shared by more than one page, with every source path using it.
    """

    pages: tuple[ManualPage, ...]
    uri_index: typ.Mapping[str, ManualPage]
    title_index: typ.Mapping[str, ManualPage]
    duplicate_titles: typ.Mapping[str, tuple[str, ...]]

    @classmethod
    def build(cls, pages: cabc.Iterable[ManualPage]) -> Catalog:
        """Index ``pages`` in the order given."""
        ordered = tuple(pages)
        uri_index: dict[str, ManualPage] = {}
        title_index: dict[str, ManualPage] = {}
        sharing: dict[str, list[str]] = {}
        for page in ordered:
            uri_index[page.source] = page
            sharing.setdefault(page.title, []).append(page.source)
            title_index.setdefault(page.title, page)

        duplicates = {
            title: tuple(sources)
            for title, sources in sharing.items()
            if len(sources) > 1
        }
        for title, sources in duplicates.items():
            log.warning(
                "Title %r is shared by %s; title links resolve to %s",
                title,
                ", ".join(sources),
                sources[0],
            )
        return cls(
            pages=ordered,
            uri_index=types.MappingProxyType(uri_index),
            title_index=types.MappingProxyType(title_index),
            duplicate_titles=types.MappingProxyType(duplicates),
        )

    def navigation(self) -> list[ManualPage]:
        """Return pages ordered for navigation menus."""
        return sorted(
            self.pages,
            key=lambda page: (
                page.index if page.index is not None else float("inf"),
                page.title.lower(),
                page.source,
            ),
        )


def parse_page_source(text: str) -> tuple[dict[str, typ.Any], str]:
    """Split ``text`` into a front-matter mapping and the page body."""
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text
    loader = YAML(typ="safe")
    try:
        loaded = loader.load(match.group(1) or "") or {}
    except YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise PageSourceError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Front matter must be a mapping."
        raise PageSourceError(msg)
    return dict(loaded), text[match.end() :]


def read_page(path: Path, source_root: Path) -> ManualPage:
    """Read the ``.page`` file at ``path`` into a :class:`ManualPage`."""
    relative = path.relative_to(source_root).as_posix()
    try:
        meta, body = parse_page_source(path.read_text(encoding="utf-8"))
    except PageSourceError as exc:
        msg = f"{relative}: {exc}"
        raise PageSourceError(msg) from exc

    filters = meta.get("filters")
    if isinstance(filters, str):
        filters = [segment for segment in re.split(r"[\s,]+", filters) if segment]
    raw_index = meta.get("index")
    index: int | None = None
    if raw_index is not None:
        try:
            index = int(raw_index)
        except (TypeError, ValueError) as exc:
            msg = f"{relative}: Front matter index must be an integer, got {raw_index!r}"
            raise PageSourceError(msg) from exc
    return ManualPage(
        source=relative,
        title=str(meta.get("title") or path.stem),
        body=body,
        layout=str(meta.get("layout") or "page"),
        filters=tuple(str(name) for name in filters) if filters is not None else None,
        index=index,
    )


def load_catalog(source_dir: Path) -> Catalog:
    """Read every ``.page`` file below ``source_dir`` into a :class:`Catalog`.

    Raises
    ------
    FileNotFoundError
        If ``source_dir`` does not exist.
    PageSourceError
        If a page's front matter is not valid YAML or its index is not an
        integer.
    """
    if not source_dir.is_dir():
        msg = f"Manual source directory '{source_dir}' not found."
        raise FileNotFoundError(msg)
    paths = sorted(
        source_dir.rglob(f"*{PAGE_SUFFIX}"),
        key=lambda p: p.relative_to(source_dir).as_posix(),
    )
    log.debug("Cataloguing %d pages under %s", len(paths), source_dir)
    return Catalog.build(read_page(path, source_dir) for path in paths)


__all__ = [
    "Catalog",
    "ManualPage",
    "PageSourceError",
    "load_catalog",
    "parse_page_source",
    "read_page",
]
