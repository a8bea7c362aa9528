"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """Rendered output waiting to be emitted.

    Attributes
    ----------
    path : str
        POSIX path relative to the output root.
    content : str
        Rendered document text.
    """

    path: str
    content: str


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Site-wide values exposed to templates as ``options``.

    Attributes
    ----------
    title : str
        Title of the documentation set.
    charset : str
        Charset declared in generated pages.
    stylesheet : str
        CSS for highlighted code, inlined into page heads.
    generator : str
        Name written into the ``generator`` meta element.
    """

    title: str
    charset: str = "utf-8"
    stylesheet: str = ""
    generator: str = "darkdocs"


__all__ = ["RenderOptions", "RenderedPage"]
