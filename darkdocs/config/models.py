"""Typed dataclasses describing darkdocs build configuration."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
from pathlib import Path

from darkdocs._constants import DEFAULT_EXAMPLE_LANGUAGE, DEFAULT_PYGMENTS_STYLE

DEFAULT_FILTERS = ("examples", "links", "api")
PAGE_ERROR_POLICIES = ("abort", "skip")


class SiteConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ApiConfig:
    """Settings for rendering API documentation from the entity feed.

    Attributes
    ----------
    feed : Path
        JSON or YAML file written by the extraction step.
    output_dir : Path
        Root directory for generated API pages.
    title : str
        Title shown on the index page and in ``<title>`` elements.
    backend : str
        Name of the output backend (``"html"`` or ``"json"``).
    templates_dir : Path | None
        Override for the Jinja template directory.
    static_dir : Path | None
        Override for the directory of assets copied verbatim.
    pygments_style : str
        Pygments style for highlighted sources.
    charset : str
        Declared document charset.
    namespace_separator : str
        Separator between namespace segments in class names.
    reference_time : datetime | None
        Moment commit ages are measured against.
    source_language : str
        Language of method sources and the default for examples in prose.
    """

    feed: Path
    output_dir: Path = Path("doc/api")
    title: str = "API Documentation"
    backend: str = "html"
    templates_dir: Path | None = None
    static_dir: Path | None = None
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    charset: str = "utf-8"
    namespace_separator: str = "::"
    reference_time: dt.datetime | None = None
    source_language: str = DEFAULT_EXAMPLE_LANGUAGE


@dc.dataclass(slots=True)
class ManualConfig:
    """Settings for rendering the hand-written manual.

    Attributes
    ----------
    source_dir : Path
        Directory holding ``.page`` files.
    output_dir : Path
        Root directory for generated manual pages.
    title : str
        Manual title available to layouts.
    layouts_dir : Path | None
        Override for the Jinja layout directory.
    resources_dir : Path | None
        Directory copied verbatim into the output root.
    api_prefix : str | None
        API output root relative to ``output_dir``; derived when unset.
    default_filters : tuple[str, ...]
        Filter chain applied to pages that do not name their own.
    default_language : str
        Language assumed by examples without a ``language`` key.
    on_page_error : str
        ``"abort"`` re-raises page failures; ``"skip"`` logs and continues.
    pygments_style : str
        Pygments style for examples and fenced code.
    """

    source_dir: Path
    output_dir: Path = Path("doc/manual")
    title: str = "Manual"
    layouts_dir: Path | None = None
    resources_dir: Path | None = None
    api_prefix: str | None = None
    default_filters: tuple[str, ...] = DEFAULT_FILTERS
    default_language: str = DEFAULT_EXAMPLE_LANGUAGE
    on_page_error: str = "abort"
    pygments_style: str = DEFAULT_PYGMENTS_STYLE


@dc.dataclass(slots=True)
class SiteConfig:
    """Top-level configuration combining both pipelines."""

    api: ApiConfig | None = None
    manual: ManualConfig | None = None
    dry_run: bool = False

    def require_api(self) -> ApiConfig:
        if self.api is None:
            msg = "No 'api' section defined in the configuration."
            raise SiteConfigError(msg)
        return self.api

    def require_manual(self) -> ManualConfig:
        if self.manual is None:
            msg = "No 'manual' section defined in the configuration."
            raise SiteConfigError(msg)
        return self.manual


__all__ = [
    "DEFAULT_FILTERS",
    "PAGE_ERROR_POLICIES",
    "ApiConfig",
    "ManualConfig",
    "SiteConfig",
    "SiteConfigError",
]
