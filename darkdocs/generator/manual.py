"""Render the hand-written manual from its page catalog.

Each page body runs through its filter chain, then Markdown, then the layout
template named in its front matter. Pages link to one another and to the API
documentation through the same resolver, so every ``href`` is relative to
the page being written.
"""

from __future__ import annotations

import logging
import typing as typ

from darkdocs._constants import STATIC_ASSETS
from darkdocs.diagnostics import Diagnostics
from darkdocs.filters import (
    ExampleOptionsError,
    FilterContext,
    FilterPipeline,
    UnterminatedExampleError,
    build_pipeline,
)
from darkdocs.highlighting import HighlighterRegistry, PygmentsHighlighter
from darkdocs.validators import ValidatorRegistry
from darkdocs.xref import CrossReferenceResolver

from .api import DEFAULT_STATIC_DIR
from .emitter import PageEmitter
from .models import RenderedPage, RenderOptions
from .renderer import ProseRenderer, TemplateRenderer, TemplateRenderError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from darkdocs.catalog import Catalog, ManualPage
    from darkdocs.config.models import ManualConfig
    from darkdocs.index import EntityIndex

log = logging.getLogger(__name__)

PAGE_FAILURES = (UnterminatedExampleError, ExampleOptionsError, TemplateRenderError)


class PageBuildError(RuntimeError):
    """Raised when a single manual page cannot be built."""

    def __init__(self, source: str, error: Exception) -> None:
        self.source = source
        self.error = error
        super().__init__(f"{source}: {error}")


class ManualGenerator:
    """Render every catalogued page and write it beneath the output directory."""

    def __init__(
        self,
        config: ManualConfig,
        catalog: Catalog,
        *,
        index: EntityIndex | None = None,
        output_dir: Path | None = None,
        dry_run: bool = False,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        config : ManualConfig
            Manual settings: layouts, default filters, and error policy.
        catalog : Catalog
            Every page to render, built before any rendering starts.
        index : EntityIndex, optional
            API entities for ``<?api ?>`` links; class links fail without it.
        output_dir : Path, optional
            Override for ``config.output_dir``.
        dry_run : bool, optional
            Log intended writes instead of touching the filesystem.
        diagnostics : Diagnostics, optional
            Sink for broken references, unknown languages, and skipped pages.
        """
        self.config = config
        self.catalog = catalog
        self.output_dir = output_dir or config.output_dir
        self.dry_run = dry_run
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        for title, sources in catalog.duplicate_titles.items():
            self.diagnostics.record(
                "duplicate-title",
                f"Title {title!r} is shared by {', '.join(sources)}",
                sources[0],
            )

        highlighter = PygmentsHighlighter(config.pygments_style)
        self.highlighters = HighlighterRegistry([highlighter], diagnostics=self.diagnostics)
        self.validators = ValidatorRegistry()
        self.templates = TemplateRenderer(config.layouts_dir)
        self.prose_renderer = ProseRenderer(config.pygments_style)
        self.resolver = CrossReferenceResolver(
            index=index, catalog=catalog, api_prefix=config.api_prefix or ""
        )
        self.options = RenderOptions(title=config.title, stylesheet=highlighter.stylesheet)
        self._pipelines: dict[tuple[str, ...], FilterPipeline] = {}

    def pipeline_for(self, page: ManualPage) -> FilterPipeline:
        """Return the filter pipeline for ``page``, building it on first use."""
        names = page.filters if page.filters is not None else self.config.default_filters
        pipeline = self._pipelines.get(names)
        if pipeline is None:
            pipeline = build_pipeline(
                names,
                highlighters=self.highlighters,
                validators=self.validators,
                default_language=self.config.default_language,
            )
            self._pipelines[names] = pipeline
        return pipeline

    def render_page(self, page: ManualPage) -> RenderedPage:
        """Filter, convert, and lay out a single page."""
        context = FilterContext(
            page_path=page.output_path,
            resolver=self.resolver,
            diagnostics=self.diagnostics,
            source=page.source,
        )
        filtered = self.pipeline_for(page).process(page.body, context)
        content = self.prose_renderer.markdown(filtered)
        html = self.templates.render(
            f"{page.layout}.html",
            {
                "page": page,
                "content": content,
                "catalog": self.catalog,
                "resolver": self.resolver,
                "rel_prefix": page.basepath,
                "options": self.options,
            },
        )
        return RenderedPage(page.output_path, html)

    def run(self) -> list[Path]:
        """Render every page and copy resources, returning the written paths.

        Raises
        ------
        PageBuildError
            If a page fails and ``on_page_error`` is ``"abort"``.
        SiteConfigError
            If a page names an unknown filter, or links to a class while no
            entity feed is configured.
        """
        emitter = PageEmitter(self.output_dir, dry_run=self.dry_run)
        written: list[Path] = []
        for page in self.catalog.pages:
            log.debug("Rendering %s", page.source)
            try:
                rendered = self.render_page(page)
            except PAGE_FAILURES as exc:
                error = PageBuildError(page.source, exc)
                if self.config.on_page_error != "skip":
                    log.error("Failed to build manual page %s", error)  # noqa: TRY400
                    raise error from exc
                log.warning("Skipping manual page %s", error)
                self.diagnostics.record("page-error", str(exc), page.source)
                continue
            written.append(emitter.emit(rendered.path, rendered.content))

        if self.config.resources_dir is not None:
            emitter.copy_static(self.config.resources_dir)
        else:
            emitter.copy_static(DEFAULT_STATIC_DIR, STATIC_ASSETS)
        log.info("Generated %d manual pages in %s", len(written), self.output_dir)
        return written


__all__ = ["PAGE_FAILURES", "ManualGenerator", "PageBuildError"]
