"""Render API documentation from the entity index through a named backend.

Backends form a closed set selected by name when the run starts:

``html``
    One ``index.html``, one page per class and one page per source file,
    rendered through Jinja templates, plus the static assets they reference.
``json``
    A single ``index.json`` manifest listing every entity with its output
    path, for tools that build their own navigation.

Example
-------
>>> from pathlib import Path
>>> from darkdocs.config import ApiConfig
>>> from darkdocs.generator.api import ApiDocGenerator, load_api_index
>>> config = ApiConfig(feed=Path("doc/entities.yaml"))  # doctest: +SKIP
>>> ApiDocGenerator(config, load_api_index(config)).run()  # doctest: +SKIP
[PosixPath('doc/api/index.html'), ...]
"""

from __future__ import annotations

import json
import logging
import posixpath
import typing as typ
from pathlib import Path

from darkdocs._constants import INDEX_FILENAME, MANIFEST_FILENAME, STATIC_ASSETS
from darkdocs.config.models import SiteConfigError
from darkdocs.diagnostics import Diagnostics
from darkdocs.durations import extract_vcs_info, resolve_reference_time
from darkdocs.entities import load_entity_feed
from darkdocs.filters import FilterContext, FilterPipeline, build_pipeline
from darkdocs.highlighting import HighlighterRegistry, PygmentsHighlighter
from darkdocs.index import EntityIndex
from darkdocs.validators import ValidatorRegistry
from darkdocs.xref import CrossReferenceResolver

from .emitter import PageEmitter
from .models import RenderedPage, RenderOptions
from .renderer import ProseRenderer, TemplateRenderer

if typ.TYPE_CHECKING:
    from darkdocs.config.models import ApiConfig
    from darkdocs.entities import DocClass, DocFile, DocMethod

log = logging.getLogger(__name__)

DEFAULT_STATIC_DIR = Path(__file__).resolve().parents[1] / "static"
API_PROSE_FILTERS = ("examples", "api")


def root_prefix(page_path: str) -> str:
    """Return the relative path from ``page_path``'s directory to the root.

    >>> root_prefix("index.html")
    '.'
    >>> root_prefix("ThingFish/Handler.html")
    '..'
    """
    directory = posixpath.dirname(page_path) or "."
    return posixpath.relpath(".", directory)


class PageMarkup:
    """Prose and source rendering bound to a single output page.

    Templates receive an instance as ``markup``. Prose goes through the
    example and API-link filters before Markdown, so ``<?api ?>`` references
    inside descriptions resolve relative to the page being rendered.
    """

    def __init__(
        self,
        page_path: str,
        *,
        resolver: CrossReferenceResolver,
        pipeline: FilterPipeline,
        prose_renderer: ProseRenderer,
        highlighter: PygmentsHighlighter,
        source_language: str,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.page_path = page_path
        self.resolver = resolver
        self.pipeline = pipeline
        self.prose_renderer = prose_renderer
        self.highlighter = highlighter
        self.source_language = source_language
        self.diagnostics = diagnostics

    def prose(self, text: str | None, source: str | None = None) -> str:
        """Return ``text`` filtered and rendered to HTML."""
        if not text or not text.strip():
            return ""
        context = FilterContext(
            page_path=self.page_path,
            resolver=self.resolver,
            diagnostics=self.diagnostics,
            source=source,
        )
        return self.prose_renderer.markdown(self.pipeline.process(text, context))

    def source(self, method: DocMethod) -> str:
        """Return the highlighted source listing of ``method`` with line numbers."""
        if not method.source.strip():
            return ""
        return self.highlighter.highlight_lines(
            method.source, self.source_language, method.line or 1
        )


class ApiBackend(typ.Protocol):
    """Turns an entity index into rendered output pages."""

    name: typ.ClassVar[str]
    copies_static: typ.ClassVar[bool]

    def render(self, index: EntityIndex) -> list[RenderedPage]: ...


class HtmlBackend:
    """Render index, class, and file pages through Jinja templates."""

    name: typ.ClassVar[str] = "html"
    copies_static: typ.ClassVar[bool] = True

    def __init__(
        self, config: ApiConfig, *, diagnostics: Diagnostics | None = None
    ) -> None:
        self.config = config
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.templates = TemplateRenderer(config.templates_dir)
        self.highlighter = PygmentsHighlighter(config.pygments_style)
        self.pipeline = build_pipeline(
            API_PROSE_FILTERS,
            highlighters=HighlighterRegistry(
                [self.highlighter], diagnostics=self.diagnostics
            ),
            validators=ValidatorRegistry(),
            default_language=config.source_language,
        )
        self.prose_renderer = ProseRenderer(config.pygments_style)
        self.options = RenderOptions(
            title=config.title,
            charset=config.charset,
            stylesheet=self.highlighter.stylesheet,
        )
        self.reference_time = resolve_reference_time(config.reference_time)

    def render(self, index: EntityIndex) -> list[RenderedPage]:
        """Render every page for ``index`` in a stable order."""
        resolver = CrossReferenceResolver(index=index)
        shared = {
            "files": index.sorted_files(),
            "classes": index.sorted_classes(),
            "modsort": index.modsort(),
            "resolver": resolver,
            "options": self.options,
        }

        pages = [self._render("index.html", INDEX_FILENAME, None, shared)]
        for doc_class in shared["classes"]:
            log.debug("Generating class page for %s", doc_class.name)
            pages.append(self._render_class(doc_class, shared))
        for doc_file in shared["files"]:
            log.debug("Generating file page for %s", doc_file.path)
            pages.append(self._render("filepage.html", doc_file.output_path, doc_file, shared))
        return pages

    def _render_class(
        self, doc_class: DocClass, shared: dict[str, typ.Any]
    ) -> RenderedPage:
        vcs = extract_vcs_info(doc_class, self.reference_time)
        return self._render(
            "classpage.html", doc_class.output_path, doc_class, shared, vcs=vcs
        )

    def _render(
        self,
        template: str,
        page_path: str,
        entity: DocClass | DocFile | None,
        shared: dict[str, typ.Any],
        **extra: typ.Any,
    ) -> RenderedPage:
        markup = PageMarkup(
            page_path,
            resolver=shared["resolver"],
            pipeline=self.pipeline,
            prose_renderer=self.prose_renderer,
            highlighter=self.highlighter,
            source_language=self.config.source_language,
            diagnostics=self.diagnostics,
        )
        bindings = {
            **shared,
            "entity": entity,
            "rel_prefix": root_prefix(page_path),
            "markup": markup,
            **extra,
        }
        return RenderedPage(page_path, self.templates.render(template, bindings))


class JsonBackend:
    """Render a single manifest describing every documented entity."""

    name: typ.ClassVar[str] = "json"
    copies_static: typ.ClassVar[bool] = False

    def __init__(
        self, config: ApiConfig, *, diagnostics: Diagnostics | None = None
    ) -> None:
        self.config = config
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def render(self, index: EntityIndex) -> list[RenderedPage]:
        manifest = {
            "title": self.config.title,
            "files": [
                {
                    "path": doc_file.path,
                    "title": doc_file.display_title,
                    "output_path": doc_file.output_path,
                }
                for doc_file in index.sorted_files()
            ],
            "classes": [
                {
                    "name": doc_class.name,
                    "kind": doc_class.kind,
                    "superclass": doc_class.superclass,
                    "file": doc_class.file,
                    "output_path": doc_class.output_path,
                    "methods": [
                        {
                            "name": method.name,
                            "kind": method.kind,
                            "visibility": method.visibility,
                            "anchor": method.anchor,
                        }
                        for method in doc_class.methods
                    ],
                }
                for doc_class in index.modsort()
            ],
        }
        content = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
        return [RenderedPage(MANIFEST_FILENAME, content)]


API_BACKENDS: dict[str, type[HtmlBackend] | type[JsonBackend]] = {
    HtmlBackend.name: HtmlBackend,
    JsonBackend.name: JsonBackend,
}


def select_backend(name: str) -> type[HtmlBackend] | type[JsonBackend]:
    """Return the backend class registered under ``name``.

    Raises
    ------
    SiteConfigError
        If no backend is registered under ``name``.
    """
    try:
        return API_BACKENDS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(API_BACKENDS))
        msg = f"Unknown API backend '{name}'. Known backends: {known}"
        raise SiteConfigError(msg) from None


def load_api_index(config: ApiConfig) -> EntityIndex:
    """Load the configured entity feed and index it."""
    feed = load_entity_feed(config.feed)
    log.debug(
        "Loaded %d files and %d classes from %s",
        len(feed.files),
        len(feed.classes),
        config.feed,
    )
    return EntityIndex.from_feed(feed, separator=config.namespace_separator)


class ApiDocGenerator:
    """Render API documentation and write it beneath the output directory."""

    def __init__(
        self,
        config: ApiConfig,
        index: EntityIndex,
        *,
        output_dir: Path | None = None,
        dry_run: bool = False,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        config : ApiConfig
            Settings for the API build, including the backend name.
        index : EntityIndex
            Entities to document.
        output_dir : Path, optional
            Override for ``config.output_dir``.
        dry_run : bool, optional
            Log intended writes instead of touching the filesystem.
        diagnostics : Diagnostics, optional
            Sink for broken references and unknown languages.
        """
        self.config = config
        self.index = index
        self.output_dir = output_dir or config.output_dir
        self.dry_run = dry_run
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def run(self) -> list[Path]:
        """Render and emit every page, returning the written paths.

        Raises
        ------
        SiteConfigError
            If the configured backend is unknown.
        TemplateRenderError
            If a template fails to render.
        """
        backend = select_backend(self.config.backend)(
            self.config, diagnostics=self.diagnostics
        )
        emitter = PageEmitter(self.output_dir, dry_run=self.dry_run)
        try:
            pages = backend.render(self.index)
            written = [emitter.emit(page.path, page.content) for page in pages]
            if backend.copies_static:
                self._copy_static(emitter)
        except Exception:
            log.exception("Failed to generate API documentation from %s", self.config.feed)
            raise
        log.info("Generated %d API pages in %s", len(written), self.output_dir)
        return written

    def _copy_static(self, emitter: PageEmitter) -> None:
        if self.config.static_dir is not None:
            emitter.copy_static(self.config.static_dir)
        else:
            emitter.copy_static(DEFAULT_STATIC_DIR, STATIC_ASSETS)


__all__ = [
    "API_BACKENDS",
    "DEFAULT_STATIC_DIR",
    "ApiBackend",
    "ApiDocGenerator",
    "HtmlBackend",
    "JsonBackend",
    "PageMarkup",
    "load_api_index",
    "root_prefix",
    "select_backend",
]
