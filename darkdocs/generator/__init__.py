"""Rendering, emitting, and orchestration for the API and manual builds."""

from .api import (
    API_BACKENDS,
    ApiDocGenerator,
    HtmlBackend,
    JsonBackend,
    PageMarkup,
    load_api_index,
    select_backend,
)
from .emitter import PageEmitter, PlannedWrite
from .manual import ManualGenerator, PageBuildError
from .models import RenderedPage, RenderOptions
from .renderer import ProseRenderer, TemplateRenderer, TemplateRenderError

__all__ = [
    "API_BACKENDS",
    "ApiDocGenerator",
    "HtmlBackend",
    "JsonBackend",
    "ManualGenerator",
    "PageBuildError",
    "PageEmitter",
    "PageMarkup",
    "PlannedWrite",
    "ProseRenderer",
    "RenderOptions",
    "RenderedPage",
    "TemplateRenderError",
    "TemplateRenderer",
    "load_api_index",
    "select_backend",
]
