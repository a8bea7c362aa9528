"""Load and validate darkdocs build configuration.

This subpackage parses the project's ``darkdocs.yaml`` file, applies defaults,
resolves paths relative to the configuration file, and produces typed
dataclasses (:class:`SiteConfig`, :class:`ApiConfig`, :class:`ManualConfig`)
that the generators consume. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from darkdocs.config import load_site_config
>>> site = load_site_config(Path("darkdocs.yaml"))  # doctest: +SKIP
>>> site.manual.default_filters  # doctest: +SKIP
('examples', 'links', 'api')
"""

from .loader import API_BACKEND_NAMES, load_site_config
from .models import (
    DEFAULT_FILTERS,
    PAGE_ERROR_POLICIES,
    ApiConfig,
    ManualConfig,
    SiteConfig,
    SiteConfigError,
)

__all__ = [
    "API_BACKEND_NAMES",
    "DEFAULT_FILTERS",
    "PAGE_ERROR_POLICIES",
    "ApiConfig",
    "ManualConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
