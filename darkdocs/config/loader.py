"""Load build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from darkdocs._constants import DEFAULT_EXAMPLE_LANGUAGE, DEFAULT_PYGMENTS_STYLE

from .helpers import (
    _derive_api_prefix,
    _normalize_names,
    _optional_str,
    _parse_timestamp,
    _require_mapping,
    _resolve_path,
)
from .models import (
    DEFAULT_FILTERS,
    PAGE_ERROR_POLICIES,
    ApiConfig,
    ManualConfig,
    SiteConfig,
    SiteConfigError,
)

API_BACKEND_NAMES = ("html", "json")


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the API and manual builds.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (for example,
        ``darkdocs.yaml``). Relative paths inside the file are resolved
        against its directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with optional ``api`` and ``manual`` sections.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If neither section is defined, a required key is missing, or a value
        is out of range (unknown backend, unknown page error policy).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from darkdocs.config import load_site_config
    >>> config = load_site_config(Path("darkdocs.yaml"))  # doctest: +SKIP
    >>> config.api.backend  # doctest: +SKIP
    'html'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.resolve().parent
    defaults = _require_mapping(raw.get("defaults"), "defaults") or {}

    api_raw = _require_mapping(raw.get("api"), "api")
    manual_raw = _require_mapping(raw.get("manual"), "manual")
    if api_raw is None and manual_raw is None:
        msg = "Configuration defines neither an 'api' nor a 'manual' section."
        raise SiteConfigError(msg)

    default_style = defaults.get("pygments_style", DEFAULT_PYGMENTS_STYLE)
    api_config = (
        _build_api_config(api_raw, base_dir=base_dir, default_style=default_style)
        if api_raw is not None
        else None
    )
    manual_config = (
        _build_manual_config(
            manual_raw,
            base_dir=base_dir,
            default_style=default_style,
            api_config=api_config,
        )
        if manual_raw is not None
        else None
    )
    return SiteConfig(
        api=api_config,
        manual=manual_config,
        dry_run=bool(defaults.get("dry_run", False)),
    )


def _build_api_config(
    payload: typ.Mapping[str, typ.Any], *, base_dir: Path, default_style: str
) -> ApiConfig:
    """Build an ApiConfig from the ``api`` mapping."""
    feed = _resolve_path(payload.get("feed"), base_dir)
    if feed is None:
        msg = "The 'api' section is missing its 'feed' path."
        raise SiteConfigError(msg)

    backend = str(payload.get("backend", "html")).strip().lower()
    if backend not in API_BACKEND_NAMES:
        known = ", ".join(API_BACKEND_NAMES)
        msg = f"Unknown API backend '{backend}'. Known backends: {known}"
        raise SiteConfigError(msg)

    return ApiConfig(
        feed=feed,
        output_dir=_resolve_path(payload.get("output_dir"), base_dir)
        or base_dir / "doc" / "api",
        title=_optional_str(payload.get("title")) or "API Documentation",
        backend=backend,
        templates_dir=_resolve_path(payload.get("templates_dir"), base_dir),
        static_dir=_resolve_path(payload.get("static_dir"), base_dir),
        pygments_style=payload.get("pygments_style", default_style),
        charset=_optional_str(payload.get("charset")) or "utf-8",
        namespace_separator=_optional_str(payload.get("namespace_separator")) or "::",
        reference_time=_parse_timestamp(payload.get("reference_time")),
        source_language=_optional_str(payload.get("source_language"))
        or DEFAULT_EXAMPLE_LANGUAGE,
    )


def _build_manual_config(
    payload: typ.Mapping[str, typ.Any],
    *,
    base_dir: Path,
    default_style: str,
    api_config: ApiConfig | None,
) -> ManualConfig:
    """Build a ManualConfig from the ``manual`` mapping."""
    source_dir = _resolve_path(payload.get("source_dir"), base_dir)
    if source_dir is None:
        msg = "The 'manual' section is missing its 'source_dir' path."
        raise SiteConfigError(msg)

    output_dir = (
        _resolve_path(payload.get("output_dir"), base_dir) or base_dir / "doc" / "manual"
    )
    policy = str(payload.get("on_page_error", "abort")).strip().lower()
    if policy not in PAGE_ERROR_POLICIES:
        known = ", ".join(PAGE_ERROR_POLICIES)
        msg = f"Unknown on_page_error policy '{policy}'. Expected one of: {known}"
        raise SiteConfigError(msg)

    api_prefix = _optional_str(payload.get("api_prefix"))
    if api_prefix is None and api_config is not None:
        api_prefix = _derive_api_prefix(output_dir, api_config.output_dir)

    filters = _normalize_names(payload.get("filters")) or DEFAULT_FILTERS
    return ManualConfig(
        source_dir=source_dir,
        output_dir=output_dir,
        title=_optional_str(payload.get("title")) or "Manual",
        layouts_dir=_resolve_path(payload.get("layouts_dir"), base_dir),
        resources_dir=_resolve_path(payload.get("resources_dir"), base_dir),
        api_prefix=api_prefix,
        default_filters=filters,
        default_language=_optional_str(payload.get("default_language"))
        or DEFAULT_EXAMPLE_LANGUAGE,
        on_page_error=policy,
        pygments_style=payload.get("pygments_style", default_style),
    )


__all__ = ["API_BACKEND_NAMES", "load_site_config"]
