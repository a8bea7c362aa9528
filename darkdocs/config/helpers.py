"""Utility helpers shared by the darkdocs configuration loader."""

from __future__ import annotations

import datetime as dt
import os
import re
import typing as typ
from pathlib import Path

from .models import SiteConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _resolve_path(value: object | None, base_dir: Path) -> Path | None:
    """Return ``value`` as a path, anchored at ``base_dir`` when relative."""
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def _require_mapping(
    value: object, section: str
) -> typ.Mapping[str, typ.Any] | None:
    """Return ``value`` when it is a mapping, None when absent, else raise."""
    if value is None:
        return None
    if not isinstance(value, dict):
        msg = f"Configuration section '{section}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _normalize_names(value: str | list[object] | tuple[object, ...] | None) -> tuple[str, ...]:
    """Normalize a filter list given as a string or sequence into names."""
    if isinstance(value, str):
        return tuple(segment for segment in re.split(r"[\s,]+", value) if segment)
    if isinstance(value, list | tuple):
        names: list[str] = []
        for segment in value:
            text = str(segment).strip()
            if text:
                names.append(text)
        return tuple(names)
    return ()


def _derive_api_prefix(manual_output: Path, api_output: Path) -> str:
    """Return the API output root relative to the manual output root."""
    relative = os.path.relpath(api_output, start=manual_output)
    return Path(relative).as_posix()


def _parse_timestamp(value: dt.datetime | str | int | None) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case int():
            return dt.datetime.fromtimestamp(value, dt.UTC)
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


__all__ = [
    "_derive_api_prefix",
    "_normalize_names",
    "_optional_str",
    "_parse_timestamp",
    "_require_mapping",
    "_resolve_path",
]
