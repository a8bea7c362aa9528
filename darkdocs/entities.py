"""Typed documentation entities and the loader for the extracted entity feed.

The extraction step (outside this package) writes a JSON or YAML document
describing every documented source file and class::

    files:
      - path: lib/thingfish/handler.rb
        title: handler.rb
        description: The base handler class.
    classes:
      - name: ThingFish::Handler
        superclass: Object
        file: lib/thingfish/handler.rb
        sections:
          - title: ""
            constants:
              - {name: SVNId, value: "$Id: handler.rb 12 2008-08-27 21:58:00Z ged $"}
            methods:
              - {name: process, params: "(request, response)", kind: instance}

:func:`load_entity_feed` turns that document into frozen dataclasses. Entities
are read-only snapshots; the index attaches output paths by building updated
copies.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError


class EntityFeedError(ValueError):
    """Raised when the entity feed is malformed or missing identity fields."""


@dc.dataclass(frozen=True, slots=True)
class DocConstant:
    """A named constant documented within a class section."""

    name: str
    value: str = ""
    description: str = ""


@dc.dataclass(frozen=True, slots=True)
class DocMethod:
    """A documented method.

    Attributes
    ----------
    name : str
        Method name as written in source.
    kind : str
        ``"instance"`` or ``"class"``.
    visibility : str
        ``"public"``, ``"protected"``, or ``"private"``.
    params : str
        Parameter list rendered as source text, including parentheses.
    description : str
        Markup prose describing the method.
    source : str
        Optional source listing for the method body.
    line : int | None
        Line number of the first source line, when known.
    """

    name: str
    kind: str = "instance"
    visibility: str = "public"
    params: str = ""
    description: str = ""
    source: str = ""
    line: int | None = None

    @property
    def anchor(self) -> str:
        """Return the fragment identifier used on class pages."""
        prefix = "c" if self.kind == "class" else "i"
        safe = "".join(ch if ch.isalnum() or ch == "_" else "-" for ch in self.name)
        return f"method-{prefix}-{safe}"


@dc.dataclass(frozen=True, slots=True)
class DocSection:
    """An ordered group of constants and methods within a class."""

    title: str = ""
    description: str = ""
    constants: tuple[DocConstant, ...] = ()
    methods: tuple[DocMethod, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class DocFile:
    """A documented source file, identified by its path."""

    path: str
    title: str = ""
    description: str = ""
    requires: tuple[str, ...] = ()
    output_path: str = ""

    @property
    def display_title(self) -> str:
        return self.title or Path(self.path).name


@dc.dataclass(frozen=True, slots=True)
class DocClass:
    """A documented class or module, identified by its qualified name."""

    name: str
    kind: str = "class"
    superclass: str | None = None
    file: str | None = None
    description: str = ""
    sections: tuple[DocSection, ...] = ()
    output_path: str = ""

    @property
    def methods(self) -> tuple[DocMethod, ...]:
        """Return every method across all sections in declaration order."""
        return tuple(method for section in self.sections for method in section.methods)

    @property
    def constants(self) -> tuple[DocConstant, ...]:
        return tuple(const for section in self.sections for const in section.constants)


@dc.dataclass(frozen=True, slots=True)
class EntityFeed:
    """The raw files and classes supplied by the extraction step."""

    files: tuple[DocFile, ...]
    classes: tuple[DocClass, ...]


def load_entity_feed(path: Path) -> EntityFeed:
    """Load the JSON or YAML entity feed at ``path``.

    Parameters
    ----------
    path : Path
        Location of the feed written by the extraction step.

    Returns
    -------
    EntityFeed
        Parsed files and classes in feed order.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    EntityFeedError
        If the document cannot be parsed, is not a mapping, or an entry lacks
        its identity field.
    """
    if not path.exists():
        msg = f"Entity feed '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Entity feed '{path}' could not be parsed: {exc}"
        raise EntityFeedError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Entity feed '{path}' must be a mapping with 'files' and 'classes'."
        raise EntityFeedError(msg)
    return parse_entity_feed(loaded)


def parse_entity_feed(payload: typ.Mapping[str, typ.Any]) -> EntityFeed:
    """Build an :class:`EntityFeed` from an already decoded mapping."""
    files = tuple(
        _build_file(entry, idx)
        for idx, entry in enumerate(_as_list(payload.get("files"), "files"))
    )
    classes = tuple(
        _build_class(entry, idx)
        for idx, entry in enumerate(_as_list(payload.get("classes"), "classes"))
    )
    return EntityFeed(files=files, classes=classes)


def _as_list(value: object, key: str) -> list[typ.Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"Entity feed key '{key}' must be a list."
        raise EntityFeedError(msg)
    return value


def _require_mapping(entry: object, label: str) -> typ.Mapping[str, typ.Any]:
    if not isinstance(entry, dict):
        msg = f"{label} must be a mapping, got {type(entry).__name__}."
        raise EntityFeedError(msg)
    return entry


def _require_identity(entry: typ.Mapping[str, typ.Any], key: str, label: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        msg = f"{label} is missing its '{key}' field."
        raise EntityFeedError(msg)
    return value.strip()


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _build_file(entry: object, idx: int) -> DocFile:
    mapping = _require_mapping(entry, f"File entry #{idx}")
    path = _require_identity(mapping, "path", f"File entry #{idx}")
    requires = mapping.get("requires") or []
    return DocFile(
        path=path,
        title=_text(mapping.get("title")),
        description=_text(mapping.get("description")),
        requires=tuple(str(item) for item in requires),
    )


def _build_class(entry: object, idx: int) -> DocClass:
    mapping = _require_mapping(entry, f"Class entry #{idx}")
    name = _require_identity(mapping, "name", f"Class entry #{idx}")
    sections = tuple(
        _build_section(section, name)
        for section in _as_list(mapping.get("sections"), f"{name}.sections")
    )
    superclass = mapping.get("superclass")
    file = mapping.get("file")
    return DocClass(
        name=name,
        kind=_text(mapping.get("kind")) or "class",
        superclass=str(superclass) if superclass else None,
        file=str(file) if file else None,
        description=_text(mapping.get("description")),
        sections=sections,
    )


def _build_section(entry: object, owner: str) -> DocSection:
    mapping = _require_mapping(entry, f"Section of {owner}")
    constants = tuple(
        DocConstant(
            name=_require_identity(
                _require_mapping(const, f"Constant of {owner}"),
                "name",
                f"Constant of {owner}",
            ),
            value=_text(const.get("value")),
            description=_text(const.get("description")),
        )
        for const in _as_list(mapping.get("constants"), f"{owner}.constants")
    )
    methods = tuple(
        _build_method(method, owner)
        for method in _as_list(mapping.get("methods"), f"{owner}.methods")
    )
    return DocSection(
        title=_text(mapping.get("title")),
        description=_text(mapping.get("description")),
        constants=constants,
        methods=methods,
    )


def _build_method(entry: object, owner: str) -> DocMethod:
    mapping = _require_mapping(entry, f"Method of {owner}")
    line = mapping.get("line")
    return DocMethod(
        name=_require_identity(mapping, "name", f"Method of {owner}"),
        kind=_text(mapping.get("kind")) or "instance",
        visibility=_text(mapping.get("visibility")) or "public",
        params=_text(mapping.get("params")),
        description=_text(mapping.get("description")),
        source=_text(mapping.get("source")),
        line=int(line) if line is not None else None,
    )


__all__ = [
    "DocClass",
    "DocConstant",
    "DocFile",
    "DocMethod",
    "DocSection",
    "EntityFeed",
    "EntityFeedError",
    "load_entity_feed",
    "parse_entity_feed",
]
