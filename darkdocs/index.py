"""Lookup structures built once per run from the entity feed.

:class:`EntityIndex` keys files by source path and classes by fully
qualified name, attaching each entity's output path on the way in. The index
is immutable after construction and is passed explicitly to every component
that needs lookups.
"""

from __future__ import annotations

import collections
import dataclasses as dc
import types
import typing as typ

from ._constants import HTML_SUFFIX, NAMESPACE_SEPARATOR
from .entities import DocClass, DocFile, EntityFeed, EntityFeedError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def class_output_path(name: str, separator: str = NAMESPACE_SEPARATOR) -> str:
    """Return the output path for the class called ``name``.

    >>> class_output_path("ThingFish::Handler")
    'ThingFish/Handler.html'
    """
    return name.replace(separator, "/") + HTML_SUFFIX


def file_output_path(path: str) -> str:
    """Return the output path for the source file at ``path``.

    >>> file_output_path("lib/thingfish.rb")
    'lib/thingfish.rb.html'
    """
    return path.lstrip("/") + HTML_SUFFIX


def _checked_output_path(output_path: str, kind: str, identity: str) -> str:
    if ".." in output_path.split("/"):
        msg = f"{kind} '{identity}' would be written outside the output root."
        raise EntityFeedError(msg)
    return output_path


def top_level_namespace(name: str, separator: str = NAMESPACE_SEPARATOR) -> str:
    return name.split(separator, 1)[0]


def sorted_module_list(
    names: cabc.Iterable[str], separator: str = NAMESPACE_SEPARATOR
) -> list[str]:
    """Order class names by namespace salience, then by name.

    Names whose top-level namespace has more members sort first; ties break
    alphabetically. Projects that keep everything in one namespace get it at
    the top of the navigation without any configuration.

    >>> sorted_module_list(["B::Z", "A::Y", "A::X"])
    ['A::X', 'A::Y', 'B::Z']
    """
    ordered = list(names)
    counts = collections.Counter(top_level_namespace(n, separator) for n in ordered)
    return sorted(ordered, key=lambda n: (-counts[top_level_namespace(n, separator)], n))


@dc.dataclass(frozen=True, slots=True)
class EntityIndex:
    """Read-only lookups for files and classes.

    Attributes
    ----------
    by_full_path : Mapping[str, DocFile]
        Files keyed by source path.
    by_class_name : Mapping[str, DocClass]
        Classes keyed by fully qualified name.
    separator : str
        Namespace separator used in class names.
    """

    by_full_path: typ.Mapping[str, DocFile]
    by_class_name: typ.Mapping[str, DocClass]
    separator: str = NAMESPACE_SEPARATOR

    @classmethod
    def build(
        cls,
        files: cabc.Iterable[DocFile],
        classes: cabc.Iterable[DocClass],
        *,
        separator: str = NAMESPACE_SEPARATOR,
    ) -> EntityIndex:
        """Index ``files`` and ``classes``, deriving their output paths.

        Raises
        ------
        EntityFeedError
            If an entity lacks its identity, the same identity appears twice, or
            an output path would escape the output root.
        """
        by_path: dict[str, DocFile] = {}
        for doc_file in files:
            if not doc_file.path:
                msg = "File entity is missing its source path."
                raise EntityFeedError(msg)
            if doc_file.path in by_path:
                msg = f"File '{doc_file.path}' appears more than once in the feed."
                raise EntityFeedError(msg)
            output_path = _checked_output_path(
                file_output_path(doc_file.path), "File", doc_file.path
            )
            by_path[doc_file.path] = dc.replace(doc_file, output_path=output_path)

        by_name: dict[str, DocClass] = {}
        for doc_class in classes:
            if not doc_class.name:
                msg = "Class entity is missing its qualified name."
                raise EntityFeedError(msg)
            if doc_class.name in by_name:
                msg = f"Class '{doc_class.name}' appears more than once in the feed."
                raise EntityFeedError(msg)
            output_path = _checked_output_path(
                class_output_path(doc_class.name, separator), "Class", doc_class.name
            )
            by_name[doc_class.name] = dc.replace(doc_class, output_path=output_path)

        return cls(
            by_full_path=types.MappingProxyType(by_path),
            by_class_name=types.MappingProxyType(by_name),
            separator=separator,
        )

    @classmethod
    def from_feed(
        cls, feed: EntityFeed, *, separator: str = NAMESPACE_SEPARATOR
    ) -> EntityIndex:
        return cls.build(feed.files, feed.classes, separator=separator)

    def sorted_classes(self) -> list[DocClass]:
        return [self.by_class_name[name] for name in sorted(self.by_class_name)]

    def sorted_files(self) -> list[DocFile]:
        return [self.by_full_path[path] for path in sorted(self.by_full_path)]

    def modsort(self) -> list[DocClass]:
        """Return classes in navigation (salience) order."""
        names = sorted_module_list(self.by_class_name, self.separator)
        return [self.by_class_name[name] for name in names]


__all__ = [
    "EntityIndex",
    "class_output_path",
    "file_output_path",
    "sorted_module_list",
    "top_level_namespace",
]
