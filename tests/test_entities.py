"""Tests for loading the entity feed and building the entity index."""

from __future__ import annotations

from pathlib import Path

import pytest

from darkdocs.entities import (
    DocClass,
    DocFile,
    DocMethod,
    EntityFeedError,
    load_entity_feed,
    parse_entity_feed,
)
from darkdocs.index import (
    EntityIndex,
    class_output_path,
    file_output_path,
    sorted_module_list,
)


def test_feed_loads_files_and_classes(feed_path: Path) -> None:
    feed = load_entity_feed(feed_path)
    assert [doc_file.path for doc_file in feed.files] == [
        "lib/thingfish.rb",
        "lib/thingfish/handler.rb",
    ]
    handler = next(cls for cls in feed.classes if cls.name == "ThingFish::Handler")
    assert handler.superclass == "Object"
    assert [method.name for method in handler.methods] == ["process", "create"]
    assert handler.methods[0].line == 10
    assert handler.methods[0].source.startswith("def process")
    assert handler.constants[0].name == "SVNId"


def test_feed_accepts_json(tmp_path: Path) -> None:
    path = tmp_path / "entities.json"
    path.write_text(
        '{"files": [{"path": "a.rb"}], "classes": [{"name": "A"}]}', encoding="utf-8"
    )
    feed = load_entity_feed(path)
    assert feed.files == (DocFile(path="a.rb"),)
    assert feed.classes == (DocClass(name="A"),)


def test_missing_feed_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_entity_feed(tmp_path / "absent.yaml")


def test_class_without_name_is_rejected() -> None:
    with pytest.raises(EntityFeedError, match="missing its 'name' field"):
        parse_entity_feed({"classes": [{"superclass": "Object"}]})


def test_non_mapping_feed_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "entities.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(EntityFeedError, match="must be a mapping"):
        load_entity_feed(path)


def test_output_paths_follow_names() -> None:
    assert class_output_path("ThingFish::Handler") == "ThingFish/Handler.html"
    assert class_output_path("thingfish.handler", ".") == "thingfish/handler.html"
    assert file_output_path("lib/thingfish.rb") == "lib/thingfish.rb.html"


def test_index_attaches_output_paths(entity_index: EntityIndex) -> None:
    handler = entity_index.by_class_name["ThingFish::Handler"]
    assert handler.output_path == "ThingFish/Handler.html"
    doc_file = entity_index.by_full_path["lib/thingfish/handler.rb"]
    assert doc_file.output_path == "lib/thingfish/handler.rb.html"


def test_index_is_read_only(entity_index: EntityIndex) -> None:
    with pytest.raises(TypeError):
        entity_index.by_class_name["New"] = DocClass(name="New")  # type: ignore[index]


def test_duplicate_class_is_fatal() -> None:
    with pytest.raises(EntityFeedError, match="more than once"):
        EntityIndex.build([], [DocClass(name="A::X"), DocClass(name="A::X")])


def test_duplicate_file_is_fatal() -> None:
    with pytest.raises(EntityFeedError, match="more than once"):
        EntityIndex.build([DocFile(path="a.rb"), DocFile(path="a.rb")], [])


@pytest.mark.parametrize(
    ("files", "classes"),
    [
        ([DocFile(path="../outside.rb")], []),
        ([DocFile(path="lib/../../etc/passwd")], []),
        ([], [DocClass(name="..::Escape")]),
    ],
)
def test_paths_escaping_the_output_root_are_rejected(
    files: list[DocFile], classes: list[DocClass]
) -> None:
    with pytest.raises(EntityFeedError, match="outside the output root"):
        EntityIndex.build(files, classes)


def test_salience_sort_prefers_crowded_namespaces() -> None:
    assert sorted_module_list(["B::Z", "A::Y", "A::X"]) == ["A::X", "A::Y", "B::Z"]
    assert sorted_module_list(["A::X", "B::Y", "B::Z"]) == ["B::Y", "B::Z", "A::X"]


def test_modsort_orders_classes(entity_index: EntityIndex) -> None:
    assert [cls.name for cls in entity_index.modsort()] == [
        "ThingFish",
        "ThingFish::Daemon",
        "ThingFish::Handler",
        "Other::Thing",
    ]


def test_method_anchor_distinguishes_kind() -> None:
    assert DocMethod(name="process").anchor == "method-i-process"
    assert DocMethod(name="create", kind="class").anchor == "method-c-create"
    assert DocMethod(name="empty?").anchor == "method-i-empty-"
