"""Tests for manual page discovery and the title and path indexes."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from darkdocs.catalog import (
    Catalog,
    ManualPage,
    PageSourceError,
    load_catalog,
    parse_page_source,
    read_page,
)


def test_front_matter_is_split_from_body() -> None:
    meta, body = parse_page_source("---\ntitle: Intro\nindex: 3\n---\nHello\n")
    assert meta == {"title": "Intro", "index": 3}
    assert body == "Hello\n"


def test_page_without_front_matter_keeps_body() -> None:
    meta, body = parse_page_source("Just text\n")
    assert meta == {}
    assert body == "Just text\n"


def test_invalid_front_matter_names_the_page(tmp_path: Path) -> None:
    path = tmp_path / "bad.page"
    path.write_text("---\ntitle: [unclosed\n---\nbody\n", encoding="utf-8")
    with pytest.raises(PageSourceError, match=r"^bad\.page: "):
        read_page(path, tmp_path)


def test_non_integer_index_names_the_page(tmp_path: Path) -> None:
    path = tmp_path / "odd.page"
    path.write_text("---\nindex: first\n---\nbody\n", encoding="utf-8")
    with pytest.raises(PageSourceError, match=r"^odd\.page: .*'first'"):
        read_page(path, tmp_path)


def test_title_defaults_to_file_stem(tmp_path: Path) -> None:
    path = tmp_path / "faq.page"
    path.write_text("No front matter.\n", encoding="utf-8")
    page = read_page(path, tmp_path)
    assert page.title == "faq"
    assert page.layout == "page"
    assert page.filters is None


def test_filters_may_be_a_comma_separated_string(tmp_path: Path) -> None:
    path = tmp_path / "plain.page"
    path.write_text("---\nfilters: links, api\n---\nbody\n", encoding="utf-8")
    assert read_page(path, tmp_path).filters == ("links", "api")


def test_catalog_orders_pages_by_source(catalog: Catalog) -> None:
    assert [page.source for page in catalog.pages] == [
        "guide/getting-started.page",
        "index.page",
    ]
    assert catalog.uri_index["index.page"].title == "Welcome"
    assert catalog.title_index["Getting Started"].source == "guide/getting-started.page"


def test_output_path_and_basepath() -> None:
    page = ManualPage(source="guide/deep/topic.page", title="Topic", body="")
    assert page.output_path == "guide/deep/topic.html"
    assert page.basepath == "../.."
    assert ManualPage(source="index.page", title="Home", body="").basepath == "."


def test_navigation_uses_index_hint_then_title() -> None:
    pages = [
        ManualPage(source="b.page", title="beta", body=""),
        ManualPage(source="a.page", title="Alpha", body=""),
        ManualPage(source="z.page", title="Zed", body="", index=1),
    ]
    ordered = Catalog.build(pages).navigation()
    assert [page.title for page in ordered] == ["Zed", "Alpha", "beta"]


def test_duplicate_titles_are_reported(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    for name in ("one.page", "two.page"):
        (tmp_path / name).write_text("---\ntitle: Same\n---\nbody\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="darkdocs"):
        catalog = load_catalog(tmp_path)
    assert catalog.duplicate_titles == {"Same": ("one.page", "two.page")}
    assert catalog.title_index["Same"].source == "one.page"
    assert "shared by one.page, two.page" in caplog.text


def test_missing_source_dir_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "absent")
