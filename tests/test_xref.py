"""Tests for cross-reference resolution between pages and entities."""

from __future__ import annotations

import pytest

from darkdocs.catalog import Catalog
from darkdocs.config import SiteConfigError
from darkdocs.index import EntityIndex
from darkdocs.xref import (
    BrokenLink,
    CrossReferenceResolver,
    ResolvedLink,
    relative_href,
)


def test_relative_href_walks_up_directories() -> None:
    assert relative_href("A/X.html", "B/Y.html") == "../A/X.html"
    assert relative_href("A/X.html", "A/Y.html") == "X.html"
    assert relative_href("index.html", "index.html") == "index.html"


def test_class_hit_is_relative_to_linking_page(entity_index: EntityIndex) -> None:
    resolver = CrossReferenceResolver(index=entity_index)
    link = resolver.resolve_class("ThingFish::Daemon", from_path="ThingFish/Handler.html")
    assert link == ResolvedLink(href="Daemon.html", text="ThingFish::Daemon")


def test_class_hit_honours_link_text(entity_index: EntityIndex) -> None:
    resolver = CrossReferenceResolver(index=entity_index)
    link = resolver.resolve_class("ThingFish", from_path="index.html", text="the namespace")
    assert link.text == "the namespace"
    assert link.href == "ThingFish.html"


def test_class_miss_is_broken(entity_index: EntityIndex) -> None:
    resolver = CrossReferenceResolver(index=entity_index)
    link = resolver.resolve_class("Nope", from_path="index.html")
    assert isinstance(link, BrokenLink)
    assert link.broken
    assert link.href == "#"
    assert link.reason == "Could not find a link for class 'Nope'"


def test_class_lookup_without_index_is_a_config_error() -> None:
    resolver = CrossReferenceResolver()
    with pytest.raises(SiteConfigError, match="entity feed is not configured"):
        resolver.resolve_class("A::X", from_path="index.html")


def test_api_prefix_applies_to_manual_pages(entity_index: EntityIndex) -> None:
    resolver = CrossReferenceResolver(index=entity_index, api_prefix="../api")
    link = resolver.resolve_class("ThingFish::Handler", from_path="guide/intro.html")
    assert link.href == "../../api/ThingFish/Handler.html"


def test_page_lookup_by_path_and_title(catalog: Catalog) -> None:
    resolver = CrossReferenceResolver(catalog=catalog)
    by_path = resolver.resolve_page("index.page", from_path="guide/getting-started.html")
    assert by_path == ResolvedLink(href="../index.html", text="Welcome")
    by_title = resolver.resolve_page("Getting Started", from_path="index.html")
    assert by_title == ResolvedLink(href="guide/getting-started.html", text="Getting Started")


def test_page_titles_are_case_sensitive(catalog: Catalog) -> None:
    resolver = CrossReferenceResolver(catalog=catalog)
    link = resolver.resolve_page("getting started", from_path="index.html")
    assert link.broken
    assert link.reason == "Could not find a link for reference 'getting started'"


def test_page_lookup_without_catalog_is_broken() -> None:
    link = CrossReferenceResolver().resolve_page("Welcome", from_path="index.html")
    assert isinstance(link, BrokenLink)


def test_template_helpers_return_none_on_miss(entity_index: EntityIndex) -> None:
    resolver = CrossReferenceResolver(index=entity_index)
    assert resolver.class_href("Object", "ThingFish/Handler.html") is None
    assert resolver.class_href("ThingFish", "ThingFish/Handler.html") == "../ThingFish.html"
    assert (
        resolver.file_href("lib/thingfish.rb", "ThingFish/Handler.html")
        == "../lib/thingfish.rb.html"
    )
