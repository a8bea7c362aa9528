"""Shared fixtures: a small entity feed and a two-page manual."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from darkdocs.catalog import Catalog, load_catalog
from darkdocs.config import ApiConfig, ManualConfig
from darkdocs.diagnostics import Diagnostics
from darkdocs.entities import load_entity_feed
from darkdocs.index import EntityIndex

FEED_YAML = dedent(
    """
    files:
      - path: lib/thingfish.rb
        title: thingfish.rb
        description: The main library file.
      - path: lib/thingfish/handler.rb
        description: "Defines <?api ThingFish::Handler ?>."
    classes:
      - name: ThingFish
        kind: module
        file: lib/thingfish.rb
        description: The top-level namespace.
      - name: ThingFish::Handler
        superclass: Object
        file: lib/thingfish/handler.rb
        description: "Base handler. See <?api ThingFish::Daemon ?> and <?api ThingFish ?>."
        sections:
          - title: ""
            constants:
              - name: SVNId
                value: "$Id: handler.rb 12 2008-08-27 21:58:00Z ged $"
            methods:
              - name: process
                params: "(request, response)"
                description: Process a request.
                line: 10
                source: |
                  def process(request, response):
                      return response
              - name: create
                kind: class
                params: "()"
      - name: ThingFish::Daemon
        superclass: ThingFish::Handler
        description: "Runs handlers. Not to be confused with <?api ThingFish::Missing ?>."
      - name: Other::Thing
    """
).lstrip()

INDEX_PAGE = dedent(
    """
    ---
    title: Welcome
    index: 1
    ---
    Start with <?link Getting Started ?>.

    See <?api ThingFish::Handler ?> for the API.

    <?example {language: python, caption: "A fine example"} ?>
    answer = 6 * 7
    <?end example ?>
    """
).lstrip()

GUIDE_PAGE = dedent(
    """
    ---
    title: Getting Started
    index: 2
    ---
    Back to <?link "home":index.page ?>.
    """
).lstrip()


@pytest.fixture(autouse=True)
def _no_source_date_epoch(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep commit ages independent of the build environment."""
    monkeypatch.delenv("SOURCE_DATE_EPOCH", raising=False)


@pytest.fixture
def feed_path(tmp_path: Path) -> Path:
    """Write the sample entity feed and return its path."""
    path = tmp_path / "entities.yaml"
    path.write_text(FEED_YAML, encoding="utf-8")
    return path


@pytest.fixture
def entity_index(feed_path: Path) -> EntityIndex:
    return EntityIndex.from_feed(load_entity_feed(feed_path))


@pytest.fixture
def api_config(feed_path: Path, tmp_path: Path) -> ApiConfig:
    return ApiConfig(feed=feed_path, output_dir=tmp_path / "doc" / "api", title="ThingFish API")


@pytest.fixture
def manual_dir(tmp_path: Path) -> Path:
    """Write the sample manual sources and return their root."""
    root = tmp_path / "manual"
    (root / "guide").mkdir(parents=True)
    (root / "index.page").write_text(INDEX_PAGE, encoding="utf-8")
    (root / "guide" / "getting-started.page").write_text(GUIDE_PAGE, encoding="utf-8")
    return root


@pytest.fixture
def catalog(manual_dir: Path) -> Catalog:
    return load_catalog(manual_dir)


@pytest.fixture
def manual_config(manual_dir: Path, tmp_path: Path) -> ManualConfig:
    return ManualConfig(
        source_dir=manual_dir,
        output_dir=tmp_path / "doc" / "manual",
        title="ThingFish Manual",
        api_prefix="../api",
    )


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()
