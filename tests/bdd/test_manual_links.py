"""Behaviour tests for cross references between manual pages."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from darkdocs.catalog import load_catalog
from darkdocs.config import ManualConfig
from darkdocs.diagnostics import Diagnostics
from darkdocs.generator import ManualGenerator
from darkdocs.index import EntityIndex

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "manual_links.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    return {}


def _content(state: dict[str, object], relative: str) -> BeautifulSoup:
    written = state["written"]
    assert isinstance(written, dict)
    soup = BeautifulSoup(written[relative].read_text(encoding="utf-8"), "html.parser")
    content = soup.select_one("#content")
    assert content is not None
    return content


@given("a manual with a welcome page and a guide")
def given_manual(manual_dir: Path, scenario_state: dict[str, object]) -> None:
    scenario_state["source_dir"] = manual_dir


@given(parsers.parse('a page linking to the title "{title}"'))
def given_linking_page(title: str, scenario_state: dict[str, object]) -> None:
    source_dir = scenario_state["source_dir"]
    assert isinstance(source_dir, Path)
    (source_dir / "extra.page").write_text(f"See <?link {title} ?>.\n", encoding="utf-8")


@when("I build the manual")
def when_build_manual(
    manual_config: ManualConfig,
    entity_index: EntityIndex,
    diagnostics: Diagnostics,
    scenario_state: dict[str, object],
) -> None:
    catalog = load_catalog(manual_config.source_dir)
    written = ManualGenerator(
        manual_config, catalog, index=entity_index, diagnostics=diagnostics
    ).run()
    scenario_state["written"] = {
        path.relative_to(manual_config.output_dir).as_posix(): path for path in written
    }


@then(parsers.parse('the guide links back to "{href}" with text "{text}"'))
def then_guide_links_back(href: str, text: str, scenario_state: dict[str, object]) -> None:
    link = _content(scenario_state, "guide/getting-started.html").find("a", string=text)
    assert link is not None
    assert link["href"] == href


@then(parsers.parse('the welcome page links to the API page "{href}"'))
def then_welcome_links_api(href: str, scenario_state: dict[str, object]) -> None:
    hrefs = [a["href"] for a in _content(scenario_state, "index.html").find_all("a")]
    assert href in hrefs


@then(parsers.parse('the page "{relative}" has a broken link titled "{title}"'))
def then_page_broken_link(
    relative: str, title: str, diagnostics: Diagnostics, scenario_state: dict[str, object]
) -> None:
    broken = _content(scenario_state, relative).select_one("a.broken-link")
    assert broken is not None
    assert broken["title"] == title
    assert [entry.location for entry in diagnostics.of_kind("broken-link")] == ["extra.page"]
