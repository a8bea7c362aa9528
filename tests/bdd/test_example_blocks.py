"""Behaviour tests for example blocks embedded in manual pages."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from darkdocs.catalog import load_catalog
from darkdocs.config import ManualConfig
from darkdocs.generator import ManualGenerator, PageBuildError

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "example_blocks.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    return {}


def _write_page(tmp_path: Path, state: dict[str, object], name: str, body: str) -> None:
    source_dir = tmp_path / "examples"
    source_dir.mkdir()
    (source_dir / name).write_text(body, encoding="utf-8")
    state["config"] = ManualConfig(
        source_dir=source_dir, output_dir=tmp_path / "out", title="Examples"
    )


def _run(state: dict[str, object]) -> list[Path]:
    config = state["config"]
    assert isinstance(config, ManualConfig)
    return ManualGenerator(config, load_catalog(config.source_dir)).run()


def _example(state: dict[str, object]) -> BeautifulSoup:
    written = state["written"]
    assert isinstance(written, list)
    soup = BeautifulSoup(written[0].read_text(encoding="utf-8"), "html.parser")
    example = soup.select_one("#content div.example")
    assert example is not None
    return example


@given("a manual page containing a captioned python example")
def given_captioned_example(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    body = (
        "Intro.\n\n"
        '<?example {language: python, caption: "Adding numbers"} ?>\n'
        "total = 1 + 2\n"
        "<?end example ?>\n"
    )
    _write_page(tmp_path, scenario_state, "adding.page", body)


@given("a manual page containing a python example with a syntax error")
def given_invalid_example(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    body = "Intro.\n\n<?example python ?>\nprint(1\n<?end example ?>\n"
    _write_page(tmp_path, scenario_state, "invalid.page", body)


@given("a manual page containing an unterminated example")
def given_unterminated_example(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    body = "---\ntitle: Broken\n---\nIntro\n\n<?example python ?>\nprint(1)\n"
    _write_page(tmp_path, scenario_state, "broken.page", body)


@when("I build the example manual")
def when_build_examples(scenario_state: dict[str, object]) -> None:
    scenario_state["written"] = _run(scenario_state)


@when("I try to build the example manual")
def when_try_build_examples(scenario_state: dict[str, object]) -> None:
    try:
        _run(scenario_state)
    except PageBuildError as exc:
        scenario_state["error"] = exc


@then(parsers.parse('the example is wrapped with the caption "{caption}"'))
def then_example_caption(caption: str, scenario_state: dict[str, object]) -> None:
    example = _example(scenario_state)
    assert example.select_one(".highlight") is not None
    assert example.select_one(".caption").get_text() == caption


@then(parsers.parse('the example text starts with "{prefix}"'))
def then_example_prefix(prefix: str, scenario_state: dict[str, object]) -> None:
    text = _example(scenario_state).select_one(".highlight").get_text().lstrip()
    assert text.startswith(prefix)


@then(parsers.parse('the build fails with "{message}"'))
def then_build_fails(message: str, scenario_state: dict[str, object]) -> None:
    error = scenario_state.get("error")
    assert isinstance(error, PageBuildError)
    assert str(error) == message
