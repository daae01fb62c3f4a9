"""Behaviour tests for the ahead-of-time page build.

These scenarios run :class:`StaticRenderer` end to end against a temporary
shell and content directory, backed by ``features/static_render.feature``.
They check that crawlers receive marked, fully rendered regions plus the
structured data block, and that a malformed collection aborts the build
without leaving a partial page behind.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from landing_pages._constants import COLLECTION_FILES, RENDER_MARKER_ATTR
from landing_pages.static_renderer import (
    RENDER_TARGETS,
    StaticRenderer,
    StaticRenderError,
)

if typ.TYPE_CHECKING:
    from landing_pages.config import SeoConfig

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "static_render.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a landing page shell and content collections")
def given_shell_and_content(
    tmp_path: Path,
    shell_path: Path,
    content_dir: Path,
    scenario_state: dict[str, object],
) -> None:
    scenario_state["shell"] = shell_path
    scenario_state["content_dir"] = content_dir
    scenario_state["output"] = tmp_path / "public" / "index.html"


@given("the faq collection is not a list")
def given_faq_not_list(scenario_state: dict[str, object]) -> None:
    content_dir: Path = scenario_state["content_dir"]  # type: ignore[assignment]
    (content_dir / COLLECTION_FILES["faq"]).write_text(
        '{"question": "?"}', encoding="utf-8"
    )


@when("I build the pre-rendered page")
def when_build(seo: SeoConfig, scenario_state: dict[str, object]) -> None:
    try:
        StaticRenderer(seo).run(
            scenario_state["shell"],  # type: ignore[arg-type]
            scenario_state["content_dir"],  # type: ignore[arg-type]
            scenario_state["output"],  # type: ignore[arg-type]
        )
    except StaticRenderError as exc:
        scenario_state["error"] = exc


def _output_soup(scenario_state: dict[str, object]) -> BeautifulSoup:
    output: Path = scenario_state["output"]  # type: ignore[assignment]
    return BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")


@then("every render target carries the render marker")
def then_targets_marked(scenario_state: dict[str, object]) -> None:
    soup = _output_soup(scenario_state)
    for target in RENDER_TARGETS:
        element = soup.find(id=target.element_id)
        assert element is not None, f"expected #{target.element_id} in the page"
        assert element.get(RENDER_MARKER_ATTR) == "true", (
            f"expected #{target.element_id} to be marked"
        )
        assert element.find(True) is not None, (
            f"expected #{target.element_id} to contain rendered elements"
        )


@then(parsers.parse("the FAQ region lists {count:d} entries numbered from Q1"))
def then_faq_numbered(scenario_state: dict[str, object], count: int) -> None:
    soup = _output_soup(scenario_state)
    numbers = [tag.get_text() for tag in soup.select("#faq-container .q-number")]
    expected = [f"Q{n}." for n in range(1, count + 1)]
    assert numbers == expected, f"expected {expected!r}, got {numbers!r}"


@then("the head contains structured data")
def then_head_structured_data(scenario_state: dict[str, object]) -> None:
    soup = _output_soup(scenario_state)
    script = soup.head.find("script", attrs={"type": "application/ld+json"})
    assert script is not None, "expected a JSON-LD script in <head>"


@then("the build fails without writing output")
def then_build_fails(scenario_state: dict[str, object]) -> None:
    assert "error" in scenario_state, "expected the build to raise"
    output: Path = scenario_state["output"]  # type: ignore[assignment]
    assert not output.exists(), "expected no output file after a failed build"
