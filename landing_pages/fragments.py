"""Template functions shared by the static build and hydration.

Each function maps one content record (plus its position, where numbering
or the active state depends on it) to a self-contained HTML fragment. The
markup lives in ``landing_pages/templates/fragments`` and is rendered by a
single :class:`FragmentRenderer`, so the static build and the hydration
controller emit the same bytes for the same record.

Rich-text fields (titles, bodies, list items) carry author-controlled markup
and are emitted unescaped. Plain-text attribute values such as image ``alt``
text are reduced to their text content first.

Examples
--------
>>> from landing_pages import fragments
>>> html = fragments.faq_entry({"question": "Why?", "answer": "Because."}, 0)
>>> "Q1." in html
True
>>> fragments.strip_tags("<span>Fast</span> pages")
'Fast pages'
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import html
import re
import typing as typ
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, Undefined, select_autoescape
from markupsafe import Markup

from .environment import resolve_sanitize

Record: typ.TypeAlias = "cabc.Mapping[str, typ.Any]"

TAG_PATTERN = re.compile(r"<[^>]*>")
FRAGMENT_SEPARATOR = "\n"


def strip_tags(text: str | None) -> str:
    """Remove ``<...>`` sequences from ``text`` and keep the text content."""
    if not text:
        return ""
    return TAG_PATTERN.sub("", str(text))


def _dom_text(text: str) -> str:
    """Return the text content of ``text`` parsed as an HTML fragment."""
    return BeautifulSoup(text, "html.parser").get_text()


def _is_blank(value: object) -> bool:
    return value is None or isinstance(value, Undefined)


def _plaintext_filter(value: object, sanitize: bool | None = None) -> str:
    """Reduce a possibly marked-up value to plain text for attribute use."""
    if _is_blank(value):
        return ""
    text = str(value)
    if resolve_sanitize(sanitize):
        return html.unescape(strip_tags(text))
    return _dom_text(text)


def _rich_filter(value: object) -> Markup:
    """Mark author-supplied markup as safe so autoescape leaves it intact."""
    if _is_blank(value):
        return Markup("")
    return Markup(str(value))


def _finalize(value: object) -> object:
    return "" if value is None else value


class FragmentRenderer:
    """Render content records into HTML fragments with shared Jinja templates."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment used for every fragment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the fragment templates. Defaults to
            ``landing_pages/templates/fragments``.
        """
        default_dir = Path(__file__).parent / "templates" / "fragments"
        self.templates_dir = templates_dir or default_dir
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
            finalize=_finalize,
        )
        self.env.filters["plaintext"] = _plaintext_filter
        self.env.filters["rich"] = _rich_filter

    def _render(self, name: str, **context: typ.Any) -> str:
        if "item" in context and not isinstance(context["item"], cabc.Mapping):
            context["item"] = {}
        template = self.env.get_template(f"{name}.jinja")
        return template.render(**context)

    def advantage_card(self, item: Record, *, sanitize: bool | None = None) -> str:
        """Render one advantage card; the image alt text is the bare title."""
        return self._render("advantage_card", item=item, sanitize=sanitize)

    def portfolio_item(
        self, item: Record, index: int = 0, *, sanitize: bool | None = None
    ) -> str:
        """Render a portfolio case; only position 0 starts visible."""
        return self._render(
            "portfolio_item",
            item=item,
            index=index,
            active=index == 0,
            sanitize=sanitize,
        )

    def portfolio_dot(self, index: int, active: bool) -> str:
        """Render the carousel dot for position ``index``."""
        return self._render("portfolio_dot", index=index, active=active)

    def about_block(self, item: Record) -> str:
        return self._render("about_block", item=item)

    def achievement_item(self, item: Record) -> str:
        return self._render("achievement_item", item=item)

    def step_button(self, item: Record, *, sanitize: bool | None = None) -> str:
        """Render the selector button for one process step."""
        return self._render("step_button", item=item, sanitize=sanitize)

    def step_panel(self, item: Record) -> str:
        """Render the detail panel paired with a step button via ``data-step``."""
        return self._render("step_panel", item=item)

    def faq_entry(self, item: Record, index: int = 0) -> str:
        """Render one FAQ entry numbered ``Q{index + 1}.``."""
        return self._render("faq_entry", item=item, index=index)

    def privacy_section(self, item: Record) -> str:
        return self._render("privacy_section", item=item)

    def render_advantages(
        self, items: cabc.Sequence[Record], *, sanitize: bool | None = None
    ) -> str:
        return _join(self.advantage_card(item, sanitize=sanitize) for item in items)

    def render_portfolio(
        self, items: cabc.Sequence[Record], *, sanitize: bool | None = None
    ) -> str:
        return _join(
            self.portfolio_item(item, index, sanitize=sanitize)
            for index, item in enumerate(items)
        )

    def render_portfolio_dots(self, items: cabc.Sequence[Record]) -> str:
        return _join(
            self.portfolio_dot(index, index == 0) for index in range(len(items))
        )

    def render_about(self, items: cabc.Sequence[Record]) -> str:
        return _join(self.about_block(item) for item in items)

    def render_achievements(self, items: cabc.Sequence[Record]) -> str:
        return _join(self.achievement_item(item) for item in items)

    def render_steps(
        self, items: cabc.Sequence[Record], *, sanitize: bool | None = None
    ) -> tuple[str, str]:
        """Return the step selector list and the detail-panel list.

        Both lists are driven by the same collection so button ``n`` always
        pairs with panel ``n``.
        """
        buttons = _join(self.step_button(item, sanitize=sanitize) for item in items)
        panels = _join(self.step_panel(item) for item in items)
        return buttons, panels

    def render_faq(self, items: cabc.Sequence[Record]) -> str:
        return _join(
            self.faq_entry(item, index) for index, item in enumerate(items)
        )

    def render_privacy(self, items: cabc.Sequence[Record]) -> str:
        return _join(self.privacy_section(item) for item in items)


def _join(fragments: cabc.Iterable[str]) -> str:
    return FRAGMENT_SEPARATOR.join(fragments)


@functools.cache
def default_renderer() -> FragmentRenderer:
    """Return the process-wide renderer backed by the packaged templates."""
    return FragmentRenderer()


def advantage_card(item: Record, *, sanitize: bool | None = None) -> str:
    return default_renderer().advantage_card(item, sanitize=sanitize)


def portfolio_item(
    item: Record, index: int = 0, *, sanitize: bool | None = None
) -> str:
    return default_renderer().portfolio_item(item, index, sanitize=sanitize)


def portfolio_dot(index: int, active: bool) -> str:
    return default_renderer().portfolio_dot(index, active)


def about_block(item: Record) -> str:
    return default_renderer().about_block(item)


def achievement_item(item: Record) -> str:
    return default_renderer().achievement_item(item)


def step_button(item: Record, *, sanitize: bool | None = None) -> str:
    return default_renderer().step_button(item, sanitize=sanitize)


def step_panel(item: Record) -> str:
    return default_renderer().step_panel(item)


def faq_entry(item: Record, index: int = 0) -> str:
    return default_renderer().faq_entry(item, index)


def privacy_section(item: Record) -> str:
    return default_renderer().privacy_section(item)


__all__ = [
    "FRAGMENT_SEPARATOR",
    "TAG_PATTERN",
    "FragmentRenderer",
    "about_block",
    "achievement_item",
    "advantage_card",
    "default_renderer",
    "faq_entry",
    "portfolio_dot",
    "portfolio_item",
    "privacy_section",
    "step_button",
    "step_panel",
    "strip_tags",
]
