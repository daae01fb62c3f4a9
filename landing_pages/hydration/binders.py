"""Interactive behaviour attached to landing page regions.

Each binder only looks up elements and registers listeners on the
:class:`~landing_pages.hydration.document.Document`; none of them generate
markup. The same binder runs whether a region was pre-rendered by the static
build or rendered moments earlier by hydration, so both paths toggle the same
classes on the same elements.
"""

from __future__ import annotations

import dataclasses as dc
import functools
import logging
import typing as typ

from .._constants import (
    ADVANTAGES_CONTAINER,
    DOT_CONTAINER,
    FAQ_CONTAINER,
    NARROW_VIEWPORT_MAX,
    PORTFOLIO_CONTAINER,
    STEPS_CONTENT,
    STEPS_LIST,
)
from .document import add_class, remove_class, toggle_class

if typ.TYPE_CHECKING:
    from bs4.element import Tag

    from .document import Document, Event, IntersectionEntry

logger = logging.getLogger(__name__)

CARD_SELECTOR = f"#{ADVANTAGES_CONTAINER} .cardCanUp"
STEP_VISIBILITY_THRESHOLD = 0.5

_ITEM_VISIBLE = ("opacity-100", "pointer-events-auto")
_ITEM_HIDDEN = ("opacity-0", "pointer-events-none")
_DOT_ACTIVE = "bg-IF"
_DOT_INACTIVE = "bg-gray-300"


def bind_advantages(document: Document) -> None:
    """Flip cards on tap for narrow viewports and reset them when widening."""
    cards = document.select(CARD_SELECTOR)

    def on_card_click(event: Event) -> None:
        if event.target is not None and document.viewport_width < NARROW_VIEWPORT_MAX:
            toggle_class(event.target, "active")

    def on_resize(_event: Event) -> None:
        if document.viewport_width >= NARROW_VIEWPORT_MAX:
            for card in document.select(".cardCanUp.active"):
                remove_class(card, "active")

    for card in cards:
        document.add_listener(card, "click", on_card_click)
    document.add_window_listener("resize", on_resize)
    logger.debug("Bound %d advantage cards", len(cards))


@dc.dataclass(slots=True)
class PortfolioCarousel:
    """Show one portfolio item at a time and keep the dots in sync."""

    items: list[Tag]
    dots: list[Tag]
    current: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def show(self, index: int) -> None:
        """Make item ``index`` (wrapped into range) the only visible one."""
        if not self.items:
            return
        self.current = index % len(self.items)
        for position, item in enumerate(self.items):
            if position == self.current:
                remove_class(item, *_ITEM_HIDDEN)
                add_class(item, *_ITEM_VISIBLE)
            else:
                remove_class(item, *_ITEM_VISIBLE)
                add_class(item, *_ITEM_HIDDEN)
        for position, dot in enumerate(self.dots):
            if position == self.current:
                remove_class(dot, _DOT_INACTIVE)
                add_class(dot, _DOT_ACTIVE)
            else:
                remove_class(dot, _DOT_ACTIVE)
                add_class(dot, _DOT_INACTIVE)

    def next(self) -> None:
        self.show(self.current + 1)

    def previous(self) -> None:
        self.show(self.current - 1)


def bind_portfolio(document: Document) -> PortfolioCarousel:
    """Wire dot and arrow controls to the portfolio carousel."""
    carousel = PortfolioCarousel(
        items=document.select(f"#{PORTFOLIO_CONTAINER} .portfolio-item"),
        dots=document.select(f"#{DOT_CONTAINER} .dot"),
    )

    def on_dot_click(position: int, _event: Event) -> None:
        carousel.show(position)

    for position, dot in enumerate(carousel.dots):
        target = _int_attr(dot, "data-index", default=position)
        document.add_listener(dot, "click", functools.partial(on_dot_click, target))

    previous_button = document.get_element_by_id("portfolio-prev")
    if previous_button is not None:
        document.add_listener(previous_button, "click", lambda _e: carousel.previous())
    next_button = document.get_element_by_id("portfolio-next")
    if next_button is not None:
        document.add_listener(next_button, "click", lambda _e: carousel.next())
    logger.debug("Bound portfolio carousel with %d items", len(carousel))
    return carousel


def bind_steps(document: Document) -> None:
    """Scroll to a step's panel on click and highlight the visible step."""
    buttons = document.select(f"#{STEPS_LIST} .step-name")
    panels = document.select(f"#{STEPS_CONTENT} .step-content")
    container = document.get_element_by_id(STEPS_CONTENT)

    def on_step_click(event: Event) -> None:
        if event.target is None:
            return
        step = event.target.get("data-step")
        target = document.select_one(f'.step-content[data-step="{step}"]')
        if target is not None:
            document.scroll_into_view(target, behavior="smooth")

    def on_intersection(entries: list[IntersectionEntry]) -> None:
        for entry in entries:
            if not entry.is_intersecting:
                continue
            step = entry.target.get("data-step")
            for button in buttons:
                remove_class(button, "active")
            active = document.select_one(f'.step-name[data-step="{step}"]')
            if active is not None:
                add_class(active, "active")

    for button in buttons:
        document.add_listener(button, "click", on_step_click)
    document.observe_intersections(
        panels,
        on_intersection,
        root=container,
        threshold=STEP_VISIBILITY_THRESHOLD,
    )
    logger.debug("Bound %d steps", len(buttons))


def bind_faq(document: Document) -> None:
    """Expand and collapse FAQ answers when their question is clicked."""
    bound = 0
    for item in document.select(f"#{FAQ_CONTAINER} .faq-item"):
        question = item.select_one(".faq-question")
        answer = item.select_one(".faq-answer")
        if question is None or answer is None:
            continue
        arrow = question.select_one("svg")
        document.add_listener(
            question, "click", functools.partial(_toggle_answer, answer, arrow)
        )
        bound += 1
    logger.debug("Bound %d FAQ entries", bound)


def _toggle_answer(answer: Tag, arrow: Tag | None, _event: Event) -> None:
    toggle_class(answer, "hidden")
    if arrow is not None:
        toggle_class(arrow, "rotate-180")


def _int_attr(element: Tag, name: str, *, default: int) -> int:
    try:
        return int(element.get(name, default))
    except (TypeError, ValueError):
        return default


__all__ = [
    "CARD_SELECTOR",
    "STEP_VISIBILITY_THRESHOLD",
    "PortfolioCarousel",
    "bind_advantages",
    "bind_faq",
    "bind_portfolio",
    "bind_steps",
]
