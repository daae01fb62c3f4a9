"""Per-region render-or-bind decision.

A region is PRERENDERED when its container carries the render marker and
already has child elements; otherwise it is UNRENDERED. The decision is made
once, by :func:`select_region_renderer`, which returns one of two
:class:`RegionRenderer` variants:

* :class:`StaticPassthroughBinder` leaves the markup alone and only binds.
* :class:`DynamicRenderer` renders the region's fragments, inserts them, and
  then runs the same binder.

Regions flagged ``always_render`` skip the marker check entirely; the static
build never pre-renders them, so markers are per region rather than global.
"""

from __future__ import annotations

import abc
import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import typing as typ

from bs4.element import Tag

from .._constants import (
    ABOUT_CONTAINER,
    ACHIEVEMENTS_CONTAINER,
    ADVANTAGES_CONTAINER,
    DOT_CONTAINER,
    FAQ_CONTAINER,
    PORTFOLIO_CONTAINER,
    PRIVACY_CONTAINER,
    RENDER_MARKER_ATTR,
    RENDER_MARKER_VALUE,
    STEPS_CONTENT,
    STEPS_LIST,
)
from .binders import bind_advantages, bind_faq, bind_portfolio, bind_steps

if typ.TYPE_CHECKING:
    from ..fragments import FragmentRenderer
    from .document import Document

logger = logging.getLogger(__name__)

Record: typ.TypeAlias = "cabc.Mapping[str, typ.Any]"
RegionMarkup: typ.TypeAlias = "cabc.Callable[[FragmentRenderer, cabc.Sequence[Record]], dict[str, str]]"
RegionBinder: typ.TypeAlias = "cabc.Callable[[Document], object]"


class RegionState(enum.Enum):
    """Observed state of a region's container at hydration time."""

    UNRENDERED = "unrendered"
    PRERENDERED = "prerendered"


def region_state(element: Tag | None) -> RegionState:
    """Classify a container by its render marker and existing child elements."""
    if element is None:
        return RegionState.UNRENDERED
    marked = element.get(RENDER_MARKER_ATTR) == RENDER_MARKER_VALUE
    has_children = any(isinstance(child, Tag) for child in element.children)
    if marked and has_children:
        return RegionState.PRERENDERED
    return RegionState.UNRENDERED


@dc.dataclass(frozen=True, slots=True)
class Region:
    """A content region: where it lives, what feeds it, and how it behaves.

    Attributes
    ----------
    name : str
        Identifier used in logs and hydration reports.
    container_id : str
        Element id whose marker decides the region's state.
    collection : str
        Name of the content collection rendered into the region.
    render : RegionMarkup
        Returns ``{element id: markup}``; one collection may fill several
        containers (steps list and panels, portfolio items and dots).
    bind : RegionBinder, optional
        Behaviour attached after the region's markup exists.
    always_render : bool
        Render on every load regardless of the marker.
    """

    name: str
    container_id: str
    collection: str
    render: RegionMarkup
    bind: RegionBinder | None = None
    always_render: bool = False


class RegionRenderer(abc.ABC):
    """Apply one region to a document."""

    state: typ.ClassVar[RegionState]

    def __init__(self, region: Region) -> None:
        self.region = region

    @abc.abstractmethod
    def apply(
        self,
        document: Document,
        records: cabc.Sequence[Record],
        fragments: FragmentRenderer,
    ) -> None:
        """Bring the region into its interactive state."""

    def _bind(self, document: Document) -> None:
        if self.region.bind is not None:
            self.region.bind(document)


class StaticPassthroughBinder(RegionRenderer):
    """Keep pre-rendered markup and attach behaviour only."""

    state = RegionState.PRERENDERED

    def apply(
        self,
        document: Document,
        records: cabc.Sequence[Record],
        fragments: FragmentRenderer,
    ) -> None:
        logger.info("Region %s uses pre-rendered content", self.region.name)
        self._bind(document)


class DynamicRenderer(RegionRenderer):
    """Render the region's fragments into the document, then bind."""

    state = RegionState.UNRENDERED

    def apply(
        self,
        document: Document,
        records: cabc.Sequence[Record],
        fragments: FragmentRenderer,
    ) -> None:
        for element_id, markup in self.region.render(fragments, records).items():
            container = document.get_element_by_id(element_id)
            if container is None:
                logger.warning(
                    "Region %s: container #%s not found", self.region.name, element_id
                )
                continue
            document.set_inner_html(container, markup)
        logger.info("Region %s rendered %d records", self.region.name, len(records))
        self._bind(document)


def select_region_renderer(region: Region, document: Document) -> RegionRenderer:
    """Pick the renderer variant for ``region`` from the document's current state."""
    if region.always_render:
        return DynamicRenderer(region)
    state = region_state(document.get_element_by_id(region.container_id))
    if state is RegionState.PRERENDERED:
        return StaticPassthroughBinder(region)
    return DynamicRenderer(region)


def _portfolio_markup(
    fragments: FragmentRenderer, records: cabc.Sequence[Record]
) -> dict[str, str]:
    return {
        PORTFOLIO_CONTAINER: fragments.render_portfolio(records),
        DOT_CONTAINER: fragments.render_portfolio_dots(records),
    }


def _steps_markup(
    fragments: FragmentRenderer, records: cabc.Sequence[Record]
) -> dict[str, str]:
    buttons, panels = fragments.render_steps(records)
    return {STEPS_LIST: buttons, STEPS_CONTENT: panels}


REGIONS: tuple[Region, ...] = (
    Region(
        name="advantages",
        container_id=ADVANTAGES_CONTAINER,
        collection="advantages",
        render=lambda f, records: {ADVANTAGES_CONTAINER: f.render_advantages(records)},
        bind=bind_advantages,
    ),
    Region(
        name="portfolio",
        container_id=PORTFOLIO_CONTAINER,
        collection="portfolio",
        render=_portfolio_markup,
        bind=bind_portfolio,
    ),
    Region(
        name="about",
        container_id=ABOUT_CONTAINER,
        collection="about_me",
        render=lambda f, records: {ABOUT_CONTAINER: f.render_about(records)},
    ),
    Region(
        name="achievements",
        container_id=ACHIEVEMENTS_CONTAINER,
        collection="about_achievements",
        render=lambda f, records: {
            ACHIEVEMENTS_CONTAINER: f.render_achievements(records)
        },
        always_render=True,
    ),
    Region(
        name="steps",
        container_id=STEPS_LIST,
        collection="steps",
        render=_steps_markup,
        bind=bind_steps,
    ),
    Region(
        name="faq",
        container_id=FAQ_CONTAINER,
        collection="faq",
        render=lambda f, records: {FAQ_CONTAINER: f.render_faq(records)},
        bind=bind_faq,
    ),
    Region(
        name="privacy",
        container_id=PRIVACY_CONTAINER,
        collection="privacy",
        render=lambda f, records: {PRIVACY_CONTAINER: f.render_privacy(records)},
        always_render=True,
    ),
)


__all__ = [
    "REGIONS",
    "DynamicRenderer",
    "Region",
    "RegionRenderer",
    "RegionState",
    "StaticPassthroughBinder",
    "region_state",
    "select_region_renderer",
]
