"""Hydrate a landing page document from its content collections.

:class:`HydrationController` walks every region once, asks
:func:`~landing_pages.hydration.regions.select_region_renderer` whether to
render or only bind, and applies the chosen variant. :func:`start` is the
explicit entry point: it loads the content, abandons the whole pass if any
collection fails, and otherwise hydrates.

Example
-------
>>> from landing_pages.content import ContentLoader
>>> from landing_pages.hydration import Document, start
>>> document = Document(open("public/index.html").read())  # doctest: +SKIP
>>> report = start(document, ContentLoader("site/data"))  # doctest: +SKIP
>>> report.rendered  # doctest: +SKIP
['achievements', 'privacy']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ..content import ContentLoadError
from ..fragments import FragmentRenderer, default_renderer
from .regions import REGIONS, Region, RegionState, select_region_renderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ..content import ContentBundle, ContentLoader
    from .document import Document

logger = logging.getLogger(__name__)


class HydrationError(RuntimeError):
    """Raised when a document is hydrated more than once."""


@dc.dataclass(slots=True)
class HydrationReport:
    """Which state each region was found in and acted on."""

    states: dict[str, RegionState] = dc.field(default_factory=dict)

    @property
    def rendered(self) -> list[str]:
        return [
            name
            for name, state in self.states.items()
            if state is RegionState.UNRENDERED
        ]

    @property
    def bound(self) -> list[str]:
        return [
            name
            for name, state in self.states.items()
            if state is RegionState.PRERENDERED
        ]


class HydrationController:
    """Render or bind every landing page region exactly once."""

    def __init__(
        self,
        document: Document,
        *,
        fragments: FragmentRenderer | None = None,
        regions: cabc.Sequence[Region] = REGIONS,
    ) -> None:
        self.document = document
        self.fragments = fragments or default_renderer()
        self.regions = tuple(regions)
        self._hydrated = False

    def hydrate(self, bundle: ContentBundle) -> HydrationReport:
        """Apply every region to the document.

        Raises
        ------
        HydrationError
            If this controller has already hydrated its document.
        """
        if self._hydrated:
            msg = "Document has already been hydrated."
            raise HydrationError(msg)
        self._hydrated = True
        report = HydrationReport()
        for region in self.regions:
            renderer = select_region_renderer(region, self.document)
            renderer.apply(
                self.document, bundle.collection(region.collection), self.fragments
            )
            report.states[region.name] = renderer.state
        return report


def start(
    document: Document,
    loader: ContentLoader,
    *,
    fragments: FragmentRenderer | None = None,
) -> HydrationReport | None:
    """Load content and hydrate ``document``; return None if loading failed.

    A failed load is logged once and leaves the document untouched, so the
    page keeps whatever static markup it was served with.
    """
    try:
        bundle = loader.load()
    except ContentLoadError as exc:
        logger.error("Content load failed; skipping hydration: %s", exc)
        return None
    return HydrationController(document, fragments=fragments).hydrate(bundle)


__all__ = [
    "HydrationController",
    "HydrationError",
    "HydrationReport",
    "start",
]
