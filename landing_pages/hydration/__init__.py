"""Render-or-bind hydration of the landing page."""

from .binders import PortfolioCarousel
from .controller import HydrationController, HydrationError, HydrationReport, start
from .document import Document, add_class, has_class, remove_class, toggle_class
from .regions import (
    REGIONS,
    DynamicRenderer,
    Region,
    RegionRenderer,
    RegionState,
    StaticPassthroughBinder,
    region_state,
    select_region_renderer,
)

__all__ = [
    "REGIONS",
    "Document",
    "DynamicRenderer",
    "HydrationController",
    "HydrationError",
    "HydrationReport",
    "PortfolioCarousel",
    "Region",
    "RegionRenderer",
    "RegionState",
    "StaticPassthroughBinder",
    "add_class",
    "has_class",
    "region_state",
    "remove_class",
    "select_region_renderer",
    "start",
    "toggle_class",
]
