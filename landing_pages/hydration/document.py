"""A parsed page plus the browser host capabilities the binders rely on.

:class:`Document` wraps a BeautifulSoup tree and adds just enough of a
browser host for hydration: element lookup, click and window listeners, a
viewport width, smooth-scroll requests, and intersection observers. Events
are dispatched synchronously on the caller's thread, which mirrors the single
UI event loop of a browser page.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from bs4 import BeautifulSoup
from bs4.element import Tag

Listener: typ.TypeAlias = "cabc.Callable[[Event], None]"
IntersectionCallback: typ.TypeAlias = (
    "cabc.Callable[[list[IntersectionEntry]], None]"
)

DEFAULT_VIEWPORT_WIDTH = 1280


@dc.dataclass(frozen=True, slots=True)
class Event:
    """A dispatched event; ``target`` is None for window events."""

    type: str
    target: Tag | None = None


@dc.dataclass(frozen=True, slots=True)
class IntersectionEntry:
    """Visibility change of one observed element."""

    target: Tag
    ratio: float
    is_intersecting: bool


@dc.dataclass(slots=True)
class IntersectionObserver:
    """Observer notified when observed elements cross ``threshold``."""

    callback: IntersectionCallback
    root: Tag | None = None
    threshold: float = 0.0
    targets: list[Tag] = dc.field(default_factory=list)

    def observe(self, target: Tag) -> None:
        if not any(existing is target for existing in self.targets):
            self.targets.append(target)

    def disconnect(self) -> None:
        self.targets.clear()


@dc.dataclass(frozen=True, slots=True)
class ScrollRequest:
    """A ``scrollIntoView`` call recorded by the document."""

    target: Tag
    behavior: str = "smooth"


class Document:
    """A landing page document that hydration can render into and bind onto."""

    def __init__(
        self,
        markup: str | BeautifulSoup,
        *,
        viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
    ) -> None:
        """Parse ``markup`` (or adopt a parsed tree) at the given viewport width."""
        if isinstance(markup, BeautifulSoup):
            self.soup = markup
        else:
            self.soup = BeautifulSoup(markup, "html.parser")
        self.viewport_width = viewport_width
        self.scroll_requests: list[ScrollRequest] = []
        self._listeners: list[tuple[Tag, str, Listener]] = []
        self._window_listeners: list[tuple[str, Listener]] = []
        self._observers: list[IntersectionObserver] = []

    def get_element_by_id(self, element_id: str) -> Tag | None:
        found = self.soup.find(id=element_id)
        return found if isinstance(found, Tag) else None

    def select(self, selector: str) -> list[Tag]:
        return list(self.soup.select(selector))

    def select_one(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def set_inner_html(self, element: Tag, markup: str) -> None:
        """Replace the children of ``element`` with the nodes parsed from ``markup``."""
        fragment = BeautifulSoup(markup, "html.parser")
        element.clear()
        for node in list(fragment.contents):
            element.append(node.extract())

    def add_listener(self, target: Tag, event_type: str, listener: Listener) -> None:
        self._listeners.append((target, event_type, listener))

    def add_window_listener(self, event_type: str, listener: Listener) -> None:
        self._window_listeners.append((event_type, listener))

    def listener_count(self, target: Tag | None = None) -> int:
        """Return how many element listeners exist, optionally for one target."""
        if target is None:
            return len(self._listeners)
        return sum(1 for bound, _, _ in self._listeners if bound is target)

    def dispatch(self, target: Tag, event_type: str) -> int:
        """Invoke every listener of ``event_type`` on ``target``; return the count."""
        event = Event(event_type, target)
        matching = [
            listener
            for bound, bound_type, listener in self._listeners
            if bound is target and bound_type == event_type
        ]
        for listener in matching:
            listener(event)
        return len(matching)

    def click(self, target: Tag) -> int:
        return self.dispatch(target, "click")

    def resize(self, width: int) -> None:
        """Change the viewport width and fire window ``resize`` listeners."""
        self.viewport_width = width
        event = Event("resize")
        for event_type, listener in list(self._window_listeners):
            if event_type == "resize":
                listener(event)

    def scroll_into_view(self, target: Tag, *, behavior: str = "smooth") -> None:
        self.scroll_requests.append(ScrollRequest(target, behavior))

    def observe_intersections(
        self,
        targets: cabc.Iterable[Tag],
        callback: IntersectionCallback,
        *,
        root: Tag | None = None,
        threshold: float = 0.0,
    ) -> IntersectionObserver:
        """Create an observer watching ``targets`` and register it."""
        observer = IntersectionObserver(callback, root=root, threshold=threshold)
        for target in targets:
            observer.observe(target)
        self._observers.append(observer)
        return observer

    def report_intersection(self, target: Tag, ratio: float) -> None:
        """Notify observers of ``target`` that its visible ratio is now ``ratio``."""
        for observer in list(self._observers):
            if any(observed is target for observed in observer.targets):
                entry = IntersectionEntry(
                    target=target,
                    ratio=ratio,
                    is_intersecting=ratio >= observer.threshold and ratio > 0,
                )
                observer.callback([entry])

    def serialize(self) -> str:
        return self.soup.decode()


def has_class(element: Tag, name: str) -> bool:
    return name in element.get_attribute_list("class")


def add_class(element: Tag, *names: str) -> None:
    classes = [value for value in element.get_attribute_list("class") if value]
    for name in names:
        if name not in classes:
            classes.append(name)
    element["class"] = classes


def remove_class(element: Tag, *names: str) -> None:
    classes = [
        value
        for value in element.get_attribute_list("class")
        if value and value not in names
    ]
    if classes:
        element["class"] = classes
    elif element.has_attr("class"):
        del element["class"]


def toggle_class(element: Tag, name: str) -> bool:
    """Toggle ``name`` on ``element``; return True when it is now present."""
    if has_class(element, name):
        remove_class(element, name)
        return False
    add_class(element, name)
    return True


__all__ = [
    "DEFAULT_VIEWPORT_WIDTH",
    "Document",
    "Event",
    "IntersectionEntry",
    "IntersectionObserver",
    "ScrollRequest",
    "add_class",
    "has_class",
    "remove_class",
    "toggle_class",
]
