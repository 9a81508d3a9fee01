"""Nested substring filters over the element list.

Each frame narrows the element set of the frame beneath it and carries the
layout regenerated for its result. Typed text lives in ``Running`` frames, one
per typed character, so backspace can undo exactly one character at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .elements import Element
from .layout import Layout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Running:
    """Uncommitted, incrementally typed query."""

    text: str


@dataclass(frozen=True)
class Include:
    """Committed filter keeping elements that match ``text``."""

    text: str


@dataclass(frozen=True)
class Exclude:
    """Committed filter keeping elements that do not match ``text``."""

    text: str


Filter = Running | Include | Exclude
LayoutBuilder = Callable[[Sequence[Element]], Layout]


def matches(text: str, element: Element) -> bool:
    """Case-insensitive substring match against display text or any tag."""
    needle = text.lower()
    return any(needle in field.lower() for field in element.fields())


def passes(flt: Filter, element: Element) -> bool:
    if isinstance(flt, Exclude):
        return not matches(flt.text, element)
    return matches(flt.text, element)


def apply_filter(flt: Filter, elements: Sequence[Element]) -> list[Element]:
    return [element for element in elements if passes(flt, element)]


def filter_label(flt: Filter) -> str:
    """Return the filter-bar fragment for one frame."""
    if isinstance(flt, Include):
        return f"{flt.text}/"
    if isinstance(flt, Exclude):
        return f"¬{flt.text}/"
    return flt.text[-1:]


@dataclass(frozen=True)
class FilterFrame:
    """A filter with the element subset and layout it produced."""

    filter: Filter
    elements: tuple[Element, ...]
    layout: Layout


class FilterStack:
    """Filter frames, most recent first.

    The stack only manages frames; resetting the cursor and redrawing after a
    change is the session's job. Mutating operations return whether the stack
    changed so callers can skip side effects on no-ops.
    """

    def __init__(self, elements: Sequence[Element], build_layout: LayoutBuilder) -> None:
        self.all_elements: tuple[Element, ...] = tuple(elements)
        self._build_layout = build_layout
        self.base_layout = build_layout(self.all_elements)
        self.frames: list[FilterFrame] = []

    def filters(self) -> list[Filter]:
        return [frame.filter for frame in self.frames]

    def elements(self) -> tuple[Element, ...]:
        """Return the active element set."""
        if self.frames:
            return self.frames[0].elements
        return self.all_elements

    def layout(self) -> Layout:
        """Return the active layout."""
        if self.frames:
            return self.frames[0].layout
        return self.base_layout

    def top(self) -> Filter | None:
        if self.frames:
            return self.frames[0].filter
        return None

    def top_is_running(self) -> bool:
        return isinstance(self.top(), Running)

    def push(self, flt: Filter) -> bool:
        elements = tuple(apply_filter(flt, self.elements()))
        self.frames.insert(0, FilterFrame(filter=flt, elements=elements, layout=self._build_layout(elements)))
        logger.debug("pushed %r: %d of %d elements", flt, len(elements), len(self.all_elements))
        return True

    def pop(self) -> bool:
        if not self.frames:
            return False
        self.frames.pop(0)
        return True

    def input(self, text: str) -> bool:
        """Append typed ``text`` as a new Running frame."""
        if not text:
            return False
        top = self.top()
        typed = top.text + text if isinstance(top, Running) else text
        return self.push(Running(typed))

    def drop_running(self) -> None:
        while self.top_is_running():
            self.frames.pop(0)

    def solidify(self, kind: type[Include] | type[Exclude]) -> bool:
        """Replace the Running chain on top with one committed ``kind`` frame."""
        top = self.top()
        if not isinstance(top, Running):
            return False
        self.drop_running()
        return self.push(kind(top.text))

    def materialize(self, text: str) -> None:
        """Push one Running frame per non-empty prefix of ``text``, shortest first."""
        for end in range(1, len(text) + 1):
            self.push(Running(text[:end]))

    def backspace(self) -> bool:
        """Undo one typed character.

        A committed filter on top is first rewritten into its Running chain,
        whose newest frame is then dropped like any typed character.
        """
        top = self.top()
        if top is None:
            return False
        if isinstance(top, Running):
            return self.pop()
        self.pop()
        if top.text:
            self.materialize(top.text)
            self.pop()
        return True

    def pop_uncommitted(self) -> bool:
        """Clear all in-progress typed text, or drop one committed frame."""
        if not self.frames:
            return False
        if self.top_is_running():
            self.drop_running()
            return True
        return self.pop()

    def display_text(self) -> str:
        """Render the stack bottom-to-top for the filter bar."""
        return "".join(filter_label(flt) for flt in reversed(self.filters()))
