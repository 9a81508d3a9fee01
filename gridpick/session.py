"""Session state machine for one interactive pick.

A ``Session`` owns the cursor and filter stack, dispatches input events to
filter and navigation operations, and asks the renderer to repaint after every
state change. It ends in ``Committed`` or ``Cancelled``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from . import navigation
from .elements import Element
from .events import Damage, Event, KeyPress, PointerRelease
from .filters import Exclude, FilterStack, Include
from .keymap import DEFAULT_KEYMAP, build_registry
from .layout import GridGeometry, Layout, Position, build_layout

logger = logging.getLogger(__name__)

CANCEL_KEYS = frozenset({"ESC", "CTRL_C"})
COMMIT_KEYS = frozenset({"ENTER"})


class Renderer(Protocol):
    def redraw_all(self, layout: Layout, cursor: Position) -> None: ...

    def redraw_cells(self, layout: Layout, positions: Sequence[Position], cursor: Position) -> None: ...

    def update_filter_bar(self, text: str, match_count: int) -> None: ...


@dataclass(frozen=True)
class Committed:
    payload: object


@dataclass(frozen=True)
class Cancelled:
    pass


Outcome = Committed | Cancelled


class Session:
    """Cursor, filter stack and event dispatch for one pick.

    Geometry, keymap and the element list are fixed at construction; the
    cursor, filter stack and outcome change as events are handled.
    """

    def __init__(
        self,
        elements: Sequence[Element],
        geometry: GridGeometry,
        renderer: Renderer,
        keymap: Mapping[str, str] | None = None,
    ) -> None:
        self.geometry = geometry
        self.renderer = renderer
        self.filters = FilterStack(elements, lambda subset: build_layout(subset, geometry))
        self.cursor: Position = self.filters.base_layout.start
        self.outcome: Outcome | None = None
        self.keys = build_registry(keymap if keymap is not None else DEFAULT_KEYMAP, self.actions())

    def actions(self) -> dict[str, Callable[[], None]]:
        """Return keymap-bindable operations by action name."""
        return {
            "move_left": lambda: self.move(-1, 0),
            "move_right": lambda: self.move(1, 0),
            "move_up": lambda: self.move(0, -1),
            "move_down": lambda: self.move(0, 1),
            "next": self.next,
            "prev": self.prev,
            "line_begin": self.beg,
            "line_end": self.end,
            "backspace": self.backspace,
            "include": self.include,
            "exclude": self.exclude,
            "pop": self.pop,
        }

    @property
    def layout(self) -> Layout:
        return self.filters.layout()

    @property
    def elements(self) -> tuple[Element, ...]:
        return self.filters.elements()

    def redraw(self) -> None:
        self.renderer.redraw_all(self.layout, self.cursor)

    def refresh_filter_bar(self) -> None:
        self.renderer.update_filter_bar(self.filters.display_text(), len(self.layout))

    def _filters_changed(self, changed: bool) -> None:
        if not changed:
            return
        self.cursor = self.layout.start
        self.redraw()
        self.refresh_filter_bar()

    # Filter operations.

    def input(self, text: str) -> None:
        self._filters_changed(self.filters.input(text))

    def include(self) -> None:
        self._filters_changed(self.filters.solidify(Include))

    def exclude(self) -> None:
        self._filters_changed(self.filters.solidify(Exclude))

    def backspace(self) -> None:
        self._filters_changed(self.filters.backspace())

    def pop(self) -> None:
        self._filters_changed(self.filters.pop_uncommitted())

    # Navigation.

    def move(self, dx: int, dy: int) -> None:
        layout = self.layout
        target = navigation.step(self.cursor, dx, dy)
        if target not in layout:
            return
        previous = self.cursor
        self.cursor = target
        self.renderer.redraw_cells(layout, [p for p in (previous, target) if p in layout], self.cursor)

    def move_to(self, position: Position) -> None:
        x, y = self.cursor
        self.move(position[0] - x, position[1] - y)

    def next(self) -> None:
        self.move_to(navigation.next_position(self.layout, self.cursor))

    def prev(self) -> None:
        self.move_to(navigation.prev_position(self.layout, self.cursor))

    def beg(self) -> None:
        self.move_to(navigation.line_begin(self.layout, self.cursor))

    def end(self) -> None:
        self.move_to(navigation.line_end(self.layout, self.cursor))

    # Event handling.

    def commit_at(self, position: Position) -> Outcome | None:
        """Resolve the element at ``position``; commit when it yields a payload."""
        element = self.layout.get(position)
        if element is None:
            return None
        payload = element.resolve()
        if payload is None:
            logger.debug("element %r yielded no selection", element.display)
            return None
        logger.debug("committed %r", element.display)
        self.outcome = Committed(payload)
        return self.outcome

    def handle(self, event: Event) -> Outcome | None:
        """Process one event; return the outcome once the session has ended."""
        if isinstance(event, KeyPress):
            return self._handle_key(event)
        if isinstance(event, PointerRelease):
            return self.commit_at(self.geometry.cell_at(event.x, event.y))
        if isinstance(event, Damage) and event.count == 0:
            self.redraw()
            self.refresh_filter_bar()
        return None

    def _handle_key(self, event: KeyPress) -> Outcome | None:
        if event.key in CANCEL_KEYS:
            logger.debug("cancelled")
            self.outcome = Cancelled()
            return self.outcome
        if event.key in COMMIT_KEYS:
            return self.commit_at(self.cursor)
        if self.keys.dispatch(event.key) is not None:
            return None
        if event.text and all(ch.isprintable() for ch in event.text):
            self.input(event.text)
        return None

    def start(self) -> None:
        """Paint the initial screen."""
        self.refresh_filter_bar()
        self.redraw()

    def run(self, events: Iterable[Event]) -> Outcome:
        """Drive the session from ``events`` until it commits or is cancelled.

        An exhausted event source counts as cancellation.
        """
        self.start()
        for event in events:
            outcome = self.handle(event)
            if outcome is not None:
                return outcome
        self.outcome = Cancelled()
        return self.outcome
