"""Cursor navigation over the active layout.

Every function here computes a target position only. Applying it (and
ignoring targets that are not in the layout) is up to the session, which
keeps navigation total over any layout, including an empty one.
"""

from __future__ import annotations

from .layout import Layout, Position, diamond_layer, distance

ORIGIN: Position = (0, 0)


def step(cursor: Position, dx: int, dy: int) -> Position:
    x, y = cursor
    return x + dx, y + dy


def visible_ring(layout: Layout, radius: int) -> list[Position]:
    """Return ring ``radius`` (modulo the outermost ring) restricted to ``layout``."""
    ring = diamond_layer(radius % (layout.max_distance() + 1))
    return [position for position in ring if position in layout]


def next_position(layout: Layout, cursor: Position) -> Position:
    """Return the ring-wise successor of ``cursor``.

    The last cell of a ring continues at the first visible cell of the next
    ring outwards, wrapping back to the centre after the outermost ring.
    """
    d = distance(cursor)
    ring = visible_ring(layout, d)
    if cursor not in ring:
        return cursor
    if cursor == ring[-1]:
        following = visible_ring(layout, d + 1)
        return following[0] if following else ORIGIN
    return ring[ring.index(cursor) + 1]


def prev_position(layout: Layout, cursor: Position) -> Position:
    """Return the ring-wise predecessor of ``cursor``."""
    d = distance(cursor)
    ring = visible_ring(layout, d)
    if cursor not in ring:
        return cursor
    if cursor == ring[0]:
        preceding = visible_ring(layout, d - 1)
        return preceding[-1] if preceding else ORIGIN
    return ring[ring.index(cursor) - 1]


def _row(layout: Layout, cursor: Position) -> list[Position]:
    _, y = cursor
    return [position for position in layout if position[1] == y]


def line_begin(layout: Layout, cursor: Position) -> Position:
    row = _row(layout, cursor)
    return min(row) if row else cursor


def line_end(layout: Layout, cursor: Position) -> Position:
    row = _row(layout, cursor)
    return max(row) if row else cursor
