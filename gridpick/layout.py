"""Diamond layout generation and grid geometry.

Positions are produced ring by ring in order of increasing Manhattan distance,
shifted by the origin offset and clipped to what fits in the viewport. Layouts
are recomputed from scratch whenever the visible element set changes.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from itertools import islice

from .elements import Element

Position = tuple[int, int]

# Spiral candidates considered per layout. Viewports wide enough to need more
# cells than this leave the remaining elements unreachable.
DEFAULT_CANDIDATE_LIMIT = 1000


def distance(position: Position) -> int:
    """Return the Manhattan distance of ``position`` from ``(0, 0)``."""
    x, y = position
    return abs(x) + abs(y)


def diamond_layer(radius: int) -> list[Position]:
    """Return ring ``radius`` of the diamond in its fixed rotational order.

    Ring 0 is the single origin cell. Ring ``r > 0`` holds ``4r`` cells,
    starting at ``(0, r)`` and sweeping through all four diamond edges.
    """
    if radius <= 0:
        return [(0, 0)]
    n = radius
    ring: list[Position] = []
    ring.extend((i, n - i) for i in range(n))
    ring.extend((n - i, -i) for i in range(n))
    ring.extend((-i, -(n - i)) for i in range(n))
    ring.extend((-(n - i), i) for i in range(n))
    return ring


def diamond() -> Iterator[Position]:
    """Yield the infinite spiral of all rings concatenated."""
    radius = 0
    while True:
        yield from diamond_layer(radius)
        radius += 1


def diamond_restrict(
    restrict_x: int,
    restrict_y: int,
    origin_x: int,
    origin_y: int,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[Position]:
    """Return shifted spiral positions that fit inside the restriction box."""
    shifted = ((x + origin_x, y + origin_y) for x, y in islice(diamond(), max(0, limit)))
    return [(x, y) for x, y in shifted if abs(x) <= restrict_x and abs(y) <= restrict_y]


@dataclass(frozen=True)
class GridGeometry:
    """Viewport and cell sizes, in terminal columns and rows."""

    viewport_width: int
    viewport_height: int
    cell_width: int
    cell_height: int
    origin_fraction_x: float = 0.5
    origin_fraction_y: float = 0.5
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT

    @staticmethod
    def _restriction(viewport: int, cell: int) -> int:
        return math.floor((viewport / max(1, cell) - 1) / 2)

    @property
    def restrict_x(self) -> int:
        return self._restriction(self.viewport_width, self.cell_width)

    @property
    def restrict_y(self) -> int:
        return self._restriction(self.viewport_height, self.cell_height)

    @property
    def origin_offset(self) -> Position:
        """Map origin fractions into ``[-restrict, restrict]`` per axis."""
        ox = math.floor((self.origin_fraction_x - 0.5) * 2 * self.restrict_x)
        oy = math.floor((self.origin_fraction_y - 0.5) * 2 * self.restrict_y)
        return ox, oy

    def positions(self) -> list[Position]:
        """Return all visible grid positions in spiral order."""
        ox, oy = self.origin_offset
        return diamond_restrict(self.restrict_x, self.restrict_y, ox, oy, self.candidate_limit)

    def cell_origin(self, position: Position) -> tuple[int, int]:
        """Return the zero-based viewport column/row of a cell's top-left corner."""
        x, y = position
        left = (self.viewport_width - self.cell_width) // 2
        top = (self.viewport_height - self.cell_height) // 2
        return left + x * self.cell_width, top + y * self.cell_height

    def cell_at(self, column: int, row: int) -> Position:
        """Return the grid position covering zero-based viewport ``column``/``row``."""
        left = (self.viewport_width - self.cell_width) // 2
        top = (self.viewport_height - self.cell_height) // 2
        return (column - left) // max(1, self.cell_width), (row - top) // max(1, self.cell_height)


class Layout:
    """Ordered association of unique grid positions to elements."""

    def __init__(self, cells: Sequence[tuple[Position, Element]], start: Position = (0, 0)) -> None:
        self._cells: dict[Position, Element] = dict(cells)
        self.start = start

    def __contains__(self, position: object) -> bool:
        return position in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Layout):
            return NotImplemented
        return self.start == other.start and list(self._cells.items()) == list(other._cells.items())

    def __repr__(self) -> str:
        return f"Layout({len(self._cells)} cells, start={self.start})"

    def get(self, position: Position) -> Element | None:
        return self._cells.get(position)

    def items(self) -> list[tuple[Position, Element]]:
        return list(self._cells.items())

    def max_distance(self) -> int:
        return max((distance(position) for position in self._cells), default=0)


def build_layout(elements: Sequence[Element], geometry: GridGeometry) -> Layout:
    """Zip visible spiral positions with ``elements`` in input order.

    Elements beyond the number of visible positions get no cell. The layout's
    start is the first visible position even when no element is placed.
    """
    coords = geometry.positions()
    start = coords[0] if coords else (0, 0)
    return Layout(list(zip(coords, elements)), start=start)
