"""Terminal renderer for the element grid and filter bar.

Cells are boxes of ``cell_width x cell_height`` terminal cells placed with
the same geometry used for pointer hit-testing. The filter bar occupies the
row below the grid viewport. All output goes through one ``write`` callable
per call so each repaint reaches the terminal as a single chunk.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .colors import ColorCache
from .elements import Element
from .layout import GridGeometry, Layout, Position
from .text import display_width, pad_to_width, sanitize_label, shrink_to_width
from .theme import DEFAULT_THEME, UITheme

RESET = "\033[0m"
REVERSE = "\033[7m"
FILTER_BAR_MARGIN = 2
FILTER_FIELD_MIN_WIDTH = 8

GRID_DRAWABLE = "grid"
BAR_DRAWABLE = "filter_bar"


def _goto(column: int, row: int) -> str:
    """Return a cursor-position escape for zero-based ``column``/``row``."""
    return f"\033[{row + 1};{column + 1}H"


class TerminalRenderer:
    """Draw layouts as bordered boxes using ANSI escapes."""

    def __init__(
        self,
        write: Callable[[str], None],
        geometry: GridGeometry,
        *,
        padding: int = 1,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self._write = write
        self.geometry = geometry
        self.padding = max(0, padding)
        self.theme = theme
        self.colors = ColorCache()

    @property
    def bar_row(self) -> int:
        return self.geometry.viewport_height

    def _visible(self, position: Position) -> bool:
        column, row = self.geometry.cell_origin(position)
        return (
            column >= 0
            and row >= 0
            and column + self.geometry.cell_width <= self.geometry.viewport_width
            and row + self.geometry.cell_height <= self.geometry.viewport_height
        )

    def _cell_style(self, element: Element, highlighted: bool) -> str:
        if highlighted:
            if not self.theme.cursor_fg and not self.theme.cursor_bg:
                return REVERSE
            return self.colors.style(GRID_DRAWABLE, self.theme.cursor_fg, self.theme.cursor_bg)
        if not self.theme.use_element_colors:
            return ""
        fg, bg = element.colors
        return self.colors.style(GRID_DRAWABLE, fg, bg)

    def _label_lines(self, element: Element, width: int, rows: int) -> list[str]:
        labels = [sanitize_label(element.display)]
        labels.extend(sanitize_label(line) for line in element.extra)
        if rows <= 0:
            return []
        if len(labels) == 1:
            # Single label sits on the middle row.
            lines = [""] * rows
            lines[(rows - 1) // 2] = labels[0]
        else:
            lines = (labels + [""] * rows)[:rows]
        return [shrink_to_width(line, width) for line in lines]

    def draw_cell(self, position: Position, element: Element, highlighted: bool) -> str:
        """Return the escape string that paints one cell."""
        if not self._visible(position):
            return ""
        column, row = self.geometry.cell_origin(position)
        width = self.geometry.cell_width
        height = self.geometry.cell_height
        style = self._cell_style(element, highlighted)
        bordered = width >= 2 and height >= 3
        inner_width = width - 2 if bordered else width
        text_width = max(0, inner_width - 2 * self.padding)
        text_rows = height - 2 if bordered else height

        out: list[str] = []
        border_style = style
        if bordered and self.theme.border and not highlighted:
            border_style = style + self.colors.pen(GRID_DRAWABLE, self.theme.border).fg
        if bordered:
            out.append(_goto(column, row) + border_style + "┌" + "─" * inner_width + "┐" + RESET)
        pad = " " * min(self.padding, inner_width)
        for offset, line in enumerate(self._label_lines(element, text_width, text_rows)):
            body = pad_to_width(pad + line, inner_width)
            y = row + offset + (1 if bordered else 0)
            if bordered:
                out.append(_goto(column, y) + border_style + "│" + style + body + border_style + "│" + RESET)
            else:
                out.append(_goto(column, y) + style + body + RESET)
        if bordered:
            out.append(_goto(column, row + height - 1) + border_style + "└" + "─" * inner_width + "┘" + RESET)
        return "".join(out)

    def redraw_all(self, layout: Layout, cursor: Position) -> None:
        """Clear the grid viewport and paint every cell of ``layout``."""
        out = [RESET]
        for row in range(self.geometry.viewport_height):
            out.append(_goto(0, row) + "\033[2K")
        for position, element in layout.items():
            out.append(self.draw_cell(position, element, position == cursor))
        self._write("".join(out))

    def redraw_cells(self, layout: Layout, positions: Sequence[Position], cursor: Position) -> None:
        """Repaint only ``positions``; cells missing from ``layout`` are skipped."""
        out: list[str] = []
        for position in positions:
            element = layout.get(position)
            if element is not None:
                out.append(self.draw_cell(position, element, position == cursor))
        if out:
            self._write("".join(out))

    def update_filter_bar(self, text: str, match_count: int) -> None:
        """Repaint the filter bar; the field turns to alert colors when nothing matches."""
        width = self.geometry.viewport_width
        field_bg = self.theme.filter_bg if match_count > 0 else self.theme.filter_empty_bg
        label = sanitize_label(text)
        field = " " + label + " "
        field_width = max(FILTER_FIELD_MIN_WIDTH, display_width(field))
        field = pad_to_width(field, min(field_width, max(0, width - FILTER_BAR_MARGIN)))

        bar = self.colors.pen(BAR_DRAWABLE, self.theme.bar_bg).bg
        out = [_goto(0, self.bar_row), RESET, bar, "\033[2K", " " * min(FILTER_BAR_MARGIN, width)]
        if self.theme.filter_fg or self.theme.filter_bg:
            out.append(self.colors.style(BAR_DRAWABLE, self.theme.filter_fg, field_bg))
        else:
            out.append(REVERSE)
        out.append(field)
        out.append(RESET)
        self._write("".join(out))

    def release(self) -> int:
        """Release cached colors at session end."""
        return self.colors.release()
