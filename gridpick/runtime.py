"""Terminal runtime for one picker session.

Opens the controlling terminal, captures it in raw mode, builds the grid
geometry from its size, and drives a ``Session`` until it ends. Capture and
the renderer's color cache are released on every exit path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

from .config import GridSettings
from .elements import Element
from .errors import SetupError
from .input import TerminalEventSource
from .keymap import merge_keymap
from .layout import GridGeometry
from .render import TerminalRenderer
from .session import Cancelled, Outcome, Session
from .terminal import TTY_PATH, TerminalController, open_tty
from .theme import resolve_theme

logger = logging.getLogger(__name__)

FILTER_BAR_ROWS = 1


def build_geometry(columns: int, rows: int, settings: GridSettings) -> GridGeometry:
    """Return grid geometry for a terminal of ``columns x rows``, minus the filter bar."""
    return GridGeometry(
        viewport_width=max(0, columns),
        viewport_height=max(0, rows - FILTER_BAR_ROWS),
        cell_width=settings.cell_width,
        cell_height=settings.cell_height,
        origin_fraction_x=settings.origin_x,
        origin_fraction_y=settings.origin_y,
        candidate_limit=settings.candidate_limit,
    )


def _terminal_size(fd: int) -> os.terminal_size:
    try:
        return os.get_terminal_size(fd)
    except OSError as exc:
        raise SetupError(f"Cannot determine terminal size: {exc}") from exc


def pick(
    elements: Sequence[Element],
    settings: GridSettings | None = None,
    *,
    no_color: bool = False,
    tty_path: str = TTY_PATH,
) -> Outcome:
    """Run one interactive session over ``elements`` on the controlling terminal.

    An empty element list is cancelled without touching the terminal. Raises
    ``SetupError`` when the terminal cannot be captured.
    """
    if not elements:
        return Cancelled()
    settings = settings or GridSettings()
    with open_tty(tty_path) as fd:
        terminal = TerminalController(fd, fd)
        size = _terminal_size(fd)
        geometry = build_geometry(size.columns, size.lines, settings)
        logger.debug("terminal %dx%d, geometry %r", size.columns, size.lines, geometry)
        renderer = TerminalRenderer(
            terminal.write,
            geometry,
            padding=settings.cell_padding,
            theme=resolve_theme(settings.theme, no_color=no_color),
        )
        session = Session(elements, geometry, renderer, merge_keymap(settings.keymap))
        events = TerminalEventSource(fd, get_terminal_size=lambda _fallback: _terminal_size(fd))
        try:
            with terminal.raw_mode():
                return session.run(events)
        finally:
            renderer.release()
