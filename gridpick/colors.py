"""Color names to ANSI escape sequences, cached per drawable.

Colors are given as ``#rrggbb``/``#rgb`` hex, a small set of X11-style names,
or pygments ``ansi*`` names. Escapes are built with pygments'
``EscapeSequence`` and cached by ``(drawable, color)`` for the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pygments.formatters.terminal256 import EscapeSequence
from pygments.style import ansicolors

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

NAMED_COLORS: dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "orange": (255, 165, 0),
    "purple": (160, 32, 240),
    "pink": (255, 192, 203),
    "brown": (165, 42, 42),
    "grey": (190, 190, 190),
    "gray": (190, 190, 190),
    "darkgrey": (169, 169, 169),
    "darkgray": (169, 169, 169),
    "lightgrey": (211, 211, 211),
    "lightgray": (211, 211, 211),
    "navy": (0, 0, 128),
    "darkgreen": (0, 100, 0),
    "darkred": (139, 0, 0),
}


def parse_color(color: str) -> RGB | str | None:
    """Return an RGB triple, a pygments ansi color name, or ``None`` if unknown."""
    name = color.strip().lower()
    if not name:
        return None
    if name in ansicolors:
        return name
    if name.startswith("#"):
        digits = name[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) != 6:
            return None
        try:
            value = int(digits, 16)
        except ValueError:
            return None
        return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
    return NAMED_COLORS.get(name.replace(" ", ""))


def _escape(parsed: RGB | str | None, *, background: bool) -> str:
    if parsed is None:
        return ""
    if isinstance(parsed, str):
        seq = EscapeSequence(bg=parsed) if background else EscapeSequence(fg=parsed)
        return seq.color_string()
    seq = EscapeSequence(bg=parsed) if background else EscapeSequence(fg=parsed)
    return seq.true_color_string()


@dataclass(frozen=True)
class Pen:
    """Foreground and background escapes for one color."""

    fg: str
    bg: str


class ColorCache:
    """Session-scoped ``(drawable, color) -> Pen`` cache.

    Entries are created on first use and dropped only by ``release``.
    """

    def __init__(self) -> None:
        self._pens: dict[tuple[str, str], Pen] = {}

    def pen(self, drawable: str, color: str) -> Pen:
        key = (drawable, color)
        pen = self._pens.get(key)
        if pen is None:
            parsed = parse_color(color)
            if parsed is None and color:
                logger.debug("unknown color %r on %s, using terminal default", color, drawable)
            pen = Pen(fg=_escape(parsed, background=False), bg=_escape(parsed, background=True))
            self._pens[key] = pen
        return pen

    def style(self, drawable: str, fg: str, bg: str) -> str:
        """Return the combined escape for a foreground/background pair."""
        return self.pen(drawable, fg).fg + self.pen(drawable, bg).bg

    def entries(self) -> list[tuple[str, str]]:
        return list(self._pens)

    def release(self) -> int:
        """Drop every cached entry and return how many were released."""
        released = len(self._pens)
        for drawable, color in self.entries():
            del self._pens[(drawable, color)]
        logger.debug("released %d cached colors", released)
        return released
