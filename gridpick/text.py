"""Display-width measurement and clipping for cell labels.

Labels are plain text; escape sequences in input are stripped before drawing
so they cannot break the grid. Wide characters count as two columns.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def sanitize_label(text: str) -> str:
    """Drop escape sequences and turn other control characters into spaces."""
    text = ANSI_ESCAPE_RE.sub("", text)
    return "".join(ch if ch.isprintable() else " " for ch in text)


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def shrink_to_width(text: str, max_cols: int) -> str:
    """Drop trailing characters from ``text`` until it fits ``max_cols`` columns."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def pad_to_width(text: str, width: int) -> str:
    """Clip or right-pad ``text`` to exactly ``width`` display columns."""
    clipped = shrink_to_width(text, width)
    return clipped + " " * max(0, width - display_width(clipped))
