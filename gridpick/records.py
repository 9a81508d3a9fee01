"""Element loaders for the plain and complex input formats.

Plain input is one element per line. Complex input is one record per line,
made of ``key = "value" ...`` pairs:

    name = "Firefox" "web browser"  tags = "web" "gui"  value = "firefox"

A doubled quote inside a value stands for a literal quote. Parsing finishes
before any session starts; errors carry the line and column.
"""

from __future__ import annotations

import colorsys
import json
from collections.abc import Iterable

from .elements import DEFAULT_COLORS, Element
from .errors import RecordParseError

RECORD_KEYS = ("name", "fg", "bg", "tags", "value")


def input_lines(text: str) -> list[str]:
    """Split on newlines only; a trailing newline does not start another line."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _default_payload(display: str, index: int, enumerate_: bool) -> list[str]:
    return [str(index)] if enumerate_ else [display]


def read_plain_elements(text: str, *, enumerate_: bool = False) -> list[Element]:
    """Return one element per input line, in input order."""
    return [
        Element(display=line, payload=_default_payload(line, index, enumerate_))
        for index, line in enumerate(input_lines(text))
    ]


def tag_colors(tags: Iterable[str]) -> tuple[str, str]:
    """Derive a stable white-on-color pair from a tag list."""
    key = json.dumps(list(tags), separators=(",", ":"))

    def seed(factor: int) -> int:
        return sum(ord(ch) * factor for ch in key)

    hue = (seed(83) % 360) / 360.0
    saturation = (seed(191) % 1000) / 2500 + 0.4
    value = (seed(121) % 1000) / 2500 + 0.4
    red, green, blue = colorsys.hsv_to_rgb(hue, saturation, value)
    # Channels scale by 256 and wrap as a byte, so a full 1.0 becomes 00.
    return "white", "#" + "".join(f"{round(c * 256) % 256:02x}" for c in (red, green, blue))


class _LineScanner:
    """Cursor over one record line with column-aware errors."""

    def __init__(self, text: str, line_no: int) -> None:
        self.text = text
        self.line_no = line_no
        self.pos = 0

    def error(self, message: str) -> RecordParseError:
        return RecordParseError(self.line_no, self.pos + 1, message)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_spaces(self) -> None:
        while self.peek() == " ":
            self.pos += 1

    def key(self) -> str:
        start = self.pos
        while self.peek().isalnum():
            self.pos += 1
        if self.pos == start:
            raise self.error("expected a key")
        return self.text[start:self.pos]

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise self.error(f"expected {ch!r}")
        self.pos += 1

    def value(self) -> str:
        self.expect('"')
        out: list[str] = []
        while True:
            if self.at_end():
                raise self.error("unterminated string")
            ch = self.text[self.pos]
            self.pos += 1
            if ch != '"':
                out.append(ch)
                continue
            if self.peek() == '"':
                out.append('"')
                self.pos += 1
                continue
            return "".join(out)

    def rest_is_blank(self) -> bool:
        return not self.text[self.pos:].strip()

    def pairs(self) -> list[tuple[str, list[str], int]]:
        """Scan ``key = "value"...`` pairs; only plain spaces may separate tokens."""
        result: list[tuple[str, list[str], int]] = []
        while self.peek().isspace():
            self.pos += 1
        while not self.rest_is_blank():
            column = self.pos + 1
            key = self.key()
            self.skip_spaces()
            self.expect("=")
            self.skip_spaces()
            values = [self.value()]
            self.skip_spaces()
            while self.peek() == '"':
                values.append(self.value())
                self.skip_spaces()
            result.append((key, values, column))
        return result


def _build_record(
    pairs: list[tuple[str, list[str], int]],
    line_no: int,
    index: int,
    enumerate_: bool,
) -> Element:
    tags = [tag for key, values, _ in pairs if key == "tags" for tag in values if tag]
    fg, bg = tag_colors(tags) if tags else DEFAULT_COLORS
    display: str | None = None
    extra: tuple[str, ...] = ()
    payload: list[str] | None = None
    for key, values, column in pairs:
        if key not in RECORD_KEYS:
            raise RecordParseError(line_no, column, f"Unknown key {key!r}")
        if key == "name":
            display, extra = values[0], tuple(values[1:])
        elif key in {"fg", "bg"}:
            if len(values) != 1:
                raise RecordParseError(line_no, column, f"Bad value for field {key!r}")
            if key == "fg":
                fg = values[0]
            else:
                bg = values[0]
        elif key == "value":
            payload = list(values)
    if display is None:
        raise RecordParseError(line_no, 1, "Element without display")
    if payload is None:
        payload = _default_payload(display, index, enumerate_)
    return Element(display=display, tags=tuple(tags), colors=(fg, bg), payload=payload, extra=extra)


def read_complex_elements(text: str, *, enumerate_: bool = False) -> list[Element]:
    """Parse complex records; blank lines are skipped and do not count as elements."""
    elements: list[Element] = []
    for line_no, line in enumerate(input_lines(text), start=1):
        pairs = _LineScanner(line, line_no).pairs()
        if not pairs:
            continue
        elements.append(_build_record(pairs, line_no, len(elements), enumerate_))
    return elements


def read_elements(text: str, *, complex_format: bool = False, enumerate_: bool = False) -> list[Element]:
    if complex_format:
        return read_complex_elements(text, enumerate_=enumerate_)
    return read_plain_elements(text, enumerate_=enumerate_)
