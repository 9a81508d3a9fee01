"""Low-level terminal input decoding.

Reads raw bytes from the tty and translates them into normalized key tokens,
then into session events. Handles ESC-sequence timing, control keys, UTF-8
text and SGR mouse reports.
"""

from __future__ import annotations

import os
import select
import shutil
from collections.abc import Callable, Iterator

from .events import Damage, Event, KeyPress, OtherEvent, PointerRelease

ESC_SEQUENCE_TIMEOUT_MS = 25
RESIZE_POLL_MS = 250
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x1f": "CTRL_SLASH",
    b"\x00": "CTRL_SPACE",
}

_CSI_FINAL_TOKENS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
    b"Z": "SHIFT_TAB",
}

_CSI_TILDE_TOKENS = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "3": "DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_text(fd: int, ch: bytes) -> str:
    data = ch
    for _ in range(_utf8_length(ch[0]) - 1):
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _decode_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        direction = ("UP", "DOWN", "LEFT", "RIGHT")[button]
        return f"MOUSE_WHEEL_{direction}:{col}:{row}"
    if btn & 0b0010_0000:
        return f"MOUSE_DRAG:{col}:{row}"
    if button == 0:
        suffix = "DOWN" if part == b"M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    return "MOUSE"


def _decode_csi(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _CSI_FINAL_TOKENS:
        return _CSI_FINAL_TOKENS[seq]
    if seq == b"<":
        return _decode_mouse(fd)
    if not seq.isdigit():
        return "ESC"
    params = seq
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part == b"~":
            return _CSI_TILDE_TOKENS.get(params.decode("ascii").split(";")[0], "ESC")
        if part in _CSI_FINAL_TOKENS:
            # Modified arrows: ESC [ 1 ; <mod> <final>
            _, _, modifier = params.decode("ascii").partition(";")
            base = _CSI_FINAL_TOKENS[part]
            if modifier == "2":
                return f"SHIFT_{base}"
            if modifier in {"3", "9"}:
                return f"ALT_{base}"
            if modifier == "5":
                return f"CTRL_{base}"
            return base
        params += part
        if len(params) > 16:
            return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; return ``""`` on timeout.

    Raises ``EOFError`` once the terminal is closed or hung up.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            raise EOFError(f"end of input on fd {fd}")

    if ch in _CONTROL_TOKENS:
        return _CONTROL_TOKENS[ch]
    if ch != b"\x1b" and ch[0] < 0x20:
        return f"CTRL_{chr(ch[0] + 64)}"
    if ch != b"\x1b":
        return _decode_text(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is not None and final in _CSI_FINAL_TOKENS:
            return _CSI_FINAL_TOKENS[final]
        return "ESC"
    if 0x20 <= seq[0] < 0x7F:
        # Meta-prefixed printable key, e.g. Alt+a.
        return f"ALT_{seq.decode('ascii')}"
    _PENDING_BYTES.append(seq)
    return "ESC"


def _parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


def event_for_key(key: str) -> Event:
    """Translate one key token into a session event."""
    if key.startswith("MOUSE_LEFT_UP:"):
        col, row = _parse_mouse_col_row(key)
        if col is None or row is None:
            return OtherEvent(key)
        # SGR reports are one-based.
        return PointerRelease(col - 1, row - 1)
    if key.startswith("MOUSE"):
        return OtherEvent(key)
    text = key if len(key) == 1 and key.isprintable() else ""
    return KeyPress(key=key, text=text)


class TerminalEventSource:
    """Iterable of session events read from a raw-mode tty.

    Idle polls compare the terminal size and report a change as damage so the
    grid is repainted over whatever the terminal cleared.
    """

    def __init__(
        self,
        fd: int,
        *,
        get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size,
        poll_ms: int = RESIZE_POLL_MS,
    ) -> None:
        self.fd = fd
        self._get_terminal_size = get_terminal_size
        self.poll_ms = poll_ms
        self._last_size = tuple(get_terminal_size((80, 24)))

    def _resized(self) -> bool:
        size = tuple(self._get_terminal_size((80, 24)))
        if size == self._last_size:
            return False
        self._last_size = size
        return True

    def __iter__(self) -> Iterator[Event]:
        while True:
            try:
                key = read_key(self.fd, timeout_ms=self.poll_ms)
            except EOFError:
                return
            if key:
                yield event_for_key(key)
            elif self._resized():
                yield Damage(count=0)
