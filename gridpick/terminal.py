"""Terminal control helpers for the picker session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse toggles.
Standard input carries the element list, so the session talks to the
controlling terminal through ``/dev/tty``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty
from collections.abc import Iterator

from .errors import SetupError

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"


class TerminalController:
    """Capture and restore one tty for exclusive keyboard and mouse input."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise SetupError(f"Could not read terminal attributes: {exc}") from exc

    def write(self, text: str) -> None:
        os.write(self.stdout_fd, text.encode("utf-8"))

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen, hide cursor, report button presses and releases.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h")

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and disable mouse reporting."""
        os.write(self.stdout_fd, b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Bracket code with TUI enter/exit; exit runs even if entering failed."""
        try:
            try:
                self.enable_tui_mode()
            except (OSError, termios.error) as exc:
                raise SetupError(f"Could not establish keyboard grab: {exc}") from exc
            yield
        finally:
            self.disable_tui_mode()


@contextlib.contextmanager
def open_tty(path: str = TTY_PATH) -> Iterator[int]:
    """Open the controlling terminal read/write and close it on exit."""
    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        raise SetupError(f"Cannot open terminal {path!r}: {exc.strerror or exc}") from exc
    try:
        if not os.isatty(fd):
            raise SetupError(f"{path!r} is not a terminal")
        yield fd
    finally:
        os.close(fd)
        logger.debug("closed %s", path)
