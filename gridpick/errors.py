"""Exception types raised outside the selection engine.

The engine itself never raises for navigation or filter edge cases; these
cover terminal capture and malformed element input.
"""

from __future__ import annotations


class GridpickError(Exception):
    """Base class for gridpick failures that end the program."""


class SetupError(GridpickError):
    """Terminal capture or rendering surface could not be established."""


class RecordParseError(GridpickError):
    """Complex element input is malformed."""

    def __init__(self, line: int, column: int, message: str) -> None:
        super().__init__(f"line {line}, column {column}: {message}")
        self.line = line
        self.column = column
        self.message = message
