"""Element records shown on the grid.

An element is immutable once loaded. Committing it yields a payload, either a
stored value or the result of an action callback.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_COLORS = ("black", "white")


@dataclass(frozen=True)
class Element:
    """One selectable grid item.

    ``action`` wins over ``payload`` when both are set. Returning ``None``
    from either means "no selection" and keeps the session running.
    """

    display: str
    tags: tuple[str, ...] = ()
    colors: tuple[str, str] = DEFAULT_COLORS
    payload: object | None = None
    action: Callable[[], object | None] | None = None
    extra: tuple[str, ...] = ()

    def resolve(self) -> object | None:
        """Return the committed payload, or ``None`` when nothing was chosen."""
        if self.action is not None:
            return self.action()
        return self.payload

    def fields(self) -> tuple[str, ...]:
        """Return the text fields that filters match against."""
        return (self.display, *self.tags)
