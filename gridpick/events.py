"""Input events consumed by the session state machine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyPress:
    """Decoded key token plus the literal text it produced, if any.

    ``key`` is a normalized token such as ``"UP"``, ``"CTRL_U"`` or ``"a"``.
    ``text`` is empty for keys that do not insert characters.
    """

    key: str
    text: str = ""


@dataclass(frozen=True)
class PointerRelease:
    """Primary button release at zero-based viewport column/row."""

    x: int
    y: int


@dataclass(frozen=True)
class Damage:
    """Screen contents were lost; ``count`` further damage events are pending."""

    count: int = 0


@dataclass(frozen=True)
class OtherEvent:
    detail: str = ""


Event = KeyPress | PointerRelease | Damage | OtherEvent
