"""Key-combo registry and the default grid keymap.

Keymaps map key tokens to action names; the session resolves action names to
its own operations. User overrides come from the config file.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

ACTION_NAMES = (
    "move_left",
    "move_right",
    "move_up",
    "move_down",
    "next",
    "prev",
    "line_begin",
    "line_end",
    "backspace",
    "include",
    "exclude",
    "pop",
)

DEFAULT_KEYMAP: dict[str, str] = {
    "LEFT": "move_left",
    "RIGHT": "move_right",
    "UP": "move_up",
    "DOWN": "move_down",
    "TAB": "next",
    "CTRL_N": "next",
    "SHIFT_TAB": "prev",
    "CTRL_P": "prev",
    "HOME": "line_begin",
    "CTRL_A": "line_begin",
    "END": "line_end",
    "CTRL_E": "line_end",
    "BACKSPACE": "backspace",
    "/": "include",
    "CTRL_SLASH": "exclude",
    "CTRL_X": "exclude",
    "CTRL_U": "pop",
}

_MODIFIER_ALIASES = {
    "C": "CTRL",
    "CONTROL": "CTRL",
    "M": "ALT",
    "META": "ALT",
    "S": "SHIFT",
}


def normalize_combo(combo: str) -> str:
    """Return the canonical token for a user-written key combo.

    ``"ctrl+u"``, ``"Ctrl-U"`` and ``"CTRL_U"`` all normalize to ``"CTRL_U"``.
    Single characters are kept verbatim so ``"a"`` and ``"A"`` stay distinct.
    """
    if len(combo) == 1:
        return combo
    parts = [part for part in re.split(r"[+\-_ ]", combo.strip()) if part]
    if not parts:
        return combo
    *modifiers, base = parts
    canonical = [_MODIFIER_ALIASES.get(mod.upper(), mod.upper()) for mod in modifiers]
    base = base.upper() if len(base) > 1 or canonical else base
    if canonical and base == "/":
        base = "SLASH"
    return "_".join([*canonical, base])


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key``; ``None`` means no binding exists."""
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return None
        result = handler()
        return True if result is None else result


def merge_keymap(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the default keymap updated with valid user overrides.

    Overrides naming an unknown action are skipped. An action of ``"none"``
    unbinds the key so it types a literal character again.
    """
    keymap = {normalize_combo(key): action for key, action in DEFAULT_KEYMAP.items()}
    for combo, action in (overrides or {}).items():
        if not isinstance(combo, str) or not isinstance(action, str):
            continue
        token = normalize_combo(combo)
        if action == "none":
            keymap.pop(token, None)
        elif action in ACTION_NAMES:
            keymap[token] = action
    return keymap


def build_registry(keymap: Mapping[str, str], actions: Mapping[str, Callable[[], bool | None]]) -> KeyComboRegistry:
    """Bind each keymap entry to its action callback."""
    by_action: dict[str, list[str]] = {}
    for combo, action in keymap.items():
        by_action.setdefault(action, []).append(combo)
    registry = KeyComboRegistry(normalize=normalize_combo)
    for action, combos in by_action.items():
        handler = actions.get(action)
        if handler is not None:
            registry.register_binding(KeyComboBinding(combos=tuple(combos), handler=handler))
    return registry
