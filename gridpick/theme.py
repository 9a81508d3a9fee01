"""UI theme definitions and selection helpers.

Themes name the colors of grid chrome (borders, cursor highlight, filter bar).
Element colors come from the element records themselves.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic color names used by the renderer; empty means terminal default."""

    name: str
    border: str
    cursor_fg: str
    cursor_bg: str
    bar_bg: str
    filter_fg: str
    filter_bg: str
    filter_empty_bg: str
    use_element_colors: bool = True


DEFAULT_THEME = UITheme(
    name="default",
    border="white",
    cursor_fg="black",
    cursor_bg="#faff69",
    bar_bg="grey",
    filter_fg="white",
    filter_bg="blue",
    filter_empty_bg="red",
)

OCEAN_THEME = UITheme(
    name="ocean",
    border="#0087af",
    cursor_fg="black",
    cursor_bg="#5fd7ff",
    bar_bg="#005f87",
    filter_fg="white",
    filter_bg="#0087d7",
    filter_empty_bg="#d75f00",
)

PLAIN_THEME = UITheme(
    name="plain",
    border="",
    cursor_fg="",
    cursor_bg="",
    bar_bg="",
    filter_fg="",
    filter_bg="",
    filter_empty_bg="",
    use_element_colors=False,
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
