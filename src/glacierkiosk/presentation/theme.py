"""Theme utilities for the kiosk Plotly charts."""

from __future__ import annotations

from enum import Enum
from typing import Union


class ThemeMode(str, Enum):
    """UI theme mode.

    The kiosk runs dark by default; light is kept for daylight installations.
    """

    DARK = "dark"
    LIGHT = "light"


def resolve_theme(theme: Union[str, ThemeMode, None]) -> ThemeMode:
    """Convert str to ThemeMode. Default to DARK."""
    if isinstance(theme, ThemeMode):
        return theme
    s = str(theme).lower()
    if s in ("light", "plotly_white"):
        return ThemeMode.LIGHT
    return ThemeMode.DARK


def get_theme_colors(theme: ThemeMode) -> tuple[str, str]:
    """Get background and foreground colors for a theme."""
    if theme is ThemeMode.DARK:
        return "#1a1a2e", "#ffffff"
    return "#ffffff", "#000000"


def get_grid_color(theme: ThemeMode) -> str:
    return "rgba(255,255,255,0.2)" if theme is ThemeMode.DARK else "#cccccc"


def get_theme_template(theme: ThemeMode) -> str:
    """Get Plotly template name for a theme."""
    if theme is ThemeMode.DARK:
        return "plotly_dark"
    return "plotly_white"
