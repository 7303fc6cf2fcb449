"""Theme registry and theme applier."""

from template_system.themes.applier import ThemeApplier
from template_system.themes.registry import (
    BUILTIN_THEMES,
    ColorScheme,
    Theme,
    ThemeRegistry,
    Typography,
    tailwind_color_name,
)

__all__ = [
    "BUILTIN_THEMES",
    "ColorScheme",
    "Theme",
    "ThemeApplier",
    "ThemeRegistry",
    "Typography",
    "tailwind_color_name",
]
