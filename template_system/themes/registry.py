"""Named design-token bundles and the immutable registry that holds them.

A :class:`Theme` carries the colour ramps, typography, spacing, radius,
shadow and breakpoint scales of one look, plus the small amount of
behaviour the pipeline needs from it: the base utility classes used for
``<tw/>`` fallbacks and the radius/shadow step tables used when re-skinning.

:class:`ThemeRegistry` is constructed explicitly and passed by reference;
it is read-only after construction so concurrent pipeline runs can share it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from pydantic import Field, ValidationError

from template_system.models import FrozenCamelModel

RAMP_STEPS: tuple[int, ...] = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900)

FALLBACK_THEME = "modern"

_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# ---------------------------------------------------------------------------
# Tailwind palette (hex -> family/step lookup)
# ---------------------------------------------------------------------------

TAILWIND_PALETTE: dict[str, tuple[str, ...]] = {
    "slate": ("#f8fafc", "#f1f5f9", "#e2e8f0", "#cbd5e1", "#94a3b8",
              "#64748b", "#475569", "#334155", "#1e293b", "#0f172a"),
    "gray": ("#f9fafb", "#f3f4f6", "#e5e7eb", "#d1d5db", "#9ca3af",
             "#6b7280", "#4b5563", "#374151", "#1f2937", "#111827"),
    "red": ("#fef2f2", "#fee2e2", "#fecaca", "#fca5a5", "#f87171",
            "#ef4444", "#dc2626", "#b91c1c", "#991b1b", "#7f1d1d"),
    "orange": ("#fff7ed", "#ffedd5", "#fed7aa", "#fdba74", "#fb923c",
               "#f97316", "#ea580c", "#c2410c", "#9a3412", "#7c2d12"),
    "amber": ("#fffbeb", "#fef3c7", "#fde68a", "#fcd34d", "#fbbf24",
              "#f59e0b", "#d97706", "#b45309", "#92400e", "#78350f"),
    "yellow": ("#fefce8", "#fef9c3", "#fef08a", "#fde047", "#facc15",
               "#eab308", "#ca8a04", "#a16207", "#854d0e", "#713f12"),
    "green": ("#f0fdf4", "#dcfce7", "#bbf7d0", "#86efac", "#4ade80",
              "#22c55e", "#16a34a", "#15803d", "#166534", "#14532d"),
    "emerald": ("#ecfdf5", "#d1fae5", "#a7f3d0", "#6ee7b7", "#34d399",
                "#10b981", "#059669", "#047857", "#065f46", "#064e3b"),
    "sky": ("#f0f9ff", "#e0f2fe", "#bae6fd", "#7dd3fc", "#38bdf8",
            "#0ea5e9", "#0284c7", "#0369a1", "#075985", "#0c4a6e"),
    "blue": ("#eff6ff", "#dbeafe", "#bfdbfe", "#93c5fd", "#60a5fa",
             "#3b82f6", "#2563eb", "#1d4ed8", "#1e40af", "#1e3a8a"),
}

_HEX_TO_TAILWIND: dict[str, str] = {
    hex_value: f"{family}-{step}"
    for family, ramp in TAILWIND_PALETTE.items()
    for step, hex_value in zip(RAMP_STEPS, ramp)
}
_HEX_TO_TAILWIND["#451a03"] = "amber-950"


def tailwind_color_name(hex_value: str) -> str:
    """Map a hex colour to a Tailwind colour name, or an arbitrary value.

    ``"#059669"`` becomes ``"emerald-600"``; a colour outside the palette
    becomes ``"[#abcdef]"`` so it can still be used as ``bg-[#abcdef]``.
    """
    normalised = hex_value.strip().lower()
    if normalised in _HEX_TO_TAILWIND:
        return _HEX_TO_TAILWIND[normalised]
    return f"[{normalised}]"


def _ramp(*hexes: str) -> dict[int, str]:
    return dict(zip(RAMP_STEPS, hexes))


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ColorScheme(FrozenCamelModel):
    primary: dict[int, str]
    secondary: dict[int, str]
    accent: dict[int, str]
    neutral: dict[int, str]
    semantic: dict[str, Any] = Field(default_factory=dict)


class Typography(FrozenCamelModel):
    font_family: dict[str, str]
    font_size: dict[str, str] = Field(default_factory=dict)
    font_weight: dict[str, int] = Field(default_factory=dict)
    line_height: dict[str, float] = Field(default_factory=dict)


_TYPOGRAPHY_VALUE_TYPES: dict[str, type | tuple[type, ...]] = {
    "font_family": str,
    "font_size": str,
    "font_weight": int,
    "line_height": (int, float),
}


class Theme(FrozenCamelModel):
    """An immutable design-token bundle."""

    name: str = Field(..., min_length=1)
    display_name: str = Field(default="")
    description: str = Field(default="")
    colors: ColorScheme
    typography: Typography
    spacing: dict[str, str] = Field(default_factory=dict)
    border_radius: dict[str, str] = Field(default_factory=dict)
    shadows: dict[str, str] = Field(default_factory=dict)
    breakpoints: dict[str, str] = Field(default_factory=dict)
    base_classes: str = Field(default="", description="Utility classes every <tw/> fallback starts from")
    radius_steps: dict[str, str] = Field(default_factory=dict)
    shadow_steps: dict[str, str] = Field(default_factory=dict)

    def merged(
        self,
        customizations: dict[str, Any] | None,
        warnings: list[str] | None = None,
    ) -> "Theme":
        """Return a copy with *customizations* shallow-merged per category.

        Colour ramps and typography groups are merged one level deeper so a
        caller can override ``colors.primary.600`` without restating the
        whole ramp. Overrides of the wrong shape are skipped; a message for
        each is appended to *warnings* when a list is given.
        """
        if not customizations:
            return self
        skipped: list[str] = []

        data = self.model_dump()
        colors = customizations.get("colors") or {}
        if not isinstance(colors, dict):
            skipped.append("colors")
            colors = {}
        for group, values in colors.items():
            if group not in data["colors"]:
                continue
            if not isinstance(values, dict):
                skipped.append(f"colors.{group}")
                continue
            if group != "semantic":
                ramp: dict[int, str] = {}
                for step, value in values.items():
                    if not str(step).isdigit() or not isinstance(value, str):
                        skipped.append(f"colors.{group}.{step}")
                        continue
                    ramp[int(step)] = value
                values = ramp
            data["colors"][group] = {**data["colors"][group], **values}

        typography = customizations.get("typography") or {}
        if not isinstance(typography, dict):
            skipped.append("typography")
            typography = {}
        for group, values in typography.items():
            key = _snake(group)
            if key not in data["typography"]:
                continue
            if not isinstance(values, dict):
                skipped.append(f"typography.{group}")
                continue
            expected = _TYPOGRAPHY_VALUE_TYPES[key]
            accepted = {}
            for name, value in values.items():
                if isinstance(value, bool) or not isinstance(value, expected):
                    skipped.append(f"typography.{group}.{name}")
                    continue
                accepted[name] = value
            data["typography"][key] = {**data["typography"][key], **accepted}

        for category in ("spacing", "borderRadius", "shadows", "breakpoints"):
            values = customizations.get(category) or customizations.get(_snake(category))
            if values is None:
                continue
            if not isinstance(values, dict):
                skipped.append(category)
                continue
            key = _snake(category)
            accepted = {}
            for name, value in values.items():
                if not isinstance(value, str):
                    skipped.append(f"{category}.{name}")
                    continue
                accepted[name] = value
            data[key] = {**data[key], **accepted}

        if warnings is not None:
            warnings.extend(
                f"Ignoring invalid theme customization '{path}'" for path in skipped
            )
        return Theme.model_validate(data)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# ---------------------------------------------------------------------------
# Built-in themes
# ---------------------------------------------------------------------------

_NEUTRAL = _ramp(*TAILWIND_PALETTE["gray"])
_WARM_ACCENT = _ramp("#fef3c7", "#fde68a", "#fcd34d", "#fbbf24", "#f59e0b",
                     "#d97706", "#b45309", "#92400e", "#78350f", "#451a03")

_FONT_SIZE = {
    "xs": "0.75rem", "sm": "0.875rem", "base": "1rem", "lg": "1.125rem",
    "xl": "1.25rem", "2xl": "1.5rem", "3xl": "1.875rem", "4xl": "2.25rem",
    "5xl": "3rem", "6xl": "3.75rem",
}
_FONT_WEIGHT = {
    "thin": 100, "light": 300, "normal": 400, "medium": 500,
    "semibold": 600, "bold": 700, "extrabold": 800, "black": 900,
}
_LINE_HEIGHT = {
    "none": 1.0, "tight": 1.25, "snug": 1.375, "normal": 1.5, "relaxed": 1.625, "loose": 2.0,
}
_SPACING = {
    "xs": "0.25rem", "sm": "0.5rem", "md": "1rem", "lg": "1.5rem", "xl": "2rem",
    "2xl": "3rem", "3xl": "4rem", "4xl": "6rem", "5xl": "8rem", "6xl": "12rem",
}
_RADIUS = {
    "none": "0", "sm": "0.125rem", "md": "0.375rem", "lg": "0.5rem",
    "xl": "0.75rem", "2xl": "1rem", "3xl": "1.5rem", "full": "9999px",
}
_SHADOWS = {
    "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
    "md": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
    "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
    "xl": "0 20px 25px -5px rgb(0 0 0 / 0.1), 0 8px 10px -6px rgb(0 0 0 / 0.1)",
    "2xl": "0 25px 50px -12px rgb(0 0 0 / 0.25)",
    "inner": "inset 0 2px 4px 0 rgb(0 0 0 / 0.05)",
    "none": "0 0 #0000",
}
_BREAKPOINTS = {"sm": "640px", "md": "768px", "lg": "1024px", "xl": "1280px", "2xl": "1536px"}


def _semantic(background: str, surface: str, text: tuple[str, str, str]) -> dict[str, Any]:
    return {
        "success": "#10b981",
        "warning": "#f59e0b",
        "error": "#ef4444",
        "info": "#3b82f6",
        "background": background,
        "surface": surface,
        "text": {"primary": text[0], "secondary": text[1], "disabled": text[2]},
    }


def _typography(primary_font: str) -> Typography:
    return Typography(
        font_family={"primary": primary_font, "secondary": "system-ui", "mono": "JetBrains Mono"},
        font_size=_FONT_SIZE,
        font_weight=_FONT_WEIGHT,
        line_height=_LINE_HEIGHT,
    )


MODERN = Theme(
    name="modern",
    display_name="Modern",
    description="Bright sky-blue and yellow",
    colors=ColorScheme(
        primary=_ramp(*TAILWIND_PALETTE["sky"]),
        secondary=_ramp(*TAILWIND_PALETTE["yellow"]),
        accent=_WARM_ACCENT,
        neutral=_NEUTRAL,
        semantic=_semantic("#ffffff", "#f9fafb", ("#111827", "#6b7280", "#9ca3af")),
    ),
    typography=_typography("Inter"),
    spacing=_SPACING,
    border_radius=_RADIUS,
    shadows=_SHADOWS,
    breakpoints=_BREAKPOINTS,
    base_classes="text-gray-900",
)

COZY = Theme(
    name="cozy",
    display_name="Cozy",
    description="Warm emerald and orange",
    colors=ColorScheme(
        primary=_ramp(*TAILWIND_PALETTE["emerald"]),
        secondary=_ramp(*TAILWIND_PALETTE["orange"]),
        accent=_WARM_ACCENT,
        neutral=_NEUTRAL,
        semantic=_semantic("#fefdf8", "#f9fafb", ("#1f2937", "#6b7280", "#9ca3af")),
    ),
    typography=_typography("Poppins"),
    spacing=_SPACING,
    border_radius=_RADIUS,
    shadows=_SHADOWS,
    breakpoints=_BREAKPOINTS,
    base_classes="text-gray-800",
    radius_steps={"xl": "lg", "2xl": "xl"},
    shadow_steps={"lg": "md", "xl": "lg"},
)

MINIMAL = Theme(
    name="minimal",
    display_name="Minimal",
    description="Quiet slate with a blue secondary",
    colors=ColorScheme(
        primary=_ramp(*TAILWIND_PALETTE["slate"]),
        secondary=_ramp(*TAILWIND_PALETTE["blue"]),
        accent=_ramp(*TAILWIND_PALETTE["sky"]),
        neutral=_ramp(*TAILWIND_PALETTE["slate"]),
        semantic=_semantic("#ffffff", "#f8fafc", ("#0f172a", "#475569", "#94a3b8")),
    ),
    typography=_typography("system-ui"),
    spacing=_SPACING,
    border_radius={
        "none": "0", "sm": "0.125rem", "md": "0.25rem", "lg": "0.375rem",
        "xl": "0.5rem", "2xl": "0.75rem", "3xl": "1rem", "full": "9999px",
    },
    shadows={
        "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
        "md": "0 2px 4px -1px rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1)",
        "lg": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
        "xl": "0 8px 10px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
        "2xl": "0 12px 16px -4px rgb(0 0 0 / 0.1), 0 4px 6px -6px rgb(0 0 0 / 0.1)",
        "inner": "inset 0 1px 2px 0 rgb(0 0 0 / 0.05)",
        "none": "0 0 #0000",
    },
    breakpoints=_BREAKPOINTS,
    base_classes="text-slate-900",
    radius_steps={"xl": "md", "2xl": "lg", "3xl": "xl"},
    shadow_steps={"lg": "sm", "xl": "md", "2xl": "lg"},
)

BUILTIN_THEMES: tuple[Theme, ...] = (MODERN, COZY, MINIMAL)


# ---------------------------------------------------------------------------
# ThemeRegistry
# ---------------------------------------------------------------------------


class ThemeRegistry:
    """Read-only catalogue of named themes.

    Usage::

        registry = ThemeRegistry()
        theme = registry.get("cozy")          # Theme
        registry.get("does-not-exist")        # None
        css = registry.generate_css("minimal")
    """

    def __init__(
        self,
        themes: Iterable[Theme] | None = None,
        default: str = "modern",
    ) -> None:
        catalogue = {theme.name: theme for theme in (BUILTIN_THEMES if themes is None else themes)}
        if default not in catalogue:
            raise ValueError(f"Default theme '{default}' is not in the registry")
        self._themes = MappingProxyType(catalogue)
        self._default = default

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str | None) -> Theme | None:
        """Return the theme called *name*, or ``None`` if it is unknown."""
        if not name:
            return None
        return self._themes.get(name)

    def names(self) -> list[str]:
        return list(self._themes)

    @property
    def default_name(self) -> str:
        return self._default

    @property
    def default(self) -> Theme:
        return self._themes[self._default]

    @property
    def fallback_name(self) -> str:
        """Theme substituted for an unknown name: ``modern`` when registered."""
        return FALLBACK_THEME if FALLBACK_THEME in self._themes else self._default

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def __len__(self) -> int:
        return len(self._themes)

    def with_theme(self, theme: Theme) -> "ThemeRegistry":
        """Return a new registry that also contains *theme* (replacing same-named)."""
        if not self.validate_theme(theme):
            raise ValueError(f"Theme '{theme.name}' is incomplete")
        return ThemeRegistry([*self._themes.values(), theme], default=self._default)

    # ------------------------------------------------------------------
    # Validation & CSS
    # ------------------------------------------------------------------

    @staticmethod
    def validate_theme(theme: Theme | dict[str, Any]) -> bool:
        """Check that a theme is structurally complete.

        Every colour ramp must define all ten steps with valid hex values and
        a primary font family must be set.
        """
        if isinstance(theme, dict):
            try:
                theme = Theme.model_validate(theme)
            except ValidationError:
                return False

        for ramp in (
            theme.colors.primary,
            theme.colors.secondary,
            theme.colors.accent,
            theme.colors.neutral,
        ):
            if any(step not in ramp for step in RAMP_STEPS):
                return False
            if not all(_HEX_RE.match(value) for value in ramp.values()):
                return False

        if not theme.typography.font_family.get("primary"):
            return False
        return bool(theme.typography.font_size)

    def generate_css(self, name: str, customizations: dict[str, Any] | None = None) -> str:
        """Render a theme as CSS custom properties.

        Raises:
            KeyError: If *name* is not a registered theme.
        """
        theme = self.get(name)
        if theme is None:
            raise KeyError(f"Theme '{name}' not found")
        theme = theme.merged(customizations)

        lines = [f"/* {theme.display_name or theme.name} Theme */", ":root {"]
        for group in ("primary", "secondary", "accent", "neutral"):
            ramp = getattr(theme.colors, group)
            for step in RAMP_STEPS:
                lines.append(f"  --color-{group}-{step}: {ramp[step]};")
        fonts = theme.typography.font_family
        lines.append(f"  --font-family-primary: '{fonts.get('primary', 'system-ui')}', system-ui, sans-serif;")
        lines.append(f"  --font-family-secondary: '{fonts.get('secondary', 'system-ui')}', system-ui, sans-serif;")
        lines.append(f"  --font-family-mono: '{fonts.get('mono', 'monospace')}', monospace;")
        for key, value in theme.spacing.items():
            lines.append(f"  --spacing-{key}: {value};")
        for key, value in theme.border_radius.items():
            lines.append(f"  --radius-{key}: {value};")
        for key, value in theme.shadows.items():
            lines.append(f"  --shadow-{key}: {value};")
        lines.append("}")

        semantic = theme.colors.semantic
        text = semantic.get("text") or {}
        lines.extend([
            "",
            "body {",
            "  font-family: var(--font-family-primary);",
            f"  background-color: {semantic.get('background', '#ffffff')};",
            f"  color: {text.get('primary', '#111827')};",
            "}",
            "",
        ])
        return "\n".join(lines)
