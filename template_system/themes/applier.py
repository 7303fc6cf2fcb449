"""Re-skins resolved template text through a theme.

The applier walks the text once, looking at every class-like token, and
rewrites the ones it recognises:

* colour families: ``bg|text|border-blue-*`` become the theme's
  ``primary[600]``, ``bg|text-yellow-*`` its ``secondary[500]`` and
  ``bg|text-orange-*`` its ``accent[500]``;
* font families: ``font-[Inter]`` / ``font-[Poppins]`` become the theme's
  primary font;
* radius and shadow steps through the theme's step tables.

Because substitution happens in a single ``re.sub`` pass, a token that was
just rewritten is never looked at again.
"""

from __future__ import annotations

import re
from typing import Any

from rich.console import Console

from template_system.tailwind import split_variants
from template_system.themes.registry import Theme, ThemeRegistry, tailwind_color_name

console = Console()

# Class-like runs delimited by whitespace, quotes, braces, angle brackets and
# the few punctuation characters that separate attribute values in markup.
_TOKEN_RE = re.compile(r"[^\s\"'`{}<>=(),;]+")

_COLOR_RE = re.compile(
    r"(?P<important>!?)(?P<prefix>bg|text|border)-(?P<family>blue|yellow|orange)"
    r"-(?P<step>50|[1-9]00|950)(?P<opacity>/\d{1,3})?"
)
_FONT_RE = re.compile(r"font-\[(?:Inter|Poppins)\]")
_RADIUS_RE = re.compile(r"rounded(?P<side>-(?:t|r|b|l|s|e|tl|tr|bl|br))?-(?P<step>[a-z0-9]+)")
_SHADOW_RE = re.compile(r"shadow-(?P<step>[a-z0-9]+)")

# family -> (palette group, ramp step), and which prefixes the family rule covers
_FAMILY_TARGETS: dict[str, tuple[str, int, tuple[str, ...]]] = {
    "blue": ("primary", 600, ("bg", "text", "border")),
    "yellow": ("secondary", 500, ("bg", "text")),
    "orange": ("accent", 500, ("bg", "text")),
}


class ThemeApplier:
    """Rewrites utility-class tokens according to a named theme.

    Usage::

        applier = ThemeApplier(ThemeRegistry())
        themed = applier.apply_theme(html, "cozy", {"colors": {"primary": {600: "#be123c"}}})
    """

    def __init__(self, registry: ThemeRegistry | None = None) -> None:
        self.registry = registry or ThemeRegistry()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve_theme(
        self,
        theme_name: str | None,
        customizations: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> tuple[Theme, bool]:
        """Return the merged theme for *theme_name* and whether it was found.

        A missing name uses the registry default; an unknown one uses its
        fallback theme. Customizations of the wrong shape are dropped and
        reported through *warnings*.
        """
        theme = self.registry.get(theme_name)
        found = theme is not None
        if theme is None:
            name = self.registry.fallback_name if theme_name else self.registry.default_name
            theme = self.registry.get(name)
        return theme.merged(customizations, warnings), found

    def apply_theme(
        self,
        text: str,
        theme_name: str | None,
        customizations: dict[str, Any] | None = None,
    ) -> str:
        """Rewrite theme-sensitive tokens in *text*.

        Args:
            text: Already-resolved file content.
            theme_name: Registered theme name; unknown names use the fallback
                theme and print a warning.
            customizations: Partial token overrides per category.

        Returns:
            The re-skinned text.
        """
        theme, found = self.resolve_theme(theme_name, customizations)
        if not found:
            console.print(
                f"  [yellow]Unknown theme '{theme_name}', using '{theme.name}'[/yellow]"
            )
        rewrite = self._token_rewriter(theme)
        return _TOKEN_RE.sub(lambda m: rewrite(m.group(0)), text)

    # ------------------------------------------------------------------
    # Token rewriting
    # ------------------------------------------------------------------

    def _token_rewriter(self, theme: Theme):
        colors = theme.colors
        targets = {
            family: tailwind_color_name(getattr(colors, group)[step])
            for family, (group, step, _) in _FAMILY_TARGETS.items()
        }
        font = theme.typography.font_family.get("primary", "")

        def rewrite(raw: str) -> str:
            variants, utility = split_variants(raw)
            replaced = self._rewrite_utility(utility, theme, targets, font)
            return raw if replaced is None else variants + replaced

        return rewrite

    @staticmethod
    def _rewrite_utility(
        utility: str,
        theme: Theme,
        targets: dict[str, str],
        font: str,
    ) -> str | None:
        match = _COLOR_RE.fullmatch(utility)
        if match:
            family = match.group("family")
            if match.group("prefix") not in _FAMILY_TARGETS[family][2]:
                return None
            return (
                f"{match.group('important')}{match.group('prefix')}-{targets[family]}"
                f"{match.group('opacity') or ''}"
            )

        if _FONT_RE.fullmatch(utility):
            return f"font-['{font}']" if font else None

        match = _RADIUS_RE.fullmatch(utility)
        if match and match.group("step") in theme.radius_steps:
            return f"rounded{match.group('side') or ''}-{theme.radius_steps[match.group('step')]}"

        match = _SHADOW_RE.fullmatch(utility)
        if match and match.group("step") in theme.shadow_steps:
            return f"shadow-{theme.shadow_steps[match.group('step')]}"

        return None
