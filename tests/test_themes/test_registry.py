"""Unit tests for template_system.themes.registry.

Tests cover: the built-in catalogue, lookup of unknown names, theme
validation, customization merging, registry extension and CSS output.
"""

from __future__ import annotations

import pytest

from template_system.themes.registry import (
    BUILTIN_THEMES,
    COZY,
    MODERN,
    RAMP_STEPS,
    ThemeRegistry,
    tailwind_color_name,
)


@pytest.mark.unit
class TestCatalogue:
    def test_builtin_names(self, registry):
        assert registry.names() == ["modern", "cozy", "minimal"]
        assert len(registry) == 3

    def test_default_is_modern(self, registry):
        assert registry.default_name == "modern"
        assert registry.default is MODERN

    def test_get_known(self, registry):
        assert registry.get("cozy") is COZY
        assert "cozy" in registry

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("does-not-exist") is None
        assert registry.get(None) is None
        assert "does-not-exist" not in registry

    def test_unknown_default_rejected(self):
        with pytest.raises(ValueError):
            ThemeRegistry(default="neon")

    @pytest.mark.parametrize("theme", BUILTIN_THEMES, ids=lambda t: t.name)
    def test_builtins_are_complete(self, theme):
        assert ThemeRegistry.validate_theme(theme) is True
        assert set(theme.colors.primary) == set(RAMP_STEPS)


@pytest.mark.unit
class TestTailwindColorName:
    def test_palette_hit(self):
        assert tailwind_color_name("#059669") == "emerald-600"
        assert tailwind_color_name("#0284C7") == "sky-600"

    def test_arbitrary_value(self):
        assert tailwind_color_name("#be123d") == "[#be123d]"


@pytest.mark.unit
class TestValidateTheme:
    def test_missing_ramp_step(self):
        data = MODERN.model_dump()
        del data["colors"]["primary"][600]
        assert ThemeRegistry.validate_theme(data) is False

    def test_bad_hex(self):
        data = MODERN.model_dump()
        data["colors"]["accent"][500] = "orange"
        assert ThemeRegistry.validate_theme(data) is False

    def test_missing_primary_font(self):
        data = MODERN.model_dump()
        data["typography"]["font_family"]["primary"] = ""
        assert ThemeRegistry.validate_theme(data) is False

    def test_structurally_invalid_dict(self):
        assert ThemeRegistry.validate_theme({"name": "x"}) is False


@pytest.mark.unit
class TestMerged:
    def test_no_customizations_returns_same(self):
        assert COZY.merged(None) is COZY
        assert COZY.merged({}) is COZY

    def test_colour_step_override(self):
        custom = COZY.merged({"colors": {"primary": {"600": "#be123c"}}})
        assert custom.colors.primary[600] == "#be123c"
        assert custom.colors.primary[700] == COZY.colors.primary[700]
        assert COZY.colors.primary[600] == "#059669"

    def test_typography_override(self):
        custom = MODERN.merged({"typography": {"fontFamily": {"primary": "Sarabun"}}})
        assert custom.typography.font_family["primary"] == "Sarabun"
        assert custom.typography.font_family["mono"] == "JetBrains Mono"

    def test_radius_override(self):
        custom = MODERN.merged({"borderRadius": {"lg": "0.625rem"}})
        assert custom.border_radius["lg"] == "0.625rem"
        assert custom.border_radius["xl"] == MODERN.border_radius["xl"]

    @pytest.mark.parametrize(
        "customizations, path",
        [
            ({"colors": "#dc2626"}, "colors"),
            ({"colors": {"primary": "#dc2626"}}, "colors.primary"),
            ({"colors": {"primary": {"600": 5}}}, "colors.primary.600"),
            ({"typography": {"fontFamily": {"primary": 7}}}, "typography.fontFamily.primary"),
            ({"typography": {"fontWeight": {"bold": "heavy"}}}, "typography.fontWeight.bold"),
            ({"typography": ["Inter"]}, "typography"),
            ({"shadows": "none"}, "shadows"),
            ({"spacing": {"md": 16}}, "spacing.md"),
        ],
    )
    def test_bad_shapes_are_skipped(self, customizations, path):
        warnings: list[str] = []
        custom = COZY.merged(customizations, warnings)
        assert custom.colors == COZY.colors
        assert custom.typography == COZY.typography
        assert custom.spacing == COZY.spacing
        assert custom.shadows == COZY.shadows
        assert warnings == [f"Ignoring invalid theme customization '{path}'"]

    def test_valid_parts_kept_alongside_bad_ones(self):
        warnings: list[str] = []
        custom = COZY.merged(
            {"colors": {"primary": {"600": "#dc2626", "700": None}}, "typography": "Inter"},
            warnings,
        )
        assert custom.colors.primary[600] == "#dc2626"
        assert custom.colors.primary[700] == COZY.colors.primary[700]
        assert len(warnings) == 2

    def test_bad_shapes_without_warning_list(self):
        assert COZY.merged({"colors": "#dc2626"}).colors == COZY.colors


@pytest.mark.unit
class TestFallbackName:
    def test_modern_even_with_other_default(self):
        assert ThemeRegistry(default="minimal").fallback_name == "modern"

    def test_default_when_modern_missing(self):
        assert ThemeRegistry([COZY], default="cozy").fallback_name == "cozy"


@pytest.mark.unit
class TestWithTheme:
    def test_adds_theme(self, registry):
        neon = COZY.model_copy(update={"name": "neon", "display_name": "Neon"})
        extended = registry.with_theme(neon)
        assert extended.get("neon") is not None
        assert registry.get("neon") is None

    def test_rejects_incomplete(self, registry):
        data = COZY.model_dump()
        data["name"] = "broken"
        data["typography"]["font_size"] = {}
        broken = type(COZY).model_validate(data)
        with pytest.raises(ValueError):
            registry.with_theme(broken)


@pytest.mark.unit
class TestGenerateCss:
    def test_contains_variables(self, registry):
        css = registry.generate_css("cozy")
        assert css.startswith("/* Cozy Theme */")
        assert "--color-primary-600: #059669;" in css
        assert "--font-family-primary: 'Poppins', system-ui, sans-serif;" in css
        assert "background-color: #fefdf8;" in css

    def test_applies_customizations(self, registry):
        css = registry.generate_css("modern", {"colors": {"primary": {"500": "#123456"}}})
        assert "--color-primary-500: #123456;" in css

    def test_unknown_theme_raises(self, registry):
        with pytest.raises(KeyError):
            registry.generate_css("does-not-exist")
