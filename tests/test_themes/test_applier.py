"""Unit tests for template_system.themes.applier.

Tests cover: colour family remapping per theme, font family swaps,
radius and shadow step tables, variant and opacity preservation, unknown
theme fallback and customizations.
"""

from __future__ import annotations

import pytest

from template_system.themes.applier import ThemeApplier
from template_system.themes.registry import ThemeRegistry


@pytest.fixture
def applier(registry) -> ThemeApplier:
    return ThemeApplier(registry)


@pytest.mark.unit
class TestColourRemapping:
    def test_blue_becomes_primary_600(self, applier):
        out = applier.apply_theme('<a className="bg-blue-500 text-blue-300 border-blue-100">', "cozy")
        assert out == '<a className="bg-emerald-600 text-emerald-600 border-emerald-600">'

    def test_yellow_becomes_secondary_500(self, applier):
        assert applier.apply_theme("bg-yellow-400", "cozy") == "bg-orange-500"
        assert applier.apply_theme("text-yellow-700", "modern") == "text-yellow-500"

    def test_orange_becomes_accent_500(self, applier):
        assert applier.apply_theme("bg-orange-600", "minimal") == "bg-sky-500"

    def test_border_only_remapped_for_blue(self, applier):
        assert applier.apply_theme("border-yellow-400", "cozy") == "border-yellow-400"

    def test_other_families_untouched(self, applier):
        text = "bg-red-500 text-gray-700 bg-white"
        assert applier.apply_theme(text, "cozy") == text

    def test_variants_and_opacity_preserved(self, applier):
        out = applier.apply_theme("md:hover:bg-blue-700/50 !text-blue-500", "cozy")
        assert out == "md:hover:bg-emerald-600/50 !text-emerald-600"

    def test_partial_token_not_rewritten(self, applier):
        assert applier.apply_theme("my-bg-blue-500", "cozy") == "my-bg-blue-500"


@pytest.mark.unit
class TestFontsRadiusShadow:
    def test_font_family(self, applier):
        assert applier.apply_theme("font-[Inter]", "cozy") == "font-['Poppins']"
        assert applier.apply_theme("font-[Poppins]", "modern") == "font-['Inter']"

    def test_cozy_radius_and_shadow(self, applier):
        out = applier.apply_theme("rounded-xl rounded-t-2xl shadow-lg shadow-sm", "cozy")
        assert out == "rounded-lg rounded-t-xl shadow-md shadow-sm"

    def test_minimal_radius_and_shadow(self, applier):
        out = applier.apply_theme("rounded-3xl shadow-2xl", "minimal")
        assert out == "rounded-xl shadow-lg"

    def test_modern_leaves_radius_alone(self, applier):
        assert applier.apply_theme("rounded-xl shadow-lg", "modern") == "rounded-xl shadow-lg"

    def test_single_pass(self, applier):
        # minimal maps 3xl -> xl and xl -> md; one pass must not chain them.
        assert applier.apply_theme("rounded-3xl", "minimal") == "rounded-xl"


@pytest.mark.unit
class TestThemeResolution:
    def test_unknown_theme_uses_default(self, applier):
        theme, found = applier.resolve_theme("does-not-exist")
        assert found is False
        assert theme.name == "modern"
        assert applier.apply_theme("bg-blue-500", "does-not-exist") == "bg-sky-600"

    def test_unknown_theme_ignores_configured_default(self):
        applier = ThemeApplier(ThemeRegistry(default="minimal"))
        assert applier.resolve_theme("does-not-exist")[0].name == "modern"
        assert applier.resolve_theme(None)[0].name == "minimal"

    def test_bad_customizations_reported(self, applier):
        warnings: list[str] = []
        theme, found = applier.resolve_theme("cozy", {"colors": "#dc2626"}, warnings)
        assert found is True
        assert theme.name == "cozy"
        assert warnings == ["Ignoring invalid theme customization 'colors'"]
        assert applier.apply_theme("bg-blue-500", "cozy", {"colors": "#dc2626"}) == "bg-emerald-600"

    def test_customized_primary(self, applier):
        out = applier.apply_theme(
            "bg-blue-500", "cozy", {"colors": {"primary": {"600": "#dc2626"}}}
        )
        assert out == "bg-red-600"

    def test_customized_off_palette_colour(self, applier):
        out = applier.apply_theme(
            "bg-blue-500", "cozy", {"colors": {"primary": {"600": "#ABCDEF"}}}
        )
        assert out == "bg-[#abcdef]"

    def test_markup_structure_preserved(self, applier):
        text = '<button className="bg-blue-500 px-4" onClick={() => go("/shop")}>Go</button>'
        out = applier.apply_theme(text, "cozy")
        assert out == text.replace("bg-blue-500", "bg-emerald-600")
