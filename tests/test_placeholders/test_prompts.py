"""Unit tests for template_system.placeholders.prompts.

Tests cover: keyword-based business analysis, per-type prompt building,
response cleaning and strict response validation.
"""

from __future__ import annotations

import pytest

from template_system.models import Placeholder, UserData
from template_system.placeholders.prompts import (
    MAX_TEXT_CHARS,
    PromptLibrary,
    analyze_business,
    clean_response,
    validate_response,
)

# ---------------------------------------------------------------------------
# Business analysis
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestAnalyzeBusiness:
    @pytest.mark.parametrize(
        "brand, business_type, tone",
        [
            ("ร้านกาแฟบ้านสวน", "food", "warm"),
            ("Siam Coffee", "food", "warm"),
            ("Bangkok Boutique", "fashion", "trendy"),
            ("เกมเมอร์ช็อป", "technology", "modern"),
            ("Lotus Spa", "health", "trustworthy"),
            ("Acme Holdings", "general", "professional"),
        ],
    )
    def test_classification(self, brand, business_type, tone):
        analysis = analyze_business(UserData(brand_name=brand))
        assert analysis.business_type == business_type
        assert analysis.tone == tone
        assert analysis.brand_name == brand

    def test_first_matching_list_wins(self):
        # "cafe" is a food keyword, "style" a fashion one.
        assert analyze_business(UserData(brand_name="Style Cafe")).business_type == "food"

    def test_default_brand(self):
        analysis = analyze_business(UserData(), default_brand="Online Store")
        assert analysis.brand_name == "Online Store"
        assert analysis.business_type == "general"

    def test_theme_carried(self):
        assert analyze_business(UserData(brand_name="x", theme="cozy")).theme == "cozy"


# ---------------------------------------------------------------------------
# Prompt building
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestPromptLibrary:
    @pytest.fixture
    def library(self) -> PromptLibrary:
        return PromptLibrary()

    @pytest.fixture
    def user_data(self) -> UserData:
        return UserData(
            brand_name="Siam Coffee",
            theme="cozy",
            content={"text": "Single-origin beans"},
            images={"url": "https://cdn.example.com/hero.jpg"},
            slots={"home": {"heroTitle": "Hello"}},
            customizations={"colors": {"primary": {"600": "#123456"}}},
        )

    def _analysis(self, user_data):
        return analyze_business(user_data)

    def test_text_prompt(self, library, user_data):
        prompt = library.build(Placeholder(type="text"), self._analysis(user_data), user_data, "hero")
        assert "Siam Coffee" in prompt
        assert "Single-origin beans" in prompt
        assert "food" in prompt
        assert "Context: hero" in prompt

    def test_image_prompt_includes_known_images(self, library, user_data):
        prompt = library.build(Placeholder(type="img"), self._analysis(user_data), user_data)
        assert "https://cdn.example.com/hero.jpg" in prompt
        assert "URL only" in prompt

    def test_data_prompt_names_key(self, library, user_data):
        placeholder = Placeholder(type="data", key="store.hours")
        prompt = library.build(placeholder, self._analysis(user_data), user_data)
        assert '"store.hours"' in prompt

    def test_slot_prompt_includes_slot_data(self, library, user_data):
        placeholder = Placeholder(type="slot", key="home.heroTitle")
        prompt = library.build(placeholder, self._analysis(user_data), user_data)
        assert '"home.heroTitle"' in prompt
        assert '"heroTitle": "Hello"' in prompt

    def test_tailwind_prompt_includes_reference(self, library, user_data):
        prompt = library.build(Placeholder(type="tw"), self._analysis(user_data), user_data)
        assert "Button Primary" in prompt
        assert '"cozy"' in prompt
        assert "#123456" in prompt

    def test_context_defaults_to_general(self, library, user_data):
        prompt = library.build(Placeholder(type="text"), self._analysis(user_data), user_data)
        assert "Context: general" in prompt

    def test_add_common_pattern(self, library, user_data):
        library.add_common_pattern("Badge", "bg-orange-500 text-white rounded-full px-2")
        prompt = library.build(Placeholder(type="tw"), self._analysis(user_data), user_data)
        assert "- Badge: bg-orange-500 text-white rounded-full px-2" in prompt

    def test_libraries_are_independent(self, library):
        library.update_reference("custom reference")
        assert library.tailwind_reference == "custom reference"
        assert "Button Primary" in PromptLibrary().tailwind_reference


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCleanResponse:
    def test_strips_code_fence(self):
        assert clean_response("```html\nbg-white p-4\n```") == "bg-white p-4"

    def test_strips_wrapping_quotes(self):
        assert clean_response('  "Fresh every morning"  ') == "Fresh every morning"
        assert clean_response("'x'") == "x"

    def test_leaves_inner_quotes(self):
        assert clean_response('The "best" beans') == 'The "best" beans'

    def test_none_and_empty(self):
        assert clean_response("") == ""
        assert clean_response(None) == ""


@pytest.mark.unit
class TestValidateResponse:
    def test_tailwind(self):
        assert validate_response("tw", "bg-white shadow-md rounded-lg") is True
        assert validate_response("tw", "Try these: bg-white") is False
        assert validate_response("tw", "bg-white <div>") is False

    def test_image(self):
        assert validate_response("img", "https://cdn.example.com/a.png") is True
        assert validate_response("img", "a nice photo of coffee") is False
        assert validate_response("img", "ftp://example.com/a.png") is False

    def test_text(self):
        assert validate_response("text", "Freshly roasted, every morning") is True
        assert validate_response("text", "two\nlines") is False
        assert validate_response("text", "<b>bold</b>") is False
        assert validate_response("slot", "{{ home.heroTitle }}") is False
        assert validate_response("data", "x" * (MAX_TEXT_CHARS + 1)) is False

    def test_empty(self):
        assert validate_response("text", "") is False
