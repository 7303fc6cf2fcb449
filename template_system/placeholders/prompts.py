"""Prompt construction and response parsing for AI placeholder content.

Business analysis classifies the brand name by keyword containment (Thai and
English lists) into a business type, which fixes the tone and target
audience embedded in every prompt. Each placeholder type has its own
prompt; responses are cleaned (markdown fences, wrapping quotes) and then
checked against a strict per-type shape before they are accepted.
"""

from __future__ import annotations

import json
import re
import textwrap
from typing import Any

from pydantic import BaseModel, Field

from template_system.models import Placeholder, UserData
from template_system.tailwind import is_valid_class_list

# ---------------------------------------------------------------------------
# Business analysis
# ---------------------------------------------------------------------------

FOOD_KEYWORDS = (
    "อาหาร", "ร้าน", "ครัว", "ปิ้ง", "ย่าง", "หมู", "ไก่", "ปลา", "กุ้ง", "ข้าว",
    "ก๋วยเตี๋ยว", "ส้มตำ", "ลาบ", "สลัด", "กาแฟ", "ชา", "น้ำ", "ขนม", "เค้ก", "ไอศครีม",
    "food", "kitchen", "cafe", "coffee", "bakery", "restaurant",
)
FASHION_KEYWORDS = (
    "แฟชั่น", "เสื้อ", "ผ้า", "ชุด", "กางเกง", "กระโปรง", "รองเท้า", "กระเป๋า",
    "เครื่องประดับ", "สไตล์", "fashion", "style", "boutique",
)
TECH_KEYWORDS = (
    "คอมพิวเตอร์", "มือถือ", "โทรศัพท์", "โน๊ตบุ๊ค", "แท็บเล็ต", "เกม", "เทคโนโลยี",
    "อิเล็กทรอนิกส์", "gaming", "tech", "digital", "software",
)
HEALTH_KEYWORDS = (
    "สุขภาพ", "ยา", "วิตามิน", "อาหารเสริม", "เครื่องสำอาง", "สปา", "ฟิตเนส", "ยิม",
    "คลินิก", "โรงพยาบาล", "health", "beauty", "clinic", "fitness", "spa",
)

# Checked in order; the first list with a hit decides.
_BUSINESS_RULES: tuple[tuple[str, tuple[str, ...], str, str], ...] = (
    ("food", FOOD_KEYWORDS, "warm", "food-lovers"),
    ("fashion", FASHION_KEYWORDS, "trendy", "fashion-conscious"),
    ("technology", TECH_KEYWORDS, "modern", "tech-savvy"),
    ("health", HEALTH_KEYWORDS, "trustworthy", "health-conscious"),
)


class BusinessAnalysis(BaseModel):
    """What the brand name tells us about the business."""

    brand_name: str
    business_type: str = Field(default="general")
    tone: str = Field(default="professional")
    target_audience: str = Field(default="general")
    theme: str = Field(default="modern")


def analyze_business(user_data: UserData, default_brand: str = "Online Store") -> BusinessAnalysis:
    """Classify ``user_data.brand_name`` into a business type, tone and audience."""
    brand = user_data.brand_name or default_brand
    lowered = brand.lower()
    for business_type, keywords, tone, audience in _BUSINESS_RULES:
        if any(keyword in lowered for keyword in keywords):
            return BusinessAnalysis(
                brand_name=brand,
                business_type=business_type,
                tone=tone,
                target_audience=audience,
                theme=user_data.theme or "modern",
            )
    return BusinessAnalysis(brand_name=brand, theme=user_data.theme or "modern")


# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = textwrap.dedent("""\
    You write website content for small and medium businesses. Answer in
    correct, natural English suited to the business. Reply with the requested
    value only: no explanation, no markdown, no surrounding quotes.
""")

TAILWIND_REFERENCE = textwrap.dedent("""\
    ## Colors
    - Primary: bg-blue-500, bg-blue-600, bg-blue-700, text-blue-500, text-blue-600, text-blue-700
    - Secondary: bg-gray-500, bg-gray-600, bg-gray-700, text-gray-500, text-gray-600, text-gray-700
    - Success: bg-green-500, bg-green-600, text-green-600
    - Warning: bg-yellow-500, bg-yellow-600, text-yellow-600
    - Danger: bg-red-500, bg-red-600, text-red-600
    - Accent: bg-orange-500, bg-orange-600, text-orange-600

    ## Sizing
    - Padding: p-2, p-4, p-6, p-8, px-4, py-2
    - Margin: m-2, m-4, mx-auto, mt-4, mb-4
    - Width: w-full, w-auto, max-w-md, max-w-4xl, max-w-7xl
    - Height: h-auto, h-full, h-screen

    ## Typography
    - Font Size: text-xs, text-sm, text-base, text-lg, text-xl, text-2xl, text-3xl, text-4xl
    - Font Weight: font-light, font-normal, font-medium, font-semibold, font-bold
    - Text Align: text-left, text-center, text-right
    - Line Height: leading-tight, leading-normal, leading-relaxed

    ## Layout
    - Display: block, inline-block, flex, inline-flex, grid, hidden
    - Flexbox: flex-row, flex-col, justify-between, justify-center, items-center
    - Grid: grid-cols-1, grid-cols-2, grid-cols-3, gap-4, gap-6

    ## Border & Effects
    - Radius: rounded, rounded-md, rounded-lg, rounded-xl, rounded-2xl, rounded-full
    - Shadow: shadow-sm, shadow, shadow-md, shadow-lg, shadow-xl
    - States: hover:bg-blue-600, hover:shadow-lg, focus:ring-2, focus:outline-none
    - Responsive: sm:, md:, lg:, xl:

    ## Common Patterns
    - Button Primary: bg-blue-500 hover:bg-blue-600 text-white font-medium py-2 px-4 rounded-lg transition-colors duration-200
    - Button Secondary: bg-gray-200 hover:bg-gray-300 text-gray-800 font-medium py-2 px-4 rounded-lg transition-colors duration-200
    - Card: bg-white shadow-md rounded-lg p-6 border border-gray-200 hover:shadow-lg transition-shadow duration-200
    - Input: border border-gray-300 rounded-md px-3 py-2 focus:outline-none focus:ring-2 focus:ring-blue-500
    - Navigation: bg-white shadow-sm border-b border-gray-200 px-4 py-2
    - Footer: bg-gray-800 text-gray-200 py-8 px-4
    - Container: max-w-7xl mx-auto px-4 sm:px-6 lg:px-8
""")

_BUSINESS_BLOCK = textwrap.dedent("""\
    Business profile:
    - Brand: {brand}
    - Business type: {business_type}
    - Tone: {tone}
    - Target audience: {audience}
    - Context: {context}
""")

_TEXT_PROMPT = textwrap.dedent("""\
    Write a piece of website copy for {brand}.

    {business}
    Additional content: {extra}

    The copy must suit a {business_type} business, use a {tone} tone, be easy
    to read and highlight the value of the product or service.

    Reply with one short line of at most 100 characters.
""")

_IMAGE_PROMPT = textwrap.dedent("""\
    Suggest an image URL for the {brand} website.

    {business}
    Known images: {extra}

    The image must suit a {business_type} business and the brand {brand}.
    Use a placeholder image service with a sensible size (800x600 or 400x300).

    Reply with the URL only.
""")

_DATA_PROMPT = textwrap.dedent("""\
    Produce the value for the data field "{key}" of the {brand} website.

    {business}
    Additional content: {extra}

    The value must suit a {business_type} business and be meaningful for "{key}".

    Reply with one short line of at most 50 characters.
""")

_SLOT_PROMPT = textwrap.dedent("""\
    Produce the content for slot "{key}" of the {brand} website.

    {business}
    Current slot data: {extra}

    The content must suit a {business_type} business and fit slot "{key}".

    Reply with one short line of at most 100 characters.
""")

_TAILWIND_PROMPT = textwrap.dedent("""\
    Choose Tailwind CSS classes for an element of the {brand} website.

    {business}
    Theme: {theme}
    Theme customizations: {extra}

    {reference}

    The classes must suit a {business_type} business and the "{theme}" theme,
    be valid Tailwind CSS utilities and follow the common pattern that best
    matches the context.

    Reply with the space-separated class list only.
""")

_GENERIC_PROMPT = textwrap.dedent("""\
    Produce content for a "{placeholder_type}" placeholder on the {brand} website.

    {business}
    Additional content: {extra}

    Reply with one short line of at most 100 characters.
""")


class PromptLibrary:
    """Builds per-type prompts.

    Each instance owns its Tailwind reference text so callers can extend it
    without affecting other pipelines.
    """

    def __init__(self, tailwind_reference: str = TAILWIND_REFERENCE) -> None:
        self._tailwind_reference = tailwind_reference

    @property
    def tailwind_reference(self) -> str:
        return self._tailwind_reference

    def update_reference(self, reference: str) -> None:
        """Replace the Tailwind reference embedded in ``<tw/>`` prompts."""
        self._tailwind_reference = reference

    def add_common_pattern(self, name: str, classes: str) -> None:
        """Append a named class pattern to the Tailwind reference."""
        self._tailwind_reference = f"{self._tailwind_reference.rstrip()}\n- {name}: {classes}\n"

    def build(
        self,
        placeholder: Placeholder,
        analysis: BusinessAnalysis,
        user_data: UserData,
        context: str = "",
    ) -> str:
        """Return the prompt for one placeholder."""
        business = _BUSINESS_BLOCK.format(
            brand=analysis.brand_name,
            business_type=analysis.business_type,
            tone=analysis.tone,
            audience=analysis.target_audience,
            context=context or "general",
        )
        common: dict[str, Any] = {
            "brand": analysis.brand_name,
            "business": business,
            "business_type": analysis.business_type,
            "tone": analysis.tone,
            "key": placeholder.key or "",
        }

        if placeholder.type == "text":
            return _TEXT_PROMPT.format(extra=_as_json(user_data.content), **common)
        if placeholder.type == "img":
            return _IMAGE_PROMPT.format(extra=_as_json(user_data.images), **common)
        if placeholder.type == "data":
            return _DATA_PROMPT.format(extra=_as_json(user_data.content), **common)
        if placeholder.type == "slot":
            return _SLOT_PROMPT.format(extra=_as_json(user_data.slots), **common)
        if placeholder.type == "tw":
            return _TAILWIND_PROMPT.format(
                theme=analysis.theme,
                extra=_as_json(user_data.customizations),
                reference=self._tailwind_reference,
                **common,
            )
        return _GENERIC_PROMPT.format(
            placeholder_type=placeholder.type,
            extra=_as_json(user_data.content),
            **common,
        )


def _as_json(value: Any) -> str:
    return json.dumps(value or {}, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------

MAX_TEXT_CHARS = 300

_FENCE_OPEN_RE = re.compile(r"^```[\w-]*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")
_URL_RE = re.compile(r"^https?://[^\s\"'<>]+$")


def clean_response(raw: str) -> str:
    """Strip markdown code fences and one pair of wrapping quotes."""
    cleaned = (raw or "").strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", cleaned)).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'`":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def validate_response(placeholder_type: str, value: str) -> bool:
    """Check a cleaned response against the shape its placeholder type needs.

    ``tw`` must be a list of well-formed utility classes, ``img`` a single
    http(s) URL, and every other type one non-empty line of plain text
    without markup or placeholder syntax.
    """
    if not value:
        return False
    if placeholder_type == "tw":
        return is_valid_class_list(value)
    if placeholder_type == "img":
        return bool(_URL_RE.match(value))
    if "\n" in value or len(value) > MAX_TEXT_CHARS:
        return False
    return "<" not in value and "{{" not in value and "}}" not in value
