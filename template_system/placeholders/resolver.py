"""Content resolution for individual placeholders.

Resolution is an explicit, ordered chain of steps. Every step is an async
callable that takes a :class:`ResolutionRequest` and returns a
:class:`Resolution`; the first one with ``resolved=True`` wins. The default
chain is::

    AI generation  ->  deterministic fallback

The AI step is skipped unless AI is enabled, a key is configured and the
caller has not opted out (``useAI: false``). Any AI failure, including a
timeout or a cancelled request, is just an unresolved step. The fallback
step always resolves, so :meth:`ContentResolver.resolve` is total.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from rich.console import Console

from template_system.ai_client import ContentModelClient
from template_system.config import Config
from template_system.models import Placeholder, Template, UserData
from template_system.placeholders.matcher import tokenize
from template_system.placeholders.prompts import (
    SYSTEM_PROMPT,
    PromptLibrary,
    analyze_business,
    clean_response,
    validate_response,
)
from template_system.tailwind import merge_tw
from template_system.themes.registry import Theme, ThemeRegistry, tailwind_color_name
from template_system.utils import get_nested_value, has_nested_value, stringify_value

console = Console()

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/800x600/3b82f6/ffffff?text={text}"

_HEADING_TAGS = frozenset({"h1", "h2", "h3"})


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution step."""

    value: str = ""
    resolved: bool = False
    source: str = ""


UNRESOLVED = Resolution()


@dataclass
class ResolutionRequest:
    """Everything a resolution step may look at for one placeholder."""

    placeholder: Placeholder
    user_data: UserData
    template: Template | None = None
    context: str = ""
    filled_slots: dict[str, dict[str, Any]] = field(default_factory=dict)
    theme: Theme | None = None


ResolverStep = Callable[[ResolutionRequest], Awaitable[Resolution]]


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def classify_element(placeholder: Placeholder) -> str:
    """Map the inferred tag/class hint to a styling context name."""
    tag = (placeholder.context.tag_name or "").lower()
    hint = placeholder.context.class_hint or ""
    if tag == "button":
        return "button"
    if tag in _HEADING_TAGS:
        return "heading"
    if tag == "header":
        return "header"
    if tag == "footer":
        return "footer"
    if tag == "div" and "card" in hint:
        return "card"
    return "generic"


def context_classes(element: str, theme: Theme) -> str:
    """Utility classes contributed by the element context under *theme*."""
    if element == "button":
        primary = theme.colors.primary
        return (
            f"bg-{tailwind_color_name(primary[600])} hover:bg-{tailwind_color_name(primary[700])} "
            "text-white px-4 py-2 rounded-lg font-medium transition-colors"
        )
    if element == "heading":
        return "text-3xl md:text-4xl font-semibold leading-tight"
    if element == "card":
        return "bg-white shadow-md rounded-lg p-6"
    if element == "header":
        return "bg-white border-b shadow-sm"
    if element == "footer":
        return "bg-gray-900 text-gray-200"
    return ""


def describe_context(placeholder: Placeholder) -> str:
    """Free-text description of where a placeholder sits, for prompts."""
    ctx = placeholder.context
    parts: list[str] = []
    if ctx.file:
        parts.append(f"file {ctx.file} line {placeholder.line}")
    if ctx.tag_name:
        parts.append(f"inside <{ctx.tag_name}>")
    if ctx.class_hint:
        parts.append(f"with classes '{ctx.class_hint}'")
    if placeholder.key:
        parts.append(f"key '{placeholder.key}'")
    if ctx.snippet:
        parts.append(f"preceded by: {ctx.snippet[-120:]}")
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# ContentResolver
# ---------------------------------------------------------------------------


class ContentResolver:
    """Resolves placeholders to strings through an ordered step chain.

    Usage::

        resolver = ContentResolver(config, ThemeRegistry())
        value = await resolver.resolve(placeholder, user_data, template, "hero heading")
    """

    def __init__(
        self,
        config: Config | None = None,
        registry: ThemeRegistry | None = None,
        client: ContentModelClient | None = None,
        prompts: PromptLibrary | None = None,
        steps: Sequence[ResolverStep] | None = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or ThemeRegistry()
        if client is None and self.config.ai.is_active:
            client = ContentModelClient.from_config(self.config.ai)
        self.client = client
        self.prompts = prompts or PromptLibrary()
        self.steps: tuple[ResolverStep, ...] = tuple(
            steps if steps is not None else (self.ai_step, self.fallback_step)
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(
        self,
        placeholder: Placeholder,
        user_data: UserData,
        template: Template | None = None,
        context: str = "",
        *,
        filled_slots: dict[str, dict[str, Any]] | None = None,
        theme: Theme | None = None,
    ) -> str:
        """Resolve one placeholder. Never raises for ordinary input."""
        request = ResolutionRequest(
            placeholder=placeholder,
            user_data=user_data,
            template=template,
            context=context or describe_context(placeholder),
            filled_slots=filled_slots or {},
            theme=theme or self.registry.get(user_data.theme) or self.registry.default,
        )
        return (await self.resolve_request(request)).value

    async def resolve_request(self, request: ResolutionRequest) -> Resolution:
        """Run the step chain for a prepared request."""
        for step in self.steps:
            try:
                result = await step(request)
            except Exception as exc:  # noqa: BLE001
                console.print(
                    f"  [yellow]Resolver step {getattr(step, '__name__', step)} failed for "
                    f"{request.placeholder.raw}: {exc}[/yellow]"
                )
                continue
            if result.resolved:
                return result
        return Resolution(value=self._text_chain(request), resolved=True, source="default")

    async def resolve_many(
        self,
        placeholders: Sequence[Placeholder],
        user_data: UserData,
        template: Template | None = None,
        *,
        filled_slots: dict[str, dict[str, Any]] | None = None,
        theme: Theme | None = None,
        semaphore: asyncio.Semaphore | None = None,
    ) -> list[str]:
        """Resolve *placeholders* concurrently; results keep input order.

        At most ``max_parallel_resolutions`` resolutions run at once unless a
        shared *semaphore* is supplied.
        """
        limiter = semaphore or asyncio.Semaphore(self.config.processing.max_parallel_resolutions)

        async def _resolve_one(placeholder: Placeholder) -> str:
            async with limiter:
                return await self.resolve(
                    placeholder,
                    user_data,
                    template,
                    filled_slots=filled_slots,
                    theme=theme,
                )

        return list(await asyncio.gather(*(_resolve_one(p) for p in placeholders)))

    async def render(
        self,
        text: str,
        user_data: UserData,
        template: Template | None = None,
        *,
        file: str = "",
        filled_slots: dict[str, dict[str, Any]] | None = None,
        theme: Theme | None = None,
        semaphore: asyncio.Semaphore | None = None,
    ) -> tuple[str, int]:
        """Replace every placeholder occurrence in *text* by its resolved value.

        Occurrences are substituted by position, so resolved values are never
        scanned again. Returns the rendered text and the number of
        placeholders replaced.
        """
        segments = tokenize(text, file)
        placeholders = [seg.placeholder for seg in segments if seg.placeholder is not None]
        if not placeholders:
            return text, 0

        values = iter(
            await self.resolve_many(
                placeholders,
                user_data,
                template,
                filled_slots=filled_slots,
                theme=theme,
                semaphore=semaphore,
            )
        )
        rendered = "".join(next(values) if seg.is_placeholder else seg.text for seg in segments)
        return rendered, len(placeholders)

    def ai_available(self, user_data: UserData) -> bool:
        return self.client is not None and self.config.ai.is_active and user_data.use_ai

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def ai_step(self, request: ResolutionRequest) -> Resolution:
        """Ask the content model; any failure leaves the placeholder unresolved."""
        if not self.ai_available(request.user_data):
            return UNRESOLVED

        placeholder = request.placeholder
        analysis = analyze_business(request.user_data, self.config.processing.default_brand_name)
        prompt = self.prompts.build(placeholder, analysis, request.user_data, request.context)

        try:
            response = await asyncio.wait_for(
                self.client.complete(prompt, system=SYSTEM_PROMPT),
                timeout=self.config.ai.timeout,
            )
        except asyncio.TimeoutError:
            console.print(f"  [dim]AI timed out for {placeholder.raw}, using fallback[/dim]")
            return UNRESOLVED
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            console.print(f"  [dim]AI request cancelled for {placeholder.raw}, using fallback[/dim]")
            return UNRESOLVED

        if not response.success:
            console.print(f"  [dim]AI unavailable for {placeholder.raw}: {response.error}[/dim]")
            return UNRESOLVED

        value = clean_response(response.text)
        if not validate_response(placeholder.type, value):
            console.print(f"  [dim]AI response rejected for {placeholder.raw}[/dim]")
            return UNRESOLVED
        if placeholder.type == "tw":
            value = merge_tw(value)
        return Resolution(value=value, resolved=True, source="ai")

    async def fallback_step(self, request: ResolutionRequest) -> Resolution:
        """Deterministic per-type resolution. Always resolves."""
        placeholder_type = request.placeholder.type
        if placeholder_type == "tw":
            value = self._tailwind_fallback(request)
        elif placeholder_type == "img":
            value = self._image_fallback(request)
        elif placeholder_type == "data":
            value = self._lookup(request.user_data.dynamic_data, request)
        elif placeholder_type == "slot":
            value = self._slot_lookup(request)
        else:
            value = self._text_chain(request)
        return Resolution(value=value, resolved=True, source="fallback")

    # ------------------------------------------------------------------
    # Fallback helpers
    # ------------------------------------------------------------------

    def _tailwind_fallback(self, request: ResolutionRequest) -> str:
        theme = request.theme or self.registry.default
        element = classify_element(request.placeholder)
        return merge_tw(theme.base_classes, context_classes(element, theme))

    def _image_fallback(self, request: ResolutionRequest) -> str:
        user_data = request.user_data
        for candidate in (user_data.images.get("url"), user_data.ai_content.get("imageUrl")):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return PLACEHOLDER_IMAGE_URL.format(text=quote(self._brand(user_data), safe=""))

    def _slot_lookup(self, request: ResolutionRequest) -> str:
        key = request.placeholder.key or ""
        if has_nested_value(request.filled_slots, key):
            return stringify_value(get_nested_value(request.filled_slots, key))
        return self._lookup(request.user_data.slots, request)

    def _lookup(self, source: dict[str, Any], request: ResolutionRequest) -> str:
        key = request.placeholder.key or ""
        if key and has_nested_value(source, key):
            return stringify_value(get_nested_value(source, key))
        return self._text_chain(request)

    def _text_chain(self, request: ResolutionRequest) -> str:
        user_data = request.user_data
        for candidate in (user_data.ai_content.get("text"), user_data.content.get("text")):
            if candidate not in (None, ""):
                return stringify_value(candidate)
        return self._default_text(request)

    def _default_text(self, request: ResolutionRequest) -> str:
        brand = self._brand(request.user_data)
        element = classify_element(request.placeholder)
        if element == "heading":
            return f"Welcome to {brand}"
        if element == "button":
            return f"Shop {brand}"
        return f"{brand} - quality you can trust"

    def _brand(self, user_data: UserData) -> str:
        return user_data.brand_name or self.config.processing.default_brand_name
