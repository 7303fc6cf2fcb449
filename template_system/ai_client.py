"""Async client for an OpenAI-compatible chat-completions endpoint.

Wraps ``POST {base_url}/chat/completions`` with timeout handling and a
structured response. The client never raises: every failure comes back as
an :class:`AIResponse` with ``success=False`` and an ``error`` message, so
the content resolver can fall back without exception-driven control flow.

Typical usage::

    client = ContentModelClient(api_key="sk-...", model="gpt-4o-mini")
    resp = await client.complete("Write a tagline for a coffee shop")
    if resp.success:
        print(resp.text)
"""

from __future__ import annotations

import time

import httpx
from pydantic import BaseModel, Field

from template_system.config import AIConfig


class AIResponse(BaseModel):
    """Structured response from a completion call."""

    text: str = Field(default="", description="Generated text")
    model: str = Field(default="", description="Model that produced the response")
    duration_ms: float = Field(default=0.0, description="Client-side round-trip time in ms")
    success: bool = Field(default=True, description="Whether the request succeeded")
    error: str | None = Field(default=None, description="Error message on failure")


class ContentModelClient:
    """Async client for OpenAI-style ``/chat/completions``.

    Uses ``httpx.AsyncClient`` for non-blocking HTTP with bearer-token auth.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        temperature: float = 0.7,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    @classmethod
    def from_config(cls, config: AIConfig) -> "ContentModelClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            timeout=config.timeout,
            temperature=config.temperature,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL, auth and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Pull ``choices[0].message.content`` out of a completion response."""
        choices = data.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def complete(self, prompt: str, system: str = "", model: str | None = None) -> AIResponse:
        """Generate a completion for *prompt*.

        Args:
            prompt: The user message.
            system: Optional system message.
            model: Overrides the client's default model.

        Returns:
            An ``AIResponse`` with the generated text or an error.
        """
        model = model or self.model
        if not self.api_key:
            return AIResponse(model=model, success=False, error="No API key configured.")

        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        payload: dict = {
            "model": model,
            "messages": messages,
            "temperature": self.temperature,
        }

        started = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
                text = self._extract_text(data)
                if not text:
                    return AIResponse(
                        model=data.get("model", model),
                        success=False,
                        error="Completion response contained no content.",
                    )
                return AIResponse(
                    text=text,
                    model=data.get("model", model),
                    duration_ms=(time.monotonic() - started) * 1000.0,
                    success=True,
                )
        except httpx.ConnectError:
            return AIResponse(
                model=model,
                success=False,
                error=f"Cannot connect to content model at {self.base_url}.",
            )
        except httpx.TimeoutException:
            return AIResponse(
                model=model,
                success=False,
                error=f"Request to content model timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return AIResponse(
                model=model,
                success=False,
                error=f"Content model returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
            )
        except Exception as exc:  # noqa: BLE001
            return AIResponse(
                model=model,
                success=False,
                error=f"Unexpected error during completion: {exc}",
            )
