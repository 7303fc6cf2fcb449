"""Unit tests for template_system.ai_client.

Tests cover: AIResponse defaults, request payload shape, successful
completions, and every failure path being returned rather than raised.
All HTTP traffic is mocked at ``httpx.AsyncClient``.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from template_system.ai_client import AIResponse, ContentModelClient
from template_system.config import AIConfig

from conftest import make_completion_response


def _mock_client(post: AsyncMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.post = post
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def client() -> ContentModelClient:
    return ContentModelClient(api_key="sk-test", base_url="https://llm.example.com/v1/", timeout=5.0)


# ---------------------------------------------------------------------------
# Models & construction
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestConstruction:
    def test_response_defaults(self):
        resp = AIResponse()
        assert resp.text == ""
        assert resp.success is True
        assert resp.error is None

    def test_trailing_slash_stripped(self, client):
        assert client.base_url == "https://llm.example.com/v1"

    def test_from_config(self):
        cfg = AIConfig(api_key="sk-cfg", model="m-1", timeout=9.0, temperature=0.2)
        c = ContentModelClient.from_config(cfg)
        assert c.api_key == "sk-cfg"
        assert c.model == "m-1"
        assert c.timeout == 9.0
        assert c.temperature == 0.2


# ---------------------------------------------------------------------------
# complete()
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestComplete:
    @pytest.mark.asyncio
    async def test_success(self, client):
        post = AsyncMock(return_value=make_completion_response("Fresh coffee daily", model="m-2"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            resp = await client.complete("Write a tagline", system="Be brief")

        assert resp.success is True
        assert resp.text == "Fresh coffee daily"
        assert resp.model == "m-2"
        assert resp.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_payload_shape(self, client):
        post = AsyncMock(return_value=make_completion_response("ok"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            await client.complete("prompt text", system="system text", model="override")

        args, kwargs = post.call_args
        assert args[0] == "/chat/completions"
        payload = kwargs["json"]
        assert payload["model"] == "override"
        assert payload["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "prompt text"},
        ]
        assert payload["temperature"] == client.temperature

    @pytest.mark.asyncio
    async def test_no_system_message_when_empty(self, client):
        post = AsyncMock(return_value=make_completion_response("ok"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            await client.complete("only user")

        messages = post.call_args.kwargs["json"]["messages"]
        assert messages == [{"role": "user", "content": "only user"}]

    @pytest.mark.asyncio
    async def test_missing_key_short_circuits(self):
        c = ContentModelClient(api_key="")
        with patch("httpx.AsyncClient") as mock_cls:
            resp = await c.complete("anything")
        assert resp.success is False
        assert resp.error == "No API key configured."
        mock_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_content_is_failure(self, client):
        post = AsyncMock(return_value=make_completion_response(""))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            resp = await client.complete("prompt")
        assert resp.success is False
        assert "no content" in resp.error

    @pytest.mark.asyncio
    async def test_no_choices_is_failure(self, client):
        response = MagicMock()
        response.json.return_value = {"choices": []}
        response.raise_for_status = MagicMock()
        with patch("httpx.AsyncClient", return_value=_mock_client(AsyncMock(return_value=response))):
            resp = await client.complete("prompt")
        assert resp.success is False


@pytest.mark.unit
class TestCompleteFailures:
    @pytest.mark.asyncio
    async def test_connect_error(self, client):
        post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            resp = await client.complete("prompt")
        assert resp.success is False
        assert "Cannot connect to content model at https://llm.example.com/v1" in resp.error

    @pytest.mark.asyncio
    async def test_timeout(self, client):
        post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            resp = await client.complete("prompt")
        assert resp.success is False
        assert "timed out after 5.0s" in resp.error

    @pytest.mark.asyncio
    async def test_http_status_error(self, client):
        request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
        error_response = httpx.Response(429, text="rate limited", request=request)
        response = MagicMock()
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("429", request=request, response=error_response)
        )
        with patch("httpx.AsyncClient", return_value=_mock_client(AsyncMock(return_value=response))):
            resp = await client.complete("prompt")
        assert resp.success is False
        assert resp.error.startswith("Content model returned HTTP 429")
        assert "rate limited" in resp.error

    @pytest.mark.asyncio
    async def test_unexpected_error(self, client):
        post = AsyncMock(side_effect=RuntimeError("boom"))
        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            resp = await client.complete("prompt")
        assert resp.success is False
        assert "boom" in resp.error
