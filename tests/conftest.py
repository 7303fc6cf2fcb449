"""Shared pytest fixtures for the template system test suite.

Provides reusable fixtures for:
- Configuration with AI disabled and console progress silenced
- A small storefront template (JSON-shaped) and matching user data
- Processed files for validator tests
- A mocked chat-completions endpoint
"""

from __future__ import annotations

import textwrap
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from template_system.config import AIConfig, Config, ProcessingConfig
from template_system.models import ProcessedFile, Template, UserData
from template_system.themes.registry import ThemeRegistry
from template_system.utils import byte_size, compute_checksum

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> Config:
    """Deterministic configuration: AI off, no per-file progress."""
    return Config(
        ai=AIConfig(enabled=False),
        processing=ProcessingConfig(verbose=False),
    )


@pytest.fixture
def ai_config() -> Config:
    """Configuration with AI switched on and a fake key."""
    return Config(
        ai=AIConfig(enabled=True, api_key="sk-test", timeout=5.0),
        processing=ProcessingConfig(verbose=False),
    )


@pytest.fixture
def registry() -> ThemeRegistry:
    return ThemeRegistry()


# ---------------------------------------------------------------------------
# Sample template
# ---------------------------------------------------------------------------

HOME_TSX = textwrap.dedent("""\
    import React from 'react';

    export default function Home() {
      return (
        <main className="<tw/>">
          <h1 className="<tw/>">{{ home.heroTitle }}</h1>
          <p><text/></p>
          <img src="<img/>" alt="{{ home.heroTitle }}" />
          <span><data key="store.hours"/></span>
          <button className="<tw/>" aria-label="Start shopping">{{ home.ctaLabel }}</button>
        </main>
      );
    }
""")

HEADER_TSX = textwrap.dedent("""\
    export function Header() {
      return (
        <header className="<tw/>">
          <span className="font-[Inter] bg-blue-600 rounded-xl shadow-lg">{{ header.brandName }}</span>
        </header>
      );
    }
""")

MAIN_CSS = "body { margin: 0; }\n"


@pytest.fixture
def sample_template_dict() -> dict[str, Any]:
    """A storefront template in its JSON wire shape (camelCase keys)."""
    return {
        "key": "coffee-shop",
        "label": "Coffee Shop",
        "category": "food",
        "meta": {
            "description": "Single-page storefront for a coffee shop",
            "engine": "react",
            "status": "published",
            "author": "templates-team",
        },
        "tags": ["food", "storefront"],
        "initialVersion": {
            "version": 1,
            "semver": "1.2.0",
            "status": "published",
            "sourceFiles": [
                {"path": "src/pages/Home.tsx", "type": "code", "content": HOME_TSX},
                {"path": "src/components/Header.tsx", "type": "code", "content": HEADER_TSX},
                {"path": "src/styles/main.css", "type": "style", "content": MAIN_CSS},
            ],
            "slots": {
                "home": {
                    "type": "object",
                    "fields": [
                        {
                            "key": "heroTitle",
                            "type": "text",
                            "required": True,
                            "validators": [{"kind": "maxLength", "value": 80}],
                        },
                        {"key": "ctaLabel", "type": "text"},
                        {"key": "heroImage", "type": "image"},
                    ],
                },
                "header": {
                    "type": "object",
                    "fields": [{"key": "brandName", "type": "text", "required": True}],
                },
            },
            "constraints": {
                "a11y": {"contrast": "AA", "minFontSizePx": 14, "ariaRequired": True},
                "content": {"seo": {"titleMaxLen": 60, "descMaxLen": 160, "metaTags": []}},
                "performance": {"maxImageKb": 200, "maxCriticalCssKb": 50},
                "security": {"disallowInlineScript": True},
                "code": {"tsc": True},
            },
        },
    }


@pytest.fixture
def sample_template(sample_template_dict: dict[str, Any]) -> Template:
    return Template.model_validate(sample_template_dict)


@pytest.fixture
def sample_user_data_dict() -> dict[str, Any]:
    return {
        "brandName": "Siam Coffee",
        "theme": "cozy",
        "content": {"text": "Freshly roasted beans every morning"},
        "slots": {"header": {"brandName": "Siam Coffee"}},
        "dynamicData": {"store": {"hours": "7:00-18:00"}},
    }


@pytest.fixture
def sample_user_data(sample_user_data_dict: dict[str, Any]) -> UserData:
    return UserData.model_validate(sample_user_data_dict)


# ---------------------------------------------------------------------------
# Processed files
# ---------------------------------------------------------------------------


@pytest.fixture
def make_file():
    """Factory for ``ProcessedFile`` objects with size and checksum filled in.

    Usage:
        def test_rule(make_file):
            f = make_file("src/App.tsx", "<div/>")
    """

    def factory(path: str, content: str, type: str = "code", size: int | None = None) -> ProcessedFile:
        return ProcessedFile(
            path=path,
            content=content,
            type=type,
            size=byte_size(content) if size is None else size,
            checksum=compute_checksum(content),
        )

    return factory


# ---------------------------------------------------------------------------
# Mock content model
# ---------------------------------------------------------------------------


def make_completion_response(content: str, model: str = "gpt-4o-mini") -> MagicMock:
    """Build a mocked httpx response for ``/chat/completions``."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "id": "chatcmpl-test",
        "model": model,
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }
    mock_response.raise_for_status = MagicMock()
    return mock_response


@pytest.fixture
def mock_completion():
    """Factory that patches httpx.AsyncClient to answer with *content*.

    Usage:
        def test_ai(mock_completion):
            with mock_completion("Hello"):
                ...
    """

    def factory(content: str):
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(return_value=make_completion_response(content))
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        return patch("httpx.AsyncClient", return_value=mock_client)

    return factory
