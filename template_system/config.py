"""Template system configuration.

Centralised, typed configuration for the processing pipeline. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class AIConfig(BaseModel):
    """Configuration for the optional content-generation model.

    AI resolution only runs when ``enabled`` is set *and* an ``api_key`` is
    present; otherwise every placeholder goes straight to the deterministic
    fallback chain.
    """

    enabled: bool = Field(default=False)
    api_key: str = Field(default="")
    base_url: str = Field(default="https://api.openai.com/v1")
    model: str = Field(default="gpt-4o-mini")
    timeout: float = Field(default=20.0, gt=0, description="Per-request timeout in seconds")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    @property
    def is_active(self) -> bool:
        """``True`` when AI calls should actually be attempted."""
        return self.enabled and bool(self.api_key)


class ProcessingConfig(BaseModel):
    """Tuning knobs for template processing."""

    default_brand_name: str = Field(default="Online Store")
    default_theme: str = Field(default="modern")
    max_parallel_resolutions: int = Field(
        default=8, ge=1, description="Maximum concurrent placeholder resolutions"
    )
    max_parallel_files: int = Field(
        default=4, ge=1, description="Maximum source files processed concurrently"
    )
    verbose: bool = Field(default=True, description="Print per-file progress to the console")


class Config(BaseModel):
    """Global template system configuration.

    Instances are typically created once by the CLI entry point (or by the
    embedding application) and handed to ``TemplateProcessor``.
    """

    ai: AIConfig = Field(default_factory=AIConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            TEMPLATE_AI_ENABLED, TEMPLATE_AI_API_KEY, TEMPLATE_AI_BASE_URL,
            TEMPLATE_AI_MODEL, TEMPLATE_AI_TIMEOUT,
            TEMPLATE_DEFAULT_BRAND, TEMPLATE_DEFAULT_THEME,
            TEMPLATE_MAX_PARALLEL_RESOLUTIONS, TEMPLATE_MAX_PARALLEL_FILES.
        """
        ai_kwargs: dict[str, Any] = {}
        if os.environ.get("TEMPLATE_AI_API_KEY"):
            ai_kwargs["api_key"] = os.environ["TEMPLATE_AI_API_KEY"]
            ai_kwargs["enabled"] = True
        if os.environ.get("TEMPLATE_AI_ENABLED"):
            ai_kwargs["enabled"] = os.environ["TEMPLATE_AI_ENABLED"].strip().lower() in (
                "1", "true", "yes", "on",
            )
        if os.environ.get("TEMPLATE_AI_BASE_URL"):
            ai_kwargs["base_url"] = os.environ["TEMPLATE_AI_BASE_URL"]
        if os.environ.get("TEMPLATE_AI_MODEL"):
            ai_kwargs["model"] = os.environ["TEMPLATE_AI_MODEL"]
        if os.environ.get("TEMPLATE_AI_TIMEOUT"):
            ai_kwargs["timeout"] = float(os.environ["TEMPLATE_AI_TIMEOUT"])

        processing_kwargs: dict[str, Any] = {}
        if os.environ.get("TEMPLATE_DEFAULT_BRAND"):
            processing_kwargs["default_brand_name"] = os.environ["TEMPLATE_DEFAULT_BRAND"]
        if os.environ.get("TEMPLATE_DEFAULT_THEME"):
            processing_kwargs["default_theme"] = os.environ["TEMPLATE_DEFAULT_THEME"]
        if os.environ.get("TEMPLATE_MAX_PARALLEL_RESOLUTIONS"):
            processing_kwargs["max_parallel_resolutions"] = int(
                os.environ["TEMPLATE_MAX_PARALLEL_RESOLUTIONS"]
            )
        if os.environ.get("TEMPLATE_MAX_PARALLEL_FILES"):
            processing_kwargs["max_parallel_files"] = int(os.environ["TEMPLATE_MAX_PARALLEL_FILES"])

        return cls(
            ai=AIConfig(**ai_kwargs),
            processing=ProcessingConfig(**processing_kwargs),
        )
