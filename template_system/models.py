"""Pydantic data models shared across the template system.

The JSON contract at the library boundary uses camelCase keys
(``brandName``, ``initialVersion``, ``isValid`` ...). Every model accepts
both the camelCase alias and the snake_case field name, and
``model_dump(by_alias=True)`` reproduces the camelCase shape.

Template-side models are frozen: the pipeline never mutates its input.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PlaceholderType = Literal["tw", "text", "img", "data", "slot"]
FieldType = Literal[
    "text", "number", "boolean", "image", "url", "email", "richtext", "list", "object"
]
Severity = Literal["error", "warning", "info"]

PLACEHOLDER_TYPES: tuple[str, ...] = ("tw", "text", "img", "data", "slot")


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant used for template input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Template input
# ---------------------------------------------------------------------------


class TemplateMeta(FrozenCamelModel):
    description: str = Field(default="")
    engine: str = Field(default="")
    status: Literal["published", "draft", "archived"] = Field(default="draft")
    author: str = Field(default="")
    versioning_policy: Literal["semver", "numeric"] | None = Field(default=None)
    preview_screenshot: str | None = Field(default=None)


class SourceFile(FrozenCamelModel):
    """One file of a template, possibly containing placeholder markers."""

    path: str = Field(..., min_length=1)
    type: Literal["code", "config", "asset", "style"] = Field(default="code")
    encoding: Literal["utf8", "base64"] = Field(default="utf8")
    content: str = Field(default="")


class ValidatorConfig(FrozenCamelModel):
    """A single declarative field validator (``{"kind": "maxLength", "value": 60}``)."""

    kind: Literal["maxLength", "minLength", "maxItems", "minItems", "pattern", "range"]
    value: Any = None


class FieldConfig(FrozenCamelModel):
    """Typed field declaration inside a slot."""

    key: str = Field(..., min_length=1)
    type: FieldType = Field(default="text")
    required: bool = Field(default=False)
    default: Any = Field(default=None)
    validators: list[ValidatorConfig] = Field(default_factory=list)
    shape: dict[str, FieldConfig] | None = Field(
        default=None, description="Nested field declarations for object fields"
    )
    item_shape: FieldConfig | None = Field(
        default=None, description="Declaration every item of a list field must satisfy"
    )


class SlotConfig(FrozenCamelModel):
    """A named structured-data region of a template."""

    type: Literal["object", "list", "text", "image"] = Field(default="object")
    component: str | None = Field(default=None)
    fields: list[FieldConfig] = Field(default_factory=list)


class AccessibilityConstraints(FrozenCamelModel):
    contrast: Literal["AA", "AAA"] = Field(default="AA")
    min_font_size_px: int = Field(default=12, ge=0)
    aria_required: bool = Field(default=False)
    keyboard_navigable: bool = Field(default=False)


class SeoConstraints(FrozenCamelModel):
    title_max_len: int = Field(default=60, ge=0)
    desc_max_len: int = Field(default=160, ge=0)
    require_h1: bool = Field(default=False)
    meta_tags: list[str] = Field(default_factory=list)


class ContentConstraints(FrozenCamelModel):
    seo: SeoConstraints = Field(default_factory=SeoConstraints)


class AssetConstraint(FrozenCamelModel):
    min_width: int | None = Field(default=None)
    aspect_ratio: str | None = Field(default=None)


class PerformanceConstraints(FrozenCamelModel):
    max_image_kb: int = Field(default=200, ge=0)
    max_critical_css_kb: int = Field(default=50, ge=0)


class SecurityConstraints(FrozenCamelModel):
    disallow_inline_script: bool = Field(default=False)


class CodeConstraints(FrozenCamelModel):
    tsc: bool = Field(default=False)


class TemplateConstraints(FrozenCamelModel):
    """Quality constraints consulted by the validator.

    A missing block disables the rule that reads it; the placeholder
    completeness rule always runs.
    """

    a11y: AccessibilityConstraints | None = Field(default=None)
    content: ContentConstraints | None = Field(default=None)
    assets: dict[str, AssetConstraint] | None = Field(default=None)
    performance: PerformanceConstraints | None = Field(default=None)
    security: SecurityConstraints | None = Field(default=None)
    code: CodeConstraints | None = Field(default=None)


class TemplateVersion(FrozenCamelModel):
    version: int = Field(default=1, ge=1)
    semver: str = Field(default="1.0.0")
    status: Literal["published", "draft"] = Field(default="draft")
    source_files: list[SourceFile] = Field(default_factory=list)
    slots: dict[str, SlotConfig] = Field(default_factory=dict)
    constraints: TemplateConstraints = Field(default_factory=TemplateConstraints)


class Template(FrozenCamelModel):
    """A parameterised project template."""

    key: str = Field(..., min_length=1)
    label: str = Field(default="")
    category: str = Field(default="")
    meta: TemplateMeta = Field(default_factory=TemplateMeta)
    tags: list[str] = Field(default_factory=list)
    initial_version: TemplateVersion


# ---------------------------------------------------------------------------
# Caller data
# ---------------------------------------------------------------------------


class UserData(CamelModel):
    """Business data supplied by the caller. Every field is optional."""

    brand_name: str | None = Field(default=None)
    theme: str | None = Field(default=None)
    content: dict[str, Any] = Field(default_factory=dict)
    images: dict[str, Any] = Field(default_factory=dict)
    slots: dict[str, Any] = Field(default_factory=dict)
    customizations: dict[str, Any] = Field(default_factory=dict)
    dynamic_data: dict[str, Any] = Field(default_factory=dict)
    ai_content: dict[str, Any] = Field(default_factory=dict)
    use_ai: bool = Field(default=True, alias="useAI")


# ---------------------------------------------------------------------------
# Placeholders (transient)
# ---------------------------------------------------------------------------


class PlaceholderContext(CamelModel):
    """Markup surrounding a placeholder occurrence."""

    file: str = Field(default="")
    tag_name: str | None = Field(default=None)
    class_hint: str | None = Field(default=None)
    snippet: str = Field(default="", description="Literal text just before the placeholder")


class Placeholder(CamelModel):
    """One literal placeholder occurrence in one file."""

    type: PlaceholderType
    key: str | None = Field(default=None)
    position: int = Field(default=0, ge=0)
    line: int = Field(default=1, ge=1)
    raw: str = Field(default="")
    context: PlaceholderContext = Field(default_factory=PlaceholderContext)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class ProcessedFile(CamelModel):
    path: str
    content: str
    type: str
    size: int = Field(default=0, ge=0, description="UTF-8 byte length of content")
    checksum: str = Field(default="", description="SHA-256 hex digest of content")


class ValidationIssue(CamelModel):
    severity: Severity
    message: str
    rule: str = Field(default="")
    file: str | None = Field(default=None)
    line: int | None = Field(default=None)
    suggestion: str | None = Field(default=None)


class ValidationResult(CamelModel):
    """Outcome of a validation pass.

    ``is_valid`` is always recomputed from ``errors`` so the two can never
    disagree.
    """

    is_valid: bool = Field(default=True)
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    infos: list[ValidationIssue] = Field(default_factory=list)
    score: float = Field(default=100.0, ge=0.0, le=100.0)
    rule_scores: dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _sync_validity(self) -> "ValidationResult":
        self.is_valid = len(self.errors) == 0
        return self

    @property
    def issues(self) -> list[ValidationIssue]:
        """All issues, errors first."""
        return [*self.errors, *self.warnings, *self.infos]


class ProjectManifest(CamelModel):
    name: str
    version: str
    description: str = Field(default="")
    template: str
    engine: str = Field(default="")
    file_count: int = Field(default=0, ge=0)
    generated_at: str
    theme: str
    slots: dict[str, Any] = Field(default_factory=dict)


class TemplateMetadata(CamelModel):
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    placeholder_count: int = Field(default=0, ge=0)
    theme_applied: str
    validation_passed: bool
    warnings: list[str] = Field(default_factory=list)


class ProcessedTemplate(CamelModel):
    """The complete artefact returned by ``TemplateProcessor.process_template``."""

    files: list[ProcessedFile] = Field(default_factory=list)
    manifest: ProjectManifest
    metadata: TemplateMetadata
    validation: ValidationResult


FieldConfig.model_rebuild()
