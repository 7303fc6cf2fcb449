"""Placeholder tokenizing, prompting and resolution."""

from template_system.placeholders.matcher import (
    PLACEHOLDER_RE,
    Segment,
    count_remaining,
    find_placeholders,
    has_remaining,
    infer_context,
    tokenize,
)
from template_system.placeholders.prompts import (
    BusinessAnalysis,
    PromptLibrary,
    analyze_business,
    clean_response,
    validate_response,
)
from template_system.placeholders.resolver import (
    ContentResolver,
    Resolution,
    ResolutionRequest,
    classify_element,
    context_classes,
    describe_context,
)

__all__ = [
    "PLACEHOLDER_RE",
    "BusinessAnalysis",
    "ContentResolver",
    "PromptLibrary",
    "Resolution",
    "ResolutionRequest",
    "Segment",
    "analyze_business",
    "classify_element",
    "clean_response",
    "context_classes",
    "count_remaining",
    "describe_context",
    "find_placeholders",
    "has_remaining",
    "infer_context",
    "tokenize",
    "validate_response",
]
