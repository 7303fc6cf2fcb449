"""Placeholder completeness: nothing of the five marker forms may survive resolution."""

from __future__ import annotations

from collections.abc import Sequence

from template_system.models import PLACEHOLDER_TYPES, ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.placeholders.matcher import FORM_PATTERNS
from template_system.validator.base import ValidationRule


class PlaceholderRule(ValidationRule):
    """One warning per remaining placeholder form per file. Always enabled."""

    name = "placeholders"
    description = "Every placeholder has been replaced"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for file in files:
            for form in PLACEHOLDER_TYPES:
                matches = list(FORM_PATTERNS[form].finditer(file.content))
                if not matches:
                    continue
                issues.append(
                    self.issue(
                        "warning",
                        f"Unreplaced placeholders found: {len(matches)} instances",
                        file,
                        offset=matches[0].start(),
                        suggestion="Ensure all placeholders are properly replaced with actual content",
                    )
                )
        return issues
