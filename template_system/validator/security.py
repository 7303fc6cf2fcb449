"""Inline-script and XSS-prone pattern detection."""

from __future__ import annotations

import re
from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.validator.base import ValidationRule

_INLINE_SCRIPT_RE = re.compile(r"<script\b(?![^>]*\bsrc\s*=)[^>]*>", re.IGNORECASE)

DANGEROUS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"eval\s*\("),
    re.compile(r"innerHTML\s*="),
    re.compile(r"document\.write"),
    re.compile(r"javascript:"),
)


class SecurityRule(ValidationRule):
    name = "security"
    description = "No inline scripts when disallowed and no XSS-prone code patterns"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        security = constraints.security
        if security is None:
            return []

        issues: list[ValidationIssue] = []
        for file in files:
            if security.disallow_inline_script:
                inline = _INLINE_SCRIPT_RE.search(file.content)
                if inline:
                    issues.append(
                        self.issue(
                            "error",
                            "Inline scripts detected",
                            file,
                            offset=inline.start(),
                            suggestion="Move inline scripts to external files for better security",
                        )
                    )

            # One warning per pattern present, not per occurrence.
            for pattern in DANGEROUS_PATTERNS:
                match = pattern.search(file.content)
                if match:
                    issues.append(
                        self.issue(
                            "warning",
                            "Potentially dangerous code pattern detected",
                            file,
                            offset=match.start(),
                            suggestion="Review and sanitize user input to prevent XSS attacks",
                        )
                    )
        return issues
