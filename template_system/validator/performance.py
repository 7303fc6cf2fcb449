"""File-size budgets for stylesheets and images."""

from __future__ import annotations

from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.utils import byte_size
from template_system.validator.base import ValidationRule, is_image


class PerformanceRule(ValidationRule):
    name = "performance"
    description = "Stylesheets and images stay within their size budgets"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        perf = constraints.performance
        if perf is None:
            return []

        issues: list[ValidationIssue] = []
        for file in files:
            size = file.size or byte_size(file.content)
            kb = round(size / 1024)

            if file.path.endswith(".css") and size > perf.max_critical_css_kb * 1024:
                issues.append(
                    self.issue(
                        "warning",
                        f"CSS file too large: {kb}KB (max: {perf.max_critical_css_kb}KB)",
                        file,
                        suggestion="Consider splitting CSS or removing unused styles",
                    )
                )

            if is_image(file.path) and size > perf.max_image_kb * 1024:
                issues.append(
                    self.issue(
                        "warning",
                        f"Image file too large: {kb}KB (max: {perf.max_image_kb}KB)",
                        file,
                        suggestion="Optimize image size or use WebP format",
                    )
                )
        return issues
