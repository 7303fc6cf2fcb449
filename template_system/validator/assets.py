"""Best-effort image dimension reminders.

Image bytes are not decoded; a constraint applies to every image whose path
contains the constraint key (or vice versa), and the rule reports an
informational reminder of the required minimum width.
"""

from __future__ import annotations

from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.validator.base import ValidationRule, is_image


class AssetRule(ValidationRule):
    name = "assets"
    description = "Images named by an asset constraint meet its minimum dimensions"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        if not constraints.assets:
            return []

        issues: list[ValidationIssue] = []
        for file in files:
            if not is_image(file.path):
                continue
            for key, constraint in constraints.assets.items():
                if key not in file.path and file.path not in key:
                    continue
                if constraint.min_width:
                    issues.append(
                        self.issue(
                            "info",
                            f"Image constraint check: {key}",
                            file,
                            suggestion=f"Ensure image meets minimum width of {constraint.min_width}px",
                        )
                    )
        return issues
