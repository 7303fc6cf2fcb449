"""Static accessibility checks over resolved markup files."""

from __future__ import annotations

import re
from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.validator.base import ValidationRule, is_markup

_IMG_WITHOUT_ALT_RE = re.compile(r"<img\b(?![^>]*\balt\s*=)[^>]*>", re.IGNORECASE)
_BUTTON_RE = re.compile(r"<button\b", re.IGNORECASE)
_H1_RE = re.compile(r"<h1\b", re.IGNORECASE)
_TEXT_XS_RE = re.compile(r"(?<![\w-])text-xs(?![\w-])")

# ``text-xs`` renders at 12px.
TEXT_XS_PX = 12


class AccessibilityRule(ValidationRule):
    name = "accessibility"
    description = "Images have alt text, controls are labelled, pages have a heading"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        a11y = constraints.a11y
        if a11y is None:
            return []

        issues: list[ValidationIssue] = []
        for file in files:
            if not is_markup(file.path):
                continue
            content = file.content

            missing_alt = _IMG_WITHOUT_ALT_RE.search(content)
            if missing_alt:
                issues.append(
                    self.issue(
                        "error",
                        "Images missing alt attributes",
                        file,
                        offset=missing_alt.start(),
                        suggestion="Add alt attributes to all images for accessibility",
                    )
                )

            button = _BUTTON_RE.search(content)
            if a11y.aria_required and button and "aria-" not in content:
                issues.append(
                    self.issue(
                        "error",
                        "Interactive elements missing aria labels",
                        file,
                        offset=button.start(),
                        suggestion="Add aria labels to buttons and interactive elements",
                    )
                )

            if "home" in file.path.lower() and not _H1_RE.search(content):
                issues.append(
                    self.issue(
                        "error",
                        "Missing H1 heading",
                        file,
                        suggestion="Add an H1 heading to the main page",
                    )
                )

            small_text = _TEXT_XS_RE.search(content)
            if small_text and a11y.min_font_size_px > TEXT_XS_PX:
                issues.append(
                    self.issue(
                        "warning",
                        "Font size may be too small for accessibility",
                        file,
                        offset=small_text.start(),
                        suggestion=f"Use font size at least {a11y.min_font_size_px}px",
                    )
                )
        return issues
