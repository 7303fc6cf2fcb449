"""SEO checks: title length, meta description length, required meta tags."""

from __future__ import annotations

import re
from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.validator.base import ValidationRule, is_markup

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_META_DESCRIPTION_RE = re.compile(
    r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']+)["']""",
    re.IGNORECASE,
)


class ContentRule(ValidationRule):
    name = "content"
    description = "Titles and meta descriptions fit search-engine limits"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        if constraints.content is None:
            return []
        seo = constraints.content.seo

        issues: list[ValidationIssue] = []
        for file in files:
            if not is_markup(file.path):
                continue
            content = file.content

            title = _TITLE_RE.search(content)
            if title and len(title.group(1)) > seo.title_max_len:
                issues.append(
                    self.issue(
                        "warning",
                        f"Title too long: {len(title.group(1))} characters (max: {seo.title_max_len})",
                        file,
                        offset=title.start(),
                        suggestion="Shorten the title for better SEO",
                    )
                )

            description = _META_DESCRIPTION_RE.search(content)
            if description and len(description.group(1)) > seo.desc_max_len:
                issues.append(
                    self.issue(
                        "warning",
                        f"Meta description too long: {len(description.group(1))} characters "
                        f"(max: {seo.desc_max_len})",
                        file,
                        offset=description.start(),
                        suggestion="Shorten the meta description for better SEO",
                    )
                )

            for meta_tag in seo.meta_tags:
                if meta_tag not in content:
                    issues.append(
                        self.issue(
                            "warning",
                            f"Missing required meta tag: {meta_tag}",
                            file,
                            suggestion=f"Add {meta_tag} meta tag for better social sharing",
                        )
                    )
        return issues
