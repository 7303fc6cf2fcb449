"""Lightweight TypeScript hygiene checks."""

from __future__ import annotations

import re
from collections.abc import Sequence

from template_system.models import ProcessedFile, TemplateConstraints, ValidationIssue
from template_system.validator.base import SCRIPT_EXTENSIONS, ValidationRule

_ANY_RE = re.compile(r":\s*any\b")
_NAMED_IMPORT_RE = re.compile(r"^\s*import\s+(?:type\s+)?[^;\n]*?\{([^}]+)\}[^;\n]*?from\s+[^\n]+$", re.MULTILINE)
_CONSOLE_LOG_RE = re.compile(r"console\.log\s*\(")


def imported_names(content: str) -> list[tuple[str, int]]:
    """Return ``(local name, offset)`` for every named import in *content*."""
    names: list[tuple[str, int]] = []
    for match in _NAMED_IMPORT_RE.finditer(content):
        for item in match.group(1).split(","):
            item = item.strip()
            if item.startswith("type "):
                item = item[5:].strip()
            if " as " in item:
                item = item.split(" as ", 1)[1].strip()
            if item:
                names.append((item, match.start()))
    return names


def unused_imports(content: str) -> list[tuple[str, int]]:
    """Named imports that never appear outside import statements."""
    body = _NAMED_IMPORT_RE.sub("", content)
    return [
        (name, offset)
        for name, offset in imported_names(content)
        if not re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", body)
    ]


class CodeQualityRule(ValidationRule):
    name = "code-quality"
    description = "Flags loose typing, unused imports and leftover console logging"

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> list[ValidationIssue]:
        code = constraints.code
        if code is None:
            return []

        issues: list[ValidationIssue] = []
        for file in files:
            content = file.content
            if code.tsc and file.path.endswith(SCRIPT_EXTENSIONS):
                any_type = _ANY_RE.search(content)
                if any_type:
                    issues.append(
                        self.issue(
                            "info",
                            "TypeScript any type detected",
                            file,
                            offset=any_type.start(),
                            suggestion="Consider using more specific types instead of any",
                        )
                    )
                for name, offset in unused_imports(content):
                    issues.append(
                        self.issue(
                            "info",
                            f"Unused import: {name}",
                            file,
                            offset=offset,
                            suggestion=f"Remove unused import: {name}",
                        )
                    )

            console_log = _CONSOLE_LOG_RE.search(content)
            if console_log:
                issues.append(
                    self.issue(
                        "info",
                        "Console.log statements found",
                        file,
                        offset=console_log.start(),
                        suggestion="Remove console.log statements before production",
                    )
                )
        return issues
