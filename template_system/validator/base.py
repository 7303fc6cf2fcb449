"""Shared pieces for validation rules."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Union

from template_system.models import ProcessedFile, Severity, TemplateConstraints, ValidationIssue
from template_system.utils import find_line

MARKUP_EXTENSIONS = (".tsx", ".jsx", ".html")
SCRIPT_EXTENSIONS = (".ts", ".tsx")
IMAGE_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

# Score deductions per issue severity; a rule score never drops below 0.
SEVERITY_PENALTY: dict[str, int] = {"error": 20, "warning": 10, "info": 5}

CheckResult = Union[list[ValidationIssue], Awaitable[list[ValidationIssue]]]


class ValidationRule:
    """One independent check over the resolved file set.

    Subclasses set ``name`` / ``description`` and implement :meth:`check`.
    ``check`` may be a plain method (run in a worker thread) or a coroutine.
    """

    name: str = ""
    description: str = ""

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> CheckResult:
        raise NotImplementedError

    def issue(
        self,
        severity: Severity,
        message: str,
        file: ProcessedFile | None = None,
        *,
        offset: int | None = None,
        suggestion: str | None = None,
    ) -> ValidationIssue:
        """Build an issue attributed to this rule."""
        line = None
        if file is not None and offset is not None:
            line = find_line(file.content, offset)
        return ValidationIssue(
            severity=severity,
            message=message,
            rule=self.name,
            file=file.path if file is not None else None,
            line=line,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionRule(ValidationRule):
    """Adapts a plain ``check(files, constraints)`` callable into a rule."""

    def __init__(
        self,
        name: str,
        check: Callable[[Sequence[ProcessedFile], TemplateConstraints], Any],
        description: str = "",
    ) -> None:
        self.name = name
        self.description = description
        self._check = check

    def check(
        self, files: Sequence[ProcessedFile], constraints: TemplateConstraints
    ) -> CheckResult:
        return self._check(files, constraints)


def rule_score(issues: Sequence[ValidationIssue]) -> float:
    """100 minus the severity penalties of *issues*, floored at 0."""
    penalty = sum(SEVERITY_PENALTY.get(issue.severity, 0) for issue in issues)
    return float(max(0, 100 - penalty))


def is_markup(path: str) -> bool:
    return path.endswith(MARKUP_EXTENSIONS)


def is_image(path: str) -> bool:
    return bool(IMAGE_RE.search(path))
