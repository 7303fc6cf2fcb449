"""Template Validator.

Runs a fixed, ordered set of independent rules over the fully resolved file
set and combines their issues into one :class:`ValidationResult`. Rules run
concurrently; a rule that raises is reported as a single error issue and
never stops the others.

Scoring: every rule starts at 100 and loses 20 per error, 10 per warning
and 5 per info (floored at 0). The overall score is the mean of the rule
scores. ``is_valid`` depends only on whether there are errors.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.table import Table

from template_system.models import (
    ProcessedFile,
    TemplateConstraints,
    ValidationIssue,
    ValidationResult,
)
from template_system.validator.accessibility import AccessibilityRule
from template_system.validator.assets import AssetRule
from template_system.validator.base import FunctionRule, ValidationRule, rule_score
from template_system.validator.code_quality import CodeQualityRule
from template_system.validator.content import ContentRule
from template_system.validator.performance import PerformanceRule
from template_system.validator.placeholders import PlaceholderRule
from template_system.validator.security import SecurityRule

__all__ = [
    # Core engine
    "TemplateValidator",
    "default_rules",
    # Rules
    "ValidationRule",
    "FunctionRule",
    "AccessibilityRule",
    "PerformanceRule",
    "ContentRule",
    "AssetRule",
    "SecurityRule",
    "CodeQualityRule",
    "PlaceholderRule",
    "rule_score",
]

console = Console()


def default_rules() -> tuple[ValidationRule, ...]:
    """The built-in rule set, in reporting order."""
    return (
        AccessibilityRule(),
        PerformanceRule(),
        ContentRule(),
        AssetRule(),
        SecurityRule(),
        CodeQualityRule(),
        PlaceholderRule(),
    )


# ---------------------------------------------------------------------------
# TemplateValidator
# ---------------------------------------------------------------------------


class TemplateValidator:
    """Runs validation rules over processed files.

    Usage::

        validator = TemplateValidator()
        result = await validator.validate(files, template.initial_version.constraints)
        validator.print_report(result)
    """

    def __init__(self, rules: Iterable[ValidationRule] | None = None, verbose: bool = False) -> None:
        self._rules: tuple[ValidationRule, ...] = tuple(rules) if rules is not None else default_rules()
        self.verbose = verbose

    @property
    def rules(self) -> tuple[ValidationRule, ...]:
        return self._rules

    def add_rule(self, rule: ValidationRule) -> None:
        """Append *rule*; it runs after every existing rule."""
        self._rules = (*self._rules, rule)

    def remove_rule(self, name: str) -> bool:
        """Remove the rule called *name*. Returns ``False`` if there was none."""
        remaining = tuple(rule for rule in self._rules if rule.name != name)
        removed = len(remaining) != len(self._rules)
        self._rules = remaining
        return removed

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def validate(
        self,
        files: Sequence[ProcessedFile],
        constraints: TemplateConstraints | None = None,
    ) -> ValidationResult:
        """Run every rule over *files* and combine the results."""
        constraints = constraints or TemplateConstraints()
        rules = self._rules

        per_rule = await asyncio.gather(*(self._run_rule(rule, files, constraints) for rule in rules))

        # Concatenated in rule order, whatever order the rules finished in.
        issues: list[ValidationIssue] = [issue for rule_issues in per_rule for issue in rule_issues]
        rule_scores = {rule.name: rule_score(rule_issues) for rule, rule_issues in zip(rules, per_rule)}
        score = round(sum(rule_scores.values()) / len(rule_scores), 1) if rule_scores else 100.0

        return ValidationResult(
            errors=[issue for issue in issues if issue.severity == "error"],
            warnings=[issue for issue in issues if issue.severity == "warning"],
            infos=[issue for issue in issues if issue.severity == "info"],
            score=score,
            rule_scores=rule_scores,
        )

    async def validate_file(
        self, file: ProcessedFile, constraints: TemplateConstraints | None = None
    ) -> ValidationResult:
        """Validate a single file as if it were the whole project."""
        return await self.validate([file], constraints)

    # ------------------------------------------------------------------
    # Rule runner (with error isolation)
    # ------------------------------------------------------------------

    async def _run_rule(
        self,
        rule: ValidationRule,
        files: Sequence[ProcessedFile],
        constraints: TemplateConstraints,
    ) -> list[ValidationIssue]:
        if self.verbose:
            console.print(f"  [dim]Running {rule.name} rule...[/dim]")
        try:
            if inspect.iscoroutinefunction(rule.check):
                issues = await rule.check(files, constraints)
            else:
                issues = await asyncio.to_thread(rule.check, files, constraints)
                if inspect.isawaitable(issues):
                    issues = await issues
            return list(issues or [])
        except Exception as exc:
            console.print(f"  [red]Validation rule {rule.name} failed: {exc}[/red]")
            return [
                ValidationIssue(
                    severity="error",
                    message=f"Validation rule '{rule.name}' failed: {exc}",
                    rule=rule.name,
                    suggestion="Please check the validation rule implementation",
                )
            ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def print_report(self, result: ValidationResult) -> None:
        """Print a rule-by-rule summary and the issue list."""
        table = Table(title="Validation", show_lines=False)
        table.add_column("Rule", style="cyan")
        table.add_column("Score", justify="right")
        for name, score in result.rule_scores.items():
            color = "green" if score == 100 else "yellow" if score >= 60 else "red"
            table.add_row(name, f"[{color}]{score:.0f}[/{color}]")
        table.add_row("[bold]Overall[/bold]", f"[bold]{result.score}[/bold]")
        console.print(table)

        status = "[green]PASSED[/green]" if result.is_valid else "[red]FAILED[/red]"
        console.print(
            f"  {status}  {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s), {len(result.infos)} info"
        )
        styles = {"error": "red", "warning": "yellow", "info": "dim"}
        for issue in result.issues:
            style = styles[issue.severity]
            location = f"{issue.file}:{issue.line}" if issue.line else (issue.file or "-")
            console.print(f"  [{style}]{issue.severity.upper():7}[/{style}] {location}  {issue.message}")
