"""Template processing pipeline.

Turns a template plus caller business data into a fully resolved project:

1. NORMALIZE -- default the brand name, check the theme against the registry.
2. SLOTS     -- fill every declared slot field.
3. RESOLVE   -- tokenize each source file and resolve its placeholders.
4. THEME     -- re-skin the resolved text through the active theme.
5. PACKAGE   -- size and checksum every file.
6. VALIDATE  -- run the rule set over the complete file set.
7. ASSEMBLE  -- manifest + metadata + validation.

Usage::

    python -m template_system.pipeline template.json --data user.json -o result.json
    python -m template_system.pipeline template.json --brand "Siam Coffee" --theme cozy
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.panel import Panel

from template_system.ai_client import ContentModelClient
from template_system.config import Config
from template_system.models import (
    ProcessedFile,
    ProcessedTemplate,
    ProjectManifest,
    SourceFile,
    Template,
    TemplateMetadata,
    UserData,
    ValidationIssue,
    ValidationResult,
)
from template_system.placeholders.resolver import ContentResolver
from template_system.slots.filler import SlotFiller
from template_system.themes.applier import ThemeApplier
from template_system.themes.registry import Theme, ThemeRegistry
from template_system.utils import (
    byte_size,
    compute_checksum,
    console,
    format_duration,
    load_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)
from template_system.validator import TemplateValidator

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateProcessingError(Exception):
    """Raised when a template cannot be processed at all.

    Carries the template key and, for per-file failures, the offending path.
    """

    def __init__(self, message: str, template_key: str = "", file_path: str | None = None) -> None:
        self.template_key = template_key
        self.file_path = file_path
        location = f"{template_key or '?'}"
        if file_path:
            location = f"{location}:{file_path}"
        super().__init__(f"Template {location}: {message}")


# ---------------------------------------------------------------------------
# Processor
# ---------------------------------------------------------------------------


class TemplateProcessor:
    """Orchestrates slot filling, placeholder resolution, theming and validation.

    All collaborators are explicit; a processor holds no per-request state,
    so one instance can run many ``process_template`` calls concurrently.

    Attributes:
        config: Processing and AI configuration.
        registry: Read-only theme catalogue shared by resolver and applier.
        resolver: Placeholder content resolver.
        slot_filler: Structured slot filler.
        applier: Theme applier.
        validator: Rule-based validator.
    """

    def __init__(
        self,
        config: Config | None = None,
        registry: ThemeRegistry | None = None,
        client: ContentModelClient | None = None,
        validator: TemplateValidator | None = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or ThemeRegistry(default=self.config.processing.default_theme)
        self.resolver = ContentResolver(self.config, self.registry, client=client)
        self.slot_filler = SlotFiller(verbose=False)
        self.applier = ThemeApplier(self.registry)
        self.validator = validator or TemplateValidator()

    @property
    def verbose(self) -> bool:
        return self.config.processing.verbose

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def process_template(
        self,
        template: Template | dict[str, Any],
        user_data: UserData | dict[str, Any] | None = None,
    ) -> ProcessedTemplate:
        """Process *template* with *user_data* into a ``ProcessedTemplate``.

        Raises:
            TemplateProcessingError: If the template is malformed or a file
                cannot be processed.
        """
        started = time.monotonic()
        template = self._coerce_template(template)
        key = template.key

        structural = self.validate_template(template)
        if not structural.is_valid:
            raise TemplateProcessingError(
                "; ".join(issue.message for issue in structural.errors), template_key=key
            )

        if self.verbose:
            console.print(
                Panel(
                    f"[bold]Template Processing[/bold]\n"
                    f"Template : {key} ({template.label or 'untitled'})\n"
                    f"Files    : {len(template.initial_version.source_files)}",
                    border_style="blue",
                )
            )

        data, warnings = self.normalize_user_data(user_data, template_key=key)
        theme_name = data.theme or self.registry.default_name
        try:
            theme, _ = self.applier.resolve_theme(theme_name, data.customizations, warnings)
        except ValidationError as exc:
            raise TemplateProcessingError(f"invalid theme customizations: {exc}", template_key=key) from exc

        version = template.initial_version
        filled_slots = self.slot_filler.fill_slots(version.slots, data)

        file_limit = asyncio.Semaphore(self.config.processing.max_parallel_files)
        resolution_limit = asyncio.Semaphore(self.config.processing.max_parallel_resolutions)

        async def _process(source: SourceFile) -> tuple[ProcessedFile, int]:
            async with file_limit:
                try:
                    return await self._process_file(
                        source, template, data, theme, filled_slots, resolution_limit
                    )
                except TemplateProcessingError:
                    raise
                except Exception as exc:
                    raise TemplateProcessingError(
                        f"failed to process file: {exc}", template_key=key, file_path=source.path
                    ) from exc

        tasks = [asyncio.create_task(_process(source)) for source in version.source_files]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # First failure aborts the run; stop the sibling files too.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        files = [processed for processed, _ in results]
        placeholder_count = sum(count for _, count in results)

        validation = await self.validator.validate(files, version.constraints)
        warnings.extend(issue.message for issue in validation.warnings)

        elapsed = time.monotonic() - started
        manifest = ProjectManifest(
            name=data.brand_name or key,
            version=version.semver,
            description=template.meta.description,
            template=key,
            engine=template.meta.engine,
            file_count=len(files),
            generated_at=datetime.now(timezone.utc).isoformat(),
            theme=theme_name,
            slots=filled_slots,
        )
        metadata = TemplateMetadata(
            processing_time_ms=round(elapsed * 1000.0, 2),
            placeholder_count=placeholder_count,
            theme_applied=theme_name,
            validation_passed=validation.is_valid,
            warnings=warnings,
        )

        if self.verbose:
            console.print(
                f"  [green]Processed {len(files)} file(s)[/green] "
                f"({placeholder_count} placeholders, score {validation.score}) "
                f"in {format_duration(elapsed)}"
            )

        return ProcessedTemplate(
            files=files, manifest=manifest, metadata=metadata, validation=validation
        )

    def normalize_user_data(
        self,
        user_data: UserData | dict[str, Any] | None,
        template_key: str = "",
    ) -> tuple[UserData, list[str]]:
        """Fill in the brand name and a registered theme.

        Returns the normalized copy and any warnings produced on the way.
        A missing theme becomes the registry default; an unknown one is
        replaced by the registry fallback (``modern``), whatever default the
        configuration names.
        """
        warnings: list[str] = []
        if user_data is None:
            data = UserData()
        elif isinstance(user_data, UserData):
            data = user_data.model_copy(deep=True)
        else:
            try:
                data = UserData.model_validate(user_data)
            except ValidationError as exc:
                raise TemplateProcessingError(
                    f"invalid user data: {exc}", template_key=template_key
                ) from exc

        updates: dict[str, Any] = {}
        if not data.brand_name:
            updates["brand_name"] = self.config.processing.default_brand_name
        if not data.theme:
            updates["theme"] = self.registry.default_name
        elif data.theme not in self.registry:
            fallback = self.registry.fallback_name
            message = f"Unknown theme '{data.theme}', using '{fallback}' instead"
            print_warning(f"  {message}")
            warnings.append(message)
            updates["theme"] = fallback

        if updates:
            data = data.model_copy(update=updates)
        return data, warnings

    def validate_template(self, template: Template | dict[str, Any]) -> ValidationResult:
        """Structural pre-check of a template.

        Missing key or source files are errors; a template that declares no
        constraints at all gets a warning. Scored 100 minus 10 per warning,
        0 when invalid.
        """
        if isinstance(template, dict):
            key = str(template.get("key") or "")
            version = template.get("initialVersion") or template.get("initial_version") or {}
            source_files = version.get("sourceFiles") or version.get("source_files") or []
            has_constraints = bool(version.get("constraints"))
        else:
            key = template.key
            source_files = template.initial_version.source_files
            constraints = template.initial_version.constraints
            has_constraints = any(
                getattr(constraints, block) is not None
                for block in ("a11y", "content", "assets", "performance", "security", "code")
            )

        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        if not key:
            errors.append(ValidationIssue(severity="error", message="Template key is required", rule="structure"))
        if not source_files:
            errors.append(
                ValidationIssue(
                    severity="error",
                    message="Template must have at least one source file",
                    rule="structure",
                )
            )
        if not has_constraints:
            warnings.append(
                ValidationIssue(severity="warning", message="Template missing constraints", rule="structure")
            )

        score = 0.0 if errors else float(max(0, 100 - 10 * len(warnings)))
        return ValidationResult(errors=errors, warnings=warnings, score=score)

    async def process_template_file(
        self,
        path: str | Path,
        user_data: UserData | dict[str, Any] | None = None,
    ) -> ProcessedTemplate:
        """Load a JSON template from *path* and process it."""
        template_path = Path(path)
        try:
            raw = load_json(template_path)
        except (OSError, ValueError) as exc:
            raise TemplateProcessingError(
                f"cannot load template from {template_path}: {exc}", template_key=template_path.stem
            ) from exc
        return await self.process_template(raw, user_data)

    def print_summary(self, result: ProcessedTemplate) -> None:
        """Print a summary table and the validation report."""
        print_summary_table(
            {
                "Template": result.manifest.template,
                "Project": result.manifest.name,
                "Theme": result.manifest.theme,
                "Files": str(result.manifest.file_count),
                "Placeholders": str(result.metadata.placeholder_count),
                "Score": f"{result.validation.score}/100",
                "Valid": "yes" if result.validation.is_valid else "no",
                "Time": format_duration(result.metadata.processing_time_ms / 1000.0),
            },
            title="Template Processing Results",
        )
        self.validator.print_report(result.validation)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _coerce_template(self, template: Template | dict[str, Any]) -> Template:
        if isinstance(template, Template):
            return template
        if not isinstance(template, dict):
            raise TemplateProcessingError(f"expected a template object, got {type(template).__name__}")
        key = str(template.get("key") or "")
        try:
            return Template.model_validate(template)
        except ValidationError as exc:
            structural = self.validate_template(template)
            reasons = [issue.message for issue in structural.errors] or [str(exc)]
            raise TemplateProcessingError("; ".join(reasons), template_key=key) from exc

    async def _process_file(
        self,
        source: SourceFile,
        template: Template,
        data: UserData,
        theme: Theme,
        filled_slots: dict[str, dict[str, Any]],
        resolution_limit: asyncio.Semaphore,
    ) -> tuple[ProcessedFile, int]:
        if source.encoding == "base64":
            # Binary assets pass through untouched.
            try:
                size = len(base64.b64decode(source.content, validate=True))
            except (binascii.Error, ValueError) as exc:
                raise TemplateProcessingError(
                    f"invalid base64 content: {exc}", template_key=template.key, file_path=source.path
                ) from exc
            processed = ProcessedFile(
                path=source.path,
                content=source.content,
                type=source.type,
                size=size,
                checksum=compute_checksum(source.content),
            )
            return processed, 0

        rendered, count = await self.resolver.render(
            source.content,
            data,
            template,
            file=source.path,
            filled_slots=filled_slots,
            theme=theme,
            semaphore=resolution_limit,
        )
        content = self.applier.apply_theme(rendered, data.theme, data.customizations)

        if self.verbose:
            console.print(f"  [dim]{source.path}: {count} placeholder(s) resolved[/dim]")

        processed = ProcessedFile(
            path=source.path,
            content=content,
            type=source.type,
            size=byte_size(content),
            checksum=compute_checksum(content),
        )
        return processed, count


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``python -m template_system.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Template System -- resolve, theme and validate a project template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m template_system.pipeline template.json\n"
            "  python -m template_system.pipeline template.json --data user.json -o result.json\n"
            "  python -m template_system.pipeline template.json --brand 'Siam Coffee' --theme cozy\n"
        ),
    )

    parser.add_argument("template", help="Path to the template JSON file")
    parser.add_argument("--data", "-d", default=None, help="Path to a user data JSON file")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the processed template JSON here (default: print a summary only)",
    )
    parser.add_argument("--theme", default=None, help="Override the theme name")
    parser.add_argument("--brand", default=None, help="Override the brand name")
    parser.add_argument("--no-ai", action="store_true", help="Disable AI content generation")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress per-file progress")

    args = parser.parse_args()

    template_path = Path(args.template)
    if not template_path.exists():
        console.print(f"[bold red]Error:[/bold red] Template file not found: {template_path}")
        sys.exit(1)

    user_data: dict[str, Any] = {}
    if args.data:
        data_path = Path(args.data)
        if not data_path.exists():
            console.print(f"[bold red]Error:[/bold red] User data file not found: {data_path}")
            sys.exit(1)
        user_data = load_json(data_path)
    if args.theme:
        user_data["theme"] = args.theme
    if args.brand:
        user_data["brandName"] = args.brand

    config = Config.from_env()
    if args.no_ai:
        config.ai.enabled = False
    if args.quiet:
        config.processing.verbose = False

    processor = TemplateProcessor(config)
    try:
        result = asyncio.run(processor.process_template_file(template_path, user_data))
    except TemplateProcessingError as exc:
        print_error(f"Processing failed: {exc}")
        sys.exit(1)

    processor.print_summary(result)

    if args.output:
        asyncio.run(save_json(result.model_dump(mode="json", by_alias=True), args.output))
        print_success(f"Wrote {args.output}")

    if not result.validation.is_valid:
        print_warning("Validation reported errors.")
        sys.exit(1)


if __name__ == "__main__":
    main()
