"""Slot filling: typed, validated values for every declared slot field.

Field value priority::

    user_data.slots[slot][field]  ->  user_data.content[field]
        ->  static slot content table  ->  declared default / type zero value

The selected value is checked against ``required``, the declared
validators, the field type and any nested ``shape`` / ``itemShape``. A
value that fails falls back to the declared default (or the zero value for
the type). :meth:`SlotFiller.fill_slots` never raises and always returns
exactly one value per declared field.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console

from template_system.models import FieldConfig, SlotConfig, UserData, ValidatorConfig
from template_system.slots.defaults import default_content, has_default_content

console = Console()

_ZERO_VALUES: dict[str, Any] = {
    "text": "",
    "richtext": "",
    "email": "",
    "url": "",
    "image": "",
    "number": 0,
    "boolean": False,
    "list": [],
    "object": {},
}


@dataclass
class SlotValidationResult:
    """Validation outcome for one slot."""

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)


def zero_value(field_type: str) -> Any:
    """Return a fresh type-appropriate empty value."""
    return copy.deepcopy(_ZERO_VALUES.get(field_type))


def fallback_value(config: FieldConfig) -> Any:
    """The declared default, or the zero value when there is none."""
    if config.default is not None:
        return copy.deepcopy(config.default)
    return zero_value(config.type)


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------


def check_validator(validator: ValidatorConfig, value: Any) -> str | None:
    """Return an error message if *value* violates *validator*."""
    kind, limit = validator.kind, validator.value
    if kind in ("maxLength", "minLength", "maxItems", "minItems") and not _is_number(limit):
        return None
    if kind == "maxLength" and isinstance(value, str) and len(value) > limit:
        return f"Value exceeds maximum length of {limit}"
    if kind == "minLength" and isinstance(value, str) and len(value) < limit:
        return f"Value is below minimum length of {limit}"
    if kind == "maxItems" and isinstance(value, list) and len(value) > limit:
        return f"Array exceeds maximum items of {limit}"
    if kind == "minItems" and isinstance(value, list) and len(value) < limit:
        return f"Array is below minimum items of {limit}"
    if kind == "pattern" and isinstance(value, str):
        try:
            matched = re.search(str(limit), value) is not None
        except re.error as exc:
            return f"Invalid pattern {limit}: {exc}"
        if not matched:
            return f"Value does not match pattern {limit}"
    if kind == "range" and _is_number(value) and isinstance(limit, Mapping):
        low, high = limit.get("min"), limit.get("max")
        if (low is not None and value < low) or (high is not None and value > high):
            return f"Value is outside range {low}-{high}"
    return None


def check_type(field_type: str, value: Any) -> str | None:
    """Return an error message if *value* does not have *field_type*.

    ``None`` passes; absence is the ``required`` check's concern.
    """
    if value is None:
        return None
    if field_type in ("text", "richtext") and not isinstance(value, str):
        return f"Expected string, got {type(value).__name__}"
    if field_type == "number" and not _is_number(value):
        return f"Expected number, got {type(value).__name__}"
    if field_type == "boolean" and not isinstance(value, bool):
        return f"Expected boolean, got {type(value).__name__}"
    if field_type == "email" and not (isinstance(value, str) and "@" in value):
        return f"Expected valid email, got {value}"
    if field_type == "url" and not (
        isinstance(value, str) and value.startswith(("http://", "https://"))
    ):
        return f"Expected valid URL, got {value}"
    if field_type == "image" and not isinstance(value, str):
        return f"Expected image URL, got {type(value).__name__}"
    if field_type == "list" and not isinstance(value, list):
        return f"Expected array, got {type(value).__name__}"
    if field_type == "object" and not isinstance(value, dict):
        return f"Expected object, got {type(value).__name__}"
    return None


def field_errors(config: FieldConfig, value: Any, path: str = "") -> tuple[list[str], list[str]]:
    """Validate one value against its declaration.

    Returns ``(errors, missing_fields)``. Nested ``shape`` and ``itemShape``
    declarations are checked recursively; nested paths are dotted.
    """
    name = f"{path}.{config.key}" if path else config.key
    errors: list[str] = []
    missing: list[str] = []

    if config.required and value in (None, ""):
        errors.append(f"Field {name} is required")
        missing.append(name)

    if value is not None:
        for validator in config.validators:
            message = check_validator(validator, value)
            if message:
                errors.append(f"{name}: {message}")

    type_error = check_type(config.type, value)
    if type_error:
        errors.append(f"{name}: {type_error}")
        return errors, missing

    if config.shape and isinstance(value, dict):
        for key, nested in config.shape.items():
            nested_config = nested if nested.key == key else nested.model_copy(update={"key": key})
            nested_errors, nested_missing = field_errors(nested_config, value.get(key), name)
            errors.extend(nested_errors)
            missing.extend(nested_missing)

    if config.item_shape is not None and isinstance(value, list):
        for index, item in enumerate(value):
            item_config = config.item_shape.model_copy(update={"key": str(index)})
            item_errors, item_missing = field_errors(item_config, item, name)
            errors.extend(item_errors)
            missing.extend(item_missing)

    return errors, missing


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# SlotFiller
# ---------------------------------------------------------------------------


class SlotFiller:
    """Fills declared slots from caller data, static content and defaults.

    Stateless; one instance can serve concurrent pipeline runs.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def fill_slots(
        self,
        slot_configs: Mapping[str, SlotConfig | dict[str, Any]],
        user_data: UserData,
    ) -> dict[str, dict[str, Any]]:
        """Return ``{slot_name: {field_key: value}}`` for every declared field."""
        filled: dict[str, dict[str, Any]] = {}
        for slot_name, raw_config in slot_configs.items():
            try:
                slot_config = _as_slot_config(raw_config)
            except Exception as exc:  # noqa: BLE001
                console.print(f"  [yellow]Slot '{slot_name}' has an invalid declaration: {exc}[/yellow]")
                filled[slot_name] = {}
                continue

            try:
                filled[slot_name] = self._fill_slot(slot_name, slot_config, user_data)
            except Exception as exc:  # noqa: BLE001
                console.print(f"  [yellow]Slot '{slot_name}' could not be filled: {exc}[/yellow]")
                filled[slot_name] = {f.key: fallback_value(f) for f in slot_config.fields}

        if self.verbose:
            console.print(f"  [dim]Filled {len(filled)} slot(s)[/dim]")
        return filled

    def validate_slots(
        self,
        slot_configs: Mapping[str, SlotConfig | dict[str, Any]],
        filled_slots: Mapping[str, Mapping[str, Any]],
    ) -> dict[str, SlotValidationResult]:
        """Check filled values against their declarations, slot by slot."""
        results: dict[str, SlotValidationResult] = {}
        for slot_name, raw_config in slot_configs.items():
            slot_config = _as_slot_config(raw_config)
            values = filled_slots.get(slot_name) or {}
            result = SlotValidationResult()
            for field_config in slot_config.fields:
                errors, missing = field_errors(field_config, values.get(field_config.key))
                result.errors.extend(errors)
                result.missing_fields.extend(missing)
            for extra in sorted(set(values) - {f.key for f in slot_config.fields}):
                result.warnings.append(f"Undeclared field {extra} in slot {slot_name}")
            result.is_valid = not result.errors
            results[slot_name] = result
        return results

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fill_slot(
        self, slot_name: str, slot_config: SlotConfig, user_data: UserData
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_config in slot_config.fields:
            value = self._select_value(slot_name, field_config, user_data)
            errors, _ = field_errors(field_config, value)
            if errors:
                if self.verbose:
                    console.print(
                        f"  [dim]{slot_name}.{field_config.key} rejected "
                        f"({'; '.join(errors)}), using default[/dim]"
                    )
                value = fallback_value(field_config)
            values[field_config.key] = value
        return values

    @staticmethod
    def _select_value(slot_name: str, field_config: FieldConfig, user_data: UserData) -> Any:
        key = field_config.key
        slot_overrides = user_data.slots.get(slot_name)
        if isinstance(slot_overrides, Mapping) and slot_overrides.get(key) is not None:
            return copy.deepcopy(slot_overrides[key])
        if user_data.content.get(key) is not None:
            return copy.deepcopy(user_data.content[key])
        if has_default_content(slot_name, key):
            return default_content(slot_name, key)
        return fallback_value(field_config)


def _as_slot_config(raw: SlotConfig | dict[str, Any]) -> SlotConfig:
    if isinstance(raw, SlotConfig):
        return raw
    return SlotConfig.model_validate(raw)
