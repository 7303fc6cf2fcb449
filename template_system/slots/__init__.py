"""Structured slot filling and validation."""

from template_system.slots.defaults import DEFAULT_SLOT_CONTENT, default_content
from template_system.slots.filler import (
    SlotFiller,
    SlotValidationResult,
    check_type,
    check_validator,
    field_errors,
    zero_value,
)

__all__ = [
    "DEFAULT_SLOT_CONTENT",
    "SlotFiller",
    "SlotValidationResult",
    "check_type",
    "check_validator",
    "default_content",
    "field_errors",
    "zero_value",
]
