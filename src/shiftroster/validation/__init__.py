"""Validation module for rule sets and generated schedules."""

from shiftroster.validation.rules import (
    RuleSetError,
    ensure_valid_rule_set,
    validate_rule_set,
)
from shiftroster.validation.validator import (
    ScheduleValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "RuleSetError",
    "ScheduleValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "ensure_valid_rule_set",
    "validate_rule_set",
]
