"""Structural validation of rule sets.

Field types are assumed to be right (the configuration layer parses them);
this module only checks the invariants generation depends on.
"""

from shiftroster.domain.models import ScheduleRuleSet


class RuleSetError(ValueError):
    """Raised when a rule set is structurally unusable for generation."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid rule set: " + "; ".join(self.problems))


def _check_mask(mask: list[bool], where: str, problems: list[str]) -> None:
    if len(mask) != 7:
        problems.append(f"{where} must have 7 entries (Sunday first), got {len(mask)}")


def validate_rule_set(rules: ScheduleRuleSet) -> list[str]:
    """Return every structural problem found in ``rules`` (empty if usable)."""
    problems: list[str] = []

    if not rules.shift_types:
        problems.append("At least one shift type is required")
    if rules.target_hours_per_week <= 0:
        problems.append("target_hours_per_week must be positive")
    if rules.shift_duration_hours <= 0:
        problems.append("shift_duration_hours must be positive")
    _check_mask(rules.active_days_of_week, "active_days_of_week", problems)

    count = len(rules.shift_types)
    for index, shift_type in enumerate(rules.shift_types):
        where = f"Shift type {index} ({shift_type.label})"
        if shift_type.required_staff < 0:
            problems.append(f"{where}: required_staff must not be negative")
        if shift_type.min_days_off < 0:
            problems.append(f"{where}: min_days_off must not be negative")
        if shift_type.max_consecutive < 0:
            problems.append(f"{where}: max_consecutive must not be negative")
        if shift_type.active_days_of_week is not None:
            _check_mask(
                shift_type.active_days_of_week, f"{where}: active_days_of_week", problems
            )
        for other in sorted(shift_type.allow_same_day_with):
            if not 0 <= other < count:
                problems.append(
                    f"{where}: allow_same_day_with references unknown shift type {other}"
                )

    return problems


def ensure_valid_rule_set(rules: ScheduleRuleSet) -> None:
    """Raise RuleSetError listing every problem if ``rules`` is unusable."""
    problems = validate_rule_set(rules)
    if problems:
        raise RuleSetError(problems)
