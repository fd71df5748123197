"""JSON import and export for rule sets and rosters.

Rule sets use the same camelCase layout as the rules editor export, e.g.::

    {
      "activeDaysOfWeek": [true, true, true, true, true, true, true],
      "targetHoursPerWeek": 36,
      "shiftDurationHours": 12,
      "shiftStartTimes": [
        {"label": "Day Shift", "startTime": "07:00", "endTime": "19:00",
         "requiredStaff": 3, "minDaysOff": 0, "maxConsecutive": 4,
         "allowSameDayWith": []}
      ]
    }

Rosters are a list of ``{"id", "name", "email", "unavailable": [{"date", "reason"}]}``.

Anything malformed is reported as ConfigError here, before it can reach
the scheduling engine.
"""

import json
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Optional, Union

from shiftroster.domain.models import (
    ScheduleRuleSet,
    ShiftTypeDefinition,
    StaffMember,
    UnavailabilityConstraint,
)


class ConfigError(ValueError):
    """Raised when imported configuration cannot be parsed."""


def _parse_time(value: Any, field_name: str) -> time:
    try:
        return datetime.strptime(str(value), "%H:%M").time()
    except ValueError:
        raise ConfigError(f"{field_name} must be HH:MM, got {value!r}") from None


def _parse_date(value: Any, field_name: str) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"{field_name} must be YYYY-MM-DD, got {value!r}") from None


def _parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a whole number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigError(f"{field_name} must be a whole number, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{field_name} must be a whole number, got {value!r}") from None


def _parse_mask(value: Any, field_name: str) -> Optional[list[bool]]:
    if value is None:
        return None
    # The editor sometimes exports the mask as {"0": true, "1": false, ...}
    if isinstance(value, dict):
        keys = list(value)
        if not all(isinstance(k, str) and k.isdigit() for k in keys):
            raise ConfigError(f"{field_name} keys must be day indices 0-6")
        if sorted(int(k) for k in keys) != list(range(7)):
            raise ConfigError(f"{field_name} keys must be day indices 0-6")
        value = [value[k] for k in sorted(keys, key=int)]
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list of 7 booleans")
    for v in value:
        if not isinstance(v, bool):
            raise ConfigError(f"{field_name} must contain booleans, got {v!r}")
    return list(value)


def _require(data: dict, key: str, where: str) -> Any:
    if key not in data:
        raise ConfigError(f"{where}: missing required key {key!r}")
    return data[key]


def shift_type_from_dict(data: dict, index: int = 0) -> ShiftTypeDefinition:
    """Build a ShiftTypeDefinition from its JSON form."""
    where = f"shiftStartTimes[{index}]"
    if not isinstance(data, dict):
        raise ConfigError(f"{where} must be an object")
    try:
        return ShiftTypeDefinition(
            label=str(_require(data, "label", where)),
            abbreviation=data.get("abbreviation") or None,
            start_time=_parse_time(_require(data, "startTime", where), f"{where}.startTime"),
            end_time=_parse_time(_require(data, "endTime", where), f"{where}.endTime"),
            required_staff=_parse_int(
                _require(data, "requiredStaff", where), f"{where}.requiredStaff"
            ),
            day_after_label=data.get("dayAfterLabel") or None,
            active_days_of_week=_parse_mask(
                data.get("activeDaysOfWeek"), f"{where}.activeDaysOfWeek"
            ),
            min_days_off=_parse_int(data.get("minDaysOff", 0), f"{where}.minDaysOff"),
            max_consecutive=_parse_int(
                data.get("maxConsecutive", 0), f"{where}.maxConsecutive"
            ),
            allow_same_day_with={
                _parse_int(i, f"{where}.allowSameDayWith")
                for i in data.get("allowSameDayWith", [])
            },
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"{where}: {exc}") from exc


def shift_type_to_dict(shift_type: ShiftTypeDefinition) -> dict:
    """Convert a ShiftTypeDefinition to its JSON form."""
    data: dict[str, Any] = {
        "label": shift_type.label,
        "startTime": shift_type.start_time.strftime("%H:%M"),
        "endTime": shift_type.end_time.strftime("%H:%M"),
        "requiredStaff": shift_type.required_staff,
        "minDaysOff": shift_type.min_days_off,
        "maxConsecutive": shift_type.max_consecutive,
        "allowSameDayWith": sorted(shift_type.allow_same_day_with),
    }
    if shift_type.abbreviation:
        data["abbreviation"] = shift_type.abbreviation
    if shift_type.day_after_label:
        data["dayAfterLabel"] = shift_type.day_after_label
    if shift_type.active_days_of_week is not None:
        data["activeDaysOfWeek"] = list(shift_type.active_days_of_week)
    return data


def rule_set_from_dict(data: dict) -> ScheduleRuleSet:
    """Build a ScheduleRuleSet from its JSON form.

    Raises:
        ConfigError: If keys are missing or values have the wrong shape.
    """
    if not isinstance(data, dict):
        raise ConfigError("Rule set must be a JSON object")

    shift_entries = _require(data, "shiftStartTimes", "rules")
    if not isinstance(shift_entries, list):
        raise ConfigError("shiftStartTimes must be a list")

    try:
        target = float(_require(data, "targetHoursPerWeek", "rules"))
        duration = float(_require(data, "shiftDurationHours", "rules"))
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"rules: {exc}") from exc

    mask = _parse_mask(data.get("activeDaysOfWeek", [True] * 7), "activeDaysOfWeek")
    return ScheduleRuleSet(
        shift_types=[
            shift_type_from_dict(entry, index) for index, entry in enumerate(shift_entries)
        ],
        active_days_of_week=mask,
        target_hours_per_week=target,
        shift_duration_hours=duration,
    )


def rule_set_to_dict(rules: ScheduleRuleSet) -> dict:
    """Convert a ScheduleRuleSet to its JSON form."""
    return {
        "activeDaysOfWeek": list(rules.active_days_of_week),
        "targetHoursPerWeek": rules.target_hours_per_week,
        "shiftDurationHours": rules.shift_duration_hours,
        "shiftStartTimes": [shift_type_to_dict(st) for st in rules.shift_types],
    }


def rule_set_to_json(rules: ScheduleRuleSet) -> str:
    return json.dumps(rule_set_to_dict(rules), indent=2)


def rule_set_from_json(text: str) -> ScheduleRuleSet:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON format: {exc}") from exc
    return rule_set_from_dict(data)


def load_rule_set(path: Union[str, Path]) -> ScheduleRuleSet:
    """Read a rule set from a JSON file."""
    return rule_set_from_json(Path(path).read_text())


def save_rule_set(rules: ScheduleRuleSet, path: Union[str, Path]) -> None:
    Path(path).write_text(rule_set_to_json(rules) + "\n")


def staff_from_dict(data: dict, index: int = 0) -> StaffMember:
    """Build a StaffMember from its JSON form."""
    where = f"roster[{index}]"
    if not isinstance(data, dict):
        raise ConfigError(f"{where} must be an object")

    entries = data.get("unavailable", [])
    if not isinstance(entries, list):
        raise ConfigError(f"{where}.unavailable must be a list")

    constraints = []
    for i, entry in enumerate(entries):
        if isinstance(entry, str):
            entry = {"date": entry}
        if not isinstance(entry, dict):
            raise ConfigError(f"{where}.unavailable[{i}] must be an object or date string")
        constraints.append(
            UnavailabilityConstraint(
                date=_parse_date(
                    _require(entry, "date", f"{where}.unavailable[{i}]"),
                    f"{where}.unavailable[{i}].date",
                ),
                reason=entry.get("reason"),
            )
        )

    return StaffMember(
        id=str(_require(data, "id", where)),
        name=str(_require(data, "name", where)),
        email=data.get("email"),
        constraints=constraints,
    )


def staff_to_dict(staff: StaffMember) -> dict:
    data: dict[str, Any] = {"id": staff.id, "name": staff.name}
    if staff.email:
        data["email"] = staff.email
    if staff.constraints:
        data["unavailable"] = [
            {"date": c.date.isoformat(), **({"reason": c.reason} if c.reason else {})}
            for c in staff.constraints
        ]
    return data


def roster_from_dicts(entries: list) -> list[StaffMember]:
    """Build a roster, rejecting duplicate staff IDs.

    Raises:
        ConfigError: If an entry is malformed or an ID repeats.
    """
    if not isinstance(entries, list):
        raise ConfigError("Roster must be a JSON list")
    roster = [staff_from_dict(entry, index) for index, entry in enumerate(entries)]

    seen: set[str] = set()
    for staff in roster:
        if staff.id in seen:
            raise ConfigError(f"Duplicate staff id {staff.id!r} in roster")
        seen.add(staff.id)
    return roster


def roster_to_dicts(roster: list[StaffMember]) -> list[dict]:
    return [staff_to_dict(staff) for staff in roster]


def load_roster(path: Union[str, Path]) -> list[StaffMember]:
    """Read a roster from a JSON file."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON format in {path}: {exc}") from exc
    return roster_from_dicts(data)


def save_roster(roster: list[StaffMember], path: Union[str, Path]) -> None:
    Path(path).write_text(json.dumps(roster_to_dicts(roster), indent=2) + "\n")
