"""Built-in rule sets and a sample roster."""

from datetime import time

from shiftroster.domain.models import ScheduleRuleSet, ShiftTypeDefinition, StaffMember


def default_rules() -> ScheduleRuleSet:
    """Day/night rotation: 36 h weeks, 12 h shifts, every day active."""
    return ScheduleRuleSet(
        target_hours_per_week=36,
        shift_duration_hours=12,
        shift_types=[
            ShiftTypeDefinition(
                label="Day Shift",
                start_time=time(7, 0),
                end_time=time(19, 0),
                required_staff=3,
                min_days_off=0,
                max_consecutive=4,
            ),
            ShiftTypeDefinition(
                label="Night Shift",
                start_time=time(19, 0),
                end_time=time(7, 0),
                required_staff=2,
                min_days_off=2,
                max_consecutive=0,
            ),
        ],
    )


def hospital_standard() -> ScheduleRuleSet:
    """Day/night with at most two days in a row and a recovery marker after nights."""
    return ScheduleRuleSet(
        target_hours_per_week=36,
        shift_duration_hours=12,
        shift_types=[
            ShiftTypeDefinition(
                label="Day Shift",
                abbreviation="D",
                start_time=time(7, 0),
                end_time=time(19, 0),
                required_staff=3,
                min_days_off=0,
                max_consecutive=2,
            ),
            ShiftTypeDefinition(
                label="Night Shift",
                abbreviation="N",
                start_time=time(19, 0),
                end_time=time(7, 0),
                required_staff=2,
                day_after_label="->",
                min_days_off=2,
                max_consecutive=0,
            ),
        ],
    )


def three_shift_rotation() -> ScheduleRuleSet:
    """Morning/afternoon/night, 8 h shifts; morning+afternoon and afternoon+night doubles."""
    return ScheduleRuleSet(
        target_hours_per_week=40,
        shift_duration_hours=8,
        shift_types=[
            ShiftTypeDefinition(
                label="Morning",
                start_time=time(6, 0),
                end_time=time(14, 0),
                required_staff=2,
                min_days_off=0,
                max_consecutive=5,
                allow_same_day_with={1},
            ),
            ShiftTypeDefinition(
                label="Afternoon",
                start_time=time(14, 0),
                end_time=time(22, 0),
                required_staff=2,
                min_days_off=0,
                max_consecutive=5,
                allow_same_day_with={2},
            ),
            ShiftTypeDefinition(
                label="Night",
                start_time=time(22, 0),
                end_time=time(6, 0),
                required_staff=2,
                min_days_off=2,
                max_consecutive=0,
            ),
        ],
    )


def weekday_only() -> ScheduleRuleSet:
    """Monday to Friday only (Sunday-first mask), day shift may double into night."""
    return ScheduleRuleSet(
        active_days_of_week=[False, True, True, True, True, True, False],
        target_hours_per_week=40,
        shift_duration_hours=8,
        shift_types=[
            ShiftTypeDefinition(
                label="Day Shift",
                start_time=time(9, 0),
                end_time=time(17, 0),
                required_staff=3,
                min_days_off=0,
                max_consecutive=5,
                allow_same_day_with={1},
            ),
            ShiftTypeDefinition(
                label="Night Shift",
                start_time=time(17, 0),
                end_time=time(1, 0),
                required_staff=1,
                min_days_off=1,
                max_consecutive=5,
            ),
        ],
    )


def flexible_doubles() -> ScheduleRuleSet:
    """Morning and evening 8 h shifts that may be worked back to back."""
    return ScheduleRuleSet(
        target_hours_per_week=40,
        shift_duration_hours=8,
        shift_types=[
            ShiftTypeDefinition(
                label="Morning",
                start_time=time(7, 0),
                end_time=time(15, 0),
                required_staff=2,
                min_days_off=0,
                max_consecutive=3,
                allow_same_day_with={1},
            ),
            ShiftTypeDefinition(
                label="Evening",
                start_time=time(15, 0),
                end_time=time(23, 0),
                required_staff=2,
                min_days_off=0,
                max_consecutive=3,
            ),
        ],
    )


RULE_PRESETS = {
    "default": default_rules,
    "hospital_standard": hospital_standard,
    "three_shift_rotation": three_shift_rotation,
    "weekday_only": weekday_only,
    "flexible_doubles": flexible_doubles,
}


def get_preset(name: str) -> ScheduleRuleSet:
    """Build a fresh copy of a named preset.

    Raises:
        KeyError: If no preset has that name.
    """
    try:
        factory = RULE_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown preset {name!r}; choose from {', '.join(sorted(RULE_PRESETS))}"
        ) from None
    return factory()


_SAMPLE_NAMES = [
    "Emma Johnson", "Michael Chen", "Sarah Williams", "James Martinez",
    "Olivia Brown", "David Garcia", "Sophia Rodriguez", "Daniel Kim",
    "Ava Patel", "Matthew Anderson", "Isabella Thompson", "Christopher Lee",
    "Mia Wilson", "Joshua Taylor", "Charlotte Davis",
]


def create_sample_roster(count: int = 15) -> list[StaffMember]:
    """Create a sample roster with zero-padded IDs (S001, S002, ...)."""
    roster = []
    for i in range(count):
        name = _SAMPLE_NAMES[i % len(_SAMPLE_NAMES)]
        if i >= len(_SAMPLE_NAMES):
            name = f"{name} {i // len(_SAMPLE_NAMES) + 1}"
        local = name.lower().replace(" ", ".")
        roster.append(
            StaffMember(
                id=f"S{i + 1:03d}",
                name=name,
                email=f"{local}@hospital.example",
            )
        )
    return roster
