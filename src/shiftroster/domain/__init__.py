"""Domain models and business rules for scheduling."""

from shiftroster.domain.models import (
    EligibilityResult,
    FairnessMetrics,
    Schedule,
    ScheduleHistory,
    ScheduleRuleSet,
    ShiftInstance,
    ShiftTypeDefinition,
    StaffMember,
    StaffStats,
    UnavailabilityConstraint,
)
from shiftroster.domain.policies import DefaultFairnessPolicy, FairnessPolicy
from shiftroster.domain.presets import (
    RULE_PRESETS,
    create_sample_roster,
    default_rules,
    get_preset,
)

__all__ = [
    # Models
    "EligibilityResult",
    "FairnessMetrics",
    "Schedule",
    "ScheduleHistory",
    "ScheduleRuleSet",
    "ShiftInstance",
    "ShiftTypeDefinition",
    "StaffMember",
    "StaffStats",
    "UnavailabilityConstraint",
    # Policies
    "DefaultFairnessPolicy",
    "FairnessPolicy",
    # Presets
    "RULE_PRESETS",
    "create_sample_roster",
    "default_rules",
    "get_preset",
]
