"""Policy definitions for assignment fairness.

The assignment engine ranks eligible staff using a handful of tuning
constants. They are kept in a policy object, separate from the engine, so
they can be tested independently and adjusted without touching the ranking
algorithm.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class FairnessPolicy(ABC):
    """Abstract base class for fairness ranking policies."""

    @abstractmethod
    def hours_gap_threshold(self) -> float:
        """Hours-deficit gap above which hours decide the ranking."""
        pass

    @abstractmethod
    def type_gap_threshold(self) -> float:
        """Type-deficit gap above which shift-type balance decides the ranking."""
        pass

    @abstractmethod
    def new_staff_type_bonus(self) -> float:
        """Type-deficit score given to staff with no shifts yet."""
        pass

    @abstractmethod
    def variety_lookback_days(self) -> int:
        """Trailing days of shifts used to measure who worked together."""
        pass


@dataclass
class DefaultFairnessPolicy(FairnessPolicy):
    """Default fairness policy.

    Rules:
    - An hours-deficit gap larger than 12 hours (one shift) decides the order
    - Otherwise a shift-type deficit gap larger than 3 points decides it
    - Staff with no shifts so far get a type-deficit score of 10
    - Pairings are counted over the trailing 7 days
    """

    hours_gap: float = 12.0
    type_gap: float = 3.0
    new_staff_bonus: float = 10.0
    lookback_days: int = 7

    def hours_gap_threshold(self) -> float:
        return self.hours_gap

    def type_gap_threshold(self) -> float:
        return self.type_gap

    def new_staff_type_bonus(self) -> float:
        return self.new_staff_bonus

    def variety_lookback_days(self) -> int:
        return self.lookback_days
