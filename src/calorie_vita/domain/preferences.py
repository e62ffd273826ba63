"""User preference models."""

from dataclasses import dataclass
from enum import StrEnum

KJ_PER_KCAL = 4.184


class CalorieUnit(StrEnum):
    """Energy units a user can display calories in."""

    KCAL = "kcal"
    KJ = "kJ"

    @property
    def factor(self) -> float:
        """Number of display units per kilocalorie."""
        if self is CalorieUnit.KJ:
            return KJ_PER_KCAL
        return 1.0


@dataclass(frozen=True)
class UserPreferences:
    """Display preferences for a user."""

    calorie_unit: CalorieUnit = CalorieUnit.KCAL
