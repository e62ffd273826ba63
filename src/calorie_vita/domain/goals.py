"""Goal domain models."""

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

DEFAULT_CALORIE_GOAL = 2000


@dataclass(frozen=True)
class MacroAllocation:
    """Daily calorie targets per macronutrient."""

    carbs_calories: int
    protein_calories: int
    fat_calories: int

    @property
    def total_calories(self) -> int:
        return self.carbs_calories + self.protein_calories + self.fat_calories


@dataclass(frozen=True)
class UserGoals:
    """A user's daily targets. Energy values are stored in kcal."""

    calorie_goal: int = DEFAULT_CALORIE_GOAL
    macro_goals: MacroAllocation | None = None
    weight_goal: float | None = None
    bmi_goal: float | None = None
    water_glasses_goal: int | None = None
    steps_per_day_goal: int | None = None
    last_updated: datetime | None = None

    def with_updates(self, **changes: object) -> "UserGoals":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class GoalsChanged:
    """Goals saved for a user."""

    user_id: UUID
    goals: UserGoals
