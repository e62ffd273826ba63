"""Goal editing and persistence."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from calorie_vita.domain.goals import (
    DEFAULT_CALORIE_GOAL,
    GoalsChanged,
    MacroAllocation,
    UserGoals,
)
from calorie_vita.services.macros import allocate_macros, read_calorie_goal, round_half_up
from calorie_vita.services.notifier import GoalsNotifier
from calorie_vita.services.units import CalorieUnitConverter

_logger = logging.getLogger(__name__)


class GoalsRepository(Protocol):
    """Persistence interface for user goals."""

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return stored goals for a user, if any."""

    def save_goals(self, user_id: UUID, goals: UserGoals) -> None:
        """Create or replace the goals for a user."""


@dataclass
class GoalsEditor:
    """State of the goals form: calorie field plus three macro fields.

    Values are held in the display unit. Changing the calorie field always
    reallocates the macro fields, even when the user edited them by hand;
    ``macros_edited_by_user`` reports whether such edits were overwritten.
    """

    converter: CalorieUnitConverter = field(default_factory=CalorieUnitConverter)
    calorie_text: str = ""
    carbs_calories: int = 0
    protein_calories: int = 0
    fat_calories: int = 0
    macros_edited_by_user: bool = False
    overwritten_manual_edits: int = 0

    @classmethod
    def from_goals(
        cls, goals: UserGoals, converter: CalorieUnitConverter | None = None
    ) -> "GoalsEditor":
        """Populate the form from stored goals."""
        editor = cls(converter=converter or CalorieUnitConverter())
        editor.calorie_text = editor.converter.format_short(goals.calorie_goal)
        macros = goals.macro_goals or allocate_macros(goals.calorie_goal)
        editor._show_macros(macros)
        return editor

    def set_calorie_text(self, text: str) -> MacroAllocation:
        """Update the calorie field and recalculate the macro fields."""
        self.calorie_text = text
        return self.recalculate_macros()

    def recalculate_macros(self) -> MacroAllocation:
        """Reallocate macros from the current calorie field."""
        macros = allocate_macros(self._calorie_goal_kcal())
        if self.macros_edited_by_user:
            self.overwritten_manual_edits += 1
            _logger.info("Calorie change overwrote manually edited macro goals")
        self._show_macros(macros)
        self.macros_edited_by_user = False
        return macros

    def set_macros(
        self,
        carbs_calories: int | None = None,
        protein_calories: int | None = None,
        fat_calories: int | None = None,
    ) -> None:
        """Apply manual edits to the macro fields (display unit)."""
        if carbs_calories is not None:
            self.carbs_calories = carbs_calories
        if protein_calories is not None:
            self.protein_calories = protein_calories
        if fat_calories is not None:
            self.fat_calories = fat_calories
        self.macros_edited_by_user = True

    def calorie_goal_kcal(self) -> int:
        """Return the calorie field as a kcal goal."""
        return round_half_up(self._calorie_goal_kcal())

    def macro_goals_kcal(self) -> MacroAllocation:
        """Return the macro fields converted to kcal."""
        return MacroAllocation(
            carbs_calories=round_half_up(self.converter.to_kcal(self.carbs_calories)),
            protein_calories=round_half_up(self.converter.to_kcal(self.protein_calories)),
            fat_calories=round_half_up(self.converter.to_kcal(self.fat_calories)),
        )

    def _calorie_goal_kcal(self) -> float:
        display_goal = read_calorie_goal(self.calorie_text)
        if display_goal is None:
            return float(DEFAULT_CALORIE_GOAL)
        return self.converter.to_kcal(display_goal)

    def _show_macros(self, macros: MacroAllocation) -> None:
        self.carbs_calories = round_half_up(self.converter.from_kcal(macros.carbs_calories))
        self.protein_calories = round_half_up(
            self.converter.from_kcal(macros.protein_calories)
        )
        self.fat_calories = round_half_up(self.converter.from_kcal(macros.fat_calories))


@dataclass
class GoalUpdate:
    """Goal changes entered in the display unit. Unset fields are kept."""

    calorie_goal: float | str | None = None
    carbs_calories: float | None = None
    protein_calories: float | None = None
    fat_calories: float | None = None
    weight_goal: float | None = None
    bmi_goal: float | None = None
    water_glasses_goal: int | None = None
    steps_per_day_goal: int | None = None


@dataclass
class GoalsService:
    """Application service for loading, updating and broadcasting goals."""

    repository: GoalsRepository
    notifier: GoalsNotifier
    default_calorie_goal: int = DEFAULT_CALORIE_GOAL

    def default_goals(self) -> UserGoals:
        """Goals for a user who has not set any."""
        return UserGoals(
            calorie_goal=self.default_calorie_goal,
            macro_goals=allocate_macros(self.default_calorie_goal),
        )

    def get_goals(self, user_id: UUID) -> UserGoals:
        """Return stored goals, creating defaults when none exist."""
        goals = self.repository.get_goals(user_id)
        if goals is not None:
            return goals
        goals = self.default_goals().with_updates(last_updated=datetime.now(tz=UTC))
        self.repository.save_goals(user_id, goals)
        _logger.info("Created default goals for user %s", user_id)
        return goals

    def update_goals(
        self,
        user_id: UUID,
        update: GoalUpdate,
        converter: CalorieUnitConverter | None = None,
    ) -> UserGoals:
        """Apply an update, persist it and notify subscribers.

        A new calorie goal reallocates all three macro goals; explicit macro
        values in the same update are applied on top of that allocation.
        """
        converter = converter or CalorieUnitConverter()
        current = self.get_goals(user_id)
        editor = GoalsEditor.from_goals(current, converter)
        if update.calorie_goal is not None:
            editor.set_calorie_text(str(update.calorie_goal))
        if any(
            value is not None
            for value in (
                update.carbs_calories,
                update.protein_calories,
                update.fat_calories,
            )
        ):
            editor.set_macros(
                carbs_calories=_optional_int(update.carbs_calories),
                protein_calories=_optional_int(update.protein_calories),
                fat_calories=_optional_int(update.fat_calories),
            )

        goals = current.with_updates(
            calorie_goal=editor.calorie_goal_kcal(),
            macro_goals=editor.macro_goals_kcal(),
            weight_goal=_first_set(update.weight_goal, current.weight_goal),
            bmi_goal=_first_set(update.bmi_goal, current.bmi_goal),
            water_glasses_goal=_first_set(
                update.water_glasses_goal, current.water_glasses_goal
            ),
            steps_per_day_goal=_first_set(
                update.steps_per_day_goal, current.steps_per_day_goal
            ),
            last_updated=datetime.now(tz=UTC),
        )
        self.repository.save_goals(user_id, goals)
        self.notifier.publish(GoalsChanged(user_id=user_id, goals=goals))
        return goals


def _optional_int(value: float | None) -> int | None:
    return None if value is None else round_half_up(value)


def _first_set(value: object, fallback: object) -> object:
    return fallback if value is None else value
