"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_vita.domain.goals import MacroAllocation, UserGoals
from calorie_vita.services.goals import GoalsRepository

_COLUMNS = (
    "calorie_goal, carbs_calories, protein_calories, fat_calories, weight_goal, "
    "bmi_goal, water_glasses_goal, steps_per_day_goal, updated_at"
)


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for goal persistence."""

    client: Client

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return stored goals for a user."""
        response = (
            self.client.table("user_goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_goals(response.data[0])

    def save_goals(self, user_id: UUID, goals: UserGoals) -> None:
        """Upsert the goals row for a user."""
        macros = goals.macro_goals
        self.client.table("user_goals").upsert(
            {
                "user_id": str(user_id),
                "calorie_goal": goals.calorie_goal,
                "carbs_calories": macros.carbs_calories if macros else None,
                "protein_calories": macros.protein_calories if macros else None,
                "fat_calories": macros.fat_calories if macros else None,
                "weight_goal": goals.weight_goal,
                "bmi_goal": goals.bmi_goal,
                "water_glasses_goal": goals.water_glasses_goal,
                "steps_per_day_goal": goals.steps_per_day_goal,
                "updated_at": goals.last_updated.isoformat()
                if goals.last_updated
                else None,
            },
            on_conflict="user_id",
        ).execute()


def _row_to_goals(row: dict[str, object]) -> UserGoals:
    macros = None
    if row.get("carbs_calories") is not None:
        macros = MacroAllocation(
            carbs_calories=int(row["carbs_calories"]),
            protein_calories=int(row.get("protein_calories") or 0),
            fat_calories=int(row.get("fat_calories") or 0),
        )
    updated_at = row.get("updated_at")
    return UserGoals(
        calorie_goal=int(row["calorie_goal"]),
        macro_goals=macros,
        weight_goal=_optional_float(row.get("weight_goal")),
        bmi_goal=_optional_float(row.get("bmi_goal")),
        water_glasses_goal=_optional_int(row.get("water_glasses_goal")),
        steps_per_day_goal=_optional_int(row.get("steps_per_day_goal")),
        last_updated=datetime.fromisoformat(updated_at) if updated_at else None,
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)


def _optional_int(value: object) -> int | None:
    return None if value is None else int(value)
