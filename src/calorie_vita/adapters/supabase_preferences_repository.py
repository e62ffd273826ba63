"""Supabase repository for user preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_vita.domain.preferences import CalorieUnit, UserPreferences
from calorie_vita.services.preferences import PreferencesRepository


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for user preferences."""

    client: Client

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        response = (
            self.client.table("user_preferences")
            .select("calorie_unit")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        raw_unit = response.data[0].get("calorie_unit")
        try:
            unit = CalorieUnit(raw_unit)
        except ValueError:
            unit = CalorieUnit.KCAL
        return UserPreferences(calorie_unit=unit)

    def save_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        self.client.table("user_preferences").upsert(
            {
                "user_id": str(user_id),
                "calorie_unit": preferences.calorie_unit.value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
