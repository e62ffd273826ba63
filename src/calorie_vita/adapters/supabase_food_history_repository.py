"""Supabase repository for food history entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_vita.domain.food_history import FoodHistoryEntry, FoodSource
from calorie_vita.domain.nutrition import NutritionSample
from calorie_vita.services.food_history import FoodHistoryRepository

_COLUMNS = (
    "id, user_id, food_name, weight_grams, calories, protein, carbs, fat, fiber, "
    "sugar, source, logged_at, brand, category, notes"
)


@dataclass
class SupabaseFoodHistoryRepository(FoodHistoryRepository):
    """Supabase implementation for the food log."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        sample: NutritionSample,
        source: FoodSource,
        logged_at: datetime,
        brand: str | None,
        category: str | None,
        notes: str | None,
    ) -> FoodHistoryEntry:
        """Insert an entry and return the stored row."""
        response = (
            self.client.table("food_history")
            .insert(
                {
                    "user_id": str(user_id),
                    "food_name": sample.food_name,
                    "weight_grams": sample.weight_grams,
                    "calories": sample.calories,
                    "protein": sample.protein,
                    "carbs": sample.carbs,
                    "fat": sample.fat,
                    "fiber": sample.fiber,
                    "sugar": sample.sugar,
                    "source": source.value,
                    "logged_at": logged_at.isoformat(),
                    "brand": brand,
                    "category": category,
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food history entry in Supabase")
        return _row_to_entry(response.data[0])

    def get_entry(self, entry_id: UUID) -> FoodHistoryEntry | None:
        response = (
            self.client.table("food_history")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_entry(response.data[0])

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodHistoryEntry]:
        response = (
            self.client.table("food_history")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at")
            .execute()
        )
        return [_row_to_entry(row) for row in response.data or []]

    def list_recent_entries(self, user_id: UUID, limit: int) -> list[FoodHistoryEntry]:
        response = (
            self.client.table("food_history")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_entry(row) for row in response.data or []]


def _row_to_entry(row: dict[str, object]) -> FoodHistoryEntry:
    sample = NutritionSample(
        food_name=str(row.get("food_name") or ""),
        weight_grams=float(row.get("weight_grams") or 0.0),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
        sugar=float(row.get("sugar") or 0.0),
    )
    return FoodHistoryEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        sample=sample,
        source=FoodSource(row.get("source") or FoodSource.MANUAL_ENTRY),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        brand=row.get("brand"),
        category=row.get("category"),
        notes=row.get("notes"),
    )
