"""Food history domain models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from calorie_vita.domain.nutrition import HealthGrade, NutritionSample


class FoodSource(StrEnum):
    """Where a logged food entry came from."""

    CAMERA_SCAN = "camera_scan"
    BARCODE_SCAN = "barcode_scan"
    MANUAL_ENTRY = "manual_entry"


@dataclass(frozen=True)
class FoodHistoryEntry:
    """A food entry stored in a user's history."""

    id: UUID
    user_id: UUID
    sample: NutritionSample
    source: FoodSource
    logged_at: datetime
    brand: str | None = None
    category: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class FoodEntryDetail:
    """A history entry together with its health grade."""

    entry: FoodHistoryEntry
    health_grade: HealthGrade


@dataclass(frozen=True)
class DailyNutritionTotals:
    """Summed nutrition for one local day."""

    day: date
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    entry_count: int = 0


@dataclass(frozen=True)
class DailyProgress:
    """Daily totals measured against the user's goals."""

    totals: DailyNutritionTotals
    calories_goal: int
    calories_remaining: float
    carbs_calories_consumed: float
    protein_calories_consumed: float
    fat_calories_consumed: float
    carbs_calories_goal: int | None
    protein_calories_goal: int | None
    fat_calories_goal: int | None
