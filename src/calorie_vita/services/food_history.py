"""Food history logging and daily aggregation."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_vita.domain.food_history import (
    DailyNutritionTotals,
    DailyProgress,
    FoodEntryDetail,
    FoodHistoryEntry,
    FoodSource,
)
from calorie_vita.domain.goals import GoalsChanged, UserGoals
from calorie_vita.domain.nutrition import NutritionSample
from calorie_vita.services.goals import GoalsService
from calorie_vita.services.health_grade import compute_health_grade
from calorie_vita.services.macros import (
    KCAL_PER_GRAM_CARBS,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_PROTEIN,
)


class FoodHistoryRepository(Protocol):
    """Persistence interface for food history entries."""

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
        """Store a food entry and return it."""

    def get_entry(self, entry_id: UUID) -> FoodHistoryEntry | None:
        """Return a single entry."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodHistoryEntry]:
        """Return entries logged within a time range."""

    def list_recent_entries(self, user_id: UUID, limit: int) -> list[FoodHistoryEntry]:
        """Return the most recent entries, newest first."""


@dataclass
class FoodHistoryService:
    """Service for the user's food log.

    Subscribed to goal changes so daily progress uses goals saved in this
    process without another repository read.
    """

    repository: FoodHistoryRepository
    goals_service: GoalsService
    _goals_by_user: dict[UUID, UserGoals] = field(
        default_factory=dict, init=False, repr=False
    )

    def on_goals_changed(self, event: GoalsChanged) -> None:
        """Remember the goals a user just saved."""
        self._goals_by_user[event.user_id] = event.goals

    def log_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        sample: NutritionSample,
        source: FoodSource = FoodSource.MANUAL_ENTRY,
        logged_at: datetime | None = None,
        brand: str | None = None,
        category: str | None = None,
        notes: str | None = None,
    ) -> FoodHistoryEntry:
        """Record a food entry."""
        _validate_sample(sample)
        return self.repository.create_entry(
            user_id=user_id,
            sample=sample,
            source=source,
            logged_at=logged_at or datetime.now(tz=UTC),
            brand=brand,
            category=category,
            notes=notes,
        )

    def get_entry(self, entry_id: UUID) -> FoodHistoryEntry | None:
        return self.repository.get_entry(entry_id)

    def get_entry_detail(self, entry_id: UUID) -> FoodEntryDetail | None:
        """Return an entry with its health grade."""
        entry = self.repository.get_entry(entry_id)
        if entry is None:
            return None
        return FoodEntryDetail(entry=entry, health_grade=compute_health_grade(entry.sample))

    def list_recent(self, user_id: UUID, limit: int = 20) -> list[FoodHistoryEntry]:
        return self.repository.list_recent_entries(user_id, limit)

    def get_daily_totals(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> DailyNutritionTotals:
        """Sum a user's entries for a local day."""
        tz = ZoneInfo(timezone_name)
        start = datetime(day.year, day.month, day.day, tzinfo=tz)
        end = start + timedelta(days=1)
        entries = self.repository.list_entries(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return aggregate_day(day, entries, tz)

    def get_daily_progress(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> DailyProgress:
        """Compare a day's totals with the user's goals."""
        totals = self.get_daily_totals(user_id, day, timezone_name)
        goals = self._goals_by_user.get(user_id)
        if goals is None:
            goals = self.goals_service.get_goals(user_id)
        macros = goals.macro_goals
        return DailyProgress(
            totals=totals,
            calories_goal=goals.calorie_goal,
            calories_remaining=goals.calorie_goal - totals.calories,
            carbs_calories_consumed=totals.carbs * KCAL_PER_GRAM_CARBS,
            protein_calories_consumed=totals.protein * KCAL_PER_GRAM_PROTEIN,
            fat_calories_consumed=totals.fat * KCAL_PER_GRAM_FAT,
            carbs_calories_goal=macros.carbs_calories if macros else None,
            protein_calories_goal=macros.protein_calories if macros else None,
            fat_calories_goal=macros.fat_calories if macros else None,
        )


def aggregate_day(
    day: date, entries: list[FoodHistoryEntry], tz: ZoneInfo
) -> DailyNutritionTotals:
    """Sum the entries that fall on ``day`` in the given time zone."""
    total = DailyNutritionTotals(day=day)
    for entry in entries:
        if entry.logged_at.astimezone(tz).date() != day:
            continue
        sample = entry.sample
        total = DailyNutritionTotals(
            day=day,
            calories=total.calories + sample.calories,
            protein=total.protein + sample.protein,
            carbs=total.carbs + sample.carbs,
            fat=total.fat + sample.fat,
            fiber=total.fiber + sample.fiber,
            sugar=total.sugar + sample.sugar,
            entry_count=total.entry_count + 1,
        )
    return total


def _validate_sample(sample: NutritionSample) -> None:
    if sample.weight_grams <= 0:
        raise ValueError("weight_grams must be positive")
    nutrients = {
        "calories": sample.calories,
        "protein": sample.protein,
        "carbs": sample.carbs,
        "fat": sample.fat,
        "fiber": sample.fiber,
        "sugar": sample.sugar,
    }
    for name, value in nutrients.items():
        if value < 0:
            raise ValueError(f"{name} must not be negative")
