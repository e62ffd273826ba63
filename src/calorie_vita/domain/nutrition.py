"""Nutrition domain models."""

from dataclasses import dataclass
from enum import StrEnum


class Grade(StrEnum):
    """Letter grades for food health, best to worst."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


class GradeColor(StrEnum):
    """Semantic colour tokens the client maps onto its theme."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ACCENT = "accent"
    ERROR = "error"


@dataclass(frozen=True)
class NutritionSample:
    """Nutrition values for one logged portion of food."""

    food_name: str
    weight_grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0

    def scaled(self, factor: float) -> "NutritionSample":
        """Return the same food with weight and nutrients multiplied by factor."""
        return NutritionSample(
            food_name=self.food_name,
            weight_grams=self.weight_grams * factor,
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
            fiber=self.fiber * factor,
            sugar=self.sugar * factor,
        )


@dataclass(frozen=True)
class HealthGrade:
    """Derived health rating for a nutrition sample."""

    grade: Grade
    label: str
    score: float
    color: GradeColor
