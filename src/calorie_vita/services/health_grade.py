"""Health grading of nutrition samples.

Scores are computed on per-100 g densities so the grade does not depend on
portion size. The score starts at 100 and is adjusted by calorie, sugar,
fiber, protein and fat bands plus the share of carbohydrates that are sugar.
It is not clamped: bonuses can lift it above 100 and penalties can take it
below 0 before it is bucketed into a letter grade.
"""

from dataclasses import dataclass

from calorie_vita.domain.nutrition import Grade, GradeColor, HealthGrade, NutritionSample

BASE_SCORE = 100.0
REFERENCE_GRAMS = 100.0

# (threshold, adjustment) pairs, checked in order; the first value strictly
# above the threshold wins.
_CALORIE_BANDS = ((500.0, -20.0), (400.0, -15.0), (300.0, -10.0))
_LOW_CALORIE_LIMIT = 50.0
_LOW_CALORIE_BONUS = 5.0
_SUGAR_BANDS = ((30.0, -25.0), (20.0, -15.0), (10.0, -8.0))
_FIBER_BANDS = ((5.0, 15.0), (3.0, 10.0), (1.0, 5.0))
_PROTEIN_BANDS = ((15.0, 10.0), (10.0, 5.0))
_FAT_BANDS = ((30.0, -15.0), (20.0, -8.0))
_SUGAR_RATIO_BANDS = ((50.0, -10.0), (30.0, -5.0))

_GRADE_THRESHOLDS = (
    (85.0, Grade.A, "Excellent", GradeColor.SUCCESS),
    (70.0, Grade.B, "Good", GradeColor.INFO),
    (55.0, Grade.C, "Average", GradeColor.WARNING),
    (40.0, Grade.D, "Below Average", GradeColor.ACCENT),
)
_LOWEST_GRADE = (Grade.E, "Unhealthy", GradeColor.ERROR)


@dataclass(frozen=True)
class NutrientDensity:
    """Nutrient values normalised to a 100 g portion."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float

    @classmethod
    def from_sample(cls, sample: NutritionSample) -> "NutrientDensity":
        """Normalise a sample, treating a non-positive weight as 100 g."""
        weight = sample.weight_grams if sample.weight_grams > 0 else REFERENCE_GRAMS
        return cls(
            calories=sample.calories / weight * REFERENCE_GRAMS,
            protein=sample.protein / weight * REFERENCE_GRAMS,
            carbs=sample.carbs / weight * REFERENCE_GRAMS,
            fat=sample.fat / weight * REFERENCE_GRAMS,
            fiber=sample.fiber / weight * REFERENCE_GRAMS,
            sugar=sample.sugar / weight * REFERENCE_GRAMS,
        )


def compute_health_grade(sample: NutritionSample) -> HealthGrade:
    """Grade a nutrition sample from A (excellent) to E (unhealthy)."""
    return grade_for_score(compute_health_score(sample))


def compute_health_score(sample: NutritionSample) -> float:
    """Return the raw, unclamped health score for a sample."""
    density = NutrientDensity.from_sample(sample)
    score = BASE_SCORE

    calorie_adjustment = _band_adjustment(density.calories, _CALORIE_BANDS)
    if calorie_adjustment:
        score += calorie_adjustment
    elif density.calories < _LOW_CALORIE_LIMIT:
        score += _LOW_CALORIE_BONUS

    score += _band_adjustment(density.sugar, _SUGAR_BANDS)
    score += _band_adjustment(density.fiber, _FIBER_BANDS)
    score += _band_adjustment(density.protein, _PROTEIN_BANDS)
    score += _band_adjustment(density.fat, _FAT_BANDS)

    if density.carbs > 0:
        sugar_ratio = density.sugar / density.carbs * 100
        score += _band_adjustment(sugar_ratio, _SUGAR_RATIO_BANDS)
    return score


def grade_for_score(score: float) -> HealthGrade:
    """Bucket a raw score into a letter grade; thresholds are inclusive."""
    for threshold, grade, label, color in _GRADE_THRESHOLDS:
        if score >= threshold:
            return HealthGrade(grade=grade, label=label, score=score, color=color)
    grade, label, color = _LOWEST_GRADE
    return HealthGrade(grade=grade, label=label, score=score, color=color)


def _band_adjustment(value: float, bands: tuple[tuple[float, float], ...]) -> float:
    for threshold, adjustment in bands:
        if value > threshold:
            return adjustment
    return 0.0
