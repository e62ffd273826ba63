"""Tests for health grading."""

import pytest

from calorie_vita.domain.nutrition import Grade, GradeColor, NutritionSample
from calorie_vita.services.health_grade import (
    NutrientDensity,
    compute_health_grade,
    compute_health_score,
    grade_for_score,
)


def _sample(**overrides: float) -> NutritionSample:
    values: dict[str, float] = {
        "weight_grams": 100,
        "calories": 200,
        "protein": 0,
        "carbs": 0,
        "fat": 0,
        "fiber": 0,
        "sugar": 0,
    }
    values.update(overrides)
    return NutritionSample(food_name="test food", **values)


def test_sugary_snack_scores_below_average() -> None:
    sample = _sample(calories=600, protein=5, carbs=80, sugar=40, fiber=0, fat=10)

    grade = compute_health_grade(sample)

    # calories -20, sugar -25, a 50% sugar ratio still hits the >30 band (-5)
    assert grade.score == 50
    assert grade.grade is Grade.D
    assert grade.label == "Below Average"
    assert grade.color is GradeColor.ACCENT


def test_average_grade_without_ratio_penalty() -> None:
    sample = _sample(calories=600, protein=5, carbs=200, sugar=40, fat=10)

    grade = compute_health_grade(sample)

    assert grade.score == 55
    assert grade.grade is Grade.C
    assert grade.label == "Average"
    assert grade.color is GradeColor.WARNING


def test_grade_ignores_portion_size() -> None:
    sample = _sample(
        weight_grams=150, calories=180, protein=18, carbs=30, fat=6, fiber=6, sugar=3
    )
    baseline = compute_health_grade(sample)

    for factor in (0.25, 2.0, 7.5):
        scaled = compute_health_grade(sample.scaled(factor))
        assert scaled.grade is baseline.grade
        assert scaled.score == pytest.approx(baseline.score)


def test_non_positive_weight_uses_100g_divisor() -> None:
    zero = _sample(weight_grams=0, calories=30, protein=20)
    negative = _sample(weight_grams=-10, calories=30, protein=20)

    density = NutrientDensity.from_sample(zero)

    assert density.calories == 30
    assert density.protein == 20
    assert compute_health_score(zero) == compute_health_score(negative) == 115


def test_score_is_not_clamped_above_100() -> None:
    sample = _sample(
        weight_grams=200, calories=60, protein=40, carbs=20, fiber=12, sugar=2
    )

    grade = compute_health_grade(sample)

    # calories 30/100g (+5), fiber 6 (+15), protein 20 (+10)
    assert grade.score == 130
    assert grade.grade is Grade.A
    assert grade.label == "Excellent"


def test_heavy_penalties_grade_unhealthy() -> None:
    sample = _sample(calories=650, carbs=45, sugar=40, fat=35)

    grade = compute_health_grade(sample)

    assert grade.score == 30
    assert grade.grade is Grade.E
    assert grade.label == "Unhealthy"
    assert grade.color is GradeColor.ERROR


@pytest.mark.parametrize(
    ("calories", "expected"),
    [(550, 80), (450, 85), (350, 90), (300, 100), (50, 100), (49, 105)],
)
def test_calorie_density_bands(calories: float, expected: float) -> None:
    assert compute_health_score(_sample(calories=calories)) == expected


@pytest.mark.parametrize(
    ("fiber", "expected"), [(0.5, 100), (1.5, 105), (3.5, 110), (5.5, 115)]
)
def test_fiber_bonus_bands(fiber: float, expected: float) -> None:
    assert compute_health_score(_sample(fiber=fiber)) == expected


def test_sugar_ratio_penalty_only_applies_with_carbs() -> None:
    # sugar 20/100g is the -8 band; 20/50 carbs is a 40% ratio (-5)
    with_carbs = _sample(carbs=50, sugar=20)
    # no carbs means the ratio check is skipped entirely
    without_carbs = _sample(carbs=0, sugar=20)

    assert compute_health_score(with_carbs) == 87
    assert compute_health_score(without_carbs) == 92


def test_protein_and_fat_bands() -> None:
    assert compute_health_score(_sample(protein=12)) == 105
    assert compute_health_score(_sample(protein=16)) == 110
    assert compute_health_score(_sample(fat=25)) == 92
    assert compute_health_score(_sample(fat=31)) == 85


@pytest.mark.parametrize(
    ("score", "grade"),
    [
        (85, Grade.A),
        (84.999, Grade.B),
        (70, Grade.B),
        (69.999, Grade.C),
        (55, Grade.C),
        (54.999, Grade.D),
        (40, Grade.D),
        (39.999, Grade.E),
        (-12, Grade.E),
        (140, Grade.A),
    ],
)
def test_grade_boundaries_are_inclusive(score: float, grade: Grade) -> None:
    result = grade_for_score(score)

    assert result.grade is grade
    assert result.score == score
