"""Tests for macro goal allocation."""

import pytest

from calorie_vita.domain.goals import MacroAllocation
from calorie_vita.services.macros import (
    allocate_macros,
    parse_calorie_goal,
    read_calorie_goal,
    round_half_up,
)

DEFAULT_SPLIT = MacroAllocation(carbs_calories=1000, protein_calories=400, fat_calories=600)


def test_allocate_default_goal_exactly() -> None:
    assert allocate_macros(2000) == DEFAULT_SPLIT


@pytest.mark.parametrize("raw", [0, -5, None, "", "   ", "abc", float("nan"), float("inf")])
def test_unusable_goal_falls_back_to_default(raw: object) -> None:
    assert allocate_macros(raw) == DEFAULT_SPLIT


@pytest.mark.parametrize("raw", [0, "-5", None, "", "abc", float("nan")])
def test_read_calorie_goal_reports_unusable_input(raw: object) -> None:
    assert read_calorie_goal(raw) is None


def test_parse_calorie_goal_accepts_numeric_text() -> None:
    assert parse_calorie_goal(" 1800 ") == 1800
    assert allocate_macros("1800") == MacroAllocation(
        carbs_calories=900, protein_calories=360, fat_calories=540
    )


def test_rounding_is_half_up() -> None:
    # 2005 * 0.5 = 1002.5; banker's rounding would give 1002
    assert allocate_macros(2005).carbs_calories == 1003
    assert allocate_macros(1001).carbs_calories == 501
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -3


def test_allocation_sum_stays_within_two_kcal() -> None:
    for goal in range(500, 5001):
        assert abs(allocate_macros(goal).total_calories - goal) <= 2
    for goal in (512.3, 1499.5, 2222.2, 4999.9):
        assert abs(allocate_macros(goal).total_calories - goal) <= 2
