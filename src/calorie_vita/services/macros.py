"""Default macronutrient split for a daily calorie goal."""

import math

from calorie_vita.domain.goals import DEFAULT_CALORIE_GOAL, MacroAllocation

CARBS_SHARE = 0.50
PROTEIN_SHARE = 0.20
FAT_SHARE = 0.30

KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_FAT = 9


def read_calorie_goal(raw: object) -> float | None:
    """Return the goal entered in ``raw``, or None when it is unusable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_calorie_goal(raw: object) -> float:
    """Return a usable kcal goal, falling back to the default on bad input."""
    value = read_calorie_goal(raw)
    if value is None:
        return float(DEFAULT_CALORIE_GOAL)
    return value


def allocate_macros(calorie_goal_kcal: object) -> MacroAllocation:
    """Split a calorie goal 50/20/30 into carbs, protein and fat calories.

    Each share is rounded on its own, half away from zero, so the parts can
    differ from the goal by a couple of kcal.
    """
    goal = parse_calorie_goal(calorie_goal_kcal)
    return MacroAllocation(
        carbs_calories=round_half_up(goal * CARBS_SHARE),
        protein_calories=round_half_up(goal * PROTEIN_SHARE),
        fat_calories=round_half_up(goal * FAT_SHARE),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
