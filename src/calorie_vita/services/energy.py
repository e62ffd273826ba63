"""Resting and active energy estimates using the Mifflin-St Jeor equation."""

from datetime import datetime, timedelta
from enum import StrEnum

HOURS_PER_DAY = 24


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


def daily_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Return the kcal a person burns at rest over a full day."""
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex is Sex.MALE:
        return bmr + 5
    return bmr - 161


def bmr_for_elapsed_time(daily_bmr_kcal: float, now: datetime) -> float:
    """Return the resting kcal burned between local midnight and ``now``.

    Elapsed time is counted in whole minutes.
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed_minutes = (now - midnight) // timedelta(minutes=1)
    return daily_bmr_kcal / HOURS_PER_DAY * (elapsed_minutes / 60)


def estimate_active_calories(  # noqa: PLR0913
    total_calories: float,
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Sex,
    now: datetime,
) -> float:
    """Subtract today's resting burn from a total burn; never below zero."""
    basal = bmr_for_elapsed_time(daily_bmr(weight_kg, height_cm, age, sex), now)
    return max(total_calories - basal, 0.0)
