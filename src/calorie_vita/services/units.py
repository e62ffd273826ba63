"""Calorie unit conversion and formatting."""

from dataclasses import dataclass

from calorie_vita.domain.preferences import CalorieUnit
from calorie_vita.services.macros import round_half_up


@dataclass(frozen=True)
class CalorieUnitConverter:
    """Convert energy values between kcal and a user's display unit."""

    unit: CalorieUnit = CalorieUnit.KCAL

    @property
    def suffix(self) -> str:
        return self.unit.value

    def to_kcal(self, display_value: float) -> float:
        """Convert a value shown in the display unit back to kcal."""
        return display_value / self.unit.factor

    def from_kcal(self, kcal_value: float) -> float:
        """Convert a kcal value to the display unit."""
        return kcal_value * self.unit.factor

    def format(self, kcal_value: float, decimal_places: int | None = None) -> str:
        """Format a kcal value with the display unit suffix."""
        return f"{self.format_short(kcal_value, decimal_places)} {self.suffix}"

    def format_short(self, kcal_value: float, decimal_places: int | None = None) -> str:
        """Format a kcal value in the display unit without a suffix."""
        converted = self.from_kcal(kcal_value)
        if decimal_places is None:
            return str(round_half_up(converted))
        return f"{converted:.{decimal_places}f}"
