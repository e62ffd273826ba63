"""User preference service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_vita.domain.preferences import CalorieUnit, UserPreferences
from calorie_vita.services.units import CalorieUnitConverter


class PreferencesRepository(Protocol):
    """Persistence interface for user preferences."""

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        """Return the user's preferences if stored."""

    def save_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        """Create or replace the user's preferences."""


@dataclass
class PreferencesService:
    """Service for user display preferences."""

    repository: PreferencesRepository

    def get_preferences(self, user_id: UUID) -> UserPreferences:
        """Return stored preferences or the defaults."""
        return self.repository.get_preferences(user_id) or UserPreferences()

    def set_calorie_unit(self, user_id: UUID, unit: CalorieUnit) -> UserPreferences:
        """Persist the user's calorie unit."""
        preferences = UserPreferences(calorie_unit=unit)
        self.repository.save_preferences(user_id, preferences)
        return preferences

    def converter_for(self, user_id: UUID) -> CalorieUnitConverter:
        """Return a converter for the user's configured unit."""
        return CalorieUnitConverter(self.get_preferences(user_id).calorie_unit)
