"""Weight log domain models."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class WeightLog:
    """A single body-weight measurement."""

    id: UUID
    user_id: UUID
    weight_kg: float
    logged_on: date
    notes: str | None = None


@dataclass(frozen=True)
class WeightLogStats:
    """Summary statistics over a user's weight logs."""

    current_weight: float
    total_entries: int
    previous_weight: float | None = None
    weight_change: float | None = None
    average_weight: float | None = None
    first_entry_date: date | None = None
    last_entry_date: date | None = None

    @property
    def weight_change_percentage(self) -> float | None:
        if not self.previous_weight:
            return None
        return (self.weight_change or 0.0) / self.previous_weight * 100

    @property
    def trend(self) -> str:
        if self.weight_change is None:
            return "No change"
        if self.weight_change > 0:
            return "Gaining"
        if self.weight_change < 0:
            return "Losing"
        return "Stable"
