"""Weight logging service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from calorie_vita.domain.weight import WeightLog, WeightLogStats


class WeightLogRepository(Protocol):
    """Persistence interface for weight logs."""

    def create_log(
        self, user_id: UUID, weight_kg: float, logged_on: date, notes: str | None
    ) -> WeightLog:
        """Store a weight log and return it."""

    def list_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        """Return logs ordered by date, newest first."""


@dataclass
class WeightLogService:
    """Service for body-weight tracking."""

    repository: WeightLogRepository

    def log_weight(
        self,
        user_id: UUID,
        weight_kg: float,
        logged_on: date | None = None,
        notes: str | None = None,
    ) -> WeightLog:
        """Record a weight measurement."""
        if weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        return self.repository.create_log(
            user_id, weight_kg, logged_on or date.today(), notes
        )

    def list_logs(self, user_id: UUID, limit: int = 30) -> list[WeightLog]:
        return self.repository.list_logs(user_id, limit)

    def get_stats(self, user_id: UUID, limit: int = 365) -> WeightLogStats | None:
        """Summarise the user's weight logs; None when nothing is logged."""
        logs = self.repository.list_logs(user_id, limit)
        return summarize_weights(logs)


def summarize_weights(logs: list[WeightLog]) -> WeightLogStats | None:
    """Build statistics from logs in any order."""
    if not logs:
        return None
    ordered = sorted(logs, key=lambda log: log.logged_on, reverse=True)
    current = ordered[0].weight_kg
    previous = ordered[1].weight_kg if len(ordered) > 1 else None
    return WeightLogStats(
        current_weight=current,
        previous_weight=previous,
        weight_change=current - previous if previous is not None else None,
        average_weight=sum(log.weight_kg for log in ordered) / len(ordered),
        total_entries=len(ordered),
        first_entry_date=ordered[-1].logged_on,
        last_entry_date=ordered[0].logged_on,
    )
