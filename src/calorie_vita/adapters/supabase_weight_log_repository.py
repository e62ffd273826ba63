"""Supabase repository for weight logs."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from calorie_vita.domain.weight import WeightLog
from calorie_vita.services.weight_logs import WeightLogRepository


@dataclass
class SupabaseWeightLogRepository(WeightLogRepository):
    """Supabase implementation for weight logs."""

    client: Client

    def create_log(
        self, user_id: UUID, weight_kg: float, logged_on: date, notes: str | None
    ) -> WeightLog:
        response = (
            self.client.table("weight_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "weight_kg": weight_kg,
                    "logged_on": logged_on.isoformat(),
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight log in Supabase")
        return _row_to_log(response.data[0])

    def list_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        response = (
            self.client.table("weight_logs")
            .select("id, user_id, weight_kg, logged_on, notes")
            .eq("user_id", str(user_id))
            .order("logged_on", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_log(row) for row in response.data or []]


def _row_to_log(row: dict[str, object]) -> WeightLog:
    return WeightLog(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight_kg=float(row["weight_kg"]),
        logged_on=date.fromisoformat(str(row["logged_on"])),
        notes=row.get("notes"),
    )
