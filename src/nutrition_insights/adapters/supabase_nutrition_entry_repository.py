"""Supabase repository for finalized meal entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.nutrition import NutritionEntry
from nutrition_insights.services.analytics import NutritionEntryRepository

_ENTRY_COLUMNS = (
    "logged_at, total_calories, total_protein_g, total_carbs_g, total_fat_g, "
    "total_fiber_g"
)


@dataclass
class SupabaseNutritionEntryRepository(NutritionEntryRepository):
    """Supabase implementation reading meal log totals."""

    client: Client

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionEntry]:
        """Return meal entries logged in ``[start, end)``, oldest first."""
        response = (
            self.client.table("meal_logs")
            .select(_ENTRY_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> NutritionEntry:
    logged_at_raw = row.get("logged_at")
    if not isinstance(logged_at_raw, str) or not logged_at_raw:
        raise RuntimeError("Meal log row is missing logged_at")
    fiber_raw = row.get("total_fiber_g")
    return NutritionEntry(
        logged_at=datetime.fromisoformat(logged_at_raw),
        calories=float(row.get("total_calories") or 0.0),
        protein_g=float(row.get("total_protein_g") or 0.0),
        carbs_g=float(row.get("total_carbs_g") or 0.0),
        fat_g=float(row.get("total_fat_g") or 0.0),
        fiber_g=float(fiber_raw) if fiber_raw is not None else None,
    )
