"""Supabase repository for day context tags."""

import json
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrition_insights.services.analytics import DayContextRepository


@dataclass
class SupabaseDayContextRepository(DayContextRepository):
    """Supabase implementation for ``day_contexts``."""

    client: Client

    def list_contexts(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, list[str]]:
        """Return tags per day key in the inclusive range."""
        response = (
            self.client.table("day_contexts")
            .select("day_key, tags")
            .eq("user_id", str(user_id))
            .gte("day_key", start_key)
            .lte("day_key", end_key)
            .execute()
        )
        contexts: dict[str, list[str]] = {}
        for row in response.data or []:
            key = row.get("day_key")
            if not isinstance(key, str):
                continue
            contexts[key] = _parse_tags(row.get("tags"))
        return contexts


def _parse_tags(raw: object) -> list[str]:
    """Tags are stored either as an array or as a JSON-encoded string."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []
    return [tag for tag in raw if isinstance(tag, str)]
