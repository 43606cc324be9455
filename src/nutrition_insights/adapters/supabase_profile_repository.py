"""Supabase repository for the profile fields analytics reads."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.nutrition import DEFAULT_TARGETS, GoalTargets
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.analytics import ProfileRepository
from nutrition_insights.services.goals import map_goal_type, parse_secondary_focuses

_PROFILE_COLUMNS = (
    "timezone, target_calories, target_protein_g, target_carbs_g, target_fat_g, "
    "goal_type, secondary_focuses"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation backed by ``user_settings``.

    Unset or zero targets fall back to ``default_targets``.
    """

    client: Client
    default_timezone: str = "UTC"
    default_targets: GoalTargets = DEFAULT_TARGETS

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("user_settings")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        defaults = self.default_targets
        goal_raw = row.get("goal_type")
        return UserProfile(
            timezone=str(row.get("timezone") or self.default_timezone),
            targets=GoalTargets(
                calories=_positive_or(row.get("target_calories"), defaults.calories),
                protein_g=_positive_or(
                    row.get("target_protein_g"), defaults.protein_g
                ),
                carbs_g=_positive_or(row.get("target_carbs_g"), defaults.carbs_g),
                fat_g=_positive_or(row.get("target_fat_g"), defaults.fat_g),
            ),
            goal_type=map_goal_type(goal_raw if isinstance(goal_raw, str) else None),
            secondary_focuses=parse_secondary_focuses(row.get("secondary_focuses")),
        )


def _positive_or(value: object, default: float) -> float:
    if isinstance(value, int | float | str) and value != "":
        number = float(value)
        if number > 0:
            return number
    return default
