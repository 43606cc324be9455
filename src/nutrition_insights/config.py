"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_insights.domain.nutrition import GoalTargets
from nutrition_insights.domain.profiles import UserProfile

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    default_timezone: str = "UTC"
    default_target_calories: float = 2000
    default_target_protein_g: float = 150
    default_target_carbs_g: float = 200
    default_target_fat_g: float = 70
    narrative_cache_ttl_seconds: int = 1800
    narrative_debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def default_targets(self) -> GoalTargets:
        return GoalTargets(
            calories=self.default_target_calories,
            protein_g=self.default_target_protein_g,
            carbs_g=self.default_target_carbs_g,
            fat_g=self.default_target_fat_g,
        )

    def default_profile(self) -> UserProfile:
        """Profile used for users without a stored one."""
        return UserProfile(
            timezone=self.default_timezone, targets=self.default_targets
        )
