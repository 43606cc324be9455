"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutrition_insights.adapters.supabase_day_context_repository import (
    SupabaseDayContextRepository,
)
from nutrition_insights.adapters.supabase_nutrition_entry_repository import (
    SupabaseNutritionEntryRepository,
)
from nutrition_insights.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_insights.app_logging import configure_logging
from nutrition_insights.config import Settings
from nutrition_insights.services.analytics import AnalyticsService
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.narratives import NarrativeService, Phraser


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analytics_service: AnalyticsService
    narrative_cache: InMemoryCache
    narrative_service: NarrativeService | None


def build_container(
    settings: Settings | None = None, phraser: Phraser | None = None
) -> AppContainer:
    """Create the default dependency container.

    Package logging is configured here. The narrative service is only built
    when a phraser is supplied.
    """
    configure_logging()
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseNutritionEntryRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(
        supabase_client,
        default_timezone=resolved_settings.default_timezone,
        default_targets=resolved_settings.default_targets,
    )
    context_repository = SupabaseDayContextRepository(supabase_client)
    analytics_service = AnalyticsService(
        entry_repository=entry_repository,
        profile_repository=profile_repository,
        context_repository=context_repository,
        default_profile=resolved_settings.default_profile(),
    )
    narrative_cache = InMemoryCache()
    narrative_service = None
    if phraser is not None:
        narrative_service = NarrativeService(
            phraser=phraser,
            cache=narrative_cache,
            ttl_seconds=resolved_settings.narrative_cache_ttl_seconds,
            debug=resolved_settings.narrative_debug,
        )
    return AppContainer(
        settings=resolved_settings,
        analytics_service=analytics_service,
        narrative_cache=narrative_cache,
        narrative_service=narrative_service,
    )
