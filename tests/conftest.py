"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_insights.config import Settings
from nutrition_insights.domain.nutrition import (
    DailyTotals,
    GoalTargets,
    NutritionEntry,
)
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.domain.signals import DetailLevel, Signal
from nutrition_insights.services.analytics import (
    AnalyticsService,
    DayContextRepository,
    NutritionEntryRepository,
    ProfileRepository,
)
from nutrition_insights.services.day_keys import shift_day_key

TARGETS = GoalTargets(calories=2000, protein_g=150, carbs_g=200, fat_g=70)
NOW = datetime(2024, 5, 15, 16, 30, tzinfo=UTC)
TODAY_KEY = "2024-05-15"


def make_entry(
    logged_at: datetime,
    calories: float = 500,
    protein_g: float = 30,
    carbs_g: float = 50,
    fat_g: float = 15,
) -> NutritionEntry:
    return NutritionEntry(
        logged_at=logged_at,
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
    )


def active_day(
    key: str,
    calories: float = 2000,
    protein_g: float = 150,
    carbs_g: float = 200,
    fat_g: float = 70,
    meal_count: int = 3,
) -> DailyTotals:
    return DailyTotals(
        day_key=key,
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        meal_count=meal_count,
    )


def history(end_key: str, active_offsets: set[int]) -> dict[str, DailyTotals]:
    """Build 30 days ending at ``end_key``; offsets count back from it."""
    daily = {}
    for offset in range(29, -1, -1):
        key = shift_day_key(end_key, -offset)
        daily[key] = active_day(key) if offset in active_offsets else DailyTotals(key)
    return daily


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now


@dataclass
class InMemoryNutritionEntryRepository(NutritionEntryRepository):
    """In-memory meal entries for tests."""

    entries: dict[UUID, list[NutritionEntry]] = field(default_factory=dict)
    queries: list[tuple[datetime, datetime]] = field(default_factory=list)

    def add(self, user_id: UUID, *entries: NutritionEntry) -> None:
        self.entries.setdefault(user_id, []).extend(entries)

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionEntry]:
        self.queries.append((start, end))
        return [
            entry
            for entry in self.entries.get(user_id, [])
            if start <= entry.logged_at < end
        ]


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile store for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)


@dataclass
class InMemoryDayContextRepository(DayContextRepository):
    """In-memory day context tags for tests."""

    contexts: dict[UUID, dict[str, list[str]]] = field(default_factory=dict)

    def list_contexts(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, list[str]]:
        return {
            key: tags
            for key, tags in self.contexts.get(user_id, {}).items()
            if start_key <= key <= end_key
        }


@dataclass
class FakePhraser:
    """Phraser that echoes the signal and counts calls."""

    calls: int = 0
    failing_types: set[str] = field(default_factory=set)
    empty: bool = False

    async def phrase(self, signal: Signal, detail: DetailLevel) -> str | None:
        self.calls += 1
        if signal.signal_type in self.failing_types:
            raise RuntimeError("phrasing unavailable")
        if self.empty:
            return None
        return f"{signal.signal_type}/{detail.value}/{','.join(sorted(signal.facts))}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def entry_repository() -> InMemoryNutritionEntryRepository:
    return InMemoryNutritionEntryRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def context_repository() -> InMemoryDayContextRepository:
    return InMemoryDayContextRepository()


@pytest.fixture
def analytics_service(
    entry_repository: InMemoryNutritionEntryRepository,
    profile_repository: InMemoryProfileRepository,
    context_repository: InMemoryDayContextRepository,
    clock: FixedClock,
) -> AnalyticsService:
    return AnalyticsService(
        entry_repository=entry_repository,
        profile_repository=profile_repository,
        context_repository=context_repository,
        clock=clock,
    )
