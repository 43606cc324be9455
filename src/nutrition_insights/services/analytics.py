"""Analytics service: fetches a user's data and runs the engines on it."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.calendar import DayFilter, MonthSummary, Pattern
from nutrition_insights.domain.momentum import MomentumResult
from nutrition_insights.domain.nutrition import (
    DEFAULT_TARGETS,
    DailyTotals,
    NutritionEntry,
)
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.domain.queries import (
    ComparisonQuery,
    DateRangeQuery,
    DayKeyQuery,
    MonthQuery,
    TrendRangeQuery,
)
from nutrition_insights.domain.scores import DayScore
from nutrition_insights.domain.signals import (
    DailySignal,
    DayContext,
    MealNutrition,
    MealSignal,
    UserContext,
    WhatNextSignal,
)
from nutrition_insights.domain.trends import PeriodComparison, TrendSummary
from nutrition_insights.services import calendar, momentum, signals, trends
from nutrition_insights.services.aggregation import aggregate_daily
from nutrition_insights.services.cache import Clock, utc_now
from nutrition_insights.services.day_keys import (
    day_key,
    hour_of_day,
    local_day_bounds,
    month_day_keys,
    shift_day_key,
)
from nutrition_insights.services.scoring import score_day

END_OF_DAY_HOUR = 23

_logger = logging.getLogger(__name__)


class NutritionEntryRepository(Protocol):
    """Read interface for finalized meal entries."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionEntry]:
        """Return entries logged in ``[start, end)``."""


class ProfileRepository(Protocol):
    """Read interface for the profile store."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, or None when it doesn't exist."""


class DayContextRepository(Protocol):
    """Read interface for per-day context tags."""

    def list_contexts(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, list[str]]:
        """Return tags per day key for days in the inclusive range."""


def _default_profile() -> UserProfile:
    return UserProfile(timezone="UTC", targets=DEFAULT_TARGETS)


@dataclass
class AnalyticsService:
    """Request-facing analytics over a user's nutrition history.

    Inputs are validated with the query models and raise
    ``pydantic.ValidationError`` when malformed. A missing profile falls back
    to ``default_profile``.
    """

    entry_repository: NutritionEntryRepository
    profile_repository: ProfileRepository
    context_repository: DayContextRepository
    default_profile: UserProfile = field(default_factory=_default_profile)
    clock: Clock = utc_now

    def resolve_profile(self, user_id: UUID) -> UserProfile:
        """Return the stored profile or the default one."""
        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            _logger.info("No profile for %s, using defaults", user_id)
            return self.default_profile
        return profile

    def today_key(self, timezone_name: str) -> str:
        return day_key(self.clock(), timezone_name)

    def get_daily_totals(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, DailyTotals]:
        """Return zero-filled totals for every day in the range."""
        profile = self.resolve_profile(user_id)
        query = DateRangeQuery(
            start_key=start_key, end_key=end_key, timezone=profile.timezone
        )
        return self._load_daily(user_id, query)

    def get_day_score(self, user_id: UUID, day_key_value: str) -> DayScore:
        profile = self.resolve_profile(user_id)
        query = DayKeyQuery(day_key=day_key_value, timezone=profile.timezone)
        totals = self._load_day(user_id, query)
        return score_day(totals, profile.targets)

    def get_trends(self, user_id: UUID, range_name: str = "30d") -> TrendSummary:
        """Return trend statistics for the trailing range ending today."""
        query = TrendRangeQuery(range=range_name)
        profile = self.resolve_profile(user_id)
        end_key = self.today_key(profile.timezone)
        start_key = shift_day_key(end_key, -(query.days - 1))
        daily = self._load_daily(
            user_id,
            DateRangeQuery(
                start_key=start_key, end_key=end_key, timezone=profile.timezone
            ),
        )
        return trends.summarize_trends(list(daily.values()), profile.targets)

    def compare_periods(self, user_id: UUID, preset: str = "14d") -> PeriodComparison:
        """Compare the last N days with the N days before them."""
        query = ComparisonQuery(preset=preset)
        profile = self.resolve_profile(user_id)
        end_key = self.today_key(profile.timezone)
        start_key = shift_day_key(end_key, -(2 * query.days - 1))
        daily = self._load_daily(
            user_id,
            DateRangeQuery(
                start_key=start_key, end_key=end_key, timezone=profile.timezone
            ),
        )
        window = list(daily.values())
        return trends.compare_periods(window[query.days :], window[: query.days])

    def get_momentum(self, user_id: UUID) -> MomentumResult:
        """Return momentum for today; users without a profile are starting."""
        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            return momentum.starting_momentum()
        end_key = self.today_key(profile.timezone)
        start_key = shift_day_key(end_key, -(momentum.STREAK_LOOKBACK_DAYS - 1))
        daily = self._load_daily(
            user_id,
            DateRangeQuery(
                start_key=start_key, end_key=end_key, timezone=profile.timezone
            ),
        )
        return momentum.compute_momentum(daily, profile.targets, end_key)

    def get_month_summary(
        self, user_id: UUID, month: str, pattern: Pattern | None = None
    ) -> MonthSummary:
        """Return scored calendar days, highlights and stats for a month."""
        query = MonthQuery(month=month)
        profile = self.resolve_profile(user_id)
        daily, contexts = self._load_month(user_id, query, profile)
        return calendar.summarize_month(
            query.month,
            daily,
            profile.targets,
            self.today_key(profile.timezone),
            contexts=contexts,
            pattern=pattern,
        )

    def filter_month_days(
        self, user_id: UUID, month: str, day_filter: DayFilter
    ) -> list[str]:
        """Return day keys in a month matching the filter, up to today."""
        query = MonthQuery(month=month)
        profile = self.resolve_profile(user_id)
        daily, contexts = self._load_month(user_id, query, profile)
        return calendar.filter_days(
            query.month,
            daily,
            day_filter,
            self.today_key(profile.timezone),
            contexts=contexts,
        )

    def get_daily_signal(
        self, user_id: UUID, day_key_value: str | None = None
    ) -> DailySignal:
        """Return the daily progress signal for a day, today by default."""
        profile = self.resolve_profile(user_id)
        today = self.today_key(profile.timezone)
        query = DayKeyQuery(day_key=day_key_value or today, timezone=profile.timezone)
        day = self._day_context(user_id, query, today)
        return signals.detect_daily_signal(_user_context(profile), day)

    def get_what_next_signal(self, user_id: UUID) -> WhatNextSignal | None:
        profile = self.resolve_profile(user_id)
        today = self.today_key(profile.timezone)
        query = DayKeyQuery(day_key=today, timezone=profile.timezone)
        day = self._day_context(user_id, query, today)
        return signals.detect_what_next_signal(_user_context(profile), day)

    def get_meal_signal(self, user_id: UUID, meal: MealNutrition) -> MealSignal | None:
        """Return the signal for a just-logged meal with today's progress."""
        profile = self.resolve_profile(user_id)
        today = self.today_key(profile.timezone)
        query = DayKeyQuery(day_key=today, timezone=profile.timezone)
        user = _user_context(profile)
        day = self._day_context(user_id, query, today)
        return signals.detect_meal_signal(
            user, meal, daily_progress=signals.daily_progress(user, day)
        )

    def _load_daily(
        self, user_id: UUID, query: DateRangeQuery
    ) -> dict[str, DailyTotals]:
        start, end = local_day_bounds(query.start_key, query.end_key, query.timezone)
        entries = self.entry_repository.list_entries(user_id, start, end)
        return aggregate_daily(entries, query.timezone, query.start_key, query.end_key)

    def _load_day(self, user_id: UUID, query: DayKeyQuery) -> DailyTotals:
        daily = self._load_daily(
            user_id,
            DateRangeQuery(
                start_key=query.day_key, end_key=query.day_key, timezone=query.timezone
            ),
        )
        return daily[query.day_key]

    def _load_month(
        self, user_id: UUID, query: MonthQuery, profile: UserProfile
    ) -> tuple[dict[str, DailyTotals], dict[str, list[str]]]:
        keys = month_day_keys(query.year_number, query.month_number)
        daily = self._load_daily(
            user_id,
            DateRangeQuery(
                start_key=keys[0], end_key=keys[-1], timezone=profile.timezone
            ),
        )
        contexts = self.context_repository.list_contexts(user_id, keys[0], keys[-1])
        return daily, contexts

    def _day_context(
        self, user_id: UUID, query: DayKeyQuery, today: str
    ) -> DayContext:
        totals = self._load_day(user_id, query)
        is_past_date = query.day_key < today
        if query.day_key == today:
            hour = hour_of_day(self.clock(), query.timezone)
        else:
            hour = END_OF_DAY_HOUR
        return DayContext(
            calories=totals.calories,
            protein_g=totals.protein_g,
            carbs_g=totals.carbs_g,
            fat_g=totals.fat_g,
            meal_count=totals.meal_count,
            hour_of_day=hour,
            is_past_date=is_past_date,
        )


def _user_context(profile: UserProfile) -> UserContext:
    return UserContext(
        goal_type=profile.goal_type,
        targets=profile.targets,
        secondary_focuses=profile.secondary_focuses,
    )
