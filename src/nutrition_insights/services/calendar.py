"""Month calendar classification, highlights and logging stats."""

from collections.abc import Callable, Mapping, Sequence

from nutrition_insights.domain.calendar import (
    CalendarDay,
    DayFilter,
    MonthStats,
    MonthSummary,
    Pattern,
)
from nutrition_insights.domain.nutrition import DailyTotals, GoalTargets
from nutrition_insights.services.day_keys import (
    month_day_keys,
    parse_day_key,
    shift_day_key,
)
from nutrition_insights.services.scoring import score_day

CURRENT_STREAK_CAP = 365
CONSISTENT_WEEK_ACTIVE_DAYS = 4
MONDAY = 0
SATURDAY = 5

CONTEXT_PRIORITY = {
    "travel": 100,
    "training": 90,
    "social": 80,
    "rest": 70,
}

_MACRO_PATTERNS: dict[Pattern, Callable[[DailyTotals, GoalTargets], bool]] = {
    Pattern.LOW_PROTEIN: lambda day, targets: day.protein_g < targets.protein_g * 0.7,
    Pattern.HIGH_CARB: lambda day, targets: day.carbs_g > targets.carbs_g * 1.2,
    Pattern.ON_TRACK: lambda day, targets: abs(day.calories - targets.calories)
    < targets.calories * 0.1,
    Pattern.OVER_TARGET: lambda day, targets: day.calories > targets.calories * 1.1,
}


def dominant_context(tags: Sequence[str]) -> str | None:
    """Return the highest-priority tag; unknown tags rank lowest."""
    if not tags:
        return None
    return max(tags, key=lambda tag: CONTEXT_PRIORITY.get(tag, 0))


def matches_pattern(
    pattern: Pattern,
    day: DailyTotals,
    targets: GoalTargets,
    today_key: str,
    tags: Sequence[str] = (),
) -> bool:
    """Return True when a day should be highlighted for ``pattern``.

    Macro patterns only apply to days with logged meals.
    """
    if pattern == Pattern.TRAINING:
        return "training" in tags
    if pattern == Pattern.MISSED_LOGGING:
        return day.meal_count == 0 and day.day_key < today_key
    if day.meal_count == 0:
        return False
    return _MACRO_PATTERNS[pattern](day, targets)


def summarize_month(
    month: str,
    daily: Mapping[str, DailyTotals],
    targets: GoalTargets,
    today_key: str,
    contexts: Mapping[str, Sequence[str]] | None = None,
    pattern: Pattern | None = None,
) -> MonthSummary:
    """Score every day of ``month`` (``YYYY-MM``) and compute month stats.

    Days missing from ``daily`` are treated as having no meals.
    """
    contexts = contexts or {}
    keys = month_day_keys(int(month[:4]), int(month[5:]))
    days: dict[str, CalendarDay] = {}
    highlights: dict[str, Pattern] = {}
    for key in keys:
        totals = daily.get(key) or DailyTotals(day_key=key)
        tags = tuple(contexts.get(key, ()))
        days[key] = CalendarDay(
            totals=totals,
            score=score_day(totals, targets),
            tags=tags,
            dominant_tag=dominant_context(tags),
        )
        if pattern is not None and matches_pattern(
            pattern, totals, targets, today_key, tags
        ):
            highlights[key] = pattern

    active_keys = {key for key in keys if days[key].totals.meal_count > 0}
    stats = MonthStats(
        active_days=len(active_keys),
        total_days=len(keys),
        missed_days=sum(
            1 for key in keys if key < today_key and key not in active_keys
        ),
        current_streak=current_streak(active_keys, today_key),
        consistent_weeks=consistent_weeks(keys, active_keys),
    )
    return MonthSummary(
        month=month, days=days, pattern=pattern, highlights=highlights, stats=stats
    )


def current_streak(
    active_keys: set[str], today_key: str, cap: int = CURRENT_STREAK_CAP
) -> int:
    """Count contiguous active days back from today.

    A day without meals today does not break the streak yet: counting then
    starts from yesterday.
    """
    check_key = today_key if today_key in active_keys else shift_day_key(today_key, -1)
    streak = 0
    while streak < cap and check_key in active_keys:
        streak += 1
        check_key = shift_day_key(check_key, -1)
    return streak


def consistent_weeks(keys: Sequence[str], active_keys: set[str]) -> int:
    """Count Monday-bounded weeks with enough active days.

    The partial weeks at both ends of ``keys`` count like full weeks.
    """
    weeks = 0
    week_active = 0
    for key in keys:
        if parse_day_key(key).weekday() == MONDAY:
            if week_active >= CONSISTENT_WEEK_ACTIVE_DAYS:
                weeks += 1
            week_active = 0
        if key in active_keys:
            week_active += 1
    if week_active >= CONSISTENT_WEEK_ACTIVE_DAYS:
        weeks += 1
    return weeks


def matches_filter(
    day: DailyTotals, day_filter: DayFilter, tags: Sequence[str] = ()
) -> bool:
    """Return True when a day satisfies every set condition of the filter."""
    bounds = (
        (day.calories, day_filter.calories_min, day_filter.calories_max),
        (day.protein_g, day_filter.protein_min, day_filter.protein_max),
        (day.carbs_g, day_filter.carbs_min, day_filter.carbs_max),
        (day.fat_g, day_filter.fat_min, day_filter.fat_max),
        (day.meal_count, day_filter.meal_count_min, day_filter.meal_count_max),
    )
    for value, low, high in bounds:
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False

    is_weekend = parse_day_key(day.day_key).weekday() >= SATURDAY
    if day_filter.weekend_only and not is_weekend:
        return False
    if day_filter.weekday_only and is_weekend:
        return False
    return all(tag in tags for tag in day_filter.context_tags)


def filter_days(
    month: str,
    daily: Mapping[str, DailyTotals],
    day_filter: DayFilter,
    today_key: str,
    contexts: Mapping[str, Sequence[str]] | None = None,
) -> list[str]:
    """Return the day keys of ``month`` matching the filter, skipping future days."""
    contexts = contexts or {}
    matching = []
    for key in month_day_keys(int(month[:4]), int(month[5:])):
        if key > today_key:
            continue
        totals = daily.get(key) or DailyTotals(day_key=key)
        if matches_filter(totals, day_filter, contexts.get(key, ())):
            matching.append(key)
    return matching
