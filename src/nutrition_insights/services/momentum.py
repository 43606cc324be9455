"""Behavioral momentum engine.

Momentum is about showing up, not hitting numbers: it blends how often the
user logs, protein adherence, calorie stability, recent activity and the
week-over-week change in logging.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from nutrition_insights.domain.momentum import (
    MomentumFactors,
    MomentumLevel,
    MomentumResult,
)
from nutrition_insights.domain.nutrition import DailyTotals, GoalTargets
from nutrition_insights.domain.trends import Trend
from nutrition_insights.services.day_keys import shift_day_key, trailing_day_keys
from nutrition_insights.services.numeric import (
    clamp,
    mean,
    population_std_dev,
    round_half_up,
)

WINDOW_DAYS = 14
WEEK_DAYS = 7
RECENT_DAYS = 3
STREAK_LOOKBACK_DAYS = 30
MIN_STABILITY_DAYS = 3

CONSISTENCY_WEIGHT = 35
PROTEIN_WEIGHT = 25
STABILITY_WEIGHT = 15
RECENT_WEIGHT = 15
IMPROVEMENT_WEIGHT = 10

STRONG_SCORE = 70
BUILDING_SCORE = 50
STEADY_SCORE = 25
TREND_THRESHOLD = 0.1

STRUCTURED_MEAL_COUNT = 3
MULTIPLE_MEAL_COUNT = 2
CONSISTENT_TRACKING = 0.7
GOOD_WEEK = 0.5
CALORIE_AWARENESS_BAND = 0.1
STREAK_WIN_DAYS = 3


@dataclass(frozen=True)
class MomentumContext:
    """Inputs the trait and win decision tables are evaluated against."""

    today: DailyTotals | None
    targets: GoalTargets
    factors: MomentumFactors
    open_streak: int


@dataclass(frozen=True)
class DecisionRule:
    """One row of an ordered decision table; the first match wins."""

    predicate: Callable[[MomentumContext], bool]
    text: str


def _today_protein_at_least(share: float) -> Callable[[MomentumContext], bool]:
    def predicate(ctx: MomentumContext) -> bool:
        target = ctx.targets.protein_g
        return (
            ctx.today is not None
            and target > 0
            and ctx.today.protein_g >= target * share
        )

    return predicate


def _today_calories_near_target(ctx: MomentumContext) -> bool:
    target = ctx.targets.calories
    return (
        ctx.today is not None
        and target > 0
        and abs(ctx.today.calories - target) <= target * CALORIE_AWARENESS_BAND
    )


BUILDING_RULES: tuple[DecisionRule, ...] = (
    DecisionRule(_today_protein_at_least(0.8), "Protein Consistency"),
    DecisionRule(
        lambda ctx: ctx.today is not None
        and ctx.today.meal_count >= STRUCTURED_MEAL_COUNT,
        "Structured Eating",
    ),
    DecisionRule(_today_calories_near_target, "Caloric Awareness"),
    DecisionRule(lambda ctx: ctx.today is not None, "Logging Habit"),
    DecisionRule(
        lambda ctx: ctx.factors.logging_consistency >= CONSISTENT_TRACKING,
        "Consistent Tracking",
    ),
    DecisionRule(lambda ctx: True, "Foundation"),
)

WIN_RULES: tuple[DecisionRule, ...] = (
    DecisionRule(_today_protein_at_least(0.9), "Protein target within reach"),
    DecisionRule(
        lambda ctx: ctx.today is not None
        and ctx.today.meal_count >= MULTIPLE_MEAL_COUNT,
        "Multiple meals logged",
    ),
    DecisionRule(lambda ctx: ctx.today is not None, "Started logging today"),
    DecisionRule(
        lambda ctx: ctx.open_streak >= STREAK_WIN_DAYS,
        "{open_streak}-day logging streak active",
    ),
    DecisionRule(
        lambda ctx: ctx.factors.logging_consistency >= GOOD_WEEK,
        "Good week so far",
    ),
)


def first_match(rules: Sequence[DecisionRule], ctx: MomentumContext) -> str | None:
    """Return the text of the first rule whose predicate holds."""
    for rule in rules:
        if rule.predicate(ctx):
            return rule.text.format(open_streak=ctx.open_streak)
    return None


def compute_momentum(
    daily: Mapping[str, DailyTotals],
    targets: GoalTargets,
    today_key: str | None = None,
) -> MomentumResult:
    """Return the momentum result for the days ending at ``today_key``.

    ``daily`` maps day keys to totals; missing keys count as days without
    meals. ``today_key`` defaults to the latest key present.
    """
    if today_key is None:
        if not daily:
            return starting_momentum()
        today_key = max(daily)

    factors = momentum_factors(daily, targets, today_key)
    score = momentum_score(factors)
    streak = logging_streak(daily, today_key)
    today = daily.get(today_key)
    if today is not None and not today.is_active:
        today = None
    if today is not None:
        open_streak = streak
    else:
        open_streak = logging_streak(
            daily, shift_day_key(today_key, -1), STREAK_LOOKBACK_DAYS - 1
        )

    ctx = MomentumContext(
        today=today, targets=targets, factors=factors, open_streak=open_streak
    )
    return MomentumResult(
        score=score,
        level=momentum_level(score),
        trend=momentum_trend(factors.improvement),
        streak=streak,
        weekly_change=round_half_up(factors.improvement * 100),
        building=first_match(BUILDING_RULES, ctx),
        win=first_match(WIN_RULES, ctx),
        factors=factors,
    )


def starting_momentum() -> MomentumResult:
    """Neutral result for users with no profile or history."""
    return MomentumResult(
        score=0,
        level=MomentumLevel.STARTING,
        trend=Trend.STABLE,
        streak=0,
        weekly_change=0,
        building=None,
        win=None,
        factors=MomentumFactors(),
    )


def momentum_factors(
    daily: Mapping[str, DailyTotals], targets: GoalTargets, today_key: str
) -> MomentumFactors:
    """Compute the five momentum factors over the trailing window."""
    window_keys = trailing_day_keys(today_key, WINDOW_DAYS)
    last_week = window_keys[-WEEK_DAYS:]
    previous_week = window_keys[:-WEEK_DAYS]
    recent = window_keys[-RECENT_DAYS:]
    window = [daily[key] for key in window_keys if key in daily]

    days_logged_last_week = _count_active(daily, last_week)
    days_logged_previous_week = _count_active(daily, previous_week)

    protein_days = [day.protein_g for day in window if day.protein_g > 0]
    if protein_days and targets.protein_g > 0:
        protein_adherence = mean(
            [min(1.0, protein / targets.protein_g) for protein in protein_days]
        )
    else:
        protein_adherence = 0.0

    calorie_days = [day.calories for day in window if day.calories > 0]
    if len(calorie_days) >= MIN_STABILITY_DAYS:
        variation = population_std_dev(calorie_days) / mean(calorie_days)
        calorie_stability = max(0.0, 1 - variation)
    else:
        calorie_stability = 0.0

    return MomentumFactors(
        logging_consistency=days_logged_last_week / WEEK_DAYS,
        protein_adherence=clamp(protein_adherence, 0, 1),
        calorie_stability=clamp(calorie_stability, 0, 1),
        recent_activity=_count_active(daily, recent) / RECENT_DAYS,
        improvement=(days_logged_last_week - days_logged_previous_week) / WEEK_DAYS,
    )


def momentum_score(factors: MomentumFactors) -> int:
    """Weighted composite score, 0-100.

    ``improvement`` is renormalized from [-1, 1] to [0, 1] before weighting.
    """
    score = round_half_up(
        factors.logging_consistency * CONSISTENCY_WEIGHT
        + factors.protein_adherence * PROTEIN_WEIGHT
        + factors.calorie_stability * STABILITY_WEIGHT
        + factors.recent_activity * RECENT_WEIGHT
        + (factors.improvement + 1) / 2 * IMPROVEMENT_WEIGHT
    )
    return int(clamp(score, 0, 100))


def momentum_level(score: int) -> MomentumLevel:
    if score >= STRONG_SCORE:
        return MomentumLevel.STRONG
    if score >= BUILDING_SCORE:
        return MomentumLevel.BUILDING
    if score >= STEADY_SCORE:
        return MomentumLevel.STEADY
    return MomentumLevel.STARTING


def momentum_trend(improvement: float) -> Trend:
    if improvement > TREND_THRESHOLD:
        return Trend.UP
    if improvement < -TREND_THRESHOLD:
        return Trend.DOWN
    return Trend.STABLE


def logging_streak(
    daily: Mapping[str, DailyTotals],
    end_key: str,
    lookback_days: int = STREAK_LOOKBACK_DAYS,
) -> int:
    """Count contiguous active days walking back from ``end_key``.

    Returns 0 when ``end_key`` itself has no meals.
    """
    streak = 0
    for offset in range(lookback_days):
        day = daily.get(shift_day_key(end_key, -offset))
        if day is None or not day.is_active:
            break
        streak += 1
    return streak


def _count_active(daily: Mapping[str, DailyTotals], keys: Sequence[str]) -> int:
    return sum(1 for key in keys if key in daily and daily[key].is_active)
