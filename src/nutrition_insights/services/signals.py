"""Goal-aware signal detection.

Each detector evaluates an ordered list of rules against a meal or a day.
Matching rules add their facts to the signal's fact bag and may raise its
priority. Priority is the maximum over all matched rules; a later, milder
rule never lowers a priority set by an earlier one.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from nutrition_insights.domain.signals import (
    DailyProgress,
    DailySignal,
    DayContext,
    FactBag,
    MealNutrition,
    MealSignal,
    PrimaryGoal,
    Priority,
    SecondaryFocus,
    UserContext,
    WhatNextSignal,
)
from nutrition_insights.services.numeric import round_half_up, safe_ratio

ContextT = TypeVar("ContextT")

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

MIN_MEAL_CALORIES = 50
LIGHT_MEAL_CALORIES = 150
SUBSTANTIAL_MEAL_CALORIES = 700
LOW_SHARE_MIN_CALORIES = 200
HIGH_FAT_MIN_CALORIES = 300

MORNING_HOUR = 10
AFTERNOON_HOUR = 12
MIDDAY_HOUR = 14
WHAT_NEXT_PROTEIN_HOUR = 15
DINNER_HOUR = 17
EVENING_HOUR = 18


def max_priority(current: Priority, candidate: Priority) -> Priority:
    return candidate if candidate.rank > current.rank else current


@dataclass(frozen=True)
class SignalRule(Generic[ContextT]):
    """Facts set, and optional priority raised, when ``predicate`` holds."""

    facts: tuple[str, ...]
    predicate: Callable[[ContextT], bool]
    priority: Callable[[ContextT], Priority | None] = lambda _ctx: None


def evaluate_rules(
    rules: Sequence[SignalRule[ContextT]],
    ctx: ContextT,
    facts: FactBag,
    priority: Priority = Priority.LOW,
) -> Priority:
    """Apply every matching rule in order; return the resulting priority."""
    for rule in rules:
        if not rule.predicate(ctx):
            continue
        for fact in rule.facts:
            facts[fact] = True
        raised = rule.priority(ctx)
        if raised is not None:
            priority = max_priority(priority, raised)
    return priority


def evaluate_first(
    rules: Sequence[SignalRule[ContextT]],
    ctx: ContextT,
    facts: FactBag,
    priority: Priority = Priority.LOW,
) -> Priority:
    """Apply only the first matching rule; return the resulting priority."""
    for rule in rules:
        if rule.predicate(ctx):
            return evaluate_rules([rule], ctx, facts, priority)
    return priority


def _always(priority: Priority) -> Callable[[object], Priority]:
    return lambda _ctx: priority


def _when_goal(
    priority: Priority, *goals: PrimaryGoal, otherwise: Priority | None = None
) -> Callable[["_Situation"], Priority | None]:
    def resolve(ctx: "_Situation") -> Priority | None:
        return priority if ctx.user.goal_type in goals else otherwise

    return resolve


def _fuels_training(user: UserContext) -> bool:
    return user.goal_type == PrimaryGoal.STRENGTH or user.has_focus(
        SecondaryFocus.ENDURANCE
    )


@dataclass(frozen=True)
class _Situation:
    user: UserContext


@dataclass(frozen=True)
class _MealSituation(_Situation):
    meal: MealNutrition
    protein_share: float
    carbs_share: float
    fat_share: float


@dataclass(frozen=True)
class _DaySituation(_Situation):
    day: DayContext
    calories_pct: float
    protein_pct: float
    carbs_pct: float
    expected_progress: float


# Meal rules.

MEAL_RULES: tuple[SignalRule[_MealSituation], ...] = (
    SignalRule(
        ("low_protein",),
        lambda s: s.protein_share < 0.15 and s.meal.calories > LOW_SHARE_MIN_CALORIES,
        _when_goal(Priority.MEDIUM, PrimaryGoal.MUSCLE_GAIN, PrimaryGoal.FAT_LOSS),
    ),
    SignalRule(
        ("high_protein",),
        lambda s: s.protein_share > 0.35,
        _always(Priority.MEDIUM),
    ),
    SignalRule(
        ("low_carbs",),
        lambda s: s.carbs_share < 0.15 and s.meal.calories > LOW_SHARE_MIN_CALORIES,
        lambda s: Priority.HIGH if _fuels_training(s.user) else None,
    ),
    SignalRule(("high_carbs",), lambda s: s.carbs_share > 0.65),
    SignalRule(
        ("high_fat",),
        lambda s: s.fat_share > 0.5 and s.meal.calories > HIGH_FAT_MIN_CALORIES,
        _when_goal(Priority.HIGH, PrimaryGoal.FAT_LOSS),
    ),
    SignalRule(("light_meal",), lambda s: s.meal.calories < LIGHT_MEAL_CALORIES),
    SignalRule(
        ("substantial_meal",),
        lambda s: s.meal.calories > SUBSTANTIAL_MEAL_CALORIES,
    ),
)


def detect_meal_signal(
    user: UserContext,
    meal: MealNutrition,
    daily_progress: DailyProgress | None = None,
) -> MealSignal | None:
    """Return facts about a meal's macro balance and size.

    Returns None for tiny or empty meals and when no rule matches.
    """
    total_macros = meal.protein_g + meal.carbs_g + meal.fat_g
    if total_macros <= 0 or meal.calories < MIN_MEAL_CALORIES:
        return None

    situation = _MealSituation(
        user=user,
        meal=meal,
        protein_share=meal.protein_g * PROTEIN_KCAL_PER_G / meal.calories,
        carbs_share=meal.carbs_g * CARBS_KCAL_PER_G / meal.calories,
        fat_share=meal.fat_g * FAT_KCAL_PER_G / meal.calories,
    )
    facts: FactBag = {}
    priority = evaluate_rules(MEAL_RULES, situation, facts)
    if not facts:
        return None
    if meal.protein_g > 0:
        facts["calories_per_protein"] = round_half_up(meal.calories / meal.protein_g)

    return MealSignal(
        priority=priority,
        facts=facts,
        goal_type=user.goal_type,
        secondary_focuses=user.secondary_focuses,
        meal=meal,
        daily_progress=daily_progress,
    )


# Daily rules.


def expected_progress(hour: int) -> float:
    """Share of the day's calories a typical user has eaten by ``hour``."""
    if hour < MORNING_HOUR:
        return 0.15
    if hour < MIDDAY_HOUR:
        return 0.4
    if hour < EVENING_HOUR:
        return 0.6
    return 0.85


def _all_goals_met(s: _DaySituation) -> bool:
    targets = s.user.targets
    return (
        s.calories_pct >= 0.95
        and s.day.protein_g >= targets.protein_g
        and s.day.carbs_g >= targets.carbs_g
        and s.day.fat_g >= targets.fat_g
    )


def _all_goals_exceeded(s: _DaySituation) -> bool:
    targets = s.user.targets
    return (
        s.calories_pct >= 1.1
        and s.day.protein_g >= targets.protein_g * 1.1
        and s.day.carbs_g >= targets.carbs_g * 0.9
        and s.day.fat_g >= targets.fat_g * 0.9
    )


GOAL_COMPLETION_RULES: tuple[SignalRule[_DaySituation], ...] = (
    SignalRule(("all_goals_exceeded", "all_goals_met"), _all_goals_exceeded),
    SignalRule(
        ("all_goals_met", "protein_met", "carbs_met", "fat_met"), _all_goals_met
    ),
)

PACING_RULES: tuple[SignalRule[_DaySituation], ...] = (
    SignalRule(
        ("pacing_light",),
        lambda s: s.calories_pct < s.expected_progress * 0.7,
        _when_goal(Priority.HIGH, PrimaryGoal.MUSCLE_GAIN),
    ),
    SignalRule(
        ("pacing_heavy",),
        lambda s: s.expected_progress * 1.3 < s.calories_pct < 1,
        _when_goal(Priority.HIGH, PrimaryGoal.FAT_LOSS),
    ),
    SignalRule(
        ("protein_lagging",),
        lambda s: s.protein_pct < s.calories_pct - 0.15 and s.protein_pct < 0.7,
        _when_goal(Priority.HIGH, PrimaryGoal.MUSCLE_GAIN, PrimaryGoal.FAT_LOSS),
    ),
    SignalRule(
        ("protein_strong",),
        lambda s: s.protein_pct > s.calories_pct + 0.15,
    ),
    SignalRule(
        ("carbs_low",),
        lambda s: s.carbs_pct < 0.3 and s.user.goal_type == PrimaryGoal.STRENGTH,
    ),
    SignalRule(
        ("goal_reached",),
        lambda s: s.calories_pct >= 1,
        _always(Priority.MEDIUM),
    ),
    SignalRule(("near_target",), lambda s: 0.85 < s.calories_pct < 1),
)


def _day_situation(user: UserContext, day: DayContext) -> _DaySituation:
    targets = user.targets
    return _DaySituation(
        user=user,
        day=day,
        calories_pct=safe_ratio(day.calories, targets.calories),
        protein_pct=safe_ratio(day.protein_g, targets.protein_g),
        carbs_pct=safe_ratio(day.carbs_g, targets.carbs_g),
        expected_progress=expected_progress(day.hour_of_day),
    )


def detect_daily_signal(user: UserContext, day: DayContext) -> DailySignal:
    """Return progress facts for a day so far.

    Goal completion is checked first (exceeded before met). Pacing and
    macro balance rules apply unless every goal is met, so an exceeded day
    that still falls short on carbs or fat gets them too.
    """
    situation = _day_situation(user, day)
    facts: FactBag = {}
    priority = Priority.LOW

    if day.is_past_date:
        facts["is_past_date"] = True

    if day.meal_count == 0:
        facts["no_meals"] = True
        priority = Priority.MEDIUM
    else:
        priority = evaluate_first(GOAL_COMPLETION_RULES, situation, facts, priority)
        if not _all_goals_met(situation):
            priority = evaluate_rules(PACING_RULES, situation, facts, priority)

    return DailySignal(
        priority=priority,
        facts=facts,
        goal_type=user.goal_type,
        secondary_focuses=user.secondary_focuses,
        day=day,
        targets=user.targets,
        expected_progress=situation.expected_progress,
    )


def daily_progress(user: UserContext, day: DayContext) -> DailyProgress:
    """Summarize day totals for attaching to a meal signal."""
    situation = _day_situation(user, day)
    targets = user.targets
    return DailyProgress(
        protein_met=day.protein_g >= targets.protein_g,
        carbs_met=day.carbs_g >= targets.carbs_g,
        fat_met=day.fat_g >= targets.fat_g,
        all_goals_met=_all_goals_met(situation),
        all_goals_exceeded=_all_goals_exceeded(situation),
        total_calories=day.calories,
        total_protein_g=day.protein_g,
        total_carbs_g=day.carbs_g,
        total_fat_g=day.fat_g,
    )


# What's-next rules.

WHAT_NEXT_RULES: tuple[SignalRule[_DaySituation], ...] = (
    SignalRule(
        ("protein_behind",),
        lambda s: s.protein_pct < 0.4
        and s.calories_pct > 0.4
        and s.day.hour_of_day >= WHAT_NEXT_PROTEIN_HOUR,
        _when_goal(
            Priority.HIGH,
            PrimaryGoal.MUSCLE_GAIN,
            PrimaryGoal.FAT_LOSS,
            otherwise=Priority.MEDIUM,
        ),
    ),
    SignalRule(
        ("dinner_decides",),
        lambda s: s.calories_pct < 0.4 and s.day.hour_of_day >= DINNER_HOUR,
        _always(Priority.MEDIUM),
    ),
    SignalRule(
        ("near_target_early",),
        lambda s: s.calories_pct > 0.85 and s.day.hour_of_day < EVENING_HOUR,
        _when_goal(Priority.HIGH, PrimaryGoal.FAT_LOSS),
    ),
    SignalRule(
        ("surplus_behind",),
        lambda s: s.user.goal_type == PrimaryGoal.MUSCLE_GAIN
        and s.calories_pct < 0.5
        and s.day.hour_of_day >= EVENING_HOUR,
        _always(Priority.HIGH),
    ),
    SignalRule(
        ("carbs_needed",),
        lambda s: _fuels_training(s.user)
        and s.carbs_pct < 0.4
        and s.day.hour_of_day < EVENING_HOUR,
        _always(Priority.MEDIUM),
    ),
)


def detect_what_next_signal(
    user: UserContext, day: DayContext
) -> WhatNextSignal | None:
    """Return a hint for the rest of the day.

    Only afternoons and evenings with at least one logged meal qualify.
    """
    if day.hour_of_day < AFTERNOON_HOUR or day.meal_count < 1:
        return None

    facts: FactBag = {}
    priority = evaluate_rules(WHAT_NEXT_RULES, _day_situation(user, day), facts)
    if not facts:
        return None
    return WhatNextSignal(
        priority=priority,
        facts=facts,
        goal_type=user.goal_type,
        secondary_focuses=user.secondary_focuses,
        day=day,
    )
