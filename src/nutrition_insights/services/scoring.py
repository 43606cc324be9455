"""Day score engine."""

from nutrition_insights.domain.nutrition import DailyTotals, GoalTargets
from nutrition_insights.domain.scores import DayScore, DayStatus
from nutrition_insights.services.numeric import round_half_up

CALORIE_WEIGHT = 0.4
PROTEIN_WEIGHT = 0.3
CARBS_WEIGHT = 0.15
FAT_WEIGHT = 0.15

ON_TRACK_SCORE = 70
OFF_TARGET_SCORE = 40


def macro_score(actual: float, target: float) -> float:
    """Score one macro 0-100; a 50% deviation from target scores 0."""
    if target <= 0:
        return 0.0
    deviation = abs(actual - target) / target
    return max(0.0, 100 - deviation * 200)


def score_day(totals: DailyTotals, targets: GoalTargets) -> DayScore:
    """Return the goal adherence score and status for one day."""
    if totals.meal_count == 0:
        return DayScore(goal_score=0, status=DayStatus.NO_DATA)

    calories_score = macro_score(totals.calories, targets.calories)
    protein_score = macro_score(totals.protein_g, targets.protein_g)
    carbs_score = macro_score(totals.carbs_g, targets.carbs_g)
    fat_score = macro_score(totals.fat_g, targets.fat_g)
    goal_score = round_half_up(
        calories_score * CALORIE_WEIGHT
        + protein_score * PROTEIN_WEIGHT
        + carbs_score * CARBS_WEIGHT
        + fat_score * FAT_WEIGHT
    )
    return DayScore(
        goal_score=goal_score,
        status=status_for(goal_score),
        calories_score=calories_score,
        protein_score=protein_score,
        carbs_score=carbs_score,
        fat_score=fat_score,
    )


def status_for(goal_score: int) -> DayStatus:
    if goal_score >= ON_TRACK_SCORE:
        return DayStatus.ON_TRACK
    if goal_score >= OFF_TARGET_SCORE:
        return DayStatus.OFF_TARGET
    return DayStatus.FAR_OFF
