"""Goal target derivation and goal vocabulary."""

import json

from nutrition_insights.domain.nutrition import GoalTargets
from nutrition_insights.domain.signals import PrimaryGoal, SecondaryFocus
from nutrition_insights.services.numeric import round_half_up

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "athlete": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

PRIMARY_GOAL_LABELS = {
    PrimaryGoal.FAT_LOSS: ("Fat Loss", "Lose body fat while preserving muscle"),
    PrimaryGoal.MAINTENANCE: (
        "Maintenance",
        "Maintain current weight and body composition",
    ),
    PrimaryGoal.MUSCLE_GAIN: ("Muscle Gain", "Build muscle with a calorie surplus"),
    PrimaryGoal.STRENGTH: (
        "Strength & Performance",
        "Optimize for lifting and athletic output",
    ),
    PrimaryGoal.RECOMP: ("Recomposition", "Slowly lose fat while building muscle"),
    PrimaryGoal.HEALTH: (
        "General Health",
        "Focus on overall wellness and nutrition quality",
    ),
}

# Short names used in summaries where they differ from the full label.
_SHORT_GOAL_LABELS = {PrimaryGoal.RECOMP: "Body Recomp"}

SECONDARY_FOCUS_LABELS = {
    SecondaryFocus.VEGAN: "Plant-Based / Vegan",
    SecondaryFocus.VEGETARIAN: "Vegetarian",
    SecondaryFocus.STRENGTH_LIFTING: "Strength Training",
    SecondaryFocus.ENDURANCE: "Endurance / Cardio",
    SecondaryFocus.LONGEVITY: "Longevity & Micronutrients",
    SecondaryFocus.SATIETY: "Satiety & Hunger Control",
    SecondaryFocus.AESTHETIC: "Get Lean / Aesthetic",
    SecondaryFocus.METABOLIC_HEALTH: "Metabolic Health",
}

_LEGACY_GOALS = {
    "lose": PrimaryGoal.FAT_LOSS,
    "maintain": PrimaryGoal.MAINTENANCE,
    "gain": PrimaryGoal.MUSCLE_GAIN,
}

_CUTTING_GOALS = {PrimaryGoal.FAT_LOSS, PrimaryGoal.RECOMP}
_BULKING_GOALS = {PrimaryGoal.MUSCLE_GAIN}


def map_goal_type(raw: str | None) -> PrimaryGoal:
    """Map stored goal strings, including legacy ones, to a primary goal."""
    if raw is None:
        return PrimaryGoal.HEALTH
    if raw in _LEGACY_GOALS:
        return _LEGACY_GOALS[raw]
    try:
        return PrimaryGoal(raw)
    except ValueError:
        return PrimaryGoal.HEALTH


def parse_secondary_focuses(raw: str | list[str] | None) -> tuple[SecondaryFocus, ...]:
    """Parse a JSON array (or list) of focus names, dropping unknown ones."""
    if not raw:
        return ()
    values: object = raw
    if isinstance(raw, str):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError:
            return ()
    if not isinstance(values, list):
        return ()
    known = {focus.value: focus for focus in SecondaryFocus}
    return tuple(known[value] for value in values if value in known)


def goal_label(goal: PrimaryGoal) -> str:
    return _SHORT_GOAL_LABELS.get(goal, PRIMARY_GOAL_LABELS[goal][0])


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: str) -> float:
    """Basal metabolic rate, Mifflin-St Jeor."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "female":
        return base - 161
    return base + 5


def calculate_tdee(bmr: float, activity_level: str) -> int:
    """Total daily energy expenditure for an activity level."""
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)
    return round_half_up(bmr * multiplier)


def calculate_macro_targets(
    calories: float, goal: PrimaryGoal, body_weight_kg: float
) -> GoalTargets:
    """Split a calorie target into macros for a goal and body weight.

    Protein is set per kg of body weight, fat as a share of calories, and
    carbs take the remaining calories.
    """
    if goal in _CUTTING_GOALS:
        protein_per_kg = 2.2
    elif goal in _BULKING_GOALS:
        protein_per_kg = 2.0
    else:
        protein_per_kg = 1.8
    protein = round_half_up(body_weight_kg * protein_per_kg)

    fat_share = 0.25 if goal == PrimaryGoal.FAT_LOSS else 0.30
    fat_calories = calories * fat_share
    carb_calories = calories - protein * 4 - fat_calories
    return GoalTargets(
        calories=calories,
        protein_g=protein,
        carbs_g=max(0, round_half_up(carb_calories / 4)),
        fat_g=round_half_up(fat_calories / 9),
    )
