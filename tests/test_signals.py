"""Tests for goal-aware signal detection."""

import pytest

from nutrition_insights.domain.signals import (
    DayContext,
    MealNutrition,
    PrimaryGoal,
    Priority,
    SecondaryFocus,
    UserContext,
)
from nutrition_insights.services.signals import (
    daily_progress,
    detect_daily_signal,
    detect_meal_signal,
    detect_what_next_signal,
    expected_progress,
)
from tests.conftest import TARGETS


def _user(
    goal: PrimaryGoal = PrimaryGoal.HEALTH, *focuses: SecondaryFocus
) -> UserContext:
    return UserContext(goal_type=goal, targets=TARGETS, secondary_focuses=focuses)


def _day(
    calories: float,
    protein_g: float,
    carbs_g: float = 100,
    fat_g: float = 30,
    meal_count: int = 2,
    hour: int = 16,
    is_past_date: bool = False,
) -> DayContext:
    return DayContext(
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        meal_count=meal_count,
        hour_of_day=hour,
        is_past_date=is_past_date,
    )


def test_meal_signal_ignores_tiny_or_empty_meals() -> None:
    assert detect_meal_signal(_user(), MealNutrition(40, 5, 2, 1)) is None
    assert detect_meal_signal(_user(), MealNutrition(300, 0, 0, 0)) is None


def test_meal_signal_without_matching_rules_is_none() -> None:
    # 25% protein, 45% carbs, 30% fat, 400 kcal
    meal = MealNutrition(calories=400, protein_g=25, carbs_g=45, fat_g=13.3)

    assert detect_meal_signal(_user(), meal) is None


def test_meal_signal_low_protein_for_fat_loss() -> None:
    meal = MealNutrition(calories=600, protein_g=10, carbs_g=100, fat_g=18)

    signal = detect_meal_signal(_user(PrimaryGoal.FAT_LOSS), meal)

    assert signal is not None
    assert signal.signal_type == "meal"
    assert signal.facts["low_protein"] is True
    assert signal.facts["high_carbs"] is True
    assert signal.facts["calories_per_protein"] == 60
    assert signal.priority == Priority.MEDIUM


def test_meal_signal_low_protein_for_maintenance_stays_low() -> None:
    meal = MealNutrition(calories=600, protein_g=10, carbs_g=100, fat_g=18)

    signal = detect_meal_signal(_user(PrimaryGoal.MAINTENANCE), meal)

    assert signal is not None
    assert signal.priority == Priority.LOW


def test_meal_signal_low_carbs_escalates_for_training() -> None:
    meal = MealNutrition(calories=500, protein_g=60, carbs_g=10, fat_g=24)

    strength = detect_meal_signal(_user(PrimaryGoal.STRENGTH), meal)
    endurance = detect_meal_signal(
        _user(PrimaryGoal.HEALTH, SecondaryFocus.ENDURANCE), meal
    )
    health = detect_meal_signal(_user(), meal)

    assert strength is not None and strength.priority == Priority.HIGH
    assert endurance is not None and endurance.priority == Priority.HIGH
    assert health is not None and health.priority == Priority.MEDIUM
    assert health.facts == {
        "high_protein": True,
        "low_carbs": True,
        "calories_per_protein": 8,
    }


def test_meal_signal_high_fat_and_size_bands() -> None:
    meal = MealNutrition(calories=800, protein_g=20, carbs_g=30, fat_g=60)

    signal = detect_meal_signal(_user(PrimaryGoal.FAT_LOSS), meal)

    assert signal is not None
    assert signal.facts["high_fat"] is True
    assert signal.facts["substantial_meal"] is True
    assert signal.priority == Priority.HIGH


def test_meal_signal_carries_daily_progress() -> None:
    user = _user()
    progress = daily_progress(user, _day(2000, 150, 200, 70))
    meal = MealNutrition(calories=120, protein_g=2, carbs_g=25, fat_g=1)

    signal = detect_meal_signal(user, meal, daily_progress=progress)

    assert signal is not None
    assert signal.facts["light_meal"] is True
    assert signal.daily_progress is not None
    assert signal.daily_progress.all_goals_met is True


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(0, 0.15), (9, 0.15), (10, 0.4), (13, 0.4), (14, 0.6), (17, 0.6), (18, 0.85)],
)
def test_expected_progress_steps(hour: int, expected: float) -> None:
    assert expected_progress(hour) == expected


def test_daily_signal_without_meals() -> None:
    signal = detect_daily_signal(_user(), _day(0, 0, 0, 0, meal_count=0))

    assert signal.facts == {"no_meals": True}
    assert signal.priority == Priority.MEDIUM


def test_daily_signal_marks_past_dates() -> None:
    signal = detect_daily_signal(
        _user(), _day(0, 0, 0, 0, meal_count=0, is_past_date=True)
    )

    assert signal.facts["is_past_date"] is True


def test_exceeded_is_checked_before_met() -> None:
    signal = detect_daily_signal(_user(), _day(2300, 170, 200, 70))

    assert signal.facts == {"all_goals_exceeded": True, "all_goals_met": True}
    assert signal.priority == Priority.LOW


def test_exceeded_day_short_on_carbs_still_gets_pacing() -> None:
    signal = detect_daily_signal(
        _user(PrimaryGoal.FAT_LOSS), _day(2300, 170, 190, 65, meal_count=3, hour=20)
    )

    assert signal.facts == {
        "all_goals_exceeded": True,
        "all_goals_met": True,
        "goal_reached": True,
    }
    assert signal.priority == Priority.MEDIUM


def test_all_goals_met_skips_pacing() -> None:
    signal = detect_daily_signal(_user(), _day(1950, 150, 200, 70))

    assert signal.facts == {
        "all_goals_met": True,
        "protein_met": True,
        "carbs_met": True,
        "fat_met": True,
    }


def test_pacing_light_for_muscle_gain() -> None:
    signal = detect_daily_signal(
        _user(PrimaryGoal.MUSCLE_GAIN), _day(400, 30, 50, 15, hour=13)
    )

    assert signal.facts == {"pacing_light": True}
    assert signal.priority == Priority.HIGH
    assert signal.expected_progress == 0.4


def test_near_target_and_protein_strong() -> None:
    signal = detect_daily_signal(_user(), _day(1720, 160, 150, 50, hour=19))

    assert signal.facts["near_target"] is True
    assert signal.facts["protein_strong"] is True
    assert "goal_reached" not in signal.facts


def test_priority_is_never_lowered_by_a_later_rule() -> None:
    # protein_lagging raises to high; the later goal_reached rule is only
    # medium and must not downgrade it.
    signal = detect_daily_signal(
        _user(PrimaryGoal.FAT_LOSS), _day(2100, 60, 200, 70)
    )

    assert signal.facts["protein_lagging"] is True
    assert signal.facts["goal_reached"] is True
    assert signal.priority == Priority.HIGH


def test_what_next_is_gated_by_hour_and_meals() -> None:
    assert detect_what_next_signal(_user(), _day(1000, 40, hour=11)) is None
    assert detect_what_next_signal(_user(), _day(0, 0, meal_count=0)) is None


def test_what_next_protein_behind() -> None:
    health = detect_what_next_signal(_user(), _day(1000, 40, hour=16))
    gain = detect_what_next_signal(_user(PrimaryGoal.MUSCLE_GAIN), _day(1000, 40))

    assert health is not None
    assert health.facts == {"protein_behind": True}
    assert health.priority == Priority.MEDIUM
    assert gain is not None
    assert gain.priority == Priority.HIGH


def test_what_next_surplus_behind() -> None:
    signal = detect_what_next_signal(
        _user(PrimaryGoal.MUSCLE_GAIN), _day(800, 60, 100, 30, meal_count=1, hour=19)
    )

    assert signal is not None
    assert signal.facts == {"surplus_behind": True}
    assert signal.priority == Priority.HIGH


def test_what_next_dinner_decides_and_carbs_needed() -> None:
    signal = detect_what_next_signal(
        _user(PrimaryGoal.STRENGTH), _day(600, 50, 60, 20, hour=17)
    )

    assert signal is not None
    assert signal.facts == {"dinner_decides": True, "carbs_needed": True}
    assert signal.priority == Priority.MEDIUM


def test_what_next_without_matches_is_none() -> None:
    assert detect_what_next_signal(_user(), _day(1000, 100, 120, 40, hour=13)) is None
