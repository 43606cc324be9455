"""Tests for the day score engine."""

import math

import pytest

from nutrition_insights.domain.nutrition import DailyTotals, GoalTargets
from nutrition_insights.domain.scores import DayStatus
from nutrition_insights.services.scoring import macro_score, score_day, status_for
from tests.conftest import TARGETS, active_day


def test_score_day_worked_example() -> None:
    day = active_day(
        "2024-05-15", calories=1900, protein_g=140, carbs_g=190, fat_g=60, meal_count=2
    )

    score = score_day(day, TARGETS)

    assert score.calories_score == pytest.approx(90)
    assert score.protein_score == pytest.approx(86.67, abs=0.01)
    assert score.carbs_score == pytest.approx(90)
    assert score.fat_score == pytest.approx(71.43, abs=0.01)
    assert score.goal_score == 86
    assert score.status == DayStatus.ON_TRACK


def test_score_day_without_meals_is_no_data() -> None:
    score = score_day(DailyTotals(day_key="2024-05-15"), TARGETS)

    assert score.goal_score == 0
    assert score.status == DayStatus.NO_DATA


def test_zero_targets_never_produce_nan() -> None:
    targets = GoalTargets(calories=0, protein_g=0, carbs_g=0, fat_g=0)

    score = score_day(active_day("2024-05-15"), targets)

    assert score.goal_score == 0
    assert not math.isnan(score.calories_score)
    assert score.status == DayStatus.FAR_OFF


@pytest.mark.parametrize(
    ("actual", "expected"),
    [(2000, 100), (3000, 0), (10000, 0), (0, 0), (1500, 50)],
)
def test_macro_score_bounds(actual: float, expected: float) -> None:
    assert macro_score(actual, 2000) == pytest.approx(expected)


def test_status_thresholds() -> None:
    assert status_for(70) == DayStatus.ON_TRACK
    assert status_for(69) == DayStatus.OFF_TARGET
    assert status_for(40) == DayStatus.OFF_TARGET
    assert status_for(39) == DayStatus.FAR_OFF
