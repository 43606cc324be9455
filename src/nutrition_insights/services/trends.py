"""Trend statistics over windows of daily totals."""

from collections.abc import Sequence

from nutrition_insights.domain.nutrition import METRICS, DailyTotals, GoalTargets
from nutrition_insights.domain.trends import (
    ConfidenceLevel,
    Coverage,
    MetricStats,
    PeriodAggregate,
    PeriodComparison,
    Trend,
    TrendSummary,
)
from nutrition_insights.services.numeric import clamp, mean, population_std_dev

TREND_THRESHOLD_PCT = 5
MIN_HALF_SIZE = 2
HIGH_COVERAGE_PCT = 80
MEDIUM_COVERAGE_PCT = 50


def metric_stats(values: Sequence[float], target: float) -> MetricStats:
    """Return mean, spread, consistency and trend for one metric.

    Days where the metric is zero carry no logged data and are skipped.
    """
    logged = [value for value in values if value > 0]
    if not logged:
        return MetricStats(mean=0.0, std_dev=0.0, consistency_score=0.0, trend=Trend.STABLE)

    std_dev = population_std_dev(logged)
    if target > 0:
        consistency = clamp(100 - (std_dev / target) * 100, 0, 100)
    else:
        consistency = 0.0
    return MetricStats(
        mean=mean(logged),
        std_dev=std_dev,
        consistency_score=consistency,
        trend=trend_direction(logged),
    )


def trend_direction(values: Sequence[float]) -> Trend:
    """Compare the average of the first half with the last half.

    Both halves hold ``len(values) // 2`` points; for odd lengths they
    overlap by one element.
    """
    half = len(values) // 2
    if half < MIN_HALF_SIZE:
        return Trend.STABLE
    first_avg = mean(values[:half])
    second_avg = mean(values[-half:])
    if first_avg == 0:
        return Trend.STABLE
    change_pct = (second_avg - first_avg) / first_avg * 100
    if change_pct > TREND_THRESHOLD_PCT:
        return Trend.UP
    if change_pct < -TREND_THRESHOLD_PCT:
        return Trend.DOWN
    return Trend.STABLE


def coverage(window: Sequence[DailyTotals]) -> Coverage:
    """Return how much of the window has logged meals."""
    total_days = len(window)
    logged_days = sum(1 for day in window if day.meal_count > 0)
    percentage = logged_days / total_days * 100 if total_days else 0.0
    if percentage >= HIGH_COVERAGE_PCT:
        level = ConfidenceLevel.HIGH
    elif percentage >= MEDIUM_COVERAGE_PCT:
        level = ConfidenceLevel.MEDIUM
    else:
        level = ConfidenceLevel.LOW
    return Coverage(
        logged_days=logged_days,
        total_days=total_days,
        percentage=percentage,
        level=level,
    )


def summarize_trends(
    window: Sequence[DailyTotals], targets: GoalTargets
) -> TrendSummary:
    """Return per-metric statistics and coverage for an ordered window."""
    stats = {
        metric: metric_stats(
            [day.value_of(metric) for day in window], targets.value_of(metric)
        )
        for metric in METRICS
    }
    return TrendSummary(
        start_key=window[0].day_key if window else None,
        end_key=window[-1].day_key if window else None,
        days=list(window),
        stats=stats,
        coverage=coverage(window),
    )


def aggregate_period(window: Sequence[DailyTotals]) -> PeriodAggregate:
    """Average a period over the days that have any logged meal."""
    logged = [day for day in window if day.meal_count > 0]
    calories = [day.calories for day in logged]
    return PeriodAggregate(
        avg_calories=mean(calories),
        avg_protein_g=mean([day.protein_g for day in logged]),
        avg_carbs_g=mean([day.carbs_g for day in logged]),
        avg_fat_g=mean([day.fat_g for day in logged]),
        calorie_variability=population_std_dev(calories),
        logged_days=len(logged),
        total_days=len(window),
    )


def percent_delta(current: float, previous: float) -> float:
    """Percent change from previous to current.

    A zero baseline reports 100 when current is positive, otherwise 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def compare_periods(
    current: Sequence[DailyTotals], previous: Sequence[DailyTotals]
) -> PeriodComparison:
    """Compare two adjacent, equal-length windows."""
    current_period = aggregate_period(current)
    previous_period = aggregate_period(previous)
    deltas = {
        "calories": percent_delta(
            current_period.avg_calories, previous_period.avg_calories
        ),
        "protein": percent_delta(
            current_period.avg_protein_g, previous_period.avg_protein_g
        ),
        "carbs": percent_delta(current_period.avg_carbs_g, previous_period.avg_carbs_g),
        "fat": percent_delta(current_period.avg_fat_g, previous_period.avg_fat_g),
        "variability": percent_delta(
            current_period.calorie_variability, previous_period.calorie_variability
        ),
    }
    return PeriodComparison(
        current=current_period, previous=previous_period, deltas=deltas
    )
