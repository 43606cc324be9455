"""Tests for query validation models."""

import pytest
from pydantic import ValidationError

from nutrition_insights.domain.queries import (
    ComparisonQuery,
    DateRangeQuery,
    DayKeyQuery,
    MonthQuery,
    TrendRangeQuery,
)


def test_date_range_query_accepts_valid_range() -> None:
    query = DateRangeQuery(
        start_key="2024-05-01", end_key="2024-05-31", timezone="Europe/Berlin"
    )

    assert query.start_key == "2024-05-01"


@pytest.mark.parametrize(
    "payload",
    [
        {"start_key": "2024-05-10", "end_key": "2024-05-01"},
        {"start_key": "2024-5-1", "end_key": "2024-05-02"},
        {"start_key": "2024-02-30", "end_key": "2024-03-01"},
        {"start_key": "2024-05-01", "end_key": "2024-05-02", "timezone": "Mars/Base"},
    ],
)
def test_date_range_query_rejects_malformed_input(payload: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        DateRangeQuery(**payload)


def test_day_key_query_rejects_bad_key() -> None:
    with pytest.raises(ValidationError):
        DayKeyQuery(day_key="yesterday")


def test_month_query() -> None:
    query = MonthQuery(month="2024-02")

    assert query.year_number == 2024
    assert query.month_number == 2
    with pytest.raises(ValidationError):
        MonthQuery(month="2024-13")


@pytest.mark.parametrize("month", ["0000-01", "0001-01", "9999-12"])
def test_month_query_rejects_years_without_day_bounds(month: str) -> None:
    with pytest.raises(ValidationError):
        MonthQuery(month=month)


@pytest.mark.parametrize("day_key", ["0001-01-01", "9999-12-31"])
def test_day_key_query_rejects_years_without_day_bounds(day_key: str) -> None:
    with pytest.raises(ValidationError):
        DayKeyQuery(day_key=day_key)
    with pytest.raises(ValidationError):
        DateRangeQuery(start_key="2024-01-01", end_key=day_key)


def test_queries_accept_outermost_supported_years() -> None:
    assert MonthQuery(month="0002-01").year_number == 2
    assert MonthQuery(month="9998-12").month_number == 12
    assert DayKeyQuery(day_key="9998-12-31").day_key == "9998-12-31"


def test_range_presets() -> None:
    assert TrendRangeQuery().days == 30
    assert TrendRangeQuery(range="180d").days == 180
    assert ComparisonQuery().days == 14
    with pytest.raises(ValidationError):
        TrendRangeQuery(range="365d")
    with pytest.raises(ValidationError):
        ComparisonQuery(preset="7d")
