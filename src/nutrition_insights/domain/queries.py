"""Pydantic models validating analytics queries at the service boundary."""

from datetime import date
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
MONTH_PATTERN = r"^\d{4}-\d{2}$"
DECEMBER = 12
# Local days are converted to UTC bounds one day either side.
MIN_YEAR = date.min.year + 1
MAX_YEAR = date.max.year - 1

TREND_RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90, "180d": 180}
COMPARISON_PRESET_DAYS = {"14d": 14, "30d": 30}


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")


def _check_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {value}") from exc
    return value


def _check_day_key(value: str) -> str:
    _check_year(date.fromisoformat(value).year)
    return value


class DayKeyQuery(BaseModel):
    """A single local calendar day."""

    day_key: str = Field(pattern=DAY_KEY_PATTERN)
    timezone: str = "UTC"

    @field_validator("day_key")
    @classmethod
    def validate_day_key(cls, value: str) -> str:
        return _check_day_key(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return _check_timezone(value)


class DateRangeQuery(BaseModel):
    """Inclusive range of local calendar days."""

    start_key: str = Field(pattern=DAY_KEY_PATTERN)
    end_key: str = Field(pattern=DAY_KEY_PATTERN)
    timezone: str = "UTC"

    @field_validator("start_key", "end_key")
    @classmethod
    def validate_day_key(cls, value: str) -> str:
        return _check_day_key(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @model_validator(mode="after")
    def validate_order(self) -> "DateRangeQuery":
        if self.end_key < self.start_key:
            raise ValueError("end_key must not precede start_key")
        return self


class MonthQuery(BaseModel):
    """A calendar month as ``YYYY-MM``."""

    month: str = Field(pattern=MONTH_PATTERN)

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str) -> str:
        if not 1 <= int(value[5:]) <= DECEMBER:
            raise ValueError("month must be between 01 and 12")
        _check_year(int(value[:4]))
        return value

    @property
    def year_number(self) -> int:
        return int(self.month[:4])

    @property
    def month_number(self) -> int:
        return int(self.month[5:])


class TrendRangeQuery(BaseModel):
    """Preset trailing range for trend statistics."""

    range: Literal["7d", "30d", "90d", "180d"] = "30d"

    @property
    def days(self) -> int:
        return TREND_RANGE_DAYS[self.range]


class ComparisonQuery(BaseModel):
    """Preset for comparing the last N days with the N before them."""

    preset: Literal["14d", "30d"] = "14d"

    @property
    def days(self) -> int:
        return COMPARISON_PRESET_DAYS[self.preset]
