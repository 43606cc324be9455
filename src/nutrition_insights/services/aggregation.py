"""Daily aggregation of per-meal nutrition entries."""

from collections.abc import Iterable

from nutrition_insights.domain.nutrition import DailyTotals, NutritionEntry
from nutrition_insights.services.day_keys import day_key, day_keys_between


def aggregate_daily(
    entries: Iterable[NutritionEntry],
    timezone_name: str,
    start_key: str,
    end_key: str,
) -> dict[str, DailyTotals]:
    """Group entries into per-day totals for every day in the range.

    Days without entries are present with zero totals. Entries outside the
    range are ignored.
    """
    daily = {key: DailyTotals(day_key=key) for key in day_keys_between(start_key, end_key)}
    for entry in entries:
        key = day_key(entry.logged_at, timezone_name)
        total = daily.get(key)
        if total is None:
            continue
        daily[key] = _add_entry(total, entry)
    return daily


def _add_entry(total: DailyTotals, entry: NutritionEntry) -> DailyTotals:
    return DailyTotals(
        day_key=total.day_key,
        calories=total.calories + max(0.0, entry.calories),
        protein_g=total.protein_g + max(0.0, entry.protein_g),
        carbs_g=total.carbs_g + max(0.0, entry.carbs_g),
        fat_g=total.fat_g + max(0.0, entry.fat_g),
        fiber_g=total.fiber_g + max(0.0, entry.fiber_g or 0.0),
        meal_count=total.meal_count + 1,
    )
