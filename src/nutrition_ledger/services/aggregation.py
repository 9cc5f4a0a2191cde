"""Read-only aggregation over ledger state."""

from collections.abc import Mapping

from nutrition_ledger.domain.models import DailyLog, Nutrients, Targets
from nutrition_ledger.domain.stats import DailyTotals, DaySummary, MetricProgress

DEFAULT_WINDOW_DAYS = 14


def daily_totals(log: DailyLog) -> DailyTotals:
    """Sum food nutrients and exercise burn for a log."""
    nutrients = Nutrients.zero()
    for entry in log.foods:
        nutrients = nutrients + entry.nutrients
    burned = sum(entry.calories_burned for entry in log.exercises)
    return DailyTotals(nutrients=nutrients, calories_burned=burned)


def balance(totals: DailyTotals, targets: Targets) -> float:
    """Net calories minus the calorie target; positive means surplus."""
    return totals.net_calories - targets.calories


def recent_logs(logs: Mapping[str, DailyLog], days: int = 7) -> list[DailyLog]:
    """Return the logs of the most recent date keys, oldest first."""
    if days <= 0:
        return []
    return [logs[key] for key in sorted(logs)[-days:]]


def series(
    logs: Mapping[str, DailyLog],
    targets: Targets,
    window: int = DEFAULT_WINDOW_DAYS,
) -> list[DaySummary]:
    """Return per-day summaries for the most recent ``window`` logged days."""
    summaries = []
    for log in recent_logs(logs, window):
        totals = daily_totals(log)
        summaries.append(
            DaySummary(
                date=log.date,
                food_calories=totals.food_calories,
                burned_calories=totals.calories_burned,
                net_calories=totals.net_calories,
                balance=balance(totals, targets),
                target_calories=targets.calories,
                weight_kg=log.weight_kg,
            )
        )
    return summaries


def weight_trend(summaries: list[DaySummary]) -> list[DaySummary]:
    """Keep only the days that carry a non-zero weight snapshot."""
    return [summary for summary in summaries if summary.weight_kg]


def target_progress(
    totals: DailyTotals, targets: Targets, water_ml: float
) -> dict[str, MetricProgress]:
    """Compare a day's intake to each target."""
    nutrients = totals.nutrients
    pairs = {
        "calories": (nutrients.calories, targets.calories),
        "protein_g": (nutrients.protein_g, targets.protein_g),
        "carbs_g": (nutrients.carbs_g, targets.carbs_g),
        "fat_g": (nutrients.fat_g, targets.fat_g),
        "fiber_g": (nutrients.fiber_g, targets.fiber_g),
        "sodium_mg": (nutrients.sodium_mg, targets.sodium_mg),
        "potassium_mg": (nutrients.potassium_mg, targets.potassium_mg),
        "water_ml": (water_ml, targets.water_ml),
    }
    return {
        name: MetricProgress(
            current=current, target=target, percent=_percent(current, target)
        )
        for name, (current, target) in pairs.items()
    }


def _percent(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(100.0, max(0.0, current / target * 100))
