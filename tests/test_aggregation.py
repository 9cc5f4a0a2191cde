"""Tests for ledger aggregation."""

from dataclasses import replace

import pytest

from nutrition_ledger.domain.models import DEFAULT_TARGETS, DailyLog
from nutrition_ledger.services.aggregation import (
    balance,
    daily_totals,
    recent_logs,
    series,
    target_progress,
    weight_trend,
)
from tests.conftest import make_exercise, make_food


def _log(day: str, calories: float = 0, weight: float | None = None) -> DailyLog:
    foods = (make_food(f"{day}-f", calories=calories),) if calories else ()
    return DailyLog(date=day, foods=foods, weight_kg=weight)


def test_daily_totals_and_balance() -> None:
    log = DailyLog(
        date="2026-03-14",
        foods=(make_food("a", calories=100), make_food("b", calories=250)),
        exercises=(make_exercise(burned=80),),
    )

    totals = daily_totals(log)

    assert totals.food_calories == 350
    assert totals.calories_burned == 80
    assert totals.net_calories == 270
    assert totals.nutrients.protein_g == 20
    assert totals.nutrients.sodium_mg == 300
    assert balance(totals, DEFAULT_TARGETS) == -1730


def test_empty_log_totals_are_zero() -> None:
    totals = daily_totals(DailyLog(date="2026-03-14"))

    assert totals.net_calories == 0
    assert balance(totals, DEFAULT_TARGETS) == -DEFAULT_TARGETS.calories


def test_recent_logs_takes_latest_keys_oldest_first() -> None:
    logs = {day: _log(day) for day in ["2026-01-03", "2026-01-01", "2026-01-02"]}

    assert [log.date for log in recent_logs(logs, 2)] == ["2026-01-02", "2026-01-03"]
    assert recent_logs(logs, 0) == []
    assert len(recent_logs(logs, 10)) == 3


def test_series_respects_window_and_order() -> None:
    days = [f"2026-01-{day:02d}" for day in range(1, 21)]
    logs = {day: _log(day, 1000) for day in days}

    summaries = series(logs, DEFAULT_TARGETS)

    assert len(summaries) == 14
    assert summaries[0].date == "2026-01-07"
    assert summaries[-1].date == "2026-01-20"
    assert summaries[0].food_calories == 1000
    assert summaries[0].balance == -1000
    assert summaries[0].target_calories == DEFAULT_TARGETS.calories


def test_weight_trend_skips_missing_weights() -> None:
    logs = {
        "2026-01-01": _log("2026-01-01", weight=80),
        "2026-01-02": _log("2026-01-02"),
        "2026-01-03": _log("2026-01-03", weight=0),
        "2026-01-04": _log("2026-01-04", weight=79.4),
    }

    trend = weight_trend(series(logs, DEFAULT_TARGETS, window=7))

    assert [(point.date, point.weight_kg) for point in trend] == [
        ("2026-01-01", 80),
        ("2026-01-04", 79.4),
    ]


def test_target_progress_is_clamped() -> None:
    log = DailyLog(
        date="2026-03-14",
        foods=(make_food(calories=3000),),
        water_ml=1750,
    )

    progress = target_progress(daily_totals(log), DEFAULT_TARGETS, log.water_ml)

    assert progress["calories"].percent == 100
    assert progress["calories"].current == 3000
    assert progress["water_ml"].percent == pytest.approx(50)
    assert progress["fiber_g"].current == 2


def test_target_progress_with_zero_target() -> None:
    targets = replace(DEFAULT_TARGETS, carbs_g=0)

    progress = target_progress(daily_totals(_log("2026-03-14", 100)), targets, 0)

    assert progress["carbs_g"].percent == 0
