"""Tests for pure ledger mutations."""

import math

import pytest

from nutrition_ledger.domain.models import (
    ActivityLevel,
    AppState,
    DailyLog,
    MealCategory,
    Profile,
    Sex,
)
from nutrition_ledger.errors import InvalidMutationError
from nutrition_ledger.services.ledger import (
    add_exercise_entry,
    add_favorite,
    add_food_entry,
    add_water,
    delete_entry,
    get_log,
    instantiate_favorite,
    record_daily_weight,
    remove_favorite,
    save_profile_and_targets,
    update_profile,
)
from nutrition_ledger.services.targets import compute_targets
from tests.conftest import make_exercise, make_food

DAY = "2026-03-14"


def test_add_food_entry_creates_log_lazily(empty_state: AppState) -> None:
    state = add_food_entry(empty_state, DAY, make_food())

    log = state.logs[DAY]
    assert log.date == DAY
    assert [entry.id for entry in log.foods] == ["food-1"]
    assert log.exercises == ()
    assert log.water_ml == 0
    assert empty_state.logs == {}


def test_add_food_entry_appends_in_order(empty_state: AppState) -> None:
    state = add_food_entry(empty_state, DAY, make_food("a"))
    state = add_food_entry(state, DAY, make_food("b"))

    assert [entry.id for entry in state.logs[DAY].foods] == ["a", "b"]


def test_add_exercise_entry_appends(empty_state: AppState) -> None:
    state = add_exercise_entry(empty_state, DAY, make_exercise())

    assert state.logs[DAY].exercises[0].calories_burned == 80
    assert state.logs[DAY].foods == ()


def test_add_then_delete_restores_entries(empty_state: AppState) -> None:
    before = add_food_entry(empty_state, DAY, make_food("keep"))
    added = add_food_entry(before, DAY, make_food("drop"))

    after = delete_entry(added, DAY, "drop")

    assert after.logs[DAY].foods == before.logs[DAY].foods


def test_delete_entry_removes_exercise_ids(empty_state: AppState) -> None:
    state = add_exercise_entry(empty_state, DAY, make_exercise("ex"))

    state = delete_entry(state, DAY, "ex")

    assert state.logs[DAY].exercises == ()


def test_delete_entry_without_log_returns_same_state(empty_state: AppState) -> None:
    assert delete_entry(empty_state, DAY, "missing") is empty_state


def test_add_water_is_additive(empty_state: AppState) -> None:
    state = add_water(empty_state, DAY, 250)
    state = add_water(state, DAY, 250)

    assert state.logs[DAY].water_ml == 500


@pytest.mark.parametrize("amount", [0, -250, math.nan, math.inf])
def test_add_water_rejects_invalid_amounts(
    empty_state: AppState, amount: float
) -> None:
    with pytest.raises(InvalidMutationError):
        add_water(empty_state, DAY, amount)  # type: ignore[arg-type]


def test_add_food_entry_rejects_negative_nutrients(empty_state: AppState) -> None:
    with pytest.raises(InvalidMutationError):
        add_food_entry(empty_state, DAY, make_food(calories=-10))


def test_add_favorite_snapshots_name_and_nutrients(empty_state: AppState) -> None:
    entry = make_food("source", calories=300, category=MealCategory.DINNER)

    state = add_favorite(empty_state, entry)

    favorite = state.favorites[0]
    assert favorite.id != entry.id
    assert favorite.name == entry.name
    assert favorite.nutrients == entry.nutrients


def test_instantiate_favorite_creates_fresh_snack_entry(empty_state: AppState) -> None:
    favorite = add_favorite(empty_state, make_food(calories=300)).favorites[0]

    first = instantiate_favorite(favorite)
    second = instantiate_favorite(favorite, category=MealCategory.BREAKFAST)

    assert first.id != second.id
    assert first.category == MealCategory.SNACK
    assert second.category == MealCategory.BREAKFAST
    assert first.nutrients == favorite.nutrients
    assert first.timestamp > 0


def test_remove_favorite(empty_state: AppState) -> None:
    state = add_favorite(empty_state, make_food())
    favorite_id = state.favorites[0].id

    assert remove_favorite(state, favorite_id).favorites == ()
    assert remove_favorite(state, "unknown") is state


def test_save_profile_and_targets_records_weight(empty_state: AppState) -> None:
    profile = Profile(
        weight_kg=82,
        height_cm=180,
        age=30,
        sex=Sex.MALE,
        activity_level=ActivityLevel.ACTIVE,
    )
    targets = compute_targets(profile)

    state = save_profile_and_targets(empty_state, profile, targets, DAY)

    assert state.profile == profile
    assert state.targets == targets
    assert state.logs[DAY].weight_kg == 82


def test_save_profile_and_targets_is_idempotent(empty_state: AppState) -> None:
    profile = Profile(
        weight_kg=64,
        height_cm=168,
        age=35,
        sex=Sex.FEMALE,
        activity_level=ActivityLevel.LIGHT,
    )
    targets = compute_targets(profile)

    once = save_profile_and_targets(empty_state, profile, targets, DAY)
    twice = save_profile_and_targets(once, profile, targets, DAY)

    assert once == twice


def test_update_profile_does_not_touch_logs(empty_state: AppState) -> None:
    profile = Profile(
        weight_kg=90,
        height_cm=190,
        age=50,
        sex=Sex.MALE,
        activity_level=ActivityLevel.SEDENTARY,
    )

    state = update_profile(empty_state, profile, compute_targets(profile))

    assert state.logs == {}


def test_record_daily_weight_keeps_entries(empty_state: AppState) -> None:
    state = add_food_entry(empty_state, DAY, make_food())

    state = record_daily_weight(state, DAY, 71.5)

    assert state.logs[DAY].weight_kg == 71.5
    assert len(state.logs[DAY].foods) == 1


def test_get_log_returns_empty_default_without_storing(empty_state: AppState) -> None:
    log = get_log(empty_state, DAY)

    assert log == DailyLog(date=DAY)
    assert DAY not in empty_state.logs
