"""Ledger mutations and the stateful ledger host."""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import uuid4

from nutrition_ledger.dates import now_millis, today_key
from nutrition_ledger.domain.models import (
    AppState,
    DailyLog,
    ExerciseEntry,
    FavoriteEntry,
    FoodEntry,
    MealCategory,
    Nutrients,
    Profile,
    Targets,
)
from nutrition_ledger.errors import InvalidMutationError
from nutrition_ledger.services.migration import dump_state, load_state

_logger = logging.getLogger(__name__)


def get_log(state: AppState, date_key: str) -> DailyLog:
    """Return the log for a date, or an empty one without storing it."""
    return state.logs.get(date_key) or DailyLog(date=date_key)


def add_food_entry(state: AppState, date_key: str, entry: FoodEntry) -> AppState:
    """Append a food entry to the day's log, creating the log if needed."""
    _check_nutrients(entry.nutrients)
    log = get_log(state, date_key)
    return _with_log(state, date_key, replace(log, foods=(*log.foods, entry)))


def add_exercise_entry(
    state: AppState, date_key: str, entry: ExerciseEntry
) -> AppState:
    """Append an exercise entry to the day's log, creating the log if needed."""
    _check_non_negative("calories_burned", entry.calories_burned)
    if entry.duration_minutes is not None:
        _check_non_negative("duration_minutes", entry.duration_minutes)
    log = get_log(state, date_key)
    return _with_log(state, date_key, replace(log, exercises=(*log.exercises, entry)))


def delete_entry(state: AppState, date_key: str, entry_id: str) -> AppState:
    """Remove an entry id from both the food and exercise sequences."""
    log = state.logs.get(date_key)
    if log is None:
        return state
    return _with_log(
        state,
        date_key,
        replace(
            log,
            foods=tuple(entry for entry in log.foods if entry.id != entry_id),
            exercises=tuple(entry for entry in log.exercises if entry.id != entry_id),
        ),
    )


def add_water(state: AppState, date_key: str, amount_ml: int) -> AppState:
    """Increase the day's water intake by a positive amount."""
    if not _is_finite(amount_ml) or amount_ml <= 0:
        raise InvalidMutationError(f"Water amount must be positive, got {amount_ml}")
    log = get_log(state, date_key)
    return _with_log(state, date_key, replace(log, water_ml=log.water_ml + amount_ml))


def add_favorite(state: AppState, entry: FoodEntry) -> AppState:
    """Save a nutrient snapshot of a food entry as a new favorite."""
    favorite = FavoriteEntry(
        id=str(uuid4()), name=entry.name, nutrients=entry.nutrients
    )
    return replace(state, favorites=(*state.favorites, favorite))


def remove_favorite(state: AppState, favorite_id: str) -> AppState:
    """Drop a favorite by id."""
    if not any(favorite.id == favorite_id for favorite in state.favorites):
        return state
    return replace(
        state,
        favorites=tuple(fav for fav in state.favorites if fav.id != favorite_id),
    )


def instantiate_favorite(
    favorite: FavoriteEntry,
    *,
    category: MealCategory = MealCategory.SNACK,
    timestamp: int | None = None,
) -> FoodEntry:
    """Create a fresh food entry from a favorite template."""
    return FoodEntry(
        id=str(uuid4()),
        name=favorite.name,
        timestamp=now_millis() if timestamp is None else timestamp,
        nutrients=replace(favorite.nutrients),
        category=category,
    )


def update_profile(state: AppState, profile: Profile, targets: Targets) -> AppState:
    """Replace profile and targets wholesale."""
    return replace(state, profile=profile, targets=targets)


def record_daily_weight(state: AppState, date_key: str, weight_kg: float) -> AppState:
    """Store the weight snapshot for a day."""
    _check_non_negative("weight_kg", weight_kg)
    log = get_log(state, date_key)
    return _with_log(state, date_key, replace(log, weight_kg=weight_kg))


def save_profile_and_targets(
    state: AppState, profile: Profile, targets: Targets, date_key: str
) -> AppState:
    """Save settings and sync the profile weight into that day's log."""
    updated = update_profile(state, profile, targets)
    return record_daily_weight(updated, date_key, profile.weight_kg)


def _with_log(state: AppState, date_key: str, log: DailyLog) -> AppState:
    return replace(state, logs={**state.logs, date_key: log})


def _check_nutrients(nutrients: Nutrients) -> None:
    for name in (
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "fiber_g",
        "sodium_mg",
        "potassium_mg",
    ):
        _check_non_negative(name, getattr(nutrients, name))


def _check_non_negative(name: str, value: float) -> None:
    if not _is_finite(value) or value < 0:
        raise InvalidMutationError(f"{name} must be a non-negative number, got {value}")


def _is_finite(value: object) -> bool:
    return isinstance(value, int | float) and math.isfinite(value)


class StateRepository(Protocol):
    """Storage port for the serialized ledger state."""

    def load(self) -> str | None:
        """Return the persisted blob, or None when nothing was saved yet."""

    def save(self, payload: str) -> None:
        """Persist the serialized blob, replacing any previous one."""


@dataclass
class LedgerService:
    """Holds the current ledger state and persists every mutation."""

    repository: StateRepository
    timezone: str | None = None
    state: AppState = field(init=False)

    def __post_init__(self) -> None:
        self.state = self._load()

    def today(self) -> str:
        """Return today's date key in the configured timezone."""
        return today_key(self.timezone)

    def current_log(self, date_key: str | None = None) -> DailyLog:
        """Return the log for a date (today by default)."""
        return get_log(self.state, date_key or self.today())

    def add_food(self, entry: FoodEntry, date_key: str | None = None) -> AppState:
        """Log a food entry."""
        return self._apply(add_food_entry(self.state, date_key or self.today(), entry))

    def add_exercise(
        self, entry: ExerciseEntry, date_key: str | None = None
    ) -> AppState:
        """Log an exercise entry."""
        return self._apply(
            add_exercise_entry(self.state, date_key or self.today(), entry)
        )

    def delete_entry(self, entry_id: str, date_key: str | None = None) -> AppState:
        """Delete a food or exercise entry."""
        return self._apply(delete_entry(self.state, date_key or self.today(), entry_id))

    def add_water(self, amount_ml: int, date_key: str | None = None) -> AppState:
        """Log water intake."""
        return self._apply(add_water(self.state, date_key or self.today(), amount_ml))

    def add_favorite(self, entry: FoodEntry) -> AppState:
        """Save a food entry as a favorite."""
        return self._apply(add_favorite(self.state, entry))

    def remove_favorite(self, favorite_id: str) -> AppState:
        """Remove a favorite."""
        return self._apply(remove_favorite(self.state, favorite_id))

    def log_favorite(
        self,
        favorite_id: str,
        category: MealCategory = MealCategory.SNACK,
        date_key: str | None = None,
    ) -> FoodEntry | None:
        """Log a new food entry from a favorite; None when the id is unknown."""
        favorite = next(
            (fav for fav in self.state.favorites if fav.id == favorite_id), None
        )
        if favorite is None:
            return None
        entry = instantiate_favorite(favorite, category=category)
        self.add_food(entry, date_key)
        return entry

    def save_settings(
        self, profile: Profile, targets: Targets, date_key: str | None = None
    ) -> AppState:
        """Save profile and targets and record today's weight."""
        return self._apply(
            save_profile_and_targets(
                self.state, profile, targets, date_key or self.today()
            )
        )

    def _apply(self, state: AppState) -> AppState:
        if state is not self.state:
            self.state = state
            self._save()
        return self.state

    def _load(self) -> AppState:
        try:
            raw = self.repository.load()
        except Exception:
            _logger.exception("Failed to read persisted ledger state")
            raw = None
        return load_state(raw)

    def _save(self) -> None:
        try:
            self.repository.save(dump_state(self.state))
        except Exception:
            _logger.exception("Failed to persist ledger state")
