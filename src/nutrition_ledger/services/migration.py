"""Load-time migration and repair of persisted ledger state.

Persisted blobs are parsed into all-optional models first, then each entity
is repaired into its canonical form by a pure function. Anything that cannot
be parsed falls back to the default state; loading never raises.
"""

import json
import logging
import math
from dataclasses import asdict
from enum import Enum
from typing import TypeVar

from pydantic import ValidationError

from nutrition_ledger.domain.models import (
    DEFAULT_PROFILE,
    DEFAULT_TARGETS,
    ActivityLevel,
    AppState,
    DailyLog,
    ExerciseEntry,
    FavoriteEntry,
    FoodEntry,
    MealCategory,
    Nutrients,
    Profile,
    Sex,
    Targets,
)
from nutrition_ledger.domain.persistence import (
    PersistedDailyLog,
    PersistedExerciseEntry,
    PersistedFavorite,
    PersistedFoodEntry,
    PersistedNutrients,
    PersistedProfile,
    PersistedState,
    PersistedTargets,
)

SCHEMA_VERSION = 2

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

_logger = logging.getLogger(__name__)


def default_state() -> AppState:
    """Return the first-run state."""
    return AppState(
        profile=DEFAULT_PROFILE,
        targets=DEFAULT_TARGETS,
        favorites=(),
        logs={},
    )


def parse_state(raw: str | bytes | None) -> PersistedState | None:
    """Parse a persisted blob into its partial form, or None if unusable."""
    if raw is None or not raw.strip():
        return None
    try:
        return PersistedState.model_validate_json(raw)
    except ValidationError as exc:
        _logger.warning("Discarding malformed ledger state: %s", exc)
        return None


def load_state(raw: str | bytes | None) -> AppState:
    """Return a well-formed state from persisted bytes, falling back to defaults."""
    persisted = parse_state(raw)
    if persisted is None:
        return default_state()
    if persisted.version is not None and persisted.version > SCHEMA_VERSION:
        _logger.warning(
            "Ledger state version %s is newer than supported version %s",
            persisted.version,
            SCHEMA_VERSION,
        )
    try:
        return repair_state(persisted)
    except Exception:
        _logger.exception("Failed to repair ledger state, starting from defaults")
        return default_state()


def repair_state(persisted: PersistedState) -> AppState:
    """Repair every entity of a partially valid state."""
    logs = {
        key: repair_daily_log(key, log)
        for key, log in (persisted.logs or {}).items()
        if log is not None
    }
    favorites = tuple(
        repair_favorite(favorite, index)
        for index, favorite in enumerate(persisted.favorites or [])
        if favorite is not None
    )
    return AppState(
        profile=repair_profile(persisted.profile),
        targets=repair_targets(persisted.targets),
        favorites=favorites,
        logs=logs,
    )


def repair_profile(persisted: PersistedProfile | None) -> Profile:
    """Merge a persisted profile onto the default, persisted fields winning."""
    if persisted is None:
        return DEFAULT_PROFILE
    default = DEFAULT_PROFILE
    return Profile(
        weight_kg=_number(persisted.weight_kg, default.weight_kg),
        height_cm=_number(persisted.height_cm, default.height_cm),
        age=_number(persisted.age, default.age),
        sex=_enum_or_default(Sex, persisted.sex, default.sex),
        activity_level=_enum_or_default(
            ActivityLevel, persisted.activity_level, default.activity_level
        ),
        manual_targets=_pick(persisted.manual_targets, default.manual_targets),
    )


def repair_targets(persisted: PersistedTargets | None) -> Targets:
    """Merge persisted targets onto the defaults, persisted fields winning."""
    if persisted is None:
        return DEFAULT_TARGETS
    default = DEFAULT_TARGETS
    return Targets(
        calories=_number(persisted.calories, default.calories),
        protein_g=_number(persisted.protein_g, default.protein_g),
        carbs_g=_number(persisted.carbs_g, default.carbs_g),
        fat_g=_number(persisted.fat_g, default.fat_g),
        water_ml=_number(persisted.water_ml, default.water_ml),
        fiber_g=_number(persisted.fiber_g, default.fiber_g),
        sodium_mg=_number(persisted.sodium_mg, default.sodium_mg),
        potassium_mg=_number(persisted.potassium_mg, default.potassium_mg),
    )


def repair_nutrients(persisted: PersistedNutrients | None) -> Nutrients:
    """Fill missing nutrient values with zero."""
    if persisted is None:
        return Nutrients.zero()
    return Nutrients(
        calories=_number(persisted.calories, 0.0),
        protein_g=_number(persisted.protein_g, 0.0),
        carbs_g=_number(persisted.carbs_g, 0.0),
        fat_g=_number(persisted.fat_g, 0.0),
        fiber_g=_number(persisted.fiber_g, 0.0),
        sodium_mg=_number(persisted.sodium_mg, 0.0),
        potassium_mg=_number(persisted.potassium_mg, 0.0),
    )


def repair_food_entry(
    persisted: PersistedFoodEntry, fallback_id: str
) -> FoodEntry:
    """Repair a food entry; entries written before categories existed get snack."""
    return FoodEntry(
        id=persisted.id or fallback_id,
        name=persisted.name or "",
        timestamp=int(_number(persisted.timestamp, 0)),
        nutrients=repair_nutrients(persisted.nutrients),
        category=_enum_or_default(MealCategory, persisted.category, MealCategory.SNACK),
    )


def repair_exercise_entry(
    persisted: PersistedExerciseEntry, fallback_id: str
) -> ExerciseEntry:
    """Repair an exercise entry."""
    return ExerciseEntry(
        id=persisted.id or fallback_id,
        name=persisted.name or "",
        timestamp=int(_number(persisted.timestamp, 0)),
        calories_burned=_number(persisted.calories_burned, 0.0),
        duration_minutes=persisted.duration_minutes,
    )


def repair_daily_log(date_key: str, persisted: PersistedDailyLog) -> DailyLog:
    """Repair a daily log; logs written before exercises existed get none."""
    foods = tuple(
        repair_food_entry(entry, f"{date_key}-food-{index}")
        for index, entry in enumerate(persisted.foods or [])
        if entry is not None
    )
    exercises = tuple(
        repair_exercise_entry(entry, f"{date_key}-exercise-{index}")
        for index, entry in enumerate(persisted.exercises or [])
        if entry is not None
    )
    return DailyLog(
        date=date_key,
        foods=foods,
        exercises=exercises,
        water_ml=int(_number(persisted.water_ml, 0)),
        weight_kg=persisted.weight_kg,
    )


def repair_favorite(persisted: PersistedFavorite, index: int) -> FavoriteEntry:
    """Repair a favorite template."""
    return FavoriteEntry(
        id=persisted.id or f"favorite-{index}",
        name=persisted.name or "",
        nutrients=repair_nutrients(persisted.nutrients),
    )


def dump_state(state: AppState, *, indent: int | None = None) -> str:
    """Serialize the full state as a versioned JSON blob."""
    return json.dumps(state_to_dict(state), indent=indent)


def state_to_dict(state: AppState) -> dict[str, object]:
    """Return the JSON-ready representation of a state."""
    return {
        "version": SCHEMA_VERSION,
        "profile": asdict(state.profile),
        "targets": asdict(state.targets),
        "favorites": [asdict(favorite) for favorite in state.favorites],
        "logs": {
            key: log_to_dict(log) for key, log in sorted(state.logs.items())
        },
    }


def log_to_dict(log: DailyLog) -> dict[str, object]:
    """Return the JSON-ready representation of a daily log."""
    return {
        "date": log.date,
        "foods": [{"type": FoodEntry.type, **asdict(entry)} for entry in log.foods],
        "exercises": [
            {"type": ExerciseEntry.type, **asdict(entry)} for entry in log.exercises
        ],
        "water_ml": log.water_ml,
        "weight_kg": log.weight_kg,
    }


def _pick(value: T | None, default: T) -> T:
    return default if value is None else value


def _number(value: float | None, default: float) -> float:
    if value is None or not math.isfinite(value):
        return default
    return value


def _enum_or_default(enum_type: type[E], value: str | None, default: E) -> E:
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        return default
