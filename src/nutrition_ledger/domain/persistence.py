"""Partial models for persisted ledger state.

Every field is optional so that blobs written by any earlier schema version
validate; the migration layer fills the gaps. Legacy camelCase keys from the
first schema version are accepted through aliases.

Fields are lenient: a value of the wrong type or a non-finite number
validates to None instead of failing the enclosing model, so one damaged
field or entry never discards its siblings.
"""

from typing import Annotated, Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)

T = TypeVar("T")


def _none_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


Lenient = Annotated[T | None, WrapValidator(_none_on_error)]


class _Partial(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)


class PersistedNutrients(_Partial):
    calories: Lenient[float] = None
    protein_g: Lenient[float] = None
    carbs_g: Lenient[float] = None
    fat_g: Lenient[float] = None
    fiber_g: Lenient[float] = None
    sodium_mg: Lenient[float] = None
    potassium_mg: Lenient[float] = None


class PersistedProfile(_Partial):
    weight_kg: Lenient[float] = None
    height_cm: Lenient[float] = None
    age: Lenient[float] = None
    sex: Lenient[str] = Field(
        default=None, validation_alias=AliasChoices("sex", "gender")
    )
    activity_level: Lenient[str] = Field(
        default=None, validation_alias=AliasChoices("activity_level", "activityLevel")
    )
    manual_targets: Lenient[bool] = Field(
        default=None, validation_alias=AliasChoices("manual_targets", "manualTargets")
    )


class PersistedTargets(_Partial):
    calories: Lenient[float] = None
    protein_g: Lenient[float] = None
    carbs_g: Lenient[float] = None
    fat_g: Lenient[float] = None
    water_ml: Lenient[float] = None
    fiber_g: Lenient[float] = None
    sodium_mg: Lenient[float] = None
    potassium_mg: Lenient[float] = None


class PersistedFoodEntry(_Partial):
    id: Lenient[str] = None
    name: Lenient[str] = None
    timestamp: Lenient[float] = None
    category: Lenient[str] = None
    nutrients: Lenient[PersistedNutrients] = None


class PersistedExerciseEntry(_Partial):
    id: Lenient[str] = None
    name: Lenient[str] = None
    timestamp: Lenient[float] = None
    calories_burned: Lenient[float] = None
    duration_minutes: Lenient[float] = None


class PersistedFavorite(_Partial):
    id: Lenient[str] = None
    name: Lenient[str] = None
    nutrients: Lenient[PersistedNutrients] = None


class PersistedDailyLog(_Partial):
    date: Lenient[str] = None
    foods: Lenient[list[Lenient[PersistedFoodEntry]]] = Field(
        default=None, validation_alias=AliasChoices("foods", "entries")
    )
    exercises: Lenient[list[Lenient[PersistedExerciseEntry]]] = None
    water_ml: Lenient[float] = None
    weight_kg: Lenient[float] = None


class PersistedState(_Partial):
    version: Lenient[float] = None
    profile: Lenient[PersistedProfile] = None
    targets: Lenient[PersistedTargets] = None
    favorites: Lenient[list[Lenient[PersistedFavorite]]] = None
    logs: Lenient[dict[str, Lenient[PersistedDailyLog]]] = None
