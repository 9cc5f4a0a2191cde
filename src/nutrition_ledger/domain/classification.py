"""Models for classifier results."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from nutrition_ledger.domain.models import MealCategory, Nutrients


class FoodData(BaseModel):
    """Nutrient estimate returned for a food input."""

    calories: float = Field(default=0.0, ge=0.0)
    protein_g: float = Field(default=0.0, ge=0.0)
    carbs_g: float = Field(default=0.0, ge=0.0)
    fat_g: float = Field(default=0.0, ge=0.0)
    fiber_g: float = Field(default=0.0, ge=0.0)
    sodium_mg: float = Field(default=0.0, ge=0.0)
    potassium_mg: float = Field(default=0.0, ge=0.0)


class ExerciseData(BaseModel):
    """Burn estimate returned for an exercise input."""

    name: str | None = None
    calories_burned: float = Field(default=0.0, ge=0.0)
    duration_minutes: float | None = Field(default=None, ge=0.0)


class ClassifierPayload(BaseModel):
    """Structured output of the classifier."""

    type: str
    category: MealCategory | None = None
    food_data: FoodData | None = None
    exercise_data: ExerciseData | None = None


@dataclass(frozen=True)
class FoodClassification:
    """Input classified as food."""

    nutrients: Nutrients
    category: MealCategory | None = None


@dataclass(frozen=True)
class ExerciseClassification:
    """Input classified as exercise."""

    name: str | None
    calories_burned: float
    duration_minutes: float | None = None


@dataclass(frozen=True)
class UnknownClassification:
    """The classifier answered but recognized neither food nor exercise."""


@dataclass(frozen=True)
class ClassificationFailure:
    """No usable answer: transport error, timeout or unparseable output."""

    reason: str


Classification = (
    FoodClassification
    | ExerciseClassification
    | UnknownClassification
    | ClassificationFailure
)
