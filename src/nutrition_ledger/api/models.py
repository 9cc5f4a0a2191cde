"""Pydantic models for API request bodies."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from nutrition_ledger.domain.models import (
    ActivityLevel,
    MealCategory,
    Nutrients,
    Profile,
    Sex,
    Targets,
)


class _Body(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)


class NutrientsBody(_Body):
    """Nutrient values of a food."""

    calories: float = Field(ge=0)
    protein_g: float = Field(default=0, ge=0)
    carbs_g: float = Field(default=0, ge=0)
    fat_g: float = Field(default=0, ge=0)
    fiber_g: float = Field(default=0, ge=0)
    sodium_mg: float = Field(default=0, ge=0)
    potassium_mg: float = Field(default=0, ge=0)

    def to_domain(self) -> Nutrients:
        return Nutrients(**self.model_dump())


class FoodEntryBody(_Body):
    """Manually entered food."""

    name: str = Field(min_length=1)
    category: MealCategory = MealCategory.SNACK
    nutrients: NutrientsBody
    day: date | None = None


class ExerciseEntryBody(_Body):
    """Manually entered exercise."""

    name: str = Field(min_length=1)
    calories_burned: float = Field(ge=0)
    duration_minutes: float | None = Field(default=None, ge=0)
    day: date | None = None


class WaterBody(_Body):
    """Water intake increment."""

    amount_ml: int = Field(gt=0)
    day: date | None = None


class ClassifyTextBody(_Body):
    """Free-text log input."""

    text: str = Field(min_length=1)
    day: date | None = None


class ClassifyImageBody(_Body):
    """Base64-encoded image log input."""

    image_base64: str = Field(min_length=1)
    description: str = "Image log"
    day: date | None = None


class FavoriteBody(_Body):
    """Reference to a logged food entry to save as favorite."""

    entry_id: str
    day: date | None = None


class LogFavoriteBody(_Body):
    """Options for logging a favorite."""

    category: MealCategory = MealCategory.SNACK
    day: date | None = None


class ProfileBody(_Body):
    """Body metrics."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: float = Field(gt=0)
    sex: Sex
    activity_level: ActivityLevel
    manual_targets: bool = False

    def to_domain(self) -> Profile:
        return Profile(**self.model_dump())


class TargetsBody(_Body):
    """Daily targets."""

    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    water_ml: float = Field(ge=0)
    fiber_g: float = Field(ge=0)
    sodium_mg: float = Field(ge=0)
    potassium_mg: float = Field(ge=0)

    def to_domain(self) -> Targets:
        return Targets(**self.model_dump())


class SettingsBody(_Body):
    """Settings form: profile plus targets (required when manual)."""

    profile: ProfileBody
    targets: TargetsBody | None = None
