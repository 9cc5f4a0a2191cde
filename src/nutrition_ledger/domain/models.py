"""Domain models for the nutrition ledger."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class Sex(str, Enum):
    """Biological sex, used only for the BMR offset."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Activity level buckets for TDEE multipliers."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class MealCategory(str, Enum):
    """Meal a food entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Nutrients:
    """Independently estimated nutrient values for a food."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sodium_mg: float = 0.0
    potassium_mg: float = 0.0

    def __add__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
            sodium_mg=self.sodium_mg + other.sodium_mg,
            potassium_mg=self.potassium_mg + other.potassium_mg,
        )

    @staticmethod
    def zero() -> "Nutrients":
        return Nutrients()


@dataclass(frozen=True)
class Profile:
    """Body and activity metrics."""

    weight_kg: float
    height_cm: float
    age: float
    sex: Sex
    activity_level: ActivityLevel
    manual_targets: bool = False


@dataclass(frozen=True)
class Targets:
    """Daily calorie, macro, hydration and micronutrient targets."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    water_ml: float
    fiber_g: float
    sodium_mg: float
    potassium_mg: float


@dataclass(frozen=True)
class FoodEntry:
    """A logged food event."""

    type: ClassVar[str] = "food"

    id: str
    name: str
    timestamp: int
    nutrients: Nutrients
    category: MealCategory = MealCategory.SNACK


@dataclass(frozen=True)
class ExerciseEntry:
    """A logged exercise event."""

    type: ClassVar[str] = "exercise"

    id: str
    name: str
    timestamp: int
    calories_burned: float
    duration_minutes: float | None = None


@dataclass(frozen=True)
class FavoriteEntry:
    """Saved nutrient template used to create new food entries."""

    id: str
    name: str
    nutrients: Nutrients


@dataclass(frozen=True)
class DailyLog:
    """Everything logged for a single calendar day."""

    date: str
    foods: tuple[FoodEntry, ...] = ()
    exercises: tuple[ExerciseEntry, ...] = ()
    water_ml: int = 0
    weight_kg: float | None = None


@dataclass(frozen=True)
class AppState:
    """Root aggregate of the ledger."""

    profile: Profile
    targets: Targets
    favorites: tuple[FavoriteEntry, ...] = ()
    logs: dict[str, DailyLog] = field(default_factory=dict)


DEFAULT_PROFILE = Profile(
    weight_kg=70,
    height_cm=175,
    age=25,
    sex=Sex.MALE,
    activity_level=ActivityLevel.MODERATE,
    manual_targets=False,
)

DEFAULT_TARGETS = Targets(
    calories=2000,
    protein_g=160,
    carbs_g=220,
    fat_g=70,
    water_ml=3500,
    fiber_g=30,
    sodium_mg=2300,
    potassium_mg=3500,
)
