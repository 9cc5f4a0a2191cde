"""Domain models for ledger statistics."""

from dataclasses import dataclass

from nutrition_ledger.domain.models import Nutrients


@dataclass(frozen=True)
class DailyTotals:
    """Summed food nutrients and exercise burn for one day."""

    nutrients: Nutrients
    calories_burned: float

    @property
    def food_calories(self) -> float:
        return self.nutrients.calories

    @property
    def net_calories(self) -> float:
        """Food calories minus exercise calories."""
        return self.nutrients.calories - self.calories_burned


@dataclass(frozen=True)
class DaySummary:
    """Per-day point of a multi-day series."""

    date: str
    food_calories: float
    burned_calories: float
    net_calories: float
    balance: float
    target_calories: float
    weight_kg: float | None = None


@dataclass(frozen=True)
class MetricProgress:
    """Current value of one metric against its target."""

    current: float
    target: float
    percent: float
