"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nutrition_ledger.config import Settings
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.domain.models import (
    DEFAULT_PROFILE,
    DEFAULT_TARGETS,
    AppState,
    ExerciseEntry,
    FoodEntry,
    MealCategory,
    Nutrients,
)
from nutrition_ledger.services.classifier import ClassifierClient, ClassifierService
from nutrition_ledger.services.insights import InsightClient, InsightService
from nutrition_ledger.services.ledger import LedgerService, StateRepository


@dataclass
class InMemoryStateRepository(StateRepository):
    """In-memory state repository for tests."""

    payload: str | None = None
    saves: list[str] = field(default_factory=list)

    def load(self) -> str | None:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload
        self.saves.append(payload)


@dataclass
class FailingStateRepository(StateRepository):
    """State repository whose storage is unavailable."""

    payload: str | None = None
    attempts: int = 0

    def load(self) -> str | None:
        return self.payload

    def save(self, payload: str) -> None:
        self.attempts += 1
        raise OSError("storage quota exceeded")


@dataclass
class FakeClassifierClient(ClassifierClient):
    """Fake classifier client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "type": "food",
            "category": "lunch",
            "food_data": {
                "calories": 520,
                "protein_g": 35,
                "carbs_g": 60,
                "fat_g": 14,
                "fiber_g": 6,
                "sodium_mg": 800,
                "potassium_mg": 600,
            },
            "exercise_data": None,
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def classify(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        schema: dict[str, object],
        text: str | None = None,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append({"text": text, "image_data_url": image_data_url})
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeInsightClient(InsightClient):
    """Fake insight client returning fixed text."""

    text: str = "Hydration is lagging behind your target."
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(self, *, model: str, prompt: str, max_output_tokens: int) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def make_food(
    entry_id: str = "food-1",
    calories: float = 100,
    category: MealCategory = MealCategory.SNACK,
) -> FoodEntry:
    return FoodEntry(
        id=entry_id,
        name=f"food {entry_id}",
        timestamp=1700000000000,
        nutrients=Nutrients(
            calories=calories,
            protein_g=10,
            carbs_g=12,
            fat_g=3,
            fiber_g=2,
            sodium_mg=150,
            potassium_mg=200,
        ),
        category=category,
    )


def make_exercise(entry_id: str = "exercise-1", burned: float = 80) -> ExerciseEntry:
    return ExerciseEntry(
        id=entry_id,
        name="run",
        timestamp=1700000000000,
        calories_burned=burned,
        duration_minutes=20,
    )


@pytest.fixture
def empty_state() -> AppState:
    return AppState(profile=DEFAULT_PROFILE, targets=DEFAULT_TARGETS)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        state_path=tmp_path / "state.json",
        openai_api_key="openai-key",
        timezone="UTC",
    )


@pytest.fixture
def state_repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def classifier_client() -> FakeClassifierClient:
    return FakeClassifierClient()


@pytest.fixture
def insight_client() -> FakeInsightClient:
    return FakeInsightClient()


@pytest.fixture
def container(
    settings: Settings,
    state_repository: InMemoryStateRepository,
    classifier_client: FakeClassifierClient,
    insight_client: FakeInsightClient,
) -> AppContainer:
    ledger_service = LedgerService(state_repository, timezone=settings.timezone)
    classifier_service = ClassifierService(
        client=classifier_client,
        model=settings.openai_model,
        timeout_seconds=settings.classifier_timeout_seconds,
    )
    insight_service = InsightService(client=insight_client, model=settings.openai_model)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ledger_service=ledger_service,
        classifier_service=classifier_service,
        insight_service=insight_service,
        close_resources=close_resources,
    )
