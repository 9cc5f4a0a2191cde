"""Classification of free text and images into ledger events."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from pydantic import ValidationError

from nutrition_ledger.dates import now_millis
from nutrition_ledger.domain.classification import (
    Classification,
    ClassificationFailure,
    ClassifierPayload,
    ExerciseClassification,
    FoodClassification,
    UnknownClassification,
)
from nutrition_ledger.domain.models import (
    ExerciseEntry,
    FoodEntry,
    MealCategory,
    Nutrients,
)

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "minimum": 0}
_NULLABLE_NUMBER = {"anyOf": [{"type": "number", "minimum": 0}, {"type": "null"}]}

CLASSIFIER_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": ["food", "exercise", "unknown"]},
        "category": {
            "anyOf": [
                {"type": "string", "enum": [c.value for c in MealCategory]},
                {"type": "null"},
            ]
        },
        "food_data": {
            "anyOf": [
                {
                    "type": "object",
                    "properties": {
                        "calories": _NUMBER,
                        "protein_g": _NUMBER,
                        "carbs_g": _NUMBER,
                        "fat_g": _NUMBER,
                        "fiber_g": _NUMBER,
                        "sodium_mg": _NUMBER,
                        "potassium_mg": _NUMBER,
                    },
                    "required": [
                        "calories",
                        "protein_g",
                        "carbs_g",
                        "fat_g",
                        "fiber_g",
                        "sodium_mg",
                        "potassium_mg",
                    ],
                    "additionalProperties": False,
                },
                {"type": "null"},
            ]
        },
        "exercise_data": {
            "anyOf": [
                {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "calories_burned": _NUMBER,
                        "duration_minutes": _NULLABLE_NUMBER,
                    },
                    "required": ["name", "calories_burned", "duration_minutes"],
                    "additionalProperties": False,
                },
                {"type": "null"},
            ]
        },
    },
    "required": ["type", "category", "food_data", "exercise_data"],
    "additionalProperties": False,
}

SYSTEM_PROMPT = (
    "Analyze the user input, which describes either FOOD consumption or "
    "PHYSICAL EXERCISE. For food, estimate the nutritional content and "
    "categorize it as breakfast, lunch, dinner or snack. For exercise, estimate "
    "calories burned from intensity and duration. If it is neither, answer "
    "with type unknown."
)

IMAGE_PROMPT = (
    "Analyze this image. If it is food, estimate nutrients and category. "
    "If it is an exercise screenshot, estimate the calories burned."
)


class ClassifierClient(Protocol):
    """Interface for the LLM classification call."""

    async def classify(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        schema: dict[str, object],
        text: str | None = None,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured classification data."""


@dataclass
class ClassifierService:
    """Service that prepares classification prompts and validates results."""

    client: ClassifierClient
    model: str
    timeout_seconds: float = 30.0

    async def classify_text(self, text: str) -> Classification:
        """Classify a free-text description."""
        return await self._classify(text=f'Analyze this input: "{text}"')

    async def classify_image(self, image_bytes: bytes) -> Classification:
        """Classify a food photo or exercise screenshot."""
        return await self._classify(
            text=IMAGE_PROMPT, image_data_url=_to_data_url(image_bytes)
        )

    async def _classify(
        self, *, text: str, image_data_url: str | None = None
    ) -> Classification:
        try:
            raw = await asyncio.wait_for(
                self.client.classify(
                    model=self.model,
                    instructions=SYSTEM_PROMPT,
                    schema=CLASSIFIER_SCHEMA,
                    text=text,
                    image_data_url=image_data_url,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            _logger.warning(
                "Classification timed out after %s seconds", self.timeout_seconds
            )
            return ClassificationFailure(reason="timeout")
        except Exception as exc:
            _logger.warning("Classification request failed: %s", exc)
            return ClassificationFailure(reason=str(exc) or type(exc).__name__)
        return to_classification(raw)


def to_classification(raw: object) -> Classification:
    """Convert a raw classifier payload into the closed result union."""
    try:
        payload = ClassifierPayload.model_validate(raw)
    except ValidationError as exc:
        _logger.warning("Classifier returned unparseable data: %s", exc)
        return ClassificationFailure(reason="unparseable classifier response")

    if payload.type == "food" and payload.food_data is not None:
        data = payload.food_data
        return FoodClassification(
            nutrients=Nutrients(
                calories=data.calories,
                protein_g=data.protein_g,
                carbs_g=data.carbs_g,
                fat_g=data.fat_g,
                fiber_g=data.fiber_g,
                sodium_mg=data.sodium_mg,
                potassium_mg=data.potassium_mg,
            ),
            category=payload.category,
        )
    if payload.type == "exercise" and payload.exercise_data is not None:
        data = payload.exercise_data
        return ExerciseClassification(
            name=data.name,
            calories_burned=data.calories_burned,
            duration_minutes=data.duration_minutes,
        )
    return UnknownClassification()


def entry_from_classification(
    result: Classification, source_text: str, timestamp: int | None = None
) -> FoodEntry | ExerciseEntry | None:
    """Build the ledger entry for a classification, None when nothing to log."""
    logged_at = now_millis() if timestamp is None else timestamp
    if isinstance(result, FoodClassification):
        return FoodEntry(
            id=str(uuid4()),
            name=source_text,
            timestamp=logged_at,
            nutrients=result.nutrients,
            category=result.category or MealCategory.SNACK,
        )
    if isinstance(result, ExerciseClassification):
        return ExerciseEntry(
            id=str(uuid4()),
            name=result.name or source_text,
            timestamp=logged_at,
            calories_burned=result.calories_burned,
            duration_minutes=result.duration_minutes,
        )
    return None


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
