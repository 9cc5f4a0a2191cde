"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from nutrition_ledger.api.models import (
    ClassifyImageBody,
    ClassifyTextBody,
    ExerciseEntryBody,
    FavoriteBody,
    FoodEntryBody,
    LogFavoriteBody,
    ProfileBody,
    SettingsBody,
    WaterBody,
)
from nutrition_ledger.app_logging import configure_logging
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.dates import date_key, now_millis
from nutrition_ledger.domain.classification import (
    Classification,
    ClassificationFailure,
)
from nutrition_ledger.domain.models import DailyLog, ExerciseEntry, FoodEntry, Targets
from nutrition_ledger.errors import InvalidMutationError
from nutrition_ledger.services.aggregation import (
    balance,
    daily_totals,
    recent_logs,
    series,
    target_progress,
    weight_trend,
)
from nutrition_ledger.services.classifier import (
    ClassifierService,
    entry_from_classification,
)
from nutrition_ledger.services.export import export_state
from nutrition_ledger.services.insights import FALLBACK_INSIGHT
from nutrition_ledger.services.migration import log_to_dict, state_to_dict
from nutrition_ledger.services.targets import compute_targets, resolve_targets


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    ledger = container.ledger_service

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidMutationError)
    async def invalid_mutation_handler(
        request: Request, exc: InvalidMutationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    def resolve_day(day: date | None) -> str:
        return date_key(day) if day else ledger.today()

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/state")
    async def get_state() -> dict[str, object]:
        """Return the full ledger state."""
        return state_to_dict(ledger.state)

    @app.get("/today")
    async def today_summary() -> dict[str, object]:
        """Return today's log with totals against targets."""
        return _day_payload(ledger.current_log(), ledger.state.targets)

    @app.get("/logs/{day}")
    async def day_summary(day: date) -> dict[str, object]:
        """Return a day's log with totals against targets."""
        return _day_payload(
            ledger.current_log(date_key(day)), ledger.state.targets
        )

    @app.post("/entries/food", status_code=status.HTTP_201_CREATED)
    async def add_food(body: FoodEntryBody) -> dict[str, object]:
        """Log a manually entered food."""
        entry = FoodEntry(
            id=_new_id(),
            name=body.name,
            timestamp=now_millis(),
            nutrients=body.nutrients.to_domain(),
            category=body.category,
        )
        key = resolve_day(body.day)
        ledger.add_food(entry, key)
        return {"entry": _entry_payload(entry), "date": key}

    @app.post("/entries/exercise", status_code=status.HTTP_201_CREATED)
    async def add_exercise(body: ExerciseEntryBody) -> dict[str, object]:
        """Log a manually entered exercise."""
        entry = ExerciseEntry(
            id=_new_id(),
            name=body.name,
            timestamp=now_millis(),
            calories_burned=body.calories_burned,
            duration_minutes=body.duration_minutes,
        )
        key = resolve_day(body.day)
        ledger.add_exercise(entry, key)
        return {"entry": _entry_payload(entry), "date": key}

    @app.delete("/logs/{day}/entries/{entry_id}")
    async def delete_entry(day: date, entry_id: str) -> dict[str, object]:
        """Delete a food or exercise entry from a day."""
        key = date_key(day)
        ledger.delete_entry(entry_id, key)
        return log_to_dict(ledger.current_log(key))

    @app.post("/water")
    async def add_water(body: WaterBody) -> dict[str, object]:
        """Add water intake."""
        key = resolve_day(body.day)
        ledger.add_water(body.amount_ml, key)
        return {"date": key, "water_ml": ledger.current_log(key).water_ml}

    @app.post("/classify/text", status_code=status.HTTP_201_CREATED)
    async def classify_text(body: ClassifyTextBody) -> dict[str, object]:
        """Classify free text and log the resulting entry."""
        classifier = _require_classifier(container)
        result = await classifier.classify_text(body.text)
        return _log_classification(result, body.text, resolve_day(body.day))

    @app.post("/classify/image", status_code=status.HTTP_201_CREATED)
    async def classify_image(body: ClassifyImageBody) -> dict[str, object]:
        """Classify an image and log the resulting entry."""
        classifier = _require_classifier(container)
        try:
            image_bytes = base64.b64decode(body.image_base64, validate=True)
        except binascii.Error as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="image_base64 is not valid base64",
            ) from exc
        result = await classifier.classify_image(image_bytes)
        return _log_classification(result, body.description, resolve_day(body.day))

    def _log_classification(
        result: Classification, source_text: str, key: str
    ) -> dict[str, object]:
        if isinstance(result, ClassificationFailure):
            logger.warning("Classification failed: %s", result.reason)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not analyze the input. Please try again.",
            )
        entry = entry_from_classification(result, source_text)
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Input was not recognized as food or exercise.",
            )
        if isinstance(entry, FoodEntry):
            ledger.add_food(entry, key)
        else:
            ledger.add_exercise(entry, key)
        return {"entry": _entry_payload(entry), "date": key}

    @app.get("/favorites")
    async def list_favorites() -> dict[str, object]:
        """Return saved favorites."""
        return {"favorites": [asdict(fav) for fav in ledger.state.favorites]}

    @app.post("/favorites", status_code=status.HTTP_201_CREATED)
    async def add_favorite(body: FavoriteBody) -> dict[str, object]:
        """Save a logged food entry as a favorite."""
        log = ledger.current_log(resolve_day(body.day))
        entry = next((food for food in log.foods if food.id == body.entry_id), None)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        ledger.add_favorite(entry)
        return {"favorite": asdict(ledger.state.favorites[-1])}

    @app.delete("/favorites/{favorite_id}")
    async def remove_favorite(favorite_id: str) -> dict[str, object]:
        """Remove a favorite."""
        ledger.remove_favorite(favorite_id)
        return {"favorites": [asdict(fav) for fav in ledger.state.favorites]}

    @app.post("/favorites/{favorite_id}/log", status_code=status.HTTP_201_CREATED)
    async def log_favorite(
        favorite_id: str, body: LogFavoriteBody | None = None
    ) -> dict[str, object]:
        """Log a new food entry from a favorite."""
        options = body or LogFavoriteBody()
        key = resolve_day(options.day)
        entry = ledger.log_favorite(favorite_id, options.category, key)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"entry": _entry_payload(entry), "date": key}

    @app.get("/settings")
    async def get_settings() -> dict[str, object]:
        """Return profile and targets."""
        return {
            "profile": asdict(ledger.state.profile),
            "targets": asdict(ledger.state.targets),
        }

    @app.put("/settings")
    async def save_settings(body: SettingsBody) -> dict[str, object]:
        """Save profile and targets, recalculating unless manually overridden."""
        profile = body.profile.to_domain()
        if body.targets is not None:
            targets = resolve_targets(profile, body.targets.to_domain())
        elif profile.manual_targets:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Manual targets require a targets object.",
            )
        else:
            targets = compute_targets(profile)
        ledger.save_settings(profile, targets)
        return {"profile": asdict(profile), "targets": asdict(targets)}

    @app.post("/targets/calculate")
    async def calculate_targets(body: ProfileBody) -> dict[str, object]:
        """Preview calculated targets for a profile without saving."""
        return asdict(compute_targets(body.to_domain()))

    @app.get("/analytics/series")
    async def analytics_series(days: int | None = None) -> dict[str, object]:
        """Return per-day calorie balance for the most recent logged days."""
        window = days if days is not None else container.settings.analytics_window_days
        summaries = series(ledger.state.logs, ledger.state.targets, window)
        return {"days": [asdict(summary) for summary in summaries]}

    @app.get("/analytics/weight")
    async def analytics_weight(days: int | None = None) -> dict[str, object]:
        """Return the weight trend for the most recent logged days."""
        window = days if days is not None else container.settings.analytics_window_days
        summaries = series(ledger.state.logs, ledger.state.targets, window)
        return {
            "days": [
                {"date": summary.date, "weight_kg": summary.weight_kg}
                for summary in weight_trend(summaries)
            ]
        }

    @app.get("/insight")
    async def insight() -> dict[str, str]:
        """Return a short insight about the last days of logging."""
        if container.insight_service is None:
            return {"insight": FALLBACK_INSIGHT}
        logs = recent_logs(ledger.state.logs, container.settings.insight_window_days)
        return {"insight": await container.insight_service.generate(logs)}

    @app.get("/export")
    async def export() -> Response:
        """Download the full state as formatted JSON."""
        export_file = export_state(ledger.state, ledger.today())
        return Response(
            content=export_file.content,
            media_type=export_file.media_type,
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{export_file.filename}"'
                )
            },
        )

    return app


def _require_classifier(container: AppContainer) -> ClassifierService:
    if container.classifier_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Classifier is not configured.",
        )
    return container.classifier_service


def _day_payload(log: DailyLog, targets: Targets) -> dict[str, object]:
    totals = daily_totals(log)
    return {
        "log": log_to_dict(log),
        "totals": {
            "nutrients": asdict(totals.nutrients),
            "calories_burned": totals.calories_burned,
            "net_calories": totals.net_calories,
            "balance": balance(totals, targets),
        },
        "progress": {
            name: asdict(progress)
            for name, progress in target_progress(
                totals, targets, log.water_ml
            ).items()
        },
    }


def _entry_payload(entry: FoodEntry | ExerciseEntry) -> dict[str, object]:
    return {"type": entry.type, **asdict(entry)}


def _new_id() -> str:
    return str(uuid4())
