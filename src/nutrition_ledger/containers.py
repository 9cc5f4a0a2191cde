"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_ledger.adapters.json_file_state_repository import (
    JsonFileStateRepository,
)
from nutrition_ledger.adapters.openai_classifier_client import OpenAIClassifierClient
from nutrition_ledger.adapters.supabase_state_repository import (
    SupabaseStateRepository,
)
from nutrition_ledger.config import Settings, parse_storage_backend
from nutrition_ledger.services.classifier import ClassifierService
from nutrition_ledger.services.insights import InsightService
from nutrition_ledger.services.ledger import LedgerService, StateRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: LedgerService
    classifier_service: ClassifierService | None
    insight_service: InsightService | None
    close_resources: Callable[[], Awaitable[None]]


def build_state_repository(settings: Settings) -> StateRepository:
    """Create the storage port selected by settings."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires SUPABASE_URL and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStateRepository(client=client, user_id=settings.supabase_user_id)
    return JsonFileStateRepository(path=settings.state_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    ledger_service = LedgerService(
        repository=build_state_repository(resolved_settings),
        timezone=resolved_settings.timezone,
    )

    openai_client: OpenAIClassifierClient | None = None
    classifier_service: ClassifierService | None = None
    insight_service: InsightService | None = None
    if resolved_settings.openai_api_key:
        openai_client = OpenAIClassifierClient.create(
            resolved_settings.openai_api_key,
            timeout_seconds=resolved_settings.classifier_timeout_seconds,
        )
        classifier_service = ClassifierService(
            client=openai_client,
            model=resolved_settings.openai_model,
            timeout_seconds=resolved_settings.classifier_timeout_seconds,
        )
        insight_service = InsightService(
            client=openai_client, model=resolved_settings.openai_model
        )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        ledger_service=ledger_service,
        classifier_service=classifier_service,
        insight_service=insight_service,
        close_resources=close_resources,
    )
