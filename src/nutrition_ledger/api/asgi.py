"""ASGI entrypoint for the nutrition ledger API."""

from nutrition_ledger.api.app import create_app
from nutrition_ledger.app_logging import configure_logging
from nutrition_ledger.config import Settings
from nutrition_ledger.containers import build_container

# The container loads persisted state on construction.
settings = Settings()
configure_logging(settings.log_level)
app = create_app(build_container(settings))
