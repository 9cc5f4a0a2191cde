"""Export of the full ledger state."""

from dataclasses import dataclass

from nutrition_ledger.domain.models import AppState
from nutrition_ledger.services.migration import dump_state

EXPORT_PREFIX = "nutrition-ledger-export"


@dataclass(frozen=True)
class ExportFile:
    """A downloadable export."""

    filename: str
    content: str
    media_type: str = "application/json"


def export_state(state: AppState, date_key: str) -> ExportFile:
    """Serialize the whole state as formatted JSON named after the date."""
    return ExportFile(
        filename=f"{EXPORT_PREFIX}-{date_key}.json",
        content=dump_state(state, indent=2),
    )
