"""Supabase-backed storage for ledger state."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_ledger.services.ledger import StateRepository


@dataclass
class SupabaseStateRepository(StateRepository):
    """Stores the state blob in the ``user_data.app_state`` jsonb column."""

    client: Client
    user_id: str
    table: str = "user_data"

    def load(self) -> str | None:
        """Return the stored state for the user, if any."""
        response = (
            self.client.table(self.table)
            .select("app_state")
            .eq("user_id", self.user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        app_state = response.data[0].get("app_state")
        if app_state is None:
            return None
        if isinstance(app_state, str):
            return app_state
        return json.dumps(app_state)

    def save(self, payload: str) -> None:
        """Upsert the user's state row."""
        self.client.table(self.table).upsert(
            {
                "user_id": self.user_id,
                "app_state": json.loads(payload),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
