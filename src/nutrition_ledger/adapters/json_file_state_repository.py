"""Local JSON file storage for ledger state."""

from dataclasses import dataclass
from pathlib import Path

from nutrition_ledger.services.ledger import StateRepository


@dataclass
class JsonFileStateRepository(StateRepository):
    """Stores the serialized state in a single file."""

    path: Path

    def load(self) -> str | None:
        """Return the file contents, or None when the file does not exist."""
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, payload: str) -> None:
        """Write the payload atomically through a temporary sibling file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)
