"""Short natural-language insights over recent logs."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_ledger.domain.models import DailyLog
from nutrition_ledger.services.migration import log_to_dict

FALLBACK_INSIGHT = "Status nominal. Keep logging to generate insights."

_logger = logging.getLogger(__name__)


class InsightClient(Protocol):
    """Interface for free-form text generation."""

    async def generate(self, *, model: str, prompt: str, max_output_tokens: int) -> str:
        """Return generated text for a prompt."""


@dataclass
class InsightService:
    """Service that turns recent logs into a one-sentence insight."""

    client: InsightClient
    model: str
    max_output_tokens: int = 60

    async def generate(self, logs: list[DailyLog]) -> str:
        """Return an insight for the given logs, or the fallback text."""
        data = json.dumps([log_to_dict(log) for log in logs])
        prompt = (
            "Analyze these recent daily logs and provide a single, short, "
            "impactful one-sentence insight or warning for the user (for "
            "example about sodium, hydration or protein timing). "
            f"Data: {data}"
        )
        try:
            text = await self.client.generate(
                model=self.model,
                prompt=prompt,
                max_output_tokens=self.max_output_tokens,
            )
        except Exception as exc:
            _logger.warning("Insight generation failed: %s", exc)
            return FALLBACK_INSIGHT
        return text.strip() or FALLBACK_INSIGHT
