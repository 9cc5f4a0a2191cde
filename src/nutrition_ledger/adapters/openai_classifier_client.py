"""OpenAI Responses API client for classification and insights."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from nutrition_ledger.services.classifier import ClassifierClient
from nutrition_ledger.services.insights import InsightClient


@dataclass
class OpenAIClassifierClient(ClassifierClient, InsightClient):
    """Classifier and insight client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 30.0
    ) -> "OpenAIClassifierClient":
        """Create an OpenAI client with a bounded HTTP timeout."""
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=http_client, max_retries=1)
        )

    async def classify(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        schema: dict[str, object],
        text: str | None = None,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = []
        if text:
            content.append({"type": "input_text", "text": text})
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "ledger_classification",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def generate(self, *, model: str, prompt: str, max_output_tokens: int) -> str:
        """Generate free-form text for a prompt."""
        response = await self.client.responses.create(
            model=model,
            input=prompt,
            max_output_tokens=max_output_tokens,
            store=False,
        )
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
