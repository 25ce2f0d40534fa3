"""OpenAI Responses API client for meal analysis."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from macro_ledger.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIAnalysisClient":
        """Create an OpenAI client that gives up after the timeout, no retries."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            )
        )

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {"role": "system", "content": prompt},
                {"role": "user", "content": description},
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "meal_analysis",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
