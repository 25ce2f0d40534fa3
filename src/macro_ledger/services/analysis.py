"""Meal description analysis using LLMs."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from macro_ledger.domain.analysis import AnalysisExtract
from macro_ledger.domain.meals import AnalysisResult
from macro_ledger.domain.nutrition import MacroSet
from macro_ledger.errors import UpstreamUnavailableError
from macro_ledger.services.cache import AnalysisCache

ANALYSIS_TIMEOUT_SECONDS = 10.0

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "protein_g": {"type": "number", "minimum": 0.0},
        "carbs_g": {"type": "number", "minimum": 0.0},
        "fat_g": {"type": "number", "minimum": 0.0},
        "ingredients": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["protein_g", "carbs_g", "fat_g", "ingredients"],
    "additionalProperties": False,
}

ANALYSIS_PROMPT = (
    "Estimate the macronutrients of the meal described below. "
    "Return total protein, carbs and fat in grams for the whole meal "
    "and a short list of the ingredients you assumed."
)

_logger = logging.getLogger(__name__)


class AnalysisClient(Protocol):
    """Interface for LLM meal analysis."""

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured macro estimate data."""


@dataclass
class AnalysisService:
    """Service that asks the analysis model for macros, behind a cache."""

    client: AnalysisClient
    cache: AnalysisCache
    model: str
    store: bool = False
    timeout_seconds: float = ANALYSIS_TIMEOUT_SECONDS

    async def analyze(self, description: str) -> AnalysisResult | None:
        """Return a macro estimate, or None when no analysis is available.

        Upstream failures are recovered here so meal logging can fall back
        to manual macros.
        """
        if not description.strip():
            return None
        cached = self.cache.lookup(description)
        if cached is not None:
            return cached
        try:
            result = await self.request(description)
        except UpstreamUnavailableError as exc:
            _logger.warning("Meal analysis unavailable: %s", exc.message)
            return None
        self.cache.store(description, result)
        return result

    async def request(self, description: str) -> AnalysisResult:
        """Call the analysis client once under the timeout.

        Raises:
            UpstreamUnavailableError: timeout, client failure or bad payload.
        """
        try:
            raw = await asyncio.wait_for(
                self.client.analyze(
                    model=self.model,
                    store=self.store,
                    description=description,
                    schema=ANALYSIS_SCHEMA,
                    prompt=ANALYSIS_PROMPT,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise UpstreamUnavailableError(
                f"Analysis timed out after {self.timeout_seconds:g}s"
            ) from exc
        except Exception as exc:
            raise UpstreamUnavailableError(f"Analysis failed: {exc}") from exc

        try:
            extract = AnalysisExtract.model_validate(raw)
        except PydanticValidationError as exc:
            raise UpstreamUnavailableError(
                "Analysis returned a malformed payload"
            ) from exc
        return AnalysisResult(
            macros=MacroSet(
                protein_g=extract.protein_g,
                carbs_g=extract.carbs_g,
                fat_g=extract.fat_g,
            ),
            ingredients=[item.strip() for item in extract.ingredients if item.strip()],
        )
