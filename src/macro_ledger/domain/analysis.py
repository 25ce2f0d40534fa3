"""Models for meal analysis payloads."""

from pydantic import BaseModel, Field


class AnalysisExtract(BaseModel):
    """Structured output expected from the meal analysis model."""

    protein_g: float = Field(ge=0.0, allow_inf_nan=False)
    carbs_g: float = Field(ge=0.0, allow_inf_nan=False)
    fat_g: float = Field(ge=0.0, allow_inf_nan=False)
    ingredients: list[str] = Field(default_factory=list)
