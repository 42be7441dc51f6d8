"""Pydantic model for reasoning-model scoring output — strict JSON schema."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from opportunity_scout.models.posting import clamp_score


class AIScoreOutput(BaseModel):
    """Schema for model-generated posting match scoring.

    Field names follow the JSON the model is asked to emit.
    """

    model_config = ConfigDict(extra="ignore")

    matchScore: int = 50
    matchedSkills: list[str] = Field(default_factory=list)
    relevanceFactors: list[str] = Field(default_factory=list)
    reasoning: str = ""

    @field_validator("matchScore", mode="before")
    @classmethod
    def clamp_match_score(cls, v: object) -> int:
        # null means the model gave no opinion; treat as neutral
        if v is None or v == "":
            return 50
        if isinstance(v, bool):
            raise ValueError("matchScore must be a number")
        try:
            score = float(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValueError(f"matchScore is not a number: {v!r}") from None
        if not math.isfinite(score):
            raise ValueError(f"matchScore is not finite: {v!r}")
        return clamp_score(score)

    @field_validator("matchedSkills", "relevanceFactors", mode="before")
    @classmethod
    def none_to_list(cls, v: object) -> object:
        return [] if v is None else v

    @field_validator("matchedSkills", "relevanceFactors")
    @classmethod
    def strip_items(cls, v: list[str]) -> list[str]:
        return [item.strip() for item in v if item and item.strip()]
