"""Pydantic models for raw search results, postings and score results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def clamp_score(value: object) -> int:
    """Coerce a score to an int in [0, 100]."""
    try:
        score = int(round(float(value)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, score))


class RawResult(BaseModel):
    """One record returned by a search provider."""

    title: str = ""
    url: str = ""
    content: str = ""

    @field_validator("title", "url", "content", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class ScoreResult(BaseModel):
    """Transient scorer output, merged into a Posting."""

    match_score: int
    matched_skills: list[str] = Field(default_factory=list)
    relevance_factors: list[str] = Field(default_factory=list)
    strategy: Literal["ai", "rules"] = "rules"

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp(cls, v: object) -> int:
        return clamp_score(v)


class Posting(BaseModel):
    """Structured opportunity derived from one search result."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    company: str
    location: str
    description: str = ""
    url: str = Field(min_length=1)
    salary: str | None = None
    source: str = "web"
    match_score: int = 0
    matched_skills: list[str] = Field(default_factory=list)
    relevance_factors: list[str] = Field(default_factory=list)

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp(cls, v: object) -> int:
        return clamp_score(v)

    def with_score(self, result: ScoreResult, max_skills: int = 5) -> Posting:
        """Return a scored copy of this posting."""
        data = self.model_dump()
        data.update(
            match_score=result.match_score,
            matched_skills=list(result.matched_skills)[:max_skills],
            relevance_factors=list(result.relevance_factors),
        )
        return Posting(**data)
