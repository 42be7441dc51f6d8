"""Pydantic models for the pipeline's aggregate result."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from opportunity_scout.models.posting import Posting


class Summary(BaseModel):
    """Aggregate statistics over admitted postings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    average_match_score: int = 0
    top_skills_required: list[str] = Field(default_factory=list)
    top_companies: list[str] = Field(default_factory=list)
    recommended_actions: list[str] = Field(default_factory=list)


class PipelineResult(BaseModel):
    """Outcome of one search run. Immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    success: bool
    search_query: str
    total_jobs: int = 0
    high_match_jobs: list[Posting] = Field(default_factory=list)
    medium_match_jobs: list[Posting] = Field(default_factory=list)
    low_match_jobs: list[Posting] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    citations: list[str] = Field(default_factory=list)
    csv_data: str = ""
    error: str | None = None
    message: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Chat/UI payload: camelCase keys, no CSV blob, unset optionals dropped."""
        return self.model_dump(by_alias=True, exclude={"csv_data"}, exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(
            by_alias=True, exclude={"csv_data"}, exclude_none=True, indent=indent
        )
