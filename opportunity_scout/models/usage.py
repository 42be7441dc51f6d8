"""Pydantic model for one billable external API call."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

# USD. Local models and self-hosted search are free.
PRICING: dict[str, dict[str, dict[str, float]]] = {
    "openai": {
        "gpt-4o-mini": {"input": 0.15 / 1_000_000, "output": 0.60 / 1_000_000},
        "gpt-4o": {"input": 2.50 / 1_000_000, "output": 10.00 / 1_000_000},
    },
    "tavily": {"search": {"request": 0.005}},
}


def estimate_cost(
    service: str,
    model: str | None = None,
    requests: int = 1,
    input_tokens: int = 0,
    output_tokens: int = 0,
) -> float:
    """Estimated USD cost of a call; 0.0 for unknown services or models."""
    if service == "tavily":
        return requests * PRICING["tavily"]["search"]["request"]
    pricing = PRICING.get(service, {}).get(model or "")
    if not pricing:
        return 0.0
    return input_tokens * pricing.get("input", 0.0) + output_tokens * pricing.get("output", 0.0)


class UsageEntry(BaseModel):
    service: str
    operation: str
    model: str | None = None
    requests: int = 1
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def cost(self) -> float:
        if self.estimated_cost is not None:
            return self.estimated_cost
        return estimate_cost(
            self.service, self.model, self.requests, self.input_tokens, self.output_tokens
        )
