"""Admission, ordering and tiering of scored postings."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from opportunity_scout.models.posting import Posting

logger = logging.getLogger(__name__)

ADMISSION_THRESHOLD = 40
HIGH_MATCH_THRESHOLD = 70
MEDIUM_MATCH_THRESHOLD = 40
HIGH_MATCH_CAP = 10
MEDIUM_MATCH_CAP = 5
LOW_MATCH_CAP = 3


class Ranking(BaseModel):
    """Admitted postings, best first, with capped tiers."""

    admitted: list[Posting] = Field(default_factory=list)
    high: list[Posting] = Field(default_factory=list)
    medium: list[Posting] = Field(default_factory=list)
    low: list[Posting] = Field(default_factory=list)
    # Uncapped tier sizes, used by the summary
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    citations: list[str] = Field(default_factory=list)


def rank_postings(
    postings: list[Posting],
    *,
    admission_threshold: int = ADMISSION_THRESHOLD,
    high_threshold: int = HIGH_MATCH_THRESHOLD,
    medium_threshold: int = MEDIUM_MATCH_THRESHOLD,
    high_cap: int = HIGH_MATCH_CAP,
    medium_cap: int = MEDIUM_MATCH_CAP,
    low_cap: int = LOW_MATCH_CAP,
) -> Ranking:
    """Admit postings scoring at least ``admission_threshold`` and tier them.

    ``postings`` must be in extraction order; equal scores keep that order.
    The low tier (below ``medium_threshold``) only fills when the admission
    threshold is relaxed below the medium threshold.
    """
    admitted_in_order = [p for p in postings if p.match_score >= admission_threshold]
    citations = [
        f"[{i}] {p.title} - {p.url}" for i, p in enumerate(admitted_in_order, 1)
    ]

    # sorted() is stable
    admitted = sorted(admitted_in_order, key=lambda p: -p.match_score)

    high = [p for p in admitted if p.match_score >= high_threshold]
    medium = [p for p in admitted if medium_threshold <= p.match_score < high_threshold]
    low = [p for p in admitted if p.match_score < medium_threshold]

    logger.info(
        "Ranked %d postings: %d admitted (high=%d, medium=%d, low=%d), %d rejected",
        len(postings), len(admitted), len(high), len(medium), len(low),
        len(postings) - len(admitted),
    )
    return Ranking(
        admitted=admitted,
        high=high[:high_cap],
        medium=medium[:medium_cap],
        low=low[:low_cap],
        high_count=len(high),
        medium_count=len(medium),
        low_count=len(low),
        citations=citations,
    )
