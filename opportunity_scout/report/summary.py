"""Aggregate statistics and next-step recommendations for a ranking."""

from __future__ import annotations

import math
from collections import Counter

from opportunity_scout.agents.ranker import Ranking
from opportunity_scout.models.result import Summary

TOP_N = 5


def build_summary(ranking: Ranking) -> Summary:
    admitted = ranking.admitted
    top_skills = top_by_frequency(skill for p in admitted for skill in p.matched_skills)
    top_companies = top_by_frequency(p.company for p in admitted)

    return Summary(
        average_match_score=average_score([p.match_score for p in admitted]),
        top_skills_required=top_skills,
        top_companies=top_companies,
        recommended_actions=[
            f"Apply to {ranking.high_count} high-match jobs immediately",
            f"Review {ranking.medium_count} medium-match jobs for backup",
            "Update resume to highlight: " + ", ".join(top_skills[:3]),
            "Set up job alerts on LinkedIn and Naukri",
        ],
    )


def failure_summary() -> Summary:
    return Summary(
        recommended_actions=["Try broader search terms", "Check job platforms directly"],
    )


def average_score(scores: list[int]) -> int:
    """Mean rounded half up; 0 for no scores."""
    if not scores:
        return 0
    return int(math.floor(sum(scores) / len(scores) + 0.5))


def top_by_frequency(items, n: int = TOP_N) -> list[str]:
    """Most frequent items; ties keep first-seen order."""
    # Counter preserves insertion order and most_common() sorts stably
    return [item for item, _ in Counter(items).most_common(n)]
