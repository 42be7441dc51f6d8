"""Expand one search intent into a bounded set of diversified queries."""

from __future__ import annotations

import json
import logging

from opportunity_scout.exceptions import ModelError
from opportunity_scout.models.profile import Profile
from opportunity_scout.tools.reasoning import ReasoningClient, extract_json_array

logger = logging.getLogger(__name__)

MAX_QUERIES = 5

PLANNING_PROMPT = """Generate {count} different job search queries for finding {roles} roles for {year} passouts.

Base query: "{base_query}"
User skills: {skills}
Preferred locations: {locations}

Vary the platforms (LinkedIn, Naukri, Instahyre, Wellfound, company career pages) and keywords.

Return ONLY a JSON array of search strings, no explanation:
["query1", "query2", "query3", "query4", "query5"]
"""


def fallback_queries(base_query: str, profile: Profile) -> list[str]:
    """Static platform-scoped templates. Pure and deterministic."""
    q = " ".join(base_query.split())
    year = profile.graduation_year
    return [
        f"site:linkedin.com/jobs {q} {year} passout intern OR SDE",
        f"site:naukri.com {q} {year} graduate fresher",
        f"site:instahyre.com {q} {year} batch",
        f"site:wellfound.com {q} internship {year}",
        f"{q} internship {year} passout stipend PPO India",
    ]


def plan_queries(
    base_query: str,
    profile: Profile,
    reasoning: ReasoningClient | None = None,
    max_queries: int = MAX_QUERIES,
) -> list[str]:
    """Return at most ``max_queries`` (never more than 5) query strings."""
    limit = max(1, min(max_queries, MAX_QUERIES))

    if reasoning is not None:
        queries = _ai_queries(base_query, profile, reasoning, limit)
        if queries:
            logger.info("Using %d AI-planned search queries", len(queries))
            return queries

    queries = fallback_queries(base_query, profile)[:limit]
    logger.info("Using %d template search queries", len(queries))
    return queries


def _ai_queries(
    base_query: str,
    profile: Profile,
    reasoning: ReasoningClient,
    limit: int,
) -> list[str] | None:
    prompt = PLANNING_PROMPT.format(
        count=MAX_QUERIES,
        roles=", ".join(profile.target_roles) or "software engineering",
        year=profile.graduation_year,
        base_query=base_query,
        skills=", ".join(profile.skills),
        locations=", ".join(profile.preferred_locations),
    )
    try:
        raw = reasoning.complete(prompt, operation="query_planning")
    except ModelError as e:
        logger.warning("Query planning failed, using templates: %s", e)
        return None

    json_str = extract_json_array(raw)
    if not json_str:
        logger.warning("No JSON array in query planning response")
        return None
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.warning("Query planning JSON parse error: %s", e)
        return None

    if not isinstance(data, list) or not all(isinstance(q, str) for q in data):
        logger.warning("Query planning response is not a list of strings")
        return None

    queries = list(dict.fromkeys(q.strip() for q in data if q.strip()))
    return queries[:limit] or None
