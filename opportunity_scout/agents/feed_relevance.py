"""Keyword-signal relevance scoring for social-feed hiring posts.

The feed scraper is an external collaborator; this module only scores,
ranks and summarizes the posts it hands over.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

from pydantic import ValidationError

from opportunity_scout.exceptions import ConfigurationError
from opportunity_scout.models.feed import Engagement, FeedPost, FeedSummary, ScoredFeedPost

logger = logging.getLogger(__name__)

HIRING_KEYWORDS = ["hiring", "we are hiring", "we're hiring", "join us", "apply now"]
SDE_KEYWORDS = ["sde", "software engineer", "software developer", "developer", "engineer"]
INTERN_KEYWORDS = ["intern", "internship", "summer intern", "winter intern"]
HR_KEYWORDS = ["hr", "recruitment", "recruiter", "talent acquisition"]

COHORT_POINTS = 10
HIRING_POINTS = 5
SDE_POINTS = 7
INTERN_POINTS = 6
HR_POINTS = 4
CUSTOM_POINTS = 8

BEST_TIMES_TO_APPLY = [
    "Early morning posts (6-9 AM) often get HR attention",
    "Mid-week posts (Tuesday-Thursday) have higher engagement",
    "Apply within 24-48 hours of job posting for best response rate",
]


def load_feed_posts(filepath: str) -> list[FeedPost]:
    """Read a JSON array of scraped posts (camelCase or snake_case keys).

    Raises:
        ConfigurationError: If the file is missing, not JSON, or holds invalid posts.
    """
    path = Path(filepath)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read feed file {filepath}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Feed file {filepath} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError(f"Feed file {filepath} must contain a JSON array")
    try:
        posts = [FeedPost.model_validate(item) for item in data]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid post in {filepath}: {e}") from e

    logger.info("Loaded %d feed posts from %s", len(posts), filepath)
    return posts


def cohort_keywords(graduation_year: int) -> list[str]:
    year = str(graduation_year)
    return [year, f"{year} batch", f"{year} passout", f"{year} graduate"]


def calculate_relevance(
    text: str,
    custom_keywords: list[str] | None = None,
    graduation_year: int = 2026,
) -> tuple[int, list[str]]:
    """Score post text by keyword groups.

    Returns:
        (score, matched keywords de-duplicated in first-seen order)
    """
    lowered = text.lower()
    groups = [
        (cohort_keywords(graduation_year), COHORT_POINTS),
        (HIRING_KEYWORDS, HIRING_POINTS),
        (SDE_KEYWORDS, SDE_POINTS),
        (INTERN_KEYWORDS, INTERN_POINTS),
        (HR_KEYWORDS, HR_POINTS),
        (custom_keywords or [], CUSTOM_POINTS),
    ]

    score = 0
    matched: list[str] = []
    for keywords, points in groups:
        for kw in keywords:
            if kw and kw.lower() in lowered:
                score += points
                matched.append(kw)
    return score, list(dict.fromkeys(matched))


def rank_feed_posts(
    posts: list[FeedPost],
    limit: int = 20,
    custom_keywords: list[str] | None = None,
    graduation_year: int = 2026,
) -> list[ScoredFeedPost]:
    """Score posts, drop irrelevant ones, best first (stable), capped at ``limit``."""
    scored: list[ScoredFeedPost] = []
    for post in posts:
        score, matched = calculate_relevance(post.post_text, custom_keywords, graduation_year)
        if score <= 0:
            continue
        scored.append(
            ScoredFeedPost(
                **post.model_dump(), relevance_score=score, matched_keywords=matched
            )
        )
    scored.sort(key=lambda p: -p.relevance_score)
    logger.info("Feed relevance: %d of %d posts relevant", len(scored), len(posts))
    return scored[:limit]


def summarize_feed(posts: list[ScoredFeedPost], graduation_year: int = 2026) -> FeedSummary:
    year = str(graduation_year)
    hr_posts = sum(
        1 for p in posts if any(kw in ("hr", "recruitment", "recruiter") for kw in p.matched_keywords)
    )
    sde_openings = sum(
        1 for p in posts
        if any(kw in ("sde", "software engineer", "developer") for kw in p.matched_keywords)
    )
    cohort_mentions = sum(1 for p in posts if any(year in kw for kw in p.matched_keywords))
    companies = list(dict.fromkeys(p.company for p in posts if p.company))

    top_hashtags = [tag for tag, _ in Counter(t for p in posts for t in p.hashtags).most_common(10)]
    popular_keywords = [
        kw for kw, _ in Counter(k for p in posts for k in p.matched_keywords).most_common(10)
    ]

    if posts:
        avg_likes = round(sum(p.likes or 0 for p in posts) / len(posts))
        avg_comments = round(sum(p.comments or 0 for p in posts) / len(posts))
        average_engagement = f"{avg_likes} likes, {avg_comments} comments per post"
    else:
        average_engagement = "N/A"
    high_engagement = sum(1 for p in posts if p.engagement == Engagement.HIGH)

    trending = _trending_companies(posts)

    recommendations: list[str] = []
    if cohort_mentions:
        recommendations.append(
            f"Found {cohort_mentions} posts mentioning {year} batch - actively recruiting season!"
        )
    if sde_openings:
        recommendations.append(
            f"{sde_openings} SDE positions identified - strong demand for software engineers"
        )
    if hr_posts:
        recommendations.append(f"{hr_posts} HR posts found - follow these recruiters for updates")
    if high_engagement:
        recommendations.append(
            f"{high_engagement} high-engagement posts - these companies are actively hiring"
        )
    if trending:
        recommendations.append(f"Top hiring companies: {', '.join(trending[:3])}")
    if top_hashtags:
        recommendations.append(
            f"Trending hashtags: {', '.join(top_hashtags[:5])} - use these for visibility"
        )

    return FeedSummary(
        hr_posts_found=hr_posts,
        sde_openings_found=sde_openings,
        cohort_mentions=cohort_mentions,
        total_relevant_posts=len(posts),
        companies_found=companies,
        top_hashtags=top_hashtags,
        popular_keywords=popular_keywords,
        average_engagement=average_engagement,
        high_engagement_posts=high_engagement,
        trending_companies=trending,
        recommendations=recommendations,
        best_times_to_apply=list(BEST_TIMES_TO_APPLY),
    )


def _trending_companies(posts: list[ScoredFeedPost], n: int = 10) -> list[str]:
    """Companies by post count x10 plus total likes and comments."""
    weight: dict[str, int] = {}
    for p in posts:
        if not p.company:
            continue
        weight[p.company] = weight.get(p.company, 0) + 10 + (p.likes or 0) + (p.comments or 0)
    return sorted(weight, key=lambda c: -weight[c])[:n]
