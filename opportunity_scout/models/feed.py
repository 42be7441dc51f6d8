"""Pydantic models for social-feed posts and their relevance summary."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Engagement(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FeedPost(BaseModel):
    """A post harvested from a social feed by an external scraper."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    author: str = ""
    author_title: str | None = None
    company: str | None = None
    post_text: str = ""
    post_url: str = ""
    timestamp: str | None = None
    hashtags: list[str] = Field(default_factory=list)
    likes: int | None = None
    comments: int | None = None
    engagement: Engagement | None = None


class ScoredFeedPost(FeedPost):
    relevance_score: int = 0
    matched_keywords: list[str] = Field(default_factory=list)


class FeedSummary(BaseModel):
    """Counts and insights over a ranked set of feed posts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hr_posts_found: int = 0
    sde_openings_found: int = 0
    cohort_mentions: int = 0
    total_relevant_posts: int = 0
    companies_found: list[str] = Field(default_factory=list)
    top_hashtags: list[str] = Field(default_factory=list)
    popular_keywords: list[str] = Field(default_factory=list)
    average_engagement: str = "N/A"
    high_engagement_posts: int = 0
    trending_companies: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    best_times_to_apply: list[str] = Field(default_factory=list)
