"""Posting match scoring — reasoning model first, deterministic rules as fallback."""

from __future__ import annotations

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor

from pydantic import ValidationError

from opportunity_scout.agents.extractor import MAX_MATCHED_SKILLS, match_skills
from opportunity_scout.exceptions import ModelError
from opportunity_scout.models.posting import Posting, ScoreResult
from opportunity_scout.models.profile import Profile
from opportunity_scout.models.scoring import AIScoreOutput
from opportunity_scout.tools.reasoning import ReasoningClient, extract_json_object

logger = logging.getLogger(__name__)

SCORING_PROMPT = """Analyze this job posting for a {year} graduate.

## Job Posting:
- **Title**: {title}
- **Content**: {content}

{profile_context}

## Preferences:
- Looking for: {roles} roles for {year} passouts
- Good stipend (₹{min_compensation:,}+ per month), PPO opportunity, tech stack match

## Required Output:
Respond ONLY with valid JSON matching this exact schema:
{{
    "matchScore": <integer 0-100>,
    "matchedSkills": ["skill1", "skill2"],
    "relevanceFactors": ["factor1", "factor2"],
    "reasoning": "brief explanation"
}}

Respond ONLY with the JSON object. No other text.
"""

BASE_SCORE = 30
SKILL_POINTS = 10
ROLE_TITLE_POINTS = 15
COHORT_POINTS = 15
CONVERSION_POINTS = 10
COMPENSATION_POINTS = 10
AI_CONTENT_CHARS = 500

CONVERSION_PATTERN = re.compile(r"ppo|pre.?placement|conversion", re.IGNORECASE)
LUMP_SUM_PATTERN = re.compile(r"lakh|lpa", re.IGNORECASE)
RUPEE_AMOUNT = re.compile(r"₹\s*(\d[\d,]*)(?:\.\d+)?\s*(k\b)?", re.IGNORECASE)


# =============================================================================
# Rule-based strategy
# =============================================================================


def rule_based_score(title: str, content: str, profile: Profile) -> ScoreResult:
    """Deterministic score from keyword and skill signals.

    Pure: identical inputs always give an identical result.
    """
    matched = match_skills(f"{title} {content}", profile.skills)

    has_role_title = _contains_any(title, profile.role_keywords)
    has_cohort = _contains_any(content, [str(profile.graduation_year), *profile.cohort_keywords])
    has_conversion = bool(CONVERSION_PATTERN.search(content))
    has_compensation = _has_high_compensation(content, profile.min_compensation)

    score = BASE_SCORE + SKILL_POINTS * len(matched)
    factors: list[str] = []
    if has_role_title:
        score += ROLE_TITLE_POINTS
        factors.append("Relevant Role Title")
    if has_cohort:
        score += COHORT_POINTS
        factors.append(f"{profile.graduation_year} Batch")
    if has_conversion:
        score += CONVERSION_POINTS
        factors.append("PPO Opportunity")
    if has_compensation:
        score += COMPENSATION_POINTS
        factors.append("Good Stipend")
    if len(matched) >= 3:
        factors.append(f"{len(matched)} Skills Match")

    return ScoreResult(
        match_score=score,
        matched_skills=matched[:MAX_MATCHED_SKILLS],
        relevance_factors=factors,
        strategy="rules",
    )


def _contains_any(text: str, keywords: list[str]) -> bool:
    lowered = text.lower()
    return any(kw and kw.lower() in lowered for kw in keywords)


def _has_high_compensation(content: str, min_compensation: int) -> bool:
    if LUMP_SUM_PATTERN.search(content):
        return True
    for match in RUPEE_AMOUNT.finditer(content):
        amount = int(match.group(1).replace(",", ""))
        if match.group(2):
            amount *= 1000
        if amount >= min_compensation:
            return True
    return False


# =============================================================================
# Scorer
# =============================================================================


class Scorer:
    """Scores postings against a fixed profile."""

    def __init__(self, profile: Profile, reasoning: ReasoningClient | None = None) -> None:
        self.profile = profile
        self.reasoning = reasoning

    def score(self, posting: Posting, content: str | None = None) -> ScoreResult:
        """Score one posting; falls back to rules when the model is unusable."""
        content = posting.description if content is None else content
        if self.reasoning is not None:
            result = self._ai_score(posting.title, content)
            if result is not None:
                logger.info(
                    "AI analysis: %d/100 for '%s'", result.match_score, posting.title[:40]
                )
                return result
        return rule_based_score(posting.title, content, self.profile)

    def score_all(
        self,
        items: list[tuple[Posting, str]],
        max_workers: int = 8,
    ) -> list[Posting]:
        """Score (posting, content) pairs concurrently; output keeps input order."""
        if not items:
            return []
        workers = max(1, min(max_workers, len(items)))
        logger.info("Scoring %d postings with %d workers", len(items), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda item: self._score_isolated(*item), items))

    def _score_isolated(self, posting: Posting, content: str) -> Posting:
        try:
            result = self.score(posting, content)
        except Exception as e:
            logger.warning("Scoring failed for %s, using rules: %s", posting.url, e)
            result = rule_based_score(posting.title, content, self.profile)
        return posting.with_score(result, max_skills=MAX_MATCHED_SKILLS)

    def _ai_score(self, title: str, content: str) -> ScoreResult | None:
        prompt = SCORING_PROMPT.format(
            year=self.profile.graduation_year,
            title=title,
            content=content[:AI_CONTENT_CHARS] or "No content available",
            profile_context=self.profile.prompt_context(),
            roles=", ".join(self.profile.target_roles) or "software",
            min_compensation=self.profile.min_compensation,
        )
        try:
            raw = self.reasoning.complete(prompt, operation="posting_analysis")
        except ModelError as e:
            logger.warning("AI analysis failed, using fallback: %s", e)
            return None

        parsed = _parse_scoring_output(raw)
        if parsed is None:
            return None
        return ScoreResult(
            match_score=parsed.matchScore,
            matched_skills=parsed.matchedSkills[:MAX_MATCHED_SKILLS],
            relevance_factors=parsed.relevanceFactors,
            strategy="ai",
        )


def _parse_scoring_output(raw: str) -> AIScoreOutput | None:
    """Parse and validate model response as AIScoreOutput."""
    json_str = extract_json_object(raw)
    if not json_str:
        logger.warning("No JSON found in model response")
        return None
    try:
        data = json.loads(json_str)
        if not isinstance(data, dict):
            logger.warning("Model response JSON is not an object")
            return None
        return AIScoreOutput(**data)
    except json.JSONDecodeError as e:
        logger.warning("JSON parse error: %s", e)
        return None
    except ValidationError as e:
        logger.warning("Pydantic validation error: %s", e)
        return None
