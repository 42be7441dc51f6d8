"""Heuristic field extraction from raw search results into postings."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from opportunity_scout.exceptions import ExtractionError
from opportunity_scout.models.posting import Posting, RawResult
from opportunity_scout.tools.html_cleaner import clean_snippet

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 100
MAX_DESCRIPTION_CHARS = 300
MAX_MATCHED_SKILLS = 5

LOCATION_PATTERN = re.compile(
    r"(Bangalore|Mumbai|Delhi|Hyderabad|Pune|Chennai|Remote|Hybrid|Bengaluru|NCR)",
    re.IGNORECASE,
)
SALARY_PATTERN = re.compile(
    r"₹?\s*(\d{1,3}[,.]?\d{0,3})\s*(?:k|lakh|LPA|per month|/month)",
    re.IGNORECASE,
)
# "SDE Intern at Acme - Bangalore | LinkedIn"
COMPANY_IN_TITLE = re.compile(r"\bat\s+([^-|]+)", re.IGNORECASE)

# Aggregators whose page titles do not name the hiring company
AGGREGATOR_NAMES: dict[str, str] = {
    "naukri.com": "Naukri",
    "instahyre.com": "Instahyre",
}


def extract_posting(
    raw: RawResult,
    user_skills: list[str] | None = None,
    default_location: str = "India",
) -> Posting | None:
    """Build an unscored Posting from one search result.

    Never raises; returns None when the result cannot be used.
    """
    try:
        return _extract(raw, user_skills or [], default_location)
    except ExtractionError as e:
        logger.debug("Skipping result: %s", e)
        return None
    except Exception as e:
        logger.warning("Unexpected extraction failure for %r: %s", raw.url, e)
        return None


def _extract(raw: RawResult, user_skills: list[str], default_location: str) -> Posting:
    url = (raw.url or "").strip()
    if not url:
        raise ExtractionError(url, "missing URL")

    title = clean_snippet(raw.title)
    content = clean_snippet(raw.content)

    return Posting(
        title=title[:MAX_TITLE_CHARS],
        company=extract_company(title, url),
        location=extract_location(content, default_location),
        description=content[:MAX_DESCRIPTION_CHARS],
        url=url,
        salary=extract_salary(content),
        source=extract_source(url),
        matched_skills=match_skills(title + " " + content, user_skills)[:MAX_MATCHED_SKILLS],
    )


def extract_company(title: str, url: str) -> str:
    host = _host(url)
    for domain, name in AGGREGATOR_NAMES.items():
        if _host_matches(host, domain):
            return name

    match = COMPANY_IN_TITLE.search(title)
    if match and match.group(1).strip():
        return match.group(1).strip()
    if _host_matches(host, "linkedin.com"):
        return "LinkedIn"
    return "See Website"


def extract_location(content: str, default: str = "India") -> str:
    match = LOCATION_PATTERN.search(content)
    return match.group(1) if match else default


def extract_salary(content: str) -> str | None:
    match = SALARY_PATTERN.search(content)
    return match.group(0).strip() if match else None


def extract_source(url: str) -> str:
    return urlparse(url).netloc or "web"


def match_skills(text: str, skills: list[str]) -> list[str]:
    """Skills found in text by case-insensitive substring, in profile order."""
    lowered = text.lower()
    return [skill for skill in skills if skill and skill.lower() in lowered]


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)
