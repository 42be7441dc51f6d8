"""Flat CSV serialization of postings for file export."""

from __future__ import annotations

import csv
import io
import logging

from opportunity_scout.models.posting import Posting

logger = logging.getLogger(__name__)

HEADERS: list[str] = [
    "Title", "Company", "Location", "Salary", "Match Score",
    "Matched Skills", "Relevance Factors", "URL",
]
LIST_SEPARATOR = "; "
MISSING_SALARY = "Not specified"


def _free_text(value: str) -> str:
    return value.replace(",", ";")


def to_row(posting: Posting) -> list[str]:
    return [
        _free_text(posting.title),
        _free_text(posting.company),
        _free_text(posting.location),
        posting.salary or MISSING_SALARY,
        str(posting.match_score),
        LIST_SEPARATOR.join(posting.matched_skills),
        LIST_SEPARATOR.join(posting.relevance_factors),
        posting.url,
    ]


def to_csv(postings: list[Posting]) -> str:
    """Serialize postings to CSV text with a header row and no trailing newline.

    Commas in title/company/location become semicolons. Any other field
    that still needs it (a salary like "₹50,000 per month") is quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADERS)
    for posting in postings:
        writer.writerow(to_row(posting))
    logger.info("Generated CSV with %d jobs", len(postings))
    return buffer.getvalue().rstrip("\n")


def parse_csv(text: str) -> list[dict[str, str]]:
    """Read CSV produced by ``to_csv`` back into header-keyed rows."""
    if not text.strip():
        return []
    return list(csv.DictReader(io.StringIO(text)))
