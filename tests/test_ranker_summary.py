"""Tests for admission, tiering and summary statistics."""

from __future__ import annotations

from opportunity_scout.agents.ranker import rank_postings
from opportunity_scout.models.posting import Posting
from opportunity_scout.report.summary import (
    average_score,
    build_summary,
    failure_summary,
    top_by_frequency,
)


def _make_posting(
    score: int,
    n: int,
    company: str = "Acme",
    skills: list[str] | None = None,
) -> Posting:
    return Posting(
        title=f"Job {n}",
        company=company,
        location="India",
        url=f"https://example.com/{n}",
        match_score=score,
        matched_skills=skills or [],
    )


class TestRankPostings:
    """Test suite for rank_postings."""

    def test_admission_and_buckets(self) -> None:
        postings = [_make_posting(s, i) for i, s in enumerate([35, 80, 40, 69, 70, 0, 100])]
        ranking = rank_postings(postings)
        assert [p.match_score for p in ranking.admitted] == [100, 80, 70, 69, 40]
        assert all(p.match_score >= 70 for p in ranking.high)
        assert all(40 <= p.match_score < 70 for p in ranking.medium)
        assert ranking.low == []

    def test_ties_keep_extraction_order(self) -> None:
        postings = [_make_posting(60, i) for i in range(4)]
        ranking = rank_postings(postings)
        assert [p.url for p in ranking.admitted] == [p.url for p in postings]

    def test_caps_and_uncapped_counts(self) -> None:
        postings = [_make_posting(90, i) for i in range(12)]
        postings += [_make_posting(50, 100 + i) for i in range(7)]
        ranking = rank_postings(postings)
        assert len(ranking.high) == 10
        assert len(ranking.medium) == 5
        assert ranking.high_count == 12
        assert ranking.medium_count == 7
        assert len(ranking.admitted) == 19

    def test_relaxed_admission_fills_low_bucket(self) -> None:
        postings = [_make_posting(s, i) for i, s in enumerate([10, 20, 30, 35, 90])]
        ranking = rank_postings(postings, admission_threshold=0)
        assert [p.match_score for p in ranking.low] == [35, 30, 20]
        assert ranking.low_count == 4

    def test_citations_in_extraction_order(self) -> None:
        postings = [_make_posting(50, 1), _make_posting(10, 2), _make_posting(90, 3)]
        ranking = rank_postings(postings)
        assert ranking.citations == [
            "[1] Job 1 - https://example.com/1",
            "[2] Job 3 - https://example.com/3",
        ]

    def test_empty(self) -> None:
        ranking = rank_postings([])
        assert ranking.admitted == ranking.high == ranking.medium == ranking.low == []


class TestSummary:
    """Test suite for summary statistics and recommendations."""

    def test_build_summary(self) -> None:
        postings = [
            _make_posting(90, 1, "Acme", ["Python", "React"]),
            _make_posting(75, 2, "Globex", ["React"]),
            _make_posting(50, 3, "Acme", ["SQL", "React"]),
        ]
        summary = build_summary(rank_postings(postings))
        assert summary.average_match_score == 72
        assert summary.top_skills_required == ["React", "Python", "SQL"]
        assert summary.top_companies == ["Acme", "Globex"]
        assert summary.recommended_actions[0] == "Apply to 2 high-match jobs immediately"
        assert summary.recommended_actions[1] == "Review 1 medium-match jobs for backup"
        assert summary.recommended_actions[2] == "Update resume to highlight: React, Python, SQL"

    def test_empty_summary(self) -> None:
        summary = build_summary(rank_postings([]))
        assert summary.average_match_score == 0
        assert summary.top_skills_required == []
        assert summary.recommended_actions[0] == "Apply to 0 high-match jobs immediately"

    def test_average_rounds_half_up(self) -> None:
        assert average_score([70, 71]) == 71
        assert average_score([40, 41, 41]) == 41
        assert average_score([]) == 0

    def test_top_by_frequency_ties_first_seen(self) -> None:
        items = ["b", "a", "c", "a", "b", "d", "e", "f"]
        assert top_by_frequency(items) == ["b", "a", "c", "d", "e"]

    def test_failure_summary(self) -> None:
        assert failure_summary().recommended_actions == [
            "Try broader search terms",
            "Check job platforms directly",
        ]
