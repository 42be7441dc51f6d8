"""Tests for CSV export of postings."""

from __future__ import annotations

from opportunity_scout.models.posting import Posting
from opportunity_scout.report.csv_export import HEADERS, parse_csv, to_csv


def _make_posting(n: int, **kwargs) -> Posting:
    data = dict(
        title=f"SDE Intern {n}",
        company=f"Company {n}",
        location="Bangalore",
        url=f"https://example.com/{n}",
        match_score=70 + n,
        matched_skills=["Python", "React"],
        relevance_factors=["2026 Batch"],
    )
    data.update(kwargs)
    return Posting(**data)


class TestCsvExport:
    """Test suite for to_csv / parse_csv."""

    def test_header_only_for_empty(self) -> None:
        assert to_csv([]) == ",".join(HEADERS)

    def test_row_layout(self) -> None:
        text = to_csv([_make_posting(1)])
        lines = text.split("\n")
        assert len(lines) == 2
        assert lines[1] == (
            "SDE Intern 1,Company 1,Bangalore,Not specified,71,"
            "Python; React,2026 Batch,https://example.com/1"
        )
        assert not text.endswith("\n")

    def test_commas_in_free_text_become_semicolons(self) -> None:
        posting = _make_posting(1, title="Intern, Backend", company="Acme, Inc.")
        row = parse_csv(to_csv([posting]))[0]
        assert row["Title"] == "Intern; Backend"
        assert row["Company"] == "Acme; Inc."

    def test_salary_with_comma_stays_one_field(self) -> None:
        posting = _make_posting(1, salary="₹50,000 per month")
        row = parse_csv(to_csv([posting]))[0]
        assert row["Salary"] == "₹50,000 per month"
        assert row["URL"] == "https://example.com/1"

    def test_round_trip_identity_fields(self) -> None:
        postings = [_make_posting(n) for n in range(3)]
        rows = parse_csv(to_csv(postings))
        assert {(r["Title"], r["Company"], r["URL"]) for r in rows} == {
            (p.title, p.company, p.url) for p in postings
        }

    def test_parse_empty(self) -> None:
        assert parse_csv("") == []
