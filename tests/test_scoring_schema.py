"""Tests for model scoring output schema validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from opportunity_scout.agents.scoring import _parse_scoring_output
from opportunity_scout.models.scoring import AIScoreOutput


class TestScoringSchema:
    """Test suite for AIScoreOutput Pydantic validation."""

    def test_valid_scoring_output(self) -> None:
        """Test that valid JSON parses correctly."""
        data = {
            "matchScore": 78,
            "matchedSkills": ["Python", "React"],
            "relevanceFactors": ["2026 batch", "PPO offered"],
            "reasoning": "Strong stack overlap",
        }
        result = AIScoreOutput(**data)
        assert result.matchScore == 78
        assert result.matchedSkills == ["Python", "React"]
        assert len(result.relevanceFactors) == 2

    def test_score_too_high_is_clamped(self) -> None:
        assert AIScoreOutput(matchScore=150).matchScore == 100

    def test_negative_score_is_clamped(self) -> None:
        assert AIScoreOutput(matchScore=-5).matchScore == 0

    def test_numeric_string_score(self) -> None:
        assert AIScoreOutput(matchScore="64").matchScore == 64

    def test_non_numeric_score_is_rejected(self) -> None:
        for bad in ("high", "n/a", float("nan"), float("inf"), True):
            with pytest.raises(ValidationError):
                AIScoreOutput(matchScore=bad)

    def test_null_score_is_neutral(self) -> None:
        assert AIScoreOutput(matchScore=None).matchScore == 50

    def test_null_lists_become_empty(self) -> None:
        result = AIScoreOutput(matchScore=60, matchedSkills=None, relevanceFactors=None)
        assert result.matchedSkills == []
        assert result.relevanceFactors == []

    def test_blank_items_are_dropped(self) -> None:
        result = AIScoreOutput(matchScore=60, relevanceFactors=["  PPO ", "", "  "])
        assert result.relevanceFactors == ["PPO"]

    def test_extra_fields_ignored(self) -> None:
        result = AIScoreOutput(matchScore=60, confidence="high")
        assert not hasattr(result, "confidence")


class TestParseScoringOutput:
    """Test suite for extracting the schema from raw model text."""

    def test_plain_json(self) -> None:
        parsed = _parse_scoring_output('{"matchScore": 71, "matchedSkills": ["SQL"]}')
        assert parsed is not None
        assert parsed.matchScore == 71

    def test_json_with_surrounding_text(self) -> None:
        parsed = _parse_scoring_output('Sure! {"matchScore": 45, "reasoning": "ok {fine}"} Done.')
        assert parsed.matchScore == 45
        assert parsed.reasoning == "ok {fine}"

    def test_invalid_json(self) -> None:
        assert _parse_scoring_output('{"matchScore": 45,,}') is None

    def test_no_json(self) -> None:
        assert _parse_scoring_output("no idea") is None
