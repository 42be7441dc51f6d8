"""Tests for rule-based and model-backed posting scoring."""

from __future__ import annotations

import json

from opportunity_scout.agents.extractor import extract_posting
from opportunity_scout.agents.scoring import Scorer, rule_based_score
from opportunity_scout.models.posting import Posting, RawResult
from opportunity_scout.models.profile import Profile

from conftest import FakeReasoningClient


def _make_posting(title: str = "SDE Intern", url: str = "https://example.com/1") -> Posting:
    return Posting(title=title, company="Acme", location="India", url=url)


class TestRuleBasedScore:
    """Test suite for the deterministic fallback scorer."""

    def test_full_signal_posting(self, profile: Profile, matching_result: RawResult) -> None:
        result = rule_based_score(matching_result.title, matching_result.content, profile)
        # 30 base + 2 skills + role + cohort + PPO + stipend
        assert result.match_score == 100
        assert result.matched_skills == ["Python", "React"]
        assert result.relevance_factors == [
            "Relevant Role Title", "2026 Batch", "PPO Opportunity", "Good Stipend",
        ]
        assert result.strategy == "rules"

    def test_unrelated_page_scores_base(self, profile: Profile, generic_result: RawResult) -> None:
        result = rule_based_score(generic_result.title, generic_result.content, profile)
        assert result.match_score == 30
        assert result.relevance_factors == []

    def test_is_deterministic(self, profile: Profile, matching_result: RawResult) -> None:
        first = rule_based_score(matching_result.title, matching_result.content, profile)
        second = rule_based_score(matching_result.title, matching_result.content, profile)
        assert first.model_dump_json() == second.model_dump_json()

    def test_score_is_clamped(self) -> None:
        profile = Profile(skills=["a", "b", "c", "d", "e", "f", "g", "h"])
        result = rule_based_score("intern", "abcdefgh 2026 ppo lakh", profile)
        assert result.match_score == 100
        assert len(result.matched_skills) == 5
        assert "8 Skills Match" in result.relevance_factors

    def test_low_stipend_is_not_rewarded(self, profile: Profile) -> None:
        result = rule_based_score("Intern", "Stipend ₹10,000 per month", profile)
        assert "Good Stipend" not in result.relevance_factors

    def test_k_suffix_stipend(self, profile: Profile) -> None:
        result = rule_based_score("Intern", "Stipend ₹60k", profile)
        assert "Good Stipend" in result.relevance_factors


class TestScorer:
    """Test suite for the model-first scorer with rule fallback."""

    def test_uses_model_output(self, profile: Profile) -> None:
        response = json.dumps(
            {
                "matchScore": 82,
                "matchedSkills": ["Python"],
                "relevanceFactors": ["Backend focus"],
                "reasoning": "good fit",
            }
        )
        reasoning = FakeReasoningClient(f"Here you go:\n```json\n{response}\n```")
        result = Scorer(profile, reasoning).score(_make_posting(), "Python backend")
        assert result.strategy == "ai"
        assert result.match_score == 82
        assert result.relevance_factors == ["Backend focus"]
        assert "Candidate Profile" in reasoning.prompts[0]

    def test_model_failure_falls_back_to_rules(self, profile: Profile) -> None:
        scorer = Scorer(profile, FakeReasoningClient(fail=True))
        result = scorer.score(_make_posting(), "Python")
        assert result.strategy == "rules"
        assert result.match_score == 55

    def test_unparseable_output_falls_back(self, profile: Profile) -> None:
        scorer = Scorer(profile, FakeReasoningClient("I think it is a good match"))
        assert scorer.score(_make_posting(), "").strategy == "rules"

    def test_non_numeric_model_score_falls_back(self, profile: Profile) -> None:
        posting = _make_posting()
        content = "2026 passout Python React PPO"
        for raw in ('{"matchScore": "high"}', '{"matchScore": "n/a"}', '{"matchScore": NaN}'):
            result = Scorer(profile, FakeReasoningClient(raw)).score(posting, content)
            assert result.strategy == "rules"
            assert result == rule_based_score(posting.title, content, profile)

    def test_out_of_range_model_score_is_clamped(self, profile: Profile) -> None:
        scorer = Scorer(profile, FakeReasoningClient('{"matchScore": 140}'))
        assert scorer.score(_make_posting(), "").match_score == 100

    def test_score_all_keeps_order(self, profile: Profile) -> None:
        items = [
            (_make_posting("Intern", f"https://example.com/{i}"), "Python " * (i % 3))
            for i in range(12)
        ]
        scored = Scorer(profile).score_all(items, max_workers=4)
        assert [p.url for p in scored] == [p.url for p, _ in items]
        assert all(0 <= p.match_score <= 100 for p in scored)

    def test_score_all_empty(self, profile: Profile) -> None:
        assert Scorer(profile).score_all([]) == []

    def test_scored_posting_from_extraction(
        self, profile: Profile, matching_result: RawResult
    ) -> None:
        posting = extract_posting(matching_result, profile.skills)
        [scored] = Scorer(profile).score_all([(posting, matching_result.content)])
        assert scored.match_score >= 70
        assert scored.title == posting.title
