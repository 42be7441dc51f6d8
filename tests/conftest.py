"""Shared fakes for collaborators: no network in tests."""

from __future__ import annotations

import threading

import pytest

from opportunity_scout.exceptions import ModelError, ProviderError
from opportunity_scout.models.posting import RawResult
from opportunity_scout.models.profile import Profile


class FakeSearchClient:
    """Search client returning canned results per query; errors for listed queries."""

    name = "fake"

    def __init__(
        self,
        results: dict[str, list[RawResult]] | None = None,
        default: list[RawResult] | None = None,
        failing: set[str] | None = None,
        fail_all: bool = False,
    ) -> None:
        self.results = results or {}
        self.default = default or []
        self.failing = failing or set()
        self.fail_all = fail_all
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def search(self, query: str, max_results: int = 8) -> list[RawResult]:
        with self._lock:
            self.calls.append(query)
        if self.fail_all or query in self.failing:
            raise ProviderError(self.name, "quota exceeded", query=query)
        return list(self.results.get(query, self.default))[:max_results]


class FakeReasoningClient:
    """Reasoning client replaying a fixed response, or failing."""

    name = "fake-model"

    def __init__(self, response: str = "", fail: bool = False) -> None:
        self.response = response
        self.fail = fail
        self.prompts: list[str] = []

    def complete(self, prompt: str, operation: str = "completion") -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise ModelError(self.name, "connection refused")
        return self.response


@pytest.fixture
def profile() -> Profile:
    return Profile(skills=["Python", "React"], graduation_year=2026)


@pytest.fixture
def matching_result() -> RawResult:
    return RawResult(
        title="SDE Intern at Acme Labs - Bangalore | LinkedIn",
        url="https://www.linkedin.com/jobs/view/1",
        content=(
            "Hiring 2026 passout students in Bangalore. Skills: Python, React. "
            "Stipend ₹60,000 per month with PPO."
        ),
    )


@pytest.fixture
def generic_result() -> RawResult:
    return RawResult(
        title="Best pizza recipes for the weekend",
        url="https://example.com/pizza",
        content="Homemade dough, fresh tomatoes and mozzarella.",
    )
