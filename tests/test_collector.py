"""Tests for concurrent query fan-out and URL de-duplication."""

from __future__ import annotations

from opportunity_scout.models.posting import RawResult
from opportunity_scout.tools.collector import FanOutCollector

from conftest import FakeSearchClient


def _result(n: int) -> RawResult:
    return RawResult(title=f"Job {n}", url=f"https://example.com/{n}", content="")


class TestFanOutCollector:
    """Test suite for FanOutCollector."""

    def test_partial_failure_keeps_successful_results(self) -> None:
        queries = [f"q{i}" for i in range(5)]
        client = FakeSearchClient(
            results={"q3": [_result(1), _result(2)], "q4": [_result(3), _result(4)]},
            failing={"q0", "q1", "q2"},
        )
        report = FanOutCollector(client, max_workers=3).collect(queries)
        assert len(report.results) == 4
        assert {r.url for r in report.results} == {f"https://example.com/{n}" for n in range(1, 5)}
        assert report.succeeded == 2
        assert report.failed == 3
        assert set(report.errors) == {"q0", "q1", "q2"}
        assert not report.all_failed

    def test_duplicate_urls_collapse(self) -> None:
        client = FakeSearchClient(
            results={"a": [_result(1), _result(2)], "b": [_result(2), _result(3)]}
        )
        report = FanOutCollector(client).collect(["a", "b"])
        urls = [r.url for r in report.results]
        assert len(urls) == len(set(urls)) == 3

    def test_duplicate_within_one_query(self) -> None:
        client = FakeSearchClient(default=[_result(1), _result(1)])
        assert len(FanOutCollector(client).collect(["a"]).results) == 1

    def test_urls_differing_by_whitespace_collapse(self) -> None:
        client = FakeSearchClient(
            results={
                "a": [RawResult(title="Job", url="https://x.com/job/1", content="")],
                "b": [RawResult(title="Job", url="https://x.com/job/1 ", content="")],
            }
        )
        report = FanOutCollector(client).collect(["a", "b"])
        assert [r.url for r in report.results] == ["https://x.com/job/1"]

    def test_unvalidated_url_is_normalised(self) -> None:
        padded = _result(1).model_copy(update={"url": " https://example.com/1 "})
        client = FakeSearchClient(default=[padded, _result(1)])
        report = FanOutCollector(client).collect(["a"])
        assert [r.url for r in report.results] == ["https://example.com/1"]

    def test_all_failed(self) -> None:
        client = FakeSearchClient(fail_all=True)
        report = FanOutCollector(client).collect(["a", "b", "c"])
        assert report.results == []
        assert report.all_failed
        assert report.failed == 3

    def test_results_without_url_are_dropped(self) -> None:
        client = FakeSearchClient(default=[RawResult(title="x", url=""), _result(1)])
        assert [r.url for r in FanOutCollector(client).collect(["a"]).results] == [
            "https://example.com/1"
        ]

    def test_query_and_result_caps(self) -> None:
        client = FakeSearchClient(default=[_result(n) for n in range(20)])
        report = FanOutCollector(client).collect(
            [f"q{i}" for i in range(8)], max_results_per_query=3, max_queries=5
        )
        assert len(client.calls) == 5
        assert len(report.results) == 3

    def test_no_queries(self) -> None:
        report = FanOutCollector(FakeSearchClient()).collect([])
        assert report.results == []
        assert report.all_failed
