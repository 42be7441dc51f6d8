"""LangGraph workflow — search → extract → score → rank → export pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from opportunity_scout.agents.extractor import extract_posting
from opportunity_scout.agents.profile_loader import load_profile
from opportunity_scout.agents.query_planner import plan_queries
from opportunity_scout.agents.ranker import Ranking, rank_postings
from opportunity_scout.agents.scoring import Scorer
from opportunity_scout.config import PipelineSettings, load_settings
from opportunity_scout.exceptions import ModelError, OpportunityScoutError
from opportunity_scout.models.posting import Posting, RawResult
from opportunity_scout.models.profile import Profile
from opportunity_scout.models.result import PipelineResult, Summary
from opportunity_scout.report.csv_export import to_csv
from opportunity_scout.report.summary import build_summary, failure_summary
from opportunity_scout.storage.usage import UsageRecorder
from opportunity_scout.tools.collector import FanOutCollector
from opportunity_scout.tools.html_cleaner import clean_snippet
from opportunity_scout.tools.reasoning import (
    OllamaReasoningClient,
    OpenAIReasoningClient,
    ReasoningClient,
)
from opportunity_scout.tools.search_clients import (
    SearchProviderClient,
    SearxngSearchClient,
    TavilySearchClient,
)

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No jobs found. Try refining your search."
FAILURE_MESSAGE = "Failed to complete job search. Please try again."


# =============================================================================
# Pipeline State
# =============================================================================


class PipelineState(TypedDict, total=False):
    """State passed between nodes in the LangGraph pipeline."""

    # Input
    query: str
    location: str

    # Data
    search_query: str
    queries: list[str]
    raw_results: list[RawResult]
    collection_errors: dict[str, str]
    extracted: list[tuple[Posting, str]]
    scored: list[Posting]
    ranking: Ranking
    summary: Summary
    csv_data: str

    # Output
    result: PipelineResult


def failure_result(
    search_query: str, message: str = FAILURE_MESSAGE, error: str | None = None
) -> PipelineResult:
    return PipelineResult(
        success=False,
        search_query=search_query,
        summary=failure_summary() if message == NO_RESULTS_MESSAGE else Summary(),
        error=error,
        message=message,
    )


class SearchPipeline:
    """Discovery-and-ranking pipeline bound to its collaborators."""

    def __init__(
        self,
        search_client: SearchProviderClient,
        profile: Profile,
        settings: PipelineSettings | None = None,
        reasoning: ReasoningClient | None = None,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.profile = profile
        self.reasoning = reasoning
        self.collector = FanOutCollector(search_client, max_workers=self.settings.search_workers)
        self.scorer = Scorer(profile, reasoning)
        self._graph = self.build_graph()

    # -- Public entry point -----------------------------------------------------

    def run_search(self, query: str, location: str | None = None) -> PipelineResult:
        """Run one search. Never raises; failures come back as success=False."""
        location = location or self.settings.default_location
        timeout = self.settings.run_timeout_secs

        pool = ThreadPoolExecutor(max_workers=1)
        try:
            future = pool.submit(self._invoke, query, location)
            return future.result(timeout=timeout)
        except FuturesTimeoutError:
            logger.error("Job search timed out after %.0fs: %r", timeout, query)
            return failure_result(query, error=f"Job search timed out after {timeout:.0f}s")
        except Exception as e:
            logger.error("Job search error: %s", e, exc_info=True)
            return failure_result(query, error=str(e) or e.__class__.__name__)
        finally:
            pool.shutdown(wait=False)

    def _invoke(self, query: str, location: str) -> PipelineResult:
        logger.info("Starting job search: %r (%s)", query, location)
        state = self._graph.invoke({"query": query, "location": location})
        return state["result"]

    # -- Nodes ------------------------------------------------------------------

    def plan_queries_node(self, state: PipelineState) -> dict:
        """Expand the intent into diversified provider queries."""
        logger.info("=== Node 1: Planning Queries ===")
        search_query = (
            f"{state['query']} {state['location']} internship OR SDE "
            f"{self.profile.graduation_year} passout"
        )
        queries = plan_queries(
            search_query, self.profile, self.reasoning, max_queries=self.settings.max_queries
        )
        return {"search_query": search_query, "queries": queries}

    def collect_results_node(self, state: PipelineState) -> dict:
        """Fan the queries out to the search provider."""
        logger.info("=== Node 2: Collecting Results ===")
        report = self.collector.collect(
            state.get("queries", []),
            max_results_per_query=self.settings.max_results_per_query,
            max_queries=self.settings.max_queries,
        )
        return {"raw_results": report.results, "collection_errors": report.errors}

    def no_results_node(self, state: PipelineState) -> dict:
        logger.info("=== No Results ===")
        errors = state.get("collection_errors", {})
        error = None
        if errors and len(errors) == len(state.get("queries", [])):
            error = f"All {len(errors)} search queries failed"
        logger.warning("No search results for %r", state.get("search_query"))
        return {
            "result": failure_result(
                state.get("search_query", state["query"]), NO_RESULTS_MESSAGE, error
            )
        }

    def extract_postings_node(self, state: PipelineState) -> dict:
        """Turn the top raw results into unscored postings."""
        logger.info("=== Node 3: Extracting Postings ===")
        raw_results = state.get("raw_results", [])[: self.settings.max_postings_to_score]
        extracted: list[tuple[Posting, str]] = []
        for raw in raw_results:
            posting = extract_posting(
                raw, self.profile.skills, default_location=state["location"]
            )
            if posting is not None:
                extracted.append((posting, clean_snippet(raw.content)))
        logger.info("Extracted %d of %d results", len(extracted), len(raw_results))
        return {"extracted": extracted}

    def score_postings_node(self, state: PipelineState) -> dict:
        logger.info("=== Node 4: Scoring Postings ===")
        scored = self.scorer.score_all(
            state.get("extracted", []), max_workers=self.settings.scoring_workers
        )
        return {"scored": scored}

    def rank_postings_node(self, state: PipelineState) -> dict:
        logger.info("=== Node 5: Ranking Postings ===")
        s = self.settings
        ranking = rank_postings(
            state.get("scored", []),
            admission_threshold=s.admission_threshold,
            high_threshold=s.high_match_threshold,
            medium_threshold=s.medium_match_threshold,
            high_cap=s.high_match_cap,
            medium_cap=s.medium_match_cap,
            low_cap=s.low_match_cap,
        )
        return {"ranking": ranking}

    def build_summary_node(self, state: PipelineState) -> dict:
        logger.info("=== Node 6: Building Summary ===")
        return {"summary": build_summary(state["ranking"])}

    def export_csv_node(self, state: PipelineState) -> dict:
        logger.info("=== Node 7: Exporting CSV ===")
        return {"csv_data": to_csv(state["ranking"].admitted)}

    def assemble_result_node(self, state: PipelineState) -> dict:
        ranking = state["ranking"]
        summary = state["summary"]
        result = PipelineResult(
            success=True,
            search_query=state["search_query"],
            total_jobs=len(ranking.admitted),
            high_match_jobs=ranking.high,
            medium_match_jobs=ranking.medium,
            low_match_jobs=ranking.low,
            summary=summary,
            citations=ranking.citations,
            csv_data=state.get("csv_data", ""),
        )
        logger.info(
            "Job search complete: %d jobs (high=%d, medium=%d, average=%d/100)",
            result.total_jobs,
            ranking.high_count,
            ranking.medium_count,
            summary.average_match_score,
        )
        return {"result": result}

    # -- Graph ------------------------------------------------------------------

    @staticmethod
    def _route_after_collect(state: PipelineState) -> str:
        return "extract_postings" if state.get("raw_results") else "no_results"

    def build_graph(self) -> Any:
        """Build and compile the LangGraph pipeline."""
        graph = StateGraph(PipelineState)

        graph.add_node("plan_queries", self.plan_queries_node)
        graph.add_node("collect_results", self.collect_results_node)
        graph.add_node("no_results", self.no_results_node)
        graph.add_node("extract_postings", self.extract_postings_node)
        graph.add_node("score_postings", self.score_postings_node)
        graph.add_node("rank_postings", self.rank_postings_node)
        graph.add_node("build_summary", self.build_summary_node)
        graph.add_node("export_csv", self.export_csv_node)
        graph.add_node("assemble_result", self.assemble_result_node)

        graph.set_entry_point("plan_queries")
        graph.add_edge("plan_queries", "collect_results")
        graph.add_conditional_edges(
            "collect_results",
            self._route_after_collect,
            {"extract_postings": "extract_postings", "no_results": "no_results"},
        )
        graph.add_edge("no_results", END)
        graph.add_edge("extract_postings", "score_postings")
        graph.add_edge("score_postings", "rank_postings")
        graph.add_edge("rank_postings", "build_summary")
        graph.add_edge("build_summary", "export_csv")
        graph.add_edge("export_csv", "assemble_result")
        graph.add_edge("assemble_result", END)

        return graph.compile()


# =============================================================================
# Construction from settings
# =============================================================================


def build_search_client(
    settings: PipelineSettings, usage_recorder: UsageRecorder | None = None
) -> SearchProviderClient:
    if settings.search_provider == "searxng":
        return SearxngSearchClient(settings.searxng_url, usage_recorder=usage_recorder)
    return TavilySearchClient(settings.tavily_api_key, usage_recorder=usage_recorder)


def build_reasoning_client(
    settings: PipelineSettings, usage_recorder: UsageRecorder | None = None
) -> ReasoningClient | None:
    """Reasoning client for the configured provider; None means rules only."""
    if settings.reasoning_provider == "none":
        return None
    if settings.reasoning_provider == "openai":
        try:
            return OpenAIReasoningClient(
                settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
                usage_recorder=usage_recorder,
            )
        except ModelError as e:
            logger.warning("Reasoning model unavailable, scoring with rules only: %s", e)
            return None
    return OllamaReasoningClient(
        settings.ollama_base_url, settings.ollama_model, usage_recorder=usage_recorder
    )


def build_pipeline(
    settings: PipelineSettings | None = None,
    profile: Profile | None = None,
    usage_recorder: UsageRecorder | None = None,
) -> SearchPipeline:
    settings = settings or load_settings()
    profile = profile or load_profile(settings.profile_path)
    return SearchPipeline(
        build_search_client(settings, usage_recorder),
        profile,
        settings=settings,
        reasoning=build_reasoning_client(settings, usage_recorder),
    )


def run_search(
    query: str,
    location: str | None = None,
    usage_recorder: UsageRecorder | None = None,
) -> PipelineResult:
    """Build a pipeline from the environment and run one search. Never raises."""
    try:
        pipeline = build_pipeline(usage_recorder=usage_recorder)
    except OpportunityScoutError as e:
        logger.error("Cannot build search pipeline: %s", e)
        return failure_result(query, error=str(e))
    return pipeline.run_search(query, location)
