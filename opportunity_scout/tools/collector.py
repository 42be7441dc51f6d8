"""Concurrent fan-out of search queries with URL de-duplication."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from opportunity_scout.models.posting import RawResult
from opportunity_scout.tools.search_clients import SearchProviderClient

logger = logging.getLogger(__name__)


@dataclass
class CollectionReport:
    results: list[RawResult] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def all_failed(self) -> bool:
        return self.succeeded == 0


class FanOutCollector:
    """Runs queries concurrently; a failing query contributes nothing."""

    def __init__(self, client: SearchProviderClient, max_workers: int = 5) -> None:
        self.client = client
        self.max_workers = max_workers

    def _search_one(self, query: str, max_results: int) -> list[RawResult]:
        results = self.client.search(query, max_results=max_results)
        logger.info("[%s] %r returned %d results", self.client.name, query, len(results))
        return results

    def collect(
        self,
        queries: list[str],
        max_results_per_query: int = 8,
        max_queries: int = 5,
    ) -> CollectionReport:
        report = CollectionReport()
        queries = queries[:max_queries]
        if not queries:
            return report

        seen_urls: set[str] = set()
        workers = max(1, min(self.max_workers, len(queries)))
        logger.info("Searching %d queries with %d workers", len(queries), workers)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self._search_one, q, max_results_per_query): q
                for q in queries
            }
            # First arrival wins; only this thread touches seen_urls
            for future in as_completed(futures):
                query = futures[future]
                try:
                    batch = future.result()
                except Exception as e:
                    logger.warning("Search failed for %r: %s", query, e)
                    report.failed += 1
                    report.errors[query] = str(e)
                    continue

                report.succeeded += 1
                for result in batch:
                    url = result.url.strip()
                    if not url or url in seen_urls:
                        continue
                    seen_urls.add(url)
                    if url != result.url:
                        result = result.model_copy(update={"url": url})
                    report.results.append(result)

        logger.info(
            "Collected %d unique results (%d queries ok, %d failed)",
            len(report.results), report.succeeded, report.failed,
        )
        return report
