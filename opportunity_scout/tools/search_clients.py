"""Search provider clients — Tavily API and local SearXNG metasearch."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx
from tavily import TavilyClient
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from opportunity_scout.exceptions import ProviderError
from opportunity_scout.models.posting import RawResult
from opportunity_scout.models.usage import UsageEntry
from opportunity_scout.storage.usage import UsageRecorder

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@runtime_checkable
class SearchProviderClient(Protocol):
    """Executes one query and returns raw result records.

    Implementations raise ProviderError on network or quota failure.
    """

    name: str

    def search(self, query: str, max_results: int = 8) -> list[RawResult]: ...


def _to_raw_results(items: list[dict], max_results: int) -> list[RawResult]:
    results: list[RawResult] = []
    for item in items[:max_results]:
        if not isinstance(item, dict):
            continue
        results.append(
            RawResult(
                title=item.get("title", ""),
                url=item.get("url", ""),
                content=item.get("content", ""),
            )
        )
    return results


class TavilySearchClient:
    """Web search through the Tavily API."""

    name = "tavily"

    def __init__(
        self,
        api_key: str,
        usage_recorder: UsageRecorder | None = None,
        client: TavilyClient | None = None,
    ) -> None:
        if client is None and not api_key:
            raise ProviderError(self.name, "TAVILY_API_KEY not set")
        self._client = client or TavilyClient(api_key=api_key)
        self._usage = usage_recorder

    def search(self, query: str, max_results: int = 8) -> list[RawResult]:
        try:
            response = self._client.search(
                query=query,
                max_results=max_results,
                include_answer=False,
                include_raw_content=False,
            )
        except Exception as e:
            raise ProviderError(self.name, str(e), query=query) from e

        if self._usage is not None:
            self._usage.record(
                UsageEntry(service="tavily", operation="job_search", metadata={"query": query})
            )

        if not isinstance(response, dict):
            raise ProviderError(self.name, "unexpected response shape", query=query)
        return _to_raw_results(response.get("results") or [], max_results)


class SearxngSearchClient:
    """Query a local SearXNG instance through its JSON API."""

    name = "searxng"

    def __init__(
        self,
        searxng_url: str = "http://localhost:8888",
        categories: str = "general",
        timeout: float = DEFAULT_TIMEOUT,
        usage_recorder: UsageRecorder | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.searxng_url = searxng_url.rstrip("/")
        self.categories = categories
        self._http = http_client or httpx.Client(timeout=timeout)
        self._usage = usage_recorder

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _get(self, query: str) -> httpx.Response:
        response = self._http.get(
            f"{self.searxng_url}/search",
            params={"q": query, "format": "json", "categories": self.categories},
        )
        response.raise_for_status()
        return response

    def search(self, query: str, max_results: int = 8) -> list[RawResult]:
        try:
            data = self._get(query).json()
        except httpx.TimeoutException as e:
            raise ProviderError(self.name, "request timed out", query=query) from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.name, f"HTTP {e.response.status_code}", query=query
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, str(e), query=query) from e

        if self._usage is not None:
            self._usage.record(
                UsageEntry(service="searxng", operation="job_search", metadata={"query": query})
            )
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response shape", query=query)
        return _to_raw_results(data.get("results") or [], max_results)
