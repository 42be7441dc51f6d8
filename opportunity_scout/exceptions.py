"""Exception types raised by the discovery pipeline and its collaborators.

Every recoverable failure below the pipeline boundary is one of these;
callers of ``run_search`` never see them because the pipeline converts
them into a narrower empty/fallback result.
"""

from __future__ import annotations


class OpportunityScoutError(Exception):
    """Base exception for all pipeline errors."""


class ProviderError(OpportunityScoutError):
    """Search backend unavailable, rate-limited or returned garbage."""

    def __init__(self, provider: str, message: str, query: str | None = None) -> None:
        self.provider = provider
        self.query = query
        detail = f"{provider} search failed"
        if query:
            detail += f" for '{query}'"
        super().__init__(f"{detail}: {message}")


class ModelError(OpportunityScoutError):
    """Reasoning model call timed out, hit a quota, or produced unusable output."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider} completion failed: {message}")


class ExtractionError(OpportunityScoutError):
    """A raw search result could not be turned into a posting."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot extract posting from '{url or '<no url>'}': {reason}")


class ConfigurationError(OpportunityScoutError):
    """Settings or profile values are missing or invalid."""
