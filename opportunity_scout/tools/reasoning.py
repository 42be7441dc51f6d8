"""Reasoning model clients (Ollama local, OpenAI-compatible) and JSON extraction."""

from __future__ import annotations

import logging
import re
from typing import Protocol, runtime_checkable

import httpx
from openai import OpenAI, OpenAIError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from opportunity_scout.exceptions import ModelError
from opportunity_scout.models.usage import UsageEntry
from opportunity_scout.storage.usage import UsageRecorder

logger = logging.getLogger(__name__)


@runtime_checkable
class ReasoningClient(Protocol):
    """Completes a prompt. Implementations raise ModelError on any failure."""

    name: str

    def complete(self, prompt: str, operation: str = "completion") -> str: ...


class OllamaReasoningClient:
    """Local Ollama ``/api/generate`` endpoint."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3",
        timeout: float = 60.0,
        usage_recorder: UsageRecorder | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._http = http_client or httpx.Client(timeout=timeout)
        self._usage = usage_recorder

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _generate(self, prompt: str) -> dict:
        response = self._http.post(
            f"{self.base_url}/api/generate",
            json={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {
                    "temperature": 0.1,
                    "num_predict": 512,
                },
            },
        )
        response.raise_for_status()
        return response.json()

    def complete(self, prompt: str, operation: str = "completion") -> str:
        try:
            data = self._generate(prompt)
        except (httpx.HTTPError, ValueError) as e:
            raise ModelError(self.name, str(e)) from e

        if not isinstance(data, dict):
            raise ModelError(self.name, "unexpected response shape")
        if self._usage is not None:
            self._usage.record(
                UsageEntry(
                    service="ollama",
                    operation=operation,
                    model=self.model,
                    input_tokens=data.get("prompt_eval_count") or 0,
                    output_tokens=data.get("eval_count") or 0,
                )
            )
        text = data.get("response") or ""
        if not text.strip():
            raise ModelError(self.name, "empty response")
        return text


class OpenAIReasoningClient:
    """Any OpenAI-compatible chat completions endpoint."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = 30.0,
        usage_recorder: UsageRecorder | None = None,
        client: OpenAI | None = None,
    ) -> None:
        if client is None and not api_key:
            raise ModelError(self.name, "OPENAI_API_KEY not set")
        self.model = model
        self._client = client or OpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1
        )
        self._usage = usage_recorder

    def complete(self, prompt: str, operation: str = "completion") -> str:
        try:
            r = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=512,
                temperature=0.1,
            )
        except OpenAIError as e:
            raise ModelError(self.name, str(e)) from e

        if self._usage is not None and r.usage is not None:
            self._usage.record(
                UsageEntry(
                    service="openai",
                    operation=operation,
                    model=self.model,
                    input_tokens=r.usage.prompt_tokens or 0,
                    output_tokens=r.usage.completion_tokens or 0,
                )
            )
        if not r.choices:
            raise ModelError(self.name, "no choices returned")
        text = (r.choices[0].message.content or "").strip()
        if not text:
            raise ModelError(self.name, "empty response")
        return text


# =============================================================================
# JSON extraction helpers
# =============================================================================


def _balanced_prefix(text: str, open_ch: str, close_ch: str) -> str | None:
    depth = 0
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[: i + 1]
    return None


def _extract(text: str, open_ch: str, close_ch: str) -> str | None:
    text = text.strip()
    if text.startswith(open_ch):
        found = _balanced_prefix(text, open_ch, close_ch)
        if found:
            return found

    # Markdown code fences
    fence = re.search(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL)
    if fence and fence.group(1).startswith(open_ch):
        found = _balanced_prefix(fence.group(1), open_ch, close_ch)
        if found:
            return found

    # First opening bracket anywhere
    start = text.find(open_ch)
    if start != -1:
        return _balanced_prefix(text[start:], open_ch, close_ch)
    return None


def extract_json_object(text: str) -> str | None:
    """Extract a JSON object from text that may contain surrounding content."""
    return _extract(text, "{", "}")


def extract_json_array(text: str) -> str | None:
    """Extract a JSON array from text that may contain surrounding content."""
    return _extract(text, "[", "]")
