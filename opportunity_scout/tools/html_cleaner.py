"""Cleaning for search-result snippets before field extraction."""

from __future__ import annotations

import html
import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_MARKDOWN_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_EMPHASIS = re.compile(r"(\*\*|__)(.+?)\1")
_MARKDOWN_MARKERS = re.compile(r"(^|\s)(#{1,6}|\*{1,3}|_{2,3}|>|-{3,})(?=\s)")
_TAG_HINT = re.compile(r"<[a-zA-Z/!][^>]*>")


def clean_snippet(raw: str | None) -> str:
    """Flatten a result snippet to plain single-spaced text.

    Search providers return a mix of HTML fragments, markdown and plain
    text; all three are reduced to their visible text.
    """
    if not raw:
        return ""

    text = raw
    if _TAG_HINT.search(text):
        soup = BeautifulSoup(text, "html.parser")
        for element in soup(["script", "style", "nav", "footer", "header"]):
            element.decompose()
        text = soup.get_text(separator=" ")

    text = html.unescape(text)
    text = _MARKDOWN_LINK.sub(r"\1", text)
    text = _EMPHASIS.sub(r"\2", text)
    text = _MARKDOWN_MARKERS.sub(r"\1", text)
    return re.sub(r"\s+", " ", text).strip()
