"""Tests for snippet cleaning."""

from __future__ import annotations

from opportunity_scout.tools.html_cleaner import clean_snippet


class TestCleanSnippet:
    """Test suite for clean_snippet."""

    def test_empty(self) -> None:
        assert clean_snippet(None) == ""
        assert clean_snippet("") == ""

    def test_plain_text_whitespace(self) -> None:
        assert clean_snippet("  SDE   Intern\n\nBangalore ") == "SDE Intern Bangalore"

    def test_html_is_flattened(self) -> None:
        raw = "<div><script>track()</script><h2>SDE Intern</h2><p>Python &amp; SQL</p></div>"
        assert clean_snippet(raw) == "SDE Intern Python & SQL"

    def test_entities_without_tags(self) -> None:
        assert clean_snippet("R&amp;D intern") == "R&D intern"

    def test_markdown(self) -> None:
        raw = "## Role\n**SDE Intern** at [Acme](https://acme.dev) - apply"
        assert clean_snippet(raw) == "Role SDE Intern at Acme - apply"
