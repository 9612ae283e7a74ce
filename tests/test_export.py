"""
Tests for resolved views and suggestion reports.
"""

import json

from ai_redline import (
    SuggestionDocument,
    accepted_text,
    compute_diff,
    export_suggestions_json,
    export_suggestions_markdown,
    rejected_text,
    strip_suggestions,
)
from ai_redline.export import accepted_html, export_suggestions

TRACKED = (
    '<p>The <span class="suggestion-deletion">cat</span>'
    '<span class="suggestion-insertion">dog</span> sat.</p>'
)


class TestResolvedViews:
    """Tests for the accepted and rejected views."""

    def test_accepted_and_rejected_text(self):
        """Each view drops one tag's text and keeps the other's."""
        doc = SuggestionDocument.from_html(TRACKED + "<p>Hello <ins>big </ins>world</p>")
        assert accepted_text(doc) == "The dog sat.\nHello big world"
        assert rejected_text(doc) == "The cat sat.\nHello world"

    def test_views_do_not_modify_document(self):
        """Computing a view leaves the suggestions in place."""
        doc = SuggestionDocument.from_html(TRACKED)
        accepted_text(doc)
        rejected_text(doc)
        assert len(doc.suggestions) == 2
        assert doc.version == 0

    def test_accepted_html(self):
        """The accepted view renders without suggestion markup."""
        doc = SuggestionDocument.from_html(TRACKED)
        assert accepted_html(doc) == "<p>The dog sat.</p>"

    def test_strip_suggestions(self):
        """Deleted text is dropped and inserted text unwrapped."""
        assert strip_suggestions(TRACKED) == "<p>The dog sat.</p>"

    def test_strip_keeps_formatting(self):
        """Formatting inside an insertion survives stripping."""
        markup = "<p><ins><em>new</em></ins><del>old</del></p>"
        assert strip_suggestions(markup) == "<p><em>new</em></p>"


class TestExportSuggestions:
    """Tests for structured suggestion export."""

    def test_context(self):
        """Context is taken from the suggestion's own block."""
        doc = SuggestionDocument.from_html(
            "<p>First paragraph.</p><p>Say <ins>hello</ins> there</p>"
        )
        exported = export_suggestions(doc, context_chars=3)
        assert len(exported) == 1
        context = exported[0].context
        assert context.before == "ay "
        assert context.after == " th"
        assert context.block_text == "Say hello there"
        assert context.block_index == 1

    def test_context_stops_at_block_edges(self):
        """Context never reaches into neighbouring blocks."""
        doc = SuggestionDocument.from_html("<p>ab</p><p><del>cd</del></p><p>ef</p>")
        context = export_suggestions(doc)[0].context
        assert context.before == ""
        assert context.after == ""

    def test_context_with_line_break(self):
        """A <br> inside a block does not start a new block."""
        doc = SuggestionDocument.from_html("<p>a<br>b <ins>c</ins></p>")
        context = export_suggestions(doc)[0].context
        assert context.block_index == 0
        assert context.block_text == "a\nb c"
        assert context.before == "a\nb "

    def test_json(self):
        """JSON export lists suggestions with counts."""
        doc = SuggestionDocument.from_html(TRACKED)
        data = json.loads(export_suggestions_json(doc))
        assert data["total"] == 2
        assert data["insertions"] == 1
        assert data["deletions"] == 1
        first = data["suggestions"][0]
        assert first["id"] == "deletion-4"
        assert first["type"] == "deletion"
        assert (first["start"], first["end"]) == (4, 7)
        assert first["context"]["before"] == "The "
        assert first["context"]["after"] == "dog sat."

    def test_json_without_context(self):
        """Context can be left out."""
        doc = SuggestionDocument.from_html(TRACKED)
        data = json.loads(export_suggestions_json(doc, include_context=False))
        assert "context" not in data["suggestions"][0]

    def test_markdown(self):
        """Markdown export uses CriticMarkup for each change."""
        doc = SuggestionDocument.from_html(TRACKED)
        report = export_suggestions_markdown(doc)
        assert report.startswith("# Pending Suggestions\n")
        assert "**2 suggestions** (1 insertions, 1 deletions)" in report
        assert "{--cat--}" in report
        assert "{++dog++}" in report
        assert "`insertion-7`" in report

    def test_markdown_empty(self):
        """A clean document reports no pending changes."""
        doc = SuggestionDocument.from_html(compute_diff("same", "same"))
        assert export_suggestions_markdown(doc) == "# Pending Suggestions\n\nNo pending changes.\n"
