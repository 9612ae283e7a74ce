"""
Tests for ReviewSession, the live suggestion list.
"""

from ai_redline import Range, ReviewSession, SuggestionDocument, compute_diff


def make_session():
    doc = SuggestionDocument.from_html(compute_diff("The cat sat.", "The dog sat."))
    return doc, ReviewSession(doc)


class TestReviewSession:
    """Tests for keeping the review list in sync with the document."""

    def test_initial_scan(self):
        """The session scans once when created."""
        _, review = make_session()
        assert review.count == 2
        assert review.scan_count == 1
        assert [s.id for s in review.suggestions] == ["deletion-4", "insertion-7"]

    def test_accept_refreshes(self):
        """Reviewing a suggestion updates the list through the update event."""
        doc, review = make_session()
        result = review.accept(review.get("insertion-7"))
        assert result.total == 2
        assert review.count == 0
        assert review.scan_count == 2
        assert doc.text == "The dog sat."

    def test_reject(self):
        """Rejecting through the session restores the original text."""
        doc, review = make_session()
        review.reject(review.get("deletion-4"))
        assert doc.text == "The cat sat."
        assert review.suggestions == []

    def test_bulk_actions(self):
        """accept_all and reject_all go through the document."""
        doc, review = make_session()
        review.accept_all()
        assert doc.text == "The dog sat."
        assert review.count == 0

        doc, review = make_session()
        review.reject_all()
        assert doc.text == "The cat sat."

    def test_external_edit_refreshes(self):
        """Edits made directly on the document are picked up."""
        doc, review = make_session()
        doc.delete_range(Range(4, 10))
        assert review.count == 0
        assert doc.text == "The  sat."

    def test_select_moves_selection(self):
        """Selecting a suggestion selects its text and re-scans."""
        doc, review = make_session()
        review.select(review.get("insertion-7"))
        assert doc.selection == Range(7, 10)
        assert review.scan_count == 2

    def test_get_unknown(self):
        """Unknown ids return None."""
        _, review = make_session()
        assert review.get("insertion-99") is None

    def test_suggestions_are_a_copy(self):
        """Callers cannot change the session's list."""
        _, review = make_session()
        review.suggestions.clear()
        assert review.count == 2

    def test_close_stops_listening(self):
        """After close, document changes no longer trigger scans."""
        doc, review = make_session()
        review.close()
        doc.accept_all_suggestions()
        assert review.scan_count == 1
        assert review.count == 2
