"""
Review session: the suggestion list a review panel displays.

A ReviewSession listens to its document and re-scans on every update and
selection change, so the list it holds always matches the current snapshot.
Every review action goes through the document's change management, whose
update notification triggers the re-scan.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .document import SELECTION_EVENT, UPDATE_EVENT
from .results import AcceptResult, RejectResult
from .scanner import scan_suggestions

if TYPE_CHECKING:
    from .document import SuggestionDocument
    from .models.suggestion import Suggestion

logger = logging.getLogger(__name__)


class ReviewSession:
    """Keeps a document's suggestion list current and exposes review actions.

    Example:
        >>> review = ReviewSession(doc)
        >>> review.count
        2
        >>> result = review.accept(review.suggestions[-1])
        >>> review.count
        0
    """

    def __init__(self, document: SuggestionDocument) -> None:
        self._document = document
        self._suggestions: list[Suggestion] = []
        self.scan_count = 0
        document.on(UPDATE_EVENT, self._on_change)
        document.on(SELECTION_EVENT, self._on_change)
        self.refresh()

    def _on_change(self, document: SuggestionDocument) -> None:
        self.refresh()

    def refresh(self) -> list[Suggestion]:
        """Re-scan the document and replace the suggestion list."""
        self._suggestions = scan_suggestions(self._document)
        self.scan_count += 1
        return self.suggestions

    @property
    def document(self) -> SuggestionDocument:
        """The document under review."""
        return self._document

    @property
    def suggestions(self) -> list[Suggestion]:
        """Suggestions from the latest scan."""
        return list(self._suggestions)

    @property
    def count(self) -> int:
        """Number of pending suggestions."""
        return len(self._suggestions)

    def get(self, suggestion_id: str) -> Suggestion | None:
        """Look up a suggestion of the latest scan by id."""
        for suggestion in self._suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def select(self, suggestion: Suggestion) -> None:
        """Select a suggestion's text in the document."""
        self._document.set_selection(suggestion.start, suggestion.end)

    def accept(self, suggestion: Suggestion) -> AcceptResult:
        """Accept one suggestion."""
        return self._document.accept_suggestion(suggestion)

    def reject(self, suggestion: Suggestion) -> RejectResult:
        """Reject one suggestion."""
        return self._document.reject_suggestion(suggestion)

    def accept_all(self) -> AcceptResult:
        """Accept every pending suggestion."""
        return self._document.accept_all_suggestions()

    def reject_all(self) -> RejectResult:
        """Reject every pending suggestion."""
        return self._document.reject_all_suggestions()

    def close(self) -> None:
        """Stop listening to the document."""
        self._document.off(UPDATE_EVENT, self._on_change)
        self._document.off(SELECTION_EVENT, self._on_change)
        logger.debug("Review session closed after %d scans", self.scan_count)
