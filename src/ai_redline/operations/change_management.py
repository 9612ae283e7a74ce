"""Change management operations for suggestions.

This module provides the ChangeManagement class for accepting and rejecting
suggestions in a SuggestionDocument.

A replacement is stored as two independent suggestions, a deletion of the
old text touching an insertion of the new text. Reviewing the insertion (or
rejecting the deletion) resolves the touching counterpart in the same
transaction. Accepting a deletion only removes its own text; a touching
insertion stays pending and is reviewed on its own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..adjacency import find_adjacent_ranges
from ..models.run import Range, SuggestionTag
from ..models.suggestion import Suggestion
from ..results import AcceptResult, RejectResult
from ..scanner import scan_suggestions

if TYPE_CHECKING:
    from ..document import SuggestionDocument

logger = logging.getLogger(__name__)

INSERTION = SuggestionTag.INSERTION
DELETION = SuggestionTag.DELETION


def _descending(ranges: list[Range]) -> list[Range]:
    """Order ranges from the highest start to the lowest."""
    return sorted(ranges, key=lambda r: r.start, reverse=True)


class ChangeManagement:
    """Handles accepting and rejecting suggestions.

    This class extracts change management operations from the document class
    to keep the document model free of review policy.

    Attributes:
        _document: Reference to the parent SuggestionDocument instance
    """

    def __init__(self, document: SuggestionDocument) -> None:
        """Initialize the ChangeManagement operations.

        Args:
            document: The parent SuggestionDocument instance
        """
        self._document = document

    # Helper methods

    def is_current(self, suggestion: Suggestion) -> bool:
        """Check that a suggestion still describes the document.

        A suggestion is current when its whole range still carries its tag,
        that range is still maximal, and its text is unchanged.

        Args:
            suggestion: A suggestion from an earlier scan

        Returns:
            False for stale suggestions (already resolved or edited over)
        """
        document = self._document
        range = suggestion.range
        if not document.is_tagged(range, suggestion.type):
            return False
        if document.find_tagged_range_touching(range.start, suggestion.type) != range:
            return False
        return document.text_between(range) == suggestion.text

    def _adjacent(self, range: Range, target: SuggestionTag) -> list[Range]:
        return find_adjacent_ranges(self._document, range, target)

    def suggestion_at(self, offset: int) -> Suggestion | None:
        """Get the suggestion under an offset, preferring insertions.

        Args:
            offset: Flattened text offset (e.g. the cursor)

        Returns:
            The suggestion, or None if no tagged text touches offset
        """
        for tag in (INSERTION, DELETION):
            range = self._document.find_tagged_range_touching(offset, tag)
            if range is not None:
                return Suggestion.create(tag, self._document.text_between(range), range)
        return None

    def _find_by_id(self, suggestion_id: str) -> Suggestion | None:
        for suggestion in scan_suggestions(self._document):
            if suggestion.id == suggestion_id:
                return suggestion
        logger.debug("No suggestion with id %s; nothing to do", suggestion_id)
        return None

    # Accept/Reject one suggestion

    def accept(self, suggestion: Suggestion) -> AcceptResult:
        """Accept a single suggestion.

        For insertions: keeps the text, removes the insertion tag, and deletes
        any touching deletion (the old text being replaced).
        For deletions: removes the deleted text.

        Args:
            suggestion: A suggestion from the current scan

        Returns:
            AcceptResult; all zero if the suggestion was stale
        """
        result = AcceptResult()
        if not self.is_current(suggestion):
            logger.debug("Ignoring stale suggestion %s", suggestion.id)
            return result

        tr = self._document.transaction()
        if suggestion.is_insertion:
            tr.remove_tag(suggestion.range, INSERTION)
            result.insertions = 1
            for range in _descending(self._adjacent(suggestion.range, DELETION)):
                tr.delete(range)
                result.deletions += 1
        else:
            tr.delete(suggestion.range)
            result.deletions = 1

        tr.commit()
        logger.debug("Accepted %s: %s", suggestion.id, result)
        return result

    def reject(self, suggestion: Suggestion) -> RejectResult:
        """Reject a single suggestion.

        For insertions: deletes the proposed text and restores any touching
        deletion.
        For deletions: restores the text and deletes any touching insertion
        (the proposed replacement).

        Args:
            suggestion: A suggestion from the current scan

        Returns:
            RejectResult; all zero if the suggestion was stale
        """
        result = RejectResult()
        if not self.is_current(suggestion):
            logger.debug("Ignoring stale suggestion %s", suggestion.id)
            return result

        tr = self._document.transaction()
        if suggestion.is_insertion:
            tr.delete(suggestion.range)
            result.insertions = 1
            for range in self._adjacent(suggestion.range, DELETION):
                tr.remove_tag(range, DELETION)
                result.deletions += 1
        else:
            tr.remove_tag(suggestion.range, DELETION)
            result.deletions = 1
            for range in _descending(self._adjacent(suggestion.range, INSERTION)):
                tr.delete(range)
                result.insertions += 1

        tr.commit()
        logger.debug("Rejected %s: %s", suggestion.id, result)
        return result

    # Accept/Reject all suggestions

    def accept_all(self) -> AcceptResult:
        """Accept every suggestion in one transaction.

        All ranges are resolved against the current snapshot before anything
        changes: insertion ranges lose their tag, deletion ranges (own and
        paired) are deleted from the last to the first.

        Returns:
            AcceptResult with the number of ranges resolved
        """
        kept: list[Range] = []
        deleted: list[Range] = []

        for suggestion in scan_suggestions(self._document):
            if suggestion.is_insertion:
                kept.append(suggestion.range)
                for range in self._adjacent(suggestion.range, DELETION):
                    if range not in deleted:
                        deleted.append(range)
            elif suggestion.range not in deleted:
                deleted.append(suggestion.range)

        tr = self._document.transaction()
        for range in kept:
            tr.remove_tag(range, INSERTION)
        for range in _descending(deleted):
            tr.delete(range)
        tr.commit()

        result = AcceptResult(insertions=len(kept), deletions=len(deleted))
        logger.debug("Accept all: %s", result)
        return result

    def reject_all(self) -> RejectResult:
        """Reject every suggestion in one transaction.

        Insertion ranges (own and paired) are deleted from the last to the
        first; deletion ranges lose their tag and their text is restored.

        Returns:
            RejectResult with the number of ranges resolved
        """
        discarded: list[Range] = []
        restored: list[Range] = []

        for suggestion in scan_suggestions(self._document):
            if suggestion.is_insertion:
                if suggestion.range not in discarded:
                    discarded.append(suggestion.range)
                for range in self._adjacent(suggestion.range, DELETION):
                    if range not in restored:
                        restored.append(range)
            else:
                if suggestion.range not in restored:
                    restored.append(suggestion.range)
                for range in self._adjacent(suggestion.range, INSERTION):
                    if range not in discarded:
                        discarded.append(range)

        tr = self._document.transaction()
        for range in restored:
            tr.remove_tag(range, DELETION)
        for range in _descending(discarded):
            tr.delete(range)
        tr.commit()

        result = RejectResult(insertions=len(discarded), deletions=len(restored))
        logger.debug("Reject all: %s", result)
        return result

    # Accept/Reject by id or position

    def accept_by_id(self, suggestion_id: str) -> AcceptResult:
        """Accept the suggestion with an id from the current scan (no-op if absent)."""
        suggestion = self._find_by_id(suggestion_id)
        return self.accept(suggestion) if suggestion else AcceptResult()

    def reject_by_id(self, suggestion_id: str) -> RejectResult:
        """Reject the suggestion with an id from the current scan (no-op if absent)."""
        suggestion = self._find_by_id(suggestion_id)
        return self.reject(suggestion) if suggestion else RejectResult()

    def accept_at(self, offset: int) -> AcceptResult:
        """Accept the suggestion under an offset."""
        suggestion = self.suggestion_at(offset)
        return self.accept(suggestion) if suggestion else AcceptResult()

    def reject_at(self, offset: int) -> RejectResult:
        """Reject the suggestion under an offset."""
        suggestion = self.suggestion_at(offset)
        return self.reject(suggestion) if suggestion else RejectResult()

    def accept_selection(self) -> AcceptResult:
        """Accept the suggestion under the selection anchor."""
        return self.accept_at(self._document.selection.start)

    def reject_selection(self) -> RejectResult:
        """Reject the suggestion under the selection anchor."""
        return self.reject_at(self._document.selection.start)
