"""
Suggestion scanning: coalescing tagged text runs into reviewable suggestions.

The scan is a pure read. It is repeated after every document change rather
than patched incrementally, because offsets from an earlier scan are
meaningless once the document has been edited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models.run import Range, SuggestionTag
from .models.suggestion import Suggestion

if TYPE_CHECKING:
    from .document import SuggestionDocument

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    """An open suggestion being extended run by run."""

    tag: SuggestionTag
    start: int
    end: int
    text: str

    def to_suggestion(self) -> Suggestion:
        return Suggestion.create(self.tag, self.text, Range(self.start, self.end))


def scan_suggestions(document: SuggestionDocument) -> list[Suggestion]:
    """Collect the suggestions of a document in document order.

    Walks the leaf runs left to right. A tagged run extends the open
    accumulator of its type when that accumulator ends exactly where the run
    starts; otherwise the open accumulator is emitted and a new one starts.
    Untagged runs close whatever is open.

    Args:
        document: The document to scan

    Returns:
        Suggestions sorted by start offset; no two neighbours share a type
        and touch

    Example:
        >>> [s.text for s in scan_suggestions(doc)]
        ['old', 'new']
    """
    found: list[Suggestion] = []
    open_by_type: dict[SuggestionTag, _Accumulator] = {}

    def close_all() -> None:
        for acc in sorted(open_by_type.values(), key=lambda a: a.start):
            found.append(acc.to_suggestion())
        open_by_type.clear()

    for run in document.leaf_runs():
        tag = run.tag
        if tag is None:
            close_all()
            continue

        acc = open_by_type.get(tag)
        if acc is not None and acc.end == run.start:
            acc.text += run.text
            acc.end = run.end
            continue

        close_all()
        open_by_type[tag] = _Accumulator(tag, run.start, run.end, run.text)

    close_all()
    logger.debug("Scanned %d suggestions", len(found))
    return found
