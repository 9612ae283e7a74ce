"""
In-memory document model for suggestion-tracked editing.

A SuggestionDocument is an ordered list of blocks, each holding text runs
that may carry an insertion or deletion tag. Every position used by the rest
of the package is an offset into the flattened text, where blocks are joined
by a one-character separator.

All mutations go through a Transaction: ranges are recorded against one
snapshot, tag changes are applied first (they never move text), then text
replacements are applied from the highest offset to the lowest so that no
edit shifts a range that is still waiting to be applied.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .constants import BLOCK_SEPARATOR
from .errors import OverlappingEditError, SuggestionNotFoundError
from .html_io import parse_html, render_html
from .models.block import Block
from .models.run import LeafRun, Range, SuggestionTag, TextRun
from .operations.change_management import ChangeManagement
from .results import AcceptResult, RejectResult
from .scanner import scan_suggestions

if TYPE_CHECKING:
    from .models.suggestion import Suggestion

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update"
SELECTION_EVENT = "selection_update"

Listener = Callable[["SuggestionDocument"], None]


def split_runs(runs: list[TextRun], offset: int) -> tuple[list[TextRun], list[TextRun]]:
    """Split a run list at a character offset.

    Args:
        runs: Runs of one block
        offset: Offset within the block

    Returns:
        Tuple of (runs before offset, runs from offset on)
    """
    before: list[TextRun] = []
    after: list[TextRun] = []
    pos = 0
    for run in runs:
        end = pos + len(run.text)
        if end <= offset:
            before.append(run)
        elif pos >= offset:
            after.append(run)
        else:
            cut = offset - pos
            before.append(run.with_text(run.text[:cut]))
            after.append(run.with_text(run.text[cut:]))
        pos = end
    return before, after


def normalize_runs(runs: list[TextRun]) -> list[TextRun]:
    """Merge neighbouring runs with equal tags and marks, dropping empty runs."""
    merged: list[TextRun] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].can_merge(run):
            merged[-1] = merged[-1].with_text(merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged


class Transaction:
    """A batch of edits resolved against one document snapshot.

    Steps are recorded with offsets of the document as it was when the
    transaction was created. Nothing changes until commit().

    Example:
        >>> with doc.transaction() as tr:
        ...     tr.remove_tag(Range(4, 7), SuggestionTag.INSERTION)
        ...     tr.delete(Range(0, 3))
    """

    def __init__(self, document: SuggestionDocument) -> None:
        self._document = document
        self._version = document.version
        self._length = document.length
        self._tag_steps: list[tuple[Range, SuggestionTag, bool]] = []
        self._replacements: list[tuple[Range, list[TextRun]]] = []
        self._done = False

    @property
    def is_empty(self) -> bool:
        """True if no step has been recorded."""
        return not self._tag_steps and not self._replacements

    def _check(self, range: Range) -> bool:
        if range.end > self._length:
            logger.debug("Skipping range %s outside document of length %d", range, self._length)
            return False
        return True

    def remove_tag(self, range: Range, tag: SuggestionTag) -> Transaction:
        """Record removal of tag over range (text is kept)."""
        if self._check(range):
            self._tag_steps.append((range, tag, False))
        return self

    def add_tag(self, range: Range, tag: SuggestionTag) -> Transaction:
        """Record tagging of range, replacing the opposite tag."""
        if self._check(range):
            self._tag_steps.append((range, tag, True))
        return self

    def delete(self, range: Range) -> Transaction:
        """Record deletion of the text over range."""
        return self.replace(range, [])

    def replace(self, range: Range, content: str | list[TextRun]) -> Transaction:
        """Record replacement of range with new content.

        Args:
            range: Span to replace
            content: Plain text (takes the formatting found at range.start)
                or a list of runs
        """
        if not self._check(range):
            return self
        if isinstance(content, str):
            runs = [TextRun(content, marks=self._document.marks_at(range.start))] if content else []
        else:
            runs = list(content)
        self._replacements.append((range, runs))
        return self

    def _ordered_replacements(self) -> list[tuple[Range, list[TextRun]]]:
        """Merge deletions and sort all replacements from last to first."""
        deletions = sorted((r for r, runs in self._replacements if not runs), key=lambda r: r.start)
        merged: list[Range] = []
        for range in deletions:
            if merged and range.start <= merged[-1].end:
                last = merged[-1]
                merged[-1] = Range(last.start, max(last.end, range.end))
            else:
                merged.append(range)

        with_content = [(r, runs) for r, runs in self._replacements if runs]
        for i, (first, _) in enumerate(with_content):
            for second in [r for r, _ in with_content[i + 1 :]] + merged:
                if first.overlaps(second):
                    raise OverlappingEditError(first, second)

        ordered = [(r, []) for r in merged] + with_content
        ordered.sort(key=lambda item: item[0].start, reverse=True)
        return ordered

    def commit(self) -> bool:
        """Apply all recorded steps as one change.

        Returns:
            True if the document changed, False for an empty or stale transaction

        Raises:
            OverlappingEditError: If replacements with content overlap
        """
        if self._done:
            raise RuntimeError("Transaction already committed or discarded")
        self._done = True

        if self.is_empty:
            return False
        if self._document.version != self._version:
            logger.warning(
                "Discarding transaction built against version %d (document is at %d)",
                self._version,
                self._document.version,
            )
            return False

        ordered = self._ordered_replacements()

        for range, tag, add in self._tag_steps:
            self._document._apply_tag(range, tag, add)
        for range, runs in ordered:
            self._document._splice(range, runs)

        logger.debug(
            "Committed transaction: %d tag steps, %d replacements",
            len(self._tag_steps),
            len(ordered),
        )
        self._document._finish_change()
        return True

    def discard(self) -> None:
        """Drop all recorded steps."""
        self._done = True

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.discard()


class SuggestionDocument:
    """A rich-text document whose runs may carry suggestion tags.

    Example:
        >>> doc = SuggestionDocument.from_html(
        ...     '<p>The <span class="suggestion-deletion">cat</span>'
        ...     '<span class="suggestion-insertion">dog</span> sat.</p>'
        ... )
        >>> [s.id for s in doc.suggestions]
        ['deletion-4', 'insertion-7']
        >>> result = doc.accept_all_suggestions()
        >>> doc.text
        'The dog sat.'
    """

    def __init__(self, blocks: list[Block] | None = None) -> None:
        self._blocks: list[Block] = list(blocks) if blocks else [Block()]
        self._listeners: dict[str, list[Listener]] = {UPDATE_EVENT: [], SELECTION_EVENT: []}
        self._selection = Range(0, 0)
        self.version = 0

    @classmethod
    def from_html(cls, markup: str) -> SuggestionDocument:
        """Create a document from editor HTML."""
        return cls(parse_html(markup))

    @classmethod
    def from_runs(cls, runs: list[TextRun], tag: str = "p") -> SuggestionDocument:
        """Create a single-block document from runs (kept exactly as given)."""
        return cls([Block(tag=tag, runs=list(runs))])

    @classmethod
    def from_text(cls, text: str) -> SuggestionDocument:
        """Create an untagged document, one paragraph per line."""
        return cls([Block(runs=[TextRun(line)] if line else []) for line in text.split("\n")])

    # Content access

    @property
    def blocks(self) -> list[Block]:
        """Copies of the document's blocks."""
        return [block.copy() for block in self._blocks]

    @property
    def block_texts(self) -> list[str]:
        """Plain text of each block."""
        return [block.text for block in self._blocks]

    @property
    def text(self) -> str:
        """The flattened document text."""
        return BLOCK_SEPARATOR.join(self.block_texts)

    def get_flattened_text(self) -> str:
        """Get the flattened document text."""
        return self.text

    @property
    def length(self) -> int:
        """Length of the flattened text."""
        return sum(len(block) for block in self._blocks) + len(self._blocks) - 1

    def __len__(self) -> int:
        return self.length

    def text_between(self, range: Range) -> str:
        """Get the flattened text covered by a range."""
        return self.text[range.start : range.end]

    def to_html(self) -> str:
        """Serialize the document, suggestion markup included."""
        return render_html(self._blocks)

    def set_content(self, markup: str) -> None:
        """Replace the whole document with parsed HTML."""
        self._blocks = parse_html(markup)
        logger.debug("Content replaced with %d blocks", len(self._blocks))
        self._finish_change(normalize=False)

    def set_blocks(self, blocks: list[Block]) -> None:
        """Replace the whole document with prepared blocks."""
        self._blocks = [block.copy() for block in blocks] or [Block()]
        self._finish_change()

    def _block_spans(self) -> list[tuple[int, int]]:
        """Flattened (start, end) of each block's content."""
        spans = []
        start = 0
        for block in self._blocks:
            end = start + len(block)
            spans.append((start, end))
            start = end + len(BLOCK_SEPARATOR)
        return spans

    def _locate(self, offset: int) -> tuple[int, int]:
        """Resolve an offset to (block index, offset within block)."""
        for index, (start, end) in enumerate(self._block_spans()):
            if offset <= end:
                return index, max(0, offset - start)
        last = len(self._blocks) - 1
        return last, len(self._blocks[last])

    def block_span(self, offset: int) -> Range:
        """Flattened range of the content of the block holding offset."""
        index, _ = self._locate(offset)
        start, end = self._block_spans()[index]
        return Range(start, end)

    def leaf_runs(self) -> list[LeafRun]:
        """All text runs in document order with their flattened offsets."""
        result = []
        for index, (block, (start, _)) in enumerate(zip(self._blocks, self._block_spans())):
            pos = start
            for run in block.runs:
                if not run.text:
                    continue
                result.append(
                    LeafRun(run.text, run.tags, run.marks, pos, pos + len(run.text), index)
                )
                pos += len(run.text)
        return result

    def get_leaf_runs(self) -> list[LeafRun]:
        """Get all text runs in document order."""
        return self.leaf_runs()

    def marks_at(self, offset: int) -> tuple[str, ...]:
        """Inline formatting of the run holding offset (or ending at it)."""
        index, inner = self._locate(offset)
        pos = 0
        marks: tuple[str, ...] = ()
        for run in self._blocks[index].runs:
            if pos <= inner <= pos + len(run.text):
                marks = run.marks
                if inner < pos + len(run.text):
                    break
            pos += len(run.text)
        return marks

    def find_tagged_range_touching(self, offset: int, tag: SuggestionTag) -> Range | None:
        """Find the maximal range tagged with tag that touches an offset.

        At a run boundary the run ending at the offset is preferred when it
        carries the tag; otherwise the run starting at or containing the
        offset is used. The result is extended over neighbouring runs with
        the same tag inside the block.

        Args:
            offset: Flattened text offset
            tag: Suggestion tag to look for

        Returns:
            The tagged range, or None if no such range touches offset
        """
        if offset < 0 or offset > self.length:
            return None

        index, inner = self._locate(offset)
        block_start = self._block_spans()[index][0]
        runs = [run for run in self._blocks[index].runs if run.text]

        bounds = []
        pos = 0
        for run in runs:
            bounds.append((pos, pos + len(run.text)))
            pos += len(run.text)

        chosen = None
        for i, (start, end) in enumerate(bounds):
            if end == inner and runs[i].has_tag(tag):
                chosen = i
                break
        if chosen is None:
            for i, (start, end) in enumerate(bounds):
                if start <= inner < end:
                    if runs[i].has_tag(tag):
                        chosen = i
                    break
        if chosen is None:
            return None

        first = last = chosen
        while first > 0 and runs[first - 1].has_tag(tag):
            first -= 1
        while last < len(runs) - 1 and runs[last + 1].has_tag(tag):
            last += 1
        return Range(block_start + bounds[first][0], block_start + bounds[last][1])

    def is_tagged(self, range: Range, tag: SuggestionTag) -> bool:
        """Check if every character of a non-empty range carries tag."""
        if range.is_empty or range.end > self.length:
            return False
        covered = 0
        for leaf in self.leaf_runs():
            overlap = min(leaf.end, range.end) - max(leaf.start, range.start)
            if overlap > 0:
                if tag not in leaf.tags:
                    return False
                covered += overlap
        return covered == len(range)

    # Mutation

    def transaction(self) -> Transaction:
        """Start a transaction against the current snapshot."""
        return Transaction(self)

    def replace_range(self, range: Range, content: str | list[TextRun]) -> bool:
        """Replace the text over range with new content."""
        return self.transaction().replace(range, content).commit()

    def delete_range(self, range: Range) -> bool:
        """Delete the text over range."""
        return self.transaction().delete(range).commit()

    def remove_tag(self, range: Range, tag: SuggestionTag) -> bool:
        """Remove a suggestion tag over range, keeping the text."""
        return self.transaction().remove_tag(range, tag).commit()

    def add_tag(self, range: Range, tag: SuggestionTag) -> bool:
        """Tag the text over range, replacing the opposite tag."""
        return self.transaction().add_tag(range, tag).commit()

    def _apply_tag(self, range: Range, tag: SuggestionTag, add: bool) -> None:
        for block, (start, end) in zip(self._blocks, self._block_spans()):
            lo = max(range.start, start) - start
            hi = min(range.end, end) - start
            if lo >= hi:
                continue
            before, rest = split_runs(block.runs, lo)
            middle, after = split_runs(rest, hi - lo)
            if add:
                middle = [run.with_tag(tag) for run in middle]
            else:
                middle = [run.without_tag(tag) for run in middle]
            block.runs = before + middle + after

    def _splice(self, range: Range, runs: list[TextRun]) -> None:
        first_index, first_inner = self._locate(range.start)
        last_index, last_inner = self._locate(range.end)
        block = self._blocks[first_index]
        if (
            not runs
            and first_index == last_index
            and (first_inner, last_inner) == (0, len(block))
            and block.suggestion_tag is not None
            and len(self._blocks) > 1
        ):
            # A paragraph added or removed as a whole goes away with its text
            del self._blocks[first_index]
            return
        before, _ = split_runs(block.runs, first_inner)
        _, after = split_runs(self._blocks[last_index].runs, last_inner)
        joined = block.copy(before + list(runs) + after)
        self._blocks[first_index : last_index + 1] = [joined]

    def _finish_change(self, normalize: bool = True) -> None:
        if normalize:
            for block in self._blocks:
                block.runs = normalize_runs(block.runs)
        self.version += 1
        length = self.length
        if self._selection.end > length:
            self._selection = Range(min(self._selection.start, length), length)
        self._emit(UPDATE_EVENT)

    # Notifications and selection

    def on(self, event: str, callback: Listener) -> None:
        """Register a callback for "update" or "selection_update"."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event!r}")
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Listener) -> None:
        """Unregister a callback."""
        if event in self._listeners and callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback(self)

    @property
    def selection(self) -> Range:
        """The current selection (a collapsed range for a plain cursor)."""
        return self._selection

    def set_selection(self, start: int, end: int | None = None) -> None:
        """Move the selection, clamped to the document."""
        length = self.length
        start = min(max(start, 0), length)
        end = start if end is None else min(max(end, start), length)
        self._selection = Range(start, end)
        self._emit(SELECTION_EVENT)

    # Suggestions

    @property
    def suggestions(self) -> list[Suggestion]:
        """Suggestions in document order, scanned fresh on every access."""
        return scan_suggestions(self)

    @property
    def has_suggestions(self) -> bool:
        """Check if any run carries a suggestion tag."""
        return any(run.tags for block in self._blocks for run in block.runs)

    def get_suggestion(self, suggestion_id: str) -> Suggestion:
        """Look up a suggestion of the current scan by id.

        Raises:
            SuggestionNotFoundError: If no current suggestion has the id
        """
        suggestions = self.suggestions
        for suggestion in suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        raise SuggestionNotFoundError(suggestion_id, [s.id for s in suggestions])

    @property
    def _change_mgmt(self) -> ChangeManagement:
        """Get the ChangeManagement instance (lazy initialization)."""
        if not hasattr(self, "_change_mgmt_instance"):
            self._change_mgmt_instance = ChangeManagement(self)
        return self._change_mgmt_instance

    def accept_suggestion(self, suggestion: Suggestion) -> AcceptResult:
        """Accept one suggestion (and its paired counterpart, for insertions)."""
        return self._change_mgmt.accept(suggestion)

    def reject_suggestion(self, suggestion: Suggestion) -> RejectResult:
        """Reject one suggestion (and its paired counterpart)."""
        return self._change_mgmt.reject(suggestion)

    def accept_all_suggestions(self) -> AcceptResult:
        """Accept every suggestion in one transaction."""
        return self._change_mgmt.accept_all()

    def reject_all_suggestions(self) -> RejectResult:
        """Reject every suggestion in one transaction."""
        return self._change_mgmt.reject_all()
