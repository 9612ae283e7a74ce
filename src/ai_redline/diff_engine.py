"""
Word-level diffing that produces suggestion markup.

This module turns an old and a new version of some text into tagged segments
(unchanged / inserted / deleted) and renders them as the editor's suggestion
markup.

The key components:
1. Tokenizer - splits text into words, whitespace, and punctuation tokens
2. DiffSegment - a maximal run of tokens with one outcome
3. compute_diff_segments() - token diff between two texts
4. compute_diff() - the same diff rendered as suggestion markup
5. compute_block_diff() - block-aligned diff for multi-paragraph documents

Insertions and deletions are reported independently, never as a single
"replace" primitive. A replaced span yields its deletion immediately followed
by its insertion, and the adjacency resolver pairs them up again when the
suggestion is reviewed.
"""

import html
import logging
import re
from dataclasses import dataclass
from difflib import SequenceMatcher

from .constants import DELETION_CLASS, INSERTION_CLASS
from .models.run import SuggestionTag, TextRun
from .results import DiffStats

logger = logging.getLogger(__name__)

# Tokenizer pattern:
# - \s+ : whitespace runs
# - [\w]+(?:[''\\-][\w]+)* : word tokens, including hyphenated/apostrophe words
#   Apostrophe characters supported: ' (ASCII), ' (U+2019), ' (U+2018)
# - [^\w\s] : single punctuation characters
TOKENIZER_PATTERN = re.compile(r"(\s+|[\w]+(?:['\u2019\u2018\-][\w]+)*|[^\w\s])")


def tokenize(text: str) -> list[str]:
    """Tokenize text into words, whitespace, and punctuation tokens.

    Handles:
    - Whitespace runs preserved as single tokens
    - Hyphenated words as single tokens (e.g., "non-disclosure")
    - Apostrophe words as single tokens (e.g., "party's")
    - Punctuation as individual tokens

    Args:
        text: The text to tokenize

    Returns:
        List of tokens preserving the original text when joined
    """
    return TOKENIZER_PATTERN.findall(text)


@dataclass
class DiffSegment:
    """A maximal run of text sharing one diff outcome.

    Attributes:
        text: The segment's text
        tag: INSERTION, DELETION, or None for unchanged text
    """

    text: str
    tag: SuggestionTag | None = None

    @property
    def is_unchanged(self) -> bool:
        """Check if the segment is common to both texts."""
        return self.tag is None


def _append_segment(segments: list[DiffSegment], text: str, tag: SuggestionTag | None) -> None:
    """Append text, extending the last segment when the outcome matches."""
    if not text:
        return
    if segments and segments[-1].tag is tag:
        segments[-1].text += text
    else:
        segments.append(DiffSegment(text, tag))


def compute_diff_segments(old_text: str, new_text: str) -> list[DiffSegment]:
    """Compute a word-level edit script between two texts.

    Args:
        old_text: The current text
        new_text: The proposed text

    Returns:
        Segments in reading order; for a replaced span the deletion comes
        immediately before the insertion
    """
    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)

    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
    segments: list[DiffSegment] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append_segment(segments, "".join(old_tokens[i1:i2]), None)
            continue
        if tag in ("delete", "replace"):
            _append_segment(segments, "".join(old_tokens[i1:i2]), SuggestionTag.DELETION)
        if tag in ("insert", "replace"):
            _append_segment(segments, "".join(new_tokens[j1:j2]), SuggestionTag.INSERTION)

    return segments


def render_segments(segments: list[DiffSegment]) -> str:
    """Render segments as suggestion markup.

    Args:
        segments: Segments from compute_diff_segments()

    Returns:
        HTML-escaped text with changed segments wrapped in suggestion spans
    """
    parts: list[str] = []
    for segment in segments:
        escaped = html.escape(segment.text, quote=False)
        if segment.tag is SuggestionTag.INSERTION:
            parts.append(f'<span class="{INSERTION_CLASS}">{escaped}</span>')
        elif segment.tag is SuggestionTag.DELETION:
            parts.append(f'<span class="{DELETION_CLASS}">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)


def compute_diff(old_text: str, new_text: str) -> str:
    """Diff two texts and render the result as suggestion markup.

    Args:
        old_text: The current text
        new_text: The proposed text

    Returns:
        Markup where added words are wrapped in suggestion-insertion spans and
        removed words in suggestion-deletion spans. Empty when both inputs
        are empty.

    Example:
        >>> compute_diff("The cat sat.", "The dog sat.")
        'The <span class="suggestion-deletion">cat</span><span class="suggestion-insertion">dog</span> sat.'
    """
    return render_segments(compute_diff_segments(old_text, new_text))


def segments_to_runs(segments: list[DiffSegment], marks: tuple[str, ...] = ()) -> list[TextRun]:
    """Convert diff segments into text runs.

    Args:
        segments: Segments to convert
        marks: Inline formatting applied to every run

    Returns:
        One run per segment
    """
    return [TextRun.tagged(segment.text, segment.tag, marks) for segment in segments]


def original_text(segments: list[DiffSegment]) -> str:
    """Reconstruct the old text (unchanged plus deleted segments)."""
    return "".join(s.text for s in segments if s.tag is not SuggestionTag.INSERTION)


def proposed_text(segments: list[DiffSegment]) -> str:
    """Reconstruct the new text (unchanged plus inserted segments)."""
    return "".join(s.text for s in segments if s.tag is not SuggestionTag.DELETION)


def diff_stats(segments: list[DiffSegment]) -> DiffStats:
    """Count the changed segments and characters of a diff."""
    inserted = [s for s in segments if s.tag is SuggestionTag.INSERTION]
    deleted = [s for s in segments if s.tag is SuggestionTag.DELETION]
    return DiffStats(
        insertions=len(inserted),
        deletions=len(deleted),
        inserted_chars=sum(len(s.text) for s in inserted),
        deleted_chars=sum(len(s.text) for s in deleted),
    )


@dataclass
class BlockDiff:
    """The diff of one output block.

    Attributes:
        segments: Tagged segments of the block
        old_index: Index of the old block it comes from, if any
        new_index: Index of the new block it comes from, if any
    """

    segments: list[DiffSegment]
    old_index: int | None = None
    new_index: int | None = None

    @property
    def is_unchanged(self) -> bool:
        """True if the block is identical in both versions."""
        return all(segment.is_unchanged for segment in self.segments)


def compute_block_diff(old_blocks: list[str], new_blocks: list[str]) -> list[BlockDiff]:
    """Diff two documents block by block.

    Blocks are first aligned by their full text. Replaced blocks are paired in
    order and diffed word by word; blocks without a partner are tagged as a
    whole.

    Args:
        old_blocks: Text of each current block
        new_blocks: Text of each proposed block

    Returns:
        One BlockDiff per output block, in document order
    """
    matcher = SequenceMatcher(None, old_blocks, new_blocks, autojunk=False)
    result: list[BlockDiff] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset in range(i2 - i1):
                text = old_blocks[i1 + offset]
                segments = [DiffSegment(text)] if text else []
                result.append(BlockDiff(segments, i1 + offset, j1 + offset))
            continue

        paired = min(i2 - i1, j2 - j1)
        for offset in range(paired):
            old, new = old_blocks[i1 + offset], new_blocks[j1 + offset]
            result.append(BlockDiff(compute_diff_segments(old, new), i1 + offset, j1 + offset))
        for index in range(i1 + paired, i2):
            old = old_blocks[index]
            segments = [DiffSegment(old, SuggestionTag.DELETION)] if old else []
            result.append(BlockDiff(segments, old_index=index))
        for index in range(j1 + paired, j2):
            new = new_blocks[index]
            segments = [DiffSegment(new, SuggestionTag.INSERTION)] if new else []
            result.append(BlockDiff(segments, new_index=index))

    logger.debug(
        "Block diff: %d old blocks, %d new blocks, %d output blocks",
        len(old_blocks),
        len(new_blocks),
        len(result),
    )
    return result
