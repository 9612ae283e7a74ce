"""
Text run and range models for suggestion-tracked documents.

A document is a sequence of blocks, each holding TextRun objects. Runs are
immutable: every edit replaces the affected runs with new ones, so a run
seen before a mutation is never silently changed underneath its holder.
"""

from dataclasses import dataclass, field
from enum import Enum

from ai_redline.constants import DELETION_TAG, INSERTION_TAG
from ai_redline.errors import ConflictingTagsError


class SuggestionTag(Enum):
    """Suggestion tags a text run can carry.

    Attributes:
        INSERTION: Proposed new text
        DELETION: Proposed removal of existing text
    """

    INSERTION = INSERTION_TAG
    DELETION = DELETION_TAG

    @property
    def other(self) -> "SuggestionTag":
        """The opposite tag (the counterpart of a paired replacement)."""
        if self is SuggestionTag.INSERTION:
            return SuggestionTag.DELETION
        return SuggestionTag.INSERTION

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Range:
    """A half-open span [start, end) over the flattened document text.

    Positions are only meaningful against the document snapshot they were
    computed from.

    Attributes:
        start: First offset covered
        end: Offset one past the last covered character
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid range: start={self.start}, end={self.end}")

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"

    @property
    def is_empty(self) -> bool:
        """True if the range covers no characters."""
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Check if a character offset falls inside the range."""
        return self.start <= offset < self.end

    def touches(self, offset: int) -> bool:
        """Check if an offset lies inside the range or on one of its edges."""
        return self.start <= offset <= self.end

    def overlaps(self, other: "Range") -> bool:
        """Check if two ranges share at least one character."""
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class TextRun:
    """A contiguous span of characters sharing tags and formatting.

    Attributes:
        text: The characters in the run
        tags: Suggestion tags on the run (at most one)
        marks: Inline formatting element names, outermost first

    Raises:
        ConflictingTagsError: If both suggestion tags are given

    Example:
        >>> run = TextRun("new", frozenset({SuggestionTag.INSERTION}))
        >>> run.tag
        <SuggestionTag.INSERTION: 'insertion'>
    """

    text: str
    tags: frozenset[SuggestionTag] = field(default_factory=frozenset)
    marks: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable of tags but store a frozenset
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))
        if len(self.tags) > 1:
            raise ConflictingTagsError(self.text, self.tags)

    @classmethod
    def tagged(cls, text: str, tag: SuggestionTag | None, marks: tuple[str, ...] = ()) -> "TextRun":
        """Create a run with a single optional tag."""
        return cls(text, frozenset({tag}) if tag else frozenset(), marks)

    @property
    def tag(self) -> SuggestionTag | None:
        """The run's suggestion tag, or None for plain text."""
        for tag in self.tags:
            return tag
        return None

    def has_tag(self, tag: SuggestionTag) -> bool:
        """Check if the run carries a tag."""
        return tag in self.tags

    def with_text(self, text: str) -> "TextRun":
        """Return a run with the same tags and marks but different text."""
        return TextRun(text, self.tags, self.marks)

    def with_tag(self, tag: SuggestionTag) -> "TextRun":
        """Return a copy tagged with tag, dropping the opposite tag."""
        return TextRun(self.text, frozenset({tag}), self.marks)

    def without_tag(self, tag: SuggestionTag) -> "TextRun":
        """Return a copy with tag removed."""
        return TextRun(self.text, self.tags - {tag}, self.marks)

    def can_merge(self, other: "TextRun") -> bool:
        """Check if other may be concatenated onto this run."""
        return self.tags == other.tags and self.marks == other.marks

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class LeafRun:
    """A text run resolved against a document snapshot.

    Attributes:
        text: The characters in the run
        tags: Suggestion tags on the run
        marks: Inline formatting element names
        start: Offset of the first character in the flattened text
        end: Offset one past the last character
        block_index: Index of the block holding the run
    """

    text: str
    tags: frozenset[SuggestionTag]
    marks: tuple[str, ...]
    start: int
    end: int
    block_index: int

    @property
    def tag(self) -> SuggestionTag | None:
        """The run's suggestion tag, or None for plain text."""
        for tag in self.tags:
            return tag
        return None
