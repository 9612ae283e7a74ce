"""
Suggestion model: a reviewable, coalesced insertion or deletion.

Suggestions are derived views over a document snapshot. They are rebuilt by
the scanner after every change and must not be kept across mutations; the
id is only unique within one scan.
"""

from dataclasses import dataclass

from ai_redline.models.run import Range, SuggestionTag


@dataclass(frozen=True)
class Suggestion:
    """A proposed edit made of one or more adjacent same-tag text runs.

    Attributes:
        id: Tag name plus starting offset, e.g. "insertion-12"
        type: Whether the suggestion inserts or deletes text
        text: Concatenated text of the constituent runs
        range: Span covered in the flattened text

    Example:
        >>> for s in doc.suggestions:
        ...     print(f"{s.id}: {s.type.value} {s.text!r}")
    """

    id: str
    type: SuggestionTag
    text: str
    range: Range

    @classmethod
    def create(cls, tag: SuggestionTag, text: str, range: Range) -> "Suggestion":
        """Create a suggestion with its id derived from tag and start."""
        return cls(id=make_suggestion_id(tag, range.start), type=tag, text=text, range=range)

    @property
    def start(self) -> int:
        """Offset where the suggestion begins."""
        return self.range.start

    @property
    def end(self) -> int:
        """Offset one past the suggestion's last character."""
        return self.range.end

    @property
    def is_insertion(self) -> bool:
        """Check if this suggestion proposes new text."""
        return self.type is SuggestionTag.INSERTION

    @property
    def is_deletion(self) -> bool:
        """Check if this suggestion proposes removing text."""
        return self.type is SuggestionTag.DELETION

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<Suggestion id={self.id} range={self.range}: {text_preview!r}>"


def make_suggestion_id(tag: SuggestionTag, start: int) -> str:
    """Build the scan-local id of a suggestion."""
    return f"{tag.value}-{start}"
