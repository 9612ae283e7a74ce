"""
Custom exception classes for the ai_redline package.

Stale suggestion references are deliberately not represented here: accepting
or rejecting a suggestion that no longer exists is a no-op, and callers are
expected to re-scan the document.
"""


class RedlineError(Exception):
    """Base exception for all ai_redline errors."""

    pass


class ConflictingTagsError(RedlineError, ValueError):
    """Raised when a text run would carry both suggestion tags.

    Attributes:
        text: The text of the offending run
        tags: The tags that were requested
    """

    def __init__(self, text: str, tags: object) -> None:
        self.text = text
        self.tags = tags
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the run."""
        preview = self.text[:40] + "..." if len(self.text) > 40 else self.text
        return (
            f"A text run cannot be both an insertion and a deletion: {preview!r}\n\n"
            "Split the text into separate runs, one per suggestion type."
        )


class OverlappingEditError(RedlineError):
    """Raised when a transaction holds replacements whose ranges overlap.

    Pure deletions may overlap (they are merged); replacements that insert
    content cannot be ordered safely when they overlap.

    Attributes:
        first: The first overlapping range
        second: The second overlapping range
    """

    def __init__(self, first: object, second: object) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Replacement ranges overlap: {first} and {second}")


class SuggestionNotFoundError(RedlineError):
    """Raised when a suggestion id cannot be resolved in the current document.

    Attributes:
        suggestion_id: The id that was looked up
        available_ids: Ids present in the document at lookup time
    """

    def __init__(self, suggestion_id: str, available_ids: list[str] | None = None) -> None:
        self.suggestion_id = suggestion_id
        self.available_ids = available_ids or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message with the ids that do exist."""
        msg = f"Suggestion '{self.suggestion_id}' not found"
        if self.available_ids:
            msg += "\n\nAvailable suggestions: " + ", ".join(self.available_ids)
        else:
            msg += "\n\nThe document has no pending suggestions"
        return msg


class ConfigurationError(RedlineError):
    """Raised when editor configuration is missing or invalid.

    Attributes:
        errors: Individual problems found (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class EditProposalError(RedlineError):
    """Raised when the language model fails to produce a usable edit.

    Attributes:
        instruction: The instruction that was sent
        reason: Explanation of the failure
    """

    def __init__(self, instruction: str, reason: str | None = None) -> None:
        self.instruction = instruction
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message with the failure reason."""
        msg = f"Could not get an edit for instruction '{self.instruction}'"
        if self.reason:
            msg += f": {self.reason}"
        return msg
