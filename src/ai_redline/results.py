"""
Result classes for suggestion review operations.

Accepting or rejecting a suggestion can resolve more than one tagged range
(a replacement resolves both its insertion and its deletion). These results
count what was actually resolved so callers can tell a no-op from an edit.
"""

from dataclasses import dataclass


@dataclass
class AcceptResult:
    """Result of accepting suggestions.

    Attributes:
        insertions: Number of insertion ranges kept
        deletions: Number of deletion ranges removed
    """

    insertions: int = 0
    deletions: int = 0

    @property
    def total(self) -> int:
        """Total number of ranges resolved."""
        return self.insertions + self.deletions

    def __bool__(self) -> bool:
        return self.total > 0

    def __str__(self) -> str:
        """Get string representation of the result."""
        return f"Accepted {self.insertions} insertions, {self.deletions} deletions"


@dataclass
class RejectResult:
    """Result of rejecting suggestions.

    Attributes:
        insertions: Number of insertion ranges discarded
        deletions: Number of deletion ranges restored
    """

    insertions: int = 0
    deletions: int = 0

    @property
    def total(self) -> int:
        """Total number of ranges resolved."""
        return self.insertions + self.deletions

    def __bool__(self) -> bool:
        return self.total > 0

    def __str__(self) -> str:
        """Get string representation of the result."""
        return f"Rejected {self.insertions} insertions, {self.deletions} deletions"


@dataclass
class DiffStats:
    """Statistics of a computed diff.

    Attributes:
        insertions: Number of inserted segments
        deletions: Number of deleted segments
        inserted_chars: Characters added
        deleted_chars: Characters removed
    """

    insertions: int
    deletions: int
    inserted_chars: int = 0
    deleted_chars: int = 0

    @property
    def total(self) -> int:
        """Total number of changed segments."""
        return self.insertions + self.deletions

    def __str__(self) -> str:
        """Get string representation of the statistics."""
        parts = []
        if self.insertions:
            parts.append(f"{self.insertions} insertion{'s' if self.insertions != 1 else ''}")
        if self.deletions:
            parts.append(f"{self.deletions} deletion{'s' if self.deletions != 1 else ''}")
        if not parts:
            return "No changes"
        return ", ".join(parts)
