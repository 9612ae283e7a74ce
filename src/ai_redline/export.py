"""
Export functionality for suggestions.

This module provides change reports (JSON and Markdown) for the pending
suggestions of a document, and the two resolved views of a document:
everything accepted and everything rejected.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from .constants import BLOCK_SEPARATOR
from .html_io import parse_html, render_html
from .models.block import Block
from .models.run import SuggestionTag
from .scanner import scan_suggestions

if TYPE_CHECKING:
    from .document import SuggestionDocument
    from .models.suggestion import Suggestion


# Resolved views


def _resolve_blocks(blocks: list[Block], dropped: SuggestionTag) -> list[Block]:
    """Drop runs tagged with dropped and untag everything else."""
    resolved = []
    for block in blocks:
        runs = [run.without_tag(dropped.other) for run in block.runs if not run.has_tag(dropped)]
        resolved.append(block.copy(runs))
    return resolved


def accepted_blocks(blocks: list[Block]) -> list[Block]:
    """Blocks as they read with every suggestion accepted."""
    return _resolve_blocks(blocks, SuggestionTag.DELETION)


def rejected_blocks(blocks: list[Block]) -> list[Block]:
    """Blocks as they read with every suggestion rejected."""
    return _resolve_blocks(blocks, SuggestionTag.INSERTION)


def accepted_text(document: SuggestionDocument) -> str:
    """The document's text with every suggestion accepted."""
    return BLOCK_SEPARATOR.join(block.text for block in accepted_blocks(document.blocks))


def rejected_text(document: SuggestionDocument) -> str:
    """The document's text with every suggestion rejected."""
    return BLOCK_SEPARATOR.join(block.text for block in rejected_blocks(document.blocks))


def accepted_html(document: SuggestionDocument) -> str:
    """The document's HTML with every suggestion accepted."""
    return render_html(accepted_blocks(document.blocks))


def strip_suggestions(markup: str) -> str:
    """Remove suggestion markup from HTML.

    Deleted text is dropped and inserted text is unwrapped, so the result is
    the HTML a reader would see after accepting everything.

    Args:
        markup: HTML possibly containing suggestion markup

    Returns:
        HTML without suggestion markup
    """
    return render_html(accepted_blocks(parse_html(markup)))


# Change reports


@dataclass
class SuggestionContext:
    """Context information for a suggestion.

    Provides surrounding text to help understand where a change was made.
    """

    before: str
    """Text appearing before the suggestion in its block."""

    after: str
    """Text appearing after the suggestion in its block."""

    block_text: str
    """Full text of the block containing the suggestion."""

    block_index: int
    """Zero-based index of the block in the document."""


@dataclass
class ExportedSuggestion:
    """A suggestion with optional context, suitable for serialization."""

    id: str
    """Scan-local suggestion identifier."""

    type: str
    """Either "insertion" or "deletion"."""

    text: str
    """The suggested text."""

    start: int
    """Start offset in the flattened text."""

    end: int
    """End offset in the flattened text."""

    context: SuggestionContext | None = None
    """Optional surrounding context."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        data = asdict(self)
        if self.context is None:
            data.pop("context")
        return data


def _context_for(
    document: SuggestionDocument, suggestion: Suggestion, context_chars: int
) -> SuggestionContext:
    # Line breaks inside a block share the separator character, so walk block lengths
    block_start = 0
    for block_index, block_text in enumerate(document.block_texts):
        block_end = block_start + len(block_text)
        if suggestion.start <= block_end:
            break
        block_start = block_end + len(BLOCK_SEPARATOR)

    text = document.text
    return SuggestionContext(
        before=text[max(block_start, suggestion.start - context_chars) : suggestion.start],
        after=text[suggestion.end : min(block_end, suggestion.end + context_chars)],
        block_text=block_text,
        block_index=block_index,
    )


def export_suggestions(
    document: SuggestionDocument,
    include_context: bool = True,
    context_chars: int = 40,
) -> list[ExportedSuggestion]:
    """Collect the document's current suggestions for export.

    Args:
        document: The document to report on
        include_context: Whether to attach surrounding text
        context_chars: Characters of context on each side

    Returns:
        Exported suggestions in document order
    """
    exported = []
    for suggestion in scan_suggestions(document):
        context = _context_for(document, suggestion, context_chars) if include_context else None
        exported.append(
            ExportedSuggestion(
                id=suggestion.id,
                type=suggestion.type.value,
                text=suggestion.text,
                start=suggestion.start,
                end=suggestion.end,
                context=context,
            )
        )
    return exported


def export_suggestions_json(
    document: SuggestionDocument,
    include_context: bool = True,
    context_chars: int = 40,
    indent: int | None = 2,
) -> str:
    """Export the document's suggestions as JSON.

    Example:
        >>> print(export_suggestions_json(doc))
        {
          "total": 2,
          "insertions": 1,
          ...
    """
    exported = export_suggestions(document, include_context, context_chars)
    payload = {
        "total": len(exported),
        "insertions": sum(1 for s in exported if s.type == SuggestionTag.INSERTION.value),
        "deletions": sum(1 for s in exported if s.type == SuggestionTag.DELETION.value),
        "suggestions": [s.to_dict() for s in exported],
    }
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def export_suggestions_markdown(
    document: SuggestionDocument,
    title: str = "Pending Suggestions",
    context_chars: int = 40,
) -> str:
    """Export the document's suggestions as a Markdown report."""
    exported = export_suggestions(document, True, context_chars)
    lines = [f"# {title}", ""]

    if not exported:
        lines.append("No pending changes.")
        return "\n".join(lines) + "\n"

    insertions = sum(1 for s in exported if s.type == SuggestionTag.INSERTION.value)
    lines.append(
        f"**{len(exported)} suggestions** ({insertions} insertions, "
        f"{len(exported) - insertions} deletions)"
    )
    lines.append("")

    for number, suggestion in enumerate(exported, start=1):
        marker = "++" if suggestion.type == SuggestionTag.INSERTION.value else "--"
        lines.append(f"## {number}. {suggestion.type.capitalize()} `{suggestion.id}`")
        lines.append("")
        # CriticMarkup notation: {++inserted++} / {--deleted--}
        change = f"{{{marker}{suggestion.text}{marker}}}"
        context = suggestion.context
        if context is not None:
            lines.append(f"> ...{context.before}{change}{context.after}...")
        else:
            lines.append(f"> {change}")
        lines.append("")

    return "\n".join(lines)
