"""
Adjacency resolution for paired replacements.

The diff engine reports a replaced word as a deletion immediately followed by
an insertion. When one half is reviewed, the other half is found by probing
the boundaries of the reviewed range for ranges tagged with the other type.
Any touching range in the same block counts as the counterpart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models.run import Range, SuggestionTag

if TYPE_CHECKING:
    from .document import SuggestionDocument


def probe_offsets(range: Range) -> list[int]:
    """Offsets probed around a range: both edges and one character inside/before each."""
    return [range.start, range.start - 1, range.end, range.end - 1]


def find_adjacent_ranges(
    document: SuggestionDocument, range: Range, target: SuggestionTag
) -> list[Range]:
    """Find ranges tagged with target that touch the edges of range.

    Args:
        document: The document to search
        range: The range of the suggestion under review
        target: The tag of the counterpart to look for

    Returns:
        Distinct ranges in probe order; empty when the suggestion is a pure
        insertion or deletion
    """
    # Probes stay inside the block holding range; the offset before a block's
    # first character belongs to the previous block
    block = document.block_span(range.start)
    found: list[Range] = []

    for offset in probe_offsets(range):
        if offset < block.start or offset > block.end:
            continue
        candidate = document.find_tagged_range_touching(offset, target)
        if candidate is not None and candidate not in found:
            found.append(candidate)

    return found
