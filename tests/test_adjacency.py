"""
Tests for finding the counterpart of a paired replacement.
"""

from ai_redline import Range, SuggestionDocument, SuggestionTag, TextRun, find_adjacent_ranges
from ai_redline.adjacency import probe_offsets

INS = SuggestionTag.INSERTION
DEL = SuggestionTag.DELETION


def doc_from(*parts):
    """Build a one-paragraph document from (text, tag) pairs."""
    return SuggestionDocument.from_runs([TextRun.tagged(text, tag) for text, tag in parts])


def test_probe_offsets():
    """Both edges and the character before each edge are probed."""
    assert probe_offsets(Range(4, 7)) == [4, 3, 7, 6]


def test_deletion_before_insertion():
    """The usual diff shape: deleted text followed by its replacement."""
    doc = doc_from(("A", None), ("old", DEL), ("new", INS), ("B", None))
    assert find_adjacent_ranges(doc, Range(4, 7), DEL) == [Range(1, 4)]
    assert find_adjacent_ranges(doc, Range(1, 4), INS) == [Range(4, 7)]


def test_insertion_before_deletion():
    """The reverse order is found too."""
    doc = doc_from(("A", None), ("new", INS), ("old", DEL), ("B", None))
    assert find_adjacent_ranges(doc, Range(1, 4), DEL) == [Range(4, 7)]
    assert find_adjacent_ranges(doc, Range(4, 7), INS) == [Range(1, 4)]


def test_pure_insertion_has_no_counterpart():
    """An insertion with plain text on both sides stands alone."""
    doc = doc_from(("A", None), ("new", INS), ("B", None))
    assert find_adjacent_ranges(doc, Range(1, 4), DEL) == []


def test_one_character_gap_still_adjacent():
    """The probe one character before the start reaches across a single character."""
    doc = doc_from(("old", DEL), (" ", None), ("new", INS))
    assert find_adjacent_ranges(doc, Range(4, 7), DEL) == [Range(0, 3)]


def test_counterparts_on_both_sides_deduplicated():
    """Each touching range is reported once, in probe order."""
    doc = doc_from(("a", DEL), ("b", INS), ("c", DEL))
    assert find_adjacent_ranges(doc, Range(1, 2), DEL) == [Range(0, 1), Range(2, 3)]


def test_document_edges():
    """Probes outside the document are skipped."""
    doc = doc_from(("new", INS))
    assert find_adjacent_ranges(doc, Range(0, 3), DEL) == []


def test_probe_stays_in_block_at_block_start():
    """A suggestion opening a paragraph does not reach into the previous one."""
    doc = SuggestionDocument.from_html("<p>Hello<ins> world</ins></p><p><del>Bye </del>now</p>")
    assert find_adjacent_ranges(doc, Range(12, 16), INS) == []


def test_probe_stays_in_block_at_block_end():
    """A suggestion closing a paragraph does not reach into the next one."""
    doc = SuggestionDocument.from_html("<p>Keep <del>this</del></p><p><ins>New</ins> line</p>")
    assert find_adjacent_ranges(doc, Range(5, 9), INS) == []
    assert find_adjacent_ranges(doc, Range(10, 13), DEL) == []


def test_pair_at_block_start_still_found():
    """A pair at the start of a later paragraph is still resolved."""
    doc = SuggestionDocument.from_html("<p>First</p><p><del>old</del><ins>new</ins> end</p>")
    assert find_adjacent_ranges(doc, Range(9, 12), DEL) == [Range(6, 9)]
    assert find_adjacent_ranges(doc, Range(6, 9), INS) == [Range(9, 12)]
