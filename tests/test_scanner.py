"""
Tests for coalescing tagged runs into suggestions.
"""

from ai_redline import Range, SuggestionDocument, SuggestionTag, TextRun, scan_suggestions

INS = SuggestionTag.INSERTION
DEL = SuggestionTag.DELETION


def test_adjacent_runs_coalesce():
    """Touching runs with the same tag form one suggestion, whatever their formatting."""
    doc = SuggestionDocument.from_runs(
        [
            TextRun("x"),
            TextRun.tagged("one", INS),
            TextRun.tagged("two", INS, ("strong",)),
            TextRun.tagged("three", INS),
            TextRun("y"),
        ]
    )
    suggestions = scan_suggestions(doc)
    assert len(suggestions) == 1
    assert suggestions[0].id == "insertion-1"
    assert suggestions[0].text == "onetwothree"
    assert suggestions[0].range == Range(1, 12)


def test_replacement_yields_two_suggestions():
    """A deletion touching an insertion is reported as two suggestions."""
    doc = SuggestionDocument.from_html(
        '<p>A<span class="suggestion-deletion">old</span>'
        '<span class="suggestion-insertion">new</span>B</p>'
    )
    assert [(s.id, s.type, s.text) for s in doc.suggestions] == [
        ("deletion-1", DEL, "old"),
        ("insertion-4", INS, "new"),
    ]


def test_alternating_tags_do_not_merge():
    """Runs only extend an open suggestion of their own type."""
    doc = SuggestionDocument.from_runs(
        [TextRun.tagged("a", DEL), TextRun.tagged("b", INS), TextRun.tagged("c", DEL)]
    )
    assert [(s.type, s.text) for s in scan_suggestions(doc)] == [
        (DEL, "a"),
        (INS, "b"),
        (DEL, "c"),
    ]


def test_untagged_text_separates_suggestions():
    """Plain text between two insertions keeps them apart."""
    doc = SuggestionDocument.from_html("<p><ins>a</ins> <ins>b</ins></p>")
    assert [s.id for s in doc.suggestions] == ["insertion-0", "insertion-2"]


def test_no_merge_across_blocks():
    """Suggestions end at block boundaries."""
    doc = SuggestionDocument.from_html("<p><ins>ab</ins></p><p><ins>cd</ins></p>")
    assert [(s.id, s.text) for s in doc.suggestions] == [
        ("insertion-0", "ab"),
        ("insertion-3", "cd"),
    ]


def test_sorted_and_non_overlapping():
    """Suggestions come back in document order without overlaps."""
    doc = SuggestionDocument.from_html(
        "<p>The <del>quick</del><ins>slow</ins> fox</p><p><del>old</del> end<ins>!</ins></p>"
    )
    suggestions = scan_suggestions(doc)
    assert len(suggestions) == 4
    for left, right in zip(suggestions, suggestions[1:]):
        assert left.end <= right.start


def test_text_matches_document():
    """Each suggestion's text is the document text over its range."""
    doc = SuggestionDocument.from_html("<p>a<del>bc</del><ins>de</ins>f</p><p><ins>gh</ins></p>")
    for suggestion in doc.suggestions:
        assert doc.text_between(suggestion.range) == suggestion.text


def test_untagged_and_empty_documents():
    """Documents without tags have no suggestions."""
    assert scan_suggestions(SuggestionDocument()) == []
    assert scan_suggestions(SuggestionDocument.from_text("plain\ntext")) == []


def test_scan_does_not_modify_document():
    """Scanning is a pure read."""
    doc = SuggestionDocument.from_html("<p><ins>a</ins></p>")
    scan_suggestions(doc)
    assert doc.version == 0
