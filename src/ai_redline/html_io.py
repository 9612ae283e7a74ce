"""
HTML parsing and serialization for suggestion-tracked documents.

The editor stores suggestions as ``<span class="suggestion-insertion">`` and
``<span class="suggestion-deletion">`` wrappers. Language models replying in
track-changes mode also tend to use ``<ins>`` and ``<del>``, so both forms are
read; only the span form is written.

Parsing is delegated to lxml's tolerant HTML parser. Unclosed or badly nested
tags are repaired by lxml before this module sees them; the only repair done
here is resolving suggestion wrappers nested inside each other, where the
innermost wrapper wins.
"""

from __future__ import annotations

import logging
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from .constants import (
    BLOCK_TAGS,
    DEFAULT_BLOCK_TAG,
    DELETION_CLASS,
    DELETION_ELEMENTS,
    INLINE_MARKS,
    INSERTION_CLASS,
    INSERTION_ELEMENTS,
    LINE_BREAK,
    LIST_CONTAINERS,
)
from .models.block import Block
from .models.run import SuggestionTag, TextRun

logger = logging.getLogger(__name__)


def suggestion_tag_of(element: Any) -> SuggestionTag | None:
    """Get the suggestion tag an element applies, if any.

    Args:
        element: An lxml HTML element

    Returns:
        INSERTION, DELETION, or None for any other element
    """
    if element.tag in INSERTION_ELEMENTS:
        return SuggestionTag.INSERTION
    if element.tag in DELETION_ELEMENTS:
        return SuggestionTag.DELETION
    classes = (element.get("class") or "").split()
    if INSERTION_CLASS in classes:
        return SuggestionTag.INSERTION
    if DELETION_CLASS in classes:
        return SuggestionTag.DELETION
    return None


class _BlockCollector:
    """Walks an HTML tree and collects blocks of text runs."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self._current: Block | None = None

    def _open(self, tag: str, container: str | None = None) -> Block:
        block = Block(tag=tag, container=container)
        self.blocks.append(block)
        self._current = block
        return block

    def _close(self) -> None:
        self._current = None

    def _append(self, text: str, tag: SuggestionTag | None, marks: tuple[str, ...]) -> None:
        if not text:
            return
        if self._current is None:
            # Loose inline content at the top level; whitespace between blocks is layout
            if not text.strip():
                return
            self._open(DEFAULT_BLOCK_TAG)
        assert self._current is not None
        self._current.runs.append(TextRun.tagged(text, tag, marks))

    def collect_container(self, element: Any) -> None:
        """Collect the children of a structural element (body, div, section)."""
        self._append(element.text, None, ())
        for child in element:
            if not isinstance(child.tag, str):
                self._append(child.tail, None, ())
                continue
            if child.tag in BLOCK_TAGS:
                self._close()
                self.collect_block(child, child.tag, None)
                self._close()
            elif child.tag in LIST_CONTAINERS:
                self._close()
                for item in child:
                    if isinstance(item.tag, str):
                        self.collect_block(item, "li", child.tag)
                        self._close()
            elif child.tag in ("div", "section", "article", "body", "main"):
                self._close()
                self.collect_container(child)
                self._close()
            else:
                self.walk_inline(child, None, ())
            self._append(child.tail, None, ())

    def collect_block(self, element: Any, tag: str, container: str | None) -> None:
        """Collect one block element into a new block."""
        self._open(tag, container)
        self._append(element.text, None, ())
        for child in element:
            self.walk_inline(child, None, (), block_tag=tag, container=container)
            self._append(child.tail, None, ())

    def walk_inline(
        self,
        element: Any,
        tag: SuggestionTag | None,
        marks: tuple[str, ...],
        block_tag: str = DEFAULT_BLOCK_TAG,
        container: str | None = None,
    ) -> None:
        """Collect inline content, tracking suggestion tags and marks."""
        name = element.tag
        if not isinstance(name, str):
            # Comments and processing instructions carry no text
            return

        if name == "br":
            self._append(LINE_BREAK, tag, marks)
            return

        if name in BLOCK_TAGS or name in LIST_CONTAINERS:
            # A nested block (li > p, blockquote > p) starts a sibling block
            if self._current is not None and self._current.runs:
                self._open(block_tag, container)

        element_tag = suggestion_tag_of(element)
        if element_tag is not None:
            if tag is not None and tag is not element_tag:
                logger.warning(
                    "Nested %s markup inside %s; keeping the inner %s",
                    element_tag.value,
                    tag.value,
                    element_tag.value,
                )
            tag = element_tag
        elif name in INLINE_MARKS:
            marks = marks + (name,)

        self._append(element.text, tag, marks)
        for child in element:
            self.walk_inline(child, tag, marks, block_tag=block_tag, container=container)
            self._append(child.tail, tag, marks)


def parse_html(markup: str) -> list[Block]:
    """Parse editor HTML into blocks of text runs.

    Args:
        markup: HTML fragment, possibly containing suggestion markup

    Returns:
        List of blocks; never empty (an empty document has one empty paragraph)
    """
    if not markup or not markup.strip():
        return [Block()]

    try:
        root = lxml_html.fragment_fromstring(markup, create_parent="div")
    except etree.ParserError as e:
        logger.warning("Could not parse HTML (%s); reading it as plain text", e)
        return [Block(runs=[TextRun(markup)])]

    collector = _BlockCollector()
    collector.collect_container(root)
    blocks = collector.blocks or [Block()]
    logger.debug("Parsed %d blocks from %d characters of HTML", len(blocks), len(markup))
    return blocks


def _append_text(parent: Any, text: str) -> None:
    """Append text to an element, after its last child if it has any."""
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def _write_text(parent: Any, text: str) -> None:
    """Write text into an element, turning newlines into <br>."""
    lines = text.split(LINE_BREAK)
    for index, line in enumerate(lines):
        if index:
            etree.SubElement(parent, "br")
        if line:
            _append_text(parent, line)


def _render_run(parent: Any, run: TextRun) -> None:
    """Render one run, wrapping it in its suggestion span and marks."""
    target = parent
    if run.tag is SuggestionTag.INSERTION:
        target = etree.SubElement(target, "span", {"class": INSERTION_CLASS})
    elif run.tag is SuggestionTag.DELETION:
        target = etree.SubElement(target, "span", {"class": DELETION_CLASS})
    for mark in run.marks:
        target = etree.SubElement(target, mark)
    _write_text(target, run.text)


def render_block(block: Block) -> Any:
    """Build the lxml element for a block."""
    element = etree.Element(block.tag)
    for run in block.runs:
        _render_run(element, run)
    return element


def render_html(blocks: list[Block]) -> str:
    """Serialize blocks back to editor HTML.

    Consecutive list items sharing a container are grouped into one list.

    Args:
        blocks: Blocks to serialize

    Returns:
        HTML fragment string
    """
    parts: list[str] = []
    open_list: Any = None

    for block in blocks:
        element = render_block(block)
        if block.tag == "li":
            container = block.container or "ul"
            if open_list is None or open_list.tag != container:
                if open_list is not None:
                    parts.append(lxml_html.tostring(open_list, encoding="unicode"))
                open_list = etree.Element(container)
            open_list.append(element)
            continue

        if open_list is not None:
            parts.append(lxml_html.tostring(open_list, encoding="unicode"))
            open_list = None
        parts.append(lxml_html.tostring(element, encoding="unicode"))

    if open_list is not None:
        parts.append(lxml_html.tostring(open_list, encoding="unicode"))

    return "".join(parts)


def html_block_texts(markup: str) -> list[str]:
    """Get the plain text of each block in an HTML fragment."""
    return [block.text for block in parse_html(markup)]
