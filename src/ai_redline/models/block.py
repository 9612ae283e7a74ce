"""
Block model: one paragraph-level node of a document.
"""

from dataclasses import dataclass, field

from ai_redline.constants import DEFAULT_BLOCK_TAG
from ai_redline.models.run import SuggestionTag, TextRun


@dataclass
class Block:
    """A paragraph, heading or list item holding text runs.

    Attributes:
        tag: Block element name (p, h1, li, ...)
        runs: Text runs in reading order
        container: List element name (ul/ol) for list items, else None
    """

    tag: str = DEFAULT_BLOCK_TAG
    runs: list[TextRun] = field(default_factory=list)
    container: str | None = None

    @property
    def text(self) -> str:
        """Concatenated text of all runs."""
        return "".join(run.text for run in self.runs)

    @property
    def suggestion_tag(self) -> SuggestionTag | None:
        """The tag carried by all of a non-empty block's text, if there is one."""
        tags = {run.tag for run in self.runs if run.text}
        if len(tags) == 1:
            return tags.pop()
        return None

    def __len__(self) -> int:
        return sum(len(run.text) for run in self.runs)

    def copy(self, runs: list[TextRun] | None = None) -> "Block":
        """Return a block with the same tag and container."""
        return Block(self.tag, list(self.runs if runs is None else runs), self.container)
