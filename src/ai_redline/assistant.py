"""
Edit assistant: sends the document to a language model and applies its reply.

The model is asked for the complete updated document as HTML. In
track-changes mode the reply is not applied directly: it is diffed against
the document and installed as suggestions, so every change can be reviewed.

The diff base is the document with pending suggestions rejected, while the
model is shown the document with them accepted. Suggestions still pending
from an earlier request are therefore folded into the new set instead of
being silently accepted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from openai import OpenAI, OpenAIError

from .config import EditorConfig
from .diff_engine import compute_block_diff, segments_to_runs
from .errors import EditProposalError
from .export import accepted_html, rejected_blocks
from .html_io import parse_html
from .models.block import Block

if TYPE_CHECKING:
    from .document import SuggestionDocument

logger = logging.getLogger(__name__)

# ```html ... ``` wrappers some models add despite being told not to
_CODE_FENCE_PATTERN = re.compile(r"^\s*```[\w-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)

EDIT_PROMPT_TEMPLATE = """Here is the current document content in HTML format:

{document}

User instruction: {instruction}

Return ONLY the fully updated HTML content. Do NOT include markdown blocks."""


def strip_code_fences(reply: str) -> str:
    """Remove a Markdown code fence wrapped around a whole reply."""
    match = _CODE_FENCE_PATTERN.match(reply)
    return match.group(1) if match else reply


class EditProvider(Protocol):
    """Anything that turns a document and an instruction into new HTML."""

    def propose(
        self,
        document_html: str,
        instruction: str,
        history: list[ChatMessage] | None = None,
    ) -> str:
        """Return the complete updated document as HTML."""
        ...


class OpenAIEditProvider:
    """Edit provider backed by the OpenAI chat completions API.

    Example:
        >>> provider = OpenAIEditProvider(EditorConfig(model="gpt-4.1"))
        >>> html = provider.propose("<p>Helo world</p>", "Fix the typo")
    """

    def __init__(self, config: EditorConfig | None = None, client: OpenAI | None = None) -> None:
        self.config = config or EditorConfig()
        self._client = client

    @property
    def client(self) -> OpenAI:
        """The API client, created on first use."""
        if self._client is None:
            self._client = OpenAI(
                api_key=self.config.resolve_api_key(),
                base_url=self.config.base_url,
            )
        return self._client

    def build_messages(
        self,
        document_html: str,
        instruction: str,
        history: list[ChatMessage] | None = None,
    ) -> list[dict[str, str]]:
        """Build the chat messages for one edit request.

        Earlier turns of the conversation go between the system prompt and
        the new request.
        """
        messages = [{"role": "system", "content": self.config.system_prompt}]
        for message in history or []:
            if message.role != "system":
                messages.append({"role": message.role, "content": message.content})
        messages.append(
            {
                "role": "user",
                "content": EDIT_PROMPT_TEMPLATE.format(
                    document=document_html, instruction=instruction
                ),
            }
        )
        return messages

    def propose(
        self,
        document_html: str,
        instruction: str,
        history: list[ChatMessage] | None = None,
    ) -> str:
        """Ask the model for an updated document.

        Args:
            document_html: The document as the model should see it
            instruction: What the user wants changed
            history: Earlier turns of the conversation, oldest first

        Raises:
            EditProposalError: If the request fails or the reply is empty
        """
        kwargs = {}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        logger.debug("Requesting edit from %s", self.config.model)
        try:
            completion = self.client.chat.completions.create(
                model=self.config.model,
                messages=self.build_messages(document_html, instruction, history),
                **kwargs,
            )
        except OpenAIError as e:
            raise EditProposalError(instruction, str(e)) from e

        if not completion.choices:
            raise EditProposalError(instruction, "the model returned no choices")
        reply = strip_code_fences(completion.choices[0].message.content or "")
        if not reply.strip():
            raise EditProposalError(instruction, "the model returned an empty reply")
        return reply


@dataclass
class ChatMessage:
    """One entry of the assistant's conversation log."""

    role: str
    content: str


@dataclass
class EditAssistant:
    """Requests edits for a document and applies them.

    Attributes:
        document: The document being edited
        provider: Source of proposed edits
        track_changes: Install replies as suggestions instead of applying them
        history: Conversation log, oldest first
    """

    document: SuggestionDocument
    provider: EditProvider
    track_changes: bool = True
    history: list[ChatMessage] = field(default_factory=list)

    @classmethod
    def from_config(cls, document: SuggestionDocument, config: EditorConfig) -> EditAssistant:
        """Create an assistant backed by OpenAI using a configuration."""
        return cls(document, OpenAIEditProvider(config), track_changes=config.track_changes)

    def request_edit(self, instruction: str) -> str:
        """Send an instruction to the provider and apply the reply.

        Args:
            instruction: What the user wants changed

        Returns:
            The provider's HTML reply

        Raises:
            EditProposalError: If the provider fails
        """
        earlier = list(self.history)
        self.history.append(ChatMessage("user", instruction))
        try:
            reply = self.provider.propose(accepted_html(self.document), instruction, earlier)
        except EditProposalError as e:
            self.history.append(ChatMessage("assistant", f"Sorry, something went wrong: {e}"))
            raise

        self.apply_proposal(reply)
        summary = (
            "I've suggested some changes with diffs."
            if self.track_changes
            else "I've updated the document."
        )
        self.history.append(ChatMessage("assistant", summary))
        return reply

    def apply_proposal(self, markup: str) -> None:
        """Apply replacement HTML to the document.

        Direct mode replaces the content. Track-changes mode installs the
        reply as-is when it already carries suggestion markup, and otherwise
        installs a block-by-block diff against the document. Either way the
        document emits a single update.
        """
        proposed = parse_html(markup)
        already_tracked = any(run.tags for block in proposed for run in block.runs)
        if not self.track_changes or already_tracked:
            self.document.set_blocks(proposed)
            return

        base = rejected_blocks(self.document.blocks)
        diffs = compute_block_diff([b.text for b in base], [b.text for b in proposed])

        blocks: list[Block] = []
        for diff in diffs:
            if diff.new_index is not None and diff.is_unchanged:
                # Keep the reply's formatting when the text did not change
                blocks.append(proposed[diff.new_index].copy())
                continue
            if diff.new_index is not None:
                source = proposed[diff.new_index]
            else:
                assert diff.old_index is not None
                source = base[diff.old_index]
            blocks.append(source.copy(segments_to_runs(diff.segments)))

        logger.debug("Installing proposal as %d blocks", len(blocks))
        self.document.set_blocks(blocks)
