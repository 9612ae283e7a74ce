"""
ai_redline - Suggestion tracking for AI-assisted document editing.

This package keeps a language model's proposed edits reviewable: replies are
diffed into insertion and deletion suggestions on a rich-text document, and
each suggestion (or all of them at once) can be accepted or rejected while
the document's text, tags and offsets stay consistent.

Example:
    >>> from ai_redline import SuggestionDocument, compute_diff
    >>> doc = SuggestionDocument.from_html(compute_diff("The cat sat.", "The dog sat."))
    >>> [s.text for s in doc.suggestions]
    ['cat', 'dog']
    >>> result = doc.accept_all_suggestions()
    >>> doc.text
    'The dog sat.'
"""

__version__ = "0.1.0"
__all__ = [
    "SuggestionDocument",
    "Transaction",
    "ChangeManagement",
    "ReviewSession",
    "EditAssistant",
    "EditProvider",
    "OpenAIEditProvider",
    "EditorConfig",
    "load_config",
    "RedlineError",
    "ConflictingTagsError",
    "OverlappingEditError",
    "SuggestionNotFoundError",
    "ConfigurationError",
    "EditProposalError",
    "Range",
    "TextRun",
    "LeafRun",
    "Block",
    "Suggestion",
    "SuggestionTag",
    "AcceptResult",
    "RejectResult",
    "DiffStats",
    "DiffSegment",
    "compute_diff",
    "compute_diff_segments",
    "compute_block_diff",
    "scan_suggestions",
    "find_adjacent_ranges",
    # Export functionality
    "accepted_text",
    "rejected_text",
    "strip_suggestions",
    "export_suggestions_json",
    "export_suggestions_markdown",
]

# Import adjacency resolution
from .adjacency import find_adjacent_ranges

# Import assistant
from .assistant import EditAssistant, EditProvider, OpenAIEditProvider

# Import configuration
from .config import EditorConfig, load_config

# Import diff engine
from .diff_engine import DiffSegment, compute_block_diff, compute_diff, compute_diff_segments

# Import document class
from .document import SuggestionDocument, Transaction
from .errors import (
    ConfigurationError,
    ConflictingTagsError,
    EditProposalError,
    OverlappingEditError,
    RedlineError,
    SuggestionNotFoundError,
)

# Import export functionality
from .export import (
    accepted_text,
    export_suggestions_json,
    export_suggestions_markdown,
    rejected_text,
    strip_suggestions,
)

# Import model classes
from .models.block import Block
from .models.run import LeafRun, Range, SuggestionTag, TextRun
from .models.suggestion import Suggestion

# Import change management
from .operations.change_management import ChangeManagement

# Import result types
from .results import AcceptResult, DiffStats, RejectResult

# Import review session
from .review import ReviewSession

# Import scanner
from .scanner import scan_suggestions
