"""
Centralized constants for suggestion markup and document vocabulary.

Import from here so the HTML codec, the diff engine and the exporters agree
on the same tag names and CSS classes.
"""

# =============================================================================
# Suggestion Markup
# =============================================================================

# Mark names used by the editor for tracked suggestions
INSERTION_TAG = "insertion"
DELETION_TAG = "deletion"

# CSS classes the editor renders suggestion spans with
INSERTION_CLASS = "suggestion-insertion"
DELETION_CLASS = "suggestion-deletion"

# Plain HTML elements that language models tend to use for the same purpose
INSERTION_ELEMENTS = frozenset({"ins"})
DELETION_ELEMENTS = frozenset({"del"})


# =============================================================================
# Document Structure
# =============================================================================

# Block-level elements that become document blocks
BLOCK_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "pre"})

# List containers; their <li> children become blocks that remember the container
LIST_CONTAINERS = frozenset({"ul", "ol"})

# Inline formatting elements carried on runs as marks
INLINE_MARKS = frozenset({"strong", "b", "em", "i", "u", "s", "code", "mark", "sub", "sup"})

# Tag used when loose inline content has to be wrapped in a block
DEFAULT_BLOCK_TAG = "p"

# Character standing in for a block boundary in the flattened text
BLOCK_SEPARATOR = "\n"

# Character a <br> becomes inside a run
LINE_BREAK = "\n"


# =============================================================================
# Language Model Defaults
# =============================================================================

# Available models, ordered by capability (best first)
AVAILABLE_MODELS = (
    "gpt-5.1",
    "gpt-5",
    "gpt-5-mini",
    "o3",
    "o4-mini",
    "gpt-4.1",
    "gpt-4o",
)

DEFAULT_MODEL = "gpt-4o"

# Environment variable holding the API key
DEFAULT_API_KEY_ENV = "OPENAI_API_KEY"

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI writing assistant. You can help users refine their "
    "documents. Keep your answers concise and helpful."
)
