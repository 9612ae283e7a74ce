"""
Document model classes for ai_redline.

These classes describe text runs, ranges and the suggestions derived from them.
"""

from ai_redline.models.run import LeafRun, Range, SuggestionTag, TextRun
from ai_redline.models.suggestion import Suggestion

__all__ = [
    "LeafRun",
    "Range",
    "Suggestion",
    "SuggestionTag",
    "TextRun",
]
