"""Operations modules for ai_redline.

This package contains operation classes that are used by the
SuggestionDocument class to perform review operations.

Classes:
    ChangeManagement: Accepting and rejecting suggestions
"""

from .change_management import ChangeManagement

__all__ = [
    "ChangeManagement",
]
