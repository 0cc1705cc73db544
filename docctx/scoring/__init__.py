"""Document categorisation and priority scoring."""

from __future__ import annotations

from .categorizer import categorize_document
from .constants import DEFAULT_SCORING, ScoringConstants
from .prioritizer import DocumentPrioritizer

__all__ = [
    "DEFAULT_SCORING",
    "DocumentPrioritizer",
    "ScoringConstants",
    "categorize_document",
]
