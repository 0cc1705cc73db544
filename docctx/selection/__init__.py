"""Task strategies and context selection."""

from __future__ import annotations

from .selector import ContextSelector, build_rationale
from .strategies import DEFAULT_STRATEGIES, FALLBACK_WEIGHT

__all__ = [
    "ContextSelector",
    "DEFAULT_STRATEGIES",
    "FALLBACK_WEIGHT",
    "build_rationale",
]
