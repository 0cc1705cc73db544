"""In-process stores used during analysis."""

from __future__ import annotations

from .document_cache import DocumentCache

__all__ = ["DocumentCache"]
