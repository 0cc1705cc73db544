"""Structured metadata extraction from project manifests."""

from __future__ import annotations

from .extractor import StructuredExtractor
from .utils import README_FILES, STRUCTURAL_FILES, categorize_dependency, describe_script, extract_features

__all__ = [
    "README_FILES",
    "STRUCTURAL_FILES",
    "StructuredExtractor",
    "categorize_dependency",
    "describe_script",
    "extract_features",
]
