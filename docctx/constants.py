"""Shared enumerations for document categories, task types and scan depths."""

from __future__ import annotations

DOCUMENT_CATEGORIES: tuple[str, ...] = (
    "readme",
    "docs",
    "changelog",
    "guide",
    "api",
    "example",
    "test",
    "config",
    "other",
)

TASK_TYPES: tuple[str, ...] = (
    "marketing-content",
    "technical-docs",
    "api-documentation",
    "user-guide",
    "changelog",
    "readme-enhancement",
    "project-analysis",
    "feature-extraction",
    "general",
)

DEFAULT_TASK_TYPE = "general"

ANALYSIS_STRATEGIES: tuple[str, ...] = ("minimal", "balanced", "comprehensive")

DEFAULT_ANALYSIS_STRATEGY = "balanced"

SCAN_DEPTHS: dict[str, int] = {
    "minimal": 2,
    "balanced": 4,
    "comprehensive": 6,
}

DEPENDENCY_TYPES: tuple[str, ...] = ("production", "development", "peer")


def empty_category_counts() -> dict[str, int]:
    """Return a zeroed count for every document category."""
    return {category: 0 for category in DOCUMENT_CATEGORIES}


def scan_depth_for(strategy: str) -> int:
    """Return the maximum directory depth scanned for an analysis strategy."""
    try:
        return SCAN_DEPTHS[strategy]
    except KeyError:
        valid = ", ".join(ANALYSIS_STRATEGIES)
        raise ValueError(f"Unknown analysis strategy '{strategy}' (expected one of: {valid})") from None


__all__ = [
    "ANALYSIS_STRATEGIES",
    "DEFAULT_ANALYSIS_STRATEGY",
    "DEFAULT_TASK_TYPE",
    "DEPENDENCY_TYPES",
    "DOCUMENT_CATEGORIES",
    "SCAN_DEPTHS",
    "TASK_TYPES",
    "empty_category_counts",
    "scan_depth_for",
]
