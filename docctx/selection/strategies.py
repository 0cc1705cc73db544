"""Static selection strategies, one per downstream task type."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from ..models import SelectionStrategy

# Weight applied to categories a strategy's weight map does not mention.
FALLBACK_WEIGHT = 0.1


def _weights(**values: float) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


DEFAULT_STRATEGIES: Dict[str, SelectionStrategy] = {
    "marketing-content": SelectionStrategy(
        task_type="marketing-content",
        required_categories=("readme",),
        optional_categories=("docs", "guide", "example", "changelog"),
        priority_weights=_weights(
            readme=1.0, docs=0.8, guide=0.7, example=0.6, changelog=0.5,
            api=0.3, test=0.1, config=0.1, other=0.2,
        ),
        max_tokens=8000,
    ),
    "technical-docs": SelectionStrategy(
        task_type="technical-docs",
        required_categories=("docs", "api"),
        optional_categories=("readme", "guide", "example", "config"),
        priority_weights=_weights(
            docs=1.0, api=0.9, guide=0.8, readme=0.7, example=0.6,
            config=0.4, changelog=0.3, test=0.2, other=0.1,
        ),
        max_tokens=12000,
    ),
    "api-documentation": SelectionStrategy(
        task_type="api-documentation",
        required_categories=("api",),
        optional_categories=("docs", "example", "readme"),
        priority_weights=_weights(
            api=1.0, docs=0.8, example=0.7, readme=0.5, guide=0.4,
            config=0.3, changelog=0.2, test=0.1, other=0.1,
        ),
        max_tokens=10000,
        include_semi_structured=False,
    ),
    "user-guide": SelectionStrategy(
        task_type="user-guide",
        required_categories=("guide", "readme"),
        optional_categories=("example", "docs"),
        priority_weights=_weights(
            guide=1.0, readme=0.9, example=0.8, docs=0.6, api=0.4,
            changelog=0.3, config=0.2, test=0.1, other=0.2,
        ),
        max_tokens=8000,
    ),
    "changelog": SelectionStrategy(
        task_type="changelog",
        required_categories=("changelog",),
        optional_categories=("readme", "docs"),
        priority_weights=_weights(
            changelog=1.0, readme=0.6, docs=0.4, guide=0.3, api=0.2,
            example=0.2, config=0.1, test=0.1, other=0.1,
        ),
        max_tokens=6000,
    ),
    "readme-enhancement": SelectionStrategy(
        task_type="readme-enhancement",
        required_categories=("readme",),
        optional_categories=("docs", "guide", "example", "changelog"),
        priority_weights=_weights(
            readme=1.0, docs=0.7, guide=0.6, example=0.5, changelog=0.4,
            api=0.3, config=0.2, test=0.1, other=0.2,
        ),
        max_tokens=8000,
    ),
    "project-analysis": SelectionStrategy(
        task_type="project-analysis",
        required_categories=("readme", "docs"),
        optional_categories=("guide", "api", "example", "changelog", "config"),
        priority_weights=_weights(
            readme=1.0, docs=0.9, guide=0.7, api=0.6, example=0.5,
            changelog=0.4, config=0.3, test=0.2, other=0.3,
        ),
        max_tokens=16000,
    ),
    "feature-extraction": SelectionStrategy(
        task_type="feature-extraction",
        required_categories=("readme",),
        optional_categories=("docs", "guide", "example"),
        priority_weights=_weights(
            readme=1.0, docs=0.8, guide=0.7, example=0.6, api=0.4,
            changelog=0.3, config=0.2, test=0.1, other=0.2,
        ),
        max_tokens=10000,
    ),
    "general": SelectionStrategy(
        task_type="general",
        required_categories=("readme",),
        optional_categories=("docs", "guide", "example", "api", "changelog"),
        priority_weights=_weights(
            readme=1.0, docs=0.8, guide=0.7, api=0.6, example=0.5,
            changelog=0.4, config=0.3, test=0.2, other=0.3,
        ),
        max_tokens=8000,
    ),
}


__all__ = ["DEFAULT_STRATEGIES", "FALLBACK_WEIGHT"]
