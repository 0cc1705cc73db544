"""Task-aware context selection over a project analysis."""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Sequence

from ..budget import ContextBudgetManager
from ..constants import DEFAULT_TASK_TYPE, DOCUMENT_CATEGORIES
from ..logging import get_logger
from ..models import DocumentRecord, ProjectAnalysis, SelectedContext, SelectionStrategy
from .strategies import DEFAULT_STRATEGIES, FALLBACK_WEIGHT


class ContextSelector:
    """Filters, weights and budgets documents according to a task's strategy."""

    def __init__(
        self,
        strategies: Mapping[str, SelectionStrategy] | None = None,
        *,
        budget_manager: ContextBudgetManager | None = None,
        token_budgets: Mapping[str, int] | None = None,
    ) -> None:
        self._strategies: Dict[str, SelectionStrategy] = dict(strategies or DEFAULT_STRATEGIES)
        if DEFAULT_TASK_TYPE not in self._strategies:
            raise ValueError(f"Strategy table must define a '{DEFAULT_TASK_TYPE}' strategy")
        for task_type, ceiling in (token_budgets or {}).items():
            if task_type in self._strategies:
                self._strategies[task_type] = replace(self._strategies[task_type], max_tokens=ceiling)
        self.budget_manager = budget_manager or ContextBudgetManager()
        self.logger = get_logger("selector")

    def available_strategies(self) -> List[str]:
        return list(self._strategies)

    def get_strategy(self, task_type: str) -> SelectionStrategy:
        """Return the strategy for ``task_type``, falling back to the general one."""
        strategy = self._strategies.get(task_type)
        if strategy is None:
            self.logger.warning("No strategy for task type '%s'; using '%s'", task_type, DEFAULT_TASK_TYPE)
            return self._strategies[DEFAULT_TASK_TYPE]
        return strategy

    def create_custom_strategy(self, task_type: str, **overrides: Any) -> SelectionStrategy:
        """Derive a strategy from an existing one with selected fields replaced."""
        overrides.pop("task_type", None)
        return replace(self.get_strategy(task_type), task_type=task_type, **overrides)

    def select_context(
        self,
        analysis: ProjectAnalysis,
        task_type: str,
        *,
        max_tokens: int | None = None,
        strategy: SelectionStrategy | None = None,
    ) -> SelectedContext:
        """Pick the documents that best serve ``task_type`` within its token ceiling."""
        effective = strategy or self.get_strategy(task_type)
        if max_tokens is not None:
            effective = replace(effective, max_tokens=max_tokens)

        candidates = self._filter_candidates(analysis.full_text.documents, effective)
        weighted = [self._apply_weight(document, effective) for document in candidates]
        selected = self.budget_manager.select(weighted, effective.max_tokens)
        total_tokens = sum(document.token_count for document in selected)

        rationale = build_rationale(effective, selected, len(candidates), total_tokens)
        self.logger.debug(rationale)

        return SelectedContext(
            structured=analysis.structured if effective.include_structured else None,
            semi_structured=analysis.semi_structured if effective.include_semi_structured else None,
            documents=tuple(selected),
            total_tokens=total_tokens,
            strategy=effective,
            rationale=rationale,
            max_tokens=effective.max_tokens,
            considered=len(candidates),
        )

    @staticmethod
    def _filter_candidates(
        documents: Sequence[DocumentRecord], strategy: SelectionStrategy
    ) -> List[DocumentRecord]:
        required = [document for document in documents if document.category in strategy.required_categories]
        seen = {document.path for document in required}
        optional = [
            document
            for document in documents
            if document.category in strategy.optional_categories and document.path not in seen
        ]
        return required + optional

    @staticmethod
    def _apply_weight(document: DocumentRecord, strategy: SelectionStrategy) -> DocumentRecord:
        weight = strategy.priority_weights.get(document.category, FALLBACK_WEIGHT)
        return replace(document, priority=document.priority * weight)


def build_rationale(
    strategy: SelectionStrategy,
    selected: Sequence[DocumentRecord],
    considered: int,
    total_tokens: int,
) -> str:
    """Describe what was selected, out of how many candidates, and why."""
    percentage = (len(selected) / considered * 100) if considered else 0.0
    counts = Counter(document.category for document in selected)
    breakdown = ", ".join(
        f"{category}={counts[category]}" for category in DOCUMENT_CATEGORIES if counts[category]
    ) or "none"
    truncated = [document.relative_path for document in selected if document.truncated]
    parts = [
        f"Selected {len(selected)} of {considered} documents considered ({percentage:.1f}%) "
        f"for {strategy.task_type} task.",
        f"Categories: {breakdown}.",
        f"Total tokens: {total_tokens}/{strategy.max_tokens}.",
        f"Required categories: {', '.join(strategy.required_categories)}.",
    ]
    if truncated:
        parts.append(f"Truncated: {', '.join(truncated)}.")
    return " ".join(parts)


__all__ = ["ContextSelector", "build_rationale"]
