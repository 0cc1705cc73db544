"""Token-budgeted document selection."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from .constants import ANALYSIS_STRATEGIES
from .logging import get_logger
from .models import DocumentRecord
from .tokens import estimate_tokens

TRUNCATION_MARKER = "\n\n[... content truncated ...]"

HIGH_VALUE_PRIORITY = 70
TRUNCATION_BUDGET_FRACTION = 0.8
MIN_TRUNCATION_TOKENS = 100
TRUNCATION_SAFETY_RATIO = 0.9
PARAGRAPH_BACKOFF_RATIO = 0.7

# strategy -> (max tokens, reserved tokens)
_DEPTH_BUDGETS: Dict[str, Tuple[int, int]] = {
    "minimal": (4000, 1000),
    "balanced": (8000, 2000),
    "comprehensive": (16000, 4000),
}


@dataclass(frozen=True)
class ContextBudget:
    """Token allowance for an analysis depth, with headroom reserved for the prompt."""

    max_tokens: int
    reserved_tokens: int
    strategy: str

    @property
    def available_tokens(self) -> int:
        return self.max_tokens - self.reserved_tokens


class ContextBudgetManager:
    """Greedy, priority-ordered selection of documents under a token ceiling.

    Documents are taken in descending priority while they fit. The first
    high-value document that does not fit may be truncated into the remaining
    space, after which selection stops; at most one document is truncated.
    """

    def __init__(self) -> None:
        self.logger = get_logger("budget")

    def create_budget(self, strategy: str) -> ContextBudget:
        if strategy not in _DEPTH_BUDGETS:
            valid = ", ".join(ANALYSIS_STRATEGIES)
            raise ValueError(f"Unknown analysis strategy '{strategy}' (expected one of: {valid})")
        max_tokens, reserved = _DEPTH_BUDGETS[strategy]
        return ContextBudget(max_tokens=max_tokens, reserved_tokens=reserved, strategy=strategy)

    def optimize(self, documents: Sequence[DocumentRecord], budget: ContextBudget) -> List[DocumentRecord]:
        return self.select(documents, budget.available_tokens)

    def select(self, documents: Sequence[DocumentRecord], max_tokens: int) -> List[DocumentRecord]:
        ordered = sorted(documents, key=lambda document: document.priority, reverse=True)
        selected: List[DocumentRecord] = []
        consumed = 0

        for document in ordered:
            if consumed + document.token_count <= max_tokens:
                selected.append(document)
                consumed += document.token_count
                continue

            if document.priority <= HIGH_VALUE_PRIORITY:
                continue
            if consumed >= max_tokens * TRUNCATION_BUDGET_FRACTION:
                continue
            remaining = max_tokens - consumed
            if remaining <= MIN_TRUNCATION_TOKENS:
                continue

            truncated = truncate_document(document, remaining)
            self.logger.debug(
                "Truncated %s from %d to %d tokens",
                document.relative_path,
                document.token_count,
                truncated.token_count,
            )
            selected.append(truncated)
            break

        return selected


def truncate_document(document: DocumentRecord, max_tokens: int) -> DocumentRecord:
    """Return a copy of ``document`` cut to roughly ``max_tokens`` tokens.

    The cut backs off to the last paragraph break when one falls after 70% of
    the target length, and a marker is appended. The cut is proportional to
    length, so content whose head is denser than its average (wide scripts up
    front) is shortened further until the estimate of the returned content,
    marker included, fits within ``max_tokens``. That estimate is the recorded
    token count.
    """
    if document.token_count <= max_tokens:
        return document

    ratio = max_tokens / document.token_count
    target_length = math.floor(len(document.content) * ratio * TRUNCATION_SAFETY_RATIO)
    content = document.content[:target_length]

    last_paragraph = content.rfind("\n\n")
    if last_paragraph > target_length * PARAGRAPH_BACKOFF_RATIO:
        content = content[:last_paragraph]

    truncated = content + TRUNCATION_MARKER
    tokens = estimate_tokens(truncated)
    while tokens > max_tokens and content:
        keep = math.floor(len(content) * max_tokens / tokens * TRUNCATION_SAFETY_RATIO)
        content = content[: min(keep, len(content) - 1)]
        truncated = content + TRUNCATION_MARKER
        tokens = estimate_tokens(truncated)

    return replace(
        document,
        content=truncated,
        # Only a ceiling below the marker's own cost can make these differ.
        token_count=min(max_tokens, tokens),
        size=len(truncated.encode("utf-8")),
        truncated=True,
    )


__all__ = [
    "ContextBudget",
    "ContextBudgetManager",
    "TRUNCATION_MARKER",
    "truncate_document",
]
