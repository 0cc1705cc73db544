"""Project analysis service composing scanning, extraction and selection."""

from __future__ import annotations

import threading
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, List

from .budget import ContextBudgetManager
from .config import DocCtxConfig, load_config
from .constants import scan_depth_for
from .corpus_scanner import CorpusScanner
from .incremental import IncrementalContextBuilder
from .logging import get_logger
from .manifests import StructuredExtractor
from .models import AnalysisMeta, CacheStats, DocumentRecord, ProjectAnalysis, SelectedContext
from .scoring import DocumentPrioritizer
from .selection import ContextSelector
from .semi_structured import build_semi_structured
from .stores import DocumentCache


class ProjectAnalyzer:
    """Builds and maintains the three-layer analysis of one project root.

    Collaborators are injectable; by default the analyzer owns a private
    :class:`DocumentCache` so repeated passes reuse unchanged documents. Only
    one pass may run against an analyzer at a time.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        config: DocCtxConfig | None = None,
        cache: DocumentCache | None = None,
        prioritizer: DocumentPrioritizer | None = None,
        extractor: StructuredExtractor | None = None,
        selector: ContextSelector | None = None,
        budget_manager: ContextBudgetManager | None = None,
    ) -> None:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        self.root = root_path
        self.config = config or load_config(root_path)
        self.cache = cache if cache is not None else DocumentCache()
        self.prioritizer = prioritizer or DocumentPrioritizer()
        self.extractor = extractor or StructuredExtractor()
        self.budget_manager = budget_manager or ContextBudgetManager()
        self.selector = selector or ContextSelector(
            budget_manager=self.budget_manager,
            token_budgets=self.config.selection.token_budgets,
        )
        self.logger = get_logger("analysis")

    def analyze(
        self,
        strategy: str | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> ProjectAnalysis:
        """Run a full analysis pass at the given depth strategy."""
        strategy = strategy or self.config.analysis.strategy
        scanner = self._scanner(strategy)
        started = time.perf_counter()
        hits_before = self.cache.stats().hits
        self.logger.info("Starting %s analysis of %s", strategy, self.root)

        structured = self.extractor.extract(self.root)
        full_text = scanner.scan(cancel_event)
        semi_structured = build_semi_structured(full_text.documents)

        analysis = ProjectAnalysis(
            root=str(self.root),
            structured=structured,
            semi_structured=semi_structured,
            full_text=full_text,
            meta=AnalysisMeta(
                analyzed_at=datetime.now(UTC),
                total_files=len(full_text.documents),
                cache_hits=self.cache.stats().hits - hits_before,
                strategy=strategy,
            ),
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        self.logger.info(
            "Analysis completed in %.0fms: %d documents, %d tokens",
            elapsed_ms,
            len(full_text.documents),
            full_text.total_tokens,
        )
        return analysis

    def update(self, changed_files: Iterable[str], previous: ProjectAnalysis) -> ProjectAnalysis:
        """Patch ``previous`` for ``changed_files``, rescanning fully if a file vanished."""
        changed = list(changed_files)
        strategy = previous.meta.strategy
        self.logger.info("Updating analysis for %d changed files", len(changed))
        builder = IncrementalContextBuilder(self._scanner(strategy), self.extractor)
        return builder.update(changed, previous, rescan=lambda: self.analyze(strategy))

    def select_context(
        self,
        analysis: ProjectAnalysis,
        task_type: str | None = None,
        *,
        max_tokens: int | None = None,
    ) -> SelectedContext:
        task = task_type or self.config.selection.default_task
        return self.selector.select_context(analysis, task, max_tokens=max_tokens)

    def optimized_context(self, analysis: ProjectAnalysis, strategy: str | None = None) -> List[DocumentRecord]:
        """Select from every document using the depth strategy's token budget."""
        budget = self.budget_manager.create_budget(strategy or analysis.meta.strategy)
        return self.budget_manager.optimize(analysis.full_text.documents, budget)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

    def _scanner(self, strategy: str) -> CorpusScanner:
        return CorpusScanner(
            self.root,
            cache=self.cache,
            prioritizer=self.prioritizer,
            max_depth=scan_depth_for(strategy),
        )


__all__ = ["ProjectAnalyzer"]
