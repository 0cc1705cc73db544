"""Incremental patching of a prior analysis for a set of changed files."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List

from .corpus_scanner import CorpusScanner, is_markdown, summarize_documents
from .logging import get_logger
from .manifests import README_FILES, STRUCTURAL_FILES, StructuredExtractor
from .models import AnalysisMeta, DocumentRecord, ProjectAnalysis
from .semi_structured import build_semi_structured

RescanFn = Callable[[], ProjectAnalysis]


class IncrementalContextBuilder:
    """Re-parses only the changed documents and manifests of a prior analysis.

    The previous :class:`ProjectAnalysis` is left untouched; a patched copy is
    returned. When a changed Markdown path has disappeared from disk the
    builder calls ``rescan`` (if given) instead of patching, since deletions
    cannot be reconciled reliably from a change list alone.
    """

    def __init__(
        self,
        scanner: CorpusScanner,
        extractor: StructuredExtractor | None = None,
    ) -> None:
        self.scanner = scanner
        self.extractor = extractor or StructuredExtractor()
        self.logger = get_logger("incremental")

    def update(
        self,
        changed_files: Iterable[str],
        previous: ProjectAnalysis,
        *,
        rescan: RescanFn | None = None,
    ) -> ProjectAnalysis:
        root = self.scanner.root
        documents: List[DocumentRecord] = list(previous.full_text.documents)
        positions: Dict[str, int] = {document.path: index for index, document in enumerate(documents)}
        documents_changed = False
        manifests_changed = False

        for raw_path in changed_files:
            path = _resolve(root, raw_path)
            key = str(path)
            relative = self.scanner.relative_path(path)
            structural = path.parent == root and (path.name in STRUCTURAL_FILES or path.name in README_FILES)
            manifests_changed = manifests_changed or structural

            if is_markdown(path.name):
                known = key in positions
                if not path.exists():
                    if not known and not self.scanner.is_tracked(relative):
                        continue
                    self.scanner.cache.invalidate(key)
                    if rescan is not None:
                        self.logger.info("%s no longer exists; running a full rescan", relative)
                        return rescan()
                    self.logger.warning("%s no longer exists; dropping its record", relative)
                    if known:
                        documents = [document for document in documents if document.path != key]
                        positions = {document.path: index for index, document in enumerate(documents)}
                        documents_changed = True
                    continue

                if not self.scanner.is_tracked(relative):
                    self.logger.debug("Ignoring %s; it is outside the scanned corpus", relative)
                    continue

                self.scanner.cache.invalidate(key)
                try:
                    record = self.scanner.load(key)
                except (OSError, ValueError) as exc:
                    self.logger.warning("Failed to update %s: %s", relative, exc)
                    continue

                if known:
                    documents[positions[key]] = record
                else:
                    positions[key] = len(documents)
                    documents.append(record)
                documents_changed = True
            elif not structural:
                self.logger.debug("Ignoring change to %s", relative)

        structured = self.extractor.extract(root) if manifests_changed else previous.structured
        if documents_changed:
            full_text = summarize_documents(documents)
            semi_structured = build_semi_structured(full_text.documents)
        else:
            full_text = previous.full_text
            semi_structured = previous.semi_structured

        return ProjectAnalysis(
            root=previous.root,
            structured=structured,
            semi_structured=semi_structured,
            full_text=full_text,
            meta=AnalysisMeta(
                analyzed_at=datetime.now(UTC),
                total_files=len(full_text.documents),
                cache_hits=previous.meta.cache_hits,
                strategy=previous.meta.strategy,
            ),
        )


def _resolve(root: Path, raw_path: str) -> Path:
    # Keys must match the scanner's, which are built under the resolved root.
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


__all__ = ["IncrementalContextBuilder"]
