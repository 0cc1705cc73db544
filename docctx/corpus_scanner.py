"""Markdown corpus scanning with ignore rules and cached parsing."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from .config import CONFIG_FILENAME, ConfigError, load_config
from .constants import empty_category_counts
from .logging import get_logger
from .models import DocumentRecord, FullTextLayer
from .scoring import DocumentPrioritizer
from .stores import DocumentCache
from .tokens import estimate_tokens

_EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "build",
    "coverage",
    "__pycache__",
    "venv",
    "target",
}

MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True)
class IgnoreRule:
    """One ``.gitignore`` line or ``exclude_paths`` entry.

    A pattern containing a slash is anchored at the project root; one without
    is tried against every path component. A path is matched when it or any
    of its parent directories is.
    """

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, line: str, *, allow_negation: bool = True) -> IgnoreRule | None:
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = allow_negation and text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(pattern=text, directory_only=directory_only, anchored=anchored, negate=negate)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        parts = rel_path.split("/")
        for index in range(len(parts)):
            candidate = "/".join(parts[: index + 1]) if self.anchored else parts[index]
            candidate_is_dir = is_dir or index < len(parts) - 1
            if self.directory_only and not candidate_is_dir:
                continue
            if fnmatchcase(candidate, self.pattern):
                return True
        return False


def _read_gitignore(path: Path) -> List[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError):
        get_logger("scanner").warning("Could not read %s; ignoring it", path)
        return []


def _read_config_excludes(path: Path) -> List[str]:
    try:
        return list(load_config(path).analysis.exclude_paths)
    except ConfigError as exc:
        get_logger("scanner").warning("Ignoring exclude_paths from %s: %s", path.name, exc)
        return []


def load_ignore_rules(root: Path) -> List[IgnoreRule]:
    """Rules from ``.gitignore`` followed by the config's ``exclude_paths``."""
    parsed = [IgnoreRule.parse(line) for line in _read_gitignore(root / ".gitignore")]
    parsed.extend(
        IgnoreRule.parse(pattern, allow_negation=False)
        for pattern in _read_config_excludes(root / CONFIG_FILENAME)
    )
    return [rule for rule in parsed if rule is not None]


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    # Last matching rule wins, so a later "!pattern" can re-include a path.
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _is_skipped_name(name: str) -> bool:
    return name.startswith(".") or name in _EXCLUDED_DIRS


def is_markdown(path: str) -> bool:
    return path.lower().endswith(MARKDOWN_SUFFIX)


def summarize_documents(documents: Sequence[DocumentRecord]) -> FullTextLayer:
    """Build the full-text layer aggregates for ``documents``."""
    categories = empty_category_counts()
    for document in documents:
        categories[document.category] = categories.get(document.category, 0) + 1
    total_tokens = sum(document.token_count for document in documents)
    average = (
        sum(document.priority for document in documents) / len(documents)
        if documents
        else 0.0
    )
    return FullTextLayer(
        documents=list(documents),
        total_tokens=total_tokens,
        average_priority=average,
        categories=categories,
    )


class CorpusScanner:
    """Walks a project tree and produces one record per Markdown file."""

    def __init__(
        self,
        root: str | Path,
        *,
        cache: DocumentCache | None = None,
        prioritizer: DocumentPrioritizer | None = None,
        max_depth: int = 4,
        rules: Sequence[IgnoreRule] | None = None,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.cache = cache if cache is not None else DocumentCache()
        self.prioritizer = prioritizer or DocumentPrioritizer()
        self.max_depth = max_depth
        self.rules = list(rules) if rules is not None else load_ignore_rules(self.root)
        self.logger = get_logger("scanner")

    def scan(self, cancel_event: threading.Event | None = None) -> FullTextLayer:
        """Return the full-text layer for every reachable Markdown file.

        Files that fail to parse and directories that cannot be listed are
        logged and skipped. ``cancel_event`` is checked between files; once it is
        set the scan stops and the documents gathered so far are returned.
        """
        documents: List[DocumentRecord] = []
        for path in self._iter_markdown(self.root, 0):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.info("Scan of %s cancelled after %d documents", self.root, len(documents))
                break
            try:
                documents.append(self.load(path))
            except (OSError, ValueError) as exc:
                self.logger.warning("Skipping %s: %s", path, exc)
        return summarize_documents(documents)

    def load(self, path: str | Path) -> DocumentRecord:
        """Return the record for ``path`` through the cache."""
        return self.cache.get_or_parse(str(path), self.parse)

    def parse(self, path: str) -> DocumentRecord:
        """Read and score one Markdown file, bypassing the cache."""
        file_path = Path(path)
        content = file_path.read_text(encoding="utf-8")
        stat_result = file_path.stat()
        relative = self.relative_path(file_path)
        return DocumentRecord(
            path=str(file_path),
            relative_path=relative,
            content=content,
            token_count=estimate_tokens(content),
            priority=self.prioritizer.calculate_priority(relative, content),
            category=self.prioritizer.categorize(relative),
            last_modified=datetime.fromtimestamp(stat_result.st_mtime, UTC),
            size=stat_result.st_size,
        )

    def relative_path(self, path: str | Path) -> str:
        file_path = Path(path)
        try:
            return file_path.relative_to(self.root).as_posix()
        except ValueError:
            return file_path.as_posix()

    def is_tracked(self, relative_path: str) -> bool:
        """Return True when a full scan would visit the Markdown file at ``relative_path``."""
        if not is_markdown(relative_path):
            return False
        parts = [part for part in relative_path.split("/") if part]
        if not parts or len(parts) - 1 > self.max_depth:
            return False
        for index, part in enumerate(parts):
            if part.startswith("."):
                return False
            is_dir = index < len(parts) - 1
            if is_dir and part in _EXCLUDED_DIRS:
                return False
            prefix = "/".join(parts[: index + 1])
            if _should_ignore(prefix, is_dir, self.rules):
                return False
        return True

    def _iter_markdown(self, directory: Path, depth: int) -> Iterator[str]:
        if depth > self.max_depth:
            return
        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as exc:
            self.logger.warning("Error scanning directory %s: %s", directory, exc)
            return

        subdirectories: List[Tuple[str, Path]] = []
        for entry in entries:
            if _is_skipped_name(entry.name):
                continue
            rel_path = self.relative_path(entry.path)
            try:
                is_dir = entry.is_dir()
            except OSError as exc:
                self.logger.warning("Could not stat %s: %s", entry.path, exc)
                continue
            if _should_ignore(rel_path, is_dir, self.rules):
                continue
            if is_dir:
                subdirectories.append((entry.name, Path(entry.path)))
            elif is_markdown(entry.name):
                yield entry.path

        for _, subdirectory in subdirectories:
            yield from self._iter_markdown(subdirectory, depth + 1)


__all__ = [
    "CorpusScanner",
    "IgnoreRule",
    "is_markdown",
    "load_ignore_rules",
    "summarize_documents",
]
