"""Modification-time keyed cache of parsed documents."""

from __future__ import annotations

import hashlib
import os
from typing import Callable, Dict

from ..logging import get_logger
from ..models import CacheEntry, CacheStats, DocumentRecord

ParseFn = Callable[[str], DocumentRecord]
StatFn = Callable[[str], os.stat_result]


class DocumentCache:
    """Memoises parsed documents by path, invalidated when the file's mtime advances.

    The cache performs an unsynchronised check-then-act in :meth:`get_or_parse`;
    callers must not run two analysis passes against one instance concurrently.
    """

    def __init__(self, *, stat: StatFn | None = None) -> None:
        self._stat = stat or os.stat
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self.logger = get_logger("cache")

    def get_or_parse(self, path: str, parse_fn: ParseFn) -> DocumentRecord:
        """Return the cached record for ``path`` or parse and store a fresh one.

        A cached entry is reused while its recorded mtime is at least the file's
        current mtime. When the file cannot be stat'ed or parsed, an existing
        entry is returned instead; without one the error propagates.
        """
        cached = self._entries.get(path)
        try:
            mtime_ns = _mtime_ns(self._stat(path))
            if cached is not None and cached.mtime_ns >= mtime_ns:
                self._hits += 1
                return cached.document

            document = parse_fn(path)
        except (OSError, ValueError) as exc:
            if cached is not None:
                self.logger.debug("Falling back to cached copy of %s: %s", path, exc)
                self._hits += 1
                return cached.document
            raise

        self._misses += 1
        self._entries[path] = CacheEntry(
            document=document,
            mtime_ns=mtime_ns,
            hash=_hash_content(document.content),
        )
        return document

    def get(self, path: str) -> CacheEntry | None:
        return self._entries.get(path)

    def invalidate(self, path: str) -> None:
        self._entries.pop(path, None)

    def clear(self) -> None:
        self._entries.clear()
        self.logger.debug("Document cache cleared")

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), hits=self._hits, misses=self._misses)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries


def _mtime_ns(stat_result: os.stat_result) -> int:
    return getattr(stat_result, "st_mtime_ns", int(stat_result.st_mtime * 1_000_000_000))


def _hash_content(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


__all__ = ["DocumentCache"]
