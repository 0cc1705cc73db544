"""Heuristic 0-100 relevance scoring for Markdown documents."""

from __future__ import annotations

from pathlib import PurePosixPath

from ..markdown import count_code_blocks, count_headings
from .categorizer import categorize_document
from .constants import DEFAULT_SCORING, ScoringConstants


class DocumentPrioritizer:
    """Scores documents from file name, location, volume, structure and content."""

    def __init__(self, constants: ScoringConstants | None = None) -> None:
        self.constants = constants or DEFAULT_SCORING

    def categorize(self, path: str) -> str:
        return categorize_document(path)

    def calculate_priority(self, path: str, content: str) -> int:
        """Return the clamped additive score for a root-relative ``path``."""
        score = (
            self._filename_score(path)
            + self._path_score(path)
            + self._volume_score(content)
            + self._structure_score(content)
            + self._keyword_score(content)
            + self._code_sample_score(content)
        )
        return max(0, min(self.constants.max_score, score))

    def _filename_score(self, path: str) -> int:
        name = PurePosixPath(path.replace("\\", "/")).name.lower()
        for needles, points in self.constants.filename_signals:
            if any(needle in name for needle in needles):
                return points
        return 0

    def _path_score(self, path: str) -> int:
        parts = PurePosixPath(path.replace("\\", "/").lower()).parts
        directories = parts[:-1]
        for directory, points in self.constants.path_signals:
            if directory in directories:
                return points
        if not directories:
            return self.constants.root_level_points
        return 0

    def _volume_score(self, content: str) -> int:
        words = len(content.split())
        return _threshold_points(words, self.constants.word_count_signals)

    def _structure_score(self, content: str) -> int:
        return _threshold_points(count_headings(content), self.constants.heading_signals)

    def _keyword_score(self, content: str) -> int:
        lowered = content.lower()
        matches = sum(1 for keyword in self.constants.tech_keywords if keyword in lowered)
        return min(self.constants.keyword_cap, matches * self.constants.points_per_keyword)

    def _code_sample_score(self, content: str) -> int:
        blocks = count_code_blocks(content)
        return min(self.constants.code_block_cap, blocks * self.constants.points_per_code_block)


def _threshold_points(value: int, thresholds: tuple[tuple[int, int], ...]) -> int:
    for bound, points in thresholds:
        if value > bound:
            return points
    return 0


__all__ = ["DocumentPrioritizer"]
