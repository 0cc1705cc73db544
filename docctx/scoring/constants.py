"""Hand-tuned scoring constants for document prioritisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

# Ordered (needles, points); the first file-name match wins.
_FILENAME_SIGNALS: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("readme",), 20),
    (("changelog",), 15),
    (("guide", "tutorial"), 12),
    (("api", "reference"), 10),
    (("example",), 8),
    (("test",), 3),
)

# Ordered (directory name, points); the first directory match wins.
_PATH_SIGNALS: Tuple[Tuple[str, int], ...] = (
    ("docs", 15),
    ("doc", 12),
    ("documentation", 10),
)

# Ordered (exclusive lower bound, points); the first satisfied threshold wins.
_WORD_COUNT_SIGNALS: Tuple[Tuple[int, int], ...] = (
    (500, 10),
    (200, 7),
    (50, 4),
)

_HEADING_SIGNALS: Tuple[Tuple[int, int], ...] = (
    (5, 15),
    (2, 10),
    (0, 5),
)

_TECH_KEYWORDS: Tuple[str, ...] = (
    "api",
    "architecture",
    "架构",
    "installation",
    "setup",
    "configuration",
    "usage",
    "features",
)


@dataclass(frozen=True)
class ScoringConstants:
    """Additive weights used by :class:`DocumentPrioritizer`.

    The defaults are hand-tuned rather than derived; pass a modified instance
    to experiment with alternative weights.
    """

    filename_signals: Tuple[Tuple[Tuple[str, ...], int], ...] = _FILENAME_SIGNALS
    path_signals: Tuple[Tuple[str, int], ...] = _PATH_SIGNALS
    root_level_points: int = 8
    word_count_signals: Tuple[Tuple[int, int], ...] = _WORD_COUNT_SIGNALS
    heading_signals: Tuple[Tuple[int, int], ...] = _HEADING_SIGNALS
    tech_keywords: Tuple[str, ...] = field(default=_TECH_KEYWORDS)
    points_per_keyword: int = 3
    keyword_cap: int = 15
    points_per_code_block: int = 2
    code_block_cap: int = 10
    max_score: int = 100


DEFAULT_SCORING = ScoringConstants()


__all__ = ["DEFAULT_SCORING", "ScoringConstants"]
