"""Lightweight Markdown structure extraction."""

from __future__ import annotations

import re
from typing import List

_TITLE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_HEADING_LINE = re.compile(r"^#{1,6}\s+.+$", re.MULTILINE)
_HEADING_MARK = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_HEADING_PREFIX = re.compile(r"^#+\s+")
_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
_FENCE_OPEN = re.compile(r"^```\w*\n?")
_FENCE_CLOSE = re.compile(r"```$")
_INLINE_HEADING = re.compile(r"#{1,6}\s+")
_NEWLINES = re.compile(r"\n+")

SUMMARY_LENGTH = 200
UNTITLED = "Untitled"


def extract_title(content: str) -> str:
    """Return the first level-one heading, or ``Untitled``."""
    match = _TITLE.search(content)
    return match.group(1).strip() if match else UNTITLED


def extract_sections(content: str) -> List[str]:
    """Return the text of every heading, in document order."""
    return [
        _HEADING_PREFIX.sub("", line).strip()
        for line in _HEADING_LINE.findall(content)
    ]


def extract_code_blocks(content: str) -> List[str]:
    """Return the bodies of fenced code blocks without their fences."""
    blocks: List[str] = []
    for block in _FENCED_BLOCK.findall(content):
        body = _FENCE_OPEN.sub("", block, count=1)
        body = _FENCE_CLOSE.sub("", body)
        blocks.append(body.strip())
    return blocks


def count_headings(content: str) -> int:
    return len(_HEADING_MARK.findall(content))


def count_code_blocks(content: str) -> int:
    return len(_FENCED_BLOCK.findall(content))


def summarize(content: str, *, limit: int = SUMMARY_LENGTH) -> str:
    """Collapse the prose of a document into a short single-line summary.

    Code blocks and heading markers are dropped and line breaks folded into
    spaces; the result is cut to ``limit`` characters with a trailing ellipsis.
    """
    text = _FENCED_BLOCK.sub("", content)
    text = _INLINE_HEADING.sub("", text)
    text = _NEWLINES.sub(" ", text).strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text


__all__ = [
    "count_code_blocks",
    "count_headings",
    "extract_code_blocks",
    "extract_sections",
    "extract_title",
    "summarize",
]
