"""Path-based document categorisation."""

from __future__ import annotations

from pathlib import PurePosixPath


def categorize_document(path: str) -> str:
    """Map a document path to one of the fixed document categories.

    Rules run against the lower-cased file name and parent directories of the
    path as given; the first matching rule wins.
    """
    pure = PurePosixPath(path.replace("\\", "/").lower())
    name = pure.name
    directory = pure.parent.as_posix() if pure.parent != PurePosixPath(".") else ""

    if "readme" in name:
        return "readme"
    if "changelog" in name:
        return "changelog"
    if "guide" in name or "tutorial" in name:
        return "guide"
    if "api" in name or "reference" in name:
        return "api"
    if "example" in name or "example" in directory:
        return "example"
    if "test" in name or "test" in directory:
        return "test"
    if "doc" in directory:
        return "docs"
    if "config" in name:
        return "config"
    return "other"


__all__ = ["categorize_document"]
