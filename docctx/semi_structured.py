"""Derivation of the semi-structured layer from scanned documents."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Optional, Sequence, Tuple

from .markdown import extract_code_blocks, extract_sections, extract_title, summarize
from .models import DocumentRecord, ParsedDocument, SemiStructuredLayer

# slot -> file-name fragments that qualify a document for it
PRIMARY_SLOTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("readme", ("readme",)),
    ("changelog", ("changelog",)),
    ("user_guide", ("guide", "tutorial")),
)


def parse_document(record: DocumentRecord) -> ParsedDocument:
    return ParsedDocument(
        record=record,
        title=extract_title(record.content),
        sections=extract_sections(record.content),
        code_blocks=extract_code_blocks(record.content),
        summary=summarize(record.content),
    )


def slot_for(relative_path: str) -> Optional[str]:
    """Return the semi-structured slot a document path qualifies for, if any."""
    name = PurePosixPath(relative_path).name.lower()
    for slot, fragments in PRIMARY_SLOTS:
        if any(fragment in name for fragment in fragments):
            return slot
    return None


def build_semi_structured(documents: Sequence[DocumentRecord]) -> SemiStructuredLayer:
    """Pick one document per primary slot, preferring the shallowest path.

    Only documents from ``documents`` are considered, so every slot refers to a
    record present in the full-text layer.
    """
    chosen: Dict[str, DocumentRecord] = {}
    for record in documents:
        slot = slot_for(record.relative_path)
        if slot is None:
            continue
        current = chosen.get(slot)
        if current is None or _rank(record) < _rank(current):
            chosen[slot] = record

    parsed = {slot: parse_document(record) for slot, record in chosen.items()}
    primary_docs = [parsed[slot] for slot, _ in PRIMARY_SLOTS if slot in parsed]
    return SemiStructuredLayer(
        readme=parsed.get("readme"),
        changelog=parsed.get("changelog"),
        user_guide=parsed.get("user_guide"),
        primary_docs=primary_docs,
    )


def _rank(record: DocumentRecord) -> Tuple[int, str]:
    return (record.relative_path.count("/"), record.relative_path.lower())


__all__ = ["PRIMARY_SLOTS", "build_semi_structured", "parse_document", "slot_for"]
