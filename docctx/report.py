"""JSON-friendly views of analyses and selections."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Dict, Mapping

from .models import DocumentRecord, ProjectAnalysis, SelectedContext


def analysis_to_dict(analysis: ProjectAnalysis, *, include_content: bool = False) -> Dict[str, Any]:
    """Summarise an analysis; document bodies are omitted unless requested."""
    full_text = analysis.full_text
    semi = analysis.semi_structured
    return {
        "root": analysis.root,
        "meta": to_jsonable(analysis.meta),
        "structured": to_jsonable(analysis.structured),
        "semi_structured": {
            "readme": semi.readme.record.relative_path if semi.readme else None,
            "changelog": semi.changelog.record.relative_path if semi.changelog else None,
            "user_guide": semi.user_guide.record.relative_path if semi.user_guide else None,
            "primary_docs": [
                {"path": doc.record.relative_path, "title": doc.title, "summary": doc.summary}
                for doc in semi.primary_docs
            ],
        },
        "full_text": {
            "total_tokens": full_text.total_tokens,
            "average_priority": round(full_text.average_priority, 2),
            "categories": dict(full_text.categories),
            "documents": [document_to_dict(doc, include_content=include_content) for doc in full_text.documents],
        },
    }


def selection_to_dict(selected: SelectedContext, *, include_content: bool = False) -> Dict[str, Any]:
    return {
        "task_type": selected.strategy.task_type,
        "total_tokens": selected.total_tokens,
        "max_tokens": selected.max_tokens,
        "considered": selected.considered,
        "rationale": selected.rationale,
        "structured": to_jsonable(selected.structured),
        "documents": [document_to_dict(doc, include_content=include_content) for doc in selected.documents],
    }


def document_to_dict(document: DocumentRecord, *, include_content: bool = False) -> Dict[str, Any]:
    data = to_jsonable(document)
    if not include_content:
        data.pop("content", None)
    return data


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, mappings and datetimes into plain JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: to_jsonable(getattr(value, field.name)) for field in dataclasses.fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


__all__ = ["analysis_to_dict", "document_to_dict", "selection_to_dict", "to_jsonable"]
