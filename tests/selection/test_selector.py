"""Tests for task-aware context selection."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import List

import pytest

from docctx.constants import TASK_TYPES
from docctx.corpus_scanner import summarize_documents
from docctx.models import (
    AnalysisMeta,
    DocumentRecord,
    ProjectAnalysis,
    ProjectMetadata,
    StructuredLayer,
)
from docctx.selection import DEFAULT_STRATEGIES, ContextSelector
from docctx.semi_structured import build_semi_structured
from tests._fixtures.repo_builder import RepoBuilder, words


def _doc(relative_path: str, category: str, *, tokens: int = 100, priority: float = 50) -> DocumentRecord:
    return DocumentRecord(
        path=f"/repo/{relative_path}",
        relative_path=relative_path,
        content="abcd" * tokens,
        token_count=tokens,
        priority=priority,
        category=category,
        last_modified=datetime(2024, 1, 1, tzinfo=UTC),
        size=tokens * 4,
    )


def _analysis(documents: List[DocumentRecord]) -> ProjectAnalysis:
    return ProjectAnalysis(
        root="/repo",
        structured=StructuredLayer(metadata=ProjectMetadata(name="repo")),
        semi_structured=build_semi_structured(documents),
        full_text=summarize_documents(documents),
        meta=AnalysisMeta(
            analyzed_at=datetime(2024, 1, 1, tzinfo=UTC),
            total_files=len(documents),
            cache_hits=0,
            strategy="balanced",
        ),
    )


def test_marketing_selection_from_readme_and_guide(repo_builder: RepoBuilder) -> None:
    guide_parts = "\n\n".join(f"## Part {index}\n\n{words(160)}" for index in range(5))
    repo_builder.write(
        {
            "README.md": f"# Project\n\n## Overview\n\n{words(300)}\n\n```bash\nnpm start\n```\n",
            "docs/guide.md": f"# Guide\n\n{guide_parts}\n",
        }
    )
    analysis = repo_builder.analyze()

    selected = ContextSelector().select_context(analysis, "marketing-content", max_tokens=1000)

    assert [doc.relative_path for doc in selected.documents] == ["README.md"]
    assert selected.considered == 2
    assert selected.total_tokens <= 1000
    assert selected.max_tokens == 1000
    assert "Selected 1 of 2 documents considered (50.0%)" in selected.rationale
    assert "marketing-content" in selected.rationale
    assert selected.structured is analysis.structured
    assert selected.semi_structured is analysis.semi_structured


def test_selection_weights_priorities_without_touching_analysis() -> None:
    readme = _doc("README.md", "readme", priority=40)
    guide = _doc("docs/guide.md", "guide", priority=40)
    analysis = _analysis([readme, guide])

    selected = ContextSelector().select_context(analysis, "marketing-content")

    priorities = {doc.relative_path: doc.priority for doc in selected.documents}
    assert priorities["README.md"] == pytest.approx(40.0)
    assert priorities["docs/guide.md"] == pytest.approx(28.0)
    assert guide.priority == 40


def test_only_required_and_optional_categories_are_considered() -> None:
    analysis = _analysis(
        [
            _doc("README.md", "readme"),
            _doc("tests/notes.md", "test"),
            _doc("config.md", "config"),
        ]
    )

    selected = ContextSelector().select_context(analysis, "marketing-content")

    assert selected.considered == 1
    assert [doc.category for doc in selected.documents] == ["readme"]


def test_required_documents_fill_the_budget_first() -> None:
    analysis = _analysis(
        [
            _doc("README.md", "readme", tokens=600, priority=60),
            _doc("docs/api.md", "api", tokens=600, priority=60),
        ]
    )

    selected = ContextSelector().select_context(analysis, "api-documentation", max_tokens=1000)

    # api weighs 1.0 against readme 0.5, and api is the required category
    assert [doc.relative_path for doc in selected.documents] == ["docs/api.md"]
    assert selected.semi_structured is None
    assert selected.structured is not None


def test_unknown_task_type_falls_back_to_general() -> None:
    selector = ContextSelector()
    analysis = _analysis([_doc("README.md", "readme")])

    selected = selector.select_context(analysis, "poetry")

    assert selected.strategy == DEFAULT_STRATEGIES["general"]
    assert selector.get_strategy("poetry").task_type == "general"


def test_every_task_type_has_a_strategy() -> None:
    selector = ContextSelector()
    assert set(selector.available_strategies()) == set(TASK_TYPES)
    ceilings = [selector.get_strategy(task).max_tokens for task in TASK_TYPES]
    assert min(ceilings) == 6000
    assert max(ceilings) == 16000


def test_configured_token_budgets_override_ceilings() -> None:
    selector = ContextSelector(token_budgets={"marketing-content": 500})
    analysis = _analysis([_doc("README.md", "readme", tokens=400), _doc("docs/a.md", "docs", tokens=400)])

    selected = selector.select_context(analysis, "marketing-content")

    assert selected.max_tokens == 500
    assert len(selected.documents) == 1
    assert DEFAULT_STRATEGIES["marketing-content"].max_tokens == 8000


def test_custom_strategy_overrides_fields() -> None:
    selector = ContextSelector()
    custom = selector.create_custom_strategy("changelog", max_tokens=123, include_structured=False)
    analysis = _analysis([_doc("CHANGELOG.md", "changelog", tokens=100)])

    selected = selector.select_context(analysis, "changelog", strategy=custom)

    assert custom.task_type == "changelog"
    assert custom.required_categories == ("changelog",)
    assert selected.max_tokens == 123
    assert selected.structured is None


def test_rationale_reports_truncation_and_empty_input() -> None:
    analysis = _analysis([_doc("README.md", "readme", tokens=5000, priority=90)])
    selected = ContextSelector().select_context(analysis, "general", max_tokens=1000)

    assert selected.documents[0].truncated
    assert "Truncated: README.md." in selected.rationale

    empty = ContextSelector().select_context(_analysis([]), "general")
    assert empty.documents == ()
    assert empty.total_tokens == 0
    assert "Selected 0 of 0 documents considered (0.0%)" in empty.rationale


def test_strategy_table_requires_general() -> None:
    with pytest.raises(ValueError):
        ContextSelector({"changelog": DEFAULT_STRATEGIES["changelog"]})
