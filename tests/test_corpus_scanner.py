"""Tests for docctx.corpus_scanner."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

import pytest

from docctx import corpus_scanner
from docctx.constants import DOCUMENT_CATEGORIES
from docctx.corpus_scanner import CorpusScanner, IgnoreRule, load_ignore_rules
from docctx.stores import DocumentCache
from tests._fixtures.repo_builder import RepoBuilder


def _paths(scanner: CorpusScanner) -> set[str]:
    return {document.relative_path for document in scanner.scan().documents}


def test_scan_collects_markdown_with_relative_paths(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": "# Demo\n\nHello.\n",
            "docs/overview.md": "# Overview\n",
            "docs/notes.MD": "# Notes\n",
            "src/app.py": "print('hi')\n",
        }
    )

    layer = CorpusScanner(repo_builder.path()).scan()
    by_path = {document.relative_path: document for document in layer.documents}

    assert set(by_path) == {"README.md", "docs/overview.md", "docs/notes.MD"}
    readme = by_path["README.md"]
    assert readme.path == str(repo_builder.path().resolve() / "README.md")
    assert readme.category == "readme"
    assert by_path["docs/overview.md"].category == "docs"
    assert readme.size == len("# Demo\n\nHello.\n".encode("utf-8"))
    assert readme.last_modified.tzinfo is not None


def test_category_ignores_location_of_checkout(tmp_path: Path) -> None:
    # pytest's tmp_path contains "test", which must not leak into categories
    root = tmp_path / "tests-checkout" / "project"
    root.mkdir(parents=True)
    (root / "notes.md").write_text("plain notes\n", encoding="utf-8")

    [document] = CorpusScanner(root).scan().documents

    assert document.category == "other"


def test_scan_skips_excluded_hidden_and_ignored_paths(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "drafts/\nscratch.md\n",
            ".docctx.yml": "analysis:\n  exclude_paths: ['private/']\n",
            "README.md": "# Demo\n",
            "node_modules/pkg/README.md": "# Dependency\n",
            "build/out.md": "# Output\n",
            ".github/CONTRIBUTING.md": "# Contributing\n",
            "drafts/idea.md": "# Idea\n",
            "scratch.md": "# Scratch\n",
            "private/secret.md": "# Secret\n",
            "docs/kept.md": "# Kept\n",
        }
    )

    assert _paths(CorpusScanner(repo_builder.path())) == {"README.md", "docs/kept.md"}


def test_scan_respects_max_depth(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "top.md": "# Top\n",
            "one/a.md": "# A\n",
            "one/two/b.md": "# B\n",
        }
    )

    scanner = CorpusScanner(repo_builder.path(), max_depth=1)

    assert _paths(scanner) == {"top.md", "one/a.md"}
    assert scanner.is_tracked("one/a.md")
    assert not scanner.is_tracked("one/two/b.md")


def test_is_tracked_mirrors_scan_rules(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".gitignore": "drafts/\n"})
    scanner = CorpusScanner(repo_builder.path())

    assert scanner.is_tracked("docs/guide.md")
    assert not scanner.is_tracked("docs/guide.txt")
    assert not scanner.is_tracked("drafts/idea.md")
    assert not scanner.is_tracked("node_modules/pkg/README.md")
    assert not scanner.is_tracked(".github/README.md")


def test_unreadable_document_is_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Demo\n"})
    (repo_builder.path() / "broken.md").write_bytes(b"\xff\xfe\xfa invalid utf-8")

    assert _paths(CorpusScanner(repo_builder.path())) == {"README.md"}


def test_category_counts_match_document_total(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": "# Demo\n",
            "CHANGELOG.md": "# Changes\n",
            "docs/api.md": "# API\n",
            "examples/basic.md": "# Example\n",
            "misc.md": "# Misc\n",
        }
    )

    layer = CorpusScanner(repo_builder.path()).scan()

    assert set(layer.categories) == set(DOCUMENT_CATEGORIES)
    assert sum(layer.categories.values()) == len(layer.documents) == 5
    assert layer.total_tokens == sum(document.token_count for document in layer.documents)
    assert layer.average_priority == sum(d.priority for d in layer.documents) / 5


def test_empty_project_yields_empty_layer(repo_builder: RepoBuilder) -> None:
    layer = CorpusScanner(repo_builder.path()).scan()

    assert layer.documents == []
    assert layer.total_tokens == 0
    assert layer.average_priority == 0.0
    assert all(count == 0 for count in layer.categories.values())


def test_rescan_reuses_cached_documents(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Demo\n", "docs/a.md": "# A\n"})
    cache = DocumentCache()
    scanner = CorpusScanner(repo_builder.path(), cache=cache)

    first = scanner.scan()
    second = scanner.scan()

    assert first.documents == second.documents
    stats = cache.stats()
    assert stats.misses == 2
    assert stats.hits == 2


def test_cancelled_scan_returns_partial_results(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Demo\n", "docs/a.md": "# A\n"})
    cancel = threading.Event()
    cancel.set()

    layer = CorpusScanner(repo_builder.path()).scan(cancel_event=cancel)

    assert layer.documents == []


def test_unreadable_directory_is_logged_and_skipped(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    repo_builder.write(
        {
            "README.md": "# Demo\n",
            "docs/locked.md": "# Locked\n",
            "other/x.md": "# Other\n",
        }
    )
    locked = repo_builder.path().resolve() / "docs"
    real_scandir = os.scandir

    def scandir(path):
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(corpus_scanner.os, "scandir", scandir)

    with caplog.at_level(logging.WARNING, logger="docctx.scanner"):
        paths = _paths(CorpusScanner(repo_builder.path()))

    assert paths == {"README.md", "other/x.md"}
    assert "Error scanning directory" in caplog.text


def test_ignore_rule_parsing() -> None:
    assert IgnoreRule.parse("# comment") is None
    assert IgnoreRule.parse("   ") is None
    assert IgnoreRule.parse("/") is None
    assert IgnoreRule.parse("drafts/") == IgnoreRule("drafts", directory_only=True)
    assert IgnoreRule.parse("/notes.md") == IgnoreRule("notes.md", anchored=True)
    assert IgnoreRule.parse("docs/internal") == IgnoreRule("docs/internal", anchored=True)
    assert IgnoreRule.parse("!keep.md") == IgnoreRule("keep.md", negate=True)
    assert IgnoreRule.parse("!keep.md", allow_negation=False) == IgnoreRule("!keep.md")


def test_ignore_rule_matching() -> None:
    anywhere = IgnoreRule.parse("*.draft.md")
    rooted = IgnoreRule.parse("/notes.md")
    directory = IgnoreRule.parse("docs/internal/")
    assert anywhere and rooted and directory

    assert anywhere.matches("docs/a.draft.md", is_dir=False)
    assert rooted.matches("notes.md", is_dir=False)
    assert not rooted.matches("docs/notes.md", is_dir=False)
    assert directory.matches("docs/internal", is_dir=True)
    assert directory.matches("docs/internal/deep/page.md", is_dir=False)
    assert not directory.matches("docs/internal", is_dir=False)


def test_negated_gitignore_line_reincludes_a_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "*.md\n!README.md\n",
            ".docctx.yml": "analysis:\n  exclude_paths: ['docs/internal/']\n",
            "README.md": "# Demo\n",
            "notes.md": "# Notes\n",
        }
    )

    rules = load_ignore_rules(repo_builder.path())

    assert [rule.pattern for rule in rules] == ["*.md", "README.md", "docs/internal"]
    assert _paths(CorpusScanner(repo_builder.path())) == {"README.md"}
