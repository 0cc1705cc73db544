"""Tests for structured-layer extraction."""

from __future__ import annotations

import json

import pytest

from docctx.manifests import StructuredExtractor, categorize_dependency, describe_script, extract_features
from tests._fixtures.repo_builder import RepoBuilder


def test_package_json_metadata_dependencies_and_scripts(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": json.dumps(
                {
                    "name": "demo-app",
                    "version": "2.3.4",
                    "description": "A demo application",
                    "author": {"name": "Dana", "email": "dana@example.com"},
                    "license": "MIT",
                    "keywords": ["demo", "docs"],
                    "repository": {"type": "git", "url": "https://example.com/demo.git"},
                    "homepage": "https://example.com",
                    "dependencies": {"react": "^18.0.0", "lodash": "^4.17.0"},
                    "devDependencies": {"jest": "^29.0.0", "vite": "^5.0.0"},
                    "peerDependencies": {"express": "^4.0.0"},
                    "scripts": {"build": "vite build", "release": "npm publish"},
                }
            ),
        }
    )

    layer = StructuredExtractor().extract(repo_builder.path())

    metadata = layer.metadata
    assert metadata.name == "demo-app"
    assert metadata.version == "2.3.4"
    assert metadata.description == "A demo application"
    assert metadata.author == "Dana <dana@example.com>"
    assert metadata.license == "MIT"
    assert metadata.keywords == ["demo", "docs"]
    assert metadata.repository_url == "https://example.com/demo.git"
    assert metadata.homepage == "https://example.com"

    deps = {dependency.name: dependency for dependency in layer.dependencies}
    assert (deps["react"].type, deps["react"].category) == ("production", "frontend-framework")
    assert deps["lodash"].category == "library"
    assert (deps["jest"].type, deps["jest"].category) == ("development", "testing")
    assert deps["vite"].category == "build-tool"
    assert (deps["express"].type, deps["express"].category) == ("peer", "backend-framework")

    scripts = {script.name: script for script in layer.scripts}
    assert scripts["build"].description == "Build for production"
    assert scripts["release"].description == "Execute: npm publish"

    stack = {(entry.language, entry.framework) for entry in layer.tech_stack}
    assert ("JavaScript", None) in stack
    assert ("JavaScript", "React") in stack
    assert ("JavaScript", "Express.js") in stack


def test_pyproject_and_requirements(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "pyproject.toml": """
                [project]
                name = "pydemo"
                version = "0.4.0"
                description = "Python demo"
                keywords = ["cli"]
                dependencies = ["fastapi>=0.110", "PyYAML"]

                [project.optional-dependencies]
                test = ["pytest>=7"]

                [project.scripts]
                pydemo = "pydemo.cli:main"
            """,
            "requirements.txt": "# pinned\nfastapi==0.110.0\nrequests>=2.0\n-e .\n",
        }
    )

    layer = StructuredExtractor().extract(repo_builder.path())

    assert layer.metadata.name == "pydemo"
    assert layer.metadata.version == "0.4.0"
    assert layer.metadata.keywords == ["cli"]

    deps = {dependency.name: dependency for dependency in layer.dependencies}
    assert deps["fastapi"].version == ">=0.110"
    assert deps["fastapi"].category == "backend-framework"
    assert deps["PyYAML"].version == "*"
    assert deps["pytest"].type == "development"
    assert deps["requests"].type == "production"
    assert [dependency.name for dependency in layer.dependencies].count("fastapi") == 1

    assert [(script.name, script.command) for script in layer.scripts] == [("pydemo", "pydemo.cli:main")]

    languages = [entry.language for entry in layer.tech_stack if entry.framework is None]
    assert languages == ["Python"]
    assert any(entry.framework == "FastAPI" for entry in layer.tech_stack)


def test_cargo_manifest(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Cargo.toml": """
                [package]
                name = "rusty"
                version = "0.1.0"
                description = "Rust demo"

                [dependencies]
                serde = { version = "1.0", features = ["derive"] }
                anyhow = "1"

                [dev-dependencies]
                criterion = "0.5"
            """,
        }
    )

    layer = StructuredExtractor().extract(repo_builder.path())

    assert layer.metadata.name == "rusty"
    deps = {dependency.name: dependency for dependency in layer.dependencies}
    assert deps["serde"].version == "1.0"
    assert deps["anyhow"].version == "1"
    assert deps["criterion"].type == "development"
    assert [entry.language for entry in layer.tech_stack] == ["Rust"]


def test_missing_manifests_fall_back_to_directory_name(repo_builder: RepoBuilder) -> None:
    layer = StructuredExtractor().extract(repo_builder.path())

    assert layer.metadata.name == "repo"
    assert layer.metadata.version == "1.0.0"
    assert layer.metadata.description == ""
    assert layer.dependencies == []
    assert layer.scripts == []
    assert layer.tech_stack == []


def test_malformed_package_json_is_ignored(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{ not json"})

    layer = StructuredExtractor().extract(repo_builder.path())

    assert layer.metadata.name == "repo"
    assert layer.dependencies == []
    assert layer.scripts == []


def test_classification_tables() -> None:
    assert categorize_dependency("@vue/cli") == "frontend-framework"
    assert categorize_dependency("eslint-plugin-x") == "development-tool"
    assert categorize_dependency("left-pad") == "library"
    assert describe_script("test", "jest") == "Run tests"
    assert describe_script("custom", "make all") == "Execute: make all"


def test_features_come_from_root_readme_bullets(repo_builder: RepoBuilder) -> None:
    long_bullet = "x" * 210
    repo_builder.write(
        {
            "README.md": f"""\
                # Demo

                - Fast incremental scans. Reuses parsed files.
                - short
                * Token budgets per task type
                  - Nested bullet describing depth limits
                - {long_bullet}
                """,
            "docs/guide.md": "# Guide\n\n- A feature that only the guide mentions\n",
        }
    )

    features = StructuredExtractor().extract(repo_builder.path()).features

    assert [feature.name for feature in features] == [
        "Fast incremental scans",
        "Token budgets per task type",
        "Nested bullet describing depth limits",
    ]
    assert features[0].description == "Fast incremental scans. Reuses parsed files."
    assert [feature.importance for feature in features] == pytest.approx([1.0, 0.8, 0.7])
    assert {feature.category for feature in features} == {"general"}


def test_features_fall_back_to_plain_readme(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.txt": "Highlights\n\n* Works without any Markdown at all\n"})

    features = StructuredExtractor().extract(repo_builder.path()).features

    assert [feature.name for feature in features] == ["Works without any Markdown at all"]


def test_no_readme_means_no_features(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"docs/guide.md": "# Guide\n\n- Only a nested document lists this\n"})

    assert StructuredExtractor().extract(repo_builder.path()).features == []


def test_feature_importance_has_a_floor() -> None:
    text = "\n".join(f"- Feature number {index} does a thing" for index in range(8))

    features = extract_features(text)

    assert len(features) == 8
    assert features[4].importance == pytest.approx(0.6)
    assert [feature.importance for feature in features[5:]] == pytest.approx([0.5, 0.5, 0.5])
