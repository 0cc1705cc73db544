"""Manifest readers and the fixed classification tables used by the extractor."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..models import ProjectFeature

PACKAGE_JSON = "package.json"
PYPROJECT = "pyproject.toml"
CARGO_TOML = "Cargo.toml"
REQUIREMENTS = "requirements.txt"

# Checked in order; the first one present is the root README.
README_FILES: Tuple[str, ...] = ("README.md", "readme.md", "README.txt", "readme.txt", "README")

# Files whose change warrants re-extracting the structured layer.
STRUCTURAL_FILES = frozenset(
    {
        PACKAGE_JSON,
        "package-lock.json",
        "yarn.lock",
        CARGO_TOML,
        "Cargo.lock",
        "go.mod",
        "go.sum",
        REQUIREMENTS,
        PYPROJECT,
        "Pipfile",
        "poetry.lock",
        "pom.xml",
        "build.gradle",
        "composer.json",
        "composer.lock",
    }
)

_REQUIREMENT_SPLIT = re.compile(r"[<>=!~;\[\s]")
_BULLET_LINE = re.compile(r"^[ \t]*[-*][ \t]+(.+)$", re.MULTILINE)


class ManifestError(ValueError):
    """Raised when a manifest exists but does not hold the expected structure."""


def read_json_manifest(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"{path.name} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{path.name} must contain a JSON object")
    return data


def read_toml_manifest(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"{path.name} is not valid TOML: {exc}") from exc


def parse_requirement_name(spec: str) -> Tuple[str, str]:
    """Split a PEP 508 style requirement into ``(name, version specifier)``."""
    stripped = spec.strip()
    name = _REQUIREMENT_SPLIT.split(stripped, 1)[0].strip()
    version = stripped[len(name):].split(";", 1)[0].strip()
    if version.startswith("["):
        version = version[version.find("]") + 1:].strip()
    return name, version or "*"


def read_requirements(path: Path) -> List[Tuple[str, str]]:
    packages: List[Tuple[str, str]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        name, version = parse_requirement_name(stripped)
        if name:
            packages.append((name, version))
    return packages


def categorize_dependency(name: str) -> str:
    """Classify a dependency by well-known name fragments."""
    lowered = name.lower()
    if any(token in lowered for token in ("react", "vue", "angular")):
        return "frontend-framework"
    if any(token in lowered for token in ("express", "koa", "fastify", "django", "flask", "fastapi")):
        return "backend-framework"
    if any(token in lowered for token in ("test", "jest", "mocha")):
        return "testing"
    if any(token in lowered for token in ("webpack", "vite", "rollup")):
        return "build-tool"
    if any(token in lowered for token in ("eslint", "prettier", "typescript")):
        return "development-tool"
    return "library"


_SCRIPT_DESCRIPTIONS: Dict[str, str] = {
    "start": "Start the application",
    "dev": "Start development server",
    "build": "Build for production",
    "test": "Run tests",
    "lint": "Lint code",
    "format": "Format code",
    "deploy": "Deploy application",
    "clean": "Clean build files",
}


def describe_script(name: str, command: str) -> str:
    return _SCRIPT_DESCRIPTIONS.get(name, f"Execute: {command}")


def extract_features(text: str) -> List[ProjectFeature]:
    """Turn README bullet lines into feature entries.

    Bullets shorter than 11 or longer than 199 characters are skipped. The
    name is the text before the first period, and importance falls by 0.1 per
    bullet line (skipped ones included) down to a floor of 0.5.
    """
    features: List[ProjectFeature] = []
    for index, match in enumerate(_BULLET_LINE.finditer(text)):
        description = match.group(1).strip()
        if not 10 < len(description) < 200:
            continue
        features.append(
            ProjectFeature(
                name=description.split(".")[0].strip(),
                description=description,
                importance=max(0.5, round(1 - index * 0.1, 2)),
            )
        )
    return features


# (indicator file, language, category, confidence)
TECH_INDICATORS: Tuple[Tuple[str, str, str, float], ...] = (
    (PACKAGE_JSON, "JavaScript", "frontend", 0.9),
    ("tsconfig.json", "TypeScript", "frontend", 0.9),
    (CARGO_TOML, "Rust", "backend", 0.9),
    (REQUIREMENTS, "Python", "backend", 0.8),
    (PYPROJECT, "Python", "backend", 0.8),
    ("go.mod", "Go", "backend", 0.9),
    ("pom.xml", "Java", "backend", 0.8),
    ("Gemfile", "Ruby", "backend", 0.8),
    ("composer.json", "PHP", "backend", 0.8),
)

# (dependency name, language, framework label, category)
FRAMEWORK_INDICATORS: Tuple[Tuple[str, str, str, str], ...] = (
    ("react", "JavaScript", "React", "frontend"),
    ("vue", "JavaScript", "Vue.js", "frontend"),
    ("angular", "JavaScript", "Angular", "frontend"),
    ("@angular/core", "JavaScript", "Angular", "frontend"),
    ("express", "JavaScript", "Express.js", "backend"),
    ("next", "JavaScript", "Next.js", "frontend"),
    ("nuxt", "JavaScript", "Nuxt.js", "frontend"),
    ("fastapi", "Python", "FastAPI", "backend"),
    ("django", "Python", "Django", "backend"),
    ("flask", "Python", "Flask", "backend"),
)


__all__ = [
    "CARGO_TOML",
    "FRAMEWORK_INDICATORS",
    "ManifestError",
    "PACKAGE_JSON",
    "PYPROJECT",
    "README_FILES",
    "REQUIREMENTS",
    "STRUCTURAL_FILES",
    "TECH_INDICATORS",
    "categorize_dependency",
    "describe_script",
    "extract_features",
    "parse_requirement_name",
    "read_json_manifest",
    "read_requirements",
    "read_toml_manifest",
]
