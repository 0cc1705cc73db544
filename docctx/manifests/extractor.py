"""Structured-layer extraction from project manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple

from ..logging import get_logger
from ..models import Dependency, ProjectFeature, ProjectMetadata, ScriptInfo, StructuredLayer, TechStackEntry
from .utils import (
    CARGO_TOML,
    FRAMEWORK_INDICATORS,
    PACKAGE_JSON,
    PYPROJECT,
    README_FILES,
    REQUIREMENTS,
    TECH_INDICATORS,
    ManifestError,
    categorize_dependency,
    describe_script,
    extract_features,
    parse_requirement_name,
    read_json_manifest,
    read_requirements,
    read_toml_manifest,
)

_NODE_DEPENDENCY_KEYS: Tuple[Tuple[str, str], ...] = (
    ("dependencies", "production"),
    ("devDependencies", "development"),
    ("peerDependencies", "peer"),
)


class StructuredExtractor:
    """Reads package.json, pyproject.toml, Cargo.toml and requirements.txt.

    Feature bullets come from the root README, the first of
    ``README_FILES`` that exists.

    Manifests are optional: a missing file contributes nothing and a malformed
    one is logged and skipped, so extraction always yields at least metadata
    derived from the directory name.
    """

    def __init__(self) -> None:
        self.logger = get_logger("manifests")

    def extract(self, root: str | Path) -> StructuredLayer:
        root_path = Path(root).expanduser().resolve()
        metadata = ProjectMetadata(name=root_path.name or "project")
        dependencies: List[Dependency] = []
        scripts: List[ScriptInfo] = []
        dependency_names: Set[str] = set()

        package_json = self._load(root_path / PACKAGE_JSON, read_json_manifest)
        if package_json is not None:
            self._apply_package_metadata(metadata, package_json)
            dependencies.extend(self._node_dependencies(package_json))
            scripts.extend(self._node_scripts(package_json))

        pyproject = self._load(root_path / PYPROJECT, read_toml_manifest)
        if pyproject is not None:
            project = _as_mapping(pyproject.get("project"))
            self._apply_pyproject_metadata(metadata, project)
            dependencies.extend(self._pyproject_dependencies(project))
            scripts.extend(self._pyproject_scripts(project))

        cargo = self._load(root_path / CARGO_TOML, read_toml_manifest)
        if cargo is not None:
            self._apply_cargo_metadata(metadata, _as_mapping(cargo.get("package")))
            dependencies.extend(self._cargo_dependencies(cargo))

        requirements_path = root_path / REQUIREMENTS
        if requirements_path.is_file():
            try:
                requirements = read_requirements(requirements_path)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Error reading %s: %s", requirements_path, exc)
            else:
                known = {dependency.name.lower() for dependency in dependencies}
                for name, version in requirements:
                    if name.lower() in known:
                        continue
                    dependencies.append(_dependency(name, version, "production"))

        dependency_names.update(dependency.name.lower() for dependency in dependencies)
        tech_stack = self._detect_tech_stack(root_path, dependency_names)

        return StructuredLayer(
            metadata=metadata,
            tech_stack=tech_stack,
            dependencies=dependencies,
            scripts=scripts,
            features=self._readme_features(root_path),
        )

    def _readme_features(self, root: Path) -> List[ProjectFeature]:
        for name in README_FILES:
            path = root / name
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Error reading %s: %s", path, exc)
                return []
            return extract_features(text)
        return []

    def _load(self, path: Path, reader: Any) -> Dict[str, Any] | None:
        if not path.is_file():
            return None
        try:
            return reader(path)
        except (OSError, UnicodeDecodeError, ManifestError) as exc:
            self.logger.warning("Error reading %s: %s", path, exc)
            return None

    # ------------------------------------------------------------------
    # package.json

    @staticmethod
    def _apply_package_metadata(metadata: ProjectMetadata, data: Mapping[str, Any]) -> None:
        metadata.name = _as_text(data.get("name")) or metadata.name
        metadata.description = _as_text(data.get("description")) or metadata.description
        metadata.version = _as_text(data.get("version")) or metadata.version
        metadata.author = _person(data.get("author"))
        metadata.license = _as_text(data.get("license"))
        metadata.homepage = _as_text(data.get("homepage"))
        metadata.keywords = _as_text_list(data.get("keywords"))
        repository = data.get("repository")
        if isinstance(repository, Mapping):
            metadata.repository_url = _as_text(repository.get("url"))
        else:
            metadata.repository_url = _as_text(repository)

    @staticmethod
    def _node_dependencies(data: Mapping[str, Any]) -> List[Dependency]:
        dependencies: List[Dependency] = []
        for key, dependency_type in _NODE_DEPENDENCY_KEYS:
            section = data.get(key)
            if not isinstance(section, Mapping):
                continue
            for name, version in section.items():
                dependencies.append(_dependency(str(name), str(version), dependency_type))
        return dependencies

    @staticmethod
    def _node_scripts(data: Mapping[str, Any]) -> List[ScriptInfo]:
        section = data.get("scripts")
        if not isinstance(section, Mapping):
            return []
        return [
            ScriptInfo(name=str(name), command=str(command), description=describe_script(str(name), str(command)))
            for name, command in section.items()
        ]

    # ------------------------------------------------------------------
    # pyproject.toml

    @staticmethod
    def _apply_pyproject_metadata(metadata: ProjectMetadata, project: Mapping[str, Any]) -> None:
        if not project:
            return
        metadata.name = _as_text(project.get("name")) or metadata.name
        metadata.description = _as_text(project.get("description")) or metadata.description
        metadata.version = _as_text(project.get("version")) or metadata.version
        authors = project.get("authors")
        if isinstance(authors, list) and authors:
            metadata.author = metadata.author or _person(authors[0])
        license_value = project.get("license")
        if isinstance(license_value, Mapping):
            license_value = license_value.get("text")
        metadata.license = metadata.license or _as_text(license_value)
        metadata.keywords = metadata.keywords or _as_text_list(project.get("keywords"))
        urls = _as_mapping(project.get("urls"))
        lowered = {str(key).lower(): value for key, value in urls.items()}
        metadata.homepage = metadata.homepage or _as_text(lowered.get("homepage"))
        metadata.repository_url = metadata.repository_url or _as_text(
            lowered.get("repository") or lowered.get("source")
        )

    @staticmethod
    def _pyproject_dependencies(project: Mapping[str, Any]) -> List[Dependency]:
        dependencies: List[Dependency] = []
        for spec in _as_text_list(project.get("dependencies")):
            name, version = parse_requirement_name(spec)
            if name:
                dependencies.append(_dependency(name, version, "production"))
        optional = _as_mapping(project.get("optional-dependencies"))
        for specs in optional.values():
            for spec in _as_text_list(specs):
                name, version = parse_requirement_name(spec)
                if name:
                    dependencies.append(_dependency(name, version, "development"))
        return dependencies

    @staticmethod
    def _pyproject_scripts(project: Mapping[str, Any]) -> List[ScriptInfo]:
        scripts = _as_mapping(project.get("scripts"))
        return [
            ScriptInfo(name=str(name), command=str(target), description=describe_script(str(name), str(target)))
            for name, target in scripts.items()
        ]

    # ------------------------------------------------------------------
    # Cargo.toml

    @staticmethod
    def _apply_cargo_metadata(metadata: ProjectMetadata, package: Mapping[str, Any]) -> None:
        if not package:
            return
        metadata.name = _as_text(package.get("name")) or metadata.name
        metadata.version = _as_text(package.get("version")) or metadata.version
        metadata.description = _as_text(package.get("description")) or metadata.description
        metadata.license = metadata.license or _as_text(package.get("license"))
        metadata.repository_url = metadata.repository_url or _as_text(package.get("repository"))
        metadata.homepage = metadata.homepage or _as_text(package.get("homepage"))
        metadata.keywords = metadata.keywords or _as_text_list(package.get("keywords"))
        authors = package.get("authors")
        if isinstance(authors, list) and authors:
            metadata.author = metadata.author or _as_text(authors[0])

    @staticmethod
    def _cargo_dependencies(cargo: Mapping[str, Any]) -> List[Dependency]:
        dependencies: List[Dependency] = []
        for key, dependency_type in (("dependencies", "production"), ("dev-dependencies", "development")):
            for name, spec in _as_mapping(cargo.get(key)).items():
                if isinstance(spec, Mapping):
                    version = _as_text(spec.get("version")) or "*"
                else:
                    version = _as_text(spec) or "*"
                dependencies.append(_dependency(str(name), version, dependency_type))
        return dependencies

    # ------------------------------------------------------------------
    # Tech stack

    @staticmethod
    def _detect_tech_stack(root: Path, dependency_names: Iterable[str]) -> List[TechStackEntry]:
        entries: List[TechStackEntry] = []
        seen: Set[Tuple[str, str | None]] = set()
        for filename, language, category, confidence in TECH_INDICATORS:
            if (language, None) in seen or not (root / filename).is_file():
                continue
            seen.add((language, None))
            entries.append(TechStackEntry(language=language, category=category, confidence=confidence))

        names = set(dependency_names)
        for dependency, language, framework, category in FRAMEWORK_INDICATORS:
            if dependency not in names or (language, framework) in seen:
                continue
            seen.add((language, framework))
            entries.append(
                TechStackEntry(language=language, category=category, confidence=0.8, framework=framework)
            )
        return entries


def _dependency(name: str, version: str, dependency_type: str) -> Dependency:
    return Dependency(
        name=name,
        version=version,
        type=dependency_type,
        category=categorize_dependency(name),
    )


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in (_as_text(entry) for entry in value) if item]


def _person(value: Any) -> str | None:
    if isinstance(value, Mapping):
        name = _as_text(value.get("name"))
        email = _as_text(value.get("email"))
        if name and email:
            return f"{name} <{email}>"
        return name or email
    return _as_text(value)


__all__ = ["StructuredExtractor"]
