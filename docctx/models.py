"""Core data models shared across docctx components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from .constants import empty_category_counts


@dataclass
class DocumentRecord:
    """One Markdown file with its derived category, priority and token cost."""

    path: str
    relative_path: str
    content: str
    token_count: int
    priority: float
    category: str
    last_modified: datetime
    size: int
    truncated: bool = False


@dataclass
class ProjectMetadata:
    """Descriptive project facts read from a manifest."""

    name: str
    description: str = ""
    version: str = "1.0.0"
    author: Optional[str] = None
    license: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    repository_url: Optional[str] = None
    homepage: Optional[str] = None


@dataclass
class Dependency:
    """A declared package dependency."""

    name: str
    version: str
    type: str
    category: str


@dataclass
class ScriptInfo:
    """A runnable project script and what it is for."""

    name: str
    command: str
    description: str


@dataclass
class TechStackEntry:
    """A language or framework detected from project files."""

    language: str
    category: str
    confidence: float
    framework: Optional[str] = None


@dataclass
class ParsedDocument:
    """Semi-structured view of a primary document."""

    record: DocumentRecord
    title: str
    sections: List[str]
    code_blocks: List[str]
    summary: str

    @property
    def path(self) -> str:
        return self.record.path


@dataclass
class ProjectFeature:
    """A bullet-point feature claim lifted from the root README."""

    name: str
    description: str
    importance: float
    category: str = "general"


@dataclass
class StructuredLayer:
    metadata: ProjectMetadata
    tech_stack: List[TechStackEntry] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)
    scripts: List[ScriptInfo] = field(default_factory=list)
    features: List[ProjectFeature] = field(default_factory=list)


@dataclass
class SemiStructuredLayer:
    readme: Optional[ParsedDocument] = None
    changelog: Optional[ParsedDocument] = None
    user_guide: Optional[ParsedDocument] = None
    primary_docs: List[ParsedDocument] = field(default_factory=list)


@dataclass
class FullTextLayer:
    """Every scanned document plus aggregate statistics."""

    documents: List[DocumentRecord] = field(default_factory=list)
    total_tokens: int = 0
    average_priority: float = 0.0
    categories: Dict[str, int] = field(default_factory=empty_category_counts)


@dataclass
class AnalysisMeta:
    analyzed_at: datetime
    total_files: int
    cache_hits: int
    strategy: str


@dataclass
class ProjectAnalysis:
    """Aggregate result of one analysis pass over a project."""

    root: str
    structured: StructuredLayer
    semi_structured: SemiStructuredLayer
    full_text: FullTextLayer
    meta: AnalysisMeta


@dataclass(frozen=True)
class SelectionStrategy:
    """Which categories, weights and token ceiling a task type may use."""

    task_type: str
    required_categories: Tuple[str, ...]
    optional_categories: Tuple[str, ...]
    priority_weights: Mapping[str, float]
    max_tokens: int
    include_structured: bool = True
    include_semi_structured: bool = True


@dataclass(frozen=True)
class SelectedContext:
    """Documents chosen for one downstream task, within its token ceiling."""

    structured: Optional[StructuredLayer]
    semi_structured: Optional[SemiStructuredLayer]
    documents: Tuple[DocumentRecord, ...]
    total_tokens: int
    strategy: SelectionStrategy
    rationale: str
    max_tokens: int
    considered: int


@dataclass
class CacheEntry:
    document: DocumentRecord
    mtime_ns: int
    hash: str


@dataclass(frozen=True)
class CacheStats:
    size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0
