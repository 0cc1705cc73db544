"""Project documentation analysis and token-budgeted context selection."""

from .analysis import ProjectAnalyzer
from .budget import ContextBudget, ContextBudgetManager
from .config import ConfigError, DocCtxConfig, load_config
from .corpus_scanner import CorpusScanner
from .incremental import IncrementalContextBuilder
from .insights import ReadinessReport, assess_readiness, build_recommendations
from .manifests import StructuredExtractor
from .models import ProjectAnalysis, SelectedContext, SelectionStrategy
from .scoring import DocumentPrioritizer, categorize_document
from .selection import ContextSelector
from .stores import DocumentCache
from .tokens import estimate_tokens

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ContextBudget",
    "ContextBudgetManager",
    "ContextSelector",
    "CorpusScanner",
    "DocCtxConfig",
    "DocumentCache",
    "DocumentPrioritizer",
    "IncrementalContextBuilder",
    "ProjectAnalysis",
    "ProjectAnalyzer",
    "ReadinessReport",
    "SelectedContext",
    "SelectionStrategy",
    "StructuredExtractor",
    "assess_readiness",
    "build_recommendations",
    "categorize_document",
    "estimate_tokens",
    "load_config",
]
