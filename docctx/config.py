"""Configuration loading for docctx (.docctx.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import (
    ANALYSIS_STRATEGIES,
    DEFAULT_ANALYSIS_STRATEGY,
    DEFAULT_TASK_TYPE,
    TASK_TYPES,
)

CONFIG_FILENAME = ".docctx.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AnalysisConfig:
    """Scan depth strategy and extra exclusions."""

    strategy: str = DEFAULT_ANALYSIS_STRATEGY
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class SelectionConfig:
    """Default task type and per-task token ceilings."""

    default_task: str = DEFAULT_TASK_TYPE
    token_budgets: Dict[str, int] = field(default_factory=dict)


@dataclass
class DocCtxConfig:
    """Represents the settings defined in .docctx.yml."""

    root: Path
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)


def load_config(config_path: Path) -> DocCtxConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocCtxConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        strategy = _as_str(analysis_data.get("strategy"))
        if strategy is not None:
            if strategy not in ANALYSIS_STRATEGIES:
                raise ConfigError(
                    f"analysis.strategy must be one of {', '.join(ANALYSIS_STRATEGIES)}; got '{strategy}'"
                )
            analysis.strategy = strategy
        analysis.exclude_paths = _as_str_list(analysis_data.get("exclude_paths"))

    selection = SelectionConfig()
    selection_data = _as_dict(data.get("selection"))
    if selection_data:
        default_task = _as_str(selection_data.get("default_task"))
        if default_task is not None:
            if default_task not in TASK_TYPES:
                raise ConfigError(f"selection.default_task '{default_task}' is not a known task type")
            selection.default_task = default_task
        selection.token_budgets = _as_budget_map(selection_data.get("token_budgets"))

    return DocCtxConfig(root=root, analysis=analysis, selection=selection)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_budget_map(value: Any) -> Dict[str, int]:
    budgets: Dict[str, int] = {}
    for task, raw in _as_dict(value).items():
        if task not in TASK_TYPES:
            raise ConfigError(f"selection.token_budgets has unknown task type '{task}'")
        budget = _as_int(raw)
        if budget is None or budget <= 0:
            raise ConfigError(f"selection.token_budgets.{task} must be a positive integer")
        budgets[task] = budget
    return budgets


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DocCtxConfig",
    "SelectionConfig",
    "load_config",
]
