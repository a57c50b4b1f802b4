"""Configuration loading for stubgen (.stubgen.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .logging import get_logger

CONFIG_FILENAME = ".stubgen.yml"

logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file or a filter pattern is invalid."""


@dataclass
class SelectionConfig:
    """Default test-candidate filters."""

    only: Optional[str] = None
    exclude: Optional[str] = None
    exported: bool = False
    existing_tests: List[str] = field(default_factory=list)


@dataclass
class StubgenConfig:
    """Represents the settings defined in .stubgen.yml."""

    root: Path
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    workers: Optional[int] = None


def load_config(config_path: Path) -> StubgenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent

    if not config_file.exists():
        logger.debug("No %s found at %s; using defaults", CONFIG_FILENAME, root)
        return StubgenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    selection_data = _section(data, "selection")
    selection = SelectionConfig(
        only=_optional(selection_data, "only", str, "selection"),
        exclude=_optional(selection_data, "exclude", str, "selection"),
        exported=_optional(selection_data, "exported", bool, "selection") or False,
        existing_tests=_name_list(selection_data, "existing_tests", "selection"),
    )

    # Validate patterns early so a bad config fails before any planning starts.
    compile_pattern(selection.only)
    compile_pattern(selection.exclude)

    workers = _optional(data, "workers", int, None)
    if workers is not None and workers < 1:
        raise ConfigError("workers must be a positive integer")

    return StubgenConfig(root=root, selection=selection, workers=workers)


def compile_pattern(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile a function-name filter; blank patterns mean no constraint."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Invalid pattern {pattern!r}: {exc}") from exc


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
    return {} if loaded is None else loaded


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return value


def _optional(data: Dict[str, Any], key: str, kind: type, section: Optional[str]) -> Any:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; a YAML `true` is not a worker count.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        label = f"{section}.{key}" if section else key
        raise ConfigError(f"{label} must be of type {kind.__name__}, got {value!r}")
    return value


def _name_list(data: Dict[str, Any], key: str, section: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{section}.{key} must be a list of test names")
    return list(value)


def merge_existing_tests(*groups: Iterable[str]) -> List[str]:
    """Combine test-name collections, keeping first-seen order and dropping repeats."""
    seen: List[str] = []
    for group in groups:
        for name in group:
            if name not in seen:
                seen.append(name)
    return seen


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "SelectionConfig",
    "StubgenConfig",
    "compile_pattern",
    "load_config",
    "merge_existing_tests",
]
