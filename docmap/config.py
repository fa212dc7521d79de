"""Configuration loading for docmap (.docmap.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .coverage.constants import (
    DEFAULT_AUTH_PATTERNS,
    DEFAULT_CATEGORY_WEIGHTS,
    DEFAULT_COVERED_THRESHOLD,
    DEFAULT_VOLUME_BONUSES,
    MAX_SCORE,
)
from .graph.constants import STRUCTURAL_DIRS

CONFIG_FILENAME = ".docmap.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PathsConfig:
    """Input and output locations, resolved against the project root."""

    feature_map: Path
    test_cases: Path
    output: Path
    source_root: Path


@dataclass
class ModulesConfig:
    """Module-name inference settings."""

    structural_dirs: List[str] = field(default_factory=lambda: list(STRUCTURAL_DIRS))


@dataclass
class CoverageConfig:
    """Coverage scoring heuristics."""

    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS))
    volume_bonuses: List[Tuple[int, int]] = field(
        default_factory=lambda: list(DEFAULT_VOLUME_BONUSES)
    )
    covered_threshold: int = DEFAULT_COVERED_THRESHOLD
    auth_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_AUTH_PATTERNS))


@dataclass
class ReferencesConfig:
    """Reference derivation toggles applied before graph assembly."""

    derive_table_usage: bool = True


@dataclass
class DocMapConfig:
    """Represents the settings defined in .docmap.yml."""

    root: Path
    paths: PathsConfig
    project_name: Optional[str] = None
    modules: ModulesConfig = field(default_factory=ModulesConfig)
    coverage: CoverageConfig = field(default_factory=CoverageConfig)
    references: ReferencesConfig = field(default_factory=ReferencesConfig)
    workers: int = 1


def default_paths(root: Path) -> PathsConfig:
    """Return the conventional `.docmap/` layout under ``root``."""
    return PathsConfig(
        feature_map=root / ".docmap" / "feature-map.json",
        test_cases=root / ".docmap" / "test-cases.json",
        output=root / ".docmap" / "details.json",
        source_root=root,
    )


def load_config(config_path: Path) -> DocMapConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocMapConfig(root=root, paths=default_paths(root))

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_name = _as_str(project_data.get("name")) if project_data else None

    paths = default_paths(root)
    paths_data = _as_dict(data.get("paths"))
    if paths_data:
        paths = PathsConfig(
            feature_map=_as_path(root, paths_data.get("feature_map")) or paths.feature_map,
            test_cases=_as_path(root, paths_data.get("test_cases")) or paths.test_cases,
            output=_as_path(root, paths_data.get("output")) or paths.output,
            source_root=_as_path(root, paths_data.get("source_root")) or paths.source_root,
        )

    modules = ModulesConfig()
    modules_data = _as_dict(data.get("modules"))
    if modules_data and "structural_dirs" in modules_data:
        modules.structural_dirs = _as_str_list(modules_data.get("structural_dirs"))

    coverage = _parse_coverage(_as_dict(data.get("coverage")))

    references = ReferencesConfig()
    references_data = _as_dict(data.get("references"))
    if references_data:
        derive = _as_bool(references_data.get("derive_table_usage"))
        if derive is not None:
            references.derive_table_usage = derive

    workers = _as_int(data.get("workers"))
    if workers is None:
        workers = 1
    if workers < 1:
        raise ConfigError("workers must be a positive integer")

    return DocMapConfig(
        root=root,
        paths=paths,
        project_name=project_name,
        modules=modules,
        coverage=coverage,
        references=references,
        workers=workers,
    )


def _parse_coverage(data: Dict[str, Any]) -> CoverageConfig:
    coverage = CoverageConfig()
    if not data:
        return coverage

    weights_data = _as_dict(data.get("weights"))
    for category, raw in weights_data.items():
        if category not in coverage.weights:
            raise ConfigError(f"Unknown coverage category in weights: {category}")
        weight = _as_int(raw)
        if weight is None or weight < 0:
            raise ConfigError(f"Coverage weight for {category} must be a non-negative integer")
        coverage.weights[category] = weight

    if "volume_bonuses" in data:
        bonuses_data = _as_dict(data.get("volume_bonuses"))
        bonuses: List[Tuple[int, int]] = []
        for threshold_raw, points_raw in bonuses_data.items():
            threshold = _as_int(threshold_raw)
            points = _as_int(points_raw)
            if threshold is None or points is None or threshold < 1 or points < 0:
                raise ConfigError(
                    "volume_bonuses must map positive test counts to non-negative points"
                )
            bonuses.append((threshold, points))
        coverage.volume_bonuses = sorted(bonuses)

    threshold = _as_int(data.get("covered_threshold"))
    if threshold is not None:
        if not 0 <= threshold <= MAX_SCORE:
            raise ConfigError(f"covered_threshold must be between 0 and {MAX_SCORE}")
        coverage.covered_threshold = threshold

    if "auth_patterns" in data:
        coverage.auth_patterns = _as_str_list(data.get("auth_patterns"))

    return coverage


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    candidate = Path(text).expanduser()
    return candidate if candidate.is_absolute() else root / candidate


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


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
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
    "CONFIG_FILENAME",
    "ConfigError",
    "CoverageConfig",
    "DocMapConfig",
    "ModulesConfig",
    "PathsConfig",
    "ReferencesConfig",
    "default_paths",
    "load_config",
]
