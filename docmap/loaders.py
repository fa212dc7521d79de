"""Readers for the scanner hand-off files (feature-map.json, test-cases.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .logging import get_logger
from .models import (
    ENTITY_TYPES,
    Entity,
    EntityKind,
    FeatureGroup,
    FeatureMap,
    TestCase,
    UNCATEGORIZED_FEATURE,
)

# JSON list name for each entity kind inside a feature group
_GROUP_KEYS: Dict[EntityKind, str] = {
    EntityKind.SCREEN: "screens",
    EntityKind.COMPONENT: "components",
    EntityKind.ACTION: "actions",
    EntityKind.MODULE: "modules",
    EntityKind.TABLE: "tables",
}

# Scalar JSON fields beyond name/path/description/app
_EXTRA_SCALARS: Dict[EntityKind, Dict[str, str]] = {
    EntityKind.SCREEN: {"route": "route"},
    EntityKind.ACTION: {"actionType": "action_type"},
    EntityKind.MODULE: {"category": "category"},
}


class CorpusError(RuntimeError):
    """Raised when an input file is missing or is not valid JSON."""


@dataclass
class ExcludedRecord:
    """A record dropped during ingestion and the reason why."""

    source: str
    location: str
    reason: str


@dataclass
class LoadReport:
    """Counts what was ingested and explains what was not."""

    source: str
    loaded: int = 0
    excluded: List[ExcludedRecord] = field(default_factory=list)

    def exclude(self, location: str, reason: str) -> None:
        record = ExcludedRecord(source=self.source, location=location, reason=reason)
        self.excluded.append(record)
        get_logger("loaders").warning("Excluded %s %s: %s", self.source, location, reason)


def load_feature_map(path: Path) -> Tuple[FeatureMap, LoadReport]:
    """Parse feature-map.json, excluding malformed entity records."""
    data = _read_json(path)
    report = LoadReport(source=path.name)
    if not isinstance(data, dict):
        raise CorpusError(f"{path.name} must contain a JSON object")
    feature_map = parse_feature_map(data, report)
    get_logger("loaders").info("Loaded %d entities from %s", report.loaded, path.name)
    return feature_map, report


def parse_feature_map(data: Mapping[str, Any], report: LoadReport) -> FeatureMap:
    features: Dict[str, FeatureGroup] = {}
    raw_features = data.get("features")
    if isinstance(raw_features, dict):
        for label, raw_group in raw_features.items():
            features[str(label)] = _parse_group(str(label), raw_group, report)
    elif raw_features is not None:
        report.exclude("features", "expected an object keyed by feature name")

    uncategorized = _parse_group(UNCATEGORIZED_FEATURE, data.get("uncategorized"), report)

    descriptions_raw = data.get("moduleDescriptions")
    descriptions = (
        {str(key): str(value) for key, value in descriptions_raw.items() if isinstance(value, str)}
        if isinstance(descriptions_raw, dict)
        else {}
    )
    generated_at = data.get("generatedAt")
    return FeatureMap(
        features=features,
        uncategorized=uncategorized,
        module_descriptions=descriptions,
        generated_at=generated_at if isinstance(generated_at, str) else None,
    )


def _parse_group(label: str, raw: Any, report: LoadReport) -> FeatureGroup:
    group = FeatureGroup()
    if raw is None:
        return group
    if not isinstance(raw, dict):
        report.exclude(label, "feature group is not an object")
        return group
    for kind, key in _GROUP_KEYS.items():
        items = raw.get(key)
        if items is None:
            continue
        if not isinstance(items, list):
            report.exclude(f"{label}.{key}", "expected a list")
            continue
        for index, item in enumerate(items):
            location = f"{label}.{key}[{index}]"
            entity = entity_from_dict(kind, item, report, location)
            if entity is not None:
                group.add(entity)
                report.loaded += 1
    return group


def entity_from_dict(
    kind: EntityKind, payload: Any, report: LoadReport, location: str
) -> Optional[Entity]:
    """Build one entity from its JSON record, or record why it was excluded."""
    if not isinstance(payload, dict):
        report.exclude(location, "record is not an object")
        return None
    name = payload.get("name")
    path = payload.get("path")
    if not isinstance(name, str) or not name.strip():
        report.exclude(location, "missing required field 'name'")
        return None
    if not isinstance(path, str) or not path.strip():
        report.exclude(location, f"{name}: missing required field 'path'")
        return None

    entity_type = ENTITY_TYPES[kind]
    kwargs: Dict[str, Any] = {
        "name": name,
        "path": path,
        "description": _as_str(payload.get("description")) or "",
        "app": _as_str(payload.get("app")),
    }
    for json_key, attr in _EXTRA_SCALARS.get(kind, {}).items():
        value = _as_str(payload.get(json_key))
        if value is not None:
            kwargs[attr] = value
    for relation in entity_type.RELATIONS:
        kwargs[relation.attr] = tuple(_as_str_list(payload.get(relation.key)))
    return entity_type(**kwargs)


def load_test_cases(path: Path) -> Tuple[List[TestCase], LoadReport]:
    """Parse test-cases.json, excluding malformed test records."""
    data = _read_json(path)
    report = LoadReport(source=path.name)
    raw_cases = data.get("testCases") if isinstance(data, dict) else data
    if not isinstance(raw_cases, list):
        raise CorpusError(f"{path.name} must contain a 'testCases' list")
    cases: List[TestCase] = []
    for index, payload in enumerate(raw_cases):
        case = case_from_dict(payload, report, f"testCases[{index}]")
        if case is not None:
            cases.append(case)
            report.loaded += 1
    get_logger("loaders").info("Loaded %d test cases from %s", len(cases), path.name)
    return cases, report


def case_from_dict(payload: Any, report: LoadReport, location: str) -> Optional[TestCase]:
    if not isinstance(payload, dict):
        report.exclude(location, "record is not an object")
        return None
    file = payload.get("file")
    title = payload.get("it")
    if not isinstance(file, str) or not file:
        report.exclude(location, "missing required field 'file'")
        return None
    if not isinstance(title, str):
        report.exclude(location, "missing required field 'it'")
        return None
    line = payload.get("line")
    return TestCase(
        file=file,
        describe=_as_str(payload.get("describe")) or "",
        it=title,
        line=line if isinstance(line, int) and not isinstance(line, bool) else 0,
        framework=_as_str(payload.get("framework")) or "jest",
        description=_as_str(payload.get("description")),
        purpose=_as_str(payload.get("purpose")),
        expected=_as_str(payload.get("expected")),
    )


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CorpusError(f"Input file not found: {path}") from exc
    except OSError as exc:
        raise CorpusError(f"Failed to read {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorpusError(f"Failed to parse {path.name}: {exc}") from exc


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


__all__ = [
    "CorpusError",
    "ExcludedRecord",
    "LoadReport",
    "entity_from_dict",
    "load_feature_map",
    "load_test_cases",
    "parse_feature_map",
    "case_from_dict",
]
