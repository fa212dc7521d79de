"""Matches test cases to entities and module overview pages."""

from __future__ import annotations

from typing import FrozenSet, Iterable, List

from ..graph.constants import (
    GENERIC_STEMS,
    SOURCE_EXTENSIONS,
    STRUCTURAL_DIRS,
    TEST_DIRS,
    TEST_SUFFIXES,
)
from ..models import TestCase

_IGNORED_SEGMENTS = frozenset(
    {name.lower() for name in (*STRUCTURAL_DIRS, *TEST_DIRS, *GENERIC_STEMS)}
)


def normalize_path(path: str) -> str:
    """Lower-case ``path``, use forward slashes and drop test/source extensions."""
    normalized = path.replace("\\", "/").lower().lstrip("./")
    for suffix in TEST_SUFFIXES + SOURCE_EXTENSIONS:
        if normalized.endswith(suffix):
            return normalized[: -len(suffix)]
    return normalized


def path_segments(path: str) -> List[str]:
    return [segment for segment in normalize_path(path).split("/") if segment]


def meaningful_segments(path: str) -> FrozenSet[str]:
    """Segments of a normalised path that can identify an entity.

    Layout directories, test directories and routing file stems are dropped,
    and route groups lose their parentheses.
    """
    segments = set()
    for segment in path_segments(path):
        if segment.startswith("[") and segment.endswith("]"):
            continue
        if segment.startswith("(") and segment.endswith(")"):
            segment = segment[1:-1]
        if segment and segment not in _IGNORED_SEGMENTS:
            segments.add(segment)
    return frozenset(segments)


def find_entity_tests(
    entity_name: str, source_path: str, corpus: Iterable[TestCase]
) -> List[TestCase]:
    """Return the corpus entries related to one entity, in corpus order.

    A test matches when its describe label equals the entity name exactly, or
    when its file and the entity's source file share a meaningful path segment.
    """
    source_segments = meaningful_segments(source_path)
    matches: List[TestCase] = []
    for case in corpus:
        if case.describe == entity_name:
            matches.append(case)
            continue
        if source_segments and source_segments & meaningful_segments(case.file):
            matches.append(case)
    return matches


def find_module_tests(module_name: str, module_kind: str, corpus: Iterable[TestCase]) -> List[TestCase]:
    """Return tests related to a module overview page, in corpus order.

    A test matches when its file has the module name as a path segment or its
    describe label contains the name. ``module_kind`` names the overview page
    being filled and does not affect which tests match.
    """
    lowered = module_name.lower()
    if not lowered:
        return []
    matches: List[TestCase] = []
    for case in corpus:
        if _matches_module_path(case.file, lowered) or lowered in case.describe.lower():
            matches.append(case)
    return matches


def _matches_module_path(file: str, module: str) -> bool:
    return module in normalize_path(file).split("/")


__all__ = [
    "meaningful_segments",
    "normalize_path",
    "path_segments",
    "find_entity_tests",
    "find_module_tests",
]
