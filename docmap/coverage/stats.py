"""Corpus-level statistics for the test-case hand-off."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ..models import TEST_CATEGORIES, EntityKind, TestCase
from .categorizer import categorize_case
from .correlator import normalize_path

E2E_FRAMEWORK = "playwright"


@dataclass(frozen=True)
class TestModuleInfo:
    """Entity kind and name a test file most likely exercises."""

    __test__ = False

    kind: str
    name: str


@dataclass
class FileStats:
    file: str
    framework: str
    tests: int
    module: TestModuleInfo


@dataclass
class CorpusSummary:
    total_files: int = 0
    total_tests: int = 0
    unit_files: int = 0
    unit_tests: int = 0
    e2e_files: int = 0
    e2e_tests: int = 0
    files: List[FileStats] = field(default_factory=list)


def infer_test_module(file: str, framework: str) -> TestModuleInfo:
    """Guess which entity kind a test file covers from its location."""
    normalized = "/" + normalize_path(file)
    name = normalized.rsplit("/", 1)[-1]
    if framework == E2E_FRAMEWORK or "/e2e/" in normalized:
        return TestModuleInfo(kind=EntityKind.SCREEN.value, name=name)
    if "/actions/" in normalized:
        return TestModuleInfo(kind=EntityKind.ACTION.value, name=name)
    if "/components/" in normalized:
        return TestModuleInfo(kind=EntityKind.COMPONENT.value, name=name)
    return TestModuleInfo(kind="unknown", name=name)


def category_stats(cases: Iterable[TestCase]) -> Dict[str, int]:
    """Count test cases per category; every category is present."""
    stats = {category.value: 0 for category in TEST_CATEGORIES}
    for case in cases:
        stats[categorize_case(case).category.value] += 1
    return stats


def summarize_corpus(cases: Sequence[TestCase]) -> CorpusSummary:
    """Return per-file counts split between unit and end-to-end frameworks.

    Each file also carries the entity kind and name it most likely exercises.
    """
    per_file: Dict[str, FileStats] = {}
    for case in cases:
        stats = per_file.get(case.file)
        if stats is None:
            stats = per_file[case.file] = FileStats(
                file=case.file,
                framework=case.framework,
                tests=0,
                module=infer_test_module(case.file, case.framework),
            )
        stats.tests += 1

    summary = CorpusSummary(
        total_files=len(per_file),
        total_tests=len(cases),
        files=list(per_file.values()),
    )
    for stats in summary.files:
        if stats.framework == E2E_FRAMEWORK:
            summary.e2e_files += 1
            summary.e2e_tests += stats.tests
        else:
            summary.unit_files += 1
            summary.unit_tests += stats.tests
    return summary


__all__ = [
    "CorpusSummary",
    "FileStats",
    "TestModuleInfo",
    "category_stats",
    "infer_test_module",
    "summarize_corpus",
]
