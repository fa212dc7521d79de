"""Aggregates categorised tests into a per-entity coverage report."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..models import TEST_CATEGORIES, CategorizedTestCase, CoverageAnalysis, TestCategory
from .constants import (
    DEFAULT_AUTH_PATTERNS,
    DEFAULT_CATEGORY_WEIGHTS,
    DEFAULT_COVERED_THRESHOLD,
    DEFAULT_VOLUME_BONUSES,
    MAX_SCORE,
    MISSING_PATTERN_LABELS,
    NO_TESTS_RECOMMENDATION,
    RECOMMENDATIONS,
)

STATUS_NONE = "none"
STATUS_PARTIAL = "partial"
STATUS_COVERED = "covered"


@dataclass
class CoverageSettings:
    """Tunable scoring constants. All weights and bonuses must be non-negative."""

    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS))
    volume_bonuses: Sequence[Tuple[int, int]] = DEFAULT_VOLUME_BONUSES
    covered_threshold: int = DEFAULT_COVERED_THRESHOLD

    def __post_init__(self) -> None:
        if any(weight < 0 for weight in self.weights.values()):
            raise ValueError("Coverage weights must be non-negative")
        if any(points < 0 for _, points in self.volume_bonuses):
            raise ValueError("Volume bonuses must be non-negative")

    def weight(self, category: TestCategory) -> int:
        return self.weights.get(category.value, 0)


class CoverageAnalyzer:
    """Scores test breadth for one entity and lists the missing test patterns."""

    def __init__(self, settings: CoverageSettings | None = None) -> None:
        self.settings = settings or CoverageSettings()

    def analyze(
        self,
        test_cases: Sequence[CategorizedTestCase],
        touches_auth: bool = False,
        touches_storage: bool = False,
    ) -> CoverageAnalysis:
        by_category = bucket_by_category(test_cases)
        missing = self._missing_categories(by_category, touches_auth, touches_storage)

        recommendations: List[str] = []
        if not test_cases:
            recommendations.append(NO_TESTS_RECOMMENDATION)
        recommendations.extend(RECOMMENDATIONS[category] for category in missing)

        score = self.score(by_category, len(test_cases), touches_auth)
        return CoverageAnalysis(
            total_tests=len(test_cases),
            by_category=by_category,
            missing_patterns=[MISSING_PATTERN_LABELS[category] for category in missing],
            coverage_score=score,
            recommendations=recommendations,
            status=self.status(len(test_cases), score),
        )

    def score(
        self,
        by_category: Mapping[TestCategory, Sequence[CategorizedTestCase]],
        total_tests: int,
        touches_auth: bool,
    ) -> int:
        """Breadth points for each covered category plus stacked volume bonuses.

        Zero tests always scores zero. Adding a test never lowers the score.
        """
        if total_tests == 0:
            return 0
        score = 0
        for category in TEST_CATEGORIES:
            if not by_category.get(category):
                continue
            if category is TestCategory.AUTH and not touches_auth:
                continue
            score += self.settings.weight(category)
        for threshold, points in self.settings.volume_bonuses:
            if total_tests >= threshold:
                score += points
        return min(score, MAX_SCORE)

    def status(self, total_tests: int, score: int) -> str:
        if total_tests == 0:
            return STATUS_NONE
        if score >= self.settings.covered_threshold:
            return STATUS_COVERED
        return STATUS_PARTIAL

    @staticmethod
    def _missing_categories(
        by_category: Mapping[TestCategory, Sequence[CategorizedTestCase]],
        touches_auth: bool,
        touches_storage: bool,
    ) -> List[TestCategory]:
        # Fixed order keeps recommendations stable across runs.
        expected = [
            (TestCategory.HAPPY_PATH, True),
            (TestCategory.ERROR_HANDLING, True),
            (TestCategory.AUTH, touches_auth),
            (TestCategory.VALIDATION, True),
            (TestCategory.EDGE_CASE, touches_storage),
        ]
        return [category for category, wanted in expected if wanted and not by_category[category]]


def bucket_by_category(
    test_cases: Iterable[CategorizedTestCase],
) -> Dict[TestCategory, List[CategorizedTestCase]]:
    """Group test cases by category; every category key is always present."""
    buckets: Dict[TestCategory, List[CategorizedTestCase]] = {
        category: [] for category in TEST_CATEGORIES
    }
    for case in test_cases:
        buckets[case.category].append(case)
    return buckets


class AuthDetector:
    """Decides whether source text touches authentication."""

    def __init__(self, patterns: Iterable[str] = DEFAULT_AUTH_PATTERNS) -> None:
        escaped = [re.escape(pattern) for pattern in patterns if pattern]
        self._pattern = re.compile("|".join(escaped), re.IGNORECASE) if escaped else None

    def touches_auth(self, source: str | None) -> bool:
        if not source or self._pattern is None:
            return False
        return self._pattern.search(source) is not None


__all__ = [
    "AuthDetector",
    "CoverageAnalyzer",
    "CoverageSettings",
    "STATUS_COVERED",
    "STATUS_NONE",
    "STATUS_PARTIAL",
    "bucket_by_category",
]
