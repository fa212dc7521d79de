"""Tests for coverage scoring and remediation hints."""

from __future__ import annotations

import itertools

import pytest

from docmap.coverage.analyzer import (
    STATUS_COVERED,
    STATUS_NONE,
    STATUS_PARTIAL,
    AuthDetector,
    CoverageAnalyzer,
    CoverageSettings,
    bucket_by_category,
)
from docmap.coverage.constants import MISSING_PATTERN_LABELS, NO_TESTS_RECOMMENDATION, RECOMMENDATIONS
from docmap.models import TEST_CATEGORIES, CategorizedTestCase, TestCase, TestCategory


def _case(category: TestCategory, index: int = 0) -> CategorizedTestCase:
    test = TestCase(file="entities.test.ts", describe="createEntity", it=f"{category.value} {index}")
    return CategorizedTestCase(case=test, category=category, summary=test.it)


def test_zero_tests_scores_zero_with_recommendations() -> None:
    analysis = CoverageAnalyzer().analyze([], touches_auth=True, touches_storage=True)

    assert analysis.coverage_score == 0
    assert analysis.total_tests == 0
    assert not analysis.has_test
    assert analysis.status == STATUS_NONE
    assert analysis.recommendations[0] == NO_TESTS_RECOMMENDATION
    assert analysis.missing_patterns == [
        MISSING_PATTERN_LABELS[TestCategory.HAPPY_PATH],
        MISSING_PATTERN_LABELS[TestCategory.ERROR_HANDLING],
        MISSING_PATTERN_LABELS[TestCategory.AUTH],
        MISSING_PATTERN_LABELS[TestCategory.VALIDATION],
        MISSING_PATTERN_LABELS[TestCategory.EDGE_CASE],
    ]
    assert set(analysis.by_category) == set(TEST_CATEGORIES)


def test_storage_entity_without_edge_case_scores_lower() -> None:
    analyzer = CoverageAnalyzer()

    happy_only = analyzer.analyze([_case(TestCategory.HAPPY_PATH)], touches_storage=True)
    with_edge = analyzer.analyze(
        [_case(TestCategory.HAPPY_PATH), _case(TestCategory.EDGE_CASE)], touches_storage=True
    )

    assert MISSING_PATTERN_LABELS[TestCategory.EDGE_CASE] in happy_only.missing_patterns
    assert MISSING_PATTERN_LABELS[TestCategory.EDGE_CASE] not in with_edge.missing_patterns
    assert happy_only.coverage_score < with_edge.coverage_score


def test_auth_and_storage_flags_control_missing_patterns() -> None:
    analysis = CoverageAnalyzer().analyze([_case(TestCategory.HAPPY_PATH)])

    assert analysis.missing_patterns == [
        MISSING_PATTERN_LABELS[TestCategory.ERROR_HANDLING],
        MISSING_PATTERN_LABELS[TestCategory.VALIDATION],
    ]
    assert analysis.recommendations == [
        RECOMMENDATIONS[TestCategory.ERROR_HANDLING],
        RECOMMENDATIONS[TestCategory.VALIDATION],
    ]


def test_recommendation_order_ignores_input_order() -> None:
    analyzer = CoverageAnalyzer()
    cases = [_case(TestCategory.VALIDATION), _case(TestCategory.INTEGRATION)]

    forward = analyzer.analyze(cases, touches_auth=True, touches_storage=True)
    backward = analyzer.analyze(list(reversed(cases)), touches_auth=True, touches_storage=True)

    assert forward.recommendations == backward.recommendations
    assert forward.coverage_score == backward.coverage_score


@pytest.mark.parametrize(
    ("touches_auth", "touches_storage"), list(itertools.product([False, True], repeat=2))
)
def test_filling_an_empty_bucket_never_lowers_the_score(
    touches_auth: bool, touches_storage: bool
) -> None:
    analyzer = CoverageAnalyzer()
    for existing in TEST_CATEGORIES:
        base = [_case(existing)]
        before = analyzer.analyze(base, touches_auth, touches_storage).coverage_score
        for added in TEST_CATEGORIES:
            if added is existing:
                continue
            after = analyzer.analyze(base + [_case(added, 1)], touches_auth, touches_storage)
            assert after.coverage_score >= before


def test_more_tests_never_lower_the_score() -> None:
    analyzer = CoverageAnalyzer()
    previous = 0
    cases = []
    for index in range(12):
        cases.append(_case(TestCategory.HAPPY_PATH, index))
        score = analyzer.analyze(cases).coverage_score
        assert score >= previous
        previous = score
    assert previous == 30 + 10 + 10


def test_score_is_capped_and_status_covered() -> None:
    cases = [_case(category, index) for index in range(2) for category in TEST_CATEGORIES]

    analysis = CoverageAnalyzer().analyze(cases, touches_auth=True, touches_storage=True)

    assert analysis.coverage_score == 100
    assert analysis.status == STATUS_COVERED
    assert analysis.missing_patterns == []
    assert analysis.recommendations == []


def test_auth_weight_only_counts_when_entity_touches_auth() -> None:
    analyzer = CoverageAnalyzer()
    cases = [_case(TestCategory.AUTH)]

    assert analyzer.analyze(cases, touches_auth=False).coverage_score == 0
    assert analyzer.analyze(cases, touches_auth=True).coverage_score == 20
    assert analyzer.analyze(cases).status == STATUS_PARTIAL


def test_custom_settings() -> None:
    settings = CoverageSettings(
        weights={TestCategory.HAPPY_PATH.value: 50},
        volume_bonuses=[(2, 25)],
        covered_threshold=60,
    )
    analyzer = CoverageAnalyzer(settings)

    one = analyzer.analyze([_case(TestCategory.HAPPY_PATH)])
    two = analyzer.analyze([_case(TestCategory.HAPPY_PATH), _case(TestCategory.ERROR_HANDLING)])

    assert (one.coverage_score, one.status) == (50, STATUS_PARTIAL)
    assert (two.coverage_score, two.status) == (75, STATUS_COVERED)


def test_settings_reject_negative_values() -> None:
    with pytest.raises(ValueError):
        CoverageSettings(weights={TestCategory.HAPPY_PATH.value: -1})
    with pytest.raises(ValueError):
        CoverageSettings(volume_bonuses=[(5, -10)])


def test_bucket_by_category_keeps_every_category() -> None:
    buckets = bucket_by_category([_case(TestCategory.AUTH), _case(TestCategory.AUTH, 1)])

    assert len(buckets[TestCategory.AUTH]) == 2
    assert buckets[TestCategory.OTHER] == []
    assert list(buckets) == list(TEST_CATEGORIES)


def test_auth_detector() -> None:
    detector = AuthDetector()

    assert detector.touches_auth("const session = await getSession();")
    assert detector.touches_auth("if (!user.ROLE) return")
    assert not detector.touches_auth("export function add(a, b) { return a + b }")
    assert not detector.touches_auth(None)
    assert not AuthDetector([]).touches_auth("getSession()")
    assert AuthDetector(["isAdmin("]).touches_auth("if (isAdmin(user))")
