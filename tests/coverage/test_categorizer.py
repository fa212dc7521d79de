"""Tests for keyword-precedence test categorisation."""

from __future__ import annotations

import pytest

from docmap.coverage.categorizer import (
    RULES,
    categorize,
    categorize_case,
    categorize_cases,
    classify,
    summarize,
)
from docmap.models import TestCase, TestCategory


def test_happy_path_summary() -> None:
    result = categorize("should create entity", "createEntity")

    assert result.category is TestCategory.HAPPY_PATH
    assert result.summary == "create entity"


@pytest.mark.parametrize(
    "title",
    [
        "should return unauthorized for invalid token",
        "throws an error when the session expired",
        "fails with permission denied",
        "rejects logout with an exception",
    ],
)
def test_auth_wins_over_error_keywords(title: str) -> None:
    assert categorize(title, "").category is TestCategory.AUTH


@pytest.mark.parametrize(
    ("title", "group", "expected"),
    [
        ("should throw when the name is missing", "createEntity", TestCategory.ERROR_HANDLING),
        ("rejects bad input", "createEntity", TestCategory.ERROR_HANDLING),
        ("should validate the email", "signup", TestCategory.VALIDATION),
        ("marks the name as required", "form", TestCategory.VALIDATION),
        ("handles an empty list", "table", TestCategory.EDGE_CASE),
        ("respects the maximum page size", "pager", TestCategory.EDGE_CASE),
        ("completes the checkout workflow", "checkout", TestCategory.INTEGRATION),
        ("renders rows", "EntityTable", TestCategory.HAPPY_PATH),
    ],
)
def test_keyword_precedence(title: str, group: str, expected: TestCategory) -> None:
    assert categorize(title, group).category is expected


def test_group_label_is_considered() -> None:
    assert categorize("redirects home", "when logged out after login").category is TestCategory.AUTH
    assert categorize("returns 400", "validation errors").category is TestCategory.ERROR_HANDLING


def test_error_precedes_validation() -> None:
    assert classify("should fail on invalid input") is TestCategory.ERROR_HANDLING


def test_rules_are_ordered_auth_first() -> None:
    assert [rule.category for rule in RULES][:4] == [
        TestCategory.AUTH,
        TestCategory.ERROR_HANDLING,
        TestCategory.VALIDATION,
        TestCategory.EDGE_CASE,
    ]


def test_summarize_only_strips_exact_prefix() -> None:
    assert summarize("should create entity") == "create entity"
    assert summarize("Should create entity") == "Should create entity"
    assert summarize("creates entity") == "creates entity"
    assert summarize("shouldn't crash") == "shouldn't crash"


def test_categorize_cases_preserves_order() -> None:
    cases = [
        TestCase(file="a.test.ts", describe="createEntity", it="should create entity"),
        TestCase(file="a.test.ts", describe="createEntity", it="should throw on conflict"),
    ]

    result = categorize_cases(cases)

    assert [item.case for item in result] == cases
    assert [item.category for item in result] == [
        TestCategory.HAPPY_PATH,
        TestCategory.ERROR_HANDLING,
    ]
    assert categorize_case(cases[1]).summary == "throw on conflict"
