"""Keyword-precedence classification of test intent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..models import CategorizedTestCase, TestCase, TestCategory


@dataclass(frozen=True)
class CategoryRule:
    """Assigns ``category`` when any keyword occurs in the lower-cased text."""

    category: TestCategory
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class Categorization:
    category: TestCategory
    summary: str


# Evaluated top to bottom, first match wins. Authentication precedes error
# handling, so "should return unauthorized for invalid token" is an auth test.
RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        TestCategory.AUTH,
        ("login", "logout", "auth", "session", "token", "unauthorized", "permission"),
    ),
    CategoryRule(
        TestCategory.ERROR_HANDLING,
        ("error", "throw", "fail", "exception", "reject"),
    ),
    CategoryRule(
        TestCategory.VALIDATION,
        ("validate", "invalid", "required", "format"),
    ),
    CategoryRule(
        TestCategory.EDGE_CASE,
        ("edge case", "boundary", "limit", "empty", "null", "maximum", "minimum"),
    ),
    CategoryRule(
        TestCategory.INTEGRATION,
        ("integration", "end-to-end", "end to end", "e2e", "workflow", "scenario"),
    ),
)

FALLBACK_CATEGORY = TestCategory.HAPPY_PATH

_SHOULD_PREFIX = "should "


def classify(text: str, rules: Iterable[CategoryRule] = RULES) -> TestCategory:
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.category
    return FALLBACK_CATEGORY


def summarize(title: str) -> str:
    """Drop a leading ``"should "``; any other title is returned unchanged."""
    if title.startswith(_SHOULD_PREFIX):
        return title[len(_SHOULD_PREFIX):]
    return title


def categorize(title: str, group_label: str) -> Categorization:
    """Classify a test by its title and enclosing describe label."""
    category = classify(f"{title} {group_label}")
    return Categorization(category=category, summary=summarize(title))


def categorize_case(case: TestCase) -> CategorizedTestCase:
    result = categorize(case.it, case.describe)
    return CategorizedTestCase(case=case, category=result.category, summary=result.summary)


def categorize_cases(cases: Iterable[TestCase]) -> List[CategorizedTestCase]:
    return [categorize_case(case) for case in cases]


__all__ = [
    "Categorization",
    "CategoryRule",
    "FALLBACK_CATEGORY",
    "RULES",
    "categorize",
    "categorize_case",
    "categorize_cases",
    "classify",
    "summarize",
]
