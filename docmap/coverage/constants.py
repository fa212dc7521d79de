"""Default heuristics for test categorisation and coverage scoring."""

from __future__ import annotations

from typing import Dict, Tuple

from ..models import TestCategory

# Points awarded once per non-empty category. Auth only counts for entities
# that touch authentication.
DEFAULT_CATEGORY_WEIGHTS: Dict[str, int] = {
    TestCategory.HAPPY_PATH.value: 30,
    TestCategory.ERROR_HANDLING.value: 25,
    TestCategory.AUTH.value: 20,
    TestCategory.VALIDATION.value: 15,
    TestCategory.EDGE_CASE.value: 10,
    TestCategory.INTEGRATION.value: 5,
    TestCategory.OTHER.value: 0,
}

# (minimum test count, bonus points); bonuses stack.
DEFAULT_VOLUME_BONUSES: Tuple[Tuple[int, int], ...] = ((5, 10), (10, 10))

DEFAULT_COVERED_THRESHOLD = 70

MAX_SCORE = 100

DEFAULT_AUTH_PATTERNS: Tuple[str, ...] = ("getSession", "requireAuth", "permission", "role")

MISSING_PATTERN_LABELS: Dict[TestCategory, str] = {
    TestCategory.HAPPY_PATH: "Happy-path tests",
    TestCategory.ERROR_HANDLING: "Error-handling tests",
    TestCategory.AUTH: "Authentication/authorization tests",
    TestCategory.VALIDATION: "Validation tests",
    TestCategory.EDGE_CASE: "Boundary/edge-case tests",
}

RECOMMENDATIONS: Dict[TestCategory, str] = {
    TestCategory.HAPPY_PATH: "Add a basic happy-path test for the expected behaviour",
    TestCategory.ERROR_HANDLING: "Test how failures and thrown errors are handled",
    TestCategory.AUTH: "Add tests for unauthenticated and insufficient-permission access",
    TestCategory.VALIDATION: "Test rejection of invalid or missing input",
    TestCategory.EDGE_CASE: "Test edge cases such as empty data, missing IDs and size limits",
}

NO_TESTS_RECOMMENDATION = "Add tests: no test cases reference this entity yet"
