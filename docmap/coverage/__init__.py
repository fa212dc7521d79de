"""Test correlation, categorisation and coverage scoring."""

from .analyzer import AuthDetector, CoverageAnalyzer, CoverageSettings, bucket_by_category
from .categorizer import Categorization, categorize, categorize_case, categorize_cases
from .correlator import find_entity_tests, find_module_tests
from .stats import CorpusSummary, category_stats, infer_test_module, summarize_corpus

__all__ = [
    "AuthDetector",
    "Categorization",
    "CorpusSummary",
    "CoverageAnalyzer",
    "CoverageSettings",
    "bucket_by_category",
    "categorize",
    "categorize_case",
    "categorize_cases",
    "category_stats",
    "infer_test_module",
    "summarize_corpus",
    "find_entity_tests",
    "find_module_tests",
]
