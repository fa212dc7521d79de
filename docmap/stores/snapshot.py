"""JSON snapshot of the export map handed to the rendering layer."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..context import RunContext
from ..coverage.stats import CorpusSummary
from ..models import CategorizedTestCase, CoverageAnalysis, ExportRecord

SNAPSHOT_VERSION = 1


class SnapshotStore:
    """Writes `details.json`: every export record plus its coverage analysis."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def build(
        self,
        context: RunContext,
        *,
        summary: Optional[CorpusSummary] = None,
        generated_at: Optional[datetime] = None,
    ) -> Dict[str, object]:
        timestamp = generated_at or datetime.now(UTC)
        return {
            "version": SNAPSHOT_VERSION,
            "details": {key: record_to_dict(record) for key, record in context.export.items()},
            "modules": {
                key: [_case_ref(case) for case in cases]
                for key, cases in context.module_tests.items()
            },
            "moduleDescriptions": dict(context.module_descriptions),
            "testSummary": summary_to_dict(summary) if summary is not None else None,
            "generatedAt": timestamp.isoformat().replace("+00:00", "Z"),
        }

    def write(
        self,
        context: RunContext,
        *,
        summary: Optional[CorpusSummary] = None,
        generated_at: Optional[datetime] = None,
    ) -> Path:
        payload = self.build(context, summary=summary, generated_at=generated_at)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        return self._path


def record_to_dict(record: ExportRecord) -> Dict[str, object]:
    data: Dict[str, object] = {
        "name": record.name,
        "type": record.kind.value,
        "moduleName": record.module,
        "description": record.description,
        "filePath": record.path,
        "related": {key: list(values) for key, values in record.related.items()},
        "testCoverage": coverage_to_dict(record.coverage) if record.coverage else None,
    }
    if record.route:
        data["route"] = record.route
    if record.app:
        data["app"] = record.app
    return data


def coverage_to_dict(analysis: CoverageAnalysis) -> Dict[str, object]:
    return {
        "hasTest": analysis.has_test,
        "totalTests": analysis.total_tests,
        "coverageScore": analysis.coverage_score,
        "status": analysis.status,
        "byCategory": {
            category.value: [_case_detail(case) for case in cases]
            for category, cases in analysis.by_category.items()
        },
        "missingPatterns": list(analysis.missing_patterns),
        "recommendations": list(analysis.recommendations),
    }


def summary_to_dict(summary: CorpusSummary) -> Dict[str, object]:
    return {
        "totalFiles": summary.total_files,
        "totalTests": summary.total_tests,
        "unitFiles": summary.unit_files,
        "unitTests": summary.unit_tests,
        "e2eFiles": summary.e2e_files,
        "e2eTests": summary.e2e_tests,
        "files": [
            {
                "file": stats.file,
                "framework": stats.framework,
                "tests": stats.tests,
                "kind": stats.module.kind,
                "module": stats.module.name,
            }
            for stats in summary.files
        ],
    }


def _case_ref(case: CategorizedTestCase) -> Dict[str, object]:
    return {
        "name": case.case.it,
        "describe": case.case.describe,
        "file": case.case.file,
        "line": case.case.line,
        "category": case.category.value,
    }


def _case_detail(case: CategorizedTestCase) -> Dict[str, object]:
    detail: Dict[str, object] = {
        "name": case.case.it,
        "file": case.case.file,
        "line": case.case.line,
        "summary": case.display_summary,
    }
    optional: List[tuple[str, Optional[str]]] = [
        ("purpose", case.case.purpose),
        ("expected", case.case.expected),
    ]
    for key, value in optional:
        if value:
            detail[key] = value
    return detail


__all__ = [
    "SNAPSHOT_VERSION",
    "SnapshotStore",
    "coverage_to_dict",
    "record_to_dict",
    "summary_to_dict",
]
