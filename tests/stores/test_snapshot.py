"""Tests for the details snapshot written at the end of a run."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from docmap.context import RunContext
from docmap.coverage.analyzer import CoverageAnalyzer
from docmap.coverage.categorizer import categorize_cases
from docmap.coverage.stats import summarize_corpus
from docmap.models import EntityKind, ExportRecord, TestCase
from docmap.stores.snapshot import SNAPSHOT_VERSION, SnapshotStore, record_to_dict


def _context() -> RunContext:
    cases = [
        TestCase(
            file="__tests__/lib/actions/entities.test.ts",
            describe="createEntity",
            it="should create entity",
            line=4,
            purpose="Checks the insert",
        ),
        TestCase(
            file="__tests__/lib/actions/entities.test.ts",
            describe="createEntity",
            it="should throw on conflict",
            line=9,
            description="Duplicate names are refused",
        ),
    ]
    categorized = categorize_cases(cases)
    record = ExportRecord(
        kind=EntityKind.ACTION,
        module="entities",
        name="createEntity",
        path="lib/actions/entities.ts",
        description="Creates an entity",
        related={"usedInScreens": ["EntitiesPage"], "usedInComponents": [], "dbTables": ["entities"]},
        coverage=CoverageAnalyzer().analyze(categorized, touches_storage=True),
    )
    context = RunContext(test_cases=cases)
    context.export[record.key] = record
    context.module_tests["action/entities"] = categorized
    return context


def test_write_snapshot(tmp_path: Path) -> None:
    context = _context()
    store = SnapshotStore(tmp_path / "out" / "details.json")

    written = store.write(
        context,
        summary=summarize_corpus(context.test_cases),
        generated_at=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )

    assert written == store.path
    data = json.loads(written.read_text(encoding="utf-8"))
    assert data["version"] == SNAPSHOT_VERSION
    assert data["generatedAt"] == "2024-05-01T12:00:00Z"
    assert list(data["details"]) == ["action/entities/createEntity"]

    detail = data["details"]["action/entities/createEntity"]
    assert detail["moduleName"] == "entities"
    assert detail["filePath"] == "lib/actions/entities.ts"
    assert detail["related"]["dbTables"] == ["entities"]
    assert "route" not in detail

    coverage = detail["testCoverage"]
    assert coverage["hasTest"] is True
    assert coverage["totalTests"] == 2
    assert coverage["coverageScore"] == 55
    assert coverage["status"] == "partial"
    assert coverage["missingPatterns"] == ["Validation tests", "Boundary/edge-case tests"]
    happy = coverage["byCategory"]["happy-path"][0]
    assert happy == {
        "name": "should create entity",
        "file": "__tests__/lib/actions/entities.test.ts",
        "line": 4,
        "summary": "create entity",
        "purpose": "Checks the insert",
    }
    assert coverage["byCategory"]["error-handling"][0]["summary"] == "Duplicate names are refused"
    assert coverage["byCategory"]["auth"] == []

    assert data["modules"]["action/entities"][1] == {
        "name": "should throw on conflict",
        "describe": "createEntity",
        "file": "__tests__/lib/actions/entities.test.ts",
        "line": 9,
        "category": "error-handling",
    }
    assert data["testSummary"]["totalTests"] == 2
    assert data["testSummary"]["unitFiles"] == 1
    assert data["testSummary"]["files"] == [
        {
            "file": "__tests__/lib/actions/entities.test.ts",
            "framework": "jest",
            "tests": 2,
            "kind": "action",
            "module": "entities",
        }
    ]


def test_record_without_coverage() -> None:
    record = ExportRecord(
        kind=EntityKind.SCREEN,
        module="entities",
        name="EntitiesPage",
        path="app/entities/page.tsx",
        route="/entities",
        app="web",
    )

    data = record_to_dict(record)

    assert data["testCoverage"] is None
    assert data["route"] == "/entities"
    assert data["app"] == "web"
    assert data["type"] == "screen"


def test_build_without_summary() -> None:
    payload = SnapshotStore(Path("details.json")).build(RunContext())

    assert payload["details"] == {}
    assert payload["modules"] == {}
    assert payload["moduleDescriptions"] == {}
    assert payload["testSummary"] is None
    assert str(payload["generatedAt"]).endswith("Z")
