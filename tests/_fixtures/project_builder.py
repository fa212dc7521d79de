"""Helper utilities for constructing temporary docmap projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Mapping, Sequence


SAMPLE_FEATURE_MAP: dict[str, Any] = {
    "generatedAt": "2024-05-01T12:00:00Z",
    "moduleDescriptions": {"entities": "Entity management screens and actions"},
    "features": {
        "Entities": {
            "screens": [
                {
                    "name": "EntitiesPage",
                    "path": "app/(dashboard)/entities/page.tsx",
                    "route": "/entities",
                    "usedComponents": ["EntityTable", "ExternalWidget"],
                    "usedActions": ["createEntity"],
                }
            ],
            "components": [
                {
                    "name": "EntityTable",
                    "path": "components/entities/EntityTable.tsx",
                    "usedInScreens": ["EntitiesPage"],
                    "usedActions": ["deleteEntity"],
                }
            ],
            "actions": [
                {
                    "name": "createEntity",
                    "path": "lib/actions/entities.ts",
                    "description": "Creates an entity",
                    "usedInScreens": ["EntitiesPage"],
                    "dbTables": ["entities"],
                },
                {
                    "name": "deleteEntity",
                    "path": "lib/actions/entities.ts",
                    "usedInComponents": ["EntityTable"],
                    "dbTables": ["Entities "],
                },
            ],
            "modules": [
                {
                    "name": "entities",
                    "path": "lib/entities/index.ts",
                    "usedInActions": ["createUser"],
                }
            ],
            "tables": [{"name": "entities", "path": "lib/db/schema.ts"}],
        },
        "Users": {
            "actions": [
                {"name": "createUser", "path": "lib/actions/users.ts", "dbTables": []}
            ],
            "modules": [
                {
                    "name": "entities",
                    "path": "lib/entities/index.ts",
                    "description": "Entity helpers",
                    "usedInActions": ["createUser", "deleteUser"],
                }
            ],
        },
    },
    "uncategorized": {
        "components": [{"name": "Logo", "path": "Logo.tsx"}],
        "screens": [{"name": "Broken"}],
    },
}

SAMPLE_TEST_CASES: list[dict[str, Any]] = [
    {
        "file": "__tests__/lib/actions/entities.test.ts",
        "describe": "createEntity",
        "it": "should create entity",
        "line": 5,
    },
    {
        "file": "__tests__/lib/actions/entities.test.ts",
        "describe": "createEntity",
        "it": "should throw when the name is missing",
        "line": 12,
    },
    {
        "file": "tests/e2e/users.spec.ts",
        "describe": "users",
        "it": "should reject unauthorized session",
        "line": 3,
        "framework": "playwright",
    },
    {
        "file": "__tests__/lib/actions/users.test.ts",
        "describe": "createUser",
        "it": "creates a user",
        "line": 8,
        "description": "Inserts the user row",
    },
    {"describe": "orphan", "it": "has no file"},
]


class ProjectBuilder:
    """Utility for writing scanner hand-off files into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_json(self, relative: str, payload: Any) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def write_feature_map(self, payload: Mapping[str, Any] = SAMPLE_FEATURE_MAP) -> Path:
        return self.write_json(".docmap/feature-map.json", payload)

    def write_test_cases(self, cases: Sequence[Mapping[str, Any]] = SAMPLE_TEST_CASES) -> Path:
        return self.write_json(".docmap/test-cases.json", {"testCases": list(cases)})

    def write_config(self, content: str) -> Path:
        self.write({".docmap.yml": content})
        return self.root / ".docmap.yml"

    def sample(self) -> Path:
        """Write the sample feature map, test corpus and one action source file."""
        self.write_feature_map()
        self.write_test_cases()
        self.write(
            {
                "lib/actions/users.ts": """
                export async function createUser(data: FormData) {
                  await requireAuth();
                  return db.insert(users).values(data);
                }
                """,
            }
        )
        return self.root

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["ProjectBuilder", "SAMPLE_FEATURE_MAP", "SAMPLE_TEST_CASES"]
