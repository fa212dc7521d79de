"""Constants for module inference and path normalisation."""

from __future__ import annotations

# Directories that describe project layout rather than a feature module.
STRUCTURAL_DIRS = (
    "app",
    "lib",
    "src",
    "components",
    "actions",
    "schema",
    "apps",
    "packages",
    "web",
    "admin",
    "public",
)

SOURCE_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js", ".mjs", ".cjs")

TEST_DIRS = ("__tests__", "__test__", "tests", "test", "e2e", "spec")

TEST_SUFFIXES = (
    ".test.tsx",
    ".test.ts",
    ".test.jsx",
    ".test.js",
    ".spec.tsx",
    ".spec.ts",
    ".spec.jsx",
    ".spec.js",
)

# File stems used by routing conventions; they say nothing about the entity.
GENERIC_STEMS = ("page", "index", "layout", "route", "loading", "error", "template")
