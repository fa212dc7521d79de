"""Tests for union-merging of entity records."""

from __future__ import annotations

import pytest

from docmap.graph.merger import merge_by_key, merge_entities, merge_modules, union
from docmap.models import Action, Module, Table


def test_union_keeps_first_occurrence_order() -> None:
    assert union(["b", "a"], ["a", "c", "b"], ["d"]) == ("b", "a", "c", "d")
    assert union() == ()


def test_merge_module_from_two_source_roots() -> None:
    web = Module(name="entities", path="apps/web/lib/entities.ts", used_in_actions=("createUser",))
    admin = Module(
        name="entities",
        path="apps/admin/lib/entities.ts",
        used_in_actions=("createUser", "deleteUser"),
    )

    merged = merge_modules([web, admin])

    assert len(merged) == 1
    assert merged[0].used_in_actions == ("createUser", "deleteUser")
    assert merged[0].path == "apps/web/lib/entities.ts"


def test_merge_is_idempotent() -> None:
    module = Module(
        name="entities",
        path="lib/entities.ts",
        description="Entity helpers",
        used_in_screens=("EntitiesPage",),
        used_in_actions=("createUser", "deleteUser"),
        used_modules=("db",),
        category="data",
    )

    assert merge_entities(module, module) == module
    assert merge_modules([module, module, module]) == [module]


def test_merge_fills_empty_scalars_without_overwriting() -> None:
    first = Action(name="createUser", path="lib/actions/users.ts")
    second = Action(
        name="createUser",
        path="other/users.ts",
        description="Creates a user",
        action_type="mutation",
    )

    merged = merge_entities(first, second)

    assert merged.path == "lib/actions/users.ts"
    assert merged.description == "Creates a user"
    assert merged.action_type == "mutation"
    assert first.description == ""


def test_merge_rejects_mismatched_kinds() -> None:
    with pytest.raises(TypeError):
        merge_entities(Action(name="users", path="a.ts"), Table(name="users", path="b.ts"))


def test_merge_by_key_dedupes_single_records() -> None:
    table = Table(name="users", path="db.ts", used_in_actions=("a", "a", "b"))

    merged = merge_by_key([("users", table)])

    assert merged == [("users", Table(name="users", path="db.ts", used_in_actions=("a", "b")))]
