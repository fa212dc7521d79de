"""Union-merging of entity records rediscovered from several source roots."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from ..models import Entity, Module

E = TypeVar("E", bound=Entity)


def union(*lists: Iterable[str]) -> Tuple[str, ...]:
    """Ordered set union: first occurrence wins, exact-string comparison."""
    seen: Dict[str, None] = {}
    for values in lists:
        for value in values:
            if value not in seen:
                seen[value] = None
    return tuple(seen)


def merge_entities(existing: E, incoming: E) -> E:
    """Return a new record combining two records of the same kind.

    Relation lists become the ordered union of both inputs. Scalars keep the
    first non-empty value; a later record never overwrites one already set.
    """
    if type(existing) is not type(incoming):
        raise TypeError(
            f"Cannot merge {type(existing).__name__} with {type(incoming).__name__}"
        )
    changes: Dict[str, object] = {}
    for relation in existing.RELATIONS:
        changes[relation.attr] = union(
            getattr(existing, relation.attr), getattr(incoming, relation.attr)
        )
    for attr in existing.SCALARS:
        if not getattr(existing, attr) and getattr(incoming, attr):
            changes[attr] = getattr(incoming, attr)
    return replace(existing, **changes)


def dedupe_relations(entity: E) -> E:
    """Return ``entity`` with duplicate entries removed from each relation list."""
    changes = {
        relation.attr: union(getattr(entity, relation.attr)) for relation in entity.RELATIONS
    }
    return replace(entity, **changes)


def merge_by_key(records: Iterable[Tuple[Hashable, E]]) -> List[Tuple[Hashable, E]]:
    """Fold ``(key, record)`` pairs into one record per key, in first-seen order."""
    merged: Dict[Hashable, E] = {}
    for key, record in records:
        current = merged.get(key)
        merged[key] = dedupe_relations(record) if current is None else merge_entities(current, record)
    return list(merged.items())


def merge_modules(records: Sequence[Module]) -> List[Module]:
    """Collapse module records that share a name into a single record each."""
    return [module for _, module in merge_by_key((module.name, module) for module in records)]


__all__ = ["dedupe_relations", "merge_by_key", "merge_entities", "merge_modules", "union"]
