"""Reverse-reference derivation applied to a scanned feature map."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List

from ..models import FeatureGroup, FeatureMap
from .merger import union


def _normalise_table_name(name: str) -> str:
    return name.strip().lower()


def table_usage(feature_map: FeatureMap) -> Dict[str, List[str]]:
    """Map each normalised table name to the actions that declare it in ``db_tables``."""
    usage: Dict[str, List[str]] = {}
    for _, group in feature_map.groups():
        for action in group.actions:
            for table_name in action.db_tables:
                users = usage.setdefault(_normalise_table_name(table_name), [])
                if action.name not in users:
                    users.append(action.name)
    return usage


def derive_table_usage(feature_map: FeatureMap) -> FeatureMap:
    """Return a copy whose tables list every action that touches them.

    Existing ``used_in_actions`` entries are kept first; derived names follow.
    """
    usage = table_usage(feature_map)

    def _derive(group: FeatureGroup) -> FeatureGroup:
        tables = [
            replace(
                table,
                used_in_actions=union(
                    table.used_in_actions, usage.get(_normalise_table_name(table.name), [])
                ),
            )
            for table in group.tables
        ]
        return replace(group, tables=tables)

    return replace(
        feature_map,
        features={label: _derive(group) for label, group in feature_map.features.items()},
        uncategorized=_derive(feature_map.uncategorized),
    )


__all__ = ["derive_table_usage", "table_usage"]
