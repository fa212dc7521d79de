"""Builds the entity graph, address registry and export map from a feature map."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence, Tuple

from ..context import RunContext
from ..logging import get_logger
from ..models import (
    UNCATEGORIZED_MODULE,
    Entity,
    EntityKind,
    ExportRecord,
    FeatureGroup,
    FeatureMap,
    Screen,
    export_key,
)
from .addresses import AddressBook, infer_module_name
from .constants import STRUCTURAL_DIRS
from .merger import merge_by_key


@dataclass(frozen=True)
class GraphEntry:
    kind: EntityKind
    module: str
    entity: Entity


@dataclass
class EntityGraph:
    """Result of graph assembly.

    ``by_module`` groups every entity under its inferred module, ``registry``
    answers link-existence queries and ``export`` holds one record per
    ``kind/module/name`` key. All three describe the same set of entities,
    which ``entries`` lists in processing order.
    """

    by_module: Dict[str, FeatureGroup]
    registry: AddressBook
    export: Dict[str, ExportRecord]
    entries: List[GraphEntry] = field(default_factory=list)

    def modules_of_kind(self, kind: EntityKind) -> Dict[str, List[Entity]]:
        """Return ``module -> entities`` for one kind, skipping modules without any."""
        grouped: Dict[str, List[Entity]] = {}
        for module, group in self.by_module.items():
            entities = group.of_kind(kind)
            if entities:
                grouped[module] = entities
        return grouped


class GraphAssembler:
    """Walks feature collections and produces a consistent entity graph."""

    def __init__(self, structural_dirs: Sequence[str] = STRUCTURAL_DIRS) -> None:
        self.structural_dirs = tuple(structural_dirs)
        self.logger = get_logger("graph")

    def module_for(self, entity: Entity) -> str:
        module = infer_module_name(entity.path, self.structural_dirs)
        if module == UNCATEGORIZED_MODULE:
            self.logger.debug("No module inferred for %s (%s)", entity.name, entity.path)
        return module

    def assemble(self, feature_map: FeatureMap, context: RunContext | None = None) -> EntityGraph:
        """Assemble the graph, populating ``context.registry`` and ``context.export``."""
        context = context or RunContext()
        flat = self._flatten(feature_map)

        # Shared modules are rediscovered once per application root that uses them.
        flat[EntityKind.MODULE] = merge_by_key(
            ((feature, entity.name), entity) for (feature, _), entity in flat[EntityKind.MODULE]
        )

        by_module: Dict[str, FeatureGroup] = {}
        entries: List[GraphEntry] = []
        for kind in EntityKind:
            keyed: List[Tuple[Hashable, Entity]] = []
            for _, entity in flat[kind]:
                module = self.module_for(entity)
                keyed.append(((module, entity.name), entity))

            for (module, name), entity in merge_by_key(keyed):
                by_module.setdefault(module, FeatureGroup()).add(entity)
                context.registry.register(kind, module, name)
                self._export(context.export, kind, module, entity)
                entries.append(GraphEntry(kind=kind, module=module, entity=entity))

        self.logger.debug("Registered addresses: %s", context.registry.counts())
        return EntityGraph(
            by_module=by_module,
            registry=context.registry,
            export=context.export,
            entries=entries,
        )

    def _flatten(
        self, feature_map: FeatureMap
    ) -> Dict[EntityKind, List[Tuple[Tuple[str, str], Entity]]]:
        flat: Dict[EntityKind, List[Tuple[Tuple[str, str], Entity]]] = {
            kind: [] for kind in EntityKind
        }
        for feature, group in feature_map.groups():
            for kind in EntityKind:
                for entity in group.of_kind(kind):
                    flat[kind].append(((feature, entity.name), entity))
        return flat

    def _export(
        self,
        export: Dict[str, ExportRecord],
        kind: EntityKind,
        module: str,
        entity: Entity,
    ) -> None:
        export[export_key(kind, module, entity.name)] = ExportRecord(
            kind=kind,
            module=module,
            name=entity.name,
            path=entity.path,
            description=entity.description,
            route=entity.route if isinstance(entity, Screen) else None,
            app=entity.app,
            related=entity.relations(),
        )


__all__ = ["EntityGraph", "GraphAssembler", "GraphEntry"]
