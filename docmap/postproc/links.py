"""Resolves relation references into cross-links or plain text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..graph.addresses import AddressBook, address_of
from ..models import ENTITY_TYPES, EntityKind, ExportRecord


@dataclass(frozen=True)
class RelatedLink:
    """One relation entry; ``href`` is None when it renders as plain text."""

    name: str
    module: Optional[str] = None
    href: Optional[str] = None

    @property
    def linked(self) -> bool:
        return self.href is not None


@dataclass(frozen=True)
class RelatedGroup:
    key: str
    target: Optional[EntityKind]
    links: List[RelatedLink]


class LinkResolver:
    """Turns names found in relation lists into links when the target exists."""

    HREF_FMT = "../../{kind}/{module}/{name}.html"

    def __init__(self, registry: AddressBook) -> None:
        self._registry = registry

    def resolve(self, target: Optional[EntityKind], name: str) -> RelatedLink:
        """Link ``name`` if a ``target`` entity of that name is registered.

        Unknown targets are often external references, so they fall back to
        plain text silently.
        """
        if target is None:
            return RelatedLink(name=name)
        module = self._registry.find(target, name)
        if module is None or not self._registry.exists(target, address_of(module, name)):
            return RelatedLink(name=name)
        href = self.HREF_FMT.format(kind=EntityKind(target).value, module=module, name=name)
        return RelatedLink(name=name, module=module, href=href)

    def related_groups(self, record: ExportRecord) -> List[RelatedGroup]:
        """Resolve every relation list of ``record``, in declaration order."""
        groups: List[RelatedGroup] = []
        for relation in ENTITY_TYPES[record.kind].RELATIONS:
            names = record.related.get(relation.key, [])
            links = [self.resolve(relation.target, name) for name in names]
            groups.append(RelatedGroup(key=relation.key, target=relation.target, links=links))
        return groups


__all__ = ["LinkResolver", "RelatedGroup", "RelatedLink"]
