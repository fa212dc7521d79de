"""Stable `module/entity` addresses and the per-kind registries that hold them."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence

from ..models import UNCATEGORIZED_MODULE, EntityKind
from .constants import SOURCE_EXTENSIONS, STRUCTURAL_DIRS

Address = str


def address_of(module: str, entity: str) -> Address:
    """Return the composite address for an entity inside a module."""
    return f"{module}/{entity}"


def infer_module_name(path: str, structural_dirs: Sequence[str] = STRUCTURAL_DIRS) -> str:
    """Derive the module an entity belongs to from its source path.

    Directories are inspected from the file upwards. A route group such as
    ``(dashboard)`` names the module directly, dynamic segments like ``[id]``
    and layout directories (``app``, ``lib``, ...) are skipped, and the first
    remaining directory wins. Without one the file stem is used. The result
    is never empty: ``uncategorized`` stands in for a path with no usable name.
    """
    segments = path.replace("\\", "/").split("/")
    file_name = _strip_extension(segments[-1])
    skipped = {name.lower() for name in structural_dirs}

    for directory in reversed(segments[:-1]):
        if directory.startswith("(") and directory.endswith(")"):
            group = directory[1:-1]
            if group:
                return group
            continue
        if directory.startswith("[") and directory.endswith("]"):
            continue
        if directory and directory.lower() not in skipped:
            return directory

    return file_name or UNCATEGORIZED_MODULE


def _strip_extension(file_name: str) -> str:
    for suffix in SOURCE_EXTENSIONS:
        if file_name.endswith(suffix):
            return file_name[: -len(suffix)]
    return file_name


class AddressRegistry:
    """Registry of known addresses for a single entity kind."""

    def __init__(self, kind: EntityKind) -> None:
        self.kind = kind
        self._modules: Dict[Address, str] = {}
        self._by_name: Dict[str, str] = {}

    def register(self, module: str, entity: str) -> Address:
        """Record ``module/entity``; registering the same pair again is a no-op."""
        address = address_of(module, entity)
        if address not in self._modules:
            self._modules[address] = module
            self._by_name.setdefault(entity, module)
        return address

    def exists(self, address: Address) -> bool:
        return address in self._modules

    def module_of(self, address: Address) -> Optional[str]:
        return self._modules.get(address)

    def find(self, entity: str) -> Optional[str]:
        """Return the first module that registered ``entity`` by bare name."""
        return self._by_name.get(entity)

    def __contains__(self, address: object) -> bool:
        return address in self._modules

    def __iter__(self) -> Iterator[Address]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)


class AddressBook:
    """One independent registry per entity kind.

    An action and a table may both be called ``users`` without colliding
    because each kind keeps its own namespace.
    """

    def __init__(self) -> None:
        self._registries: Dict[EntityKind, AddressRegistry] = {
            kind: AddressRegistry(kind) for kind in EntityKind
        }

    def registry(self, kind: EntityKind) -> AddressRegistry:
        return self._registries[EntityKind(kind)]

    def register(self, kind: EntityKind, module: str, entity: str) -> Address:
        return self.registry(kind).register(module, entity)

    def exists(self, kind: EntityKind, address: Address) -> bool:
        return self.registry(kind).exists(address)

    def module_of(self, kind: EntityKind, address: Address) -> Optional[str]:
        return self.registry(kind).module_of(address)

    def find(self, kind: EntityKind, entity: str) -> Optional[str]:
        return self.registry(kind).find(entity)

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(registry) for kind, registry in self._registries.items()}


__all__ = [
    "Address",
    "AddressBook",
    "AddressRegistry",
    "address_of",
    "infer_module_name",
]
