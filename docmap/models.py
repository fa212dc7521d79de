"""Core data models shared across docmap components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterator, List, Optional, Tuple, Type

UNCATEGORIZED_FEATURE = "Uncategorized"
UNCATEGORIZED_MODULE = "uncategorized"


class EntityKind(str, Enum):
    """Discriminant for the documented entity variants."""

    SCREEN = "screen"
    COMPONENT = "component"
    ACTION = "action"
    MODULE = "module"
    TABLE = "table"


class TestCategory(str, Enum):
    """Fixed taxonomy of test intents."""

    __test__ = False

    HAPPY_PATH = "happy-path"
    ERROR_HANDLING = "error-handling"
    AUTH = "auth"
    VALIDATION = "validation"
    EDGE_CASE = "edge-case"
    INTEGRATION = "integration"
    OTHER = "other"


TEST_CATEGORIES: Tuple[TestCategory, ...] = tuple(TestCategory)


@dataclass(frozen=True)
class Relation:
    """Describes one relation-list field of an entity variant."""

    attr: str
    key: str
    target: Optional[EntityKind]


@dataclass(frozen=True)
class Entity:
    """Fields shared by every documented code unit."""

    name: str
    path: str
    description: str = ""
    app: Optional[str] = None

    kind: ClassVar[EntityKind]
    RELATIONS: ClassVar[Tuple[Relation, ...]] = ()
    SCALARS: ClassVar[Tuple[str, ...]] = ("path", "description", "app")

    def relations(self) -> Dict[str, List[str]]:
        """Return relation lists keyed by their JSON name, in declaration order."""
        return {rel.key: list(getattr(self, rel.attr)) for rel in self.RELATIONS}


@dataclass(frozen=True)
class Screen(Entity):
    route: str = ""
    used_components: Tuple[str, ...] = ()
    used_actions: Tuple[str, ...] = ()

    kind: ClassVar[EntityKind] = EntityKind.SCREEN
    RELATIONS: ClassVar[Tuple[Relation, ...]] = (
        Relation("used_components", "usedComponents", EntityKind.COMPONENT),
        Relation("used_actions", "usedActions", EntityKind.ACTION),
    )
    SCALARS: ClassVar[Tuple[str, ...]] = ("path", "description", "app", "route")


@dataclass(frozen=True)
class Component(Entity):
    used_in_screens: Tuple[str, ...] = ()
    used_in_components: Tuple[str, ...] = ()
    used_actions: Tuple[str, ...] = ()

    kind: ClassVar[EntityKind] = EntityKind.COMPONENT
    RELATIONS: ClassVar[Tuple[Relation, ...]] = (
        Relation("used_in_screens", "usedInScreens", EntityKind.SCREEN),
        Relation("used_in_components", "usedInComponents", EntityKind.COMPONENT),
        Relation("used_actions", "usedActions", EntityKind.ACTION),
    )


@dataclass(frozen=True)
class Action(Entity):
    used_in_screens: Tuple[str, ...] = ()
    used_in_components: Tuple[str, ...] = ()
    db_tables: Tuple[str, ...] = ()
    action_type: Optional[str] = None

    kind: ClassVar[EntityKind] = EntityKind.ACTION
    RELATIONS: ClassVar[Tuple[Relation, ...]] = (
        Relation("used_in_screens", "usedInScreens", EntityKind.SCREEN),
        Relation("used_in_components", "usedInComponents", EntityKind.COMPONENT),
        Relation("db_tables", "dbTables", EntityKind.TABLE),
    )
    SCALARS: ClassVar[Tuple[str, ...]] = ("path", "description", "app", "action_type")


@dataclass(frozen=True)
class Module(Entity):
    used_in_screens: Tuple[str, ...] = ()
    used_in_components: Tuple[str, ...] = ()
    used_in_actions: Tuple[str, ...] = ()
    used_in_middleware: Tuple[str, ...] = ()
    used_in_layouts: Tuple[str, ...] = ()
    used_modules: Tuple[str, ...] = ()
    used_in_modules: Tuple[str, ...] = ()
    category: Optional[str] = None

    kind: ClassVar[EntityKind] = EntityKind.MODULE
    RELATIONS: ClassVar[Tuple[Relation, ...]] = (
        Relation("used_in_screens", "usedInScreens", EntityKind.SCREEN),
        Relation("used_in_components", "usedInComponents", EntityKind.COMPONENT),
        Relation("used_in_actions", "usedInActions", EntityKind.ACTION),
        # middleware and layouts are reported by file label, never linkable
        Relation("used_in_middleware", "usedInMiddleware", None),
        Relation("used_in_layouts", "usedInLayouts", None),
        Relation("used_modules", "usedModules", EntityKind.MODULE),
        Relation("used_in_modules", "usedInModules", EntityKind.MODULE),
    )
    SCALARS: ClassVar[Tuple[str, ...]] = ("path", "description", "app", "category")


@dataclass(frozen=True)
class Table(Entity):
    used_in_actions: Tuple[str, ...] = ()

    kind: ClassVar[EntityKind] = EntityKind.TABLE
    RELATIONS: ClassVar[Tuple[Relation, ...]] = (
        Relation("used_in_actions", "usedInActions", EntityKind.ACTION),
    )


ENTITY_TYPES: Dict[EntityKind, Type[Entity]] = {
    EntityKind.SCREEN: Screen,
    EntityKind.COMPONENT: Component,
    EntityKind.ACTION: Action,
    EntityKind.MODULE: Module,
    EntityKind.TABLE: Table,
}


@dataclass
class FeatureGroup:
    """Entities discovered for one feature label."""

    screens: List[Screen] = field(default_factory=list)
    components: List[Component] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    modules: List[Module] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)

    def of_kind(self, kind: EntityKind) -> List[Entity]:
        if kind is EntityKind.SCREEN:
            return list(self.screens)
        if kind is EntityKind.COMPONENT:
            return list(self.components)
        if kind is EntityKind.ACTION:
            return list(self.actions)
        if kind is EntityKind.MODULE:
            return list(self.modules)
        if kind is EntityKind.TABLE:
            return list(self.tables)
        raise ValueError(f"Unknown entity kind: {kind!r}")

    def add(self, entity: Entity) -> None:
        if isinstance(entity, Screen):
            self.screens.append(entity)
        elif isinstance(entity, Component):
            self.components.append(entity)
        elif isinstance(entity, Action):
            self.actions.append(entity)
        elif isinstance(entity, Module):
            self.modules.append(entity)
        elif isinstance(entity, Table):
            self.tables.append(entity)
        else:
            raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


@dataclass
class FeatureMap:
    """Scanner output: entities grouped by feature plus an uncategorized bucket."""

    features: Dict[str, FeatureGroup] = field(default_factory=dict)
    uncategorized: FeatureGroup = field(default_factory=FeatureGroup)
    module_descriptions: Dict[str, str] = field(default_factory=dict)
    generated_at: Optional[str] = None

    def groups(self) -> Iterator[Tuple[str, FeatureGroup]]:
        """Yield (feature label, group) pairs, uncategorized last."""
        yield from self.features.items()
        yield UNCATEGORIZED_FEATURE, self.uncategorized


@dataclass(frozen=True)
class TestCase:
    """One test declaration from the pre-extracted corpus."""

    __test__ = False

    file: str
    describe: str
    it: str
    line: int = 0
    framework: str = "jest"
    description: Optional[str] = None
    purpose: Optional[str] = None
    expected: Optional[str] = None


@dataclass(frozen=True)
class CategorizedTestCase:
    """A test case annotated with its derived category and summary."""

    case: TestCase
    category: TestCategory
    summary: str

    @property
    def display_summary(self) -> str:
        """Annotated description when present, otherwise the derived summary."""
        return self.case.description or self.summary


@dataclass
class CoverageAnalysis:
    """Per-entity test coverage report."""

    total_tests: int
    by_category: Dict[TestCategory, List[CategorizedTestCase]]
    missing_patterns: List[str]
    coverage_score: int
    recommendations: List[str]
    status: str = "none"

    @property
    def has_test(self) -> bool:
        return self.total_tests > 0


@dataclass
class ExportRecord:
    """Machine-readable view of one entity handed to the rendering layer."""

    kind: EntityKind
    module: str
    name: str
    path: str
    description: str = ""
    route: Optional[str] = None
    app: Optional[str] = None
    related: Dict[str, List[str]] = field(default_factory=dict)
    coverage: Optional[CoverageAnalysis] = None

    @property
    def key(self) -> str:
        return export_key(self.kind, self.module, self.name)


def export_key(kind: EntityKind, module: str, name: str) -> str:
    """Return the `kind/module/name` key used by the export map."""
    return f"{kind.value}/{module}/{name}"


__all__ = [
    "Action",
    "CategorizedTestCase",
    "Component",
    "CoverageAnalysis",
    "ENTITY_TYPES",
    "Entity",
    "EntityKind",
    "ExportRecord",
    "FeatureGroup",
    "FeatureMap",
    "Module",
    "Relation",
    "Screen",
    "Table",
    "TEST_CATEGORIES",
    "TestCase",
    "TestCategory",
    "UNCATEGORIZED_FEATURE",
    "UNCATEGORIZED_MODULE",
    "export_key",
]
