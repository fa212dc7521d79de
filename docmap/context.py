"""Per-run state shared by the graph and coverage stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .graph.addresses import AddressBook
from .models import CategorizedTestCase, ExportRecord, TestCase


@dataclass
class RunContext:
    """Everything one documentation run accumulates.

    Built once per invocation and passed explicitly to each stage. The test
    corpus is read-only after construction; the registry and export map are
    filled by graph assembly and then only read or annotated with coverage.
    """

    test_cases: List[TestCase] = field(default_factory=list)
    registry: AddressBook = field(default_factory=AddressBook)
    export: Dict[str, ExportRecord] = field(default_factory=dict)
    # `kind/module` -> tests related to a module overview page
    module_tests: Dict[str, List[CategorizedTestCase]] = field(default_factory=dict)
    module_descriptions: Dict[str, str] = field(default_factory=dict)


__all__ = ["RunContext"]
