"""Entity graph primitives: addresses, merging and reference derivation.

The assembler lives in :mod:`docmap.graph.assembler`; import it from there.
"""

from .addresses import Address, AddressBook, AddressRegistry, address_of, infer_module_name
from .merger import merge_entities, merge_modules, union
from .references import derive_table_usage

__all__ = [
    "Address",
    "AddressBook",
    "AddressRegistry",
    "address_of",
    "derive_table_usage",
    "infer_module_name",
    "merge_entities",
    "merge_modules",
    "union",
]
