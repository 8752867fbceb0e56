"""Node kinds: field descriptors, schemas and the kind registry.

Importing this package registers every built-in kind.
"""

from . import drive, operation  # noqa: F401  (registers kinds)
from .fields import FieldBase, NumberField, ReadonlyField, SelectField, TextField
from .schema import (
    KindRegistry,
    NodeKindSchema,
    get_kind,
    has_kind,
    initial_node,
    list_kinds,
    register_kind,
)

__all__ = [
    "FieldBase",
    "KindRegistry",
    "NodeKindSchema",
    "NumberField",
    "ReadonlyField",
    "SelectField",
    "TextField",
    "get_kind",
    "has_kind",
    "initial_node",
    "list_kinds",
    "register_kind",
]
