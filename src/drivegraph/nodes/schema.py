"""Node kind schemas and the kind registry.

Centralizes knowledge of which node kinds exist, what parameters they
take, what they copy from upstream and how they compute their output.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.constants import DEFAULT_INPUT_HANDLE
from ..core.types import Node, OutputValue
from .fields import FieldBase

ComputeFn = Callable[[Mapping[str, Any], Mapping[str, Any], str], "OutputValue | None"]


@dataclass(frozen=True)
class NodeKindSchema:
    """Immutable description of one node kind.

    Attributes:
        kind: Registry key (matches the node ``type`` in snapshots).
        title: Display title.
        category: "drive", "operation" or "detail".
        fields: Parameter and display fields.
        compute: ``(parameters, alias_fields, node_id) -> output``. Pure.
        propagate_map: ``{upstream field: local alias}``.
        initial_data: Factory for the parameters of a new node.
        has_target: Accepts an incoming edge.
        has_source: May feed downstream nodes.
        input_handle: Target handle the resolver listens on (None = any).
    """

    kind: str
    title: str
    category: str
    fields: tuple[FieldBase, ...]
    compute: ComputeFn
    propagate_map: Mapping[str, str] = field(default_factory=dict)
    initial_data: Callable[[], dict[str, Any]] = dict
    has_target: bool = True
    has_source: bool = True
    input_handle: str | None = DEFAULT_INPUT_HANDLE
    description: str = ""

    def get_field(self, key: str) -> FieldBase:
        for f in self.fields:
            if f.key == key:
                return f
        raise KeyError(f"{self.kind} has no field {key!r}")

    def input_fields(self) -> list[FieldBase]:
        return [f for f in self.fields if f.editable]

    def visible_fields(
        self, parameters: Mapping[str, Any], output: OutputValue | None = None
    ) -> list[FieldBase]:
        return [f for f in self.fields if not f.is_hidden(parameters, output)]

    def validate(self, parameters: Mapping[str, Any]) -> dict[str, str]:
        """Validate every editable field; returns ``{key: message}``."""
        errors: dict[str, str] = {}
        for f in self.input_fields():
            if f.key not in parameters:
                continue
            msg = f.validate(parameters[f.key], parameters)
            if msg:
                errors[f.key] = msg
        return errors

    def new_parameters(self) -> dict[str, Any]:
        return copy.deepcopy(self.initial_data())

    def describe(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "category": self.category,
            "handles": {"target": self.has_target, "source": self.has_source},
            "propagate": dict(self.propagate_map),
            "fields": [f.describe() for f in self.fields],
        }


class KindRegistry:
    """Registry of node kinds keyed by ``kind``."""

    def __init__(self) -> None:
        self._kinds: dict[str, NodeKindSchema] = {}

    def register(self, schema: NodeKindSchema, replace: bool = False) -> NodeKindSchema:
        if schema.kind in self._kinds and not replace:
            raise ValueError(f"Node kind already registered: {schema.kind}")
        self._kinds[schema.kind] = schema
        return schema

    def get(self, kind: str) -> NodeKindSchema:
        try:
            return self._kinds[kind]
        except KeyError:
            raise KeyError(f"Unknown node kind: {kind}") from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds

    def list(self, category: str | None = None) -> list[NodeKindSchema]:
        return [s for s in self._kinds.values() if category is None or s.category == category]


# Global instance
_REGISTRY = KindRegistry()


def register_kind(schema: NodeKindSchema, replace: bool = False) -> NodeKindSchema:
    return _REGISTRY.register(schema, replace=replace)


def get_kind(kind: str) -> NodeKindSchema:
    return _REGISTRY.get(kind)


def has_kind(kind: str) -> bool:
    return kind in _REGISTRY


def list_kinds(category: str | None = None) -> list[NodeKindSchema]:
    return _REGISTRY.list(category)


def initial_node(
    kind: str,
    node_id: str,
    parameters: Mapping[str, Any] | None = None,
    position: Mapping[str, float] | None = None,
) -> Node:
    """Create a node with the kind's initial data (overridden by ``parameters``)."""
    schema = get_kind(kind)
    params = schema.new_parameters()
    params.update(parameters or {})
    return Node(
        id=node_id,
        kind=kind,
        parameters=params,
        position=dict(position or {"x": 0.0, "y": 0.0}),
    )
