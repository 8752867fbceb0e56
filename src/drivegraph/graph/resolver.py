"""Propagation resolver.

For a node, finds its single upstream edge and copies the fields named in
the kind's ``propagate_map`` into local aliases:

    {upstream field: local alias}  ->  {local alias: value}

Field lookup on the upstream node:
    "outputSpec"   -> the upstream node's output value
    other names    -> the upstream output's field of that (camelCase)
                      name, falling back to the upstream parameters
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from ..core.types import Edge, GraphSnapshot, Node
from ..nodes.schema import get_kind
from .errors import DuplicateUpstreamError

OUTPUT_SPEC = "outputSpec"


def input_handle_of(edge: Edge, snapshot: GraphSnapshot) -> str | None:
    """Target handle of ``edge`` as the resolver sees it.

    An edge without a handle lands on the target kind's input handle. For
    kinds listening on any handle, every edge maps to None.
    """
    if not snapshot.has_node(edge.target):
        return edge.target_handle
    handle = get_kind(snapshot.node(edge.target).kind).input_handle
    if handle is None:
        return None
    return handle if edge.target_handle is None else edge.target_handle


def incoming_edges(node: Node, snapshot: GraphSnapshot) -> list[Edge]:
    """Edges into ``node`` on the handle its kind listens on."""
    handle = get_kind(node.kind).input_handle
    return [
        e
        for e in snapshot.edges
        if e.target == node.id and input_handle_of(e, snapshot) == handle
    ]


def upstream_value(upstream: Node, field_name: str) -> Any:
    """Value of ``field_name`` on the upstream node (None if absent)."""
    if field_name == OUTPUT_SPEC:
        return upstream.output
    if upstream.output is not None:
        value = upstream.output.get(field_name)
        if value is not None:
            return value
    return upstream.parameters.get(field_name)


def resolve(node: Node, snapshot: GraphSnapshot) -> dict[str, Any]:
    """Alias fields for ``node`` from its upstream node.

    Returns:
        ``{alias: value}``; empty when the kind propagates nothing or no
        upstream edge exists. Kinds fall back to their own defaults for
        missing aliases.
    """
    schema = get_kind(node.kind)
    if not schema.propagate_map:
        return {}
    edges = incoming_edges(node, snapshot)
    if not edges or not snapshot.has_node(edges[0].source):
        return {}
    upstream = snapshot.node(edges[0].source)
    return {
        alias: upstream_value(upstream, name) for name, alias in schema.propagate_map.items()
    }


def upstream_ids(node_id: str, snapshot: GraphSnapshot) -> list[str]:
    return [e.source for e in snapshot.edges if e.target == node_id]


def downstream_ids(node_id: str, snapshot: GraphSnapshot) -> list[str]:
    return [e.target for e in snapshot.edges if e.source == node_id]


def validate_single_upstream(snapshot: GraphSnapshot) -> None:
    """Check that no target handle is fed by more than one edge.

    Edges without a handle count against the target's input handle.

    Raises:
        DuplicateUpstreamError: On the first offending handle.
    """
    by_handle: dict[tuple[str, str | None], list[str]] = defaultdict(list)
    for e in snapshot.edges:
        by_handle[(e.target, input_handle_of(e, snapshot))].append(e.id)
    for (target, handle), edge_ids in by_handle.items():
        if len(edge_ids) > 1:
            raise DuplicateUpstreamError(target, handle, edge_ids)
