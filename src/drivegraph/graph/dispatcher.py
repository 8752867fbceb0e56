"""Compute dispatcher: run one node's compute and detect real changes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..core.types import Node, OutputValue, alias_to_json, output_to_dict, with_output
from ..nodes.schema import get_kind


@dataclass(frozen=True)
class ComputeResult:
    node: Node
    changed: bool


def serialize_output(output: OutputValue | None) -> str:
    """Canonical JSON form used for change detection."""
    return json.dumps(output_to_dict(output), sort_keys=True)


def _serialize_aliases(aliases: Mapping[str, Any]) -> str:
    return json.dumps({k: alias_to_json(v) for k, v in aliases.items()}, sort_keys=True)


def compute_node(node: Node, alias_fields: Mapping[str, Any]) -> ComputeResult:
    """Recompute ``node`` with the given alias fields.

    The node is only replaced when its serialized output (or its alias
    fields) differ from what is stored; ``changed`` reports an output
    change, which is what dirties downstream nodes.
    """
    schema = get_kind(node.kind)
    output = schema.compute(node.parameters, alias_fields, node.id)

    output_changed = serialize_output(output) != serialize_output(node.output)
    aliases_changed = _serialize_aliases(alias_fields) != _serialize_aliases(node.alias_fields)
    if not output_changed and not aliases_changed:
        return ComputeResult(node=node, changed=False)
    new_output = output if output_changed else node.output
    return ComputeResult(node=with_output(node, new_output, dict(alias_fields)), changed=output_changed)
