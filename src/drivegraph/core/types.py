"""Core types for graph snapshots and node outputs.

This module defines the canonical types exchanged between the editor,
the persistence layer and the recompute engine:

    RotationalOutput | LinearOutput | TaskOutput   (OutputValue)
    Node, Edge, Viewport, GraphSnapshot

Outputs serialize with camelCase keys and a ``type`` tag so that stored
graphs stay readable by the editor.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, replace
from typing import Any, Union

from .constants import DEFAULT_INPUT_HANDLE


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _OutputMixin:
    """Shared (de)serialization for output dataclasses."""

    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = [p.to_dict() if hasattr(p, "to_dict") else p for p in value]
            data[_camel(f.name)] = value
        return data

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by its serialized (camelCase) name."""
        return self.to_dict().get(name, default)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        by_camel = {_camel(f.name): f.name for f in fields(cls)}  # type: ignore[arg-type]
        kwargs = {by_camel[k]: v for k, v in data.items() if k in by_camel}
        return cls(**kwargs)


@dataclass(frozen=True)
class RotationalOutput(_OutputMixin):
    """Rotational output spec.

    Attributes:
        rated_torque: Rated torque (N·m).
        rated_speed: Rated speed (rpm).
        rated_power: Rated power (W).
        max_torque: Max torque (N·m).
        max_speed: Max speed (rpm).
        max_power: Max power (W), evaluated at rated torque.
        allowable_torque: Allowable torque of the last stage (N·m).
        total_gear_ratio: Product of all gear ratios upstream.
        total_inertia: Accumulated inertia (kg·m²).
        efficiency: Chained efficiency [0-1].
        direction: +1 forward, -1 reverse.
        is_overloaded: Rated torque exceeds allowable torque.
    """

    type = "rotational"

    rated_torque: float = 0.0
    rated_speed: float = 0.0
    rated_power: float = 0.0
    max_torque: float = 0.0
    max_speed: float = 0.0
    max_power: float = 0.0
    allowable_torque: float = 0.0
    total_gear_ratio: float = 1.0
    total_inertia: float = 0.0
    efficiency: float = 1.0
    direction: int = 1
    is_overloaded: bool = False


@dataclass(frozen=True)
class LinearOutput(_OutputMixin):
    """Linear output spec.

    Attributes:
        rated_force: Rated force (N).
        rated_speed: Rated speed (mm/s).
        rated_power: Rated power (W).
        max_force: Max force (N).
        max_speed: Max speed (mm/s).
        max_power: Max power (W), evaluated at rated force.
        stroke: Stroke (mm).
        max_acceleration: Max acceleration (mm/s²).
        mass: Reflected moving mass (kg).
        efficiency: Chained efficiency [0-1].
        direction: +1 forward, -1 reverse.
        is_overloaded: Rated force exceeds allowable force.
    """

    type = "linear"

    rated_force: float = 0.0
    rated_speed: float = 0.0
    rated_power: float = 0.0
    max_force: float = 0.0
    max_speed: float = 0.0
    max_power: float = 0.0
    stroke: float = 0.0
    max_acceleration: float = 0.0
    mass: float = 0.0
    efficiency: float = 1.0
    direction: int = 1
    is_overloaded: bool = False


@dataclass(frozen=True)
class ProfilePoint:
    """One vertex of a velocity profile."""

    time: float
    velocity: float

    def to_dict(self) -> dict[str, float]:
        return {"time": self.time, "velocity": self.velocity}


@dataclass(frozen=True)
class TaskOutput(_OutputMixin):
    """Output of task-sequence nodes.

    Attributes:
        duration: This task's own duration (s).
        total_duration: Sum of durations up to and including this task (s).
        profile: Velocity profile vertices (velocity chart only).
    """

    type = "task"

    duration: float = 0.0
    total_duration: float = 0.0
    profile: tuple[ProfilePoint, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskOutput:
        profile = tuple(
            ProfilePoint(float(p["time"]), float(p["velocity"])) for p in data.get("profile", [])
        )
        return cls(
            duration=float(data.get("duration", 0.0)),
            total_duration=float(data.get("totalDuration", 0.0)),
            profile=profile,
        )


OutputValue = Union[RotationalOutput, LinearOutput, TaskOutput]

_OUTPUT_TYPES: dict[str, type] = {
    "rotational": RotationalOutput,
    "linear": LinearOutput,
    "task": TaskOutput,
}


def output_to_dict(output: OutputValue | None) -> dict[str, Any] | None:
    """Serialize an output value (None passes through)."""
    return None if output is None else output.to_dict()


def output_from_dict(data: dict[str, Any] | None) -> OutputValue | None:
    """Deserialize an output value from its tagged dict form.

    Raises:
        ValueError: If the ``type`` tag is unknown.
    """
    if data is None:
        return None
    tag = data.get("type")
    cls = _OUTPUT_TYPES.get(tag)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"Unknown output type: {tag!r}")
    return cls.from_dict(data)


def is_output_dict(value: Any) -> bool:
    return isinstance(value, dict) and value.get("type") in _OUTPUT_TYPES


def alias_to_json(value: Any) -> Any:
    return value.to_dict() if isinstance(value, _OutputMixin) else value


def alias_from_json(value: Any) -> Any:
    return output_from_dict(value) if is_output_dict(value) else value


@dataclass(frozen=True)
class Node:
    """Graph node.

    ``parameters`` are user-entered values, ``alias_fields`` hold values
    copied from the upstream node, ``output`` is the last computed value.
    ``position`` is editor layout data and is never read by the engine.
    """

    id: str
    kind: str
    parameters: dict[str, Any] = field(default_factory=dict)
    output: OutputValue | None = None
    alias_fields: dict[str, Any] = field(default_factory=dict)
    position: dict[str, float] = field(default_factory=lambda: {"x": 0.0, "y": 0.0})

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "position": dict(self.position),
            "data": copy.deepcopy(self.parameters),
            "output": output_to_dict(self.output),
            "aliasFields": {k: alias_to_json(v) for k, v in self.alias_fields.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        kind = data.get("type", data.get("kind"))
        if not kind:
            raise ValueError(f"Node {data.get('id')!r} has no type")
        return cls(
            id=str(data["id"]),
            kind=str(kind),
            parameters=copy.deepcopy(data.get("data") or data.get("parameters") or {}),
            output=output_from_dict(data.get("output")),
            alias_fields={k: alias_from_json(v) for k, v in (data.get("aliasFields") or {}).items()},
            position=dict(data.get("position") or {"x": 0.0, "y": 0.0}),
        )


@dataclass(frozen=True)
class Edge:
    """Directed edge: ``source`` feeds ``target``."""

    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = DEFAULT_INPUT_HANDLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "sourceHandle": self.source_handle,
            "target": self.target,
            "targetHandle": self.target_handle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Edge:
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            source_handle=data.get("sourceHandle"),
            target_handle=data.get("targetHandle", DEFAULT_INPUT_HANDLE),
        )


@dataclass(frozen=True)
class Viewport:
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "zoom": self.zoom}


@dataclass
class GraphSnapshot:
    """Nodes, edges and viewport of one configuration graph."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)

    def node(self, node_id: str) -> Node:
        """Return the node with ``node_id``.

        Raises:
            KeyError: If no such node exists.
        """
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(f"Unknown node: {node_id}")

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def replace_node(self, node: Node) -> None:
        """Swap in an updated node with the same id (in place)."""
        for i, n in enumerate(self.nodes):
            if n.id == node.id:
                self.nodes[i] = node
                return
        raise KeyError(f"Unknown node: {node.id}")

    def copy(self) -> GraphSnapshot:
        # Nodes and edges are frozen; copying the lists is enough.
        return GraphSnapshot(nodes=list(self.nodes), edges=list(self.edges), viewport=self.viewport)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "viewport": self.viewport.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphSnapshot:
        vp = data.get("viewport") or {}
        return cls(
            nodes=[Node.from_dict(n) for n in data.get("nodes", [])],
            edges=[Edge.from_dict(e) for e in data.get("edges", [])],
            viewport=Viewport(
                x=float(vp.get("x", 0.0)),
                y=float(vp.get("y", 0.0)),
                zoom=float(vp.get("zoom", 1.0)),
            ),
        )


def with_output(node: Node, output: OutputValue | None, alias_fields: dict[str, Any]) -> Node:
    """Return a copy of ``node`` with new output and alias fields."""
    return replace(node, output=output, alias_fields=dict(alias_fields))
