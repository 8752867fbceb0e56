"""Core module: types, config, logging, persistence."""

from .graph_io import GraphStore, read_snapshot, write_snapshot
from .types import (
    Edge,
    GraphSnapshot,
    LinearOutput,
    Node,
    OutputValue,
    ProfilePoint,
    RotationalOutput,
    TaskOutput,
    Viewport,
    output_from_dict,
    output_to_dict,
)

__all__ = [
    "Edge",
    "GraphSnapshot",
    "GraphStore",
    "LinearOutput",
    "Node",
    "OutputValue",
    "ProfilePoint",
    "RotationalOutput",
    "TaskOutput",
    "Viewport",
    "output_from_dict",
    "output_to_dict",
    "read_snapshot",
    "write_snapshot",
]
