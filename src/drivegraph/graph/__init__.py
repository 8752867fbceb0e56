"""Graph module: propagation, dispatch and recompute over snapshots."""

from .dispatcher import ComputeResult, compute_node, serialize_output
from .driver import (
    GraphRecomputeDriver,
    RecomputeReport,
    recompute,
    topological_order,
    would_create_cycle,
)
from .durations import duration_breakdown, running_totals, sequence_total, task_chain
from .errors import DuplicateUpstreamError, GraphCycleError
from .resolver import downstream_ids, resolve, upstream_ids, validate_single_upstream

__all__ = [
    "ComputeResult",
    "DuplicateUpstreamError",
    "GraphCycleError",
    "GraphRecomputeDriver",
    "RecomputeReport",
    "compute_node",
    "downstream_ids",
    "duration_breakdown",
    "recompute",
    "resolve",
    "running_totals",
    "sequence_total",
    "serialize_output",
    "task_chain",
    "topological_order",
    "upstream_ids",
    "validate_single_upstream",
    "would_create_cycle",
]
