"""Duration accumulation over task chains."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np

from ..core.constants import DURATION_DIGITS
from ..core.numeric import round_to_digits
from ..core.types import GraphSnapshot, TaskOutput
from .errors import GraphCycleError
from .resolver import upstream_ids


def task_chain(snapshot: GraphSnapshot, end_id: str) -> list[str]:
    """Node ids from the head of the chain down to ``end_id``.

    Follows the first upstream edge of each node.

    Raises:
        KeyError: If ``end_id`` is unknown.
        GraphCycleError: If the walk revisits a node.
    """
    snapshot.node(end_id)
    chain = [end_id]
    seen = {end_id}
    current = end_id
    while True:
        parents = [p for p in upstream_ids(current, snapshot) if snapshot.has_node(p)]
        if not parents:
            break
        current = parents[0]
        if current in seen:
            raise GraphCycleError(f"Task chain loops at {current}", nodes=chain)
        seen.add(current)
        chain.append(current)
    chain.reverse()
    return chain


def running_totals(durations: Iterable[float]) -> list[float]:
    """Cumulative sums, rounded like stored totals."""
    totals = np.cumsum(np.asarray(list(durations), dtype=np.float64))
    return [round_to_digits(t, DURATION_DIGITS) for t in totals]


def duration_breakdown(snapshot: GraphSnapshot, end_id: str) -> list[dict[str, Any]]:
    """Per-task durations along the chain ending at ``end_id``.

    Only nodes carrying a TaskOutput are listed; ``totalDuration`` is the
    running sum of the listed durations.
    """
    rows: list[dict[str, Any]] = []
    for node_id in task_chain(snapshot, end_id):
        node = snapshot.node(node_id)
        if not isinstance(node.output, TaskOutput) or node.kind == "taskEnd":
            continue
        rows.append(
            {
                "id": node.id,
                "kind": node.kind,
                "name": node.parameters.get("name") or node.parameters.get("label") or "",
                "duration": node.output.duration,
            }
        )
    for row, total in zip(rows, running_totals(r["duration"] for r in rows)):
        row["totalDuration"] = total
    return rows


def sequence_total(snapshot: GraphSnapshot, end_id: str) -> float:
    """Total duration of the chain ending at ``end_id`` (s)."""
    rows = duration_breakdown(snapshot, end_id)
    return rows[-1]["totalDuration"] if rows else 0.0
