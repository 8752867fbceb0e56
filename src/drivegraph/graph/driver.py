"""Graph recompute driver.

``recompute`` is a pure function over a snapshot: dirty nodes are computed
in topological order, and a node whose output changed dirties its
downstream nodes. Since downstream nodes always rank later, every node is
computed at most once per cycle and the loop ends at the fixpoint.

``GraphRecomputeDriver`` wraps a snapshot with the editing operations of
the editor; every edit runs one recompute cycle (idle -> dirty -> idle).
"""

from __future__ import annotations

import heapq
from collections import defaultdict, deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..core.logging import get_logger
from ..core.types import Edge, GraphSnapshot, Node
from ..nodes.schema import get_kind
from .dispatcher import compute_node
from .errors import DuplicateUpstreamError, GraphCycleError
from .resolver import downstream_ids, input_handle_of, resolve, validate_single_upstream

logger = get_logger(__name__)


def topological_order(snapshot: GraphSnapshot) -> list[str]:
    """Node ids in topological order (Kahn's algorithm, stable on input order).

    Edges that reference unknown nodes are ignored.

    Raises:
        GraphCycleError: If the edges contain a cycle.
    """
    ids = snapshot.node_ids()
    known = set(ids)
    indegree = {i: 0 for i in ids}
    children: dict[str, list[str]] = defaultdict(list)
    for e in snapshot.edges:
        if e.source in known and e.target in known:
            children[e.source].append(e.target)
            indegree[e.target] += 1

    queue = deque(i for i in ids if indegree[i] == 0)
    order: list[str] = []
    while queue:
        i = queue.popleft()
        order.append(i)
        for child in children[i]:
            indegree[child] -= 1
            if indegree[child] == 0:
                queue.append(child)

    if len(order) != len(ids):
        stuck = [i for i in ids if indegree[i] > 0]
        raise GraphCycleError(f"Graph contains a cycle through {stuck}", nodes=stuck)
    return order


def would_create_cycle(snapshot: GraphSnapshot, source: str, target: str) -> bool:
    """True if adding ``source -> target`` closes a directed cycle."""
    if source == target:
        return True
    stack = [target]
    seen = {target}
    while stack:
        current = stack.pop()
        for nxt in downstream_ids(current, snapshot):
            if nxt == source:
                return True
            if nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return False


@dataclass(frozen=True)
class RecomputeReport:
    """Outcome of one recompute cycle.

    Attributes:
        snapshot: New snapshot (the input is never mutated).
        computed: Node ids computed, in order.
        changed: Node ids whose output changed.
        steps: Number of compute calls.
    """

    snapshot: GraphSnapshot
    computed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def steps(self) -> int:
        return len(self.computed)


def recompute(snapshot: GraphSnapshot, dirty: Iterable[str] | None = None) -> RecomputeReport:
    """Recompute dirty nodes until no output changes.

    Args:
        snapshot: Graph to recompute.
        dirty: Node ids to start from; None marks every node dirty.

    Returns:
        RecomputeReport with the updated snapshot.

    Raises:
        GraphCycleError: If the graph has a cycle (nothing is computed).
        DuplicateUpstreamError: If a target handle has several edges.
        KeyError: For an unknown dirty node id or node kind.
    """
    validate_single_upstream(snapshot)
    order = topological_order(snapshot)
    rank = {node_id: i for i, node_id in enumerate(order)}

    start = order if dirty is None else list(dirty)
    for node_id in start:
        if node_id not in rank:
            raise KeyError(f"Unknown node: {node_id}")

    work = snapshot.copy()
    heap = [(rank[i], i) for i in set(start)]
    heapq.heapify(heap)
    queued = set(start)
    computed: list[str] = []
    changed: list[str] = []

    with logger.timer("recompute", n_nodes=len(order), n_dirty=len(queued)):
        while heap:
            _, node_id = heapq.heappop(heap)
            node = work.node(node_id)
            result = compute_node(node, resolve(node, work))
            computed.append(node_id)
            if result.node is not node:
                work.replace_node(result.node)
            if not result.changed:
                continue
            changed.append(node_id)
            for child in downstream_ids(node_id, work):
                if child in rank and child not in queued:
                    queued.add(child)
                    heapq.heappush(heap, (rank[child], child))

    logger.debug("recompute cycle", steps=len(computed), changed=changed)
    return RecomputeReport(snapshot=work, computed=computed, changed=changed)


class GraphRecomputeDriver:
    """Holds the current snapshot and applies edits with recompute.

    State is ``"idle"`` between edits and ``"dirty"`` while a cycle runs.
    """

    def __init__(self, snapshot: GraphSnapshot | None = None) -> None:
        self.snapshot = snapshot.copy() if snapshot is not None else GraphSnapshot()
        self.state = "idle"
        self.last_report: RecomputeReport | None = None

    def _run(self, snapshot: GraphSnapshot, dirty: Iterable[str] | None) -> RecomputeReport:
        self.state = "dirty"
        try:
            report = recompute(snapshot, dirty)
        finally:
            self.state = "idle"
        self.snapshot = report.snapshot
        self.last_report = report
        return report

    def recompute_all(self) -> RecomputeReport:
        return self._run(self.snapshot, None)

    def set_parameters(self, node_id: str, parameters: Mapping[str, Any]) -> RecomputeReport:
        """Merge ``parameters`` into a node's parameters and recompute."""
        node = self.snapshot.node(node_id)
        updated = self.snapshot.copy()
        updated.replace_node(replace(node, parameters={**node.parameters, **parameters}))
        return self._run(updated, [node_id])

    def edit_field(self, node_id: str, key: str, value: Any) -> RecomputeReport:
        """Set one field through its descriptor (clamping, option matching)."""
        node = self.snapshot.node(node_id)
        descriptor = get_kind(node.kind).get_field(key)
        parameters = descriptor.set_value(value, node.parameters)
        updated = self.snapshot.copy()
        updated.replace_node(replace(node, parameters=parameters))
        return self._run(updated, [node_id])

    def add_node(self, node: Node) -> RecomputeReport:
        get_kind(node.kind)
        if self.snapshot.has_node(node.id):
            raise ValueError(f"Node already exists: {node.id}")
        updated = self.snapshot.copy()
        updated.nodes.append(node)
        return self._run(updated, [node.id])

    def remove_node(self, node_id: str) -> RecomputeReport:
        """Remove a node and its edges; former downstream nodes recompute."""
        self.snapshot.node(node_id)
        orphans = downstream_ids(node_id, self.snapshot)
        updated = GraphSnapshot(
            nodes=[n for n in self.snapshot.nodes if n.id != node_id],
            edges=[e for e in self.snapshot.edges if node_id not in (e.source, e.target)],
            viewport=self.snapshot.viewport,
        )
        return self._run(updated, orphans)

    def add_edge(self, edge: Edge) -> RecomputeReport:
        """Connect two nodes.

        Raises:
            KeyError: Unknown source or target node.
            ValueError: The handles do not allow this connection.
            GraphCycleError: The edge would close a cycle.
            DuplicateUpstreamError: The target handle is already fed.
        """
        source = self.snapshot.node(edge.source)
        target = self.snapshot.node(edge.target)
        if not get_kind(source.kind).has_source:
            raise ValueError(f"Node {source.id!r} ({source.kind}) has no output handle")
        if not get_kind(target.kind).has_target:
            raise ValueError(f"Node {target.id!r} ({target.kind}) has no input handle")
        if any(e.id == edge.id for e in self.snapshot.edges):
            raise ValueError(f"Edge already exists: {edge.id}")
        if would_create_cycle(self.snapshot, edge.source, edge.target):
            raise GraphCycleError(
                f"Edge {edge.source} -> {edge.target} would create a cycle",
                nodes=[edge.source, edge.target],
            )
        handle = input_handle_of(edge, self.snapshot)
        existing = [
            e.id
            for e in self.snapshot.edges
            if e.target == edge.target and input_handle_of(e, self.snapshot) == handle
        ]
        if existing:
            raise DuplicateUpstreamError(edge.target, handle, existing + [edge.id])

        updated = self.snapshot.copy()
        updated.edges.append(edge)
        return self._run(updated, [edge.target])

    def remove_edge(self, edge_id: str) -> RecomputeReport:
        for e in self.snapshot.edges:
            if e.id == edge_id:
                updated = self.snapshot.copy()
                updated.edges = [x for x in updated.edges if x.id != edge_id]
                return self._run(updated, [e.target] if updated.has_node(e.target) else [])
        raise KeyError(f"Unknown edge: {edge_id}")
