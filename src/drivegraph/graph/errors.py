"""Structural graph errors."""

from __future__ import annotations


class GraphCycleError(ValueError):
    """The edge set contains (or would contain) a directed cycle."""

    def __init__(self, message: str, nodes: list[str] | None = None):
        super().__init__(message)
        self.nodes = list(nodes or [])


class DuplicateUpstreamError(ValueError):
    """More than one edge feeds the same target handle."""

    def __init__(self, target: str, handle: str | None, edge_ids: list[str]):
        super().__init__(
            f"Node {target!r} has {len(edge_ids)} edges into handle {handle!r}: {edge_ids}"
        )
        self.target = target
        self.handle = handle
        self.edge_ids = list(edge_ids)
