"""Duration accumulation tests."""

import pytest

from drivegraph.graph.driver import recompute
from drivegraph.graph.durations import (
    duration_breakdown,
    running_totals,
    sequence_total,
    task_chain,
)
from drivegraph.graph.errors import GraphCycleError
from drivegraph.core.types import Edge


def test_task_chain_order(task_snapshot):
    assert task_chain(task_snapshot, "end") == ["start", "a", "b", "c", "end"]
    assert task_chain(task_snapshot, "a") == ["start", "a"]


def test_sequence_total(task_snapshot):
    snap = recompute(task_snapshot).snapshot
    assert sequence_total(snap, "end") == pytest.approx(6.0)
    assert sequence_total(snap, "end") == snap.node("end").output.total_duration


def test_sequence_total_before_compute(task_snapshot):
    assert sequence_total(task_snapshot, "end") == 0.0


def test_duration_breakdown(task_snapshot):
    snap = recompute(task_snapshot).snapshot
    rows = duration_breakdown(snap, "end")
    assert [r["id"] for r in rows] == ["start", "a", "b", "c"]
    assert [r["name"] for r in rows] == ["Start", "clamp", "dwell", "release"]
    assert [r["totalDuration"] for r in rows] == [0.0, 1.0, 3.0, 6.0]


def test_running_totals():
    assert running_totals([1.0, 2.0, 3.0]) == [1.0, 3.0, 6.0]
    assert running_totals([0.1, 0.2]) == [0.1, 0.3]
    assert running_totals([]) == []


def test_task_chain_detects_loop(task_snapshot):
    snap = task_snapshot.copy()
    snap.edges = [e for e in snap.edges if e.target != "a"] + [Edge(id="loop", source="c", target="a")]
    with pytest.raises(GraphCycleError):
        task_chain(snap, "end")
