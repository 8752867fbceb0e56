"""Pytest configuration for drivegraph.

Fixtures build two small graphs used across the suite:

    drive:  motor -> gear -> screw -> output
    tasks:  start -> a(1 s) -> b(2 s) -> c(3 s) -> end
"""

from __future__ import annotations

import pytest

from drivegraph.core.logging import set_log_level
from drivegraph.core.types import Edge, GraphSnapshot
from drivegraph.nodes.schema import initial_node


def edge(source: str, target: str) -> Edge:
    return Edge(
        id=f"{source}-{target}",
        source=source,
        target=target,
        source_handle="bottom",
        target_handle="top",
    )


@pytest.fixture(autouse=True)
def _reset_log_level():
    set_log_level("INFO")
    yield
    set_log_level("INFO")


@pytest.fixture
def drive_snapshot() -> GraphSnapshot:
    nodes = [
        initial_node(
            "rotationalActuator",
            "motor",
            {
                "ratedTorque": 2.0,
                "ratedSpeed": 3000.0,
                "maxTorque": 4.0,
                "maxSpeed": 4000.0,
                "rotorInertia": 0.0001,
            },
        ),
        initial_node("rotToRotConverter", "gear", {"gearRatio": 5.0, "efficiency": 0.9}),
        initial_node("rotToLinConverter", "screw", {"lead": 10.0, "efficiency": 0.9}),
        initial_node("outputNode", "out"),
    ]
    edges = [edge("motor", "gear"), edge("gear", "screw"), edge("screw", "out")]
    return GraphSnapshot(nodes=nodes, edges=edges)


@pytest.fixture
def task_snapshot() -> GraphSnapshot:
    nodes = [
        initial_node("taskStart", "start"),
        initial_node("task", "a", {"name": "clamp", "duration": 1.0}),
        initial_node("task", "b", {"name": "dwell", "duration": 2.0}),
        initial_node("task", "c", {"name": "release", "duration": 3.0}),
        initial_node("taskEnd", "end"),
    ]
    edges = [edge("start", "a"), edge("a", "b"), edge("b", "c"), edge("c", "end")]
    return GraphSnapshot(nodes=nodes, edges=edges)
