"""Compute dispatcher tests."""

import pytest

from drivegraph.core.types import LinearOutput, RotationalOutput
from drivegraph.graph.dispatcher import compute_node, serialize_output
from drivegraph.nodes.schema import initial_node, list_kinds

PREV = {"prevOutputSpec": RotationalOutput(rated_torque=2.0, rated_speed=3000.0)}


def test_first_compute_changes_node():
    node = initial_node("rotToRotConverter", "gear", {"gearRatio": 5.0, "efficiency": 0.9})
    result = compute_node(node, PREV)
    assert result.changed
    assert result.node is not node
    assert result.node.output.rated_torque == 9.0
    assert result.node.alias_fields == PREV
    # Input node untouched
    assert node.output is None
    assert node.alias_fields == {}


def test_second_compute_is_idempotent():
    node = initial_node("rotToRotConverter", "gear", {"gearRatio": 5.0, "efficiency": 0.9})
    first = compute_node(node, PREV)
    second = compute_node(first.node, PREV)
    assert not second.changed
    assert second.node is first.node
    assert serialize_output(second.node.output) == serialize_output(first.node.output)


def test_alias_change_without_output_change():
    # A task end copies the total; same total from a new alias object keeps output
    node = initial_node("taskEnd", "end")
    first = compute_node(node, {"totalDuration": 3.0})
    second = compute_node(first.node, {"totalDuration": 3.0, "extra": 1})
    assert not second.changed
    assert second.node.alias_fields == {"totalDuration": 3.0, "extra": 1}
    assert second.node.output == first.node.output


def test_serialize_output_is_canonical():
    a = RotationalOutput(rated_torque=1.0, rated_speed=2.0)
    b = RotationalOutput(rated_speed=2.0, rated_torque=1.0)
    assert serialize_output(a) == serialize_output(b)
    assert serialize_output(None) == "null"


MOTION = {"displacement": 100.0, "velocity": 50.0, "acceleration": 100.0, "deceleration": 100.0}
ALIASES_BY_KIND = {
    "rotToRotConverter": PREV,
    "rotToLinConverter": PREV,
    "outputNode": PREV,
    "linToRotConverter": {"prevOutputSpec": LinearOutput(rated_force=100.0, rated_speed=50.0)},
    "linToLinConverter": {"prevOutputSpec": LinearOutput(rated_force=100.0, rated_speed=50.0)},
    "task": {"previousTotalDuration": 1.5},
    "actuatorTask": {"previousTotalDuration": 1.5},
    "taskEnd": {"totalDuration": 4.0},
    "velocityChart": MOTION,
}
PARAMS_BY_KIND = {
    "rotationalActuator": {"ratedTorque": 2.0, "ratedSpeed": 3000.0, "maxSpeed": 4000.0},
    "linearActuator": {"ratedForce": 200.0, "ratedSpeed": 80.0, "stroke": 300.0},
    "task": {"duration": 2.0},
    "actuatorTask": MOTION,
}


@pytest.mark.parametrize("kind", sorted(s.kind for s in list_kinds()))
def test_every_kind_is_idempotent(kind):
    node = initial_node(kind, "n", PARAMS_BY_KIND.get(kind))
    aliases = ALIASES_BY_KIND.get(kind, {})
    first = compute_node(node, aliases)
    second = compute_node(first.node, aliases)
    assert not second.changed
    assert second.node is first.node
    assert serialize_output(second.node.output) == serialize_output(first.node.output)
