"""Node kind registry and compute function tests."""

import json

import pytest

from drivegraph.core.types import GraphSnapshot, LinearOutput, RotationalOutput, TaskOutput
from drivegraph.graph.driver import recompute
from drivegraph.nodes.drive import (
    compute_lin_to_lin,
    compute_lin_to_rot,
    compute_linear_actuator,
    compute_output_node,
    compute_rot_to_lin,
    compute_rot_to_rot,
    compute_rotational_actuator,
)
from drivegraph.nodes.operation import (
    compute_actuator_task,
    compute_task,
    compute_task_end,
    compute_velocity_chart,
)
from drivegraph.nodes.schema import (
    KindRegistry,
    get_kind,
    has_kind,
    initial_node,
    list_kinds,
)

MOTOR_OUT = RotationalOutput(
    rated_torque=2.0,
    rated_speed=3000.0,
    max_torque=4.0,
    max_speed=4000.0,
    total_inertia=0.0004,
)


def _log_records(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def test_all_kinds_registered():
    drive = {s.kind for s in list_kinds("drive")}
    assert drive == {
        "rotationalActuator",
        "linearActuator",
        "rotToRotConverter",
        "rotToLinConverter",
        "linToRotConverter",
        "linToLinConverter",
        "outputNode",
    }
    assert {s.kind for s in list_kinds("operation")} == {"taskStart", "task", "actuatorTask", "taskEnd"}
    assert has_kind("velocityChart")


def test_unknown_kind_raises():
    with pytest.raises(KeyError):
        get_kind("warpDrive")


def test_duplicate_registration_raises():
    registry = KindRegistry()
    schema = get_kind("task")
    registry.register(schema)
    with pytest.raises(ValueError):
        registry.register(schema)
    registry.register(schema, replace=True)


def test_propagate_maps():
    assert get_kind("rotToRotConverter").propagate_map == {"outputSpec": "prevOutputSpec"}
    assert get_kind("task").propagate_map == {"totalDuration": "previousTotalDuration"}
    assert get_kind("taskEnd").propagate_map == {"totalDuration": "totalDuration"}
    assert not get_kind("rotationalActuator").propagate_map


def test_initial_node_copies_defaults():
    a = initial_node("rotToRotConverter", "g1", {"gearRatio": 3.0})
    b = initial_node("rotToRotConverter", "g2")
    assert a.parameters["gearRatio"] == 3.0
    assert b.parameters["gearRatio"] == 1.0
    assert a.parameters is not b.parameters
    assert a.output is None


def test_schema_validate():
    schema = get_kind("rotToRotConverter")
    assert schema.validate({"gearRatio": 2.0, "efficiency": 0.95}) == {}
    errors = schema.validate({"gearRatio": -1, "efficiency": "high"})
    assert set(errors) == {"gearRatio", "efficiency"}


def test_visible_fields_follow_output_type():
    schema = get_kind("outputNode")
    keys = [f.key for f in schema.visible_fields({}, LinearOutput())]
    assert "ratedForceLinearOut" in keys
    assert "ratedTorqueOut" not in keys


# ---------------------------------------------------------------------------
# Drive kinds
# ---------------------------------------------------------------------------


def test_actuator_direction_is_coerced():
    assert compute_rotational_actuator({"direction": "reverse"}, {}, "m").direction == 1
    assert compute_rotational_actuator({"direction": "-1"}, {}, "m").direction == -1
    assert compute_rotational_actuator({"direction": None}, {}, "m").direction == 1
    assert compute_linear_actuator({"direction": -3}, {}, "a").direction == -1
    assert compute_linear_actuator({"direction": float("nan")}, {}, "a").direction == 1


def test_bad_direction_does_not_stop_recompute():
    node = initial_node("rotationalActuator", "m", {"direction": "reverse", "ratedTorque": 2.0})
    snap = recompute(GraphSnapshot(nodes=[node])).snapshot
    assert snap.node("m").output.direction == 1
    assert snap.node("m").output.rated_torque == 2.0



def test_gear_stage_output():
    out = compute_rot_to_rot(
        {"gearRatio": 5.0, "efficiency": 0.9, "inertia": 0.0001},
        {"prevOutputSpec": MOTOR_OUT},
        "gear",
    )
    assert isinstance(out, RotationalOutput)
    assert out.rated_torque == pytest.approx(9.0)
    assert out.rated_speed == pytest.approx(600.0)
    assert out.rated_power == pytest.approx(565.49)
    assert out.max_speed == pytest.approx(800.0)
    assert out.total_gear_ratio == pytest.approx(5.0)
    assert out.total_inertia == pytest.approx(0.0001 + 0.0004 / 25)
    assert out.efficiency == pytest.approx(0.9)
    assert not out.is_overloaded


def test_gear_stage_overload_flag():
    out = compute_rot_to_rot(
        {"gearRatio": 5.0, "efficiency": 0.9, "allowableTorque": 5.0},
        {"prevOutputSpec": MOTOR_OUT},
        "gear",
    )
    assert out.is_overloaded
    assert out.rated_torque == pytest.approx(9.0)


def test_zero_ratio_falls_back_to_one():
    out = compute_rot_to_rot({"gearRatio": 0, "efficiency": 1.0}, {"prevOutputSpec": MOTOR_OUT}, "g")
    assert out.rated_torque == pytest.approx(2.0)
    assert out.rated_speed == pytest.approx(3000.0)


def test_missing_upstream_uses_defaults_and_warns(capsys):
    out = compute_rot_to_rot({"gearRatio": 5.0}, {}, "lonely")
    assert out.rated_torque == 0.0
    assert out.rated_speed == 0.0

    records = _log_records(capsys.readouterr().err)
    assert any(r["level"] == "WARN" and r["node_id"] == "lonely" for r in records)


def test_wrong_upstream_shape_uses_defaults(capsys):
    out = compute_rot_to_lin({"lead": 10.0}, {"prevOutputSpec": LinearOutput(rated_force=5.0)}, "s")
    assert isinstance(out, LinearOutput)
    assert out.rated_force == 0.0
    assert "wrong shape" in capsys.readouterr().err


def test_screw_stage_output():
    prev = RotationalOutput(rated_torque=1.0, rated_speed=600.0, max_speed=1200.0, efficiency=0.9)
    out = compute_rot_to_lin({"lead": 10.0, "efficiency": 0.9, "stroke": 300.0}, {"prevOutputSpec": prev}, "s")
    assert out.rated_force == pytest.approx(0.57)
    assert out.rated_speed == pytest.approx(100.0)
    assert out.max_speed == pytest.approx(200.0)
    assert out.stroke == 300.0
    assert out.efficiency == pytest.approx(0.81)


def test_linear_to_rotary_stage():
    prev = LinearOutput(rated_force=100.0, rated_speed=10.0, efficiency=0.9)
    out = compute_lin_to_rot({"conversionRatio": 0.1, "efficiency": 1.0}, {"prevOutputSpec": prev}, "p")
    assert isinstance(out, RotationalOutput)
    assert out.rated_torque == pytest.approx(159.15)
    assert out.rated_speed == pytest.approx(60.0)


def test_linear_to_linear_stage():
    prev = LinearOutput(rated_force=100.0, rated_speed=50.0, stroke=100.0, max_acceleration=10.0, mass=4.0)
    out = compute_lin_to_lin({"ratio": 2.0, "efficiency": 0.9}, {"prevOutputSpec": prev}, "l")
    assert out.rated_force == pytest.approx(45.0)
    assert out.rated_speed == pytest.approx(100.0)
    assert out.stroke == pytest.approx(200.0)
    assert out.max_acceleration == pytest.approx(20.0)
    assert out.mass == pytest.approx(1.0)


def test_output_node_passes_through(capsys):
    assert compute_output_node({}, {"prevOutputSpec": MOTOR_OUT}, "o") is MOTOR_OUT
    assert compute_output_node({}, {}, "o") is None
    assert "no upstream output" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Operation kinds
# ---------------------------------------------------------------------------


def test_task_accumulates_total():
    out = compute_task({"duration": 2.0}, {"previousTotalDuration": 1.5}, "t")
    assert out == TaskOutput(duration=2.0, total_duration=3.5)


def test_task_without_upstream_starts_at_zero():
    assert compute_task({"duration": 2.0}, {}, "t").total_duration == 2.0


def test_actuator_task_duration_from_profile():
    params = {"displacement": 100.0, "velocity": 50.0, "acceleration": 100.0, "deceleration": 100.0}
    out = compute_actuator_task(params, {"previousTotalDuration": 1.0}, "m")
    assert out.duration == pytest.approx(2.5)
    assert out.total_duration == pytest.approx(3.5)


def test_actuator_task_rounds_to_three_digits():
    params = {"displacement": 10.0, "velocity": 50.0, "acceleration": 100.0, "deceleration": 100.0}
    out = compute_actuator_task(params, {}, "m")
    assert out.duration == 0.632


def test_task_end_displays_upstream_total():
    assert compute_task_end({}, {"totalDuration": 6.0}, "end").total_duration == 6.0


def test_velocity_chart_profile():
    params = {"displacement": 100.0, "velocity": 50.0, "acceleration": 100.0, "deceleration": 100.0}
    out = compute_velocity_chart(params, {}, "chart")
    assert out.duration == pytest.approx(2.5)
    assert len(out.profile) == 4
    assert out.to_dict()["profile"][1] == {"time": 0.5, "velocity": 50.0}


def test_velocity_chart_prefers_upstream_motion():
    own = {"displacement": 10.0, "velocity": 50.0, "acceleration": 100.0, "deceleration": 100.0}
    aliases = {"displacement": 100.0, "velocity": None}
    out = compute_velocity_chart(own, aliases, "chart")
    assert out.total_duration == pytest.approx(2.5)


def test_velocity_chart_listens_on_target_handle():
    schema = get_kind("velocityChart")
    assert schema.has_target and not schema.has_source
    assert schema.input_handle == "target"
    assert set(schema.propagate_map) == {"displacement", "velocity", "acceleration", "deceleration"}
