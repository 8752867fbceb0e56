"""Field descriptor tests."""

import pytest

from drivegraph.core.types import LinearOutput, RotationalOutput
from drivegraph.nodes.fields import (
    NumberField,
    ReadonlyField,
    SelectField,
    TextField,
    rotational_output_fields,
    task_output_fields,
)


def test_number_field_clamps_and_coerces():
    f = NumberField(key="stroke", label="Stroke")
    assert f.set_value("12.5", {})["stroke"] == 12.5
    assert f.set_value(-5, {})["stroke"] == 0.0
    assert f.set_value("abc", {})["stroke"] == 0.0
    assert f.set_value("", {})["stroke"] == 0.0


def test_rate_field_minimum():
    f = NumberField(key="velocity", label="Velocity", min_value=0.1)
    assert f.set_value(0, {})["velocity"] == 0.1
    assert f.set_value("x", {})["velocity"] == 0.1
    assert f.set_value(2.34567, {})["velocity"] == 2.346


def test_set_value_returns_new_dict():
    params = {"stroke": 1.0, "model": "A"}
    out = NumberField(key="stroke", label="Stroke").set_value(3, params)
    assert out == {"stroke": 3.0, "model": "A"}
    assert params["stroke"] == 1.0


def test_number_field_validate():
    f = NumberField(key="ratio", label="Ratio", min_value=0.01)
    assert f.validate("2", {}) is None
    assert "must be a number" in f.validate("two", {})
    assert ">=" in f.validate(-1, {})


def test_number_field_get_value_default():
    f = NumberField(key="ratio", label="Ratio", default=1.0)
    assert f.get_value({}) == 1.0
    assert f.get_value({"ratio": "3"}) == 3.0


def test_text_field():
    f = TextField(key="model", label="Model")
    assert f.get_value({}) == ""
    assert f.set_value(None, {})["model"] == ""
    assert f.set_value(42, {})["model"] == "42"


def test_select_field_matches_string_form():
    f = SelectField(key="direction", label="Direction", options=((1, "Fwd"), (-1, "Rev")), default=1)
    assert f.set_value("-1", {})["direction"] == -1
    assert f.get_value({}) == 1
    assert f.validate("1", {}) is None
    assert f.validate("2", {}) is not None
    with pytest.raises(ValueError):
        f.set_value("sideways", {})


def test_readonly_field_rejects_set():
    f = ReadonlyField(key="x", label="X")
    assert f.is_readonly({})
    with pytest.raises(ValueError):
        f.set_value(1, {})


def _locked(params):
    return params.get("locked", False)


def test_readonly_predicate_on_any_field():
    text = TextField(key="model", label="Model", readonly=_locked)
    select = SelectField(key="direction", label="Direction", options=((1, "F"),), readonly=_locked)
    number = NumberField(key="stroke", label="Stroke", readonly=_locked)
    for f in (text, select, number):
        assert not f.is_readonly({})
        assert f.is_readonly({"locked": True})
    assert not TextField(key="name", label="Name").is_readonly({"locked": True})


def test_rotational_output_fields_visibility():
    torque = rotational_output_fields()[0]
    assert torque.key == "ratedTorqueOut"
    assert torque.is_hidden({}, None)
    assert torque.is_hidden({}, LinearOutput())
    assert not torque.is_hidden({}, RotationalOutput())
    assert torque.get_value({}, RotationalOutput(rated_torque=3.0)) == 3.0


def test_task_output_fields():
    keys = [f.key for f in task_output_fields()]
    assert keys == ["durationOut", "totalDurationOut"]
    assert [f.key for f in task_output_fields(include_duration=False)] == ["totalDurationOut"]


def test_describe():
    d = NumberField(key="lead", label="Lead", unit="mm", min_value=0.01).describe()
    assert d["type"] == "number"
    assert d["unit"] == "mm"
    assert d["min"] == 0.01
