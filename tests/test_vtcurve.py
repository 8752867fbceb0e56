"""VT curve interpolation and calibration tests."""

import pytest

from drivegraph.mechanics.vtcurve import (
    CurveCalibration,
    CurvePoint,
    calibrate_points,
    interpolate_torque,
    sort_curve,
    torque_margin,
)


def test_interpolate_midpoint():
    assert interpolate_torque([(0, 10), (1000, 5)], 500) == pytest.approx(7.5)


def test_interpolate_out_of_range():
    curve = [(0, 10), (1000, 5)]
    assert interpolate_torque(curve, 1500) is None
    assert interpolate_torque(curve, -1) is None


def test_interpolate_needs_two_points():
    assert interpolate_torque([], 0) is None
    assert interpolate_torque([(100, 3)], 100) is None


def test_interpolate_endpoints():
    curve = [(0, 10), (1000, 5)]
    assert interpolate_torque(curve, 0) == pytest.approx(10.0)
    assert interpolate_torque(curve, 1000) == pytest.approx(5.0)


def test_interpolate_unsorted_dict_points():
    curve = [{"rpm": 2000, "torque": 2}, {"rpm": 0, "torque": 10}, {"rpm": 1000, "torque": 6}]
    assert interpolate_torque(curve, 1500) == pytest.approx(4.0)


def test_duplicate_rpm_last_sample_wins():
    curve = [(0, 0), (500, 10), (500, 20), (1000, 20)]
    assert interpolate_torque(curve, 500) == pytest.approx(20.0)
    assert [p.torque for p in sort_curve(curve)] == [0, 10, 20, 20]


def test_torque_margin():
    curve = [(0, 10), (1000, 5)]
    assert torque_margin(curve, 500, 5.0) == pytest.approx(2.5)
    assert torque_margin(curve, 2000, 5.0) is None


def _calibration() -> CurveCalibration:
    # 400 px wide plot: 0-4000 rpm along x, 0-20 N·m along y (image y down)
    return CurveCalibration(
        origin_px=(50.0, 450.0),
        x_axis_px=(450.0, 450.0),
        y_axis_px=(50.0, 50.0),
        origin_rpm=0.0,
        origin_torque=0.0,
        x_axis_rpm=4000.0,
        y_axis_torque=20.0,
    )


def test_calibration_maps_pixels():
    cal = _calibration()
    p = cal.to_value(250.0, 250.0)
    assert p.rpm == pytest.approx(2000.0)
    assert p.torque == pytest.approx(10.0)


def test_calibrate_points_sorted():
    points = calibrate_points([(450.0, 350.0), (50.0, 50.0)], _calibration())
    assert all(isinstance(p, CurvePoint) for p in points)
    assert points[0].rpm == pytest.approx(0.0)
    assert points[0].torque == pytest.approx(20.0)
    assert points[1].rpm == pytest.approx(4000.0)
    assert points[1].torque == pytest.approx(5.0)


def test_image_extent():
    extent = _calibration().image_extent(500.0, 500.0)
    assert extent["xMin"] == pytest.approx(-500.0)
    assert extent["xMax"] == pytest.approx(4500.0)
    assert extent["yMin"] == pytest.approx(-2.5)
    assert extent["yMax"] == pytest.approx(22.5)


def test_degenerate_calibration_raises():
    with pytest.raises(ValueError):
        CurveCalibration((0, 0), (0, 10), (10, 10), 0, 0, 1000, 10)
    with pytest.raises(ValueError):
        CurveCalibration((0, 0), (10, 0), (0, 0), 0, 0, 1000, 10)
