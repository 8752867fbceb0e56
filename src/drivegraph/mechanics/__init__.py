"""Mechanics module: closed-form drive, motion and VT-curve formulas."""

from .drive import (
    GearResult,
    LinearResult,
    RotaryResult,
    actuator_linear_output,
    actuator_rotational_output,
    gear_convert,
    lin_to_lin_convert,
    lin_to_rot_convert,
    rot_to_lin_convert,
)
from .motion import VelocityProfile, calculate_duration, sample_profile, velocity_profile
from .vtcurve import CurveCalibration, CurvePoint, calibrate_points, interpolate_torque

__all__ = [
    "CurveCalibration",
    "CurvePoint",
    "GearResult",
    "LinearResult",
    "RotaryResult",
    "VelocityProfile",
    "actuator_linear_output",
    "actuator_rotational_output",
    "calculate_duration",
    "calibrate_points",
    "gear_convert",
    "interpolate_torque",
    "lin_to_lin_convert",
    "lin_to_rot_convert",
    "rot_to_lin_convert",
    "sample_profile",
    "velocity_profile",
]
