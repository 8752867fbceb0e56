"""Closed-form drive conversions.

Gear stages, screw/belt stages (rotation <-> linear), linear scaling
(levers) and actuator ratings. All functions are pure and unrounded unless
noted; node compute functions round before storing.

Units follow the editor: torque N·m, rotational speed rpm, force N,
linear speed mm/s, power W, inertia kg·m², mass kg.

Ratios are assumed nonzero. Callers substitute a default (1) for a zero or
missing ratio before calling.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import ROUND_DIGITS, RPM_TO_RAD_S, TWO_PI
from ..core.numeric import round_to_digits
from ..core.types import LinearOutput, RotationalOutput


@dataclass(frozen=True)
class GearResult:
    """Result of one gear stage."""

    torque: float
    speed: float
    power: float
    inertia: float


@dataclass(frozen=True)
class LinearResult:
    """Result of a stage with linear output."""

    force: float
    velocity: float
    power: float
    acceleration: float = 0.0
    mass: float = 0.0


@dataclass(frozen=True)
class RotaryResult:
    """Result of a stage with rotational output."""

    torque: float
    speed: float
    power: float


def rotational_power(torque: float, speed_rpm: float) -> float:
    """Mechanical power P = T·ω (W) with ω from rpm."""
    return torque * speed_rpm * RPM_TO_RAD_S


def linear_power(force: float, speed: float) -> float:
    """Power (W) from force (N) and speed (mm/s)."""
    return force * speed / 1000.0


def gear_convert(
    torque_in: float,
    speed_in: float,
    gear_ratio: float,
    efficiency: float,
    inertia_in: float = 0.0,
    inertia_local: float = 0.0,
) -> GearResult:
    """Convert through a gear stage.

    torque = T_in · i · η
    speed  = n_in / i
    power  = torque · speed · 2π/60
    inertia = J_local + J_in / i²

    Args:
        torque_in: Input torque (N·m).
        speed_in: Input speed (rpm).
        gear_ratio: Reduction ratio i (>1 reduces speed).
        efficiency: Stage efficiency η.
        inertia_in: Upstream inertia (kg·m²).
        inertia_local: Inertia of this stage (kg·m²).

    Returns:
        GearResult.
    """
    torque = torque_in * gear_ratio * efficiency
    speed = speed_in / gear_ratio
    return GearResult(
        torque=torque,
        speed=speed,
        power=rotational_power(torque, speed),
        inertia=inertia_local + inertia_in / gear_ratio**2,
    )


def rot_to_lin_convert(
    torque_in: float,
    speed_rpm: float,
    lead: float,
    efficiency: float,
) -> LinearResult:
    """Convert rotation to translation (ball screw, rack, belt).

    force    = T · 2π · η / lead
    velocity = n · lead / 60
    power    = force · velocity / 1000
    """
    force = torque_in * TWO_PI * efficiency / lead
    velocity = speed_rpm * lead / 60.0
    return LinearResult(force=force, velocity=velocity, power=linear_power(force, velocity))


def lin_to_rot_convert(
    force_in: float,
    velocity_in: float,
    conversion_ratio: float,
    efficiency: float,
) -> RotaryResult:
    """Convert translation to rotation.

    torque = F · η / (2π · ratio)
    speed  = v · ratio · 60
    power  = torque · speed · π/30
    """
    torque = force_in * efficiency / (TWO_PI * conversion_ratio)
    speed = velocity_in * conversion_ratio * 60.0
    return RotaryResult(torque=torque, speed=speed, power=torque * speed * math.pi / 30.0)


def lin_to_lin_convert(
    force_in: float,
    velocity_in: float,
    ratio: float,
    efficiency: float,
    acceleration_in: float = 0.0,
    mass_in: float = 0.0,
) -> LinearResult:
    """Scale a linear motion (lever, pulley block).

    Reflected mass follows the inverse-square law m_out = m_in / ratio².
    """
    force = force_in / ratio * efficiency
    velocity = velocity_in * ratio
    return LinearResult(
        force=force,
        velocity=velocity,
        power=linear_power(force, velocity),
        acceleration=acceleration_in * ratio,
        mass=mass_in / ratio**2,
    )


def actuator_rotational_output(
    rated_torque: float,
    rated_speed: float,
    max_torque: float,
    max_speed: float,
    rotor_inertia: float,
    efficiency: float = 1.0,
    direction: int = 1,
) -> RotationalOutput:
    """Output spec of a motor.

    Max power is evaluated with the *rated* torque at max speed
    (constant-torque region assumption).
    """
    return RotationalOutput(
        rated_torque=rated_torque,
        rated_speed=rated_speed,
        rated_power=round_to_digits(rotational_power(rated_torque, rated_speed), ROUND_DIGITS),
        max_torque=max_torque,
        max_speed=max_speed,
        max_power=round_to_digits(rotational_power(rated_torque, max_speed), ROUND_DIGITS),
        allowable_torque=rated_torque,
        total_gear_ratio=1.0,
        total_inertia=rotor_inertia,
        efficiency=efficiency,
        direction=direction,
    )


def actuator_linear_output(
    rated_force: float,
    rated_speed: float,
    max_speed: float,
    acceleration: float,
    stroke: float,
    efficiency: float = 0.9,
    mass: float = 0.0,
    direction: int = 1,
) -> LinearOutput:
    """Output spec of a linear actuator (constant-force region assumption)."""
    return LinearOutput(
        rated_force=rated_force,
        rated_speed=rated_speed,
        rated_power=round_to_digits(linear_power(rated_force, rated_speed), ROUND_DIGITS),
        max_force=rated_force,
        max_speed=max_speed,
        max_power=round_to_digits(linear_power(rated_force, max_speed), ROUND_DIGITS),
        stroke=stroke,
        max_acceleration=acceleration,
        mass=mass,
        efficiency=efficiency,
        direction=direction,
    )


def chain_efficiency(upstream: float | None, local: float) -> float:
    """Multiply stage efficiencies; a missing/zero upstream counts as 1."""
    return upstream * local if upstream else local
