"""Trapezoidal / triangular velocity profiles.

A move of ``distance`` with speed limit ``v_max`` and constant
acceleration ``a`` / deceleration ``d``:

    t_acc = v_max / a,  s_acc = a·t_acc²/2
    t_dec = v_max / d,  s_dec = d·t_dec²/2

If s_acc + s_dec > distance the speed limit is never reached and the
profile is triangular with peak velocity from

    distance = v_peak²/(2a) + v_peak²/(2d)

otherwise it is trapezoidal with a constant-velocity segment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..core.constants import PROFILE_DIGITS
from ..core.numeric import round_to_digits
from ..core.types import ProfilePoint


@dataclass(frozen=True)
class VelocityProfile:
    """Velocity profile vertices and total move time.

    Attributes:
        points: (time, velocity) vertices, piecewise linear in between.
        total_time: Move duration (s).
        shape: "empty", "triangular" or "trapezoidal".
    """

    points: tuple[ProfilePoint, ...]
    total_time: float
    shape: str

    @property
    def peak_velocity(self) -> float:
        return max((p.velocity for p in self.points), default=0.0)

    @property
    def times(self) -> np.ndarray:
        return np.array([p.time for p in self.points], dtype=np.float64)

    @property
    def velocities(self) -> np.ndarray:
        return np.array([p.velocity for p in self.points], dtype=np.float64)


EMPTY_PROFILE = VelocityProfile(points=(), total_time=0.0, shape="empty")


def velocity_profile(
    distance: float,
    max_velocity: float,
    acceleration: float,
    deceleration: float,
    digits: int = PROFILE_DIGITS,
) -> VelocityProfile:
    """Compute the move profile.

    Args:
        distance: Displacement (mm).
        max_velocity: Speed limit (mm/s).
        acceleration: Acceleration (mm/s²).
        deceleration: Deceleration (mm/s²), positive.
        digits: Decimal digits kept on every emitted number.

    Returns:
        VelocityProfile. Degenerate input (any argument <= 0) yields the
        empty profile with total_time 0.
    """
    if distance <= 0 or max_velocity <= 0 or acceleration <= 0 or deceleration <= 0:
        return EMPTY_PROFILE

    def r(x: float) -> float:
        return round_to_digits(x, digits)

    accel_time = max_velocity / acceleration
    accel_dist = 0.5 * acceleration * accel_time**2
    decel_time = max_velocity / deceleration
    decel_dist = 0.5 * deceleration * decel_time**2

    if accel_dist + decel_dist > distance:
        peak_velocity = math.sqrt(
            2.0 * distance * acceleration * deceleration / (acceleration + deceleration)
        )
        peak_time = peak_velocity / acceleration
        total_time = peak_time * (1.0 + acceleration / deceleration)
        points = (
            ProfilePoint(0.0, 0.0),
            ProfilePoint(r(peak_time), r(peak_velocity)),
            ProfilePoint(r(total_time), 0.0),
        )
        return VelocityProfile(points=points, total_time=r(total_time), shape="triangular")

    const_dist = distance - (accel_dist + decel_dist)
    const_time = const_dist / max_velocity
    t1 = accel_time
    t2 = t1 + const_time
    t3 = t2 + decel_time
    points = (
        ProfilePoint(0.0, 0.0),
        ProfilePoint(r(t1), r(max_velocity)),
        ProfilePoint(r(t2), r(max_velocity)),
        ProfilePoint(r(t3), 0.0),
    )
    return VelocityProfile(points=points, total_time=r(t3), shape="trapezoidal")


def calculate_duration(
    distance: float,
    max_velocity: float,
    acceleration: float,
    deceleration: float,
) -> float:
    """Move duration only (s)."""
    return velocity_profile(distance, max_velocity, acceleration, deceleration).total_time


def sample_profile(profile: VelocityProfile, n: int = 50) -> tuple[np.ndarray, np.ndarray]:
    """Sample the profile on a uniform time grid.

    Args:
        profile: Profile to sample.
        n: Number of samples (>= 2).

    Returns:
        (t, v) arrays of length n; empty arrays for an empty profile.
    """
    if not profile.points:
        return np.zeros(0), np.zeros(0)
    if n < 2:
        raise ValueError(f"Need at least 2 samples, got {n}")
    t = np.linspace(0.0, profile.total_time, n)
    v = np.interp(t, profile.times, profile.velocities)
    return t, v


def profile_distance(profile: VelocityProfile) -> float:
    """Distance covered by the profile (area under v(t))."""
    if len(profile.points) < 2:
        return 0.0
    t = profile.times
    v = profile.velocities
    # Trapezoidal integration (exact for piecewise-linear v)
    return float(np.sum((v[:-1] + v[1:]) / 2 * np.diff(t)))
