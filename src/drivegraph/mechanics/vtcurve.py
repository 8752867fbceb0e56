"""Speed/torque (VT) performance curves.

A curve is a list of ``{"rpm", "torque"}`` samples, typically digitised
from a datasheet plot. Lookup is by linear interpolation between the two
samples bracketing the requested speed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

CurvePointLike = Union["CurvePoint", Mapping[str, Any], Sequence[float]]


@dataclass(frozen=True)
class CurvePoint:
    rpm: float
    torque: float

    def to_dict(self) -> dict[str, float]:
        return {"rpm": self.rpm, "torque": self.torque}


def _as_point(p: CurvePointLike) -> CurvePoint:
    if isinstance(p, CurvePoint):
        return p
    if isinstance(p, Mapping):
        return CurvePoint(float(p["rpm"]), float(p["torque"]))
    rpm, torque = p
    return CurvePoint(float(rpm), float(torque))


def sort_curve(curve: Iterable[CurvePointLike]) -> list[CurvePoint]:
    """Return curve points sorted by rpm (stable, duplicates kept)."""
    return sorted((_as_point(p) for p in curve), key=lambda p: p.rpm)


def interpolate_torque(curve: Iterable[CurvePointLike], rpm: float) -> float | None:
    """Torque available at ``rpm``.

    Args:
        curve: Sample points in any order.
        rpm: Query speed.

    Returns:
        Interpolated torque, or None when the curve has fewer than two
        points or ``rpm`` lies outside the sampled range. With duplicate
        rpm values the last one in sorted order is used.
    """
    points = sort_curve(curve)
    if len(points) < 2:
        return None

    rpms = np.array([p.rpm for p in points], dtype=np.float64)
    torques = np.array([p.torque for p in points], dtype=np.float64)
    if rpm < rpms[0] or rpm > rpms[-1]:
        return None

    # Last sample with rpms[i] <= rpm
    i = int(np.searchsorted(rpms, rpm, side="right")) - 1
    if i >= len(points) - 1:
        return float(torques[-1])

    r1, r2 = rpms[i], rpms[i + 1]
    t1, t2 = torques[i], torques[i + 1]
    return float(t1 + (rpm - r1) / (r2 - r1) * (t2 - t1))


def torque_margin(curve: Iterable[CurvePointLike], rpm: float, required_torque: float) -> float | None:
    """Available minus required torque at ``rpm`` (None if indeterminate)."""
    available = interpolate_torque(curve, rpm)
    if available is None:
        return None
    return available - required_torque


@dataclass(frozen=True)
class CurveCalibration:
    """Pixel-to-value mapping for a digitised curve image.

    Three reference pixels are picked on the image: the origin, a point on
    the x axis and a point on the y axis, each with its known value.
    Image y grows downwards; the mapping handles that through the sign of
    ``y_axis_px[1] - origin_px[1]``.
    """

    origin_px: tuple[float, float]
    x_axis_px: tuple[float, float]
    y_axis_px: tuple[float, float]
    origin_rpm: float
    origin_torque: float
    x_axis_rpm: float
    y_axis_torque: float

    def __post_init__(self) -> None:
        if self.x_axis_px[0] == self.origin_px[0]:
            raise ValueError("x-axis reference pixel must differ from origin in x")
        if self.y_axis_px[1] == self.origin_px[1]:
            raise ValueError("y-axis reference pixel must differ from origin in y")

    @property
    def rpm_per_px(self) -> float:
        return (self.x_axis_rpm - self.origin_rpm) / (self.x_axis_px[0] - self.origin_px[0])

    @property
    def torque_per_px(self) -> float:
        return (self.y_axis_torque - self.origin_torque) / (self.y_axis_px[1] - self.origin_px[1])

    def to_value(self, x: float, y: float) -> CurvePoint:
        """Map an image pixel to (rpm, torque)."""
        return CurvePoint(
            rpm=self.origin_rpm + (x - self.origin_px[0]) * self.rpm_per_px,
            torque=self.origin_torque + (y - self.origin_px[1]) * self.torque_per_px,
        )

    def image_extent(self, width: float, height: float) -> dict[str, float]:
        """Value range covered by an image of ``width`` x ``height`` pixels."""
        corners = [self.to_value(0.0, 0.0), self.to_value(width, height)]
        return {
            "xMin": min(c.rpm for c in corners),
            "xMax": max(c.rpm for c in corners),
            "yMin": min(c.torque for c in corners),
            "yMax": max(c.torque for c in corners),
        }


def calibrate_points(
    pixels: Iterable[Sequence[float]], calibration: CurveCalibration
) -> list[CurvePoint]:
    """Map digitised pixels to curve points, sorted by rpm."""
    return sort_curve(calibration.to_value(float(x), float(y)) for x, y in pixels)
