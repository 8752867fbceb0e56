"""Physical quantity unit labels (display only, no conversion)."""

from __future__ import annotations

from enum import Enum


class PhysicalQuantity(str, Enum):
    # Rotational
    TORQUE = "torque"
    ROTATIONAL_SPEED = "rotationalSpeed"
    ROTATIONAL_ACCELERATION = "rotationalAcceleration"
    INERTIA = "inertia"
    GEAR_RATIO = "gearRatio"

    # Linear
    FORCE = "force"
    LINEAR_SPEED = "linearSpeed"
    LINEAR_ACCELERATION = "linearAcceleration"
    DISTANCE = "distance"
    STROKE = "stroke"
    CONVERSION_RATIO = "conversionRatio"

    # Common
    POWER = "power"
    EFFICIENCY = "efficiency"
    TIME = "time"
    MASS = "mass"


UNIT_LABELS: dict[PhysicalQuantity, str] = {
    PhysicalQuantity.TORQUE: "N·m",
    PhysicalQuantity.ROTATIONAL_SPEED: "rpm",
    PhysicalQuantity.ROTATIONAL_ACCELERATION: "rad/s²",
    PhysicalQuantity.INERTIA: "kg·m²",
    PhysicalQuantity.GEAR_RATIO: "",
    PhysicalQuantity.FORCE: "N",
    PhysicalQuantity.LINEAR_SPEED: "mm/s",
    PhysicalQuantity.LINEAR_ACCELERATION: "mm/s²",
    PhysicalQuantity.DISTANCE: "mm",
    PhysicalQuantity.STROKE: "mm",
    PhysicalQuantity.CONVERSION_RATIO: "",
    PhysicalQuantity.POWER: "W",
    PhysicalQuantity.EFFICIENCY: "%",
    PhysicalQuantity.TIME: "s",
    PhysicalQuantity.MASS: "kg",
}


def unit_label(quantity: PhysicalQuantity | str) -> str:
    """Unit label for a quantity (accepts the enum or its string value)."""
    return UNIT_LABELS[PhysicalQuantity(quantity)]


def format_efficiency_percent(value: float) -> str:
    """0.9 -> '90.0%'."""
    return f"{value * 100:.1f}%"
