"""Drive-configuration node kinds.

Actuators are sources; converters take the upstream ``outputSpec`` (copied
into the local alias ``prevOutputSpec``) and produce their own output; the
output node only displays what reaches it.

A converter with nothing connected computes from a zero-valued output of
the shape it expects and logs a warning.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.constants import ROUND_DIGITS
from ..core.logging import get_logger
from ..core.numeric import parse_float, parse_ratio, round_to_digits
from ..core.types import LinearOutput, RotationalOutput
from ..mechanics.drive import (
    actuator_linear_output,
    actuator_rotational_output,
    chain_efficiency,
    gear_convert,
    lin_to_lin_convert,
    lin_to_rot_convert,
    linear_power,
    rot_to_lin_convert,
    rotational_power,
)
from ..mechanics.units import PhysicalQuantity, unit_label
from .fields import (
    NumberField,
    SelectField,
    TextField,
    all_output_fields,
    linear_output_fields,
    rotational_output_fields,
)
from .schema import NodeKindSchema, register_kind

logger = get_logger(__name__)

PROPAGATE_OUTPUT = {"outputSpec": "prevOutputSpec"}

DIRECTION_OPTIONS = ((1, "Forward"), (-1, "Reverse"))


def default_rotational_output() -> RotationalOutput:
    return RotationalOutput()


def default_linear_output() -> LinearOutput:
    return LinearOutput(efficiency=0.9)


def _r(x: float) -> float:
    return round_to_digits(x, ROUND_DIGITS)


def _direction(params: Mapping[str, Any]) -> int:
    # Anything non-numeric counts as forward.
    return -1 if parse_float(params.get("direction"), 1.0) < 0 else 1


def _upstream(
    aliases: Mapping[str, Any], expected: type, node_id: str
) -> RotationalOutput | LinearOutput:
    """Upstream output of the expected shape, or a zero-valued default."""
    prev = aliases.get("prevOutputSpec")
    if prev is None:
        logger.warn("no upstream output, using defaults", node_id=node_id)
    elif not isinstance(prev, expected):
        logger.warn(
            "upstream output has wrong shape, using defaults",
            node_id=node_id,
            expected=expected.type,
            got=getattr(prev, "type", type(prev).__name__),
        )
        prev = None
    if prev is None:
        return default_rotational_output() if expected is RotationalOutput else default_linear_output()
    return prev


def _identity_fields() -> list:
    return [
        TextField(key="model", label="Model"),
        TextField(key="manufacturer", label="Manufacturer"),
    ]


def _efficiency_field(default: float) -> NumberField:
    return NumberField(key="efficiency", label="Efficiency", default=default, step=0.01)


# --- Actuators -------------------------------------------------------------


def compute_rotational_actuator(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> RotationalOutput:
    return actuator_rotational_output(
        rated_torque=parse_float(params.get("ratedTorque")),
        rated_speed=parse_float(params.get("ratedSpeed")),
        max_torque=parse_float(params.get("maxTorque")),
        max_speed=parse_float(params.get("maxSpeed")),
        rotor_inertia=parse_float(params.get("rotorInertia")),
        efficiency=parse_float(params.get("efficiency"), 1.0),
        direction=_direction(params),
    )


def compute_linear_actuator(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> LinearOutput:
    return actuator_linear_output(
        rated_force=parse_float(params.get("ratedForce")),
        rated_speed=parse_float(params.get("ratedSpeed")),
        max_speed=parse_float(params.get("maxSpeed")),
        acceleration=parse_float(params.get("acceleration")),
        stroke=parse_float(params.get("stroke")),
        efficiency=parse_float(params.get("efficiency"), 0.9),
        mass=parse_float(params.get("movingMass")),
        direction=_direction(params),
    )


ROTATIONAL_ACTUATOR = register_kind(
    NodeKindSchema(
        kind="rotationalActuator",
        title="Rotational Actuator",
        category="drive",
        has_target=False,
        propagate_map={},
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "ratedTorque": 0.0,
            "ratedSpeed": 0.0,
            "maxTorque": 0.0,
            "maxSpeed": 0.0,
            "rotorInertia": 0.0,
            "efficiency": 1.0,
            "direction": 1,
        },
        fields=(
            *_identity_fields(),
            NumberField(key="ratedTorque", label="Rated Torque", unit=unit_label(PhysicalQuantity.TORQUE), step=0.1),
            NumberField(key="ratedSpeed", label="Rated Speed", unit=unit_label(PhysicalQuantity.ROTATIONAL_SPEED)),
            NumberField(key="maxTorque", label="Max Torque", unit=unit_label(PhysicalQuantity.TORQUE), step=0.1),
            NumberField(key="maxSpeed", label="Max Speed", unit=unit_label(PhysicalQuantity.ROTATIONAL_SPEED)),
            NumberField(
                key="rotorInertia",
                label="Rotor Inertia",
                unit=unit_label(PhysicalQuantity.INERTIA),
                step=0.0001,
                digits=6,
            ),
            _efficiency_field(1.0),
            SelectField(key="direction", label="Direction", options=DIRECTION_OPTIONS, default=1),
            *rotational_output_fields(),
        ),
        compute=compute_rotational_actuator,
    )
)

LINEAR_ACTUATOR = register_kind(
    NodeKindSchema(
        kind="linearActuator",
        title="Linear Actuator",
        category="drive",
        has_target=False,
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "stroke": 0.0,
            "ratedForce": 0.0,
            "ratedSpeed": 0.0,
            "maxSpeed": 0.0,
            "acceleration": 0.0,
            "movingMass": 0.0,
            "efficiency": 0.9,
            "direction": 1,
        },
        fields=(
            *_identity_fields(),
            NumberField(key="stroke", label="Stroke", unit=unit_label(PhysicalQuantity.STROKE)),
            NumberField(key="ratedForce", label="Rated Force", unit=unit_label(PhysicalQuantity.FORCE), step=0.1),
            NumberField(key="ratedSpeed", label="Rated Speed", unit=unit_label(PhysicalQuantity.LINEAR_SPEED)),
            NumberField(key="maxSpeed", label="Max Speed", unit=unit_label(PhysicalQuantity.LINEAR_SPEED)),
            NumberField(
                key="acceleration",
                label="Acceleration",
                unit=unit_label(PhysicalQuantity.LINEAR_ACCELERATION),
            ),
            NumberField(key="movingMass", label="Moving Mass", unit=unit_label(PhysicalQuantity.MASS), step=0.01),
            _efficiency_field(0.9),
            SelectField(key="direction", label="Direction", options=DIRECTION_OPTIONS, default=1),
            *linear_output_fields(),
        ),
        compute=compute_linear_actuator,
    )
)


# --- Converters ------------------------------------------------------------


def compute_rot_to_rot(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> RotationalOutput:
    """Gear reducer / increaser."""
    prev = _upstream(aliases, RotationalOutput, node_id)
    ratio = parse_ratio(params.get("gearRatio"))
    efficiency = parse_float(params.get("efficiency"), 1.0)
    inertia = parse_float(params.get("inertia"))
    allowable = parse_float(params.get("allowableTorque"))

    rated = gear_convert(
        prev.rated_torque, prev.rated_speed, ratio, efficiency, prev.total_inertia, inertia
    )
    peak = gear_convert(prev.max_torque, prev.max_speed, ratio, efficiency)
    rated_torque = _r(rated.torque)

    return RotationalOutput(
        rated_torque=rated_torque,
        rated_speed=_r(rated.speed),
        rated_power=_r(rated.power),
        max_torque=_r(peak.torque) or rated_torque,
        max_speed=_r(peak.speed),
        max_power=_r(rotational_power(rated.torque, peak.speed)),
        allowable_torque=allowable,
        total_gear_ratio=prev.total_gear_ratio * ratio,
        total_inertia=rated.inertia,
        efficiency=chain_efficiency(prev.efficiency, efficiency),
        direction=prev.direction,
        is_overloaded=allowable > 0 and rated_torque > allowable,
    )


def compute_rot_to_lin(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> LinearOutput:
    """Ball screw, rack and pinion, belt."""
    prev = _upstream(aliases, RotationalOutput, node_id)
    lead = parse_ratio(params.get("lead"))
    efficiency = parse_float(params.get("efficiency"), 0.9)
    allowable = parse_float(params.get("allowableForce"))

    rated = rot_to_lin_convert(prev.rated_torque, prev.rated_speed, lead, efficiency)
    peak = rot_to_lin_convert(prev.max_torque, prev.max_speed, lead, efficiency)
    rated_force = _r(rated.force)

    return LinearOutput(
        rated_force=rated_force,
        rated_speed=_r(rated.velocity),
        rated_power=_r(rated.power),
        max_force=_r(peak.force) or rated_force,
        max_speed=_r(peak.velocity),
        max_power=_r(linear_power(rated.force, peak.velocity)),
        stroke=parse_float(params.get("stroke")),
        efficiency=chain_efficiency(prev.efficiency, efficiency),
        direction=prev.direction,
        is_overloaded=allowable > 0 and rated_force > allowable,
    )


def compute_lin_to_rot(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> RotationalOutput:
    """Rack driving a pinion, linear-to-rotary cam."""
    prev = _upstream(aliases, LinearOutput, node_id)
    ratio = parse_ratio(params.get("conversionRatio"))
    efficiency = parse_float(params.get("efficiency"), 0.9)
    allowable = parse_float(params.get("allowableTorque"))

    rated = lin_to_rot_convert(prev.rated_force, prev.rated_speed, ratio, efficiency)
    peak = lin_to_rot_convert(prev.max_force, prev.max_speed, ratio, efficiency)
    rated_torque = _r(rated.torque)

    return RotationalOutput(
        rated_torque=rated_torque,
        rated_speed=_r(rated.speed),
        rated_power=_r(rated.power),
        max_torque=_r(peak.torque) or rated_torque,
        max_speed=_r(peak.speed),
        max_power=_r(rotational_power(rated.torque, peak.speed)),
        allowable_torque=allowable,
        efficiency=chain_efficiency(prev.efficiency, efficiency),
        direction=prev.direction,
        is_overloaded=allowable > 0 and rated_torque > allowable,
    )


def compute_lin_to_lin(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> LinearOutput:
    """Lever or pulley scaling of a linear motion."""
    prev = _upstream(aliases, LinearOutput, node_id)
    ratio = parse_ratio(params.get("ratio"))
    efficiency = parse_float(params.get("efficiency"), 1.0)
    allowable = parse_float(params.get("allowableForce"))

    rated = lin_to_lin_convert(
        prev.rated_force,
        prev.rated_speed,
        ratio,
        efficiency,
        acceleration_in=prev.max_acceleration,
        mass_in=prev.mass,
    )
    peak = lin_to_lin_convert(prev.max_force, prev.max_speed, ratio, efficiency)
    rated_force = _r(rated.force)

    return LinearOutput(
        rated_force=rated_force,
        rated_speed=_r(rated.velocity),
        rated_power=_r(rated.power),
        max_force=_r(peak.force) or rated_force,
        max_speed=_r(peak.velocity),
        max_power=_r(linear_power(rated.force, peak.velocity)),
        stroke=_r(prev.stroke * ratio),
        max_acceleration=_r(rated.acceleration),
        mass=rated.mass,
        efficiency=chain_efficiency(prev.efficiency, efficiency),
        direction=prev.direction,
        is_overloaded=allowable > 0 and rated_force > allowable,
    )


ROT_TO_ROT_CONVERTER = register_kind(
    NodeKindSchema(
        kind="rotToRotConverter",
        title="Rotation to Rotation Converter",
        category="drive",
        propagate_map=PROPAGATE_OUTPUT,
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "gearRatio": 1.0,
            "inertia": 0.0,
            "allowableTorque": 0.0,
            "efficiency": 1.0,
        },
        fields=(
            *_identity_fields(),
            NumberField(
                key="gearRatio",
                label="Gear Ratio",
                default=1.0,
                min_value=0.01,
                step=0.01,
                digits=4,
            ),
            NumberField(
                key="inertia",
                label="Inertia",
                unit=unit_label(PhysicalQuantity.INERTIA),
                step=0.0001,
                digits=6,
            ),
            NumberField(
                key="allowableTorque",
                label="Allowable Torque",
                unit=unit_label(PhysicalQuantity.TORQUE),
                step=0.1,
            ),
            _efficiency_field(1.0),
            *rotational_output_fields(),
        ),
        compute=compute_rot_to_rot,
    )
)

ROT_TO_LIN_CONVERTER = register_kind(
    NodeKindSchema(
        kind="rotToLinConverter",
        title="Rotation to Linear Converter",
        category="drive",
        propagate_map=PROPAGATE_OUTPUT,
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "lead": 1.0,
            "stroke": 0.0,
            "allowableForce": 0.0,
            "efficiency": 0.9,
        },
        fields=(
            *_identity_fields(),
            NumberField(
                key="lead",
                label="Lead",
                unit=unit_label(PhysicalQuantity.DISTANCE),
                default=1.0,
                min_value=0.01,
                step=0.01,
                digits=4,
            ),
            NumberField(key="stroke", label="Stroke", unit=unit_label(PhysicalQuantity.STROKE)),
            NumberField(
                key="allowableForce",
                label="Allowable Force",
                unit=unit_label(PhysicalQuantity.FORCE),
                step=0.1,
            ),
            _efficiency_field(0.9),
            *linear_output_fields(),
        ),
        compute=compute_rot_to_lin,
    )
)

LIN_TO_ROT_CONVERTER = register_kind(
    NodeKindSchema(
        kind="linToRotConverter",
        title="Linear to Rotation Converter",
        category="drive",
        propagate_map=PROPAGATE_OUTPUT,
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "conversionRatio": 1.0,
            "allowableTorque": 0.0,
            "efficiency": 0.9,
        },
        fields=(
            *_identity_fields(),
            NumberField(
                key="conversionRatio",
                label="Conversion Ratio",
                unit="rev/mm",
                default=1.0,
                min_value=0.0001,
                step=0.001,
                digits=6,
            ),
            NumberField(
                key="allowableTorque",
                label="Allowable Torque",
                unit=unit_label(PhysicalQuantity.TORQUE),
                step=0.1,
            ),
            _efficiency_field(0.9),
            *rotational_output_fields(),
        ),
        compute=compute_lin_to_rot,
    )
)

LIN_TO_LIN_CONVERTER = register_kind(
    NodeKindSchema(
        kind="linToLinConverter",
        title="Linear to Linear Converter",
        category="drive",
        propagate_map=PROPAGATE_OUTPUT,
        initial_data=lambda: {
            "model": "",
            "manufacturer": "",
            "ratio": 1.0,
            "allowableForce": 0.0,
            "efficiency": 1.0,
        },
        fields=(
            *_identity_fields(),
            NumberField(key="ratio", label="Ratio", default=1.0, min_value=0.01, step=0.01, digits=4),
            NumberField(
                key="allowableForce",
                label="Allowable Force",
                unit=unit_label(PhysicalQuantity.FORCE),
                step=0.1,
            ),
            _efficiency_field(1.0),
            *linear_output_fields(),
        ),
        compute=compute_lin_to_lin,
    )
)


# --- Sink ------------------------------------------------------------------


def compute_output_node(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> RotationalOutput | LinearOutput | None:
    """Pass the upstream output through unchanged."""
    prev = aliases.get("prevOutputSpec")
    if prev is None:
        logger.warn("output node has no upstream output", node_id=node_id)
    return prev


OUTPUT_NODE = register_kind(
    NodeKindSchema(
        kind="outputNode",
        title="Output",
        category="drive",
        has_source=False,
        propagate_map=PROPAGATE_OUTPUT,
        fields=tuple(all_output_fields()),
        compute=compute_output_node,
    )
)
