"""Operation (task-sequence) node kinds.

Tasks form a chain ``taskStart -> task* -> taskEnd``. Each task adds its
own duration to the running total it receives from upstream:

    totalDuration = previousTotalDuration + duration
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.constants import CHART_INPUT_HANDLE, DURATION_DIGITS, MIN_RATE
from ..core.logging import get_logger
from ..core.numeric import parse_float, round_to_digits
from ..core.types import TaskOutput
from ..mechanics.motion import velocity_profile
from ..mechanics.units import PhysicalQuantity, unit_label
from .fields import NumberField, TextField, task_output_fields
from .schema import NodeKindSchema, register_kind

logger = get_logger(__name__)

PROPAGATE_TOTAL = {"totalDuration": "previousTotalDuration"}
PROPAGATE_MOTION = {
    name: name for name in ("displacement", "velocity", "acceleration", "deceleration")
}


def _previous_total(aliases: Mapping[str, Any], node_id: str) -> float:
    prev = aliases.get("previousTotalDuration")
    if prev is None:
        logger.debug("task has no upstream total, starting from 0", node_id=node_id)
    return parse_float(prev)


def _task_output(duration: float, previous_total: float) -> TaskOutput:
    return TaskOutput(
        duration=round_to_digits(duration, DURATION_DIGITS),
        total_duration=round_to_digits(previous_total + duration, DURATION_DIGITS),
    )


def _motion_fields() -> list:
    return [
        NumberField(
            key="displacement",
            label="Displacement",
            unit=unit_label(PhysicalQuantity.DISTANCE),
        ),
        NumberField(
            key="velocity",
            label="Velocity",
            unit=unit_label(PhysicalQuantity.LINEAR_SPEED),
            default=MIN_RATE,
            min_value=MIN_RATE,
        ),
        NumberField(
            key="acceleration",
            label="Acceleration",
            unit=unit_label(PhysicalQuantity.LINEAR_ACCELERATION),
            default=MIN_RATE,
            min_value=MIN_RATE,
        ),
        NumberField(
            key="deceleration",
            label="Deceleration",
            unit=unit_label(PhysicalQuantity.LINEAR_ACCELERATION),
            default=MIN_RATE,
            min_value=MIN_RATE,
        ),
    ]


def _motion_data() -> dict[str, Any]:
    return {"displacement": 0.0, "velocity": 100.0, "acceleration": 1000.0, "deceleration": 1000.0}


def _profile_of(params: Mapping[str, Any]):
    return velocity_profile(
        parse_float(params.get("displacement")),
        parse_float(params.get("velocity")),
        parse_float(params.get("acceleration")),
        parse_float(params.get("deceleration")),
    )


def compute_task_start(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> TaskOutput:
    return TaskOutput()


def compute_task(params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str) -> TaskOutput:
    """Fixed-duration task (dwell, clamp, manual step)."""
    duration = max(parse_float(params.get("duration")), 0.0)
    return _task_output(duration, _previous_total(aliases, node_id))


def compute_actuator_task(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> TaskOutput:
    """Move task; duration from the trapezoidal/triangular profile."""
    duration = _profile_of(params).total_time
    return _task_output(duration, _previous_total(aliases, node_id))


def compute_task_end(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> TaskOutput:
    total = aliases.get("totalDuration")
    if total is None:
        logger.warn("task end has no upstream total", node_id=node_id)
    return TaskOutput(total_duration=round_to_digits(parse_float(total), DURATION_DIGITS))


def compute_velocity_chart(
    params: Mapping[str, Any], aliases: Mapping[str, Any], node_id: str
) -> TaskOutput:
    """Profile of the feeding actuator task; own parameters when unconnected."""
    motion = {**params, **{k: v for k, v in aliases.items() if v is not None}}
    profile = _profile_of(motion)
    return TaskOutput(
        duration=profile.total_time,
        total_duration=profile.total_time,
        profile=profile.points,
    )


TASK_START = register_kind(
    NodeKindSchema(
        kind="taskStart",
        title="Start",
        category="operation",
        has_target=False,
        initial_data=lambda: {"label": "Start"},
        fields=(TextField(key="label", label="Label"),),
        compute=compute_task_start,
    )
)

TASK = register_kind(
    NodeKindSchema(
        kind="task",
        title="Task",
        category="operation",
        propagate_map=PROPAGATE_TOTAL,
        initial_data=lambda: {"name": "", "duration": 0.0},
        fields=(
            TextField(key="name", label="Name"),
            NumberField(
                key="duration",
                label="Duration",
                unit=unit_label(PhysicalQuantity.TIME),
                step=0.1,
            ),
            *task_output_fields(include_duration=False),
        ),
        compute=compute_task,
    )
)

ACTUATOR_TASK = register_kind(
    NodeKindSchema(
        kind="actuatorTask",
        title="Actuator Task",
        category="operation",
        propagate_map=PROPAGATE_TOTAL,
        initial_data=lambda: {"name": "", **_motion_data()},
        fields=(
            TextField(key="name", label="Name"),
            *_motion_fields(),
            *task_output_fields(),
        ),
        compute=compute_actuator_task,
    )
)

TASK_END = register_kind(
    NodeKindSchema(
        kind="taskEnd",
        title="End",
        category="operation",
        has_source=False,
        propagate_map={"totalDuration": "totalDuration"},
        initial_data=lambda: {"label": "End"},
        fields=(
            TextField(key="label", label="Label"),
            *task_output_fields(include_duration=False),
        ),
        compute=compute_task_end,
    )
)

VELOCITY_CHART = register_kind(
    NodeKindSchema(
        kind="velocityChart",
        title="Velocity Chart",
        category="detail",
        has_source=False,
        input_handle=CHART_INPUT_HANDLE,
        propagate_map=PROPAGATE_MOTION,
        initial_data=_motion_data,
        fields=(*_motion_fields(), *task_output_fields()),
        compute=compute_velocity_chart,
    )
)
