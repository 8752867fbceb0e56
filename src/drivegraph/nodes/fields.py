"""Declarative parameter field descriptors.

Each field is a small frozen dataclass carrying plain data (key, label,
unit, group, bounds) plus optional pure predicates. Renderers read
``field_type`` to pick a widget; the engine only uses ``get_value`` /
``set_value`` / ``validate``.

Contract:
    get_value(parameters, output=None) -> value
    set_value(value, parameters) -> new parameters dict
    validate(value, parameters) -> error message or None
    is_hidden(parameters, output=None) -> bool
    is_readonly(parameters) -> bool

Every field takes optional ``hidden`` and ``readonly`` predicates.
``readonly`` is called with the parameters only; ``hidden`` also receives
the current output (or None) so output display fields can hide themselves
when the output has another shape.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ..core.constants import DURATION_DIGITS, MIN_VALUE
from ..core.numeric import parse_float, validate_numeric_input
from ..core.types import OutputValue

Predicate = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class FieldBase:
    key: str
    label: str
    group: str = "parameters"
    unit: str = ""
    description: str = ""
    hidden: Callable[..., bool] | None = None
    readonly: Predicate | None = None

    field_type: ClassVar[str] = ""
    editable: ClassVar[bool] = True

    def get_value(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> Any:
        return parameters.get(self.key)

    def set_value(self, value: Any, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return {**parameters, self.key: value}

    def validate(self, value: Any, parameters: Mapping[str, Any]) -> str | None:
        return None

    def is_hidden(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> bool:
        if self.hidden is None:
            return False
        return bool(self.hidden(parameters, output))

    def is_readonly(self, parameters: Mapping[str, Any]) -> bool:
        if not self.editable:
            return True
        return bool(self.readonly and self.readonly(parameters))

    def describe(self) -> dict[str, Any]:
        """Plain-data view for renderers and the CLI."""
        return {
            "key": self.key,
            "label": self.label,
            "type": self.field_type,
            "group": self.group,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class TextField(FieldBase):
    field_type: ClassVar[str] = "text"

    def get_value(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> str:
        return str(parameters.get(self.key) or "")

    def set_value(self, value: Any, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return {**parameters, self.key: "" if value is None else str(value)}


@dataclass(frozen=True)
class NumberField(FieldBase):
    """Numeric input clamped to ``min_value``.

    Non-numeric input is coerced to ``min_value`` on set; ``validate``
    reports it so the form can show a message.
    """

    default: float = 0.0
    min_value: float = MIN_VALUE
    step: float = 1.0
    digits: int = DURATION_DIGITS

    field_type: ClassVar[str] = "number"

    def get_value(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> float:
        return parse_float(parameters.get(self.key), self.default)

    def set_value(self, value: Any, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return {**parameters, self.key: validate_numeric_input(value, self.min_value, self.digits)}

    def validate(self, value: Any, parameters: Mapping[str, Any]) -> str | None:
        num = parse_float(value, default=float("nan"))
        if num != num:
            return f"{self.label} must be a number"
        if num < self.min_value:
            return f"{self.label} must be >= {self.min_value:g}"
        return None

    def describe(self) -> dict[str, Any]:
        return {**super().describe(), "default": self.default, "min": self.min_value, "step": self.step}


@dataclass(frozen=True)
class SelectField(FieldBase):
    options: tuple[tuple[Any, str], ...] = ()
    default: Any = None

    field_type: ClassVar[str] = "select"

    def _values(self) -> list[Any]:
        return [v for v, _ in self.options]

    def get_value(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> Any:
        return parameters.get(self.key, self.default)

    def set_value(self, value: Any, parameters: Mapping[str, Any]) -> dict[str, Any]:
        # Form widgets hand back strings; match on the string form.
        for option in self._values():
            if str(option) == str(value):
                return {**parameters, self.key: option}
        raise ValueError(f"{value!r} is not a valid option for {self.key}")

    def validate(self, value: Any, parameters: Mapping[str, Any]) -> str | None:
        if str(value) not in {str(v) for v in self._values()}:
            return f"{self.label}: choose one of {self._values()}"
        return None

    def describe(self) -> dict[str, Any]:
        return {**super().describe(), "options": [{"value": v, "label": lbl} for v, lbl in self.options]}


@dataclass(frozen=True)
class ReadonlyField(FieldBase):
    """Display-only field computed from parameters and/or output."""

    getter: Callable[[Mapping[str, Any], OutputValue | None], Any] | None = None
    digits: int | None = None

    field_type: ClassVar[str] = "readonly"
    editable: ClassVar[bool] = False

    def get_value(self, parameters: Mapping[str, Any], output: OutputValue | None = None) -> Any:
        if self.getter is None:
            return parameters.get(self.key)
        return self.getter(parameters, output)

    def set_value(self, value: Any, parameters: Mapping[str, Any]) -> dict[str, Any]:
        raise ValueError(f"Field {self.key} is read-only")


# --- Output display fields -------------------------------------------------


def _output_getter(name: str):
    def getter(parameters: Mapping[str, Any], output: OutputValue | None) -> Any:
        return None if output is None else output.get(name)

    return getter


def _not_type(tag: str):
    def hidden(parameters: Mapping[str, Any], output: OutputValue | None) -> bool:
        return output is None or output.type != tag

    return hidden


_ROTATIONAL_OUTPUT = [
    ("ratedTorque", "Rated Torque", "N·m"),
    ("ratedSpeed", "Rated Speed", "rpm"),
    ("ratedPower", "Rated Power", "W"),
    ("maxTorque", "Max Torque", "N·m"),
    ("maxSpeed", "Max Speed", "rpm"),
    ("maxPower", "Max Power", "W"),
    ("totalGearRatio", "Total Gear Ratio", ""),
    ("totalInertia", "Total Inertia", "kg·m²"),
    ("efficiency", "Efficiency", ""),
    ("isOverloaded", "Overloaded", ""),
]

_LINEAR_OUTPUT = [
    ("ratedForce", "Rated Force", "N"),
    ("ratedSpeed", "Rated Speed", "mm/s"),
    ("ratedPower", "Rated Power", "W"),
    ("maxForce", "Max Force", "N"),
    ("maxSpeed", "Max Speed", "mm/s"),
    ("maxPower", "Max Power", "W"),
    ("stroke", "Stroke", "mm"),
    ("maxAcceleration", "Max Acceleration", "mm/s²"),
    ("mass", "Mass", "kg"),
    ("efficiency", "Efficiency", ""),
    ("isOverloaded", "Overloaded", ""),
]


def rotational_output_fields(group: str = "output") -> list[FieldBase]:
    """Read-only fields showing a RotationalOutput."""
    return [
        ReadonlyField(
            key=f"{name}Out",
            label=label,
            unit=unit,
            group=group,
            getter=_output_getter(name),
            hidden=_not_type("rotational"),
        )
        for name, label, unit in _ROTATIONAL_OUTPUT
    ]


def linear_output_fields(group: str = "output") -> list[FieldBase]:
    """Read-only fields showing a LinearOutput."""
    return [
        ReadonlyField(
            key=f"{name}LinearOut",
            label=label,
            unit=unit,
            group=group,
            getter=_output_getter(name),
            hidden=_not_type("linear"),
        )
        for name, label, unit in _LINEAR_OUTPUT
    ]


def all_output_fields(group: str = "output") -> list[FieldBase]:
    """Rotational and linear output fields (sink nodes)."""
    return rotational_output_fields(group) + linear_output_fields(group)


def task_output_fields(group: str = "output", include_duration: bool = True) -> list[FieldBase]:
    out: list[FieldBase] = []
    if include_duration:
        out.append(
            ReadonlyField(
                key="durationOut",
                label="Duration",
                unit="s",
                group="results",
                getter=_output_getter("duration"),
            )
        )
    out.append(
        ReadonlyField(
            key="totalDurationOut",
            label="Total Duration",
            unit="s",
            group=group,
            getter=_output_getter("totalDuration"),
        )
    )
    return out
