"""
Input validation for operator commands.

Every function here is pure: it takes raw UI state and returns either
`Accepted(normalized_value)` or `Rejected(reason)`. Nothing is sent and
nothing is logged; the caller decides how to surface a rejection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Literal, Mapping, TypeVar, Union

from crane_console.constants import (
    AXES,
    DEFAULT_AXIS_MAX,
    ERROR_TYPES,
    VEHICLE_CODE_MAX,
    VEHICLE_CODE_MIN,
    Axis,
)

T = TypeVar("T")

CommandKind = Literal["axis", "slider", "position", "vehicle", "weight", "error"]

# Rejection reasons
MISSING_SELECTION = "missing selection"
MISSING_VALUE = "missing value"
OUT_OF_RANGE = "out of range"
MISSING_CODE = "missing code"
MISSING_KEY = "missing key"
INVALID_CODE = "invalid code"
MISSING_WEIGHT = "missing weight"
INVALID_WEIGHT = "invalid weight"
NO_ERROR_SELECTED = "no error selected"


class ValidationError(ValueError):
    """Raised by the parsing helpers; carries a rejection reason."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class Accepted(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: str

    @property
    def ok(self) -> bool:
        return False


Validation = Union[Accepted[T], Rejected]


@dataclass(frozen=True)
class AxisCommand:
    axis: Axis
    value: float


@dataclass(frozen=True)
class AxisValues:
    x: float
    y: float
    z: float

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class VehicleCredential:
    code: int
    key: str


# ---- Parsing helpers ----


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _parse_float(raw: Any, reason: str) -> float:
    if isinstance(raw, bool):
        raise ValidationError(reason)
    if isinstance(raw, str):
        raw = raw.strip()
        # float() also takes digit-group underscores and non-ASCII digits
        if not raw.isascii() or "_" in raw:
            raise ValidationError(reason)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(reason) from None
    if not math.isfinite(value):
        raise ValidationError(reason)
    # collapse -0.0
    return value + 0.0


def _round_axis(value: float, axis_max: float) -> float:
    # the wire carries one fractional digit; keep state identical to what is sent
    return min(round(value, 1), float(axis_max)) + 0.0


def _check_axis_value(raw: Any, axis_max: float) -> float:
    value = _parse_float(raw, OUT_OF_RANGE)
    if value < 0 or value > axis_max:
        raise ValidationError(OUT_OF_RANGE)
    return _round_axis(value, axis_max)


# ---- Validators ----


def validate_manual_axis(
    axis: str | None, raw: Any, axis_max: float = DEFAULT_AXIS_MAX
) -> Validation[AxisCommand]:
    """Manual entry: an axis must be chosen and the value must lie in [0, axis_max]."""
    if not axis or axis not in AXES:
        return Rejected(MISSING_SELECTION)
    if _is_blank(raw):
        return Rejected(MISSING_VALUE)
    try:
        value = _check_axis_value(raw, axis_max)
    except ValidationError as e:
        return Rejected(e.reason)
    return Accepted(AxisCommand(axis=axis, value=value))  # type: ignore[arg-type]


def validate_slider(
    axis: Axis, value: float, axis_max: float = DEFAULT_AXIS_MAX
) -> Accepted[AxisCommand]:
    """Slider input is already range-limited by the widget, so it is clamped, never rejected."""
    if axis not in AXES:
        raise ValueError(f"Unknown axis: {axis!r}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        v = 0.0
    if not math.isfinite(v):
        v = 0.0
    clamped = max(0.0, min(float(axis_max), v))
    return Accepted(AxisCommand(axis=axis, value=_round_axis(clamped, axis_max)))


def validate_position(
    values: Mapping[str, Any] | AxisValues, axis_max: float = DEFAULT_AXIS_MAX
) -> Validation[AxisValues]:
    if isinstance(values, AxisValues):
        values = values.as_dict()
    try:
        checked = {a: _check_axis_value(values.get(a), axis_max) for a in AXES}
    except ValidationError as e:
        return Rejected(e.reason)
    return Accepted(AxisValues(**checked))


def validate_vehicle(code: Any, key: Any) -> Validation[VehicleCredential]:
    if _is_blank(code):
        return Rejected(MISSING_CODE)
    if _is_blank(key):
        return Rejected(MISSING_KEY)
    text = str(code).strip()
    # plain ASCII digits only: no sign, no underscores, no other scripts
    if not (text.isascii() and text.isdigit()):
        return Rejected(INVALID_CODE)
    parsed = int(text)
    if not VEHICLE_CODE_MIN <= parsed <= VEHICLE_CODE_MAX:
        return Rejected(INVALID_CODE)
    return Accepted(VehicleCredential(code=parsed, key=str(key)))


def validate_weight(raw: Any) -> Validation[float]:
    if _is_blank(raw):
        return Rejected(MISSING_WEIGHT)
    try:
        weight = _parse_float(raw, INVALID_WEIGHT)
    except ValidationError as e:
        return Rejected(e.reason)
    if weight <= 0:
        return Rejected(INVALID_WEIGHT)
    return Accepted(weight)


def validate_error_type(selection: Any) -> Validation[str]:
    if not selection or selection not in ERROR_TYPES:
        return Rejected(NO_ERROR_SELECTED)
    return Accepted(str(selection))


def validate(
    kind: CommandKind, raw: Any, *, axis_max: float = DEFAULT_AXIS_MAX
) -> Validation[Any]:
    """
    Validate raw input for one command kind.

    Shape of `raw` per kind:
      - "axis":     (axis, text) from the manual entry form
      - "slider":   (axis, number) from a slider
      - "position": mapping or AxisValues with x, y, z
      - "vehicle":  (code, key)
      - "weight":   text
      - "error":    selected error type
    """
    if kind == "axis":
        axis, text = raw
        return validate_manual_axis(axis, text, axis_max)
    if kind == "slider":
        axis, number = raw
        return validate_slider(axis, number, axis_max)
    if kind == "position":
        return validate_position(raw, axis_max)
    if kind == "vehicle":
        code, key = raw
        return validate_vehicle(code, key)
    if kind == "weight":
        return validate_weight(raw)
    if kind == "error":
        return validate_error_type(raw)
    raise ValueError(f"Unknown command kind: {kind!r}")
