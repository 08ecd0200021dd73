from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote

from crane_console.core.validation import (
    AxisCommand,
    AxisValues,
    CommandKind,
    VehicleCredential,
)


@dataclass(frozen=True)
class Request:
    """One wire request relative to the device base URL."""

    path: str
    body: dict[str, Any] | None = None
    summary: str = ""  # human-readable echo for notifications
    method: str = "POST"


def _segment(value: Any) -> str:
    """Percent-encode a single path segment; '/' is not considered safe."""
    text = quote(str(value), safe="")
    # "." and ".." would be resolved as dot segments by a normalizing server
    if text.strip(".") == "":
        text = text.replace(".", "%2E")
    return text


def format_axis_value(value: float) -> str:
    """
    Render an axis value for a URL path: one fractional digit, fixed point,
    trailing '.0' dropped.
    """
    text = f"{round(float(value), 1) + 0.0:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


def build_axis(cmd: AxisCommand) -> Request:
    letter = cmd.axis.upper()
    value = format_axis_value(cmd.value)
    return Request(
        path=f"/{_segment(letter)}/{value}",
        summary=f"{letter}: {value}",
    )


def build_position(values: AxisValues) -> Request:
    return Request(
        path="/position",
        body=values.as_dict(),
        summary=f"X: {values.x:.1f}, Y: {values.y:.1f}, Z: {values.z:.1f}",
    )


def build_vehicle(cred: VehicleCredential) -> Request:
    return Request(
        path=f"/vehicle/{_segment(cred.code)}/{_segment(cred.key)}",
        summary=f"Vehicle {cred.code}",
    )


def build_weight(weight: float) -> Request:
    return Request(path="/weight", body={"weight": weight}, summary=f"Weight: {weight:g}")


def build_error(error_type: str) -> Request:
    return Request(path="/error", body={"type": error_type}, summary=f"Error type: {error_type}")


_BUILDERS: dict[str, Callable[[Any], Request]] = {
    "axis": build_axis,
    "slider": build_axis,
    "position": build_position,
    "vehicle": build_vehicle,
    "weight": build_weight,
    "error": build_error,
}


def build(kind: CommandKind, value: Any) -> Request:
    """Build the wire request for an already-validated value."""
    try:
        builder = _BUILDERS[kind]
    except KeyError:
        raise ValueError(f"Unknown command kind: {kind!r}") from None
    return builder(value)
