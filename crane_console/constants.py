from __future__ import annotations

import logging
import os
from typing import Literal

Axis = Literal["x", "y", "z"]
AXES: tuple[Axis, ...] = ("x", "y", "z")

AXIS_OPTIONS: dict[str, str] = {
    "x": "X-Axis",
    "y": "Y-Axis",
    "z": "Z-Axis",
}

# Fault enumeration accepted by the error report form
ERROR_TYPES: dict[str, str] = {
    "calibration": "Calibration Error",
    "positioning": "Positioning Error",
    "sensor": "Sensor Error",
    "communication": "Communication Error",
    "mechanical": "Mechanical Error",
}

DEFAULT_AXIS_MAX: float = 100.0
DEFAULT_AXIS_VALUE: float = 50.0
AXIS_STEP: float = 0.1
VEHICLE_CODE_MIN: int = 0
VEHICLE_CODE_MAX: int = 1_000_000

# Wire protocol
REQUEST_HEADERS: dict[str, str] = {"Content-Type": "application/json;charset=utf-8"}
TRANSPORT_FAILURE_REASON = "Failed to reach the device"

# Slider drag events are throttled client side (seconds)
SLIDER_THROTTLE_S: float = float(os.getenv("CRANE_SLIDER_THROTTLE_S", "0.1"))


def _resolve_log_level() -> int:
    s = os.getenv("CRANE_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
