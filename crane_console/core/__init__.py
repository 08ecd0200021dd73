# Command dispatch core
# - validation: raw UI input -> Accepted / Rejected
# - payloads:   normalized value -> wire Request
# - outcome:    Success / Failure and operator Notice types
from crane_console.core.outcome import CommandOutcome, Failure, Notice, Success
from crane_console.core.payloads import Request, build, format_axis_value
from crane_console.core.validation import (
    Accepted,
    AxisCommand,
    AxisValues,
    CommandKind,
    Rejected,
    ValidationError,
    VehicleCredential,
    validate,
)

__all__ = [
    "Accepted",
    "AxisCommand",
    "AxisValues",
    "CommandKind",
    "CommandOutcome",
    "Failure",
    "Notice",
    "Rejected",
    "Request",
    "Success",
    "ValidationError",
    "VehicleCredential",
    "build",
    "format_axis_value",
    "validate",
]
