from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Protocol, Union

from crane_console.constants import DEFAULT_AXIS_MAX, ERROR_TYPES, Axis
from crane_console.core.outcome import CommandOutcome, Notice, Success
from crane_console.core.payloads import Request, build, format_axis_value
from crane_console.core.validation import (
    Accepted,
    AxisCommand,
    AxisValues,
    CommandKind,
    Rejected,
    VehicleCredential,
    validate,
)
from crane_console.state import ViewState

LOGGER = logging.getLogger(__name__)

Notifier = Callable[[Notice], None]
ActionResult = Union[CommandOutcome, Rejected]

# Field-specific operator messages for each rejection reason
REJECTION_MESSAGES: dict[str, str] = {
    "missing selection": "Please select an axis and enter a value",
    "missing value": "Please select an axis and enter a value",
    "out of range": "Please enter a value between 0 and {axis_max}",
    "missing code": "Please enter a vehicle code",
    "missing key": "Please enter a vehicle key",
    "invalid code": "Vehicle code must be a whole number between 0 and 1000000",
    "missing weight": "Please enter a weight",
    "invalid weight": "Weight must be a number greater than 0",
    "no error selected": "Please select an error type",
}

REJECTION_TITLES: dict[str, str] = {
    "missing selection": "Invalid input",
    "missing value": "Invalid input",
    "out of range": "Invalid value",
    "missing code": "Invalid input",
    "missing key": "Invalid input",
    "invalid code": "Invalid value",
    "missing weight": "Invalid input",
    "invalid weight": "Invalid value",
    "no error selected": "No error selected",
}


class Dispatcher(Protocol):
    async def dispatch(self, request: Request, source: str) -> CommandOutcome: ...


class CommandService:
    """
    Funnel for every operator action:
    validate -> build request -> dispatch once -> update view state -> notify.

    View state is written only after a Success outcome, for sliders as well
    as manual entry. A rejected input never reaches the dispatcher.
    """

    def __init__(
        self,
        client: Dispatcher,
        view_state: ViewState,
        notifier: Notifier,
        *,
        axis_max: float = DEFAULT_AXIS_MAX,
        report_errors_remote: bool = False,
    ) -> None:
        self.client = client
        self.view_state = view_state
        self.notifier = notifier
        self.axis_max = float(axis_max)
        self.report_errors_remote = report_errors_remote

    # ---- helpers ----

    def _reject(self, kind: CommandKind, rejected: Rejected) -> Rejected:
        message = REJECTION_MESSAGES.get(rejected.reason, rejected.reason).format(
            axis_max=format_axis_value(self.axis_max)
        )
        title = REJECTION_TITLES.get(rejected.reason, "Invalid input")
        LOGGER.info("Rejected %s input: %s", kind, rejected.reason)
        self.notifier(Notice(title=title, message=message, kind="negative"))
        return rejected

    async def _run(
        self,
        kind: CommandKind,
        raw: Any,
        source: str,
        on_success: Callable[[Any], None],
        success_title: str = "Data sent successfully",
        failure_title: str = "Error sending data",
    ) -> ActionResult:
        result = validate(kind, raw, axis_max=self.axis_max)
        if isinstance(result, Rejected):
            return self._reject(kind, result)
        assert isinstance(result, Accepted)

        request = build(kind, result.value)
        outcome = await self.client.dispatch(request, source)
        if isinstance(outcome, Success):
            on_success(result.value)
            self.view_state.last_update_ts = time.time()
            self.notifier(
                Notice(
                    title=success_title,
                    message=f"{outcome.summary} (via {outcome.source})",
                )
            )
        else:
            self.notifier(
                Notice(title=failure_title, message=outcome.reason, kind="negative")
            )
        return outcome

    def _apply_axis(self, cmd: AxisCommand) -> None:
        self.view_state.set_axis(cmd.axis, cmd.value)

    def _apply_position(self, values: AxisValues) -> None:
        self.view_state.x = values.x
        self.view_state.y = values.y
        self.view_state.z = values.z

    def _apply_vehicle(self, cred: VehicleCredential) -> None:
        self.view_state.vehicle_code = cred.code

    def _apply_weight(self, weight: float) -> None:
        self.view_state.weight = weight

    def _apply_error(self, error_type: str) -> None:
        self.view_state.last_error = error_type

    # ---- actions ----

    async def set_axis_manual(self, axis: str | None, raw: Any) -> ActionResult:
        return await self._run("axis", (axis, raw), "manual", self._apply_axis)

    async def set_axis_slider(self, axis: Axis, value: float) -> ActionResult:
        return await self._run("slider", (axis, value), "slider", self._apply_axis)

    async def send_position(
        self, values: Mapping[str, Any] | AxisValues | None = None
    ) -> ActionResult:
        """Send all three axes as one combined command (defaults to the displayed values)."""
        if values is None:
            values = self.view_state.axis_values()
        return await self._run("position", values, "position", self._apply_position)

    async def register_vehicle(self, code: Any, key: Any) -> ActionResult:
        return await self._run(
            "vehicle",
            (code, key),
            "vehicle",
            self._apply_vehicle,
            success_title="Vehicle registered",
            failure_title="Vehicle registration failed",
        )

    async def submit_weight(self, raw: Any) -> ActionResult:
        return await self._run(
            "weight",
            raw,
            "weight",
            self._apply_weight,
            success_title="Weight submitted",
            failure_title="Weight submission failed",
        )

    async def report_error(self, selection: Any) -> ActionResult:
        """
        Report a fault. Without remote reporting the report stays local:
        no request is built and the operator only gets a notification.
        """
        if self.report_errors_remote:
            return await self._run(
                "error",
                selection,
                "error",
                self._apply_error,
                success_title="Error reported",
                failure_title="Error reporting failed",
            )

        result = validate("error", selection)
        if isinstance(result, Rejected):
            return self._reject("error", result)
        assert isinstance(result, Accepted)
        error_type = result.value
        self._apply_error(error_type)
        LOGGER.warning("Operator reported %s", ERROR_TYPES[error_type])
        self.notifier(Notice(title="Error reported", message=f"Error type: {error_type}"))
        return Success(summary=f"Error type: {error_type}", source="error")
