from __future__ import annotations

import logging
from functools import partial

from nicegui import events, ui

from crane_console.common.logging_config import attach_ui_log
from crane_console.constants import (
    AXES,
    AXIS_OPTIONS,
    AXIS_STEP,
    ERROR_TYPES,
    SLIDER_THROTTLE_S,
    Axis,
)
from crane_console.core.outcome import Failure
from crane_console.core.payloads import format_axis_value
from crane_console.core.validation import Rejected
from crane_console.services.commands import CommandService
from crane_console.state import ViewState


class ControlPage:
    """Control tab: axis sliders, manual entry, vehicle, weight and error reporting."""

    def __init__(self, service: CommandService, view_state: ViewState) -> None:
        self.service = service
        self.view_state = view_state

        self.sliders: dict[str, ui.slider] = {}
        self.readouts: dict[str, ui.label] = {}

        # Manual entry
        self.axis_select: ui.select | None = None
        self.manual_input: ui.input | None = None

        # Vehicle / weight / error forms
        self.vehicle_code_input: ui.input | None = None
        self.vehicle_key_input: ui.input | None = None
        self.weight_input: ui.input | None = None
        self.error_select: ui.select | None = None

        self.response_log: ui.log | None = None

    # ---- Actions ----

    async def on_slider(self, axis: Axis, e: events.GenericEventArguments) -> None:
        try:
            value = float(e.args)
        except (TypeError, ValueError):
            logging.debug("Ignoring slider event for %s: %r", axis, e.args)
            return
        outcome = await self.service.set_axis_slider(axis, value)
        if isinstance(outcome, Failure):
            # Snap back to the last confirmed value
            slider = self.sliders.get(axis)
            if slider is not None:
                slider.value = self.view_state.axis(axis)

    async def apply_manual(self) -> None:
        axis = self.axis_select.value if self.axis_select else None
        raw = self.manual_input.value if self.manual_input else None
        outcome = await self.service.set_axis_manual(axis, raw)
        if not isinstance(outcome, Rejected):
            self._clear(self.manual_input, self.axis_select)
            self._sync_sliders()

    async def send_all_axes(self) -> None:
        await self.service.send_position()

    async def register_vehicle(self) -> None:
        code = self.vehicle_code_input.value if self.vehicle_code_input else None
        key = self.vehicle_key_input.value if self.vehicle_key_input else None
        outcome = await self.service.register_vehicle(code, key)
        if not isinstance(outcome, Rejected):
            self._clear(self.vehicle_key_input)

    async def submit_weight(self) -> None:
        raw = self.weight_input.value if self.weight_input else None
        outcome = await self.service.submit_weight(raw)
        if not isinstance(outcome, Rejected):
            self._clear(self.weight_input)

    async def report_error(self) -> None:
        selection = self.error_select.value if self.error_select else None
        outcome = await self.service.report_error(selection)
        if not isinstance(outcome, Rejected):
            self._clear(self.error_select)

    def _sync_sliders(self) -> None:
        for axis, slider in self.sliders.items():
            slider.value = self.view_state.axis(axis)  # type: ignore[arg-type]

    @staticmethod
    def _clear(*elements) -> None:
        for el in elements:
            if el is not None:
                el.value = None if isinstance(el, ui.select) else ""

    # ---- UI ----

    def _build_sliders(self) -> None:
        axis_max = self.service.axis_max
        with ui.card().classes("w-full"):
            ui.label("Axis Controls").classes("text-md font-medium")
            for axis in AXES:
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(AXIS_OPTIONS[axis]).classes("text-sm")
                    ui.label().bind_text_from(
                        self.view_state, axis, backward=lambda v: f"{v:.1f}"
                    ).classes("axis-readout")
                slider = (
                    ui.slider(
                        min=0, max=axis_max, step=AXIS_STEP, value=self.view_state.axis(axis)
                    )
                    .props("label")
                    .classes("w-full")
                    .mark(f"slider-{axis}")
                )
                # client-side drag events only; programmatic snap-back does not re-dispatch
                slider.on(
                    "update:model-value",
                    partial(self.on_slider, axis),
                    throttle=SLIDER_THROTTLE_S,
                )
                self.sliders[axis] = slider
            ui.button("Send all axes", on_click=self.send_all_axes).props(
                "unelevated color=primary"
            ).mark("send-all")

    def _build_manual(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Manual Input").classes("text-md font-medium")
            self.axis_select = ui.select(
                AXIS_OPTIONS, label="Select Axis", value=None
            ).classes("w-full").mark("axis-select")
            self.manual_input = ui.input(
                label=f"Value (0-{format_axis_value(self.service.axis_max)})", placeholder="Enter value"
            ).classes("w-full").mark("manual-value")
            self.manual_input.on("keydown.enter", self.apply_manual)
            ui.button("Apply Value", on_click=self.apply_manual).props(
                "unelevated color=primary"
            ).classes("w-full").mark("apply-value")

    def _build_vehicle(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Vehicle").classes("text-md font-medium")
            with ui.row().classes("w-full items-center gap-2"):
                self.vehicle_code_input = ui.input(label="Code").classes("w-32").mark(
                    "vehicle-code"
                )
                self.vehicle_key_input = ui.input(
                    label="Key", password=True, password_toggle_button=True
                ).classes("grow").mark("vehicle-key")
            ui.button("Register Vehicle", on_click=self.register_vehicle).props(
                "unelevated"
            ).classes("w-full").mark("register-vehicle")
            ui.label().bind_text_from(
                self.view_state,
                "vehicle_code",
                backward=lambda v: f"Active vehicle: {v if v is not None else '-'}",
            ).classes("text-sm")

    def _build_weight(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Load Weight").classes("text-md font-medium")
            self.weight_input = ui.input(label="Weight").classes("w-full").mark("weight")
            self.weight_input.on("keydown.enter", self.submit_weight)
            ui.button("Submit Weight", on_click=self.submit_weight).props(
                "unelevated"
            ).classes("w-full").mark("submit-weight")
            ui.label().bind_text_from(
                self.view_state,
                "weight",
                backward=lambda v: f"Current weight: {v:g}" if v is not None else "Current weight: -",
            ).classes("text-sm")

    def _build_errors(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Error Reporting").classes("text-md font-medium")
            self.error_select = ui.select(
                ERROR_TYPES, label="Error Type", value=None
            ).classes("w-full").mark("error-select")
            ui.button("Report Error", on_click=self.report_error).props(
                "unelevated color=negative"
            ).classes("w-full").mark("report-error")

    def _build_position(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Current Position").classes("text-md font-medium")
            with ui.row().classes("w-full justify-around"):
                for axis in AXES:
                    with ui.column().classes("items-center"):
                        ui.label(AXIS_OPTIONS[axis]).classes("text-xs uppercase")
                        self.readouts[axis] = (
                            ui.label()
                            .bind_text_from(self.view_state, axis, backward=lambda v: f"{v:.1f}")
                            .classes("text-2xl axis-readout")
                            .mark(f"readout-{axis}")
                        )

    def build(self) -> None:
        with ui.row().classes("w-full no-wrap items-start gap-4"):
            with ui.column().classes("w-1/2 gap-4"):
                self._build_sliders()
                self._build_position()
            with ui.column().classes("w-1/2 gap-4"):
                self._build_manual()
                self._build_vehicle()
                self._build_weight()
                self._build_errors()
        with ui.card().classes("w-full"):
            ui.label("Response log").classes("text-md font-medium")
            self.response_log = ui.log(max_lines=200).classes("w-full h-40")
            attach_ui_log(self.response_log)
