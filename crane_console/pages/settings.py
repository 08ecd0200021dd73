from __future__ import annotations

import logging

from nicegui import ui

from crane_console.common.theme import ThemeMode, get_theme, set_theme
from crane_console.core.payloads import format_axis_value
from crane_console.services.commands import CommandService
from crane_console.services.device_client import DeviceClient


class SettingsPage:
    """Settings tab page."""

    def __init__(self, service: CommandService, client: DeviceClient) -> None:
        self.service = service
        self.client = client

    def build(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Settings").classes("text-md font-medium")
            with ui.row().classes("items-center gap-2"):
                saved_mode = get_theme()
                mode_toggle = ui.toggle(
                    options=["System", "Light", "Dark"], value=saved_mode.capitalize()
                ).props("dense")

                def _on_mode() -> None:
                    val = (mode_toggle.value or "System").lower()
                    mode: ThemeMode = (
                        "system"
                        if val.startswith("s")
                        else ("light" if val.startswith("l") else "dark")
                    )
                    set_theme(mode)
                    logging.debug("Set theme to mode: %s", mode)

                mode_toggle.on_value_change(lambda e: _on_mode())

        with ui.card().classes("w-full"):
            ui.label("Device connection").classes("text-md font-medium")
            # Read-only: these come from CRANE_* env vars or CLI flags
            ui.label(f"API base URL: {self.client.base_url}").classes("text-sm")
            ui.label(f"Axis range: 0 - {format_axis_value(self.service.axis_max)}").classes(
                "text-sm"
            )
            remote = "server and local" if self.service.report_errors_remote else "local only"
            ui.label(f"Error reports: {remote}").classes("text-sm")
