import argparse
import logging
import sys

from nicegui import app as ng_app
from nicegui import ui

from crane_console.common.logging_config import (
    LEVEL_NAMES,
    configure_logging,
    detach_ui_log,
    level_from_name,
    level_from_verbosity,
)
from crane_console.common.theme import apply_theme, get_theme
from crane_console.config import config
from crane_console.constants import LOG_LEVEL
from crane_console.core.outcome import Notice
from crane_console.pages.control import ControlPage
from crane_console.pages.settings import SettingsPage
from crane_console.services.commands import CommandService
from crane_console.services.device_client import client
from crane_console.state import view_state

APP_TITLE = "Crane Control Panel"


def notify(notice: Notice) -> None:
    """Render a command notice as a toast."""
    ui.notify(notice.message, caption=notice.title, type=notice.kind, position="top-right")


command_service = CommandService(
    client,
    view_state,
    notify,
    axis_max=config.AXIS_MAX,
    report_errors_remote=config.REPORT_ERRORS_REMOTE,
)


def build_header_and_tabs(control_page: ControlPage, settings_page: SettingsPage) -> None:
    with (
        ui.header().classes("p-0"),
        ui.row().classes("w-full items-center justify-between px-3"),
    ):
        with ui.tabs() as main_tabs:
            control_tab = ui.tab("Control")
            settings_tab = ui.tab("Settings")
        ui.label(APP_TITLE).classes("text-lg font-bold")
        ui.label().bind_text_from(
            view_state,
            "last_error",
            backward=lambda v: f"Last fault: {v}" if v else "",
        ).classes("text-sm")

    with ui.tab_panels(main_tabs, value=control_tab).classes("w-full"):
        with ui.tab_panel(control_tab):
            control_page.build()
        with ui.tab_panel(settings_tab):
            settings_page.build()


@ui.page("/")
def index() -> None:
    apply_theme(get_theme())
    control_page = ControlPage(command_service, view_state)
    settings_page = SettingsPage(command_service, client)
    build_header_and_tabs(control_page, settings_page)

    def _on_disconnect() -> None:
        if control_page.response_log is not None:
            detach_ui_log(control_page.response_log)

    ui.context.client.on_disconnect(_on_disconnect)


async def _app_shutdown() -> None:
    await client.aclose()
    logging.info("Device client closed")


ng_app.on_shutdown(_app_shutdown)


def run() -> None:
    parser = argparse.ArgumentParser(description="Crane control panel webserver")
    parser.add_argument("--host", default=config.UI_HOST, help="Webserver bind host")
    parser.add_argument("--port", type=int, default=config.UI_PORT, help="Webserver bind port")
    parser.add_argument(
        "--api-url", default=config.API_BASE_URL, help="Device API base URL"
    )
    parser.add_argument(
        "--axis-max", type=float, default=config.AXIS_MAX, help="Upper bound for every axis"
    )
    parser.add_argument(
        "--report-errors-remote",
        action="store_true",
        default=config.REPORT_ERRORS_REMOTE,
        help="POST error reports to /error instead of only notifying locally",
    )
    parser.add_argument("--log-level", choices=LEVEL_NAMES, help="Set log level")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Enable WARNING logging"
    )
    args, _ = parser.parse_known_args()

    if args.axis_max <= 0:
        parser.error("--axis-max must be > 0")

    client.base_url = args.api_url.rstrip("/")
    command_service.axis_max = float(args.axis_max)
    command_service.report_errors_remote = bool(args.report_errors_remote)

    # explicit --log-level > -v/-q > CRANE_LOG_LEVEL
    if args.log_level:
        runtime_level = level_from_name(args.log_level)
    else:
        runtime_level = level_from_verbosity(args.verbose, args.quiet, LOG_LEVEL)

    configure_logging(runtime_level)
    logging.info("Webserver bind: host=%s port=%s", args.host, args.port)
    logging.info("Device API: %s (axis max %s)", client.base_url, command_service.axis_max)

    ui.run(
        title=APP_TITLE,
        host=args.host,
        port=int(args.port),
        reload=False,
        show=False,
        loop="uvloop" if sys.platform != "win32" else "asyncio",
        http="httptools",
        ws="wsproto",
    )


if __name__ in {"__main__", "__mp_main__"}:
    run()
