from __future__ import annotations

import logging
import sys
import threading
import weakref

_LEVEL_COLORS = {
    "TRACE": "\033[32m",  # green
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[37m",  # light gray
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[41m",  # red background
}
_RESET = "\033[0m"
_DIM = "\033[2m"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVEL_NAMES = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Parent of every module logger in the package; the response log listens here
APP_LOGGER = "crane_console"


def level_from_name(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name (case-insensitive, TRACE included) to its numeric level."""
    if not name:
        return default
    name = name.strip().upper()
    if name == "TRACE":
        return TRACE
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def level_from_verbosity(verbose: int, quiet: bool, default: int) -> int:
    """-v=INFO, -vv=DEBUG, -vvv=TRACE, -q=WARNING."""
    if verbose >= 3:
        return TRACE
    if verbose == 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    if quiet:
        return logging.WARNING
    return default


class AnsiColorFormatter(logging.Formatter):
    """Formatter that adds ANSI colors and a compact timestamp."""

    def __init__(self, colored: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"
        )
        self.colored = colored and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if not self.colored:
            return base
        level = record.levelname.upper()
        color = _LEVEL_COLORS.get(level, "")
        # "HH:MM:SS LEVEL logger: msg"
        ts, _, rest = base.partition(" ")
        if color:
            rest = rest.replace(level, f"{color}{level}{_RESET}", 1)
        return f"{_DIM}{ts}{_RESET} {rest}"


# ---- NiceGUI response log handler ----

_ui_log_targets: set[weakref.ref] = set()
_ui_lock = threading.Lock()


class NiceGuiLogHandler(logging.Handler):
    """Mirror log records into the ui.log widgets registered with attach_ui_log()."""

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S")
        )

    def emit(self, record: logging.LogRecord) -> None:
        if not _ui_log_targets:
            return
        msg = self.format(record)
        stale: list[weakref.ref] = []
        with _ui_lock:
            for ref in list(_ui_log_targets):
                widget = ref()
                if widget is None or getattr(widget, "is_deleted", False):
                    stale.append(ref)
                    continue
                try:
                    widget.push(msg)
                except RuntimeError:
                    # client disconnected underneath us
                    stale.append(ref)
            for ref in stale:
                _ui_log_targets.discard(ref)


def attach_ui_log(log_widget) -> None:
    """Register a ui.log widget as a sink for log records."""
    try:
        ref = weakref.ref(log_widget)
    except TypeError:
        return
    with _ui_lock:
        _ui_log_targets.add(ref)


def detach_ui_log(log_widget) -> None:
    try:
        ref = weakref.ref(log_widget)
    except TypeError:
        return
    with _ui_lock:
        _ui_log_targets.discard(ref)


def configure_logging(
    level: int = logging.INFO, use_color: bool = True, add_ui_handler: bool = True
) -> logging.Logger:
    """
    Configure the root logger with a colored stderr handler and, optionally,
    attach the NiceGUI response log handler to the application logger only,
    so library chatter (aiohttp, uvicorn, nicegui) stays out of the page.
    Safe to call more than once.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, NiceGuiLogHandler)
               for h in logger.handlers):
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(level)
        console.setFormatter(AnsiColorFormatter(colored=use_color))
        logger.addHandler(console)

    app_logger = logging.getLogger(APP_LOGGER)
    if add_ui_handler:
        # the response log always shows dispatch results, even when the console is quieter
        app_logger.setLevel(min(level, logging.INFO))
        if not any(isinstance(h, NiceGuiLogHandler) for h in app_logger.handlers):
            app_logger.addHandler(NiceGuiLogHandler(level=min(level, logging.INFO)))
    else:
        app_logger.setLevel(logging.NOTSET)

    return logger
