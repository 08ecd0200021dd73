from __future__ import annotations

import logging

import pytest

from crane_console.common.logging_config import (
    APP_LOGGER,
    TRACE,
    AnsiColorFormatter,
    NiceGuiLogHandler,
    attach_ui_log,
    configure_logging,
    detach_ui_log,
    level_from_name,
    level_from_verbosity,
)
from crane_console.config import Config


@pytest.mark.unit
def test_config_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "CRANE_API_BASE_URL",
        "CRANE_AXIS_MAX",
        "CRANE_REPORT_ERRORS_REMOTE",
        "CRANE_SERVER_IP",
        "CRANE_SERVER_PORT",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = Config.from_env()

    assert cfg.API_BASE_URL == "http://127.0.0.1:8000"
    assert cfg.AXIS_MAX == 100.0
    assert cfg.REPORT_ERRORS_REMOTE is False
    assert cfg.UI_HOST == "0.0.0.0"
    assert cfg.UI_PORT == 8080


@pytest.mark.unit
def test_config_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CRANE_API_BASE_URL", "http://crane.local:9000/api/")
    monkeypatch.setenv("CRANE_AXIS_MAX", "1000000")
    monkeypatch.setenv("CRANE_REPORT_ERRORS_REMOTE", "yes")
    monkeypatch.setenv("CRANE_SERVER_PORT", "8181")

    cfg = Config.from_env()

    assert cfg.API_BASE_URL == "http://crane.local:9000/api"
    assert cfg.AXIS_MAX == 1_000_000.0
    assert cfg.REPORT_ERRORS_REMOTE is True
    assert cfg.UI_PORT == 8181


@pytest.mark.unit
@pytest.mark.parametrize("bad", ["0", "-10"])
def test_config_rejects_non_positive_axis_max(monkeypatch: pytest.MonkeyPatch, bad: str):
    monkeypatch.setenv("CRANE_AXIS_MAX", bad)
    with pytest.raises(ValueError):
        Config.from_env()


@pytest.mark.unit
def test_level_resolution():
    assert level_from_name("trace") == TRACE
    assert level_from_name("DEBUG") == logging.DEBUG
    assert level_from_name("bogus", default=logging.ERROR) == logging.ERROR
    assert level_from_name(None) == logging.WARNING
    assert level_from_verbosity(3, False, logging.ERROR) == TRACE
    assert level_from_verbosity(2, False, logging.ERROR) == logging.DEBUG
    assert level_from_verbosity(1, True, logging.ERROR) == logging.INFO
    assert level_from_verbosity(0, True, logging.ERROR) == logging.WARNING
    assert level_from_verbosity(0, False, logging.ERROR) == logging.ERROR


class _FakeLog:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def push(self, line: str) -> None:
        self.lines.append(line)


@pytest.mark.unit
def test_ui_log_handler_mirrors_records():
    sink = _FakeLog()
    handler = NiceGuiLogHandler(level=logging.INFO)
    logger = logging.getLogger("crane_console.test")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    attach_ui_log(sink)
    try:
        logger.info("Dispatched X: 10 (manual)")
        logger.debug("not mirrored")
    finally:
        detach_ui_log(sink)
        logger.removeHandler(handler)

    assert len(sink.lines) == 1
    assert "[INFO] Dispatched X: 10 (manual)" in sink.lines[0]


@pytest.mark.unit
def test_plain_formatter_when_not_colored():
    fmt = AnsiColorFormatter(colored=False)
    record = logging.LogRecord("crane", logging.WARNING, __file__, 1, "hello", None, None)
    out = fmt.format(record)
    assert "WARNING crane: hello" in out
    assert "\033[" not in out


@pytest.mark.unit
def test_response_log_only_mirrors_application_records():
    root = logging.getLogger()
    app_logger = logging.getLogger(APP_LOGGER)
    saved = (root.level, list(root.handlers), app_logger.level, list(app_logger.handlers))
    sink = _FakeLog()
    try:
        configure_logging(logging.WARNING, use_color=False)
        attach_ui_log(sink)
        logging.getLogger("aiohttp.access").info("GET / 200")
        logging.getLogger("nicegui").info("NiceGUI ready")
        logging.getLogger("crane_console.services.commands").info("Dispatched X: 1 (manual)")
    finally:
        detach_ui_log(sink)
        root.setLevel(saved[0])
        root.handlers[:] = saved[1]
        app_logger.setLevel(saved[2])
        app_logger.handlers[:] = saved[3]

    assert len(sink.lines) == 1
    assert "Dispatched X: 1 (manual)" in sink.lines[0]
