from __future__ import annotations

import os
from dataclasses import dataclass

from crane_console.constants import DEFAULT_AXIS_MAX

_TRUTHY = ("1", "true", "True", "yes", "YES")


@dataclass
class Config:
    """Runtime configuration for the NiceGUI app and device API connection."""
    API_BASE_URL: str = "http://127.0.0.1:8000"
    AXIS_MAX: float = DEFAULT_AXIS_MAX
    REPORT_ERRORS_REMOTE: bool = False
    UI_HOST: str = "0.0.0.0"
    UI_PORT: int = 8080  # NiceGUI server port

    @classmethod
    def from_env(cls) -> "Config":
        base_url = os.getenv("CRANE_API_BASE_URL", "http://127.0.0.1:8000")
        axis_max = float(os.getenv("CRANE_AXIS_MAX", str(DEFAULT_AXIS_MAX)))
        if axis_max <= 0:
            raise ValueError(f"CRANE_AXIS_MAX must be > 0, got {axis_max}")
        report_remote = os.getenv("CRANE_REPORT_ERRORS_REMOTE", "0") in _TRUTHY
        ui_host = os.getenv("CRANE_SERVER_IP", "0.0.0.0")
        ui_port = int(os.getenv("CRANE_SERVER_PORT", "8080"))
        return cls(
            API_BASE_URL=base_url.rstrip("/"),
            AXIS_MAX=axis_max,
            REPORT_ERRORS_REMOTE=report_remote,
            UI_HOST=ui_host,
            UI_PORT=ui_port,
        )


# Export a default instance for convenience
config = Config.from_env()
