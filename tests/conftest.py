from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio
from aiohttp import web

pytest_plugins = ["nicegui.testing.user_plugin"]


if TYPE_CHECKING:
    from collections.abc import AsyncIterator


# Global test defaults, set before any crane_console module reads its env:
#  - point the device client at a closed local port so nothing real is reached
#  - no client-side throttling of slider events
os.environ.setdefault("CRANE_API_BASE_URL", "http://127.0.0.1:9")
os.environ["CRANE_SLIDER_THROTTLE_S"] = "0"


@dataclass
class RecordedCall:
    method: str
    path: str
    content_type: str
    body: Any


@dataclass
class FakeDevice:
    """Local aiohttp server standing in for the crane API."""

    port: int
    calls: list[RecordedCall] = field(default_factory=list)
    status: int = 200

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"


@pytest_asyncio.fixture
async def fake_device(unused_tcp_port_factory) -> AsyncIterator[FakeDevice]:
    port = unused_tcp_port_factory()
    device = FakeDevice(port=port)

    async def handler(request: web.Request) -> web.Response:
        raw = await request.text()
        body = await request.json() if raw else None
        device.calls.append(
            RecordedCall(
                method=request.method,
                path=request.raw_path,
                content_type=request.headers.get("Content-Type", ""),
                body=body,
            )
        )
        return web.json_response({"ok": device.status < 400}, status=device.status)

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield device
    finally:
        await runner.cleanup()
