"""HTTP client for the positioning device API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import aiohttp
from yarl import URL

from crane_console.config import config
from crane_console.constants import REQUEST_HEADERS, TRANSPORT_FAILURE_REASON
from crane_console.core.outcome import CommandOutcome, Failure, Success
from crane_console.core.payloads import Request

LOGGER = logging.getLogger(__name__)


class TransportError(Exception):
    """Network, HTTP status or serialization failure while sending a request."""


class DeviceClient:
    """
    Sends validated command requests to the device.

    One `aiohttp.ClientSession` is created on first use and reused for every
    request until `aclose()`. Each dispatch issues exactly one POST: no retry,
    no backoff, no de-duplication.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    def url_for(self, request: Request) -> str:
        return f"{self.base_url}{request.path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def post(self, request: Request) -> int:
        """
        Send one request and return the HTTP status.

        Raises:
            TransportError: on connection failure, non-2xx status or an
                unserializable body.
        """
        # the path may carry credentials, so only the summary is ever logged
        label = f"{request.method} {request.summary or 'request'}"
        try:
            data = json.dumps(request.body, allow_nan=False) if request.body is not None else None
        except (TypeError, ValueError) as e:
            raise TransportError(f"{label}: body is not serializable") from e

        session = await self._ensure_session()
        LOGGER.debug("%s body=%s", label, data)
        try:
            # path segments are already percent-encoded by the payload builder
            async with session.request(
                request.method,
                URL(self.url_for(request), encoded=True),
                data=data,
                headers=REQUEST_HEADERS,
            ) as response:
                response.raise_for_status()
                return response.status
        except aiohttp.ClientResponseError as e:
            raise TransportError(f"{label} failed: HTTP {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"{label} failed: {type(e).__name__}") from e

    async def dispatch(self, request: Request, source: str) -> CommandOutcome:
        """Send `request` once and classify the result."""
        try:
            await self.post(request)
        except TransportError as e:
            LOGGER.error("Dispatch failed (%s): %s", source, e)
            return Failure(TRANSPORT_FAILURE_REASON)
        LOGGER.info("Dispatched %s (%s)", request.summary or request.method, source)
        return Success(summary=request.summary, source=source)

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None


# Module-level singleton instance
client = DeviceClient(base_url=config.API_BASE_URL)
