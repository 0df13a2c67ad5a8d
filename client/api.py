"""
Measurement endpoint API client.

All HTTP work goes through a single ``aiohttp.ClientSession`` managed via
async-context-manager protocol
(``async with SpeedtestAPI(url) as api: ...``).  Every request is bounded by
one total timeout; transport failures are mapped onto the exceptions in
``client.errors`` so callers can tell a timeout from a refused connection
from a garbled body.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp

from .constants import (
    COMMON_HEADERS,
    DEFAULT_TIMEOUT,
    DOWNLOAD_PATH,
    HEALTH_PATH,
    NETWORK_INFO_PATH,
    PING_PATH,
    UPLOAD_PATH,
)
from .errors import (
    EndpointConnectionError,
    EndpointResponseError,
    MalformedResponseError,
    RequestTimeoutError,
)

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass
class NetworkInfo:
    """Connection metadata as observed by the endpoint."""

    client_ip: Optional[str]
    server_time: int
    headers: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> NetworkInfo:
        return cls(
            client_ip=data.get("clientIP"),
            server_time=int(data.get("serverTime", 0)),
            headers=dict(data.get("headers") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientIP": self.client_ip,
            "serverTime": self.server_time,
            "headers": dict(self.headers),
        }


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

class SpeedtestAPI:
    """Async context-manager wrapping the measurement endpoint's REST API."""

    def __init__(self, server_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> SpeedtestAPI:
        self._session = aiohttp.ClientSession(
            headers=COMMON_HEADERS,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._session:
            await self._session.close()
            self._session = None

    # -- Internal helpers ---------------------------------------------------

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "SpeedtestAPI must be used as an async context manager "
                "(async with SpeedtestAPI(url) as api: ...)"
            )
        return self._session

    async def request_json(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Issue one request and return the decoded JSON object."""
        session = self._ensure_session()
        url = self.server_url + path
        LOGGER.debug("%s %s", method, url)

        try:
            async with session.request(method, url, json=payload) as resp:
                status = resp.status
                reason = resp.reason
                body = await resp.read()
        except asyncio.TimeoutError as exc:
            raise RequestTimeoutError(
                f"Request to {url} timed out after {self.timeout:g}s"
            ) from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise EndpointConnectionError(f"Cannot reach {url}: {exc}") from exc

        # UnicodeDecodeError is a ValueError too
        try:
            data = json.loads(body)
        except ValueError as exc:
            if status >= 400:
                raise EndpointResponseError(status, reason or "Unknown error") from exc
            raise MalformedResponseError(f"Invalid JSON response: {exc}") from exc

        if status >= 400:
            if not isinstance(data, dict):
                raise EndpointResponseError(status, reason or "Unknown error")
            raise EndpointResponseError(
                status,
                str(data.get("error") or reason or "Unknown error"),
                data.get("message"),
            )

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}"
            )

        return data

    # -- Public methods -----------------------------------------------------

    async def ping(self) -> Dict[str, Any]:
        return await self.request_json(PING_PATH)

    async def download(self, size_kb: int) -> Dict[str, Any]:
        return await self.request_json(DOWNLOAD_PATH.format(size_kb=size_kb))

    async def upload(self, data: str, timestamp: int, size_kb: int) -> Dict[str, Any]:
        payload = {"data": data, "timestamp": timestamp, "size": size_kb}
        return await self.request_json(UPLOAD_PATH, method="POST", payload=payload)

    async def get_network_info(self) -> NetworkInfo:
        data = await self.request_json(NETWORK_INFO_PATH)
        try:
            return NetworkInfo.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise MalformedResponseError(f"Invalid network info: {exc}") from exc

    async def health(self) -> Dict[str, Any]:
        return await self.request_json(HEALTH_PATH)
