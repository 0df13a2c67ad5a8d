"""
aiohttp application factory and HTTP routes for the measurement endpoint.

Every handler is stateless: the only per-application value is the start
time, read (never written) by the health check.  Errors of any kind leave
the endpoint as JSON with a 4xx/5xx status via ``error_middleware``.
"""
from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

from aiohttp import web

from .errors import EndpointError, ValidationError
from .payload import (
    DEFAULT_DOWNLOAD_KB,
    MAX_DOWNLOAD_KB,
    build_upload_receipt,
    clamp_size_kb,
    generate_test_data,
    parse_size_kb,
    validate_upload,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 3001
DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024

# Only these request headers are ever reported back to the client.
ECHOED_HEADERS = ("user-agent", "connection", "accept-encoding")


def _env_port() -> int:
    try:
        return int(os.environ.get("PORT", DEFAULT_PORT))
    except ValueError:
        return DEFAULT_PORT


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = field(default_factory=_env_port)
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    max_download_kb: int = MAX_DOWNLOAD_KB
    default_download_kb: int = DEFAULT_DOWNLOAD_KB

    @classmethod
    def from_env(cls) -> ServerConfig:
        config = cls(host=os.environ.get("SPEEDTEST_HOST", "0.0.0.0"))
        max_body_mb = os.environ.get("SPEEDTEST_MAX_BODY_MB")
        if max_body_mb:
            config.max_body_bytes = int(float(max_body_mb) * 1024 * 1024)
        return config


CONFIG_KEY = web.AppKey("config", ServerConfig)
STARTED_AT_KEY = web.AppKey("started_at", float)


def now_ms() -> int:
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except EndpointError as exc:
        LOGGER.info("%s %s -> %d %s", request.method, request.path, exc.status, exc)
        return web.json_response(exc.to_dict(), status=exc.status)
    except web.HTTPException as exc:
        if exc.status < 400:
            raise
        return web.json_response({"error": exc.reason}, status=exc.status)
    except asyncio.CancelledError:
        raise
    except Exception:
        LOGGER.exception("Unhandled error in %s %s", request.method, request.path)
        return web.json_response({"error": "Internal server error"}, status=500)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def ping(request: web.Request) -> web.Response:
    return web.json_response({"timestamp": now_ms(), "message": "pong"})


async def download(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    requested = parse_size_kb(request.match_info.get("size_kb"), config.default_download_kb)
    actual_size = clamp_size_kb(requested, config.max_download_kb)

    loop = asyncio.get_running_loop()
    data = await loop.run_in_executor(None, generate_test_data, actual_size)

    return web.json_response({"size": actual_size, "timestamp": now_ms(), "data": data})


async def upload(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body", str(exc)) from exc
    received = now_ms()

    receipt = build_upload_receipt(validate_upload(body), received)
    LOGGER.debug("Upload of %sKB, transferTime=%sms", receipt["dataSize"], receipt["transferTime"])
    return web.json_response(receipt)


def resolve_client_ip(request: web.Request) -> Optional[str]:
    """First hop of ``X-Forwarded-For`` if present, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or request.remote


def echoed_headers(request: web.Request) -> Dict[str, Optional[str]]:
    return {name: request.headers.get(name) for name in ECHOED_HEADERS}


async def network_info(request: web.Request) -> web.Response:
    return web.json_response({
        "clientIP": resolve_client_ip(request),
        "serverTime": now_ms(),
        "headers": echoed_headers(request),
    })


async def health(request: web.Request) -> web.Response:
    uptime = time.monotonic() - request.app[STARTED_AT_KEY]
    return web.json_response({"status": "healthy", "uptime": uptime, "timestamp": now_ms()})


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

ROUTES = (
    ("GET", "/api/ping", ping, "Latency test"),
    ("GET", "/api/download/{size_kb}", download, "Download speed test"),
    ("GET", "/api/download", download, None),
    ("POST", "/api/upload", upload, "Upload speed test"),
    ("GET", "/api/network-info", network_info, "Network information"),
    ("GET", "/api/health", health, "Health check"),
)


def create_app(config: Optional[ServerConfig] = None) -> web.Application:
    config = config or ServerConfig()

    app = web.Application(
        middlewares=[error_middleware],
        client_max_size=config.max_body_bytes,
    )
    app[CONFIG_KEY] = config
    app[STARTED_AT_KEY] = time.monotonic()

    for method, path, handler, _ in ROUTES:
        app.router.add_route(method, path, handler)

    return app


def describe_routes() -> str:
    return "\n".join(
        f"  {method:<4} {path.replace('{size_kb}', ':sizeKB')} - {label}"
        for method, path, _, label in ROUTES
        if label
    )