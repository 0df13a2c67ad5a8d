"""
Download speed test module.

A single timed ``GET /api/download/{sizeKB}``.  The clock covers request
dispatch through the fully received and parsed JSON body.  The endpoint
clamps oversized requests, so the rate is computed from the size the server
reports having sent.
"""
from __future__ import annotations

import logging
import time

from .api import SpeedtestAPI
from .constants import DEFAULT_DOWNLOAD_KB
from .latency import elapsed_ms
from .stats import TransferResult

LOGGER = logging.getLogger(__name__)


def _reported_size_kb(response: dict, requested_kb: int) -> int:
    size = response.get("size")
    if isinstance(size, int) and not isinstance(size, bool) and size > 0:
        return size
    return requested_kb


class DownloadTester:
    """Time one bulk download from the endpoint."""

    def __init__(self, size_kb: int = DEFAULT_DOWNLOAD_KB) -> None:
        self.size_kb = size_kb

    async def test(self, api: SpeedtestAPI) -> TransferResult:
        LOGGER.info("Testing download speed with %dKB...", self.size_kb)

        start = time.perf_counter()
        response = await api.download(self.size_kb)
        transfer_ms = elapsed_ms(start)

        actual_kb = _reported_size_kb(response, self.size_kb)
        if actual_kb != self.size_kb:
            LOGGER.warning(
                "Server sent %dKB instead of the requested %dKB", actual_kb, self.size_kb
            )

        result = TransferResult(
            size_kb=self.size_kb,
            transfer_time_ms=transfer_ms,
            size_bytes=actual_kb * 1024,
            actual_size_kb=actual_kb,
        )
        result.calculate()
        return result
