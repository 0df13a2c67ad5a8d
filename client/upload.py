"""
Upload speed test module.

Generates a random payload up front, then times a single
``POST /api/upload`` round trip.  Payload generation is outside the timed
window.  The server's own ``transferTime`` compares the client clock with
the server clock, so it is only meaningful when both are in sync; it is
reported alongside the client-side measurement, never used for the rate.
"""
from __future__ import annotations

import base64
import logging
import os
import time
from typing import Optional

from .api import SpeedtestAPI
from .constants import DEFAULT_UPLOAD_KB
from .latency import elapsed_ms
from .stats import TransferResult

LOGGER = logging.getLogger(__name__)


def generate_payload(size_kb: int) -> str:
    """Base64 text of ``size_kb * 1024`` random bytes."""
    return base64.b64encode(os.urandom(size_kb * 1024)).decode("ascii")


def epoch_ms() -> int:
    return int(time.time() * 1000)


class UploadTester:
    """Time one bulk upload to the endpoint."""

    def __init__(self, size_kb: int = DEFAULT_UPLOAD_KB) -> None:
        self.size_kb = size_kb

    async def test(self, api: SpeedtestAPI) -> TransferResult:
        LOGGER.info("Testing upload speed with %dKB...", self.size_kb)
        data = generate_payload(self.size_kb)

        start = time.perf_counter()
        response = await api.upload(data, epoch_ms(), self.size_kb)
        transfer_ms = elapsed_ms(start)

        server_time: Optional[int] = response.get("transferTime")
        result = TransferResult(
            size_kb=self.size_kb,
            transfer_time_ms=transfer_ms,
            server_processing_time_ms=server_time,
        )
        result.calculate()
        return result
