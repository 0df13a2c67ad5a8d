"""
HTTP round-trip latency measurement.

Each sample is one ``GET /api/ping`` timed on the client's monotonic clock
around the full request/response.  Samples run strictly one after another
with a short pause between them so the path being measured isn't burst.
"""
from __future__ import annotations

import asyncio
import logging
import time

from .api import SpeedtestAPI
from .constants import DEFAULT_PING_COUNT, PING_PAUSE_SECONDS
from .errors import NoSuccessfulSamplesError, SpeedtestError
from .stats import LatencyResult

LOGGER = logging.getLogger(__name__)


def elapsed_ms(start: float) -> int:
    """Integer milliseconds since *start* (a ``time.perf_counter()`` value)."""
    return int(round((time.perf_counter() - start) * 1000))


class LatencyTester:
    """Collect ``ping_count`` ping samples against one endpoint."""

    def __init__(
        self,
        ping_count: int = DEFAULT_PING_COUNT,
        pause_seconds: float = PING_PAUSE_SECONDS,
    ) -> None:
        self.ping_count = ping_count
        self.pause_seconds = pause_seconds

    async def test(self, api: SpeedtestAPI) -> LatencyResult:
        result = LatencyResult(requested=self.ping_count)

        for i in range(self.ping_count):
            start = time.perf_counter()
            try:
                await api.ping()
            except SpeedtestError as exc:
                result.add_failure()
                LOGGER.warning("Ping %d failed: %s", i + 1, exc)
            else:
                latency = elapsed_ms(start)
                result.add_sample(latency)
                LOGGER.info("Ping %d: %dms", i + 1, latency)

            if i < self.ping_count - 1:
                await asyncio.sleep(self.pause_seconds)

        if not result.samples:
            raise NoSuccessfulSamplesError("All ping attempts failed")

        result.calculate()
        return result
