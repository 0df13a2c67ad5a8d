"""
Full-test orchestration.

Runs latency, download, upload and network-info strictly in that order over
one ``SpeedtestAPI`` session.  Sub-tests are never concurrent.  The first
failure is recorded on the report and the remaining steps are skipped, but
results gathered before it are kept.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .api import NetworkInfo, SpeedtestAPI
from .constants import (
    DEFAULT_DOWNLOAD_KB,
    DEFAULT_PING_COUNT,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_KB,
    PING_PAUSE_SECONDS,
)
from .download import DownloadTester
from .errors import SpeedtestError
from .latency import LatencyTester
from .stats import LatencyResult, TransferResult
from .upload import UploadTester

LOGGER = logging.getLogger(__name__)


@dataclass
class TestOptions:
    """Which sub-tests to run and how big they are."""

    __test__ = False  # keep pytest from collecting this

    latency_samples: int = DEFAULT_PING_COUNT
    download_size_kb: int = DEFAULT_DOWNLOAD_KB
    upload_size_kb: int = DEFAULT_UPLOAD_KB
    test_latency: bool = True
    test_download: bool = True
    test_upload: bool = True


class SpeedTester:
    """Drive one endpoint through the measurement sequence."""

    def __init__(
        self,
        server_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        ping_pause: float = PING_PAUSE_SECONDS,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.ping_pause = ping_pause
        self.on_step: Optional[Callable[[str], None]] = None

    def _api(self) -> SpeedtestAPI:
        return SpeedtestAPI(self.server_url, timeout=self.timeout)

    def _notify(self, step: str) -> None:
        LOGGER.info("%s...", step)
        if self.on_step:
            self.on_step(step)

    # -- Individual sub-tests -----------------------------------------------

    async def test_latency(self, samples: int = DEFAULT_PING_COUNT) -> LatencyResult:
        async with self._api() as api:
            return await LatencyTester(samples, self.ping_pause).test(api)

    async def test_download_speed(self, size_kb: int = DEFAULT_DOWNLOAD_KB) -> TransferResult:
        async with self._api() as api:
            return await DownloadTester(size_kb).test(api)

    async def test_upload_speed(self, size_kb: int = DEFAULT_UPLOAD_KB) -> TransferResult:
        async with self._api() as api:
            return await UploadTester(size_kb).test(api)

    async def get_network_info(self) -> NetworkInfo:
        async with self._api() as api:
            return await api.get_network_info()

    # -- Full run -----------------------------------------------------------

    async def run_full_test(self, options: Optional[TestOptions] = None) -> Dict[str, Any]:
        """Run every enabled sub-test and return the JSON-serialisable report."""
        options = options or TestOptions()
        report: Dict[str, Any] = {
            "serverUrl": self.server_url,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tests": {},
        }
        tests = report["tests"]

        async with self._api() as api:
            try:
                if options.test_latency:
                    self._notify("Testing latency")
                    latency = await LatencyTester(
                        options.latency_samples, self.ping_pause
                    ).test(api)
                    tests["latency"] = latency.to_dict()

                if options.test_download:
                    self._notify("Testing download speed")
                    download = await DownloadTester(options.download_size_kb).test(api)
                    tests["download"] = download.to_dict()

                if options.test_upload:
                    self._notify("Testing upload speed")
                    upload = await UploadTester(options.upload_size_kb).test(api)
                    tests["upload"] = upload.to_dict()

                self._notify("Getting network info")
                info = await api.get_network_info()
                tests["networkInfo"] = info.to_dict()

            except SpeedtestError as exc:
                LOGGER.error("Test failed: %s", exc)
                report["error"] = str(exc)

        return report
