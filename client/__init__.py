"""Speedtest driver library -- transport, measurement, and statistics."""

from .api import NetworkInfo, SpeedtestAPI
from .download import DownloadTester
from .errors import (
    EndpointConnectionError,
    EndpointResponseError,
    MalformedResponseError,
    NoSuccessfulSamplesError,
    RequestTimeoutError,
    SpeedtestError,
)
from .latency import LatencyTester
from .runner import SpeedTester, TestOptions
from .stats import (
    LatencyResult,
    TransferResult,
    calculate_rates,
    format_latency,
    format_speed,
    round_half_up,
)
from .upload import UploadTester

__all__ = [
    "DownloadTester",
    "EndpointConnectionError",
    "EndpointResponseError",
    "LatencyResult",
    "LatencyTester",
    "MalformedResponseError",
    "NetworkInfo",
    "NoSuccessfulSamplesError",
    "RequestTimeoutError",
    "SpeedTester",
    "SpeedtestAPI",
    "SpeedtestError",
    "TestOptions",
    "TransferResult",
    "UploadTester",
    "calculate_rates",
    "format_latency",
    "format_speed",
    "round_half_up",
]
