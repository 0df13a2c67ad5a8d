"""
Network measurement statistics.

Pure functions and lightweight dataclasses -- no I/O, no side effects.
Everything here is deterministic and easy to unit-test.
"""
from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .constants import MIN_TRANSFER_TIME_MS


# ---------------------------------------------------------------------------
# Rounding / rate helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positives (``round()`` rounds to even)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def calculate_rates(size_bytes: int, transfer_time_ms: float) -> Tuple[int, int, float]:
    """
    Return ``(bytes/s, kbit/s, Mbit/s)`` for *size_bytes* moved in
    *transfer_time_ms*.

    Each unit is derived from the unrounded previous one; Bps and Kbps are
    rounded to integers, Mbps to two decimals.  Durations at or below zero
    are clamped to ``MIN_TRANSFER_TIME_MS``.
    """
    elapsed_ms = max(transfer_time_ms, MIN_TRANSFER_TIME_MS)
    speed_bps = size_bytes / (elapsed_ms / 1000)
    speed_kbps = speed_bps * 8 / 1000
    speed_mbps = speed_kbps / 1000
    return (
        int(round_half_up(speed_bps)),
        int(round_half_up(speed_kbps)),
        round_half_up(speed_mbps, 2),
    )


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass
class LatencyResult:
    """Aggregate over the successful ping samples of one latency run."""

    requested: int
    samples: List[int] = field(default_factory=list)
    failed: int = 0
    average: int = 0
    min: int = 0
    max: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.samples)

    def add_sample(self, latency_ms: int) -> None:
        self.samples.append(latency_ms)

    def add_failure(self) -> None:
        self.failed += 1

    def calculate(self) -> None:
        if not self.samples:
            return
        self.average = int(round_half_up(statistics.mean(self.samples)))
        self.min = min(self.samples)
        self.max = max(self.samples)

    def to_dict(self) -> Dict[str, Any]:
        # n_samples reports the requested count, not the successful one.
        return {
            "average": self.average,
            "min": self.min,
            "max": self.max,
            "n_samples": self.requested,
        }


@dataclass
class TransferResult:
    """One timed bulk-data exchange (download or upload)."""

    size_kb: int
    transfer_time_ms: int
    size_bytes: int = 0
    speed_bps: int = 0
    speed_kbps: int = 0
    speed_mbps: float = 0.0
    actual_size_kb: Optional[int] = None
    server_processing_time_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.size_bytes:
            self.size_bytes = self.size_kb * 1024

    def calculate(self) -> None:
        """Derive rates from ``size_bytes`` and the wall-clock duration."""
        self.speed_bps, self.speed_kbps, self.speed_mbps = calculate_rates(
            self.size_bytes, self.transfer_time_ms
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "sizeKB": self.size_kb,
            "transferTime": self.transfer_time_ms,
            "speedBps": self.speed_bps,
            "speedKbps": self.speed_kbps,
            "speedMbps": self.speed_mbps,
        }
        if self.actual_size_kb is not None:
            result["actualSizeKB"] = self.actual_size_kb
        if self.server_processing_time_ms is not None:
            result["serverProcessingTime"] = self.server_processing_time_ms
        return result


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_speed(speed_mbps: float) -> str:
    """Human-readable speed string."""
    if speed_mbps >= 1000:
        return f"{speed_mbps / 1000:.2f} Gbps"
    return f"{speed_mbps:.2f} Mbps"


def format_latency(latency_ms: float) -> str:
    """Human-readable latency string."""
    if latency_ms >= 1000:
        return f"{latency_ms / 1000:.2f} s"
    return f"{latency_ms:.1f} ms"
