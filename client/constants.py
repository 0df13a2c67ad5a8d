"""
Shared constants used across all client modules.

Centralises magic numbers, default headers, and tunables so they live in
exactly one place.
"""

# ---------------------------------------------------------------------------
# HTTP headers
# ---------------------------------------------------------------------------

USER_AGENT = "http-speedtest/1.0 (+aiohttp)"

COMMON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# ---------------------------------------------------------------------------
# Endpoint paths
# ---------------------------------------------------------------------------

PING_PATH = "/api/ping"
DOWNLOAD_PATH = "/api/download/{size_kb}"
UPLOAD_PATH = "/api/upload"
NETWORK_INFO_PATH = "/api/network-info"
HEALTH_PATH = "/api/health"

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT = 120.0          # seconds per request
MIN_TIMEOUT = 1.0
MAX_TIMEOUT = 600.0

DEFAULT_PING_COUNT = 5
MIN_PING_COUNT = 1
MAX_PING_COUNT = 100
PING_PAUSE_SECONDS = 0.1         # between pings, not after the last one

MIN_TRANSFER_TIME_MS = 1         # floor for rate computation

# ---------------------------------------------------------------------------
# Data transfer
# ---------------------------------------------------------------------------

DEFAULT_DOWNLOAD_KB = 1000
DEFAULT_UPLOAD_KB = 1000
MIN_SIZE_KB = 1
MAX_SIZE_KB = 30_720             # 30 MiB; base64 keeps it under a 50 MB body limit
