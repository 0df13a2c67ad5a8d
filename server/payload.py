"""
Payload sizing, generation and upload validation.

Pure helpers kept apart from the aiohttp handlers so the endpoint's rules
(default size, clamping, required upload fields) can be tested without a
server.
"""
from __future__ import annotations

import base64
import logging
import os
import re
from typing import Any, Dict, Optional

from .errors import GenerationError, ValidationError

LOGGER = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_KB = 100
MAX_DOWNLOAD_KB = 10_240         # 10 MiB

UPLOAD_FIELDS = ("data", "timestamp", "size")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_size_kb(raw: Optional[str], default: int = DEFAULT_DOWNLOAD_KB) -> int:
    """
    Parse the leading integer of *raw*; ``"50"`` and ``"50kb"`` both give 50.

    Missing, non-numeric and zero values fall back to *default*.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    return int(match.group(1)) or default


def clamp_size_kb(size_kb: int, maximum: int = MAX_DOWNLOAD_KB) -> int:
    return min(size_kb, maximum)


def generate_test_data(size_kb: int) -> str:
    """Base64 text of ``size_kb * 1024`` cryptographically random bytes."""
    if size_kb < 0:
        raise GenerationError("Failed to generate test data", f"Invalid size: {size_kb}KB")
    try:
        raw = os.urandom(size_kb * 1024)
    except (MemoryError, OSError) as exc:
        LOGGER.exception("Random data generation failed for %dKB", size_kb)
        raise GenerationError("Failed to generate test data", str(exc)) from exc
    return base64.b64encode(raw).decode("ascii")


def validate_upload(body: Any) -> Dict[str, Any]:
    """Return the upload body if it has every required field, else raise."""
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")
    if any(not body.get(name) for name in UPLOAD_FIELDS):
        raise ValidationError("Missing required fields: " + ", ".join(UPLOAD_FIELDS))
    timestamp = body["timestamp"]
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise ValidationError("Invalid field: timestamp", "timestamp must be a number")
    return body


def build_upload_receipt(body: Dict[str, Any], received_ms: int) -> Dict[str, Any]:
    """
    Echo the upload and compute ``transferTime``.

    ``transferTime`` subtracts the client's clock from the server's, so any
    skew between the two shows up in it unchanged.
    """
    client_ts = body["timestamp"]
    return {
        "received": received_ms,
        "clientTimestamp": client_ts,
        "dataSize": body["size"],
        "transferTime": received_ms - client_ts,
    }
