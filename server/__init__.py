"""Measurement endpoint -- aiohttp routes answering ping/download/upload probes."""

from .app import ServerConfig, create_app, describe_routes
from .errors import EndpointError, GenerationError, ValidationError
from .payload import (
    MAX_DOWNLOAD_KB,
    clamp_size_kb,
    generate_test_data,
    parse_size_kb,
    validate_upload,
)

__all__ = [
    "EndpointError",
    "GenerationError",
    "MAX_DOWNLOAD_KB",
    "ServerConfig",
    "ValidationError",
    "clamp_size_kb",
    "create_app",
    "describe_routes",
    "generate_test_data",
    "parse_size_kb",
    "validate_upload",
]
