#!/usr/bin/env python3
"""
Speedtest endpoint -- answers ping, download, upload and network-info probes.

Usage::

    python speedserver.py                   # 0.0.0.0:3001 (or $PORT)
    python speedserver.py --port 8080
    python speedserver.py --max-body-mb 100
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from aiohttp import web

from logging_setup import configure_logging
from server.app import ServerConfig, create_app, describe_routes

LOGGER = logging.getLogger("speedserver")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="HTTP speedtest measurement endpoint")
    parser.add_argument("--host", default=None, help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (default: $PORT or 3001)")
    parser.add_argument("--max-body-mb", type=float, default=None, metavar="MB", help="Largest accepted request body (default: 50)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ServerConfig:
    config = ServerConfig.from_env()
    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.max_body_mb is not None:
        config.max_body_bytes = int(args.max_body_mb * 1024 * 1024)
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None, default="INFO")

    config = build_config(args)
    app = create_app(config)

    LOGGER.info("Speed test server running on %s:%d", config.host, config.port)
    LOGGER.info("Available endpoints:\n%s", describe_routes())
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
