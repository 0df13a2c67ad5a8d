"""
User configuration file support.

Reads/writes ``~/.http-speedtest/config.json``.  Values here become the
CLI defaults; explicit command-line flags always win.

Supported keys::

    server_url = ""          # endpoint used when no URL is given
    ping_count = 5
    download_size = 1000     # KB
    upload_size = 1000       # KB
    timeout = 120.0          # seconds per request
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from .constants import (
    DEFAULT_DOWNLOAD_KB,
    DEFAULT_PING_COUNT,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_KB,
)

LOGGER = logging.getLogger(__name__)

_CONFIG_DIR = os.path.join(Path.home(), ".http-speedtest")
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "server_url": "",
    "ping_count": DEFAULT_PING_COUNT,
    "download_size": DEFAULT_DOWNLOAD_KB,
    "upload_size": DEFAULT_UPLOAD_KB,
    "timeout": DEFAULT_TIMEOUT,
}


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Load config from disk, returning defaults for missing keys."""
    path = _config_path()
    config = dict(DEFAULTS)

    if not os.path.isfile(path):
        return config

    try:
        with open(path, encoding="utf-8") as fh:
            user = json.load(fh)
        if isinstance(user, dict):
            config.update(user)
    except (json.JSONDecodeError, IOError) as exc:
        LOGGER.warning("Ignoring unreadable config %s: %s", path, exc)

    return config


def save_config(config: Dict[str, Any]) -> str:
    """Write *config* to disk.  Returns the file path."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2, ensure_ascii=False)

    return path


def get_config_value(key: str) -> Any:
    """Get a single config value."""
    return load_config().get(key, DEFAULTS.get(key))


def set_config_value(key: str, value: Any) -> str:
    """Set a single config value and persist.  Returns file path."""
    config = load_config()
    config[key] = value
    return save_config(config)


def config_path() -> str:
    """Return the config file path (for display purposes)."""
    return _config_path()
