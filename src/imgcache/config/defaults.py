"""Package-level default configuration values."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

# Default storage locations
DEFAULT_CACHE_ROOT = Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")
DEFAULT_CACHE_DIR = DEFAULT_CACHE_ROOT / "imgcache"

# Default memory tier settings
DEFAULT_MEMORY_MB = 100.0

# Default network settings
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "imgcache/0.1"
DEFAULT_FOLLOW_REDIRECTS = True

# Default caller-side retry settings
DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_STRATEGY = "exponential"

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_dir": str(DEFAULT_CACHE_DIR),
        "memory_max_mb": DEFAULT_MEMORY_MB,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        "user_agent": DEFAULT_USER_AGENT,
        "follow_redirects": DEFAULT_FOLLOW_REDIRECTS,
        "max_retries": DEFAULT_MAX_RETRIES,
        "retry_strategy": DEFAULT_RETRY_STRATEGY,
        "log_level": DEFAULT_LOG_LEVEL,
    }
